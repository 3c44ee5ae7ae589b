"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apertium_native.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")


class ToolchainConfig(BaseSettings):
    """Where the Apertium toolchain lives and how its tree is laid out."""

    model_config = SettingsConfigDict(
        env_prefix="APERTIUM_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    build_type: str = "nightly"
    data_folder_name: str = "apertium-omegat-native"
    # Overrides APPDATA / XDG_DATA_HOME / XDG_CONFIG_HOME resolution when set.
    data_home: str | None = None
    modes_subpath: str = "usr/share/apertium/modes"
    bin_subpath: str = "apertium-all-dev/bin"
    os_release_path: str = "/etc/os-release"

    @model_validator(mode="after")
    def _validate_layout(self) -> "ToolchainConfig":
        if not str(self.build_type or "").strip():
            raise ConfigurationError("APERTIUM_BUILD_TYPE must not be empty")
        if not str(self.data_folder_name or "").strip():
            raise ConfigurationError("APERTIUM_DATA_FOLDER_NAME must not be empty")
        for name in ("modes_subpath", "bin_subpath"):
            if Path(str(getattr(self, name))).is_absolute():
                raise ConfigurationError(f"APERTIUM_{name.upper()} must be a relative path")
        return self


class PipelineConfig(BaseSettings):
    """Subprocess execution of mode pipelines."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    locale: str = "en_US.UTF-8"
    timeout_s: float | None = Field(
        default=300.0,
        description="Kill the pipeline after this many seconds (unset = wait forever).",
    )
    legacy_output: bool = Field(
        default=True,
        description="translate() returns stdout+stderr and ignores the exit status.",
    )

    @model_validator(mode="after")
    def _validate_timeout(self) -> "PipelineConfig":
        if self.timeout_s is not None and float(self.timeout_s) <= 0:
            raise ConfigurationError("PIPELINE_TIMEOUT_S must be > 0 (or unset)")
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    # Relative names land in Settings.log_dir, else <data root>/logs.
    file: str | None = None
    # Per-area overrides for apertium_native.modes and apertium_native.executor.
    discovery_level: str | None = None
    execution_level: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    # JSON file backing the root/os/pkg settings store.
    settings_file: str = "~/.config/apertium-native/settings.json"
    log_dir: str | None = None

    toolchain: ToolchainConfig = ToolchainConfig()
    pipeline: PipelineConfig = PipelineConfig()
    logging: LoggingSettings = LoggingSettings()

    @property
    def plugin_name(self) -> str:
        return f"Apertium Native ({self.toolchain.build_type})"

    def model_post_init(self, __context: Any) -> None:
        self.settings_file = str(Path(self.settings_file).expanduser())
        if self.log_dir:
            self.log_dir = str(Path(self.log_dir).expanduser().resolve())
