"""Logging initialization for discovery and pipeline events.

Mode discovery (`apertium_native.modes`) and pipeline runs
(`apertium_native.executor`) can be tuned separately, e.g. to keep the
per-mode command lines at DEBUG while still seeing pipeline failures.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from logging.handlers import RotatingFileHandler
from pathlib import Path

from apertium_native.config import Settings
from apertium_native.installation import detect_os_tag, resolve_data_home

ROOT_LOGGER = "apertium_native"
DISCOVERY_LOGGER = "apertium_native.modes"
EXECUTION_LOGGER = "apertium_native.executor"


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, str(name).upper(), default)


def resolve_log_dir(
    settings: Settings,
    *,
    system: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: str | Path | None = None,
) -> Path:
    """`Settings.log_dir`, or `logs/` inside the data root setup will use."""
    if settings.log_dir:
        return Path(settings.log_dir)
    cfg = settings.toolchain
    if cfg.data_home:
        data_home = Path(cfg.data_home).expanduser()
    else:
        data_home = resolve_data_home(
            detect_os_tag(platform.system() if system is None else system),
            os.environ if environ is None else environ,
            Path.home() if home is None else home,
        )
    return data_home / cfg.data_folder_name / "logs"


def setup_logging(
    settings: Settings,
    *,
    system: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: str | Path | None = None,
) -> None:
    """Configure the `apertium_native` logger tree once per process.

    Host loggers are left alone. `system`, `environ` and `home` only matter
    for locating the default log folder (see `resolve_log_dir()`).
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if getattr(logger, "_apertium_native_configured", False):
        return

    cfg = settings.logging
    level = _level(cfg.level, logging.INFO)
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))

    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        file_path = Path(str(cfg.file)).expanduser()
        if not file_path.is_absolute():
            file_path = resolve_log_dir(settings, system=system, environ=environ, home=home) / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        )
    for handler in handlers:
        # Levels are set on the loggers; discovery/execution may be more verbose than the root.
        handler.setLevel(logging.NOTSET)
        handler.setFormatter(formatter)

    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    logging.getLogger(DISCOVERY_LOGGER).setLevel(_level(cfg.discovery_level, logging.NOTSET))
    logging.getLogger(EXECUTION_LOGGER).setLevel(_level(cfg.execution_level, logging.NOTSET))
    setattr(logger, "_apertium_native_configured", True)
