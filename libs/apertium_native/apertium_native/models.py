"""Core data models for apertium-native."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OSTag(str, Enum):
    WIN32 = "win32"
    OSX = "osx"
    APT = "apt"
    RPM = "rpm"
    UNKNOWN = "unknown"


class PackageManager(str, Enum):
    APT_GET = "apt-get"
    DNF = "dnf"
    ZYPPER = "zypper"
    YUM = "yum"
    NOT_APPLICABLE = "n/a"


@dataclass(frozen=True)
class PlatformProfile:
    os: OSTag
    package_manager: PackageManager

    @property
    def is_windows(self) -> bool:
        return self.os is OSTag.WIN32

    @property
    def path_separator(self) -> str:
        return "\\" if self.is_windows else "/"


@dataclass(frozen=True)
class Installation:
    """A managed toolchain tree under `root` for one build type."""

    root: Path
    build_type: str
    profile: PlatformProfile
    modes_subpath: str = "usr/share/apertium/modes"
    bin_subpath: str = "apertium-all-dev/bin"

    @property
    def pipeline_root(self) -> Path:
        return self.root / self.build_type

    @property
    def modes_dir(self) -> Path:
        return self.pipeline_root / self.modes_subpath

    @property
    def bin_dir(self) -> Path:
        return self.pipeline_root / self.bin_subpath


@dataclass(frozen=True)
class Mode:
    """One language-pair pipeline discovered in the modes folder."""

    source_language: str
    target_language: str
    pair_key: str
    command_line: str
    path: Path | None = None


@dataclass(frozen=True)
class TranslationResult:
    pair_key: str
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def error_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")

    @property
    def combined(self) -> str:
        """stdout followed by stderr, as one string."""
        return (self.stdout + self.stderr).decode("utf-8", errors="replace")
