"""Setup step: resolve the data folder and detect the host platform.

The results are written to the settings store under `root`, `os` and `pkg`
and are read back by `load_installation()` for the rest of the session.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from pathlib import Path

from apertium_native.config import Settings
from apertium_native.exceptions import SetupError
from apertium_native.models import Installation, OSTag, PackageManager, PlatformProfile
from apertium_native.settings_store import KEY_OS, KEY_PKG, KEY_ROOT, SettingsStore

logger = logging.getLogger(__name__)


def detect_os_tag(system: str) -> OSTag:
    """Map a `platform.system()` style name to the coarse OS tag.

    Linux is refined later from os-release; here it starts as rpm.
    """
    name = str(system or "")
    if name.startswith("Windows"):
        return OSTag.WIN32
    if name.startswith("Mac") or name == "Darwin":
        return OSTag.OSX
    if name.startswith("Linux"):
        return OSTag.RPM
    return OSTag.UNKNOWN


def detect_linux_profile(os_release: str) -> PlatformProfile:
    """Pick the package manager from os-release content.

    Defaults to yum, which covers RHEL, CentOS and derivatives.
    """
    text = os_release or ""
    if "Debian" in text or "Ubuntu" in text or "debian" in text or "ubuntu" in text:
        return PlatformProfile(OSTag.APT, PackageManager.APT_GET)
    if "Fedora" in text:
        return PlatformProfile(OSTag.RPM, PackageManager.DNF)
    if "OpenSUSE" in text:
        return PlatformProfile(OSTag.RPM, PackageManager.ZYPPER)
    return PlatformProfile(OSTag.RPM, PackageManager.YUM)


def read_os_release(path: str | Path) -> str:
    p = Path(path)
    if not p.is_file() or not os.access(p, os.R_OK):
        return ""
    try:
        return p.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.error("failed to read %s: %s", p, exc)
        return ""


def detect_platform(
    system: str | None = None,
    *,
    os_release_path: str | Path = "/etc/os-release",
) -> PlatformProfile:
    tag = detect_os_tag(platform.system() if system is None else system)
    match tag:
        case OSTag.RPM:
            return detect_linux_profile(read_os_release(os_release_path))
        case _:
            # Package managers only matter on Linux
            return PlatformProfile(tag, PackageManager.NOT_APPLICABLE)


def resolve_data_home(
    os_tag: OSTag,
    environ: Mapping[str, str],
    home: str | Path,
) -> Path:
    value = environ.get("XDG_DATA_HOME")
    if os_tag is OSTag.WIN32:
        value = environ.get("APPDATA")
    if not value:
        value = environ.get("XDG_CONFIG_HOME")
    if not value:
        return Path(home) / ".local" / "share"
    return Path(value)


def prepare_data_root(data_home: Path, folder_name: str) -> Path:
    root = data_home / folder_name
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("cannot create data folder %s: %s", root, exc)
        raise SetupError(
            "Missing Data Folder", f"{data_home} did not exist and could not be created"
        ) from exc
    if not os.access(root, os.W_OK):
        logger.error("data folder is not writable: %s", root)
        raise SetupError("Invalid Data Folder", f"{data_home} is not writable")
    return root


def run_setup(
    store: SettingsStore,
    settings: Settings,
    *,
    system: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: str | Path | None = None,
) -> Installation:
    """Clear and rewrite `root`, `os` and `pkg` in `store`.

    Raises:
        SetupError: The data folder is missing, cannot be created or is
            not writable. Nothing is written to the store in that case.
    """
    for key in (KEY_ROOT, KEY_PKG, KEY_OS):
        store.remove(key)

    cfg = settings.toolchain
    env = os.environ if environ is None else environ
    system_name = platform.system() if system is None else system
    profile = detect_platform(system_name, os_release_path=cfg.os_release_path)

    if cfg.data_home:
        data_home = Path(cfg.data_home).expanduser()
    else:
        data_home = resolve_data_home(profile.os, env, Path.home() if home is None else home)
    root = prepare_data_root(data_home, cfg.data_folder_name)

    logger.info("Set root path to: %s", root)
    store.put(KEY_ROOT, str(root))

    logger.info("Set package manager to: %s", profile.package_manager.value)
    store.put(KEY_PKG, profile.package_manager.value)

    logger.info("Set OS to: %s", profile.os.value)
    store.put(KEY_OS, profile.os.value)

    return Installation(
        root=root,
        build_type=cfg.build_type,
        profile=profile,
        modes_subpath=cfg.modes_subpath,
        bin_subpath=cfg.bin_subpath,
    )


def load_installation(store: SettingsStore, settings: Settings) -> Installation:
    """Rebuild the Installation recorded by a previous `run_setup()`."""
    root = store.get(KEY_ROOT)
    if not root:
        raise SetupError("Missing Data Folder", "setup has not been run (no root configured)")
    try:
        os_tag = OSTag(store.get(KEY_OS) or OSTag.WIN32.value)
        pkg = PackageManager(store.get(KEY_PKG) or PackageManager.NOT_APPLICABLE.value)
    except ValueError as exc:
        raise SetupError("Invalid Settings", str(exc)) from exc

    cfg = settings.toolchain
    return Installation(
        root=Path(root),
        build_type=cfg.build_type,
        profile=PlatformProfile(os_tag, pkg),
        modes_subpath=cfg.modes_subpath,
        bin_subpath=cfg.bin_subpath,
    )
