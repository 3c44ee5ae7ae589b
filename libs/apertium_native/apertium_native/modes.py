"""Mode discovery: turn Apertium `.mode` files into runnable shell pipelines.

A `.mode` file holds a shell pipeline template written for a system-wide
install (`/usr/share/apertium/...`). Each template goes through a fixed
chain of text transforms before it is registered:

    substitute_placeholders -> quote_resource_paths -> relocate_resource_paths
        -> normalize_platform_syntax -> wrap_html_filters

Every step is a pure function over strings.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from collections.abc import Iterator, Mapping
from pathlib import Path

from apertium_native.exceptions import UnknownLanguageError
from apertium_native.languages import normalize_language, pair_key
from apertium_native.models import Installation, Mode

logger = logging.getLogger(__name__)

MODE_SUFFIX = ".mode"
TRANSFER_MARKER = "apertium-transfer"
SYSTEM_PREFIX = "/usr/share"
DEBUG_FLAG = "-n"
PRE_FILTER = "apertium-deshtml"
POST_FILTER = "apertium-rehtml-noent"

_UNQUOTED_RESOURCE_RE = re.compile(r"(\s*)(" + re.escape(SYSTEM_PREFIX) + r"/\S+)(\s*)")


def is_mode_filename(name: str) -> bool:
    """True for `<src>-<tgt>.mode` where both codes have 2 or 3 characters.

    Locale and script variants (`nob-nno_e.mode`, `zh-Hans-en.mode`) are not
    supported and are rejected.
    """
    if not name.endswith(MODE_SUFFIX):
        return False
    parts = name[: -len(MODE_SUFFIX)].split("-")
    return len(parts) == 2 and all(len(p) in (2, 3) for p in parts)


def split_mode_filename(name: str) -> tuple[str, str]:
    if not is_mode_filename(name):
        raise ValueError(f"not a language-pair mode file: {name!r}")
    src, tgt = name[: -len(MODE_SUFFIX)].split("-")
    return src, tgt


def substitute_placeholders(template: str) -> str:
    return template.replace("$1", DEBUG_FLAG).replace("$2", "").strip()


def quote_resource_paths(template: str) -> str:
    """Double-quote bare `/usr/share/...` arguments unless the template quotes them itself."""
    if f"'{SYSTEM_PREFIX}" in template or f'"{SYSTEM_PREFIX}' in template:
        return template
    return _UNQUOTED_RESOURCE_RE.sub(r'\1"\2"\3', template)


def relocate_resource_paths(template: str, pipeline_root: str | Path) -> str:
    return template.replace(SYSTEM_PREFIX, str(pipeline_root) + SYSTEM_PREFIX)


def normalize_platform_syntax(template: str, sep: str = os.sep) -> str:
    return template.replace("/", sep).replace("'", '"')


def wrap_html_filters(pipeline: str) -> str:
    return f"{PRE_FILTER} | {pipeline} | {POST_FILTER}"


def build_command_line(template: str, pipeline_root: str | Path, *, sep: str = os.sep) -> str:
    """Rewrite a raw mode template into a command line for the managed install."""
    cmd = substitute_placeholders(template)
    cmd = quote_resource_paths(cmd)
    cmd = relocate_resource_paths(cmd, pipeline_root)
    cmd = normalize_platform_syntax(cmd, sep)
    return wrap_html_filters(cmd)


class ModeRegistry(Mapping[str, Mode]):
    """Read-only mapping of pair key to Mode."""

    def __init__(self, modes: Mapping[str, Mode] | None = None) -> None:
        self._modes: dict[str, Mode] = dict(modes or {})

    def __getitem__(self, key: str) -> Mode:
        return self._modes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modes)

    def __len__(self) -> int:
        return len(self._modes)

    def __repr__(self) -> str:
        return f"ModeRegistry({sorted(self._modes)!r})"

    def pairs(self) -> list[str]:
        return sorted(self._modes)


def list_mode_candidates(modes_dir: Path) -> list[str]:
    """Names in `modes_dir` that look like language-pair mode files, sorted."""
    return sorted(name for name in os.listdir(modes_dir) if is_mode_filename(name))


def _load_mode(path: Path, pipeline_root: Path, sep: str) -> Mode | None:
    try:
        template = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("skip unreadable mode file %s: %s", path, exc)
        return None
    if TRANSFER_MARKER not in template:
        logger.debug("skip %s: no %s stage", path.name, TRANSFER_MARKER)
        return None

    src, tgt = split_mode_filename(path.name)
    try:
        key = pair_key(src, tgt)
    except UnknownLanguageError as exc:
        logger.warning("skip %s: %s", path.name, exc)
        return None

    return Mode(
        source_language=normalize_language(src),
        target_language=normalize_language(tgt),
        pair_key=key,
        command_line=build_command_line(template, pipeline_root, sep=sep),
        path=path,
    )


def scan_modes(
    modes_dir: str | Path,
    pipeline_root: str | Path,
    *,
    sep: str = os.sep,
) -> ModeRegistry:
    """Build a fresh registry from the `.mode` files in `modes_dir`.

    A missing or unlistable folder yields an empty registry. When two files
    map to the same pair key, the one listed later wins.
    """
    mdir = Path(modes_dir)
    if not mdir.is_dir():
        logger.info("Modes folder did not exist: %s", mdir)
        return ModeRegistry()
    try:
        candidates = list_mode_candidates(mdir)
    except OSError as exc:
        logger.warning("Modes folder could not be listed: %s (%s)", mdir, exc)
        return ModeRegistry()

    logger.info("Found possible modes: %s", "\t".join(candidates))
    found: dict[str, Mode] = {}
    for name in candidates:
        mode = _load_mode(mdir / name, Path(pipeline_root), sep)
        if mode is None:
            continue
        if mode.pair_key in found:
            logger.info("Mode %s from %s replaces %s", mode.pair_key, name, found[mode.pair_key].path)
        logger.info("Mode %s: %s", mode.pair_key, mode.command_line)
        found[mode.pair_key] = mode
    return ModeRegistry(found)


class ModeCatalog:
    """Holds the current registry snapshot.

    `refresh()` builds a complete new registry before swapping it in, so
    readers only ever see a finished snapshot.
    """

    def __init__(self, registry: ModeRegistry | None = None) -> None:
        self._registry = registry if registry is not None else ModeRegistry()
        self._refresh_lock = threading.Lock()

    @property
    def snapshot(self) -> ModeRegistry:
        return self._registry

    def refresh(self, installation: Installation) -> ModeRegistry:
        with self._refresh_lock:
            registry = scan_modes(
                installation.modes_dir,
                installation.pipeline_root,
                sep=installation.profile.path_separator,
            )
            self._registry = registry
        return registry

    def clear(self) -> None:
        with self._refresh_lock:
            self._registry = ModeRegistry()
