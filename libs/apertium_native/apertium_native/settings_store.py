"""Key-value store for the host-owned settings (`root`, `os`, `pkg`)."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

KEY_ROOT = "root"
KEY_OS = "os"
KEY_PKG = "pkg"


class SettingsStore(ABC):
    @abstractmethod
    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the stored string for `key`, or `default`."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store `value` under `key`."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete `key`; missing keys are ignored."""


class InMemorySettingsStore(SettingsStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def put(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)


class JsonFileSettingsStore(SettingsStore):
    """Settings persisted as a flat JSON object.

    Every write rewrites the whole file through a temporary sibling and
    `os.replace`, so readers never see a half-written file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(raw, dict):
            raise ValueError(f"settings file is not a JSON object: {self.path}")
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".settings-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._load().get(key, default)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            values = self._load()
            values[key] = str(value)
            self._save(values)

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._load()
            if key in values:
                del values[key]
                self._save(values)
