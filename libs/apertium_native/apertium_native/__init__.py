"""Run a local Apertium installation's language-pair pipelines."""

from apertium_native.config import Settings
from apertium_native.exceptions import (
    ApertiumNativeError,
    ConfigurationError,
    ModeNotFoundError,
    PipelineExecutionError,
    PipelineTimeoutError,
    SetupError,
    UnknownLanguageError,
)
from apertium_native.executor import PipelineExecutor
from apertium_native.languages import normalize_language, pair_key, to_iso1
from apertium_native.models import (
    Installation,
    Mode,
    OSTag,
    PackageManager,
    PlatformProfile,
    TranslationResult,
)
from apertium_native.modes import ModeCatalog, ModeRegistry, scan_modes
from apertium_native.service import ApertiumNative
from apertium_native.settings_store import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
)

__all__ = [
    "ApertiumNative",
    "ApertiumNativeError",
    "ConfigurationError",
    "InMemorySettingsStore",
    "Installation",
    "JsonFileSettingsStore",
    "Mode",
    "ModeCatalog",
    "ModeNotFoundError",
    "ModeRegistry",
    "OSTag",
    "PackageManager",
    "PipelineExecutionError",
    "PipelineExecutor",
    "PipelineTimeoutError",
    "PlatformProfile",
    "SettingsStore",
    "Settings",
    "SetupError",
    "TranslationResult",
    "UnknownLanguageError",
    "normalize_language",
    "pair_key",
    "scan_modes",
    "to_iso1",
]
