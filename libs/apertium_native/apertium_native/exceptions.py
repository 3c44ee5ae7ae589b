"""apertium-native exception hierarchy."""

from __future__ import annotations

from apertium_native.error_codes import ErrorCode


class ApertiumNativeError(Exception):
    """Base error for apertium-native."""

    error_code: ErrorCode = ErrorCode.UNKNOWN


class ConfigurationError(ApertiumNativeError):
    """Raised when configuration or inputs are invalid."""

    error_code = ErrorCode.INVALID_CONFIG


class UnknownLanguageError(ConfigurationError):
    """Raised when a language code cannot be normalized to ISO 639-2."""

    error_code = ErrorCode.UNKNOWN_LANGUAGE

    def __init__(self, code: str) -> None:
        super().__init__(f"unknown language code: {code!r}")
        self.code = code


class SetupError(ApertiumNativeError):
    """Raised when the data folder cannot be prepared."""

    error_code = ErrorCode.SETUP_FAILED

    def __init__(self, title: str, message: str) -> None:
        super().__init__(f"{title}: {message}")
        self.title = title
        self.message = message


class ModeNotFoundError(ApertiumNativeError):
    """Raised when no mode is registered for a language pair."""

    error_code = ErrorCode.MODE_NOT_FOUND

    def __init__(self, pair_key: str) -> None:
        super().__init__(f"No such mode: {pair_key}")
        self.pair_key = pair_key


class PipelineExecutionError(ApertiumNativeError):
    """Raised when a mode pipeline exits unsuccessfully."""

    error_code = ErrorCode.PIPELINE_FAILED

    def __init__(
        self,
        pair_key: str,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(f"{pair_key}: {message}")
        self.pair_key = pair_key
        self.message = message
        self.returncode = returncode
        self.stderr = stderr


class PipelineTimeoutError(PipelineExecutionError):
    """Raised when a mode pipeline does not finish within the configured timeout."""

    error_code = ErrorCode.PIPELINE_TIMEOUT
