"""Canonical error codes surfaced to CLI output and host integrations."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_CONFIG = "INVALID_CONFIG"
    UNKNOWN_LANGUAGE = "UNKNOWN_LANGUAGE"

    SETUP_FAILED = "SETUP_FAILED"
    MODE_NOT_FOUND = "MODE_NOT_FOUND"
    PIPELINE_FAILED = "PIPELINE_FAILED"
    PIPELINE_TIMEOUT = "PIPELINE_TIMEOUT"
