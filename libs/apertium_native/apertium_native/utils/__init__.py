"""Utility helpers."""

from apertium_native.utils.subprocess import RunResult, run_command

__all__ = [
    "RunResult",
    "run_command",
]
