from __future__ import annotations

import argparse
import sys

from apertium_native.config import Settings
from apertium_native.exceptions import ApertiumNativeError
from apertium_native.service import ApertiumNative
from apertium_native.settings_store import JsonFileSettingsStore
from apertium_native.utils.logging_setup import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Translate text with a locally installed Apertium mode.")
    parser.add_argument("--source-language", required=True, help="Source language code, e.g. en or eng")
    parser.add_argument("--target-language", required=True, help="Target language code, e.g. es or spa")
    parser.add_argument("--text", default=None, help="Text to translate (defaults to stdin)")
    parser.add_argument("--settings-file", default=None, help="JSON settings store (defaults to SETTINGS_FILE)")
    parser.add_argument("--timeout-s", type=float, default=None, help="Kill the pipeline after N seconds")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Print stdout only and fail on a non-zero pipeline exit",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    overrides: dict[str, str] = {}
    if args.settings_file:
        overrides["settings_file"] = str(args.settings_file)
    settings = Settings(**overrides)
    if args.timeout_s is not None:
        settings.pipeline.timeout_s = float(args.timeout_s)
    if args.strict:
        settings.pipeline.legacy_output = False
    setup_logging(settings)

    text = args.text if args.text is not None else sys.stdin.read()
    service = ApertiumNative(JsonFileSettingsStore(settings.settings_file), settings)
    try:
        service.initialize()
        out = service.translate(args.source_language, args.target_language, text)
    except ApertiumNativeError as exc:
        print(f"error [{exc.error_code.value}]: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
