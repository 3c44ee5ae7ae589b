from __future__ import annotations

import argparse
import logging

from apertium_native.config import Settings
from apertium_native.exceptions import ApertiumNativeError
from apertium_native.service import ApertiumNative
from apertium_native.settings_store import JsonFileSettingsStore
from apertium_native.utils.logging_setup import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set up the Apertium data folder and list installed modes.")
    parser.add_argument("--settings-file", default=None, help="JSON settings store (defaults to SETTINGS_FILE)")
    parser.add_argument("--build-type", default=None, help="Toolchain build tag, e.g. nightly/release")
    parser.add_argument("--commands", action="store_true", help="Also print each mode's command line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log discovery details")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    overrides: dict[str, str] = {}
    if args.settings_file:
        overrides["settings_file"] = str(args.settings_file)
    settings = Settings(**overrides)
    if args.build_type:
        settings.toolchain.build_type = str(args.build_type)
    if args.verbose:
        settings.logging.level = "DEBUG"
    setup_logging(settings)

    service = ApertiumNative(JsonFileSettingsStore(settings.settings_file), settings)
    try:
        registry = service.initialize()
    except ApertiumNativeError as exc:
        logging.getLogger("apertium_native.scripts").error("setup failed: %s", exc)
        print(f"error [{exc.error_code.value}]: {exc}")
        return 1

    if not registry:
        print(f"No modes found in {service.installation.modes_dir}")
        return 0
    for key in registry.pairs():
        if args.commands:
            print(f"{key}\t{registry[key].command_line}")
        else:
            print(key)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
