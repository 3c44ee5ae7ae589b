"""Run a registered mode pipeline against a text fragment."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import time
from collections.abc import Mapping
from pathlib import Path

from apertium_native.config import PipelineConfig
from apertium_native.exceptions import (
    ModeNotFoundError,
    PipelineExecutionError,
    PipelineTimeoutError,
    UnknownLanguageError,
)
from apertium_native.languages import PAIR_ARROW, pair_key
from apertium_native.models import Installation, OSTag, TranslationResult
from apertium_native.modes import ModeCatalog
from apertium_native.utils.subprocess import run_command

logger = logging.getLogger(__name__)


def build_invocation(command_line: str, os_tag: OSTag | str) -> str | list[str]:
    """Shell invocation for `command_line`.

    On win32 this is one command string: `/S` makes `cmd.exe` strip exactly
    the outer quote pair, leaving the pipeline's own double quotes intact.
    An argv list would be re-quoted by `list2cmdline` as `\\"`, which `cmd.exe`
    does not understand.
    """
    if OSTag(os_tag) is OSTag.WIN32:
        return f'cmd /D /Q /S /C "{command_line}"'
    return ["/bin/sh", "-c", command_line]


def build_environment(
    bin_dir: str | Path,
    *,
    locale: str = "en_US.UTF-8",
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Child environment with the toolchain's bin folder first on PATH."""
    env = dict(os.environ if base_env is None else base_env)
    bin_path = str(Path(bin_dir).resolve())
    env["PATH"] = bin_path + os.pathsep + env.get("PATH", "")
    env["LC_ALL"] = locale
    return env


def no_mode_message(key: str) -> str:
    return f"No such mode: {key}"


def describe_pair(source_language: str, target_language: str) -> str:
    """Pair key for messages; falls back to the raw codes when they do not normalize."""
    try:
        return pair_key(source_language, target_language)
    except UnknownLanguageError:
        return str(source_language).strip().lower() + PAIR_ARROW + str(target_language).strip().lower()


class PipelineExecutor:
    """Translate text by running the mode registered for a language pair.

    Each call spawns one child process; the executor holds no state besides
    the catalog it reads snapshots from.
    """

    def __init__(
        self,
        catalog: ModeCatalog,
        installation: Installation,
        config: PipelineConfig | None = None,
        *,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self.catalog = catalog
        self.installation = installation
        self.config = config or PipelineConfig()
        self._base_env = base_env

    def execute(self, source_language: str, target_language: str, text: str) -> TranslationResult:
        """Run the pipeline and return its raw outcome.

        Raises:
            ModeNotFoundError: No mode is registered for the pair.
            PipelineTimeoutError: The pipeline exceeded `timeout_s` and was killed.
            OSError: The shell could not be spawned or its pipes failed.
        """
        key = pair_key(source_language, target_language)
        mode = self.catalog.snapshot.get(key)
        if mode is None:
            raise ModeNotFoundError(key)

        args = build_invocation(mode.command_line, self.installation.profile.os)
        env = build_environment(
            self.installation.bin_dir,
            locale=self.config.locale,
            base_env=self._base_env,
        )
        timeout_s = self.config.timeout_s

        started = time.monotonic()
        try:
            run = run_command(
                args,
                input_bytes=text.encode("utf-8"),
                env=env,
                timeout_s=timeout_s,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("pipeline %s timed out after %ss", key, timeout_s)
            stderr = (exc.stderr or b"").decode("utf-8", errors="replace")
            raise PipelineTimeoutError(
                key, f"timed out after {timeout_s}s", stderr=stderr
            ) from exc

        elapsed_ms = int((time.monotonic() - started) * 1000)
        if run.returncode != 0:
            logger.warning("pipeline %s exited with code %d (%dms)", key, run.returncode, elapsed_ms)
        else:
            logger.debug("pipeline %s done (%dms, %d bytes)", key, elapsed_ms, len(run.stdout))

        return TranslationResult(
            pair_key=key,
            returncode=run.returncode,
            stdout=run.stdout,
            stderr=run.stderr,
        )

    def translate(self, source_language: str, target_language: str, text: str) -> str:
        """Translate `text`; a missing pair yields a "No such mode" message instead of raising.

        With `legacy_output` the pipeline's stderr is appended to the result
        and the exit status is ignored. Otherwise only stdout is returned and
        a non-zero exit raises PipelineExecutionError.
        """
        try:
            result = self.execute(source_language, target_language, text)
        except ModeNotFoundError as exc:
            return no_mode_message(exc.pair_key)
        except UnknownLanguageError:
            return no_mode_message(describe_pair(source_language, target_language))

        if self.config.legacy_output:
            return result.combined
        if not result.ok:
            raise PipelineExecutionError(
                result.pair_key,
                f"pipeline exited with code {result.returncode}",
                returncode=result.returncode,
                stderr=result.error_text,
            )
        return result.text

    async def aexecute(self, source_language: str, target_language: str, text: str) -> TranslationResult:
        return await asyncio.to_thread(self.execute, source_language, target_language, text)

    async def atranslate(self, source_language: str, target_language: str, text: str) -> str:
        return await asyncio.to_thread(self.translate, source_language, target_language, text)
