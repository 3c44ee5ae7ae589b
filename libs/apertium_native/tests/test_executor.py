from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

from apertium_native.config import PipelineConfig
from apertium_native.exceptions import (
    ModeNotFoundError,
    PipelineExecutionError,
    PipelineTimeoutError,
    UnknownLanguageError,
)
from apertium_native.executor import PipelineExecutor, build_environment, build_invocation
from apertium_native.models import Installation, Mode, OSTag, PackageManager, PlatformProfile
from apertium_native.modes import ModeCatalog, ModeRegistry, build_command_line

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")


def _installation(root: Path, os_tag: OSTag = OSTag.APT) -> Installation:
    return Installation(
        root=root,
        build_type="nightly",
        profile=PlatformProfile(os_tag, PackageManager.NOT_APPLICABLE),
    )


def _executor(
    tmp_path: Path,
    command_line: str,
    *,
    os_tag: OSTag = OSTag.APT,
    **config: object,
) -> PipelineExecutor:
    mode = Mode(
        source_language="eng",
        target_language="spa",
        pair_key="eng → spa",
        command_line=command_line,
    )
    catalog = ModeCatalog(ModeRegistry({mode.pair_key: mode}))
    cfg = PipelineConfig(**{"locale": "C", "timeout_s": 30.0, **config})
    return PipelineExecutor(catalog, _installation(tmp_path, os_tag), cfg)


def test_build_invocation_posix() -> None:
    assert build_invocation("a | b", OSTag.APT) == ["/bin/sh", "-c", "a | b"]
    assert build_invocation("a | b", "osx") == ["/bin/sh", "-c", "a | b"]


def test_build_invocation_windows_keeps_pipeline_quotes() -> None:
    command_line = build_command_line(
        "lt-proc $1 /usr/share/apertium/a.bin | apertium-transfer x",
        "C:\\d\\nightly",
        sep="\\",
    )
    invocation = build_invocation(command_line, OSTag.WIN32)
    assert invocation == (
        'cmd /D /Q /S /C "apertium-deshtml | lt-proc -n "C:\\d\\nightly\\usr\\share\\apertium\\a.bin" '
        '| apertium-transfer x | apertium-rehtml-noent"'
    )
    # A plain string reaches CreateProcess as-is; no backslash-escaped quotes.
    assert isinstance(invocation, str)
    assert '\\"' not in invocation


def test_build_environment_prefixes_path_and_forces_locale(tmp_path) -> None:
    env = build_environment(tmp_path / "bin", base_env={"PATH": "/usr/bin", "HOME": "/home/u", "LC_ALL": "de_DE"})
    assert env["PATH"] == str((tmp_path / "bin").resolve()) + os.pathsep + "/usr/bin"
    assert env["LC_ALL"] == "en_US.UTF-8"
    assert env["HOME"] == "/home/u"


def test_build_environment_does_not_touch_base(tmp_path) -> None:
    base = {"PATH": "/usr/bin"}
    build_environment(tmp_path, locale="C", base_env=base)
    assert base == {"PATH": "/usr/bin"}


def test_translate_missing_pair_returns_message(tmp_path) -> None:
    executor = _executor(tmp_path, "cat")
    assert executor.translate("en", "fr", "hello") == "No such mode: eng → fra"
    assert executor.translate("xx", "YY", "hello") == "No such mode: xx → yy"


def test_execute_missing_pair_raises(tmp_path) -> None:
    executor = _executor(tmp_path, "cat")
    with pytest.raises(ModeNotFoundError) as excinfo:
        executor.execute("en", "fr", "hello")
    assert excinfo.value.pair_key == "eng → fra"
    with pytest.raises(UnknownLanguageError):
        executor.execute("xx", "es", "hello")


@posix_only
def test_execute_streams_text_through_pipeline(tmp_path) -> None:
    executor = _executor(tmp_path, "tr a-z A-Z")
    result = executor.execute("en", "es", "hello")
    assert result.ok
    assert result.pair_key == "eng → spa"
    assert result.text == "HELLO"


@posix_only
def test_execute_round_trips_utf8(tmp_path) -> None:
    executor = _executor(tmp_path, "cat")
    assert executor.translate("eng", "spa", "¿Qué tal? → ñ") == "¿Qué tal? → ñ"


@posix_only
def test_legacy_translate_appends_stderr_and_ignores_exit(tmp_path) -> None:
    executor = _executor(tmp_path, "cat; echo oops >&2; exit 2")
    assert executor.translate("en", "es", "hi\n") == "hi\noops\n"


@posix_only
def test_strict_translate_raises_on_failure(tmp_path) -> None:
    executor = _executor(tmp_path, "cat >/dev/null; echo bad >&2; exit 3", legacy_output=False)
    with pytest.raises(PipelineExecutionError) as excinfo:
        executor.translate("en", "es", "hi")
    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "bad\n"


@posix_only
def test_strict_translate_returns_stdout_only(tmp_path) -> None:
    executor = _executor(tmp_path, "cat; echo noise >&2", legacy_output=False)
    assert executor.translate("en", "es", "hi") == "hi"


@posix_only
def test_execute_sets_child_environment(tmp_path) -> None:
    executor = _executor(tmp_path, 'printf "%s|%s" "$LC_ALL" "${PATH%%:*}"')
    result = executor.execute("en", "es", "")
    bin_dir = str((tmp_path / "nightly" / "apertium-all-dev" / "bin").resolve())
    assert result.text == f"C|{bin_dir}"


@posix_only
def test_execute_timeout_raises(tmp_path) -> None:
    executor = _executor(tmp_path, "exec sleep 10", timeout_s=0.2)
    with pytest.raises(PipelineTimeoutError) as excinfo:
        executor.execute("en", "es", "hi")
    assert excinfo.value.pair_key == "eng → spa"


@posix_only
def test_execute_spawn_failure_propagates_oserror(tmp_path) -> None:
    # "cmd" does not exist on POSIX hosts
    executor = _executor(tmp_path, "cat", os_tag=OSTag.WIN32)
    with pytest.raises(OSError):
        executor.execute("en", "es", "hi")


@posix_only
@pytest.mark.asyncio
async def test_atranslate_runs_off_thread(tmp_path) -> None:
    executor = _executor(tmp_path, "tr a-z A-Z")
    assert await executor.atranslate("en", "es", "async") == "ASYNC"
    result = await executor.aexecute("en", "es", "x")
    assert result.text == "X"


def _is_running(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    stat_file = Path(f"/proc/{pid}/stat")
    if stat_file.exists():
        # zombie waiting to be reaped
        return stat_file.read_text().rsplit(")", 1)[-1].split()[0] != "Z"
    return True


@posix_only
def test_execute_timeout_kills_every_pipeline_stage(tmp_path) -> None:
    pid_file = tmp_path / "stage.pid"
    executor = _executor(
        tmp_path,
        f"sh -c 'echo $$ > {pid_file}; exec sleep 30' | cat",
        timeout_s=0.5,
    )
    started = time.monotonic()
    with pytest.raises(PipelineTimeoutError):
        executor.execute("en", "es", "hi")
    assert time.monotonic() - started < 10

    stage_pid = int(pid_file.read_text().strip())
    deadline = time.monotonic() + 5
    while _is_running(stage_pid) and time.monotonic() < deadline:
        time.sleep(0.05)
    assert not _is_running(stage_pid)
