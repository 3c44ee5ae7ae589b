import subprocess
import sys

import pytest

from apertium_native.utils.subprocess import run_command

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")


def test_run_command_executes_command() -> None:
    result = run_command(["/bin/sh", "-c", "printf hi"])
    assert result.returncode == 0
    assert result.stdout == b"hi"
    assert result.stderr == b""


def test_run_command_feeds_stdin_and_keeps_streams_apart() -> None:
    result = run_command(["/bin/sh", "-c", "cat; echo oops >&2; exit 4"], input_bytes=b"abc")
    assert result.returncode == 4
    assert result.stdout == b"abc"
    assert result.stderr == b"oops\n"


def test_run_command_large_output_does_not_deadlock() -> None:
    payload = b"x" * (4 * 1024 * 1024)
    result = run_command(["/bin/sh", "-c", "cat; cat >&2 </dev/null"], input_bytes=payload, timeout_s=30)
    assert result.stdout == payload


def test_run_command_timeout_kills_child() -> None:
    with pytest.raises(subprocess.TimeoutExpired):
        run_command(["/bin/sh", "-c", "exec sleep 10"], timeout_s=0.2)


def test_run_command_spawn_failure_is_oserror(tmp_path) -> None:
    with pytest.raises(OSError):
        run_command([str(tmp_path / "missing-binary")])


def test_run_command_check_raises_on_failure() -> None:
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        run_command(["/bin/sh", "-c", "echo bad >&2; exit 5"], check=True)
    assert excinfo.value.returncode == 5
    assert excinfo.value.stderr == b"bad\n"


def test_run_command_timeout_keeps_partial_output() -> None:
    with pytest.raises(subprocess.TimeoutExpired) as excinfo:
        run_command(["/bin/sh", "-c", "echo started; sleep 10 | cat"], timeout_s=0.5)
    assert excinfo.value.output == b"started\n"
