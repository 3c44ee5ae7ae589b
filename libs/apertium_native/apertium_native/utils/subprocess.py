"""Subprocess helper for feeding text through external pipelines.

`communicate()` writes stdin and drains stdout/stderr concurrently, so a
pipeline that emits a lot of output before consuming all of its input cannot
deadlock on a full pipe buffer. Async callers run it via `asyncio.to_thread()`.

The child is started in its own process group (session on POSIX). A mode is a
shell pipeline, so on timeout the whole group is killed, not just the shell.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes


def _group_kwargs() -> dict[str, Any]:
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def kill_process_tree(proc: subprocess.Popen[bytes]) -> None:
    """Kill `proc` and every process it spawned into its group."""
    if sys.platform == "win32":
        subprocess.run(
            ["taskkill", "/T", "/F", "/PID", str(proc.pid)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def run_command(
    args: str | Sequence[str],
    *,
    input_bytes: bytes | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = False,
    timeout_s: float | None = None,
) -> RunResult:
    """Run `args`, feed `input_bytes` to stdin and collect both output streams.

    `args` may be a ready-made command string; Windows passes it to
    CreateProcess untouched, which `cmd.exe` quoting relies on.

    On timeout the process group is killed and `subprocess.TimeoutExpired`
    is raised with whatever output was collected. Spawn failures surface as
    `OSError`.
    """
    cmd = args if isinstance(args, str) else list(args)
    with subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=dict(env) if env is not None else None,
        **_group_kwargs(),
    ) as proc:
        try:
            stdout, stderr = proc.communicate(input_bytes or b"", timeout=timeout_s)
        except subprocess.TimeoutExpired as exc:
            kill_process_tree(proc)
            stdout, stderr = proc.communicate()
            raise subprocess.TimeoutExpired(
                proc.args, exc.timeout, output=stdout, stderr=stderr
            ) from None
        except BaseException:
            kill_process_tree(proc)
            raise
        returncode = int(proc.returncode)

    if check and returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd, output=stdout, stderr=stderr)
    return RunResult(
        returncode=returncode,
        stdout=stdout or b"",
        stderr=stderr or b"",
    )
