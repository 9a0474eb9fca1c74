# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Subprocess executor for calendar automation scripts.

Runs one short-lived process per call, buffers its output fully and
never raises: spawn errors and timeouts are reported in the result.
"""

import asyncio
import logging
import os
import signal
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POWERSHELL = "powershell"

# Seconds to wait for a killed process to exit and close its pipes
KILL_GRACE_SECONDS = 2.0

# Own process group on POSIX so a timeout can kill grandchildren too
_NEW_SESSION = os.name == "posix"


@dataclass
class ShellResult:
    """Outcome of a single process run."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None
    error: str | None = None  # spawn failure or timeout
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and self.exit_code == 0


# Anything that takes a script body and returns a ShellResult.
ScriptRunner = Callable[[str], Awaitable[ShellResult]]


def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill a process, and its whole process group where there is one."""
    if _NEW_SESSION:
        try:
            os.killpg(process.pid, signal.SIGKILL)
            return
        except (ProcessLookupError, PermissionError):
            pass
    try:
        process.kill()
    except ProcessLookupError:
        pass


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


async def run_command(
    argv: Sequence[str],
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> ShellResult:
    """Run a command and collect its output.

    Args:
        argv: Program and arguments (no shell involved)
        timeout: Seconds to wait before killing the process, None to wait forever

    Returns:
        ShellResult; never raises for spawn errors or timeouts
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=_NEW_SESSION,
        )
    except OSError as e:
        logger.warning(f"Could not start {argv[0]}: {e}")
        return ShellResult(error=f"spawn failed: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{argv[0]} did not finish within {timeout}s, killing it")
        _kill(process)
        # Pipes inherited by a surviving grandchild stay open; don't wait on them forever
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=KILL_GRACE_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"{argv[0]} output still open {KILL_GRACE_SECONDS}s after kill, abandoning it")
            stdout, stderr = b"", b""
        return ShellResult(
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            exit_code=process.returncode,
            error=f"timed out after {timeout}s",
            timed_out=True,
        )

    result = ShellResult(
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        exit_code=process.returncode,
    )
    if result.exit_code != 0:
        logger.debug(f"{argv[0]} exited with code {result.exit_code}")
    return result


def powershell_argv(script: str, executable: str | None = None) -> list[str]:
    """Build the argument vector for running a script body in PowerShell."""
    exe = executable or os.environ.get("CALENDAR_CONTEXT_POWERSHELL") or DEFAULT_POWERSHELL
    return [exe, "-NoProfile", "-NonInteractive", "-Command", script]


def powershell_runner(
    executable: str | None = None,
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> ScriptRunner:
    """Return a ScriptRunner that executes scripts with PowerShell."""

    async def run(script: str) -> ShellResult:
        return await run_command(powershell_argv(script, executable), timeout=timeout)

    return run
