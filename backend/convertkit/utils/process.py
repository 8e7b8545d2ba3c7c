"""Run an external binary as an owned child process.

The caller suspends until the child exits.  Everything the child writes to
stderr is kept for error reporting; stdout is discarded.  If the awaiting
task is cancelled or the timeout fires, the child is killed and reaped
before control returns.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

READ_CHUNK = 4096


@dataclass
class ProcessResult:
    returncode: int
    stderr: str


class ProcessError(Exception):
    """The child could not be started, exited non-zero or timed out.

    ``returncode`` is ``None`` when the process never ran to completion
    (spawn failure or timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out


async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            return
        sink.extend(chunk)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    await proc.wait()


async def run_process(
    executable: str,
    args: Sequence[str],
    *,
    timeout: Optional[float] = None,
) -> ProcessResult:
    """Execute ``executable`` with ``args`` and wait for it to finish.

    Raises
    ------
    ProcessError
        On spawn failure, non-zero exit status or timeout.
    """
    name = os.path.basename(executable)
    logger.info("Spawning %s with %d argument(s)", name, len(args))
    logger.debug("Command line: %s %s", executable, " ".join(args))

    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.error("Could not start %s: %s", executable, exc)
        raise ProcessError(f"Failed to start {name}: {exc}") from exc

    stderr_buf = bytearray()
    try:
        await asyncio.wait_for(
            asyncio.gather(_drain(proc.stderr, stderr_buf), proc.wait()),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        await _kill(proc)
        stderr = stderr_buf.decode(errors="replace")
        logger.error("%s timed out after %s seconds and was killed", name, timeout)
        raise ProcessError(
            f"{name} timed out after {timeout} seconds",
            stderr=stderr,
            timed_out=True,
        ) from None
    finally:
        if proc.returncode is None:
            # Cancelled while waiting; never leave the child running.
            await _kill(proc)

    stderr = stderr_buf.decode(errors="replace")
    if proc.returncode != 0:
        logger.error("%s exited with code %s: %s", name, proc.returncode, stderr.strip())
        raise ProcessError(
            f"{name} exited with code {proc.returncode}: {stderr}",
            returncode=proc.returncode,
            stderr=stderr,
        )

    logger.info("%s finished successfully", name)
    return ProcessResult(returncode=proc.returncode, stderr=stderr)
