from __future__ import annotations

import asyncio
import logging
import shlex
from contextlib import nullcontext
from pathlib import Path
from typing import Callable

from dvcbridge.models import CommandResult, FailureKind


logger = logging.getLogger(__name__)

Notifier = Callable[[CommandResult], None]


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class ProcessRunner:
    """Runs external commands rooted at one working directory.

    Every call resolves to a `CommandResult`; spawn errors, non-zero exits and
    timeouts are reported through `result.failure` rather than raised.
    """

    def __init__(
        self,
        cwd: str | Path,
        *,
        notify: Notifier | None = None,
        serialize: bool = True,
        timeout: float | None = None,
    ) -> None:
        self.cwd = Path(cwd).resolve()
        self.notify = notify
        self.serialize = serialize
        self.timeout = timeout
        self._lock = asyncio.Lock() if serialize else None

    async def run(
        self,
        argv: list[str],
        *,
        show: bool = True,
        command: str | None = None,
    ) -> CommandResult:
        command = command or shlex.join(argv)
        guard = self._lock if self._lock is not None else nullcontext()
        async with guard:
            result = await self._execute(argv, command)
        self._surface(result, show=show)
        return result

    async def _execute(self, argv: list[str], command: str) -> CommandResult:
        logger.debug("Running `%s` in %s", command, self.cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.warning("Could not start `%s`: %s", command, exc)
            return CommandResult(
                command=command,
                exit_code=None,
                stdout="",
                stderr=str(exc),
                failure=FailureKind.SPAWN,
            )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning("`%s` timed out after %ss", command, self.timeout)
            return CommandResult(
                command=command,
                exit_code=process.returncode,
                stdout="",
                stderr=f"Command timed out after {self.timeout}s: {command}",
                failure=FailureKind.TIMEOUT,
            )

        exit_code = process.returncode
        logger.debug("`%s` exited with %s", command, exit_code)
        out_text = _decode(stdout)
        err_text = _decode(stderr)
        if exit_code != 0:
            if not err_text:
                err_text = f"Command failed with exit code {exit_code}: {command}"
            return CommandResult(
                command=command,
                exit_code=exit_code,
                stdout=out_text,
                stderr=err_text,
                failure=FailureKind.NON_ZERO_EXIT,
            )
        return CommandResult(command=command, exit_code=0, stdout=out_text, stderr=err_text)

    def _surface(self, result: CommandResult, *, show: bool) -> None:
        if self.notify is None:
            return
        if result.ok and not show:
            return
        try:
            self.notify(result)
        except Exception:
            # Notices are best effort; a broken channel must not fail the command.
            logger.exception("Notifier failed for `%s`", result.command)
