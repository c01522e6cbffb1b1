from __future__ import annotations

import logging

from dvcbridge.commands import build_argv, build_command
from dvcbridge.config import TOOL_NAME
from dvcbridge.models import CommandResult, Empty, OperationArgument, RemoteRecord
from dvcbridge.remotes import RemoteRegistry, parse_remote_list
from dvcbridge.runner import ProcessRunner
from dvcbridge.tracked import TrackedFileIndex


logger = logging.getLogger(__name__)

GC_WORKSPACE_FLAGS = "gc -w -f"
GC_WORKSPACE_AND_REMOTE_FLAGS = "gc -w -c -f"
REMOTE_LIST = "remote list"


class CommandDispatcher:
    """High-level dvc operations for one vault.

    Each method builds its command line, runs it and returns the
    `CommandResult`. `show=False` suppresses success notices; failures are
    always surfaced by the runner.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        index: TrackedFileIndex,
        remotes: RemoteRegistry,
        *,
        tool: str = TOOL_NAME,
    ) -> None:
        self.runner = runner
        self.index = index
        self.remotes = remotes
        self.tool = tool

    async def run(
        self,
        operation: str,
        argument: OperationArgument | None = None,
        *,
        show: bool = True,
        tool: str | None = None,
    ) -> CommandResult:
        tool = tool or self.tool
        argument = argument if argument is not None else Empty()
        return await self.runner.run(
            build_argv(tool, operation, argument),
            show=show,
            command=build_command(tool, operation, argument),
        )

    async def status(self, *, show: bool = True) -> CommandResult:
        return await self.run("status", Empty(), show=show)

    async def add(self, argument: OperationArgument, *, show: bool = True) -> CommandResult:
        result = await self.run("add", argument, show=show)
        # New marker files appear on success; refresh regardless of outcome.
        self.index.refresh()
        return result

    async def push(self, argument: OperationArgument | None = None, *, show: bool = True) -> CommandResult:
        return await self.run("push", argument, show=show)

    async def pull(self, argument: OperationArgument | None = None, *, show: bool = True) -> CommandResult:
        return await self.run("pull", argument, show=show)

    async def remove(self, argument: OperationArgument, *, show: bool = True) -> CommandResult:
        return await self.run("remove", argument, show=show)

    async def init(self, *, show: bool = True) -> CommandResult:
        # `git init && dvc init -f`: dvc only runs once git tracking exists.
        result = await self.run("init", Empty(), show=show, tool="git")
        if not result.ok:
            logger.debug("Initialization stopped at `%s`", result.command)
            return result
        return await self.run("init -f", Empty(), show=show)

    async def gc_workspace(self, *, show: bool = True) -> CommandResult:
        return await self.run(GC_WORKSPACE_FLAGS, Empty(), show=show)

    async def gc_workspace_and_remote(self, *, show: bool = True) -> CommandResult:
        return await self.run(GC_WORKSPACE_AND_REMOTE_FLAGS, Empty(), show=show)

    async def set_autostage(self, enabled: bool, *, show: bool = False) -> CommandResult:
        value = "true" if enabled else "false"
        return await self.run(f"config --local core.autostage {value}", Empty(), show=show)

    async def list_remotes(self, *, show: bool = True) -> tuple[CommandResult, list[RemoteRecord]]:
        result = await self.run(REMOTE_LIST, Empty(), show=show)
        if not result.ok:
            return result, self.remotes.records
        return result, self.remotes.replace(parse_remote_list(result.stdout))
