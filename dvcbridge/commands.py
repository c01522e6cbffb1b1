from __future__ import annotations

import shlex

from dvcbridge.models import Empty, FileList, OperationArgument, SingleFile, VaultFile


_DOUBLE_QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "$": "\\$", "`": "\\`"}


def quote_path(path: str) -> str:
    """Wrap a path in double quotes, escaping the characters a POSIX shell
    still interprets inside them."""
    escaped = "".join(_DOUBLE_QUOTE_ESCAPES.get(char, char) for char in path)
    return f'"{escaped}"'


def argument_paths(argument: OperationArgument) -> list[str]:
    if isinstance(argument, Empty):
        return []
    if isinstance(argument, SingleFile):
        return [argument.file.path]
    if isinstance(argument, FileList):
        return [file.path for file in argument.files]
    raise TypeError(f"Unsupported operation argument: {argument!r}")


def files_argument(files: list[VaultFile] | tuple[VaultFile, ...]) -> OperationArgument:
    if not files:
        return Empty()
    return FileList(files=tuple(files))


def build_command(tool: str, operation: str, argument: OperationArgument) -> str:
    parts = [tool, operation] if operation else [tool]
    parts.extend(quote_path(path) for path in argument_paths(argument))
    return " ".join(parts)


def build_argv(tool: str, operation: str, argument: OperationArgument) -> list[str]:
    argv = [tool, *shlex.split(operation)]
    paths = argument_paths(argument)
    if paths:
        # Targets such as `-f` must not be read as options.
        argv.append("--")
        argv.extend(paths)
    return argv
