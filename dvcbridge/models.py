from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class VaultFile:
    path: str
    basename: str
    extension: str


@dataclass(slots=True, frozen=True)
class RemoteRecord:
    name: str
    path: str


@dataclass(slots=True, frozen=True)
class Embed:
    link: str


@dataclass(slots=True, frozen=True)
class Empty:
    pass


@dataclass(slots=True, frozen=True)
class SingleFile:
    file: VaultFile


@dataclass(slots=True, frozen=True)
class FileList:
    files: tuple[VaultFile, ...]


OperationArgument = Empty | SingleFile | FileList


class FailureKind(str, Enum):
    SPAWN = "spawn"
    NON_ZERO_EXIT = "non_zero_exit"
    TIMEOUT = "timeout"


@dataclass(slots=True)
class CommandResult:
    command: str
    exit_code: int | None
    stdout: str
    stderr: str
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def text(self) -> str:
        if self.ok:
            return self.stdout
        return self.stderr
