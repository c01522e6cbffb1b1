from __future__ import annotations

from collections import deque
from pathlib import Path

import pytest

from dvcbridge.models import CommandResult, FailureKind
from dvcbridge.remotes import RemoteRegistry
from dvcbridge.scanner import list_vault_files
from dvcbridge.tracked import TrackedFileIndex


def ok(command: str = "", stdout: str = "") -> CommandResult:
    return CommandResult(command=command, exit_code=0, stdout=stdout, stderr="")


def failed(command: str = "", stderr: str = "error") -> CommandResult:
    return CommandResult(
        command=command,
        exit_code=1,
        stdout="",
        stderr=stderr,
        failure=FailureKind.NON_ZERO_EXIT,
    )


class FakeRunner:
    """Stands in for ProcessRunner: records calls and replays queued results."""

    def __init__(self, *results: CommandResult) -> None:
        self.calls: list[dict] = []
        self._results = deque(results)

    def queue(self, *results: CommandResult) -> None:
        self._results.extend(results)

    async def run(self, argv: list[str], *, show: bool = True, command: str | None = None) -> CommandResult:
        self.calls.append({"argv": list(argv), "show": show, "command": command})
        if self._results:
            result = self._results.popleft()
            result.command = command or " ".join(argv)
            return result
        return ok(command or " ".join(argv))

    @property
    def argvs(self) -> list[list[str]]:
        return [call["argv"] for call in self.calls]


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    files = {
        "notes/Lecture.md": "# Lecture\n\n![[video.mp4]]\n![[doc.pdf]]\n",
        "notes/Plain.md": "Nothing embedded here.\n",
        "media/video.mp4.dvc": "outs:\n- path: video.mp4\n",
        "media/doc.pdf": "pdf",
        "data/set.csv.dvc": "outs:\n- path: set.csv\n",
        ".dvc/config": "[core]\n",
        ".obsidian/app.json": "{}",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def index(vault: Path) -> TrackedFileIndex:
    return TrackedFileIndex(lambda: list_vault_files(vault))


@pytest.fixture
def remotes() -> RemoteRegistry:
    return RemoteRegistry()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
