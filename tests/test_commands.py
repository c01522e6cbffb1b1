from __future__ import annotations

import shlex

import pytest

from dvcbridge.commands import (
    argument_paths,
    build_argv,
    build_command,
    files_argument,
    quote_path,
)
from dvcbridge.models import Empty, FileList, SingleFile, VaultFile


def _file(path: str) -> VaultFile:
    name = path.rsplit("/", 1)[-1]
    stem, _, ext = name.rpartition(".")
    return VaultFile(path=path, basename=stem, extension=ext)


class TestBuildCommand:
    def test_empty_argument_has_no_trailing_space(self):
        assert build_command("dvc", "status", Empty()) == "dvc status"

    def test_single_file_is_quoted(self):
        argument = SingleFile(file=_file("media/video.mp4.dvc"))
        assert build_command("dvc", "pull", argument) == 'dvc pull "media/video.mp4.dvc"'

    def test_file_list_quotes_each_path_in_order(self):
        argument = FileList(files=(_file("a b.txt"), _file("c.txt")))
        assert build_command("dvc", "add", argument) == 'dvc add "a b.txt" "c.txt"'

    def test_operation_is_passed_through_verbatim(self):
        command = build_command("dvc", "config --local core.autostage true", Empty())
        assert command == "dvc config --local core.autostage true"

    def test_embedded_quotes_are_escaped(self):
        argument = SingleFile(file=_file('say "hi" $HOME.txt'))
        command = build_command("dvc", "add", argument)
        assert command == 'dvc add "say \\"hi\\" \\$HOME.txt"'

    def test_escaped_command_splits_back_to_the_original_path(self):
        argument = SingleFile(file=_file('my "quoted" file.txt'))
        command = build_command("dvc", "add", argument)
        assert shlex.split(command) == ["dvc", "add", 'my "quoted" file.txt']


class TestBuildArgv:
    def test_operation_flags_are_split(self):
        assert build_argv("dvc", "gc -w -c -f", Empty()) == ["dvc", "gc", "-w", "-c", "-f"]

    def test_paths_are_separate_arguments(self):
        argument = FileList(files=(_file("a b.txt"), _file("semi;colon.txt")))
        assert build_argv("dvc", "push", argument) == ["dvc", "push", "--", "a b.txt", "semi;colon.txt"]


def test_quote_path_leaves_plain_paths_alone():
    assert quote_path("notes/plain.md") == '"notes/plain.md"'


def test_files_argument_shapes():
    assert files_argument([]) == Empty()
    files = [_file("x.dvc"), _file("y.dvc")]
    assert files_argument(files) == FileList(files=tuple(files))


def test_argument_paths_rejects_unknown_shapes():
    with pytest.raises(TypeError):
        argument_paths("status")  # type: ignore[arg-type]


def test_option_like_targets_follow_separator():
    argument = SingleFile(file=_file("-f"))
    assert build_argv("dvc", "remove", argument) == ["dvc", "remove", "--", "-f"]
