from __future__ import annotations

from dvcbridge.models import RemoteRecord
from dvcbridge.remotes import RemoteRegistry, parse_remote_list


def test_parses_tab_separated_records():
    output = "origin\t/data\nbackup\t/mnt/backup\n"
    assert parse_remote_list(output) == [
        RemoteRecord(name="origin", path="/data"),
        RemoteRecord(name="backup", path="/mnt/backup"),
    ]


def test_accepts_crlf_line_endings():
    output = "origin\ts3://bucket/data\r\nbackup\t/mnt/backup\r\n"
    assert [record.path for record in parse_remote_list(output)] == [
        "s3://bucket/data",
        "/mnt/backup",
    ]


def test_malformed_line_yields_record_without_path():
    records = parse_remote_list("origin\t/data\nbadline\n")

    assert len(records) == 2
    assert records[1] == RemoteRecord(name="badline", path="")


def test_splits_on_first_tab_only():
    records = parse_remote_list("origin\t/path/with\ttab\n")
    assert records == [RemoteRecord(name="origin", path="/path/with\ttab")]


def test_blank_output_is_empty():
    assert parse_remote_list("") == []
    assert parse_remote_list("\n\n") == []


class TestRemoteRegistry:
    def test_replace_discards_previous_records(self):
        registry = RemoteRegistry()
        registry.replace([RemoteRecord(name="old", path="/old")])
        registry.replace([RemoteRecord(name="new", path="/new")])

        assert registry.records == [RemoteRecord(name="new", path="/new")]
        assert registry.get("old") is None
        assert registry.get("new").path == "/new"

    def test_records_is_a_copy(self):
        registry = RemoteRegistry()
        registry.replace([RemoteRecord(name="origin", path="/data")])
        registry.records.clear()

        assert len(registry.records) == 1
