from __future__ import annotations

import logging

from dvcbridge.models import RemoteRecord


logger = logging.getLogger(__name__)


def parse_remote_list(output: str) -> list[RemoteRecord]:
    """Parse `dvc remote list` output: one `<name>\\t<path>` record per line.

    Lines without a tab still produce a record, with an empty path.
    """
    records: list[RemoteRecord] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, tab, path = line.partition("\t")
        if not tab:
            logger.debug("Remote list line has no tab separator: %r", line)
        records.append(RemoteRecord(name=name, path=path))
    return records


class RemoteRegistry:
    def __init__(self) -> None:
        self._records: list[RemoteRecord] = []

    @property
    def records(self) -> list[RemoteRecord]:
        return list(self._records)

    def replace(self, records: list[RemoteRecord]) -> list[RemoteRecord]:
        self._records = list(records)
        return self.records

    def get(self, name: str) -> RemoteRecord | None:
        for record in self._records:
            if record.name == name:
                return record
        return None
