from __future__ import annotations

import logging
from typing import Callable, Iterable

from dvcbridge.config import MARKER_EXTENSION
from dvcbridge.models import VaultFile


logger = logging.getLogger(__name__)

FileLister = Callable[[], Iterable[VaultFile]]


class TrackedFileIndex:
    """Snapshot of the marker files currently present in the vault.

    The snapshot is rebuilt wholesale on every refresh; an empty snapshot is
    a valid state for a vault that tracks nothing yet.
    """

    def __init__(self, list_files: FileLister, marker_extension: str = MARKER_EXTENSION) -> None:
        self._list_files = list_files
        self.marker_extension = marker_extension
        self._markers: tuple[VaultFile, ...] = ()

    def refresh(self, all_files: Iterable[VaultFile] | None = None) -> tuple[VaultFile, ...]:
        source = self._list_files() if all_files is None else all_files
        self._markers = tuple(file for file in source if file.extension == self.marker_extension)
        logger.debug("Tracked file index refreshed: %d marker file(s)", len(self._markers))
        return self._markers

    def current(self) -> tuple[VaultFile, ...]:
        return self._markers

    def ensure_loaded(self) -> tuple[VaultFile, ...]:
        if not self._markers:
            self.refresh()
        return self._markers

    def find_by_basename(self, basename: str) -> VaultFile | None:
        for marker in self._markers:
            if marker.basename == basename:
                return marker
        return None

    def __len__(self) -> int:
        return len(self._markers)

    def __bool__(self) -> bool:
        return bool(self._markers)
