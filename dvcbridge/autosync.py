from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from dvcbridge.commands import files_argument
from dvcbridge.config import SyncPolicy
from dvcbridge.dispatcher import CommandDispatcher
from dvcbridge.models import CommandResult, Embed, VaultFile
from dvcbridge.tracked import TrackedFileIndex


logger = logging.getLogger(__name__)

EmbedSource = Callable[[VaultFile], list[Embed] | None]


class TriggerState(str, Enum):
    IDLE = "idle"
    PULLING = "pulling"


def matches_extension(link: str, extensions: list[str]) -> bool:
    # Substring match, so `mp4` also accepts `clip.mp4.bak`.
    return any(extension and extension in link for extension in extensions)


def resolve_embeds(
    embeds: list[Embed],
    extensions: list[str],
    index: TrackedFileIndex,
) -> list[VaultFile]:
    resolved: list[VaultFile] = []
    for embed in embeds:
        if not matches_extension(embed.link, extensions):
            continue
        marker = index.find_by_basename(embed.link)
        if marker is not None:
            resolved.append(marker)
    return resolved


class AutoSyncTrigger:
    """Pulls tracked attachments embedded in a note when the note is opened.

    Each activation is handled on its own: no debouncing and no retries.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        index: TrackedFileIndex,
        policy: SyncPolicy,
        embed_source: EmbedSource,
    ) -> None:
        self.dispatcher = dispatcher
        self.index = index
        self.policy = policy
        self.embed_source = embed_source
        self._in_flight = 0

    @property
    def state(self) -> TriggerState:
        return TriggerState.PULLING if self._in_flight else TriggerState.IDLE

    async def on_file_open(self, document: VaultFile | None, *, show: bool = True) -> CommandResult | None:
        if document is None:
            return None

        self.index.ensure_loaded()
        if not self.policy.autopull or not self.index:
            logger.debug("Auto pull skipped for %s (enabled=%s, markers=%d)",
                         document.path, self.policy.autopull, len(self.index))
            return None

        embeds = self.embed_source(document)
        if not embeds:
            return None

        markers = resolve_embeds(embeds, self.policy.autopull_extensions, self.index)
        if not markers:
            logger.debug("No tracked embeds to pull for %s", document.path)
            return None

        self._in_flight += 1
        try:
            return await self.dispatcher.pull(files_argument(markers), show=show)
        finally:
            self._in_flight -= 1
