from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from pathlib import Path

from dvcbridge.autosync import AutoSyncTrigger
from dvcbridge.config import SyncPolicy, load_settings, save_settings, settings_path
from dvcbridge.dispatcher import CommandDispatcher
from dvcbridge.embeds import read_embeds
from dvcbridge.errors import VaultNotFoundError
from dvcbridge.remotes import RemoteRegistry
from dvcbridge.runner import Notifier, ProcessRunner
from dvcbridge.scanner import list_vault_files
from dvcbridge.tracked import TrackedFileIndex


@dataclass(slots=True)
class BridgeContext:
    vault_root: Path
    settings: SyncPolicy
    runner: ProcessRunner
    index: TrackedFileIndex
    remotes: RemoteRegistry
    dispatcher: CommandDispatcher
    trigger: AutoSyncTrigger

    @property
    def settings_path(self) -> Path:
        return settings_path(self.vault_root)

    @classmethod
    def open(
        cls,
        vault_root: Path,
        *,
        notify: Notifier | None = None,
        serialize: bool = True,
        timeout: float | None = None,
    ) -> "BridgeContext":
        root = vault_root.resolve()
        if not root.is_dir():
            raise VaultNotFoundError(f"Vault directory does not exist: {root}")

        settings = load_settings(root)
        runner = ProcessRunner(root, notify=notify, serialize=serialize, timeout=timeout)
        index = TrackedFileIndex(partial(list_vault_files, root))
        remotes = RemoteRegistry()
        dispatcher = CommandDispatcher(runner, index, remotes)
        trigger = AutoSyncTrigger(dispatcher, index, settings, partial(read_embeds, root))
        return cls(
            vault_root=root,
            settings=settings,
            runner=runner,
            index=index,
            remotes=remotes,
            dispatcher=dispatcher,
            trigger=trigger,
        )

    def save_settings(self) -> Path:
        return save_settings(self.settings, self.vault_root)
