from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from dvcbridge.config import SETTINGS_FILENAME
from dvcbridge.errors import VaultNotFoundError
from dvcbridge.models import VaultFile


EXCLUDED_FILENAMES = {SETTINGS_FILENAME}


def vault_file(relative_path: str) -> VaultFile:
    name = PurePosixPath(relative_path).name
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        # No extension, or a bare dotfile such as `.gitignore`.
        return VaultFile(path=relative_path, basename=name, extension="")
    return VaultFile(path=relative_path, basename=stem, extension=extension)


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def list_vault_files(root: Path) -> list[VaultFile]:
    root = root.resolve()
    if not root.is_dir():
        raise VaultNotFoundError(f"Vault directory does not exist: {root}")

    files: list[VaultFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune `.git`, `.dvc` and friends before descending into them.
        dirnames[:] = [name for name in dirnames if not _is_hidden(name)]
        base = Path(dirpath).relative_to(root)
        for name in filenames:
            if name in EXCLUDED_FILENAMES or _is_hidden(name):
                continue
            files.append(vault_file((base / name).as_posix()))
    files.sort(key=lambda file: PurePosixPath(file.path).parts)
    return files


def resolve_vault_paths(root: Path, paths: list[str] | tuple[str, ...]) -> list[VaultFile]:
    """Turn user-supplied paths into vault-relative records, keeping input order.

    Paths outside the vault are kept absolute.
    """
    root = root.resolve()
    records: list[VaultFile] = []
    for raw in paths:
        candidate = Path(raw)
        if candidate.is_absolute():
            resolved = candidate.resolve()
        else:
            resolved = (Path.cwd() / candidate).resolve()
            if not resolved.exists() and (root / candidate).exists():
                resolved = (root / candidate).resolve()
        try:
            relative = resolved.relative_to(root).as_posix()
        except ValueError:
            # Outside the vault: keep it absolute so dvc rejects it instead of
            # acting on a same-named file in the vault.
            relative = resolved.as_posix()
        records.append(vault_file(relative))
    return records
