from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from dvcbridge.errors import SettingsError


SETTINGS_FILENAME = ".dvcbridge.json"
TOOL_NAME = "dvc"
MARKER_EXTENSION = "dvc"

_WHITESPACE_RUN = re.compile(r"\s+")


def _flag(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise SettingsError(f"`{key}` must be true or false, got {value!r}")
    return value


@dataclass(slots=True)
class SyncPolicy:
    autostage: bool = False
    autopull: bool = False
    autopull_extensions: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "autostage": self.autostage,
            "autopull": self.autopull,
            "autopullExtension": list(self.autopull_extensions),
        }

    @classmethod
    def from_payload(cls, data: dict[str, object]) -> "SyncPolicy":
        defaults = cls()
        extensions = data.get("autopullExtension", defaults.autopull_extensions)
        if not isinstance(extensions, list):
            raise SettingsError(
                f"`autopullExtension` must be a list of strings, got {type(extensions).__name__}"
            )
        return cls(
            autostage=_flag(data, "autostage", defaults.autostage),
            autopull=_flag(data, "autopull", defaults.autopull),
            autopull_extensions=[str(item) for item in extensions if str(item)],
        )


def settings_path(vault_root: Path | None = None) -> Path:
    return (vault_root or Path.cwd()).resolve() / SETTINGS_FILENAME


def load_settings(vault_root: Path | None = None) -> SyncPolicy:
    path = settings_path(vault_root)
    if not path.exists():
        return SyncPolicy()

    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Settings file is not valid JSON: {path} ({exc})") from exc

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file must contain a JSON object: {path}")
    return SyncPolicy.from_payload(data)


def save_settings(policy: SyncPolicy, vault_root: Path | None = None) -> Path:
    path = settings_path(vault_root)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(policy.to_payload(), fh, indent=2)
        fh.write("\n")
    return path


def parse_extension_list(value: str) -> list[str]:
    normalized = _WHITESPACE_RUN.sub(" ", (value or "").strip())
    if not normalized:
        return []
    return normalized.split(" ")
