from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote

from dvcbridge.models import Embed, VaultFile


MARKDOWN_EXTENSIONS = {"md", "markdown"}

FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
WIKI_EMBED_PATTERN = re.compile(r"!\[\[([^\[\]]+?)\]\]")
MARKDOWN_EMBED_PATTERN = re.compile(r"!\[[^\]]*\]\(\s*(<[^>]*>|[^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def _wiki_link(target: str) -> str:
    return target.split("|", 1)[0].strip()


def _markdown_link(target: str) -> str | None:
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]
    target = target.strip()
    if not target or SCHEME_PATTERN.match(target):
        return None
    return unquote(target)


def parse_embeds(text: str) -> list[Embed]:
    """Collect embed links from Markdown text in document order.

    `![[target|alias]]` yields `target`; `![alt](target)` yields the decoded
    target unless it is an external URL. Fenced code blocks are skipped.
    """
    embeds: list[Embed] = []
    in_fence: str | None = None
    for line in text.splitlines():
        fence = FENCE_PATTERN.match(line)
        if fence:
            marker = fence.group(1)
            if in_fence is None:
                in_fence = marker
            elif in_fence == marker:
                in_fence = None
            continue
        if in_fence is not None:
            continue

        found: list[tuple[int, str]] = []
        for match in WIKI_EMBED_PATTERN.finditer(line):
            link = _wiki_link(match.group(1))
            if link:
                found.append((match.start(), link))
        for match in MARKDOWN_EMBED_PATTERN.finditer(line):
            link = _markdown_link(match.group(1))
            if link:
                found.append((match.start(), link))
        embeds.extend(Embed(link=link) for _, link in sorted(found))
    return embeds


def read_embeds(vault_root: Path, document: VaultFile) -> list[Embed] | None:
    """Return the embeds of a vault note, or None when it is not a readable note."""
    if document.extension.lower() not in MARKDOWN_EXTENSIONS:
        return None
    path = vault_root / document.path
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, UnicodeDecodeError):
        return None
    return parse_embeds(text)
