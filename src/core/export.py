"""Plain-text export of filtered messages (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from pathlib import Path
from typing import Iterable, Optional

from core.filters import FilterSpec
from core.models import MessageRecord, Role
from core.selection import is_eligible

DEFAULT_TITLE = "Chat Export"
DEFAULT_AI_NAME = "AI"
DEFAULT_USER_NAME = "User"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


@dataclass(frozen=True)
class ExportResult:
    count: int
    selected_only: bool
    path: Optional[Path] = None


def speaker_name(message: MessageRecord, bot_name: str = "", user_name: str = "") -> str:
    """User overrides win, then the scraped speaker, then the role default."""

    if message.role is Role.AI:
        return bot_name.strip() or (message.speaker or "").strip() or DEFAULT_AI_NAME
    return user_name.strip() or DEFAULT_USER_NAME


def select_for_export(
    corpus: Iterable[MessageRecord],
    spec: FilterSpec,
    ai_only: bool,
    selected_only: bool,
) -> list[MessageRecord]:
    selected: list[MessageRecord] = []
    for message in corpus:
        if selected_only and not message.is_checked():
            continue
        if is_eligible(message, spec, ai_only):
            selected.append(message)
    return selected


def build_export_text(
    title: Optional[str],
    messages: Iterable[MessageRecord],
    bot_name: str = "",
    user_name: str = "",
) -> str:
    parts = [f"{(title or '').strip() or DEFAULT_TITLE}\n\n"]
    for message in messages:
        name = speaker_name(message, bot_name, user_name)
        parts.append(f"{name}:\n{message.text.strip()}\n\n")
    return "".join(parts)


def export_filename(title: Optional[str]) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", (title or "").strip()).strip(" .")
    return f"{cleaned or DEFAULT_TITLE}.txt"
