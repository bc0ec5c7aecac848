"""In-memory transcript host.

Implements the core TranscriptPort over a list of entries. File-backed hosts
subclass it and only provide ``_read_source``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Optional

from core.models import Role

LOGGER = logging.getLogger(__name__)


@dataclass
class TranscriptEntry:
    """Mutable host-side state of one message."""

    message_id: str
    role: Role
    text: str
    group_id: Optional[str] = None
    speaker: Optional[str] = None
    checked: bool = False
    checkable: bool = True


class InMemoryTranscript:
    """Thin in-memory host that satisfies the TranscriptPort contract."""

    def __init__(self, entries: Iterable[TranscriptEntry] = (), title: Optional[str] = None) -> None:
        self._title = title
        self._entries: dict[str, TranscriptEntry] = {}
        self._replace(entries)

    def _replace(self, entries: Iterable[TranscriptEntry]) -> None:
        replaced: dict[str, TranscriptEntry] = {}
        for entry in entries:
            if entry.message_id in replaced:
                raise ValueError(f"Duplicate message id: {entry.message_id}")
            replaced[entry.message_id] = entry
        self._entries = replaced

    def _read_source(self) -> tuple[Optional[str], list[TranscriptEntry]]:
        return self._title, list(self._entries.values())

    def reload(self) -> int:
        """Re-read the source, keeping checked state of known messages."""

        title, entries = self._read_source()
        previous = {key: entry.checked for key, entry in self._entries.items()}
        for entry in entries:
            if entry.message_id in previous:
                entry.checked = previous[entry.message_id]
        self._title = title
        self._replace(entries)
        LOGGER.info("Transcript loaded: %s messages", len(self._entries))
        return len(self._entries)

    def append(self, entry: TranscriptEntry) -> None:
        if entry.message_id in self._entries:
            raise ValueError(f"Duplicate message id: {entry.message_id}")
        self._entries[entry.message_id] = entry

    def _entry(self, message_id: str) -> TranscriptEntry:
        try:
            return self._entries[message_id]
        except KeyError:
            raise KeyError(f"Unknown message id: {message_id}") from None

    def list_messages(self) -> list[str]:
        return list(self._entries)

    def role(self, message_id: str) -> Role:
        return self._entry(message_id).role

    def text(self, message_id: str) -> str:
        return self._entry(message_id).text

    def group_of(self, message_id: str) -> Optional[str]:
        return self._entry(message_id).group_id

    def speaker(self, message_id: str) -> Optional[str]:
        return self._entry(message_id).speaker

    def title(self) -> Optional[str]:
        return self._title

    def is_checked(self, message_id: str) -> bool:
        return self._entry(message_id).checked

    def toggle(self, message_id: str) -> None:
        entry = self._entry(message_id)
        if not entry.checkable:
            LOGGER.debug("Message %s has no checkbox; toggle skipped", message_id)
            return
        entry.checked = not entry.checked
