"""JSON transcript adapter.

Expected file shape::

    {
      "title": "Chat title",
      "messages": [
        {"id": "m0", "role": "user", "text": "hi", "group": 0},
        {"id": "m1", "role": "ai", "text": "hello", "group": 0,
         "speaker": "Assistant", "checked": true}
      ]
    }

Only ``role`` and ``text`` are required per message.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from core.models import Role

from adapters.memory_transcript import InMemoryTranscript, TranscriptEntry


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_transcript(data: Any) -> tuple[Optional[str], list[TranscriptEntry]]:
    """Validate decoded JSON and build transcript entries."""

    if not isinstance(data, dict):
        raise ValueError("transcript root must be an object")
    raw_messages = data.get("messages")
    if not isinstance(raw_messages, list):
        raise ValueError("transcript.messages must be a list")

    entries: list[TranscriptEntry] = []
    for index, raw in enumerate(raw_messages):
        if not isinstance(raw, dict):
            raise ValueError(f"message {index} must be an object")
        if "role" not in raw:
            raise ValueError(f"message {index} is missing a role")
        raw_id = raw.get("id")
        entries.append(
            TranscriptEntry(
                message_id=f"m{index}" if raw_id is None else str(raw_id),
                role=Role.parse(raw["role"]),
                text=str(raw.get("text") or ""),
                group_id=_optional_str(raw.get("group")),
                speaker=_optional_str(raw.get("speaker")),
                checked=bool(raw.get("checked", False)),
            )
        )
    return _optional_str(data.get("title")), entries


class JsonTranscript(InMemoryTranscript):
    """Transcript loaded from a JSON file, with checked state kept in memory."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        super().__init__()
        self.reload()

    def _read_source(self) -> tuple[Optional[str], list[TranscriptEntry]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Transcript not found: {self._path}")
        return parse_transcript(json.loads(self._path.read_text(encoding="utf-8")))
