"""Corpus reading helpers (core domain)."""

from __future__ import annotations

from core.models import MessageRecord
from core.ports import TranscriptPort


def read_corpus(transcript: TranscriptPort) -> list[MessageRecord]:
    """Read the full transcript in document order.

    The host transcript can grow between actions, so callers read a fresh
    corpus for every operation instead of caching one.
    """

    return [
        MessageRecord(
            message_id=message_id,
            role=transcript.role(message_id),
            text=transcript.text(message_id),
            group_id=transcript.group_of(message_id),
            speaker=transcript.speaker(message_id),
            checked_reader=transcript.is_checked,
        )
        for message_id in transcript.list_messages()
    ]
