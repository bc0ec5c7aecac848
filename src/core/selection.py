"""Selection state classification (core domain)."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from core.filters import FilterSpec, matches
from core.models import MessageRecord, Role, SelectionStatus, StatusKind


def is_eligible(message: MessageRecord, spec: FilterSpec, ai_only: bool) -> bool:
    """Role filter first, then the regex stages."""

    if ai_only and message.role is not Role.AI:
        return False
    return matches(message.text, spec)


def eligible_messages(
    corpus: Iterable[MessageRecord], spec: FilterSpec, ai_only: bool
) -> list[MessageRecord]:
    return [message for message in corpus if is_eligible(message, spec, ai_only)]


def index_of(messages: Sequence[MessageRecord], anchor: Optional[MessageRecord]) -> Optional[int]:
    """Locate the anchor by id; records are re-read on every operation."""

    if anchor is None:
        return None
    for index, message in enumerate(messages):
        if message.message_id == anchor.message_id:
            return index
    return None


def classify(
    corpus: Iterable[MessageRecord],
    spec: FilterSpec,
    ai_only: bool,
    anchor: Optional[MessageRecord],
) -> SelectionStatus:
    """Classify the checked set against the active filter and anchor.

    Order of checks:
    - nothing eligible, nothing checked, everything checked;
    - checked set equals the eligible run from the anchor to the end;
    - checked set equals the eligible run from the start to the anchor;
    - otherwise partial.
    """

    eligible = eligible_messages(corpus, spec, ai_only)
    total = len(eligible)
    if not eligible:
        return SelectionStatus(StatusKind.NONE_ELIGIBLE)

    flags = [message.is_checked() for message in eligible]
    checked = sum(flags)
    if checked == 0:
        return SelectionStatus(StatusKind.NONE_CHECKED, 0, total)
    if checked == total:
        return SelectionStatus(StatusKind.ALL_CHECKED, checked, total)

    position = index_of(eligible, anchor)
    if position is not None:
        after = flags[position:]
        before = flags[: position + 1]
        if all(after) and checked == len(after):
            return SelectionStatus(StatusKind.CONTIGUOUS_FORWARD, checked, total)
        if all(before) and checked == len(before):
            return SelectionStatus(StatusKind.CONTIGUOUS_BACKWARD, checked, total)

    return SelectionStatus(StatusKind.PARTIAL, checked, total)
