"""Range expansion from the anchor message (core domain)."""

from __future__ import annotations

from typing import Iterable, Optional

from core.filters import FilterSpec
from core.models import MessageRecord
from core.selection import is_eligible


def group_messages(corpus: Iterable[MessageRecord]) -> list[tuple[str, list[MessageRecord]]]:
    """Split messages into runs of the same exchange unit, in transcript order.

    A group id that shows up again after another group starts a new run, so
    the result always follows transcript order. Messages outside any group
    are left out: range expansion only walks exchange units.
    """

    groups: list[tuple[str, list[MessageRecord]]] = []
    for message in corpus:
        if message.group_id is None:
            continue
        if groups and groups[-1][0] == message.group_id:
            groups[-1][1].append(message)
        else:
            groups.append((message.group_id, [message]))
    return groups


def range_from(
    anchor: Optional[MessageRecord],
    corpus: Iterable[MessageRecord],
    ai_only: bool,
    spec: FilterSpec,
) -> list[MessageRecord]:
    """Return eligible messages from the anchor onward, in transcript order.

    Within the anchor's own group, messages before the anchor are skipped.
    Every later group contributes all of its eligible messages. The result is
    a plain list and computing it never touches checked state.
    """

    if anchor is None:
        return []

    groups = group_messages(corpus)
    start_group: Optional[int] = None
    for position, (_, members) in enumerate(groups):
        if any(message.message_id == anchor.message_id for message in members):
            start_group = position
            break
    if start_group is None:
        # Anchor is gone from the live transcript (or was never in a group).
        return []

    selected: list[MessageRecord] = []
    found_start = False
    for message in groups[start_group][1]:
        if message.message_id == anchor.message_id:
            found_start = True
        if found_start and is_eligible(message, spec, ai_only):
            selected.append(message)

    for _, members in groups[start_group + 1 :]:
        selected.extend(message for message in members if is_eligible(message, spec, ai_only))
    return selected
