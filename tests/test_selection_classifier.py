from __future__ import annotations

from typing import Optional

from core.filters import FilterSpec, compile_filters
from core.models import MessageRecord, Role, SelectionStatus, StatusKind
from core.selection import classify, eligible_messages


def _message(message_id: str, role: Role, text: str, group: Optional[str], checked: set[str]) -> MessageRecord:
    return MessageRecord(
        message_id=message_id,
        role=role,
        text=text,
        group_id=group,
        checked_reader=lambda key: key in checked,
    )


def _corpus(checked: set[str]) -> list[MessageRecord]:
    return [
        _message("U1", Role.USER, "hi", "g1", checked),
        _message("A1", Role.AI, "hello", "g1", checked),
        _message("U2", Role.USER, "bye", "g2", checked),
        _message("A2", Role.AI, "goodbye", "g2", checked),
    ]


def test_eligible_with_include1_filter() -> None:
    corpus = _corpus(set())
    spec = compile_filters("h.*", None, None)
    eligible = eligible_messages(corpus, spec, ai_only=False)
    assert [message.message_id for message in eligible] == ["U1", "A1"]


def test_eligible_with_ai_only() -> None:
    corpus = _corpus(set())
    eligible = eligible_messages(corpus, FilterSpec(), ai_only=True)
    assert [message.message_id for message in eligible] == ["A1", "A2"]


def test_none_eligible() -> None:
    corpus = _corpus({"U1"})
    spec = compile_filters("zzz", None, None)
    status = classify(corpus, spec, ai_only=False, anchor=None)
    assert status.kind is StatusKind.NONE_ELIGIBLE


def test_none_checked() -> None:
    status = classify(_corpus(set()), FilterSpec(), ai_only=False, anchor=None)
    assert status == SelectionStatus(StatusKind.NONE_CHECKED, 0, 4)


def test_all_checked() -> None:
    corpus = _corpus({"U1", "A1", "U2", "A2"})
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=None)
    assert status == SelectionStatus(StatusKind.ALL_CHECKED, 4, 4)


def test_all_checked_only_counts_eligible_messages() -> None:
    corpus = _corpus({"A1", "A2"})
    status = classify(corpus, FilterSpec(), ai_only=True, anchor=None)
    assert status.kind is StatusKind.ALL_CHECKED


def test_partial_without_anchor() -> None:
    checked = {"U1", "A1", "U2", "A2"}
    corpus = _corpus(checked)
    checked.discard("A2")
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=None)
    assert status == SelectionStatus(StatusKind.PARTIAL, 3, 4)


def test_anchor_u2_with_a2_unchecked_is_backward_contiguous() -> None:
    corpus = _corpus({"U1", "A1", "U2"})
    anchor = corpus[2]
    # after = [U2, A2] is not fully checked, before = [U1, A1, U2] is.
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=anchor)
    assert status == SelectionStatus(StatusKind.CONTIGUOUS_BACKWARD, 3, 4)


def test_anchor_a1_with_a2_unchecked_falls_through_to_partial() -> None:
    corpus = _corpus({"U1", "A1", "U2"})
    anchor = corpus[1]
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=anchor)
    assert status == SelectionStatus(StatusKind.PARTIAL, 3, 4)


def test_forward_contiguous_from_anchor() -> None:
    corpus = _corpus({"U2", "A2"})
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=corpus[2])
    assert status == SelectionStatus(StatusKind.CONTIGUOUS_FORWARD, 2, 4)


def test_forward_needs_exactly_the_tail_checked() -> None:
    corpus = _corpus({"U1", "U2", "A2"})
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=corpus[2])
    assert status.kind is StatusKind.PARTIAL


def test_anchor_outside_eligible_set_is_ignored() -> None:
    corpus = _corpus({"A2"})
    # U2 is filtered out by ai_only, so contiguity is not evaluated.
    status = classify(corpus, FilterSpec(), ai_only=True, anchor=corpus[2])
    assert status == SelectionStatus(StatusKind.PARTIAL, 1, 2)


def test_stale_anchor_is_matched_by_id() -> None:
    corpus = _corpus({"U2", "A2"})
    stale = MessageRecord("U2", Role.USER, "old text", "g2")
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=stale)
    assert status.kind is StatusKind.CONTIGUOUS_FORWARD


def test_anchor_missing_from_transcript_gives_partial() -> None:
    corpus = _corpus({"U2", "A2"})
    gone = MessageRecord("X9", Role.USER, "gone", "g9")
    status = classify(corpus, FilterSpec(), ai_only=False, anchor=gone)
    assert status.kind is StatusKind.PARTIAL
