from __future__ import annotations

from pathlib import Path

from adapters.status_formatting import (
    ANCHOR_HINT,
    ANCHOR_REQUIRED,
    format_batch,
    format_export,
    format_preview,
    format_status,
)
from core.export import ExportResult
from core.models import MessageRecord, Role, SelectionStatus, StatusKind
from core.processor import BatchResult


def test_format_status_labels() -> None:
    assert format_status(SelectionStatus(StatusKind.NONE_ELIGIBLE)) == "No selectable messages"
    assert format_status(SelectionStatus(StatusKind.NONE_CHECKED, 0, 3)) == "No messages selected"
    assert format_status(SelectionStatus(StatusKind.ALL_CHECKED, 3, 3)) == "[All selected]"
    assert "following" in format_status(SelectionStatus(StatusKind.CONTIGUOUS_FORWARD, 2, 3))
    assert "preceding" in format_status(SelectionStatus(StatusKind.CONTIGUOUS_BACKWARD, 2, 3))
    assert format_status(SelectionStatus(StatusKind.PARTIAL, 3, 4)) == "[Partially selected: 3/4]"


def test_format_preview_clips_long_text() -> None:
    message = MessageRecord("a", Role.AI, "x" * 150, "g1")
    preview = format_preview(message)
    assert preview.startswith("Selected [AI message]: ")
    assert preview.endswith("x" * 100 + "...")


def test_format_preview_without_anchor() -> None:
    assert format_preview(None) == ANCHOR_HINT
    user = MessageRecord("u", Role.USER, "", "g1")
    assert format_preview(user) == "Selected [User message]: (no text content)"


def test_format_batch_only_reports_missing_anchor() -> None:
    assert format_batch(BatchResult("toggle_from_anchor", 0, None, missing_anchor=True)) == ANCHOR_REQUIRED
    assert format_batch(BatchResult("select_all", 2, True, 2)) is None


def test_format_export() -> None:
    assert format_export(ExportResult(0, True)) == "No selected messages match the filters"
    assert format_export(ExportResult(0, False)) == "No messages match the filters"
    assert format_export(ExportResult(5, True, Path("x.txt"))) == "Exported 5 messages"
