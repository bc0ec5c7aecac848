"""Shared status and preview formatting helpers.

Keeping the wording here prevents drift between the TUI and the CLI, and
keeps the core classification free of any presentation.
"""

from __future__ import annotations

from typing import Optional

from core.export import ExportResult
from core.models import MessageRecord, SelectionStatus, StatusKind
from core.processor import BatchResult

PREVIEW_CHARS = 100

ANCHOR_HINT = "Click any message to choose a starting point"
ANCHOR_REQUIRED = "Please click a message first to choose a starting point"

_STATUS_LABELS = {
    StatusKind.NONE_ELIGIBLE: "No selectable messages",
    StatusKind.NONE_CHECKED: "No messages selected",
    StatusKind.ALL_CHECKED: "[All selected]",
    StatusKind.CONTIGUOUS_FORWARD: "[Selected current and following]",
    StatusKind.CONTIGUOUS_BACKWARD: "[Selected current and preceding]",
}


def format_status(status: SelectionStatus) -> str:
    """Return the status label shown above the indicator grid."""

    if status.kind is StatusKind.PARTIAL:
        return f"[Partially selected: {status.checked}/{status.total}]"
    return _STATUS_LABELS[status.kind]


def clip_text(value: str, limit: int = PREVIEW_CHARS) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "..."


def role_label(message: MessageRecord) -> str:
    return "[AI message]" if message.is_ai else "[User message]"


def format_preview(anchor: Optional[MessageRecord]) -> str:
    """Return the preview line for the current anchor."""

    if anchor is None:
        return ANCHOR_HINT
    text = anchor.text or "(no text content)"
    return f"Selected {role_label(anchor)}: {clip_text(text)}"


def format_batch(result: BatchResult) -> Optional[str]:
    """Return feedback for a batch, or None when the status line says enough."""

    if result.missing_anchor:
        return ANCHOR_REQUIRED
    return None


def format_export(result: ExportResult) -> str:
    if result.count == 0:
        if result.selected_only:
            return "No selected messages match the filters"
        return "No messages match the filters"
    return f"Exported {result.count} messages"
