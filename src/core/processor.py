"""Selection engine.

This module is host-agnostic. It only relies on ports for the transcript and
the export sink, enabling other hosts or frontends without changes here.

Every batch operation follows the same order:
1) Recompile the filters from the session's raw strings
2) Read a fresh corpus from the host
3) Compute the targets with that single compiled spec
4) Issue all toggles, then wait for them to settle
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from core.corpus import read_corpus
from core.export import ExportResult, build_export_text, export_filename, select_for_export
from core.models import MessageRecord, SelectionStatus
from core.ports import ExportSinkPort, TranscriptPort
from core.range_selector import range_from
from core.selection import classify, eligible_messages
from core.session import SessionContext
from core.toggle import ToggleCoordinator, plan_batch_toggle

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch operation, for the caller to render."""

    operation: str
    targets: int
    desired: Optional[bool]
    changed: int = 0
    missing_anchor: bool = False


class SelectionEngine:
    """Orchestrates filtering, classification, range toggles and export."""

    def __init__(
        self,
        transcript: TranscriptPort,
        coordinator: ToggleCoordinator,
        exporter: Optional[ExportSinkPort] = None,
    ) -> None:
        self._transcript = transcript
        self._coordinator = coordinator
        self._exporter = exporter

    @property
    def coordinator(self) -> ToggleCoordinator:
        return self._coordinator

    def corpus(self) -> list[MessageRecord]:
        return read_corpus(self._transcript)

    def find(self, message_id: str) -> Optional[MessageRecord]:
        for message in self.corpus():
            if message.message_id == message_id:
                return message
        return None

    def select_anchor(self, session: SessionContext, message_id: str) -> Optional[MessageRecord]:
        """Make ``message_id`` the anchor. Unknown ids leave the anchor as is."""

        message = self.find(message_id)
        if message is None:
            LOGGER.info("Ignoring anchor %s: not in the transcript", message_id)
            return None
        session.anchor = message
        session.recompile_filters()
        return message

    def status(self, session: SessionContext) -> SelectionStatus:
        return classify(self.corpus(), session.filters, session.ai_only, session.anchor)

    async def select_all(self, session: SessionContext) -> BatchResult:
        spec = session.recompile_filters()
        targets = eligible_messages(self.corpus(), spec, session.ai_only)
        return await self._apply_planned("select_all", targets)

    async def toggle_from_anchor(self, session: SessionContext) -> BatchResult:
        spec = session.recompile_filters()
        if session.anchor is None:
            return BatchResult("toggle_from_anchor", 0, None, missing_anchor=True)
        targets = range_from(session.anchor, self.corpus(), session.ai_only, spec)
        return await self._apply_planned("toggle_from_anchor", targets)

    async def invert(self, session: SessionContext) -> BatchResult:
        spec = session.recompile_filters()
        targets = eligible_messages(self.corpus(), spec, session.ai_only)
        before = [message.is_checked() for message in targets]
        after = await self._coordinator.invert(message.message_id for message in targets)
        changed = sum(1 for old, new in zip(before, after) if old != new)
        LOGGER.info("invert: %s targets, %s changed", len(targets), changed)
        return BatchResult("invert", len(targets), None, changed)

    async def toggle_one(self, message_id: str) -> bool:
        """Flip a single message, as a user click on its checkbox would."""

        desired = not self._coordinator.effective_state(message_id)
        return await self._coordinator.apply_toggle(message_id, desired)

    async def _apply_planned(self, operation: str, targets: list[MessageRecord]) -> BatchResult:
        desired = plan_batch_toggle(targets)
        if desired is None:
            LOGGER.info("%s: nothing to toggle", operation)
            return BatchResult(operation, 0, None)
        before = [message.is_checked() for message in targets]
        after = await self._coordinator.apply_batch(
            (message.message_id for message in targets), desired
        )
        changed = sum(1 for old, new in zip(before, after) if old != new)
        LOGGER.info(
            "%s: %s targets -> %s, %s changed",
            operation,
            len(targets),
            "checked" if desired else "unchecked",
            changed,
        )
        return BatchResult(operation, len(targets), desired, changed)

    def export(self, session: SessionContext, selected_only: bool = True) -> ExportResult:
        """Export eligible (and optionally checked) messages as text."""

        spec = session.recompile_filters()
        messages = select_for_export(self.corpus(), spec, session.ai_only, selected_only)
        if not messages:
            return ExportResult(0, selected_only)

        title = self._transcript.title()
        content = build_export_text(title, messages, session.bot_name, session.user_name)
        if self._exporter is None:
            raise RuntimeError("No exporter configured")
        path = self._exporter.write(export_filename(title), content)
        LOGGER.info("Exported %s messages to %s", len(messages), path)
        return ExportResult(len(messages), selected_only, path)

