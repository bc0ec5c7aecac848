"""Checked-state toggling with an explicit settle step (core domain).

Hosts apply a toggle with some delay, and a programmatic toggle can look like
a fresh user click while the control settles. Toggling is therefore split in
two phases: ``request_toggle`` issues the host toggle with an explicit target
state and returns a handle, and ``on_settled`` re-reads the host once per
settle window and releases the guard when the change shows up.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Iterable, Optional

from core.config import ToggleConfig
from core.models import MessageRecord
from core.ports import TranscriptPort

LOGGER = logging.getLogger(__name__)


def plan_batch_toggle(targets: Iterable[MessageRecord]) -> Optional[bool]:
    """Return the single target state for a batch.

    Check everything unless everything is already checked. An empty batch has
    no target state and returns None.
    """

    states = [message.is_checked() for message in targets]
    if not states:
        return None
    return not all(states)


@dataclass(frozen=True)
class PendingToggle:
    """Handle for a requested toggle. ``issued`` is False for no-op requests."""

    message_id: str
    desired: bool
    issued: bool


class ToggleCoordinator:
    """Serializes toggles per message and tracks the settle guard."""

    def __init__(self, transcript: TranscriptPort, config: Optional[ToggleConfig] = None) -> None:
        self._transcript = transcript
        self._config = config or ToggleConfig()
        self._pending: dict[str, PendingToggle] = {}

    @property
    def toggling(self) -> bool:
        """True while any issued toggle has not settled yet."""

        return bool(self._pending)

    def effective_state(self, message_id: str) -> bool:
        # A pending toggle wins over the host, which may not have caught up yet.
        pending = self._pending.get(message_id)
        if pending is not None:
            return pending.desired
        return self._transcript.is_checked(message_id)

    def request_toggle(self, message_id: str, desired: bool) -> PendingToggle:
        """Drive one message towards ``desired``; never read-then-flip later."""

        if self.effective_state(message_id) == desired:
            return PendingToggle(message_id, desired, issued=False)
        self._transcript.toggle(message_id)
        handle = PendingToggle(message_id, desired, issued=True)
        self._pending[message_id] = handle
        return handle

    async def on_settled(self, handle: PendingToggle) -> bool:
        """Wait until the host reports the requested state and return it.

        The guard is only released once the host confirms the change, or after
        ``settle_windows`` windows without confirmation. A handle superseded by
        a newer request returns without touching the newer one.
        """

        message_id = handle.message_id
        confirmed = self._transcript.is_checked(message_id)
        if not handle.issued and message_id not in self._pending:
            return confirmed

        for _ in range(max(self._config.settle_windows, 1)):
            await asyncio.sleep(self._config.settle_seconds)
            confirmed = self._transcript.is_checked(message_id)
            if handle.issued and self._pending.get(message_id) is not handle:
                return confirmed
            if confirmed == handle.desired:
                break
            if not handle.issued and message_id not in self._pending:
                break

        if self._pending.get(message_id) is handle:
            del self._pending[handle.message_id]
            if confirmed != handle.desired:
                LOGGER.warning(
                    "Toggle for %s did not settle (wanted %s, host reports %s)",
                    handle.message_id,
                    handle.desired,
                    confirmed,
                )
        return confirmed

    async def apply_toggle(self, message_id: str, desired: bool) -> bool:
        return await self.on_settled(self.request_toggle(message_id, desired))

    async def apply_batch(self, message_ids: Iterable[str], desired: bool) -> list[bool]:
        """Issue every toggle first, then wait for all of them to settle."""

        handles = [self.request_toggle(message_id, desired) for message_id in message_ids]
        return list(await asyncio.gather(*(self.on_settled(handle) for handle in handles)))

    async def invert(self, message_ids: Iterable[str]) -> list[bool]:
        """Flip each message on its own; there is no shared target state."""

        handles = [
            self.request_toggle(message_id, not self.effective_state(message_id))
            for message_id in message_ids
        ]
        return list(await asyncio.gather(*(self.on_settled(handle) for handle in handles)))
