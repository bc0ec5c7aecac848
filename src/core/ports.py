"""Ports (interfaces) used by the selection engine.

Ports define the minimal contracts for transcript hosts and export sinks so
that the core can be reused with different backends.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from core.models import Role


class TranscriptPort(Protocol):
    """Host transcript operations required by the core engine."""

    def list_messages(self) -> list[str]:
        ...

    def role(self, message_id: str) -> Role:
        ...

    def text(self, message_id: str) -> str:
        ...

    def group_of(self, message_id: str) -> Optional[str]:
        ...

    def speaker(self, message_id: str) -> Optional[str]:
        ...

    def title(self) -> Optional[str]:
        ...

    def is_checked(self, message_id: str) -> bool:
        ...

    def toggle(self, message_id: str) -> None:
        ...


class ExportSinkPort(Protocol):
    """Destination for exported transcripts."""

    def write(self, filename: str, content: str) -> Path:
        ...
