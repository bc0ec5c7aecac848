"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any host-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class Role(str, Enum):
    AI = "ai"
    USER = "user"

    @classmethod
    def parse(cls, raw: str) -> "Role":
        value = str(raw).strip().lower()
        if value in {"ai", "bot", "assistant"}:
            return cls.AI
        if value in {"user", "human"}:
            return cls.USER
        raise ValueError(f"Unsupported message role: {raw!r}")


def _never_checked(message_id: str) -> bool:
    return False


@dataclass(frozen=True)
class MessageRecord:
    """Read-only view over one message of the host transcript.

    Checked state is not copied into the record: ``is_checked`` asks the host
    every time, because toggles change it underneath the record.
    """

    message_id: str
    role: Role
    text: str
    group_id: Optional[str]
    speaker: Optional[str] = None
    checked_reader: Callable[[str], bool] = field(
        default=_never_checked, repr=False, compare=False
    )

    @property
    def is_ai(self) -> bool:
        return self.role is Role.AI

    def is_checked(self) -> bool:
        return bool(self.checked_reader(self.message_id))


class StatusKind(str, Enum):
    NONE_ELIGIBLE = "none_eligible"
    NONE_CHECKED = "none_checked"
    ALL_CHECKED = "all_checked"
    CONTIGUOUS_FORWARD = "contiguous_forward"
    CONTIGUOUS_BACKWARD = "contiguous_backward"
    PARTIAL = "partial"


@dataclass(frozen=True)
class SelectionStatus:
    """Derived classification of the checked set; never stored."""

    kind: StatusKind
    checked: int = 0
    total: int = 0
