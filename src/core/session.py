"""Per-session selection state.

The UI is the only writer. The engine reads it and replaces ``filters`` and
``anchor`` when an operation asks it to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.filters import FilterSpec, compile_filters
from core.models import MessageRecord


@dataclass
class SessionContext:
    include1: str = ""
    exclude: str = ""
    include2: str = ""
    ai_only: bool = False
    bot_name: str = ""
    user_name: str = ""
    anchor: Optional[MessageRecord] = None
    filters: FilterSpec = field(default_factory=FilterSpec)

    def recompile_filters(self) -> FilterSpec:
        self.filters = compile_filters(self.include1, self.exclude, self.include2)
        return self.filters
