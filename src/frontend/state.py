"""State container for panel feedback that outlives a single refresh."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class PanelState:
    status: str = ""
    last_export: Path | None = None
    error: str | None = None
