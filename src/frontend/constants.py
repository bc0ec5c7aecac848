"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT_BLUE = "#60A5FA"
ANCHOR_ORANGE = "#F59E0B"
UNCHECKED_BLACK = "#000000"

TABLE_TEXT_CHARS = 80
PREVIEW_RESET_SECONDS = 2.0
FLASH_SECONDS = 0.2
