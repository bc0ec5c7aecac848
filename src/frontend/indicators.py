"""Message indicator grid.

One cell per message in transcript order: squares for user messages, circles
for AI messages, blue when checked, and the anchor drawn on an orange
background. Clicking a cell asks the app to jump to that message.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from core.models import MessageRecord

from .constants import ACCENT_BLUE, ANCHOR_ORANGE, UNCHECKED_BLACK

AI_GLYPH = "●"
USER_GLYPH = "■"
CELL_WIDTH = 2


def items_per_row(width: int) -> int:
    return max(1, width // CELL_WIDTH)


def render_indicators(
    corpus: Iterable[MessageRecord], anchor_id: Optional[str], width: int
) -> Text:
    per_row = items_per_row(width)
    text = Text()
    for index, message in enumerate(corpus):
        if index and index % per_row == 0:
            text.append("\n")
        color = ACCENT_BLUE if message.is_checked() else UNCHECKED_BLACK
        style = color
        if message.message_id == anchor_id:
            style = f"bold {color} on {ANCHOR_ORANGE}"
        text.append(AI_GLYPH if message.is_ai else USER_GLYPH, style=style)
        text.append(" ")
    return text


def indicator_index_at(x: int, y: int, width: int, count: int) -> Optional[int]:
    """Map a content offset to a message index, or None for empty space."""

    per_row = items_per_row(width)
    column = x // CELL_WIDTH
    if x < 0 or y < 0 or column >= per_row:
        return None
    index = y * per_row + column
    if index >= count:
        return None
    return index


class IndicatorGrid(Static):
    """Static widget that renders the grid and reports clicked cells."""

    class Picked(Message):
        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._count = 0

    def show(self, corpus: list[MessageRecord], anchor_id: Optional[str]) -> None:
        self._count = len(corpus)
        self.update(render_indicators(corpus, anchor_id, self._grid_width()))

    def _grid_width(self) -> int:
        return self.content_size.width or 40

    def on_click(self, event: events.Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        index = indicator_index_at(offset.x, offset.y, self._grid_width(), self._count)
        if index is not None:
            self.post_message(self.Picked(index))
