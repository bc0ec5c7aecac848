from __future__ import annotations

from core.models import MessageRecord, Role
from frontend.constants import ACCENT_BLUE, ANCHOR_ORANGE
from frontend.indicators import (
    AI_GLYPH,
    USER_GLYPH,
    indicator_index_at,
    items_per_row,
    render_indicators,
)
from frontend.validators import check_pattern


def _corpus(checked: set[str]) -> list[MessageRecord]:
    return [
        MessageRecord(key, role, key, "g", checked_reader=lambda item: item in checked)
        for key, role in [("u1", Role.USER), ("a1", Role.AI), ("u2", Role.USER), ("a2", Role.AI)]
    ]


def test_items_per_row_never_zero() -> None:
    assert items_per_row(0) == 1
    assert items_per_row(1) == 1
    assert items_per_row(10) == 5


def test_render_uses_shapes_and_wraps_rows() -> None:
    text = render_indicators(_corpus(set()), None, width=4)
    assert text.plain == f"{USER_GLYPH} {AI_GLYPH} \n{USER_GLYPH} {AI_GLYPH} "


def test_render_marks_checked_and_anchor() -> None:
    text = render_indicators(_corpus({"a1"}), "u2", width=40)
    styles = [str(span.style) for span in text.spans]
    assert any(ACCENT_BLUE in style for style in styles)
    assert any(ANCHOR_ORANGE in style for style in styles)


def test_indicator_index_at() -> None:
    assert indicator_index_at(0, 0, width=4, count=4) == 0
    assert indicator_index_at(3, 0, width=4, count=4) == 1
    assert indicator_index_at(2, 1, width=4, count=4) == 3
    assert indicator_index_at(4, 0, width=4, count=4) is None
    assert indicator_index_at(0, 2, width=4, count=4) is None


def test_check_pattern_hint() -> None:
    assert check_pattern("").hint == ""
    assert check_pattern("h.*").normalized == "h.*"
    bad = check_pattern("(oops")
    assert bad.normalized is None
    assert bad.hint.startswith("invalid pattern, ignored")
