"""Validation helpers for the filter inputs.

These only drive the hint under each input while typing. The session's
compiled filters are untouched until the next batch operation.
"""

from __future__ import annotations

from dataclasses import dataclass
import re


@dataclass
class PatternCheck:
    normalized: str | None
    error: str | None = None

    @property
    def hint(self) -> str:
        if self.error:
            return f"invalid pattern, ignored: {self.error}"
        return ""


def check_pattern(raw_value: str) -> PatternCheck:
    raw_value = raw_value.strip()
    if not raw_value:
        return PatternCheck(None)
    try:
        re.compile(raw_value)
    except re.error as exc:
        return PatternCheck(None, str(exc))
    return PatternCheck(raw_value)
