"""Three-stage regex filter (core domain).

A filter is made of up to three independent stages evaluated in a fixed
priority order:

1. ``include1`` must match when present.
2. ``exclude`` must not match when present.
3. ``include2`` must match when present.

Patterns are compiled once per batch operation, never per keystroke, so a
half-typed pattern cannot break anything.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Optional, Tuple

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    """Compiled filter stages. An absent stage accepts everything."""

    include1: Optional[re.Pattern] = None
    exclude: Optional[re.Pattern] = None
    include2: Optional[re.Pattern] = None
    warnings: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.include1 is None and self.exclude is None and self.include2 is None


def _compile_stage(raw: Optional[str], stage: str, warnings: list[str]) -> Optional[re.Pattern]:
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        # An invalid pattern degrades to "no filter" rather than "match nothing".
        LOGGER.warning("Invalid %s pattern %r ignored: %s", stage, value, exc)
        warnings.append(f"{stage}: {exc}")
        return None


def compile_filters(
    raw_include1: Optional[str] = None,
    raw_exclude: Optional[str] = None,
    raw_include2: Optional[str] = None,
) -> FilterSpec:
    """Compile raw user input into a FilterSpec. Never raises on bad input."""

    warnings: list[str] = []
    include1 = _compile_stage(raw_include1, "include1", warnings)
    exclude = _compile_stage(raw_exclude, "exclude", warnings)
    include2 = _compile_stage(raw_include2, "include2", warnings)
    return FilterSpec(
        include1=include1,
        exclude=exclude,
        include2=include2,
        warnings=tuple(warnings),
    )


def matches(text: str, spec: FilterSpec) -> bool:
    """Return True when the text passes every present stage."""

    if spec.include1 is not None and not spec.include1.search(text):
        return False
    if spec.exclude is not None and spec.exclude.search(text):
        return False
    if spec.include2 is not None and not spec.include2.search(text):
        return False
    return True
