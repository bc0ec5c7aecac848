"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToggleConfig:
    """Settle window used by the toggle coordinator.

    The host is re-read once per window until it reports the requested state,
    for at most ``settle_windows`` windows.
    """

    settle_ms: int = 50
    settle_windows: int = 10

    @property
    def settle_seconds(self) -> float:
        return max(self.settle_ms, 0) / 1000.0

