"""Clock Port Interface.

Contract: Provides the current UTC timestamp, used to stamp new portfolios and telemetry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return current UTC time (datetime, tz-aware)."""
        ...
