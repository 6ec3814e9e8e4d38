from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:
    """Clock adapter that returns the current UTC time."""

    def now(self) -> datetime:
        """Return the current UTC timestamp."""
        return datetime.now(timezone.utc)
