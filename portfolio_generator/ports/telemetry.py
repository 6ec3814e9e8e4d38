"""Telemetry Port Interface.

Contract: Log structured events. Repository operations emit one event per mutation.
"""

from __future__ import annotations

from typing import Any, Protocol


class Telemetry(Protocol):
    def log(self, event: str, **fields: Any) -> None: ...
