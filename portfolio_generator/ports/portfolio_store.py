"""PortfolioStore Port Interface.

Contract: Load & persist the whole Store (portfolios + next_number) as one unit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from portfolio_generator.types.types import PortfolioData


class PortfolioStore(Protocol):
    @property
    def path(self) -> Path: ...

    def load(self) -> PortfolioData: ...

    """
    Return the current Store. A store that was never saved loads as the
    empty Store (no portfolios, next_number = 1) without touching the disk.
    """

    def save(self, data: PortfolioData) -> None: ...

    """
    Replace the persisted Store with `data`. Either the whole snapshot is
    written or the previous one is left in place.
    """
