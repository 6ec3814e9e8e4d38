from __future__ import annotations

import uuid
from typing import Any, Mapping

from portfolio_generator.ports.clock import Clock
from portfolio_generator.types.types import Portfolio, PortfolioData

DEFAULT_VERSION = "1.0.0"


def new_portfolio_from(fields: Mapping[str, Any], data: PortfolioData, clock: Clock) -> Portfolio:
    """
    Complete a portfolio draft before it is upserted.

    Missing bookkeeping fields are filled in: `number` from the Store's
    next_number, a fresh UUID4 `id`, `created_at` from the clock (ISO-8601, UTC)
    and `version` "1.0.0". Missing list/map fields start empty. Fields that are
    present are kept as given and validated by the Portfolio model.
    """
    draft: dict[str, Any] = {
        "features": [],
        "tech_stack": {},
        "screens": [],
        "usage_steps": [],
        "description": "",
        "version": DEFAULT_VERSION,
    }
    draft.update(fields)
    draft.setdefault("id", str(uuid.uuid4()))
    draft.setdefault("number", data.next_number)
    draft.setdefault("created_at", clock.now().isoformat())
    return Portfolio.model_validate(draft)
