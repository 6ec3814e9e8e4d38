"""
define canonical types
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

# -------- Aliases (clarify intent) --------
PortfolioId = str

FIRST_NUMBER = 1


# -------- Value objects --------


class Category(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: StrictStr  # e.g. "healthcare", "finance"
    name: StrictStr
    icon: StrictStr


class DesignTheme(BaseModel):
    model_config = ConfigDict(extra="ignore")
    name: StrictStr
    bg: StrictStr  # background colour, e.g. "#ffffff"
    text: StrictStr
    accent: StrictStr
    border: StrictStr


# -------- Records --------


class Portfolio(BaseModel):
    """
    One user-authored portfolio record.

    The id is generated outside the store and treated as opaque; the store only
    compares it for equality.
    """

    model_config = ConfigDict(extra="ignore")
    id: StrictStr
    number: StrictInt  # display number
    name: StrictStr
    category: Category
    platform: StrictStr  # "web", "mobile", "desktop"
    description: StrictStr
    design_theme: DesignTheme
    features: list[StrictStr]
    tech_stack: dict[StrictStr, StrictStr]  # key order irrelevant
    screens: list[StrictStr]
    usage_steps: list[StrictStr]
    version: StrictStr
    created_at: StrictStr


class PortfolioData(BaseModel):
    """
    The persisted aggregate (Store): ordered portfolios plus the next display number.
    Order is newest-first and is the display order.
    """

    model_config = ConfigDict(extra="ignore")
    portfolios: list[Portfolio]
    next_number: StrictInt

    @classmethod
    def empty(cls) -> PortfolioData:
        return cls(portfolios=[], next_number=FIRST_NUMBER)

    def find(self, portfolio_id: PortfolioId) -> Optional[Portfolio]:
        for portfolio in self.portfolios:
            if portfolio.id == portfolio_id:
                return portfolio
        return None


# -------- Operation payloads --------


class DeleteRequest(BaseModel):
    id: StrictStr


class ExportRequest(BaseModel):
    portfolio: Portfolio
    content: StrictStr


class ExportResult(BaseModel):
    success: bool
    path: Optional[str] = None


class AppInfo(BaseModel):
    version: str
    name: str
    data_path: str
