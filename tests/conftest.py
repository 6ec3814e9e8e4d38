from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import pytest

from portfolio_generator.adapters.json_store import JsonFileStore
from portfolio_generator.adapters.locations import SystemLocations
from portfolio_generator.config.configs import StoreConfig
from portfolio_generator.core.repository import PortfolioRepository
from portfolio_generator.types.types import Portfolio


@dataclass
class StubTelemetry:
    events: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def log(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@dataclass
class FixedClock:
    at: datetime = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.at


def portfolio_dict(id: str = "a", number: int = 1, name: str = "X", **overrides: Any) -> dict:
    data = {
        "id": id,
        "number": number,
        "name": name,
        "category": {"id": "finance", "name": "Finance", "icon": "◆"},
        "platform": "web",
        "description": "Budget tracker",
        "design_theme": {
            "name": "Minimal Light",
            "bg": "#ffffff",
            "text": "#1a1a1a",
            "accent": "#3b82f6",
            "border": "#e5e5e5",
        },
        "features": ["Responsive design", "RESTful API"],
        "tech_stack": {"frontend": "React 18", "backend": "FastAPI"},
        "screens": ["Dashboard", "Settings"],
        "usage_steps": ["Sign up", "Add an account"],
        "version": "1.0.0",
        "created_at": "2025-01-02T10:00:00+00:00",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_portfolio_dict() -> Callable[..., dict]:
    return portfolio_dict


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def make_portfolio() -> Callable[..., Portfolio]:
    def _make(id: str = "a", number: int = 1, name: str = "X", **overrides: Any) -> Portfolio:
        return Portfolio.model_validate(portfolio_dict(id, number, name, **overrides))

    return _make


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".portfolio-generator"


@pytest.fixture
def downloads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "Downloads"
    path.mkdir()
    return path


@pytest.fixture
def store(data_dir: Path) -> JsonFileStore:
    return JsonFileStore(StoreConfig(base_dir=data_dir))


@pytest.fixture
def telemetry() -> StubTelemetry:
    return StubTelemetry()


@pytest.fixture
def repository(
    store: JsonFileStore, tmp_path: Path, downloads_dir: Path, telemetry: StubTelemetry
) -> PortfolioRepository:
    locations = SystemLocations(home=tmp_path / "home", downloads=downloads_dir, environ={})
    return PortfolioRepository(store, locations, telemetry)
