"""
Portfolio repository: the operations the UI shell (or CLI) invokes.

Every operation is load -> mutate -> save over the whole Store. Nothing is
cached between calls, so the Store returned by an operation is the only source
of truth for the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

from portfolio_generator.adapters.json_store import JsonFileStore
from portfolio_generator.adapters.locations import SystemLocations
from portfolio_generator.adapters.telemetry.jsonl import NullTelemetry
from portfolio_generator.config.configs import (
    APP_DIR_NAME,
    APP_NAME,
    APP_VERSION,
    EXPORT_EXTENSION,
    AppConfig,
    StoreConfig,
)
from portfolio_generator.errors.errors import WriteError
from portfolio_generator.ports.locations import LocationProvider
from portfolio_generator.ports.portfolio_store import PortfolioStore
from portfolio_generator.ports.telemetry import Telemetry
from portfolio_generator.types.types import (
    AppInfo,
    ExportResult,
    Portfolio,
    PortfolioData,
    PortfolioId,
)
from portfolio_generator.utils.utility import export_filename

_LOGGER = logging.getLogger(__name__)


# --- pure Store transitions ----------------------------------


def upsert(data: PortfolioData, portfolio: Portfolio) -> PortfolioData:
    """
    Replace the entry with the same id in place, or insert at the front.
    Only an insert advances next_number, to max(next_number, number + 1).
    """
    portfolios = list(data.portfolios)
    next_number = data.next_number

    index = next((i for i, p in enumerate(portfolios) if p.id == portfolio.id), None)
    if index is not None:
        portfolios[index] = portfolio
    else:
        portfolios.insert(0, portfolio)
        next_number = max(next_number, portfolio.number + 1)

    return PortfolioData(portfolios=portfolios, next_number=next_number)


def remove(data: PortfolioData, portfolio_id: PortfolioId) -> PortfolioData:
    portfolios = [p for p in data.portfolios if p.id != portfolio_id]
    return PortfolioData(portfolios=portfolios, next_number=data.next_number)


# --- repository ----------------------------------------------


class PortfolioRepository:
    def __init__(
        self,
        store: PortfolioStore,
        locations: LocationProvider,
        telemetry: Optional[Telemetry] = None,
        *,
        app_name: str = APP_NAME,
        app_version: str = APP_VERSION,
        export_extension: str = EXPORT_EXTENSION,
    ) -> None:
        self._store = store
        self._locations = locations
        self._telemetry = telemetry or NullTelemetry()
        self._app_name = app_name
        self._app_version = app_version
        self._export_extension = export_extension

    @property
    def store(self) -> PortfolioStore:
        return self._store

    def get_portfolios(self) -> PortfolioData:
        return self._store.load()

    def save_portfolio(self, portfolio: Portfolio) -> PortfolioData:
        current = self._store.load()
        inserted = current.find(portfolio.id) is None

        updated = upsert(current, portfolio)
        self._store.save(updated)

        self._telemetry.log(
            "portfolio_saved",
            portfolio_id=portfolio.id,
            number=portfolio.number,
            inserted=inserted,
            next_number=updated.next_number,
            total=len(updated.portfolios),
        )
        return updated

    def delete_portfolio(self, portfolio_id: PortfolioId) -> PortfolioData:
        current = self._store.load()

        updated = remove(current, portfolio_id)
        self._store.save(updated)

        removed = len(current.portfolios) - len(updated.portfolios)
        self._telemetry.log(
            "portfolio_deleted",
            portfolio_id=portfolio_id,
            removed=removed,
            total=len(updated.portfolios),
        )
        return updated

    def export_markdown(self, portfolio: Portfolio, content: str) -> ExportResult:
        """
        Write pre-rendered `content` to <downloads>/<name, spaces -> '_'>.md.
        An existing file with the same name is overwritten.
        """
        downloads = self._locations.downloads_dir()
        file_path = downloads / export_filename(portfolio.name, self._export_extension)

        try:
            file_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise WriteError(
                f"Failed to write file: {exc}", path=file_path, component="export"
            ) from exc

        _LOGGER.info(
            "portfolio_exported",
            extra={
                "event": "portfolio_exported",
                "portfolio_id": portfolio.id,
                "path": str(file_path),
            },
        )
        self._telemetry.log(
            "portfolio_exported",
            portfolio_id=portfolio.id,
            path=str(file_path),
            content=content,
        )
        return ExportResult(success=True, path=str(file_path))

    def get_app_info(self) -> AppInfo:
        return AppInfo(
            version=self._app_version,
            name=self._app_name,
            data_path=str(self._store.path),
        )


# --- wiring --------------------------------------------------


def resolve_store_config(cfg: AppConfig, locations: LocationProvider) -> StoreConfig:
    """
    <data_dir>/<data_file> when configured, else <home>/.portfolio-generator/<data_file>.
    Raises LocationError when the home directory is needed and unavailable.
    """
    if cfg.data_dir is not None:
        base_dir = cfg.data_dir.expanduser().absolute()
    else:
        base_dir = locations.home_dir() / APP_DIR_NAME
    return StoreConfig(base_dir=base_dir, file_name=cfg.data_file)


def build_repository(
    cfg: AppConfig,
    *,
    locations: Optional[LocationProvider] = None,
    telemetry: Optional[Telemetry] = None,
) -> PortfolioRepository:
    locations = locations or SystemLocations(downloads=cfg.downloads_dir)
    store = JsonFileStore(resolve_store_config(cfg, locations))
    return PortfolioRepository(store, locations, telemetry)
