"""
In-process command surface.

Maps the operation names a UI shell invokes onto the repository and turns every
store or input failure into a plain error message, the way an IPC bridge
reports `Result<T, String>` back to its caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from portfolio_generator.core.repository import PortfolioRepository
from portfolio_generator.errors.errors import PortfolioStoreError
from portfolio_generator.types.types import DeleteRequest, ExportRequest, Portfolio
from portfolio_generator.utils.utility import validation_error_parser

_LOGGER = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], BaseModel]


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error}


class CommandDispatcher:
    def __init__(self, repository: PortfolioRepository) -> None:
        self._repo = repository
        self._handlers: dict[str, Handler] = {
            "get_portfolios": self._get_portfolios,
            "save_portfolio": self._save_portfolio,
            "delete_portfolio": self._delete_portfolio,
            "export_markdown": self._export_markdown,
            "get_app_info": self._get_app_info,
        }

    @property
    def commands(self) -> list[str]:
        return sorted(self._handlers)

    def invoke(self, command: str, payload: Optional[Mapping[str, Any]] = None) -> CommandResult:
        handler = self._handlers.get(command)
        if handler is None:
            return CommandResult(ok=False, error=f"Unknown command: {command}")

        try:
            result = handler(payload or {})
        except ValidationError as exc:
            errors = validation_error_parser(exc, component=f"commands.{command}")
            message = "; ".join(f"{err['path']}: {err['message']}" for err in errors)
            _LOGGER.info(
                "command_invalid_input",
                extra={"event": "command_invalid_input", "command": command, "errors": errors},
            )
            return CommandResult(ok=False, error=f"Invalid input for {command}: {message}")
        except PortfolioStoreError as exc:
            _LOGGER.info(
                "command_failed",
                extra={"event": "command_failed", "command": command, "error": str(exc)},
            )
            return CommandResult(ok=False, error=exc.message)

        return CommandResult(ok=True, data=result.model_dump(mode="json"))

    # --- handlers -----------------------------------------------

    def _get_portfolios(self, payload: Mapping[str, Any]) -> BaseModel:
        return self._repo.get_portfolios()

    def _save_portfolio(self, payload: Mapping[str, Any]) -> BaseModel:
        portfolio = Portfolio.model_validate(payload.get("portfolio"))
        return self._repo.save_portfolio(portfolio)

    def _delete_portfolio(self, payload: Mapping[str, Any]) -> BaseModel:
        request = DeleteRequest.model_validate(dict(payload))
        return self._repo.delete_portfolio(request.id)

    def _export_markdown(self, payload: Mapping[str, Any]) -> BaseModel:
        request = ExportRequest.model_validate(payload.get("data"))
        return self._repo.export_markdown(request.portfolio, request.content)

    def _get_app_info(self, payload: Mapping[str, Any]) -> BaseModel:
        return self._repo.get_app_info()
