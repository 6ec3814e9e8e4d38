"""
Custom exceptions for the portfolio store.

Exception hierarchy:
- PortfolioStoreError (base)
  - LocationError: home or downloads directory cannot be resolved
  - ReadError: the data file exists but cannot be read
  - WriteError: a data or export file cannot be written
  - ParseError: on-disk content is not a valid Store
  - DirectoryError: the data directory cannot be created
  - SerializeError: the in-memory Store cannot be serialized
  - ConfigurationError: invalid application configuration

None of these are retried; they abort the current operation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

PathLike = Union[str, Path]


class PortfolioStoreError(Exception):
    """Base exception for all portfolio store errors."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[PathLike] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.component = component
        self.details = details or {}
        super().__init__(message)

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.path:
            parts.append(f"[path={self.path}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class LocationError(PortfolioStoreError):
    """Raised when a required OS directory (home, downloads) cannot be resolved."""

    def __init__(
        self,
        message: str,
        *,
        location: Optional[str] = None,
        path: Optional[PathLike] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.location = location
        details = details or {}
        if location:
            details["location"] = location
        super().__init__(message, path=path, component=component, details=details)


class ReadError(PortfolioStoreError):
    """Raised when the data file exists but reading it fails."""


class WriteError(PortfolioStoreError):
    """Raised when writing the data file or an export file fails."""


class ParseError(PortfolioStoreError):
    """Raised when file content is not a well-formed serialization of the Store."""

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[list[dict[str, str]]] = None,
        path: Optional[PathLike] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.errors = errors or []
        details = details or {}
        if self.errors:
            details["fields"] = sorted({err["path"] for err in self.errors})
        super().__init__(message, path=path, component=component, details=details)


class DirectoryError(PortfolioStoreError):
    """Raised when the directory holding the data file cannot be created."""


class SerializeError(PortfolioStoreError):
    """Raised when the Store cannot be serialized. Unreachable for valid models."""


class ConfigurationError(PortfolioStoreError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        path: Optional[PathLike] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, path=path, component=component, details=details)
