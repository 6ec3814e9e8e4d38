"""Single-file JSON document store.

Implements the PortfolioStore port. The whole Store lives in one pretty-printed
JSON file which is always read and written in full:

    <base_dir>/portfolios.json
        {"portfolios": [...], "next_number": N}

A missing file is the empty Store. Saves go through a temporary sibling file
that is fsynced and renamed over the target, so a crash mid-write leaves the
previous snapshot intact.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import orjson
from pydantic import ValidationError

from portfolio_generator.config.configs import StoreConfig
from portfolio_generator.errors.errors import (
    DirectoryError,
    ParseError,
    ReadError,
    SerializeError,
    WriteError,
)
from portfolio_generator.ports.portfolio_store import PortfolioStore
from portfolio_generator.types.types import PortfolioData
from portfolio_generator.utils.utility import validation_error_parser

_LOGGER = logging.getLogger(__name__)

_COMPONENT = "store.json"


class JsonFileStore(PortfolioStore):
    def __init__(self, cfg: StoreConfig) -> None:
        self._cfg = cfg
        self._path = cfg.data_path

    @property
    def path(self) -> Path:
        return self._path

    # --- load ---------------------------------------------------

    def load(self) -> PortfolioData:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            _LOGGER.debug(
                "store_missing",
                extra={"event": "store_missing", "path": str(self._path)},
            )
            return PortfolioData.empty()
        except OSError as exc:
            raise ReadError(
                f"Failed to read data: {exc}", path=self._path, component=_COMPONENT
            ) from exc

        data = self._parse(raw)
        _LOGGER.debug(
            "store_loaded",
            extra={
                "event": "store_loaded",
                "path": str(self._path),
                "portfolios": len(data.portfolios),
                "next_number": data.next_number,
            },
        )
        return data

    def _parse(self, raw: bytes) -> PortfolioData:
        try:
            return PortfolioData.model_validate_json(raw)
        except ValidationError as exc:
            errors = validation_error_parser(exc, component=_COMPONENT)
            first = errors[0] if errors else {"path": "<root>", "message": str(exc)}
            raise ParseError(
                f"Failed to parse data: {first['path']}: {first['message']}",
                errors=errors,
                path=self._path,
                component=_COMPONENT,
            ) from exc

    # --- save ---------------------------------------------------

    def save(self, data: PortfolioData) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryError(
                f"Failed to create directory: {exc}",
                path=self._path.parent,
                component=_COMPONENT,
            ) from exc

        payload = self.serialize(data)
        self._atomic_write(payload)
        _LOGGER.debug(
            "store_saved",
            extra={
                "event": "store_saved",
                "path": str(self._path),
                "portfolios": len(data.portfolios),
                "next_number": data.next_number,
                "bytes": len(payload),
            },
        )

    @staticmethod
    def serialize(data: PortfolioData) -> bytes:
        """Pretty, stable form: two-space indent, UTF-8, field order of the model."""
        try:
            return orjson.dumps(data.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
        except (orjson.JSONEncodeError, TypeError, ValueError) as exc:
            raise SerializeError(f"Failed to serialize data: {exc}", component=_COMPONENT) from exc

    def _atomic_write(self, payload: bytes) -> None:
        tmp_fp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with open(tmp_fp, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())

            # Atomic replace
            tmp_fp.replace(self._path)
        except OSError as exc:
            tmp_fp.unlink(missing_ok=True)
            raise WriteError(
                f"Failed to write data: {exc}", path=self._path, component=_COMPONENT
            ) from exc

        # Ensure directory entry is durable (best-effort)
        try:
            dir_fd = os.open(self._path.parent, os.O_DIRECTORY)
        except (OSError, AttributeError):
            return
        try:
            os.fsync(dir_fd)
        except OSError:
            pass
        finally:
            os.close(dir_fd)
