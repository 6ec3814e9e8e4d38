"""JSON Lines Telemetry adapter.

Implements the Telemetry port by appending structured JSON objects (one per
line) to a sink file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from portfolio_generator.adapters.clock import SystemClock
from portfolio_generator.ports.clock import Clock

_LOGGER = logging.getLogger(__name__)


class JsonlTelemetry:
    _REDACTION_TOKEN = "***REDACTED***"
    _DEFAULT_SECRET_KEYS = frozenset({"content"})  # export payloads stay out of the log

    def __init__(
        self,
        session_id: str,
        app_version: str,
        sink_path: Path,
        clock: Optional[Clock] = None,
        secret_keys: Iterable[str] = _DEFAULT_SECRET_KEYS,
    ) -> None:
        self._session_id = str(session_id)
        self._app_version = str(app_version)
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        self._clock = clock or SystemClock()
        self._secret_keys = frozenset(secret_keys)

    def log(self, event: str, **fields: Any) -> None:
        if not event:
            raise ValueError("Telemetry event name must be non-empty")

        sanitized_fields, redacted = self._sanitize_fields(fields)

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": self._clock.now().isoformat(),
            "session_id": self._session_id,
            "app_version": self._app_version,
            **sanitized_fields,
        }
        if redacted:
            record["redacted_fields"] = sorted(redacted)

        self._write_record(record)

    def _sanitize_fields(self, fields: Mapping[str, Any]) -> tuple[dict[str, Any], set[str]]:
        sanitized: dict[str, Any] = {}
        redacted: set[str] = set()
        for key, value in fields.items():
            if key in self._secret_keys:
                sanitized[key] = self._REDACTION_TOKEN
                redacted.add(key)
            else:
                sanitized[key] = value

        return sanitized, redacted

    def _write_record(self, record: Mapping[str, Any]) -> None:
        payload = json.dumps(
            record, sort_keys=True, separators=(",", ":"), ensure_ascii=True, default=str
        )
        # a broken sink never fails the operation being recorded
        try:
            self._sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self._sink_path.open("a", encoding="utf-8") as handle:
                handle.write(payload + "\n")
        except OSError as exc:
            _LOGGER.warning(
                "telemetry_write_failed",
                extra={
                    "event": "telemetry_write_failed",
                    "telemetry_event": record.get("event"),
                    "sink_path": str(self._sink_path),
                    "error": str(exc),
                },
            )


class NullTelemetry:
    """Telemetry that drops every event."""

    def log(self, event: str, **fields: Any) -> None:
        return None
