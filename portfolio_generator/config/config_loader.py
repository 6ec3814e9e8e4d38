"""
Purpose:
    - Load an optional TOML config file
    - Merge configuration layers (defaults < file < environment < cli)
    - Validate the merged result into an AppConfig

Example file:

    data_dir = "~/portfolios"
    downloads_dir = "/tmp/exports"
    log_level = "INFO"
    telemetry_path = "events.log.jsonl"
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from portfolio_generator.adapters.telemetry.jsonl import NullTelemetry
from portfolio_generator.config.configs import ENV_PREFIX, AppConfig
from portfolio_generator.errors.errors import ConfigurationError
from portfolio_generator.ports.telemetry import Telemetry
from portfolio_generator.utils.utility import validation_error_parser

ALLOWED_KEYS: set[str] = set(AppConfig.model_fields.keys())
PATH_KEYS: set[str] = {"data_dir", "downloads_dir", "telemetry_path"}


class ConfigLoader:
    """
    Config-loader; layering toml file, environment and cli overrides.
    """

    def __init__(
        self,
        telemetry: Optional[Telemetry] = None,
        environ: Optional[Mapping[str, str]] = None,
        env_prefix: str = ENV_PREFIX,
    ) -> None:
        if not env_prefix:
            raise ValueError("Environment prefix must be a non-empty string")
        self.telemetry = telemetry or NullTelemetry()
        self._environ = os.environ if environ is None else environ
        self._env_prefix = env_prefix

    # --- layers -------------------------------------------------

    def load_file(self, file_name: str | Path) -> dict[str, Any]:
        path = Path(file_name).expanduser()
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}", path=path)

        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in config file: {exc}", path=path) from exc
        except OSError as exc:
            raise ConfigurationError(f"Failed to read config file: {exc}", path=path) from exc

        # relative paths in the file are relative to the file itself
        for key in PATH_KEYS & set(data):
            value = data[key]
            if isinstance(value, str) and not Path(value).expanduser().is_absolute():
                data[key] = str(path.parent / value)
        return data

    def env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key in ALLOWED_KEYS:
            env_var = f"{self._env_prefix}{key.upper()}"
            value = self._environ.get(env_var)
            if value:
                overrides[key] = value
        return overrides

    # --- pipeline (resolve) -------------------------------------

    def resolve(
        self,
        file_cfg: Optional[Mapping[str, Any]] = None,
        cli_overrides: Optional[Mapping[str, Any]] = None,
    ) -> AppConfig:
        """
        1. Start from AppConfig defaults
        2. Merge file, environment and cli layers (later layers win)
        3. Validate the merged mapping into an AppConfig
        """
        defaults = AppConfig().model_dump()
        config: Mapping[str, Any] = dict(defaults)
        for layer_name, layer in (
            ("file", file_cfg),
            ("env", self.env_overrides()),
            ("cli", cli_overrides),
        ):
            if not layer:
                continue
            self._check_keys(layer_name, layer)
            config = {**config, **layer}

        try:
            resolved = AppConfig.model_validate(config)
        except ValidationError as exc:
            parsed_error = validation_error_parser(exc, component="config.schema")
            self.telemetry.log(
                event="config_validation_error",
                layer="schema",
                errors=parsed_error,
            )
            first = parsed_error[0]
            raise ConfigurationError(
                f"Invalid value for '{first['path']}': {first['message']}",
                field=first["path"],
                value=config.get(first["path"]),
            ) from exc

        self.telemetry.log(
            event="config_resolved",
            config_keys_total=len(ALLOWED_KEYS),
            overridden=sorted(k for k, v in resolved.model_dump().items() if v != defaults[k]),
        )
        return resolved

    def _check_keys(self, layer_name: str, layer: Mapping[str, Any]) -> None:
        unexpected = set(layer) - ALLOWED_KEYS
        if unexpected:
            self.telemetry.log(
                event="config_validation_error",
                layer=layer_name,
                step="unexpected keys",
                keys=sorted(unexpected),
            )
            raise ConfigurationError(
                f"Unexpected config key(s) in {layer_name} layer: {', '.join(sorted(unexpected))}",
                field=sorted(unexpected)[0],
            )
