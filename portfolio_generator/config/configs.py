from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

"""
Here, we collect all the different configs
"""

APP_NAME = "Portfolio Generator"
APP_VERSION = "1.0.0"
APP_DIR_NAME = ".portfolio-generator"
DATA_FILE_NAME = "portfolios.json"
EXPORT_EXTENSION = ".md"
ENV_PREFIX = "PGEN_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


# --- Store Section ---


@dataclass(frozen=True)
class StoreConfig:
    """Resolved location of the data file: <base_dir>/<file_name>."""

    base_dir: Path
    file_name: str = DATA_FILE_NAME

    @property
    def data_path(self) -> Path:
        return self.base_dir / self.file_name


# --- Application Section ---


class AppConfig(BaseModel):
    """
    Validated application settings after layering defaults, file, env and CLI.
    None for a directory means "resolve from the host".
    """

    model_config = ConfigDict(extra="forbid")
    data_dir: Optional[Path] = Field(default=None, description="Override for the data directory")
    data_file: str = Field(default=DATA_FILE_NAME, min_length=1, description="Data file name")
    downloads_dir: Optional[Path] = Field(default=None, description="Override for export target")
    log_level: LogLevel = Field(default="WARNING", description="Root log level for the CLI")
    telemetry_path: Optional[Path] = Field(
        default=None, description="JSONL sink for store events; disabled when unset"
    )
