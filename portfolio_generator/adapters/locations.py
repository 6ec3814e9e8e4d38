from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Mapping, Optional

from portfolio_generator.errors.errors import LocationError
from portfolio_generator.ports.locations import LocationProvider

_LOGGER = logging.getLogger(__name__)

_DOWNLOAD_KEY = "XDG_DOWNLOAD_DIR"
_USER_DIRS_FILE = "user-dirs.dirs"


class SystemLocations(LocationProvider):
    def __init__(
        self,
        home: Optional[Path] = None,
        downloads: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Resolve host directories, preferring explicit overrides over the environment.
        """
        self._home = Path(home) if home is not None else None
        self._downloads = Path(downloads) if downloads is not None else None
        self._environ = os.environ if environ is None else environ

    def home_dir(self) -> Path:
        if self._home is not None:
            return self._home.expanduser().absolute()
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as exc:
            raise LocationError(
                "Failed to get home directory", location="home", component="locations"
            ) from exc
        return home.absolute()

    def downloads_dir(self) -> Path:
        """
        Resolution order: override, XDG_DOWNLOAD_DIR, user-dirs.dirs, <home>/Downloads.
        """
        if self._downloads is not None:
            return self._downloads.expanduser().absolute()

        try:
            home = self.home_dir()
        except LocationError as exc:
            raise LocationError(
                "Failed to get downloads directory", location="downloads", component="locations"
            ) from exc

        raw = self._environ.get(_DOWNLOAD_KEY) or self._read_user_dirs(home)
        if raw:
            resolved = self._expand(raw, home)
            _LOGGER.debug(
                "downloads_dir_resolved",
                extra={"event": "downloads_dir_resolved", "path": str(resolved), "source": "xdg"},
            )
            return resolved

        fallback = home / "Downloads"
        if fallback.is_dir():
            _LOGGER.debug(
                "downloads_dir_resolved",
                extra={"event": "downloads_dir_resolved", "path": str(fallback), "source": "home"},
            )
            return fallback

        raise LocationError(
            "Failed to get downloads directory", location="downloads", component="locations"
        )

    def _read_user_dirs(self, home: Path) -> Optional[str]:
        config_home = self._environ.get("XDG_CONFIG_HOME")
        config_dir = Path(config_home) if config_home else home / ".config"
        user_dirs = config_dir / _USER_DIRS_FILE
        try:
            lines = user_dirs.read_text(encoding="utf-8").splitlines()
        except OSError:
            return None

        for line in lines:
            key, sep, value = line.strip().partition("=")
            if sep and key == _DOWNLOAD_KEY:
                parts = shlex.split(value)
                return parts[0] if parts else None
        return None

    @staticmethod
    def _expand(raw: str, home: Path) -> Path:
        # user-dirs.dirs entries are written as "$HOME/Downloads"
        if raw.startswith("$HOME"):
            raw = str(home) + raw[len("$HOME") :]
        return Path(raw).expanduser().absolute()
