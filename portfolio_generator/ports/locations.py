"""LocationProvider Port Interface.

Contract: Resolve the host directories the store depends on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class LocationProvider(Protocol):
    def home_dir(self) -> Path: ...

    """
    Return the user's home directory. Raises LocationError if it cannot be
    determined.
    """

    def downloads_dir(self) -> Path: ...

    """
    Return the user's downloads directory, the target of exports. Raises
    LocationError if it cannot be determined.
    """
