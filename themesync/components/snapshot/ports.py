"""
Snapshot component port definitions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class SnapshotSourcePort(Protocol):
    """Port for reading snapshot files and artifact directories."""

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def read_text(self, path: Path) -> str:
        """Read a text file."""
        ...
