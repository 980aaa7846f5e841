"""
Exporter component port definitions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ArtifactSinkPort(Protocol):
    """Port for writing rendered artifacts."""

    def write_text(self, path: Path, content: str) -> None:
        """Write a file so that readers see either the old or the new content."""
        ...
