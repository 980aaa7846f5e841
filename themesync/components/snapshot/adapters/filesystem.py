"""
File system adapter for the snapshot component.
"""

from __future__ import annotations

from pathlib import Path


class LocalFileSystemAdapter:
    """Adapter for local file system reads."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()


default_filesystem = LocalFileSystemAdapter()
