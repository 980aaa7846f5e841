"""
File system adapter for the exporter component.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


class AtomicFileSink:
    """Writes each file through a temporary sibling and an atomic replace."""

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


default_sink = AtomicFileSink()
