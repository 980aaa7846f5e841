"""
Exporter input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from themesync.components.validator import ValidTree
from themesync.formats import ArtifactFormat


@dataclass(frozen=True)
class SerializedArtifact:
    """One rendered file for one collection."""

    collection: str
    filename: str
    format: ArtifactFormat
    data: dict[str, Any]
    content: str


@dataclass(frozen=True)
class ExportInput:
    """Input for exporting a validated tree to a directory."""

    valid: ValidTree
    out_dir: Path | str
    format: ArtifactFormat = ArtifactFormat.JSON


@dataclass(frozen=True)
class ExportOutput:
    """Output from an export run."""

    artifacts: dict[str, SerializedArtifact]
    written: list[Path] = field(default_factory=list)
