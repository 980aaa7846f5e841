"""
Exporter component - write in-sync collections as theme files.
"""

from .component import build_artifact_data, export, run_export, write_artifacts
from .models import ExportInput, ExportOutput, SerializedArtifact
from .ports import ArtifactSinkPort

__all__ = [
    # Entry points
    "run_export",
    "export",
    "build_artifact_data",
    "write_artifacts",
    # Models
    "ExportInput",
    "ExportOutput",
    "SerializedArtifact",
    # Ports
    "ArtifactSinkPort",
]
