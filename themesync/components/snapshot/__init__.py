"""
Snapshot component - load snapshot files and exported artifacts into a tree.
"""

from .component import (
    build_tree,
    load_snapshot,
    parse_snapshot,
    read_artifact_dir,
    run_load,
    snapshot_from_artifacts,
)
from .models import (
    SNAPSHOT_SCHEMA_VERSION,
    CollectionEntry,
    LoadSnapshotInput,
    LoadSnapshotOutput,
    Snapshot,
    VariableEntry,
)
from .ports import SnapshotSourcePort

__all__ = [
    # Entry points
    "run_load",
    "load_snapshot",
    "parse_snapshot",
    "build_tree",
    "read_artifact_dir",
    "snapshot_from_artifacts",
    # Models
    "SNAPSHOT_SCHEMA_VERSION",
    "CollectionEntry",
    "LoadSnapshotInput",
    "LoadSnapshotOutput",
    "Snapshot",
    "VariableEntry",
    # Ports
    "SnapshotSourcePort",
]
