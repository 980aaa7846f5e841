"""
Exporter component - serialize a validated tree into theme files.

One artifact is produced per in-sync collection. Each artifact maps theme
name to a nested mapping keyed by lower camel case segment names, with
aliases flattened to their resolved values:

    {"Default": {"typography": {"fontSize": {"m": "1rem"}}}}

Everything is rendered in memory before the first file is written, and each
file is replaced atomically, so a failed run never leaves a partial artifact.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from themesync import formats
from themesync.components.registry import export_key
from themesync.components.tree import TokenTree
from themesync.components.validator import ValidTree
from themesync.errors import ExportOnInvalidTree
from themesync.formats import ArtifactFormat

from .adapters import default_sink
from .models import ExportInput, ExportOutput, SerializedArtifact
from .ports import ArtifactSinkPort

logger = logging.getLogger(__name__)


def build_artifact_data(tree: TokenTree, collection: str) -> dict[str, Any]:
    """Nested ``{theme: {group: {...: value}}}`` mapping for one collection."""
    themes = tree.themes(collection)
    data: dict[str, Any] = {theme: {} for theme in themes}

    for path, _ in tree.walk():
        if path.collection != collection:
            continue
        resolved = tree.resolve_alias(path)
        for theme in themes:
            node = data[theme]
            for segment in path.groups:
                node = node.setdefault(export_key(segment), {})
            node[export_key(path.name)] = resolved.values[theme]

    return data


def export(
    valid: ValidTree, *, fmt: ArtifactFormat = ArtifactFormat.JSON
) -> dict[str, SerializedArtifact]:
    """
    Render one artifact per in-sync collection.

    Raises ExportOnInvalidTree unless given a ValidTree whose tree has not
    changed since validation.
    """
    if not isinstance(valid, ValidTree):
        raise ExportOnInvalidTree("Export requires a tree that passed validation")
    if not valid.is_current:
        raise ExportOnInvalidTree("Tree changed after validation; validate it again")

    tree = valid.tree
    registry = tree.registry
    artifacts: dict[str, SerializedArtifact] = {}

    for collection in registry.synced_collections():
        export_name = registry.collection(collection).export_name
        assert export_name is not None
        data = build_artifact_data(tree, collection)
        artifacts[collection] = SerializedArtifact(
            collection=collection,
            filename=f"{export_name}.{fmt.extension}",
            format=fmt,
            data=data,
            content=formats.render(data, fmt),
        )
        logger.debug("Rendered %s as %s", collection, artifacts[collection].filename)

    return artifacts


def write_artifacts(
    artifacts: dict[str, SerializedArtifact],
    out_dir: Path | str,
    sink: ArtifactSinkPort = default_sink,
) -> list[Path]:
    """Write rendered artifacts into ``out_dir``. Returns the written paths."""
    directory = Path(out_dir)
    written: list[Path] = []
    for collection in sorted(artifacts):
        artifact = artifacts[collection]
        target = directory / artifact.filename
        sink.write_text(target, artifact.content)
        written.append(target)
        logger.info("Wrote %s", target)
    return written


# --- Component Entry Points ---


def run_export(inp: ExportInput, *, sink: ArtifactSinkPort = default_sink) -> ExportOutput:
    """
    Export a validated tree to a directory.

    Args:
        inp: Input containing the validated tree, output directory and format.
        sink: Port used to write files.

    Returns:
        ExportOutput with the rendered artifacts and written paths.
    """
    artifacts = export(inp.valid, fmt=inp.format)
    written = write_artifacts(artifacts, inp.out_dir, sink)
    return ExportOutput(artifacts=artifacts, written=written)
