"""
Snapshot component - the load stage.

Parses a snapshot file (YAML or JSON) or a directory of exported artifacts
into a fresh TokenTree.

Structural problems (unreadable input, malformed YAML, a document that does
not fit the snapshot model, bad path syntax) stop the load immediately.
Insert problems (unknown collection, duplicate path, invalid type) are
collected so the caller sees every one of them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from themesync import formats
from themesync.components.registry import SchemaRegistry
from themesync.components.tree import PATH_SEPARATOR, TokenPath, TokenTree, Variable, infer_type
from themesync.errors import SnapshotParseError, ThemeSyncError, UnknownCollection, Violation
from themesync.formats import ArtifactFormat
from themesync.rules import VariableType

from .adapters import default_filesystem
from .models import (
    CollectionEntry,
    LoadSnapshotInput,
    LoadSnapshotOutput,
    Snapshot,
    VariableEntry,
)
from .ports import SnapshotSourcePort

logger = logging.getLogger(__name__)


def parse_snapshot(text: str, *, source: str = "<string>") -> Snapshot:
    """Parse snapshot text. Raises SnapshotParseError on malformed input."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SnapshotParseError(f"Invalid YAML: {e}", path=source) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotParseError("Snapshot must be a mapping", path=source)

    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotParseError(f"Snapshot does not match the expected shape:\n{e}", path=source) from e


def _split_key(collection: str, key: str) -> list[str]:
    segments = [s.strip() for s in key.split(PATH_SEPARATOR)]
    if not segments or any(not s for s in segments):
        raise SnapshotParseError(f"Invalid variable path {key!r}", path=collection)
    return segments


def _parse_alias(owner: str, alias: str) -> TokenPath:
    try:
        return TokenPath.parse(alias)
    except ValueError as e:
        raise SnapshotParseError(str(e), path=owner) from e


def build_tree(snapshot: Snapshot, registry: SchemaRegistry) -> tuple[TokenTree, list[Violation]]:
    """
    Build a tree from a parsed snapshot.

    Returns the tree and the insert violations. Raises SnapshotParseError for
    structural problems.
    """
    tree = TokenTree(registry)
    errors: list[Violation] = []

    for collection, entry in snapshot.collections.items():
        if not registry.has_collection(collection):
            errors.append(UnknownCollection(collection).to_violation())
            continue

        if entry.themes:
            try:
                tree.declare_themes(collection, entry.themes)
            except ValueError as e:
                raise SnapshotParseError(str(e), path=collection) from e
        themes = tree.themes(collection)

        for key, var_entry in entry.variables.items():
            segments = _split_key(collection, key)
            owner = PATH_SEPARATOR.join((collection, *segments))

            if var_entry.has_shared_value:
                values = {theme: var_entry.value for theme in themes}
            else:
                values = dict(var_entry.values)

            variable = Variable(
                name=segments[-1],
                type=var_entry.type,
                values=values,
                alias=_parse_alias(owner, var_entry.alias) if var_entry.alias else None,
                description=var_entry.description,
            )
            try:
                tree.insert(collection, segments[:-1], variable)
            except ThemeSyncError as e:
                errors.append(e.to_violation())

    return tree, errors


# --- Exported artifacts as input ---


def _flatten(node: Any, prefix: tuple[str, ...], out: dict[tuple[str, ...], Any]) -> None:
    if isinstance(node, Mapping):
        for key, child in node.items():
            _flatten(child, (*prefix, str(key)), out)
    else:
        out[prefix] = node


def _merge_types(path: str, current: VariableType | None, new: VariableType) -> VariableType:
    if current is None or current is new:
        return new
    # "#fff" in one theme and "red" in another are both strings.
    if {current, new} == {VariableType.COLOR, VariableType.STRING}:
        return VariableType.STRING
    raise SnapshotParseError(
        f"Values have mixed types ({current.value}, {new.value}) across themes", path=path
    )


def _fit_rule(
    registry: SchemaRegistry | None,
    collection: str,
    segments: tuple[str, ...],
    var_type: VariableType,
) -> VariableType:
    # A string that looks like a hex color stays a String where Color is not allowed.
    if var_type is not VariableType.COLOR or registry is None:
        return var_type
    if not registry.has_collection(collection):
        return var_type
    rule = registry.lookup_rule(collection, segments[:-1])
    if rule is None or VariableType.COLOR in rule.types:
        return var_type
    if VariableType.STRING in rule.types:
        return VariableType.STRING
    return var_type


def snapshot_from_artifacts(
    artifacts: Mapping[str, Any], registry: SchemaRegistry | None = None
) -> Snapshot:
    """
    Turn exported artifacts back into a snapshot.

    ``artifacts`` maps collection name to artifact data
    (``{theme: nested mapping}``). Aliases are already flattened in exported
    data, so every variable gets direct values; types are inferred. With a
    registry, inferred types are fitted to the group rule at each path.
    """
    collections: dict[str, CollectionEntry] = {}

    for collection, data in artifacts.items():
        if not isinstance(data, Mapping) or not all(isinstance(v, Mapping) for v in data.values()):
            raise SnapshotParseError("Artifact must map theme names to groups", path=collection)

        themes = [str(t) for t in data]
        values: dict[tuple[str, ...], dict[str, Any]] = {}
        types: dict[tuple[str, ...], VariableType] = {}

        for theme, groups in data.items():
            flat: dict[tuple[str, ...], Any] = {}
            _flatten(groups, (), flat)
            for segments, value in flat.items():
                path = PATH_SEPARATOR.join((collection, *segments))
                if len(segments) < 2:
                    raise SnapshotParseError("Variables must be inside a group", path=path)
                inferred = infer_type(value)
                if inferred is None:
                    raise SnapshotParseError(f"Unsupported value {value!r}", path=path)
                types[segments] = _merge_types(path, types.get(segments), inferred)
                values.setdefault(segments, {})[str(theme)] = value

        try:
            collections[collection] = CollectionEntry(
                themes=themes,
                variables={
                    PATH_SEPARATOR.join(segments): VariableEntry(
                        type=_fit_rule(registry, collection, segments, types[segments]),
                        values=values[segments],
                    )
                    for segments in values
                },
            )
        except ValidationError as e:
            raise SnapshotParseError(
                f"Artifact does not match the expected shape:\n{e}", path=collection
            ) from e

    return Snapshot(collections=collections)


def read_artifact_dir(
    directory: Path, registry: SchemaRegistry, fs: SnapshotSourcePort
) -> Snapshot:
    """Read ``<export_name>.<ext>`` files for every collection that has an export name."""
    artifacts: dict[str, Any] = {}

    for collection in registry.collection_names():
        export_name = registry.collection(collection).export_name
        if not export_name:
            continue
        for suffix in ("json", "yaml", "yml", "js"):
            candidate = directory / f"{export_name}.{suffix}"
            if not fs.exists(candidate):
                continue
            fmt = ArtifactFormat.from_extension(suffix)
            assert fmt is not None
            try:
                artifacts[collection] = formats.parse(fs.read_text(candidate), fmt)
            except ValueError as e:
                raise SnapshotParseError(str(e), path=str(candidate)) from e
            logger.debug("Read artifact %s for %s", candidate, collection)
            break

    if not artifacts:
        raise SnapshotParseError("No exported artifacts found", path=str(directory))
    return snapshot_from_artifacts(artifacts, registry)


# --- Component Entry Points ---


def load_snapshot(
    path: Path | str,
    registry: SchemaRegistry,
    fs: SnapshotSourcePort = default_filesystem,
) -> tuple[TokenTree, list[Violation]]:
    """
    Load a snapshot file or artifact directory.

    Raises SnapshotParseError on structural problems; returns insert
    violations alongside the tree.
    """
    source = Path(path)
    if not fs.exists(source):
        raise SnapshotParseError("Input not found", path=str(source))

    if fs.is_dir(source):
        snapshot = read_artifact_dir(source, registry, fs)
    else:
        try:
            text = fs.read_text(source)
        except OSError as e:
            raise SnapshotParseError(f"Cannot read input: {e}", path=str(source)) from e
        snapshot = parse_snapshot(text, source=str(source))

    return build_tree(snapshot, registry)


def run_load(
    inp: LoadSnapshotInput,
    *,
    registry: SchemaRegistry,
    fs: SnapshotSourcePort = default_filesystem,
) -> LoadSnapshotOutput:
    """
    Load a snapshot into a fresh tree.

    Args:
        inp: Input containing the snapshot path.
        registry: Schema registry the tree is checked against.
        fs: File system port for reading input.

    Returns:
        LoadSnapshotOutput with the tree, or every load error.
    """
    try:
        tree, errors = load_snapshot(inp.path, registry, fs)
    except SnapshotParseError as e:
        logger.debug("Load of %s failed: %s", inp.path, e.message)
        return LoadSnapshotOutput(tree=None, errors=[e.to_violation()], success=False)

    if errors:
        return LoadSnapshotOutput(tree=None, errors=errors, success=False)

    logger.info("Loaded %d variables from %s", len(tree), inp.path)
    return LoadSnapshotOutput(tree=tree, errors=[], success=True)
