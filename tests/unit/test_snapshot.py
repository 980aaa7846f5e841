"""
Snapshot loading tests.

Structural errors stop the load; insert errors are collected in full.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from themesync.components.registry import SchemaRegistry
from themesync.components.snapshot import (
    LoadSnapshotInput,
    Snapshot,
    build_tree,
    load_snapshot,
    parse_snapshot,
    run_load,
    snapshot_from_artifacts,
)
from themesync.components.tree import TokenPath
from themesync.errors import SnapshotParseError
from themesync.rules import VariableType

# --- Mock File System ---


class MockSource:
    """In-memory snapshot source for testing."""

    def __init__(self, files: dict[str, str] | None = None, dirs: set[str] | None = None) -> None:
        self._files = files or {}
        self._dirs = dirs or set()

    def exists(self, path: Path) -> bool:
        return str(path) in self._files or str(path) in self._dirs

    def is_dir(self, path: Path) -> bool:
        return str(path) in self._dirs

    def read_text(self, path: Path) -> str:
        return self._files[str(path)]


class TestParseSnapshot:
    """Parsing snapshot text."""

    def test_parse_yaml(self) -> None:
        snapshot = parse_snapshot(
            "collections:\n"
            "  DesignTokens:\n"
            "    themes: [Default]\n"
            "    variables:\n"
            "      Spacing/m: {type: Number, value: 8}\n"
        )
        entry = snapshot.collections["DesignTokens"].variables["Spacing/m"]
        assert entry.type is VariableType.NUMBER
        assert entry.value == 8

    def test_parse_json(self) -> None:
        snapshot = parse_snapshot('{"collections": {"Language": {"variables": {}}}}')
        assert "Language" in snapshot.collections

    def test_empty_document(self) -> None:
        assert parse_snapshot("").collections == {}

    def test_malformed_yaml(self) -> None:
        with pytest.raises(SnapshotParseError, match="Invalid YAML"):
            parse_snapshot("collections: {unclosed")

    def test_not_a_mapping(self) -> None:
        with pytest.raises(SnapshotParseError, match="mapping"):
            parse_snapshot("- a\n- b\n")

    def test_unknown_field(self) -> None:
        with pytest.raises(SnapshotParseError):
            parse_snapshot("collections: {}\nextra: 1\n")

    def test_unknown_type(self) -> None:
        with pytest.raises(SnapshotParseError):
            parse_snapshot(
                "collections:\n  DesignTokens:\n    variables:\n"
                "      Spacing/m: {type: Gradient, value: 8}\n"
            )

    def test_value_and_values_conflict(self) -> None:
        with pytest.raises(SnapshotParseError):
            parse_snapshot(
                "collections:\n  DesignTokens:\n    variables:\n"
                "      Spacing/m: {type: Number, value: 8, values: {Default: 8}}\n"
            )

    def test_unsupported_version(self) -> None:
        with pytest.raises(SnapshotParseError, match="schema_version"):
            parse_snapshot("schema_version: 2\ncollections: {}\n")

    def test_duplicate_themes(self) -> None:
        with pytest.raises(SnapshotParseError):
            parse_snapshot("collections:\n  DesignTokens:\n    themes: [Default, Default]\n")

    def test_duplicate_themes_after_stripping(self) -> None:
        with pytest.raises(SnapshotParseError, match="duplicate theme"):
            parse_snapshot(
                "collections:\n  DesignTokens:\n    themes: [Default, ' Default']\n"
            )

    def test_theme_names_stripped(self) -> None:
        snapshot = parse_snapshot(
            "collections:\n  DesignTokens:\n    themes: [' Default', 'HighContrast ']\n"
            "    variables:\n"
            "      Spacing/m: {type: Number, values: {' Default': 8, HighContrast: 8}}\n"
        )
        entry = snapshot.collections["DesignTokens"]
        assert entry.themes == ["Default", "HighContrast"]
        assert entry.variables["Spacing/m"].values == {"Default": 8, "HighContrast": 8}

    def test_duplicate_value_theme_after_stripping(self) -> None:
        with pytest.raises(SnapshotParseError):
            parse_snapshot(
                "collections:\n  DesignTokens:\n    variables:\n"
                "      Spacing/m: {type: Number, values: {Default: 8, 'Default ': 9}}\n"
            )


class TestBuildTree:
    """Building a tree from a parsed snapshot."""

    def test_sample_builds(
        self, sample_snapshot: dict[str, Any], registry: SchemaRegistry
    ) -> None:
        tree, errors = build_tree(Snapshot.model_validate(sample_snapshot), registry)
        assert errors == []
        assert len(tree) == 13

    def test_shared_value_fills_every_theme(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        tree, _ = load_snapshot(write_snapshot(sample_snapshot), registry)
        variable = tree.get(TokenPath.parse("GlobalPrimitives/Typography/FontSize/m"))
        assert variable is not None
        assert variable.values == {"Default": "1rem", "HighContrast": "1rem"}

    def test_alias_parsed(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        tree, _ = load_snapshot(write_snapshot(sample_snapshot), registry)
        variable = tree.get(TokenPath.parse("DesignTokens/Border/Width/default"))
        assert variable is not None
        assert variable.alias == TokenPath.parse("PrivatePrimitives/Spacing/4")

    def test_insert_errors_accumulate(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        collections = sample_snapshot["collections"]
        collections["Icons"] = {"variables": {}}
        collections["DesignTokens"]["variables"]["Border/Width/thin"] = {
            "type": "Color",
            "value": "#000000",
        }
        collections["DesignTokens"]["variables"]["Spacing/m"] = {
            "type": "Number",
            "value": "16px",
        }
        # Same path once whitespace around segments is stripped.
        collections["DesignTokens"]["variables"]["Flags / roundedCorners"] = {
            "type": "Boolean",
            "value": False,
        }

        _, errors = load_snapshot(write_snapshot(sample_snapshot), registry)
        codes = sorted(e.code for e in errors)
        assert codes == ["DuplicatePath", "InvalidType", "InvalidType", "UnknownCollection"]

    def test_bad_alias_syntax_is_structural(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        sample_snapshot["collections"]["DesignTokens"]["variables"]["Spacing/m"] = {
            "type": "Number",
            "alias": "Spacing",
        }
        with pytest.raises(SnapshotParseError):
            load_snapshot(write_snapshot(sample_snapshot), registry)

    def test_empty_path_segment_is_structural(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        sample_snapshot["collections"]["DesignTokens"]["variables"]["Spacing//m"] = {
            "type": "Number",
            "value": 1,
        }
        with pytest.raises(SnapshotParseError, match="Invalid variable path"):
            load_snapshot(write_snapshot(sample_snapshot), registry)


class TestRunLoad:
    """Component entry point."""

    def test_success(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        output = run_load(LoadSnapshotInput(path=write_snapshot(sample_snapshot)), registry=registry)
        assert output.success
        assert output.tree is not None
        assert output.errors == []

    def test_missing_file(self, tmp_path: Path, registry: SchemaRegistry) -> None:
        output = run_load(LoadSnapshotInput(path=tmp_path / "missing.yaml"), registry=registry)
        assert not output.success
        assert output.tree is None
        assert output.errors[0].code == "SnapshotParseError"

    def test_whitespace_duplicate_themes_reported(
        self, sample_snapshot: dict[str, Any], write_snapshot, registry: SchemaRegistry
    ) -> None:
        sample_snapshot["collections"]["DesignTokens"]["themes"] = ["Default", " Default"]
        output = run_load(LoadSnapshotInput(path=write_snapshot(sample_snapshot)), registry=registry)
        assert not output.success
        assert output.tree is None
        assert [e.code for e in output.errors] == ["SnapshotParseError"]

    def test_insert_errors_discard_tree(self, registry: SchemaRegistry) -> None:
        fs = MockSource(files={"snap.yaml": "collections:\n  Icons: {}\n"})
        output = run_load(LoadSnapshotInput(path="snap.yaml"), registry=registry, fs=fs)
        assert not output.success
        assert output.tree is None
        assert [e.code for e in output.errors] == ["UnknownCollection"]

    def test_mock_source(self, registry: SchemaRegistry) -> None:
        fs = MockSource(
            files={
                "snap.yaml": (
                    "collections:\n  Language:\n    variables:\n"
                    "      Labels/ok: {type: String, value: OK}\n"
                )
            }
        )
        output = run_load(LoadSnapshotInput(path="snap.yaml"), registry=registry, fs=fs)
        assert output.success
        assert output.tree is not None
        assert len(output.tree) == 1


class TestArtifactsAsInput:
    """Exported artifacts can be loaded back."""

    def test_snapshot_from_artifacts(self) -> None:
        snapshot = snapshot_from_artifacts(
            {
                "GlobalPrimitives": {
                    "Default": {"typography": {"fontSize": {"m": "1rem"}}, "colors": {"w": "#fff"}},
                    "HighContrast": {"typography": {"fontSize": {"m": "1.25rem"}}},
                }
            }
        )
        entry = snapshot.collections["GlobalPrimitives"]
        assert entry.themes == ["Default", "HighContrast"]
        font = entry.variables["typography/fontSize/m"]
        assert font.type is VariableType.STRING
        assert font.values == {"Default": "1rem", "HighContrast": "1.25rem"}
        assert entry.variables["colors/w"].type is VariableType.COLOR

    def test_color_and_string_merge_to_string(self) -> None:
        snapshot = snapshot_from_artifacts(
            {"DesignTokens": {"Default": {"a": {"b": "#fff"}}, "Dark": {"a": {"b": "black"}}}}
        )
        assert snapshot.collections["DesignTokens"].variables["a/b"].type is VariableType.STRING

    def test_mixed_types_rejected(self) -> None:
        with pytest.raises(SnapshotParseError, match="mixed types"):
            snapshot_from_artifacts(
                {"DesignTokens": {"Default": {"a": {"b": 1}}, "Dark": {"a": {"b": True}}}}
            )

    def test_top_level_leaf_rejected(self) -> None:
        with pytest.raises(SnapshotParseError, match="inside a group"):
            snapshot_from_artifacts({"DesignTokens": {"Default": {"b": 1}}})

    def test_bad_shape_rejected(self) -> None:
        with pytest.raises(SnapshotParseError):
            snapshot_from_artifacts({"DesignTokens": ["not", "a", "mapping"]})

    def test_hex_like_string_kept_where_color_not_allowed(
        self, registry: SchemaRegistry
    ) -> None:
        snapshot = snapshot_from_artifacts(
            {
                "Language": {"Default": {"labels": {"tag": {"code": "#bad"}}}},
                "DesignTokens": {"Default": {"colors": {"text": {"primary": "#bad"}}}},
            },
            registry,
        )
        language = snapshot.collections["Language"].variables["labels/tag/code"]
        assert language.type is VariableType.STRING
        color = snapshot.collections["DesignTokens"].variables["colors/text/primary"]
        assert color.type is VariableType.COLOR

    def test_duplicate_artifact_themes_rejected(self) -> None:
        with pytest.raises(SnapshotParseError):
            snapshot_from_artifacts(
                {"DesignTokens": {"Default": {"a": {"b": 1}}, " Default": {"a": {"b": 2}}}}
            )

    def test_artifact_directory(self, registry: SchemaRegistry) -> None:
        fs = MockSource(
            files={"out/global.json": '{"Default": {"spacing": {"m": 8}}}'},
            dirs={"out"},
        )
        tree, errors = load_snapshot("out", registry, fs)
        assert errors == []
        variable = tree.get(TokenPath.parse("GlobalPrimitives/spacing/m"))
        assert variable is not None
        assert variable.values == {"Default": 8}

    def test_js_artifact(self, registry: SchemaRegistry) -> None:
        fs = MockSource(
            files={"out/design-tokens.js": 'export default {"Default": {"spacing": {"m": 8}}};\n'},
            dirs={"out"},
        )
        tree, _ = load_snapshot("out", registry, fs)
        assert TokenPath.parse("DesignTokens/spacing/m") in tree

    def test_empty_directory(self, registry: SchemaRegistry) -> None:
        fs = MockSource(dirs={"out"})
        with pytest.raises(SnapshotParseError, match="No exported artifacts"):
            load_snapshot("out", registry, fs)
