from copy import deepcopy
from pathlib import Path

import pytest

from themesync.components.exporter import ExportInput, export, run_export
from themesync.components.registry import export_key
from themesync.components.snapshot import Snapshot, build_tree, load_snapshot
from themesync.components.tree import TokenPath, TokenTree, Variable
from themesync.components.validator import validate
from themesync.errors import CyclicAlias, DuplicatePath, ExportOnInvalidTree
from themesync.rules import SyncPolicy, VariableType


def _validated(registry, snapshot):
    tree, errors = build_tree(Snapshot.model_validate(deepcopy(snapshot)), registry)
    assert errors == []
    report = validate(tree)
    assert report.valid is not None, report.violations
    return report.valid


# --- R1: Round trip ---
def test_R1_export_reload_round_trip(registry, sample_snapshot, tmp_path: Path):
    """R1: Exporting, reloading the artifacts and exporting again gives equal artifacts."""
    first = export(_validated(registry, sample_snapshot))
    run_export(ExportInput(valid=_validated(registry, sample_snapshot), out_dir=tmp_path))

    tree, errors = load_snapshot(tmp_path, registry)
    assert errors == []
    report = validate(tree)
    assert report.valid is not None, report.violations

    second = export(report.valid)
    assert {c: a.data for c, a in first.items()} == {c: a.data for c, a in second.items()}


def test_R1_round_trip_keeps_hex_like_strings(registry, sample_snapshot, tmp_path: Path):
    """R1: A String that looks like a hex color reloads as a String, not a Color."""
    synced = registry.with_sync_policy("Language", SyncPolicy.IN_SYNC)
    sample_snapshot["collections"]["Language"]["variables"]["Labels/Tag/code"] = {
        "type": "String",
        "value": "#bad",
    }
    gp_variables = sample_snapshot["collections"]["GlobalPrimitives"]["variables"]
    gp_variables["Typography/FontFamily/hex"] = {"type": "String", "value": "#deadbeef"}
    first = export(_validated(synced, sample_snapshot))
    run_export(ExportInput(valid=_validated(synced, sample_snapshot), out_dir=tmp_path))

    tree, errors = load_snapshot(tmp_path, synced)
    assert errors == []
    code = tree.get(TokenPath.parse("Language/labels/tag/code"))
    assert code is not None
    assert code.type is VariableType.STRING

    report = validate(tree)
    assert report.valid is not None, report.violations
    second = export(report.valid)
    assert {c: a.data for c, a in first.items()} == {c: a.data for c, a in second.items()}


# --- R2: Termination ---
def test_R2_alias_cycles_terminate(registry):
    """R2: Resolution over any alias graph terminates, even a long cycle."""
    tree = TokenTree(registry)
    size = 50
    for i in range(size):
        tree.insert(
            "PrivatePrimitives",
            ["Spacing"],
            Variable(
                name=f"s{i}",
                type=VariableType.NUMBER,
                alias=TokenPath.parse(f"PrivatePrimitives/Spacing/s{(i + 1) % size}"),
            ),
        )

    with pytest.raises(CyclicAlias):
        tree.resolve_alias(TokenPath.parse("PrivatePrimitives/Spacing/s0"))

    report = validate(tree)
    assert report.codes() == ["CyclicAlias"]


# --- R3: Completeness ---
def test_R3_colors_defined_for_every_theme(registry, sample_snapshot):
    """R3: A valid tree has a value for every Color variable in every declared theme."""
    valid = _validated(registry, sample_snapshot)
    tree = valid.tree
    for path, variable in tree.walk():
        if variable.type is not VariableType.COLOR:
            continue
        resolved = tree.resolve_alias(path)
        assert set(resolved.values) == set(tree.themes(path.collection)), path


# --- R4: Unique paths ---
def test_R4_duplicate_path_rejected(registry):
    """R4: A second variable at the same group and name is rejected, not merged."""
    tree = TokenTree(registry)
    tree.declare_themes("DesignTokens", ["Default"])
    first = Variable(name="primary", type=VariableType.COLOR, values={"Default": "#000000"})
    second = Variable(name="primary", type=VariableType.COLOR, values={"Default": "#ffffff"})

    tree.insert("DesignTokens", ["Colors", "Background"], first)
    with pytest.raises(DuplicatePath):
        tree.insert("DesignTokens", ["Colors", "Background"], second)

    variable = tree.get(TokenPath.parse("DesignTokens/Colors/Background/primary"))
    assert variable is not None
    assert variable.values == {"Default": "#000000"}


# --- R5: Visibility ---
def test_R5_hidden_collection_only_behind_in_sync_alias(registry, sample_snapshot):
    """R5: Only in-sync collections may alias into PrivatePrimitives."""
    sample_snapshot["collections"]["Language"]["variables"]["Layout/gap"] = {
        "type": "Number",
        "alias": "PrivatePrimitives/Spacing/4",
    }
    tree, errors = build_tree(Snapshot.model_validate(sample_snapshot), registry)
    assert errors == []

    report = validate(tree)
    assert report.codes() == ["VisibilityViolation"]
    assert report.violations[0].path == "Language/Layout/gap"
    with pytest.raises(ExportOnInvalidTree):
        export(report.valid)  # type: ignore[arg-type]


# --- R6: Export keys ---
def test_R6_font_size_exported_as_camel_key(registry, sample_snapshot):
    """R6: GlobalPrimitives/Typography/FontSize/m exports as typography.fontSize.m."""
    artifact = export(_validated(registry, sample_snapshot))["GlobalPrimitives"]
    for theme in ("Default", "HighContrast"):
        assert artifact.data[theme]["typography"]["fontSize"]["m"] == "1rem"


def test_R6_export_key_idempotent():
    """R6: Converting an exported key again leaves it unchanged."""
    for name in ("FontSize", "font-size", "Grey 900", "HighContrast", "URL", "HTTPServer", "900"):
        key = export_key(name)
        assert export_key(key) == key
