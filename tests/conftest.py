import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from themesync.components.registry import SchemaRegistry
from themesync.components.tree import TokenTree
from themesync.rules import DEFAULT_SCHEMA_PATH, SCHEMA_ENV_VAR

# A complete, valid snapshot covering every collection, themes and aliases.
SAMPLE_SNAPSHOT: dict[str, Any] = {
    "schema_version": 1,
    "collections": {
        "PrivatePrimitives": {
            "variables": {
                "Spacing/4": {"type": "Number", "value": 4},
                "Spacing/8": {"type": "Number", "value": 8},
                "Colors/Grey/900": {"type": "Color", "value": "#111111"},
                "Colors/Grey/50": {"type": "Color", "value": "#fafafa"},
            }
        },
        "GlobalPrimitives": {
            "themes": ["Default", "HighContrast"],
            "variables": {
                "Colors/DefaultTheme/Grey/900": {
                    "type": "Color",
                    "alias": "PrivatePrimitives/Colors/Grey/900",
                },
                "Colors/DefaultTheme/Grey/50": {
                    "type": "Color",
                    "values": {"Default": "#fafafa", "HighContrast": "#ffffff"},
                },
                "Typography/FontSize/m": {"type": "String", "value": "1rem"},
                "Typography/FontFamily/body": {"type": "String", "value": "Inter"},
            },
        },
        "DesignTokens": {
            "themes": ["Default", "HighContrast"],
            "variables": {
                "Border/Width/default": {
                    "type": "Number",
                    "alias": "PrivatePrimitives/Spacing/4",
                },
                "Colors/Background/primary": {
                    "type": "Color",
                    "alias": "GlobalPrimitives/Colors/DefaultTheme/Grey/50",
                },
                "Colors/Text/primary": {
                    "type": "Color",
                    "values": {"Default": "#111111", "HighContrast": "#000000"},
                },
                "Flags/roundedCorners": {"type": "Boolean", "value": True},
            },
        },
        "Language": {
            "variables": {
                "Labels/Button/submit": {"type": "String", "value": "Submit"},
            }
        },
    },
}


@pytest.fixture(autouse=True)
def clear_schema_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests use the packaged schema unless they set one explicitly."""
    monkeypatch.delenv(SCHEMA_ENV_VAR, raising=False)


@pytest.fixture
def registry() -> SchemaRegistry:
    """Registry built from the packaged default schema."""
    return SchemaRegistry.from_file(DEFAULT_SCHEMA_PATH)


@pytest.fixture
def tree(registry: SchemaRegistry) -> TokenTree:
    """Empty tree with themed DesignTokens and GlobalPrimitives."""
    t = TokenTree(registry)
    t.declare_themes("DesignTokens", ["Default", "HighContrast"])
    t.declare_themes("GlobalPrimitives", ["Default", "HighContrast"])
    return t


@pytest.fixture
def sample_snapshot() -> dict[str, Any]:
    """Fresh deep copy of the sample snapshot, safe to modify."""
    return copy.deepcopy(SAMPLE_SNAPSHOT)


@pytest.fixture
def write_snapshot(tmp_path: Path):
    """Write a snapshot dict as YAML and return its path."""

    def _write(data: dict[str, Any], name: str = "snapshot.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _write
