"""
Snapshot input models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from themesync.errors import Violation
from themesync.rules import VariableType

if TYPE_CHECKING:
    from themesync.components.tree import TokenTree

SNAPSHOT_SCHEMA_VERSION = 1

# --- Snapshot document ---


class VariableEntry(BaseModel):
    """One variable in a snapshot. ``value`` applies to every theme."""

    type: VariableType
    value: Any = None
    values: dict[str, Any] = Field(default_factory=dict)
    alias: str | None = None
    description: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("values")
    @classmethod
    def strip_theme_keys(cls, v: dict[str, Any]) -> dict[str, Any]:
        stripped: dict[str, Any] = {}
        for theme, value in v.items():
            name = str(theme).strip()
            if not name:
                raise ValueError("theme names must not be empty")
            if name in stripped:
                raise ValueError(f"duplicate value for theme {name!r}")
            stripped[name] = value
        return stripped

    @model_validator(mode="after")
    def check_value_forms(self) -> VariableEntry:
        if "value" in self.model_fields_set and self.values:
            raise ValueError("use either 'value' or 'values', not both")
        return self

    @property
    def has_shared_value(self) -> bool:
        return "value" in self.model_fields_set


class CollectionEntry(BaseModel):
    """Themes and variables of one collection, keyed by group path."""

    themes: list[str] = Field(default_factory=list)
    variables: dict[str, VariableEntry] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("themes")
    @classmethod
    def check_themes(cls, v: list[str]) -> list[str]:
        themes = [t.strip() for t in v]
        if any(not t for t in themes):
            raise ValueError("theme names must not be empty")
        if len(set(themes)) != len(themes):
            raise ValueError(f"duplicate theme names: {themes}")
        return themes


class Snapshot(BaseModel):
    """Root of a snapshot file."""

    schema_version: int = 1
    collections: dict[str, CollectionEntry] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("schema_version")
    @classmethod
    def check_version(cls, v: int) -> int:
        if v != SNAPSHOT_SCHEMA_VERSION:
            raise ValueError(f"unsupported schema_version {v}, expected {SNAPSHOT_SCHEMA_VERSION}")
        return v


# --- Input / Output ---


@dataclass(frozen=True)
class LoadSnapshotInput:
    """Input for loading a snapshot file or an artifact directory."""

    path: Path | str


@dataclass(frozen=True)
class LoadSnapshotOutput:
    """Output from loading a snapshot."""

    tree: TokenTree | None
    errors: list[Violation] = field(default_factory=list)
    success: bool = True
