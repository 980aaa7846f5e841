"""
Schema configuration models.

The schema file describes the four collections, their visibility and sync
policy, and the group hierarchy each one allows.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

REQUIRED_COLLECTIONS = ("DesignTokens", "GlobalPrimitives", "Language", "PrivatePrimitives")
HIDDEN_COLLECTION = "PrivatePrimitives"


class VariableType(str, Enum):
    """Variable value types."""

    COLOR = "Color"
    NUMBER = "Number"
    STRING = "String"
    BOOLEAN = "Boolean"


class Visibility(str, Enum):
    """Whether a collection is published to consumers of the design file."""

    PUBLISHED = "published"
    HIDDEN = "hidden"


class SyncPolicy(str, Enum):
    """Whether a collection is mirrored into code."""

    IN_SYNC = "in-sync"
    OPTIONAL = "optional"
    NOT_APPLICABLE = "not-applicable"


class GroupRule(BaseModel):
    """
    Allowed content of a group.

    ``types`` are the variable types allowed directly inside the group.
    ``children`` are the named child groups. When ``open`` is set, child groups
    with any name are allowed and each one inherits this rule.
    """

    types: list[VariableType] = Field(default_factory=list)
    children: dict[str, GroupRule] = Field(default_factory=dict)
    open: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class CollectionSpec(BaseModel):
    """Static description of one collection."""

    visibility: Visibility
    sync_policy: SyncPolicy
    themed: bool = False
    export_name: str | None = None
    description: str | None = None
    groups: dict[str, GroupRule] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", frozen=True)


class SchemaConfig(BaseModel):
    """Root of the schema file."""

    schema_version: int = 1
    collections: dict[str, CollectionSpec]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def check_collections(self) -> SchemaConfig:
        declared = set(self.collections)
        expected = set(REQUIRED_COLLECTIONS)
        if declared != expected:
            missing = sorted(expected - declared)
            extra = sorted(declared - expected)
            raise ValueError(
                f"Schema must declare exactly {list(REQUIRED_COLLECTIONS)} "
                f"(missing: {missing}, unexpected: {extra})"
            )

        if self.collections[HIDDEN_COLLECTION].visibility is not Visibility.HIDDEN:
            raise ValueError(f"{HIDDEN_COLLECTION} must be hidden")

        for name, spec in self.collections.items():
            if spec.sync_policy is SyncPolicy.IN_SYNC and not spec.export_name:
                raise ValueError(f"{name} is in-sync but has no export_name")
        return self
