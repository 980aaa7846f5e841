"""
Schema registry - read-only view over the schema configuration.

Invariants:
- Exactly the four configured collections exist
- PrivatePrimitives is always hidden
- The registry is never mutated after construction; overrides return a copy
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from themesync.errors import UnknownCollection
from themesync.rules import (
    CollectionSpec,
    GroupRule,
    SchemaConfig,
    SyncPolicy,
    Visibility,
    load_schema,
)

from .naming import segment_key


class SchemaRegistry:
    """Authoritative description of collections and their group rules."""

    def __init__(self, config: SchemaConfig) -> None:
        self._config = config
        self._roots = {
            name: GroupRule(children=spec.groups) for name, spec in config.collections.items()
        }

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> SchemaRegistry:
        """Build a registry from a schema file (see ``load_schema``)."""
        return cls(load_schema(path))

    @property
    def config(self) -> SchemaConfig:
        return self._config

    def collection_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._config.collections))

    def has_collection(self, name: str) -> bool:
        return name in self._config.collections

    def collection(self, name: str) -> CollectionSpec:
        """Get a collection spec. Raises UnknownCollection if undeclared."""
        try:
            return self._config.collections[name]
        except KeyError:
            raise UnknownCollection(name) from None

    def is_hidden(self, name: str) -> bool:
        return self.collection(name).visibility is Visibility.HIDDEN

    def synced_collections(self) -> tuple[str, ...]:
        """Collections whose sync policy is in-sync, in name order."""
        return tuple(
            name
            for name in self.collection_names()
            if self._config.collections[name].sync_policy is SyncPolicy.IN_SYNC
        )

    def lookup_rule(self, collection: str, group_path: Sequence[str]) -> GroupRule | None:
        """
        Find the rule governing a group path.

        Returns None when the path is not allowed by the schema. Segment
        matching ignores case and separators, so exported keys still match.
        Raises UnknownCollection for undeclared collections.
        """
        if collection not in self._roots:
            raise UnknownCollection(collection)

        rule = self._roots[collection]
        for segment in group_path:
            key = segment_key(segment)
            child = next(
                (r for name, r in rule.children.items() if segment_key(name) == key),
                None,
            )
            if child is not None:
                rule = child
            elif rule.open:
                continue
            else:
                return None
        return rule

    def with_sync_policy(self, name: str, policy: SyncPolicy) -> SchemaRegistry:
        """Return a new registry with one collection's sync policy replaced."""
        spec = self.collection(name)
        collections = dict(self._config.collections)
        collections[name] = spec.model_copy(update={"sync_policy": policy})
        # Re-validate so in-sync without export_name is still rejected.
        config = SchemaConfig.model_validate(
            {
                "schema_version": self._config.schema_version,
                "collections": {k: v.model_dump() for k, v in collections.items()},
            }
        )
        return SchemaRegistry(config)
