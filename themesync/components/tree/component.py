"""
Token tree - in-memory hierarchy of variables for one loaded snapshot.

Invariants:
- Every group belongs to exactly one collection and has a unique path in it
- At most one variable per exact path
- Inserted values match their variable type
- Alias traversal marks visited paths, so resolution always terminates
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from themesync.components.registry import SchemaRegistry
from themesync.errors import CyclicAlias, DanglingAlias, DuplicatePath, InvalidType

from .models import ResolvedValue, TokenPath, Variable, value_matches_type

DEFAULT_THEME = "Default"


@dataclass
class _GroupNode:
    groups: dict[str, _GroupNode] = field(default_factory=dict)
    variables: dict[str, Variable] = field(default_factory=dict)


class TokenTree:
    """Collections -> groups -> variables, checked against a schema registry."""

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._roots: dict[str, _GroupNode] = {}
        self._themes: dict[str, tuple[str, ...]] = {}
        self._count = 0
        self._revision = 0

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def revision(self) -> int:
        """Incremented on every change; used to detect edits after validation."""
        return self._revision

    def __len__(self) -> int:
        return self._count

    def __contains__(self, path: object) -> bool:
        return isinstance(path, TokenPath) and self.get(path) is not None

    # --- Themes ---

    def declare_themes(self, collection: str, themes: Sequence[str]) -> None:
        """Declare the themes (modes) of a collection. The first one is the default."""
        self._registry.collection(collection)
        declared = tuple(themes)
        if not declared:
            raise ValueError(f"{collection} must declare at least one theme")
        if len(set(declared)) != len(declared):
            raise ValueError(f"{collection} declares duplicate themes: {list(declared)}")
        self._themes[collection] = declared
        self._revision += 1

    def themes(self, collection: str) -> tuple[str, ...]:
        self._registry.collection(collection)
        return self._themes.get(collection, (DEFAULT_THEME,))

    # --- Insertion and lookup ---

    def insert(self, collection: str, group_path: Sequence[str], variable: Variable) -> TokenPath:
        """
        Insert a variable under a group path.

        Raises:
            UnknownCollection: collection is not in the registry.
            InvalidType: the group rule rejects the type, or a value does not
                match the type.
            DuplicatePath: a variable already exists at this exact path.
        """
        self._registry.collection(collection)
        path = TokenPath.of(collection, group_path, variable.name)

        rule = self._registry.lookup_rule(collection, path.groups)
        if rule is not None and variable.type not in rule.types:
            allowed = ", ".join(t.value for t in rule.types) or "none"
            raise InvalidType(
                f"{variable.type.value} variables are not allowed here (allowed: {allowed})",
                path=str(path),
            )

        for theme, value in variable.values.items():
            if not value_matches_type(value, variable.type):
                raise InvalidType(
                    f"Value {value!r} for theme {theme!r} is not a valid {variable.type.value}",
                    path=str(path),
                )

        node = self._roots.setdefault(collection, _GroupNode())
        for segment in path.groups:
            node = node.groups.setdefault(segment, _GroupNode())

        if variable.name in node.variables:
            raise DuplicatePath(str(path))

        node.variables[variable.name] = variable
        self._count += 1
        self._revision += 1
        return path

    def get(self, path: TokenPath) -> Variable | None:
        node = self._roots.get(path.collection)
        for segment in path.groups:
            if node is None:
                return None
            node = node.groups.get(segment)
        if node is None:
            return None
        return node.variables.get(path.name)

    # --- Traversal ---

    def walk(self) -> Iterator[tuple[TokenPath, Variable]]:
        """
        Depth-first traversal in lexical order.

        Each call returns a fresh generator.
        """
        for collection in sorted(self._roots):
            yield from self._walk_node(collection, (), self._roots[collection])

    def _walk_node(
        self, collection: str, prefix: tuple[str, ...], node: _GroupNode
    ) -> Iterator[tuple[TokenPath, Variable]]:
        entries = sorted(
            [(name, 0) for name in node.groups] + [(name, 1) for name in node.variables]
        )
        for name, kind in entries:
            if kind == 0:
                yield from self._walk_node(collection, (*prefix, name), node.groups[name])
            else:
                yield TokenPath.of(collection, prefix, name), node.variables[name]

    # --- Alias resolution ---

    def alias_chain(self, path: TokenPath) -> tuple[TokenPath, ...]:
        """
        Follow alias references from ``path``.

        The chain is walked on structure alone, so a cycle is found even when
        direct values would make it unnecessary to follow.

        Raises:
            DanglingAlias: the path, or an alias target, does not exist.
            CyclicAlias: the traversal revisits a path.
        """
        current = self.get(path)
        if current is None:
            raise DanglingAlias(str(path), str(path))

        chain = [path]
        seen = {path}
        while current.alias is not None:
            target = current.alias
            if target in seen:
                raise CyclicAlias(str(path), [str(p) for p in (*chain, target)])
            next_var = self.get(target)
            if next_var is None:
                raise DanglingAlias(str(chain[-1]), str(target))
            chain.append(target)
            seen.add(target)
            current = next_var
        return tuple(chain)

    def resolve_alias(self, path: TokenPath) -> ResolvedValue:
        """
        Resolve the value of ``path`` for every theme of its collection.

        A direct value wins; otherwise the alias target is consulted. When the
        target's collection does not declare the theme, its default theme is
        used from there on.
        """
        chain = self.alias_chain(path)
        variables = [self.get(p) for p in chain]
        root = variables[0]
        assert root is not None

        values: dict[str, Any] = {}
        missing: list[str] = []
        for theme in self.themes(path.collection):
            found, value = self._value_along(chain, variables, theme)
            if found:
                values[theme] = value
            else:
                missing.append(theme)

        return ResolvedValue(
            path=path,
            type=root.type,
            values=values,
            chain=chain,
            missing_themes=tuple(missing),
        )

    def _value_along(
        self,
        chain: Sequence[TokenPath],
        variables: Sequence[Variable | None],
        theme: str,
    ) -> tuple[bool, Any]:
        current_theme = theme
        for path, variable in zip(chain, variables, strict=True):
            declared = self.themes(path.collection)
            if current_theme not in declared:
                current_theme = declared[0]
            if variable is not None and current_theme in variable.values:
                return True, variable.values[current_theme]
        return False, None
