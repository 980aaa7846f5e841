"""
Validator component - full-tree consistency pass before export.

Checks run in this order and every failure is collected:
- Schema conformance (names, group rules, declared themes, export keys)
- Alias graph (dangling targets, cycles, target type)
- Theme completeness
- Visibility of hidden collections behind aliases

The pass has no side effects and can be re-run on the same tree.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from themesync.components.registry import export_key, invalid_segment_reason
from themesync.components.tree import TokenPath, TokenTree, Variable
from themesync.errors import (
    INCOMPLETE_THEME,
    SCHEMA_VIOLATION,
    VISIBILITY_VIOLATION,
    CyclicAlias,
    DanglingAlias,
    InvalidType,
    Violation,
)
from themesync.rules import SyncPolicy, Visibility

from .models import ValidationReport, ValidTree

logger = logging.getLogger(__name__)

_GROUP = "group"
_VARIABLE = "variable"


def check_schema(tree: TokenTree, entries: list[tuple[TokenPath, Variable]]) -> list[Violation]:
    """Every path must be allowed by a group rule and use valid names."""
    errors: list[Violation] = []
    registry = tree.registry

    for collection in registry.collection_names():
        themes = tree.themes(collection)
        if not registry.collection(collection).themed and len(themes) > 1:
            errors.append(
                Violation(
                    code=SCHEMA_VIOLATION,
                    message=f"Collection is not themed but declares {len(themes)} themes",
                    path=collection,
                )
            )

    for path, variable in entries:
        bad_names = [
            f"{segment!r} ({reason})"
            for segment in path.segments
            if (reason := invalid_segment_reason(segment)) is not None
        ]
        if bad_names:
            errors.append(
                Violation(
                    code=SCHEMA_VIOLATION,
                    message=f"Invalid names: {', '.join(bad_names)}",
                    path=str(path),
                )
            )

        rule = registry.lookup_rule(path.collection, path.groups)
        if rule is None:
            errors.append(
                Violation(
                    code=SCHEMA_VIOLATION,
                    message="No group rule allows this path",
                    path=str(path),
                )
            )
        elif variable.type not in rule.types:
            errors.append(
                Violation(
                    code=SCHEMA_VIOLATION,
                    message=f"{variable.type.value} variables are not allowed in this group",
                    path=str(path),
                )
            )

        declared = tree.themes(path.collection)
        for theme in variable.values:
            if theme not in declared:
                errors.append(
                    Violation(
                        code=SCHEMA_VIOLATION,
                        message=f"Value for undeclared theme {theme!r}",
                        path=str(path),
                    )
                )

    errors.extend(_check_export_keys(entries))
    return errors


def _check_export_keys(entries: list[tuple[TokenPath, Variable]]) -> list[Violation]:
    # parent path -> child name -> kinds seen
    children: dict[tuple[str, ...], dict[str, set[str]]] = defaultdict(lambda: defaultdict(set))
    for path, _ in entries:
        segments = path.segments
        for i, segment in enumerate(segments):
            kind = _VARIABLE if i == len(segments) - 1 else _GROUP
            children[(path.collection, *segments[:i])][segment].add(kind)

    errors: list[Violation] = []
    for parent in sorted(children):
        names = children[parent]
        parent_path = "/".join(parent)

        for name in sorted(names):
            if len(names[name]) > 1:
                errors.append(
                    Violation(
                        code=SCHEMA_VIOLATION,
                        message=f"{name!r} is used as both a group and a variable",
                        path=parent_path,
                    )
                )

        by_key: dict[str, list[str]] = defaultdict(list)
        for name in sorted(names):
            by_key[export_key(name)].append(name)
        for key, clashing in sorted(by_key.items()):
            if len(clashing) > 1:
                errors.append(
                    Violation(
                        code=SCHEMA_VIOLATION,
                        message=f"Names {clashing} all export as {key!r}",
                        path=parent_path,
                    )
                )
    return errors


def check_aliases(
    tree: TokenTree, entries: list[tuple[TokenPath, Variable]]
) -> tuple[list[Violation], set[TokenPath]]:
    """
    Check the alias graph.

    Returns the violations and the set of paths whose alias chain is sound.
    Each cycle is reported once, on its first member in walk order; a broken
    target is reported on the variable that holds the alias.
    """
    errors: list[Violation] = []
    resolvable: set[TokenPath] = set()
    reported_cycles: set[frozenset[str]] = set()

    for path, variable in entries:
        if variable.alias is None:
            resolvable.add(path)
            continue

        try:
            chain = tree.alias_chain(path)
        except DanglingAlias as e:
            if e.path == str(path):
                errors.append(e.to_violation())
            continue
        except CyclicAlias as e:
            start = e.chain.index(e.chain[-1])
            members = frozenset(e.chain[start:-1])
            if str(path) in members and members not in reported_cycles:
                reported_cycles.add(members)
                errors.append(Violation(code=e.code, message=e.message, path=str(path)))
            continue

        target = tree.get(chain[1])
        if target is not None and target.type is not variable.type:
            errors.append(
                InvalidType(
                    f"Alias target {chain[1]} is {target.type.value}, "
                    f"expected {variable.type.value}",
                    path=str(path),
                ).to_violation()
            )
            continue

        resolvable.add(path)

    return errors, resolvable


def check_completeness(
    tree: TokenTree, entries: list[tuple[TokenPath, Variable]], resolvable: set[TokenPath]
) -> list[Violation]:
    """Every variable needs a value, direct or aliased, for each declared theme."""
    errors: list[Violation] = []
    for path, _ in entries:
        if path not in resolvable:
            continue
        resolved = tree.resolve_alias(path)
        for theme in resolved.missing_themes:
            errors.append(
                Violation(
                    code=INCOMPLETE_THEME,
                    message=f"No value for theme {theme!r}",
                    path=str(path),
                )
            )
    return errors


def check_visibility(
    tree: TokenTree, entries: list[tuple[TokenPath, Variable]]
) -> list[Violation]:
    """
    A published collection may alias into a hidden collection only when it is
    itself kept in sync with code.
    """
    errors: list[Violation] = []
    registry = tree.registry

    for path, variable in entries:
        target = variable.alias
        if target is None or target.collection == path.collection:
            continue
        if not registry.has_collection(target.collection):
            continue

        source_spec = registry.collection(path.collection)
        if source_spec.visibility is not Visibility.PUBLISHED:
            continue
        if not registry.is_hidden(target.collection):
            continue
        if source_spec.sync_policy is SyncPolicy.IN_SYNC:
            continue

        errors.append(
            Violation(
                code=VISIBILITY_VIOLATION,
                message=(
                    f"{path.collection} ({source_spec.sync_policy.value}) cannot alias "
                    f"hidden {target.collection} entry {target}"
                ),
                path=str(path),
            )
        )
    return errors


def validate(tree: TokenTree) -> ValidationReport:
    """
    Run every check over the tree.

    Returns a report that is valid (and carries a ValidTree for the exporter)
    only when no check produced a violation.
    """
    entries = list(tree.walk())

    violations: list[Violation] = []
    violations.extend(check_schema(tree, entries))
    alias_errors, resolvable = check_aliases(tree, entries)
    violations.extend(alias_errors)
    violations.extend(check_completeness(tree, entries, resolvable))
    violations.extend(check_visibility(tree, entries))

    if violations:
        logger.info("Validation found %d violations in %d variables", len(violations), len(entries))
        return ValidationReport(violations=tuple(violations))

    logger.info("Validation passed for %d variables", len(entries))
    return ValidationReport(violations=(), valid=ValidTree(tree=tree, revision=tree.revision))
