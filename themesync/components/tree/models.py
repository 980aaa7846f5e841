"""
Token tree models: paths, variables and resolved values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from themesync.rules import VariableType

PATH_SEPARATOR = "/"

# #RGB, #RRGGBB or #RRGGBBAA
HEX_COLOR_PATTERN = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")


@dataclass(frozen=True)
class TokenPath:
    """Full path of a variable: collection, group segments, variable name."""

    collection: str
    groups: tuple[str, ...]
    name: str

    @classmethod
    def parse(cls, text: str) -> TokenPath:
        """
        Parse ``Collection/Group/.../name``.

        Segments are stripped of surrounding whitespace. Raises ValueError if
        the path has fewer than two segments or an empty segment.
        """
        segments = [s.strip() for s in text.split(PATH_SEPARATOR)]
        if len(segments) < 2:
            raise ValueError(f"Path must include a collection and a name: {text!r}")
        if any(not s for s in segments):
            raise ValueError(f"Path has an empty segment: {text!r}")
        return cls(collection=segments[0], groups=tuple(segments[1:-1]), name=segments[-1])

    @classmethod
    def of(cls, collection: str, group_path: tuple[str, ...] | list[str], name: str) -> TokenPath:
        return cls(collection=collection, groups=tuple(group_path), name=name)

    @property
    def segments(self) -> tuple[str, ...]:
        """Group segments followed by the variable name."""
        return (*self.groups, self.name)

    def __str__(self) -> str:
        return PATH_SEPARATOR.join((self.collection, *self.segments))


@dataclass(frozen=True)
class Variable:
    """
    A typed leaf value.

    ``values`` maps theme name to value. A theme missing from ``values`` takes
    its value from ``alias`` when one is set.
    """

    name: str
    type: VariableType
    values: dict[str, Any] = field(default_factory=dict)
    alias: TokenPath | None = None
    description: str | None = None


@dataclass(frozen=True)
class ResolvedValue:
    """Values of a variable after alias resolution."""

    path: TokenPath
    type: VariableType
    values: dict[str, Any]
    chain: tuple[TokenPath, ...]
    missing_themes: tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.missing_themes


def value_matches_type(value: Any, var_type: VariableType) -> bool:
    """Check a value's shape against a variable type."""
    if var_type is VariableType.COLOR:
        return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value))
    if var_type is VariableType.NUMBER:
        return isinstance(value, int | float) and not isinstance(value, bool)
    if var_type is VariableType.STRING:
        return isinstance(value, str)
    if var_type is VariableType.BOOLEAN:
        return isinstance(value, bool)
    return False


def infer_type(value: Any) -> VariableType | None:
    """Guess a variable type from an exported value."""
    if isinstance(value, bool):
        return VariableType.BOOLEAN
    if isinstance(value, int | float):
        return VariableType.NUMBER
    if isinstance(value, str):
        if HEX_COLOR_PATTERN.match(value):
            return VariableType.COLOR
        return VariableType.STRING
    return None
