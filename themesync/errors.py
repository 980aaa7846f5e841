"""
Error taxonomy for the load / validate / export pipeline.

Every error carries a stable ``code`` matching the violation codes reported
by the validator, so callers can treat raised errors and accumulated
violations uniformly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """A single accumulated diagnostic."""

    code: str
    message: str
    path: str | None = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.code}: {self.path}: {self.message}"
        return f"{self.code}: {self.message}"


class ThemeSyncError(Exception):
    """Base class for all themesync errors."""

    code = "ThemeSyncError"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_violation(self) -> Violation:
        return Violation(code=self.code, message=self.message, path=self.path)


class UnknownCollection(ThemeSyncError):
    """Raised when a collection is not declared in the schema registry."""

    code = "UnknownCollection"

    def __init__(self, collection: str) -> None:
        self.collection = collection
        super().__init__(f"Unknown collection: {collection}", path=collection)


class DuplicatePath(ThemeSyncError):
    """Raised when a variable already exists at the exact path."""

    code = "DuplicatePath"

    def __init__(self, path: str) -> None:
        super().__init__("A variable already exists at this path", path=path)


class InvalidType(ThemeSyncError):
    """Raised when a type or value shape is rejected at a path."""

    code = "InvalidType"


class DanglingAlias(ThemeSyncError):
    """Raised when an alias points to a path with no variable."""

    code = "DanglingAlias"

    def __init__(self, path: str, target: str) -> None:
        self.target = target
        super().__init__(f"Alias target does not exist: {target}", path=path)


class CyclicAlias(ThemeSyncError):
    """Raised when alias traversal revisits a path."""

    code = "CyclicAlias"

    def __init__(self, path: str, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"Alias cycle: {' -> '.join(self.chain)}", path=path)


class ExportOnInvalidTree(ThemeSyncError):
    """Raised when export is attempted on a tree that has not passed validation."""

    code = "ExportOnInvalidTree"


class SnapshotParseError(ThemeSyncError):
    """Raised when a snapshot is structurally malformed and cannot be modeled."""

    code = "SnapshotParseError"


# Codes reported only as accumulated violations.
INCOMPLETE_THEME = "IncompleteTheme"
VISIBILITY_VIOLATION = "VisibilityViolation"
SCHEMA_VIOLATION = "SchemaViolation"
