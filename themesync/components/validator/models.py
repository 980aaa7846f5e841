"""
Validator output models.
"""

from __future__ import annotations

from dataclasses import dataclass

from themesync.components.tree import TokenTree
from themesync.errors import Violation


@dataclass(frozen=True)
class ValidTree:
    """
    Proof that a tree passed validation at a given revision.

    Only the validator creates these; the exporter accepts nothing else.
    """

    tree: TokenTree
    revision: int

    @property
    def is_current(self) -> bool:
        """False once the tree has changed since validation."""
        return self.tree.revision == self.revision


@dataclass(frozen=True)
class ValidationReport:
    """Result of a full validation pass."""

    violations: tuple[Violation, ...]
    valid: ValidTree | None = None

    @property
    def is_valid(self) -> bool:
        return self.valid is not None

    def codes(self) -> list[str]:
        return [v.code for v in self.violations]
