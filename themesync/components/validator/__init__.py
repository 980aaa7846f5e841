"""
Validator component - accumulate every consistency violation in a tree.
"""

from .component import (
    check_aliases,
    check_completeness,
    check_schema,
    check_visibility,
    validate,
)
from .models import ValidationReport, ValidTree

__all__ = [
    "validate",
    "check_aliases",
    "check_completeness",
    "check_schema",
    "check_visibility",
    "ValidationReport",
    "ValidTree",
]
