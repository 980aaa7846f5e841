"""
Token tree component - variables, aliases and traversal.
"""

from .component import DEFAULT_THEME, TokenTree
from .models import (
    HEX_COLOR_PATTERN,
    PATH_SEPARATOR,
    ResolvedValue,
    TokenPath,
    Variable,
    infer_type,
    value_matches_type,
)

__all__ = [
    "DEFAULT_THEME",
    "HEX_COLOR_PATTERN",
    "PATH_SEPARATOR",
    "ResolvedValue",
    "TokenPath",
    "TokenTree",
    "Variable",
    "infer_type",
    "value_matches_type",
]
