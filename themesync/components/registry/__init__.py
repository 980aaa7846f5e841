"""
Schema registry component - allowed collections, groups and variable types.
"""

from .component import SchemaRegistry
from .naming import export_key, invalid_segment_reason, segment_key

__all__ = [
    "SchemaRegistry",
    "export_key",
    "invalid_segment_reason",
    "segment_key",
]
