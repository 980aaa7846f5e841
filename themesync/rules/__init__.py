"""
Schema configuration: collections, visibility, sync policy and group rules.
"""

from .loader import DEFAULT_SCHEMA_PATH, SCHEMA_ENV_VAR, load_schema, resolve_schema_path
from .models import (
    REQUIRED_COLLECTIONS,
    CollectionSpec,
    GroupRule,
    SchemaConfig,
    SyncPolicy,
    VariableType,
    Visibility,
)

__all__ = [
    "DEFAULT_SCHEMA_PATH",
    "REQUIRED_COLLECTIONS",
    "SCHEMA_ENV_VAR",
    "CollectionSpec",
    "GroupRule",
    "SchemaConfig",
    "SyncPolicy",
    "VariableType",
    "Visibility",
    "load_schema",
    "resolve_schema_path",
]
