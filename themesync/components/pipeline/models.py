"""
Pipeline states.
"""

from __future__ import annotations

from enum import Enum


class PipelineState(str, Enum):
    """Stages of one load -> validate -> export run."""

    EMPTY = "empty"
    LOADED = "loaded"
    VALIDATED = "validated"
    EXPORTED = "exported"
