"""
Pipeline component - one load / validate / export run.
"""

from .component import Pipeline, can_transition
from .models import PipelineState

__all__ = [
    "Pipeline",
    "PipelineState",
    "can_transition",
]
