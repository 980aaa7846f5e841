"""
Adapters for the exporter component.
"""

from .filesystem import AtomicFileSink, default_sink

__all__ = [
    "AtomicFileSink",
    "default_sink",
]
