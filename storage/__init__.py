"""
Persistence for search results and run checkpoints.
"""

from .writer import ResultSink, ResultWriter, MemorySink
from .state import StateStore, NullStateStore

__all__ = [
    "ResultSink",
    "ResultWriter",
    "MemorySink",
    "StateStore",
    "NullStateStore",
]
