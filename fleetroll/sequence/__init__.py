"""Sequence tree and execution manager."""

from fleetroll.sequence.composite import (
    CompositeSequence,
    ConditionalCompositeSequence,
    LocalSequence,
    RemoteSequence,
)
from fleetroll.sequence.manager import ExecutionSequenceManager

__all__ = [
    "CompositeSequence",
    "ConditionalCompositeSequence",
    "LocalSequence",
    "RemoteSequence",
    "ExecutionSequenceManager",
]
