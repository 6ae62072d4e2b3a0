"""Operations executed by sequences."""

from fleetroll.operations.base import Operation
from fleetroll.operations.commands import LocalCommandOperation, RemoteCommandOperation
from fleetroll.operations.evaluator import ScriptEvaluator

__all__ = [
    "Operation",
    "LocalCommandOperation",
    "RemoteCommandOperation",
    "ScriptEvaluator",
]
