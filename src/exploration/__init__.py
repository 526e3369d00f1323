"""Exploration package - Session state machine for interactive graph exploration."""

from .session import ExplorationSession, OperationResult, Outcome
from .state import ExplorationState, PathAnnotation, SelectionMode

__all__ = [
    "ExplorationSession",
    "ExplorationState",
    "OperationResult",
    "Outcome",
    "PathAnnotation",
    "SelectionMode",
]
