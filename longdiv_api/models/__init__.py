"""Domain models package"""

from .domain import EngineSession, ProgressionSummary

__all__ = [
    "EngineSession",
    "ProgressionSummary",
]
