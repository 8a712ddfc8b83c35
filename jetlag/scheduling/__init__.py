"""
Practical scheduling layer.

Plans each day's activities from the circadian model, then fits them
around sleep and the daily ceiling.

Modules:
- day_planner: Plan activities for pre-flight, arrival and adaptation days
- conflict_resolver: Enforce the daily ceiling and remove overlaps
"""

from .conflict_resolver import ConflictResolver
from .day_planner import DayPlanner

__all__ = [
    "DayPlanner",
    "ConflictResolver",
]
