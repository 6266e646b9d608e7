"""
Correlation engine: requirement sets, per-tag trackers and analysis sessions.
"""

from ngrequire.structure.registry import (
    ComponentTracker,
    Resolved,
    TagRegistry,
    TrackerState,
    Unresolved,
)
from ngrequire.structure.requirements import InputRequirementSet
from ngrequire.structure.session import AnalysisSession, DeclarationSession

__all__ = [
    "AnalysisSession",
    "ComponentTracker",
    "DeclarationSession",
    "InputRequirementSet",
    "Resolved",
    "TagRegistry",
    "TrackerState",
    "Unresolved",
]
