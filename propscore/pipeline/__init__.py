"""
PropScore Pipeline
==================
Request orchestration (PropsOrchestrator) and the star player roster.
"""

from propscore.pipeline.orchestrator import PropsOrchestrator, rank_props, validate_request
from propscore.pipeline.roster import RosterPlayer, StarRoster

__all__ = [
    "PropsOrchestrator",
    "rank_props",
    "validate_request",
    "RosterPlayer",
    "StarRoster",
]
