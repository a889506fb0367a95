"""Workflow specs shipped with guidedflow."""

from __future__ import annotations

from .activity_creation import ACTIVITY_CREATION_SPEC
from .arc_creation import ARC_CREATION_SPEC
from .first_time_onboarding import FIRST_TIME_ONBOARDING_SPEC
from .goal_creation import GOAL_CREATION_SPEC

BUILTIN_SPECS = (
    FIRST_TIME_ONBOARDING_SPEC,
    ARC_CREATION_SPEC,
    GOAL_CREATION_SPEC,
    ACTIVITY_CREATION_SPEC,
)

__all__ = [
    "ACTIVITY_CREATION_SPEC",
    "ARC_CREATION_SPEC",
    "FIRST_TIME_ONBOARDING_SPEC",
    "GOAL_CREATION_SPEC",
    "BUILTIN_SPECS",
]
