"""
PDDL Planner Plugin System
==========================
Registry of external planners with auto-discovery.

Usage:
    from pddl_planner.planners import planner_registry

    planner_registry.discover_plugins()

    # All registered planners / the ones installed on this host
    planner_registry.list_names()
    planner_registry.available_names()

    # Run one planner directly
    plugin = planner_registry.lookup("lama")
    candidates = await plugin.plan(problem, "", domain, timeout=10)
"""

from .base import PlannerInfo, PlannerPlugin, PlannerStatus
from .errors import (
    AbnormalExitError,
    DuplicatePlannerError,
    ErrorKind,
    PlanParseError,
    PlannerConfigError,
    PlannerError,
    PlannerNotFoundError,
    PlannerTimeoutError,
    RegistryError,
    StagingError,
    UnknownPlannerError,
)
from .models import (
    ExecutionMode,
    ExecutionReport,
    ExecutionRequest,
    GroundedAction,
    OutcomeStatus,
    Plan,
    PlanCandidates,
    PlanOutcome,
)
from .registry import PlannerRegistry, planner_registry

__all__ = [
    "AbnormalExitError",
    "DuplicatePlannerError",
    "ErrorKind",
    "ExecutionMode",
    "ExecutionReport",
    "ExecutionRequest",
    "GroundedAction",
    "OutcomeStatus",
    "Plan",
    "PlanCandidates",
    "PlanOutcome",
    "PlanParseError",
    "PlannerConfigError",
    "PlannerError",
    "PlannerInfo",
    "PlannerNotFoundError",
    "PlannerPlugin",
    "PlannerRegistry",
    "PlannerStatus",
    "PlannerTimeoutError",
    "RegistryError",
    "StagingError",
    "UnknownPlannerError",
    "planner_registry",
]
