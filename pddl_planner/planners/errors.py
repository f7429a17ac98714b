"""
Error taxonomy for planner execution.

Per-planner failures derive from `PlannerError` and are turned into
failure outcomes by the orchestrator.  `UnknownPlannerError` is the only
error that aborts a whole run; registry errors surface at startup.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TIMED_OUT = "timed_out"
    ABNORMAL_EXIT = "abnormal_exit"
    PARSE_FAILURE = "parse_failure"
    FILESYSTEM = "filesystem"
    INTERNAL = "internal"


class PlannerError(Exception):
    """Base class for failures of a single planner invocation."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, planner: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.planner = planner


class PlannerNotFoundError(PlannerError):
    kind = ErrorKind.NOT_FOUND


class PlannerTimeoutError(PlannerError):
    kind = ErrorKind.TIMED_OUT

    def __init__(self, message: str, planner: Optional[str] = None,
                 timeout: Optional[float] = None) -> None:
        super().__init__(message, planner)
        self.timeout = timeout


class AbnormalExitError(PlannerError):
    kind = ErrorKind.ABNORMAL_EXIT

    def __init__(self, message: str, planner: Optional[str] = None,
                 exit_code: Optional[int] = None) -> None:
        super().__init__(message, planner)
        self.exit_code = exit_code


class PlanParseError(PlannerError):
    kind = ErrorKind.PARSE_FAILURE


class StagingError(PlannerError):
    kind = ErrorKind.FILESYSTEM


class UnknownPlannerError(LookupError):
    """A requested planner name is not registered."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known: List[str] = sorted(known)
        super().__init__(
            f"planner with name '{name}' is not registered "
            f"(registered: {', '.join(self.known) or 'none'})"
        )


class RegistryError(Exception):
    """Invalid registry configuration, reported at startup."""


class DuplicatePlannerError(RegistryError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Planner '{key}' is already registered")


class PlannerConfigError(RegistryError):
    """Malformed planner definition in the YAML planner configuration."""
