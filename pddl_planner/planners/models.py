"""
Value types shared by planner plugins and the orchestrator.

Plans and candidate sets are frozen once built: a plugin creates them while
parsing its output files and hands them over to the orchestrator unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import ErrorKind


# ────────────────────────────────────────────────────────
# Plans
# ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GroundedAction:
    """An action label with all of its arguments bound."""
    name: str
    arguments: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple
        object.__setattr__(self, "arguments", tuple(self.arguments))

    def __str__(self) -> str:
        return "(" + " ".join((self.name,) + self.arguments) + ")"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": list(self.arguments)}


@dataclass(frozen=True)
class Plan:
    """One candidate solution: an ordered sequence of grounded actions."""
    actions: Tuple[GroundedAction, ...] = ()
    cost: Optional[float] = None
    source: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[GroundedAction]:
        return iter(self.actions)

    def to_string(self) -> str:
        lines = [str(action) for action in self.actions]
        if self.cost is not None:
            lines.append(f"; cost = {self.cost:g}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actions": [a.to_dict() for a in self.actions],
            "cost": self.cost,
            "length": len(self.actions),
            "source": self.source,
        }


class PlanCandidates:
    """
    The plans produced by one planner run on one problem.

    Candidates carry no ranking; the order in which they are stored is the
    order the plugin discovered them and has no meaning.  An empty set means
    the planner ran but found nothing.
    """

    __slots__ = ("_plans",)

    def __init__(self, plans: Iterable[Plan] = ()) -> None:
        self._plans: Tuple[Plan, ...] = tuple(plans)

    @property
    def plans(self) -> Tuple[Plan, ...]:
        return self._plans

    def __len__(self) -> int:
        return len(self._plans)

    def __iter__(self) -> Iterator[Plan]:
        return iter(self._plans)

    def __bool__(self) -> bool:
        return bool(self._plans)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlanCandidates):
            return NotImplemented
        return sorted(map(repr, self._plans)) == sorted(map(repr, other._plans))

    def __hash__(self) -> int:
        return hash(frozenset(self._plans))

    def __repr__(self) -> str:
        return f"<PlanCandidates plans={len(self._plans)}>"

    def best(self) -> Optional[Plan]:
        """Lowest cost first, then fewest actions.  Plans without cost go last."""
        if not self._plans:
            return None
        return min(
            self._plans,
            key=lambda p: (p.cost is None, p.cost if p.cost is not None else 0.0, len(p)),
        )

    def to_string(self) -> str:
        if not self._plans:
            return "no plan found"
        blocks = []
        for index, plan in enumerate(self._plans, start=1):
            blocks.append(f"Candidate {index}:\n{plan.to_string()}")
        return "\n".join(blocks)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._plans]


# ────────────────────────────────────────────────────────
# Outcomes
# ────────────────────────────────────────────────────────

class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PlanOutcome:
    """Either the candidates of a planner or the reason it failed."""
    planner: str
    status: OutcomeStatus
    candidates: Optional[PlanCandidates] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    wall_time_seconds: float = 0.0

    @classmethod
    def success(cls, planner: str, candidates: PlanCandidates,
                wall_time_seconds: float = 0.0) -> "PlanOutcome":
        return cls(planner=planner, status=OutcomeStatus.SUCCESS,
                   candidates=candidates, wall_time_seconds=wall_time_seconds)

    @classmethod
    def failure(cls, planner: str, kind: ErrorKind, message: str,
                wall_time_seconds: float = 0.0) -> "PlanOutcome":
        return cls(planner=planner, status=OutcomeStatus.FAILURE,
                   error_kind=kind, message=message,
                   wall_time_seconds=wall_time_seconds)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    def same_result(self, other: "PlanOutcome") -> bool:
        """Compare outcomes ignoring timing."""
        return (
            self.planner == other.planner
            and self.status == other.status
            and self.candidates == other.candidates
            and self.error_kind == other.error_kind
            and self.message == other.message
        )

    def to_string(self) -> str:
        if self.ok:
            return self.candidates.to_string()
        return f"  FAILED ({self.error_kind.value}): {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planner": self.planner,
            "status": self.status.value,
            "candidates": self.candidates.to_dict() if self.candidates is not None else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
            "wall_time_seconds": self.wall_time_seconds,
        }


# ────────────────────────────────────────────────────────
# Requests and reports
# ────────────────────────────────────────────────────────

class ExecutionMode(str, Enum):
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


@dataclass(frozen=True)
class ExecutionRequest:
    """
    A planning problem together with the planners that should attempt it.

    Planner names are unique: a repeated name keeps its first position and
    its first spelling (names compare case-insensitively, as in the registry).
    An empty name list lets the orchestrator fall back to its default planner.
    The timeout must be a finite number of seconds greater than zero.
    """
    problem: str
    domain: str
    planners: Tuple[str, ...] = ()
    timeout: float = 7.0
    mode: ExecutionMode = ExecutionMode.PARALLEL
    actions: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.planners, str):
            raise TypeError("planners must be a sequence of names, not a string")
        unique: List[str] = []
        seen = set()
        for name in self.planners:
            if name.lower() not in seen:
                seen.add(name.lower())
                unique.append(name)
        object.__setattr__(self, "planners", tuple(unique))
        object.__setattr__(self, "mode", ExecutionMode(self.mode))
        if not self.timeout or not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ValueError(f"timeout must be a finite number > 0, got {self.timeout!r}")


@dataclass(frozen=True)
class ExecutionReport:
    """Outcomes in request order, one per requested planner."""
    entries: Tuple[Tuple[str, PlanOutcome], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, PlanOutcome]]:
        return iter(self.entries)

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.entries]

    @property
    def outcomes(self) -> List[PlanOutcome]:
        return [outcome for _, outcome in self.entries]

    def outcome(self, name: str) -> PlanOutcome:
        for entry_name, outcome in self.entries:
            if entry_name == name:
                return outcome
        raise KeyError(name)

    @property
    def succeeded(self) -> List[str]:
        return [name for name, o in self.entries if o.ok]

    @property
    def failed(self) -> List[str]:
        return [name for name, o in self.entries if not o.ok]

    @property
    def all_failed(self) -> bool:
        return bool(self.entries) and not self.succeeded

    def equivalent(self, other: "ExecutionReport") -> bool:
        """Same names, same order and same results, timing aside."""
        if self.names != other.names:
            return False
        return all(a.same_result(b) for a, b in zip(self.outcomes, other.outcomes))

    def render(self) -> str:
        return "\n".join(
            f"Planner {name}:\n{outcome.to_string()}\n" for name, outcome in self.entries
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planners": self.names,
            "results": [outcome.to_dict() for outcome in self.outcomes],
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


def build_report(names: Sequence[str], outcomes: Sequence[PlanOutcome]) -> ExecutionReport:
    if len(names) != len(outcomes):
        raise ValueError("every requested planner needs exactly one outcome")
    return ExecutionReport(entries=tuple(zip(names, outcomes)))
