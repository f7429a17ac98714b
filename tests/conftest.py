import asyncio
import textwrap
from pathlib import Path
from typing import Iterable, Optional

import pytest

from pddl_planner.planners.base import PlannerPlugin
from pddl_planner.planners.models import GroundedAction, Plan, PlanCandidates
from pddl_planner.planners.registry import PlannerRegistry


DOMAIN = textwrap.dedent("""\
    (define (domain blocks)
      (:requirements :strips)
      (:predicates (on ?x ?y) (ontable ?x) (clear ?x) (handempty) (holding ?x))
    )
""")

PROBLEM = textwrap.dedent("""\
    (define (problem stack-two)
      (:domain blocks)
      (:objects a b)
      (:init (ontable a) (ontable b) (clear a) (clear b) (handempty))
      (:goal (on b a))
    )
""")


def make_plan(*steps: str, cost: Optional[float] = None) -> Plan:
    """make_plan("pick-up b", "stack b a") -> Plan of two grounded actions."""
    actions = []
    for step in steps:
        name, *args = step.split()
        actions.append(GroundedAction(name, tuple(args)))
    return Plan(actions=tuple(actions), cost=cost)


class StubPlugin(PlannerPlugin):
    """In-process planner that records its calls instead of running a program."""

    def __init__(self, key: str, plans: Iterable[Plan] = (), error: Optional[Exception] = None,
                 delay: float = 0.0) -> None:
        super().__init__()
        self._key = key
        self.plans = list(plans)
        self.error = error
        self.delay = delay
        self.calls = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def name(self) -> str:
        return self._key.upper()

    @property
    def command(self) -> str:
        return f"{self._key}-stub-planner"

    async def plan(self, problem, actions, domain, timeout=None):
        self.calls.append((problem, actions, domain, timeout))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return PlanCandidates(self.plans)


class ScriptPlugin(PlannerPlugin):
    """Planner backed by a shell script: ``script <domain> <problem> <result>``."""

    def __init__(self, script: Path, staging_root: Path, key: str = "script") -> None:
        super().__init__(staging_root=staging_root)
        self._script = str(script)
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def name(self) -> str:
        return self._key.upper()

    @property
    def command(self) -> str:
        return self._script


@pytest.fixture
def staging_root(tmp_path) -> Path:
    return tmp_path / "staging"


@pytest.fixture
def write_script(tmp_path):
    """Write an executable /bin/sh script and return its path."""

    def _write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        path.chmod(0o755)
        return path

    return _write


@pytest.fixture
def make_registry():
    def _make(*plugins: PlannerPlugin) -> PlannerRegistry:
        registry = PlannerRegistry()
        for plugin in plugins:
            registry.register(plugin)
        return registry

    return _make
