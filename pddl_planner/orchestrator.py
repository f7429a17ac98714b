"""
Execution orchestrator: runs the requested planners on one problem and
collects one outcome per planner.

Planner names are resolved before anything runs, so a typo aborts the
whole request with `UnknownPlannerError`.  After that every planner gets
its own outcome: failures are recorded, never raised.  In parallel mode
each planner runs as its own asyncio task and writes into the result slot
at its request position, which keeps the report in request order no
matter which planner finishes first.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from .core.config import settings
from .planners.base import PlannerPlugin
from .planners.errors import ErrorKind, PlannerError
from .planners.models import (
    ExecutionMode,
    ExecutionReport,
    ExecutionRequest,
    PlanOutcome,
    build_report,
)
from .planners.registry import PlannerRegistry, planner_registry

logger = logging.getLogger(__name__)


class PlanningOrchestrator:

    def __init__(
        self,
        registry: Optional[PlannerRegistry] = None,
        default_planner: Optional[str] = None,
    ) -> None:
        if registry is None:
            registry = planner_registry
            registry.discover_plugins()
        registry.seal()
        self.registry = registry
        self.default_planner = default_planner or settings.DEFAULT_PLANNER

    def resolve(self, names: Sequence[str]) -> List[PlannerPlugin]:
        """Look up every name; the first unknown one raises `UnknownPlannerError`."""
        return [self.registry.lookup(name) for name in names]

    async def run(self, request: ExecutionRequest) -> ExecutionReport:
        names = list(request.planners) or [self.default_planner]
        plugins = self.resolve(names)

        logger.info(
            "Dispatching %d planner(s) %s, mode=%s, timeout=%gs",
            len(plugins), ", ".join(names), request.mode.value, request.timeout,
        )

        if request.mode is ExecutionMode.SEQUENTIAL:
            outcomes = []
            for name, plugin in zip(names, plugins):
                outcomes.append(await self._run_planner(name, plugin, request))
        else:
            slots: List[Optional[PlanOutcome]] = [None] * len(plugins)

            async def unit(index: int, name: str, plugin: PlannerPlugin) -> None:
                slots[index] = await self._run_planner(name, plugin, request)

            tasks = [
                asyncio.create_task(unit(index, name, plugin))
                for index, (name, plugin) in enumerate(zip(names, plugins))
            ]
            await asyncio.gather(*tasks)
            outcomes = slots

        report = build_report(names, outcomes)
        logger.info(
            "Planning finished: %d succeeded, %d failed",
            len(report.succeeded), len(report.failed),
        )
        return report

    def run_sync(self, request: ExecutionRequest) -> ExecutionReport:
        """Blocking variant of `run` for synchronous callers."""
        return asyncio.run(self.run(request))

    async def _run_planner(
        self, name: str, plugin: PlannerPlugin, request: ExecutionRequest
    ) -> PlanOutcome:
        start = time.monotonic()
        try:
            candidates = await plugin.plan(
                request.problem, request.actions, request.domain, request.timeout
            )
        except PlannerError as exc:
            elapsed = time.monotonic() - start
            logger.info("Planner %s failed (%s): %s", name, exc.kind.value, exc.message)
            return PlanOutcome.failure(name, exc.kind, exc.message, elapsed)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.exception("Planner %s raised an unexpected error", name)
            return PlanOutcome.failure(name, ErrorKind.INTERNAL, str(exc) or type(exc).__name__, elapsed)

        elapsed = time.monotonic() - start
        logger.info("Planner %s: %d candidate(s) in %.2fs", name, len(candidates), elapsed)
        return PlanOutcome.success(name, candidates, elapsed)
