"""
Fast Downward Planner Plugin
============================
Fast Downward - the planning system by Malte Helmert et al.  The search
configuration is picked through an alias (``lama-first``,
``seq-sat-lama-2011``, ...).

Command: fast-downward.py --alias <alias> --plan-file <result> <domain> <problem>

Single-shot aliases write ``sas_plan``; anytime aliases write
``sas_plan.1``, ``sas_plan.2``, ...  Both are handled by the default
candidate discovery.
"""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, List, Optional, Union

from ...core.config import settings
from ..base import PlannerPlugin


class FastDownwardPlugin(PlannerPlugin):

    def __init__(
        self,
        alias: Optional[str] = None,
        staging_root: Optional[Union[str, Path]] = None,
    ) -> None:
        super().__init__(staging_root=staging_root)
        self._alias = alias

    # ── metadata ────────────────────────────────────────

    @property
    def key(self) -> str:
        return "fd"

    @property
    def name(self) -> str:
        return "FD"

    @property
    def command(self) -> str:
        return "fast-downward.py"

    @property
    def default_version(self) -> str:
        return "1"

    @property
    def description(self) -> str:
        return f"Fast Downward planning system (alias '{self.alias}')."

    @property
    def website(self) -> str:
        return "https://www.fast-downward.org/"

    @property
    def alias(self) -> str:
        return self._alias or settings.FD_ALIAS

    @property
    def result_basename(self) -> str:
        return "sas_plan"

    @property
    def accepted_exit_codes(self) -> FrozenSet[int]:
        # 0 = plan found; 1-3 = plan found, then ran out of memory and/or time
        return frozenset({0, 1, 2, 3})

    # ── execution ───────────────────────────────────────

    def build_command(
        self,
        executable: str,
        domain_path: Path,
        problem_path: Path,
        result_path: Path,
    ) -> List[str]:
        return [
            executable,
            "--alias", self.alias,
            "--plan-file", str(result_path),
            str(domain_path),
            str(problem_path),
        ]


plugin = FastDownwardPlugin()
