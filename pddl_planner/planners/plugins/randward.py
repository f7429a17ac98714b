"""
Randward Planner Plugin
=======================
Randward - Fast Downward variant with randomised successor ordering.

Each restart leaves its own plan file next to the requested result file
(``plan``, ``plan.randward.2``, ...), so every file that starts with the
result name is a candidate.  The translator's work files are left in the
staging area and removed with it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..base import PlannerPlugin

# Work files the translator / preprocessor leave behind
WORK_FILES = ("output", "output.sas", "all.groups", "test.groups")


class RandwardPlugin(PlannerPlugin):

    # ── metadata ────────────────────────────────────────

    @property
    def key(self) -> str:
        return "randward"

    @property
    def name(self) -> str:
        return "RANDWARD"

    @property
    def command(self) -> str:
        return "randward-planner"

    @property
    def description(self) -> str:
        return "Randward - randomised Fast Downward restarts, one plan file per restart."

    # ── output parsing ──────────────────────────────────

    def discover_candidates(self, staging_dir: Path, result_path: Path) -> List[Path]:
        return sorted(
            path for path in staging_dir.glob(f"{result_path.name}*")
            if path.is_file() and path.name not in WORK_FILES
        )


plugin = RandwardPlugin()
