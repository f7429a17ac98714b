"""
Arvand-Herd Planner Plugin
==========================
ArvandHerd - parallel portfolio of Arvand random-walk planners and LAMA
(IPC 2011 multi-core track).

The planner script writes exactly one plan file: the last and best plan
the herd agreed on.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..base import PlannerPlugin


class ArvandHerdPlugin(PlannerPlugin):

    # ── metadata ────────────────────────────────────────

    @property
    def key(self) -> str:
        return "arvandherd"

    @property
    def name(self) -> str:
        return "ARVANDHERD"

    @property
    def command(self) -> str:
        return "arvand-herd-planner"

    @property
    def default_version(self) -> str:
        return "1"

    @property
    def description(self) -> str:
        return (
            "ArvandHerd - portfolio of random-walk Arvand planners running "
            "alongside LAMA. Writes a single plan file."
        )

    # ── output parsing ──────────────────────────────────

    def discover_candidates(self, staging_dir: Path, result_path: Path) -> List[Path]:
        return [result_path] if result_path.is_file() else []


plugin = ArvandHerdPlugin()
