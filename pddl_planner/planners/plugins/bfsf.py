"""
BFS(f) Planner Plugin
=====================
Best-first width search planner by Lipovetzky and Geffner.
Writes a single plan file.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..base import PlannerPlugin


class BfsfPlugin(PlannerPlugin):

    @property
    def key(self) -> str:
        return "bfsf"

    @property
    def name(self) -> str:
        return "BFSF"

    @property
    def command(self) -> str:
        return "bfsf-planner"

    @property
    def description(self) -> str:
        return "BFS(f) - best-first search guided by novelty and helpful actions."

    def discover_candidates(self, staging_dir: Path, result_path: Path) -> List[Path]:
        return [result_path] if result_path.is_file() else []


plugin = BfsfPlugin()
