"""
UNIFORM Planner Plugin
======================
Uniform-cost search planner from the IPC 2011 deterministic track.
Anytime: plan files are numbered like LAMA's.
"""

from __future__ import annotations

from ..base import PlannerPlugin


class UniformPlugin(PlannerPlugin):

    @property
    def key(self) -> str:
        return "uniform"

    @property
    def name(self) -> str:
        return "UNIFORM"

    @property
    def command(self) -> str:
        return "uniform-planner"

    @property
    def description(self) -> str:
        return "Uniform-cost search planner (IPC 2011 sequential track)."


plugin = UniformPlugin()
