"""
LAMA Planner Plugin
===================
LAMA - landmark-based anytime planner by Silvia Richter and Matthias
Westphal, winner of the IPC 2008 sequential satisficing track.

LAMA keeps improving its solution until it runs out of time and writes
every plan it finds to a numbered file (``plan.1``, ``plan.2``, ...).
"""

from __future__ import annotations

from ..base import PlannerPlugin


class LamaPlugin(PlannerPlugin):

    # ── metadata ────────────────────────────────────────

    @property
    def key(self) -> str:
        return "lama"

    @property
    def name(self) -> str:
        return "LAMA"

    @property
    def command(self) -> str:
        return "lama-planner"

    @property
    def default_version(self) -> str:
        return "2008"

    @property
    def description(self) -> str:
        return (
            "LAMA - Landmark-based anytime planner. Produces a sequence of "
            "improving plans, one numbered plan file per solution found."
        )

    @property
    def website(self) -> str:
        return "https://www.fast-downward.org/"


# Module-level instance for auto-discovery
plugin = LamaPlugin()
