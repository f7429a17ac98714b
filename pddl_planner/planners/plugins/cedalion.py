"""
Cedalion Planner Plugin
=======================
Cedalion - automatically configured Fast Downward portfolio from the
IPC 2014 sequential satisficing track.  Writes numbered plan files.
"""

from __future__ import annotations

from ..base import PlannerPlugin


class CedalionPlugin(PlannerPlugin):

    @property
    def key(self) -> str:
        return "cedalion"

    @property
    def name(self) -> str:
        return "CEDALION"

    @property
    def command(self) -> str:
        return "cedalion-planner"

    @property
    def default_version(self) -> str:
        return "2014"

    @property
    def description(self) -> str:
        return (
            "Cedalion - algorithm-configured sequential portfolio built on "
            "Fast Downward (IPC 2014)."
        )


plugin = CedalionPlugin()
