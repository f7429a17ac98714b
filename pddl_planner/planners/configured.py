"""
Planners declared in the YAML planner configuration.

Each entry becomes a `CommandTemplatePlugin`: the command line is built
from an argument template with ``{domain}``, ``{problem}`` and ``{result}``
placeholders, and plan files are found through glob patterns that may use
the same placeholders.

Example ``config/planners.yaml``::

    planners:
      - key: lpg
        name: LPG-td
        command: lpg-td
        args: ["-o", "{domain}", "-f", "{problem}", "-out", "{result}"]
        result_patterns: ["{result}", "{result}_*.SOL"]
"""

from __future__ import annotations

import logging
import string
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

import yaml

from .base import PlannerPlugin
from .errors import PlannerConfigError

logger = logging.getLogger(__name__)

PLACEHOLDERS = frozenset({"domain", "problem", "result"})
DEFAULT_ARGS = ("{domain}", "{problem}", "{result}")


def _check_placeholders(key: str, templates: Iterable[str]) -> None:
    for template in templates:
        for _, field_name, _, _ in string.Formatter().parse(template):
            if field_name is not None and field_name not in PLACEHOLDERS:
                raise PlannerConfigError(
                    f"Planner '{key}': unknown placeholder '{{{field_name}}}' in {template!r}"
                )


class CommandTemplatePlugin(PlannerPlugin):
    """A planner fully described by configuration data."""

    def __init__(
        self,
        key: str,
        command: str,
        name: Optional[str] = None,
        args: Sequence[str] = DEFAULT_ARGS,
        result_patterns: Optional[Sequence[str]] = None,
        exit_codes: Sequence[int] = (0,),
        description: str = "",
        result_basename: str = "plan",
        staging_root: Optional[Union[str, Path]] = None,
    ) -> None:
        super().__init__(staging_root=staging_root)
        self._key = key.lower()
        self._command = command
        self._name = name or key
        self._args = tuple(args)
        self._result_patterns = tuple(result_patterns) if result_patterns else None
        self._exit_codes = frozenset(exit_codes)
        self._description = description
        self._result_basename = result_basename
        _check_placeholders(self._key, self._args + (self._result_patterns or ()))

    @property
    def key(self) -> str:
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def command(self) -> str:
        return self._command

    @property
    def description(self) -> str:
        return self._description

    @property
    def category(self) -> str:
        return "configured"

    @property
    def accepted_exit_codes(self) -> FrozenSet[int]:
        return self._exit_codes

    @property
    def result_basename(self) -> str:
        return self._result_basename

    def build_command(
        self,
        executable: str,
        domain_path: Path,
        problem_path: Path,
        result_path: Path,
    ) -> List[str]:
        values = {"domain": str(domain_path), "problem": str(problem_path), "result": str(result_path)}
        return [executable] + [arg.format(**values) for arg in self._args]

    def discover_candidates(self, staging_dir: Path, result_path: Path) -> List[Path]:
        if self._result_patterns is None:
            return super().discover_candidates(staging_dir, result_path)
        # Patterns are relative to the staging directory
        values = {
            "domain": self.domain_filename,
            "problem": self.problem_filename,
            "result": result_path.name,
        }
        found: List[Path] = []
        for pattern in self._result_patterns:
            for path in sorted(staging_dir.glob(pattern.format(**values))):
                if path.is_file() and path not in found:
                    found.append(path)
        return found


def plugin_from_dict(entry: Dict[str, Any]) -> CommandTemplatePlugin:
    if not isinstance(entry, dict):
        raise PlannerConfigError(f"Planner entry must be a mapping, got {entry!r}")
    missing = [f for f in ("key", "command") if not entry.get(f)]
    if missing:
        raise PlannerConfigError(f"Planner entry {entry!r} is missing: {', '.join(missing)}")
    known = {"key", "name", "command", "args", "result_patterns", "exit_codes",
             "description", "result_basename"}
    unknown = set(entry) - known
    if unknown:
        raise PlannerConfigError(
            f"Planner '{entry['key']}': unknown field(s) {', '.join(sorted(unknown))}"
        )
    return CommandTemplatePlugin(
        key=str(entry["key"]),
        command=str(entry["command"]),
        name=entry.get("name"),
        args=[str(a) for a in entry.get("args", DEFAULT_ARGS)],
        result_patterns=entry.get("result_patterns"),
        exit_codes=[int(c) for c in entry.get("exit_codes", [0])],
        description=entry.get("description", ""),
        result_basename=entry.get("result_basename", "plan"),
    )


def load_configured_plugins(path: Union[str, Path]) -> List[CommandTemplatePlugin]:
    """Read planner definitions from a YAML file."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise PlannerConfigError(f"Invalid YAML in {path}: {exc}") from exc

    entries = data.get("planners", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise PlannerConfigError(f"{path}: 'planners' must be a list")

    plugins = [plugin_from_dict(entry) for entry in entries]
    logger.info("Loaded %d configured planner(s) from %s", len(plugins), path)
    return plugins
