"""
Planner Registry - central catalogue of all planner plugins.

Auto-discovers plugins from the ``plugins/`` sub-package, then adds the
planners declared in the YAML planner configuration.  The registry is
filled once at startup and sealed before the first run; from then on it
is only read, so concurrent lookups need no locking.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core.config import settings
from .base import PlannerInfo, PlannerPlugin, PlannerStatus
from .configured import load_configured_plugins
from .errors import DuplicatePlannerError, RegistryError, UnknownPlannerError

logger = logging.getLogger(__name__)


class PlannerRegistry:
    """
    Registry of planner plugins keyed by their lowercase name.

    Plugins are loaded from ``pddl_planner.planners.plugins.*`` by
    `discover_plugins`.  Registering a key twice is a configuration error.
    """

    plugins_package = "pddl_planner.planners.plugins"

    def __init__(self) -> None:
        self._plugins: Dict[str, PlannerPlugin] = {}
        self._loaded = False
        self._sealed = False

    # ── discovery ───────────────────────────────────────

    def discover_plugins(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """Register every built-in plugin plus the configured planners, then seal."""
        if self._loaded:
            return

        plugins_path = Path(__file__).parent / "plugins"
        for _, module_name, _ in pkgutil.iter_modules([str(plugins_path)]):
            if module_name.startswith("_"):
                continue
            fqn = f"{self.plugins_package}.{module_name}"
            try:
                mod = importlib.import_module(fqn)
            except ImportError as exc:
                logger.error("Failed to load planner plugin module '%s': %s", fqn, exc)
                continue
            # Look for a module-level ``plugin`` attribute or
            # any class that subclasses PlannerPlugin.
            if isinstance(getattr(mod, "plugin", None), PlannerPlugin):
                self.register(mod.plugin)
                continue
            for attr_name in dir(mod):
                obj = getattr(mod, attr_name)
                if (
                    isinstance(obj, type)
                    and issubclass(obj, PlannerPlugin)
                    and obj.__module__ == fqn
                ):
                    self.register(obj())

        config = Path(config_path if config_path is not None else settings.PLANNERS_CONFIG)
        if config.is_file():
            for plugin in load_configured_plugins(config):
                self.register(plugin)
        else:
            logger.debug("No planner configuration at %s", config)

        self._loaded = True
        self.seal()
        logger.info(
            "Planner registry loaded %d plugins: %s",
            len(self._plugins),
            ", ".join(self.list_names()),
        )

    def register(self, plugin: PlannerPlugin) -> None:
        """Register a single plugin instance.  Keys must be unique."""
        if self._sealed:
            raise RegistryError(
                f"Cannot register '{plugin.key}': planners can only be added at startup"
            )
        key = plugin.key.lower()
        if key in self._plugins:
            raise DuplicatePlannerError(key)
        self._plugins[key] = plugin
        logger.debug("Registered planner plugin: %s (%s)", key, plugin.name)

    def seal(self) -> None:
        """Freeze the registry; further `register` calls fail."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ── queries ─────────────────────────────────────────

    def lookup(self, name: str) -> PlannerPlugin:
        plugin = self._plugins.get(name.lower())
        if plugin is None:
            raise UnknownPlannerError(name, self._plugins.keys())
        return plugin

    def get_plugin(self, name: str) -> Optional[PlannerPlugin]:
        return self._plugins.get(name.lower())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._plugins

    # ── listing ─────────────────────────────────────────

    def list_names(self) -> List[str]:
        return sorted(self._plugins.keys())

    def available_names(self) -> List[str]:
        """Registered planners whose executable is present on this host."""
        return [key for key in self.list_names() if self._plugins[key].is_installed()]

    def list_planners(self) -> List[PlannerInfo]:
        return [self._plugins[key].to_info() for key in self.list_names()]

    def get_ready_planners(self) -> List[PlannerInfo]:
        return [p for p in self.list_planners() if p.status == PlannerStatus.READY.value]

    # ── utilities ───────────────────────────────────────

    @property
    def count(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return f"<PlannerRegistry plugins={self.list_names()}>"


# ─── Global singleton ──────────────────────────────────
planner_registry = PlannerRegistry()
