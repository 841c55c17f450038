"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
Capabilities: custom validation rules.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from dtokit.plugins.hookspecs import DtokitHookSpec

PROJECT_NAME = "dtokit"
DEFAULT_ENTRY_POINT_GROUP = "dtokit.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and rule registration."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(DtokitHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, group: str = DEFAULT_ENTRY_POINT_GROUP) -> list[str]:
        """Load entry-point plugins from *group* and register their rules.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(group)
        self._normalize_plugin_instances()
        for plugin in self._pm.get_plugins():
            self._register_plugin_rules(plugin, self._plugin_name(plugin))
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly and collect its rules."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        self._register_plugin_rules(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance. Rules it registered stay registered."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._plugin_name(p) for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _plugin_name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _register_plugin_rules(plugin: object, plugin_name: str) -> None:
        """Register rules exposed by a single plugin instance."""
        from dtokit.validation.rules import register_rule

        for hook_name, implicit in (("register_rules", False), ("register_implicit_rules", True)):
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue

            try:
                rule_map = hook()
            except Exception:
                logger.warning(
                    "Failed to collect rules from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            if rule_map is None:
                continue
            if not isinstance(rule_map, dict):
                logger.warning("Plugin %s returned non-dict rule registrations", plugin_name)
                continue

            for rule_name, check in rule_map.items():
                try:
                    register_rule(rule_name, check, implicit=implicit)
                except (TypeError, ValueError):
                    logger.warning(
                        "Skipping rule registration %r from plugin %s",
                        rule_name,
                        plugin_name,
                        exc_info=True,
                    )
