"""
Plugin Registry

PluginRegistry: in-process singleton that stores activated plugins together
with the PluginApi each one registered its extensions through.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.plugins.api import PluginApi
    from app.plugins.base import PluginBase

logger = logging.getLogger(__name__)


class PluginRegistry:
    """In-process registry of loaded plugins, keyed by plugin name."""

    def __init__(self) -> None:
        self._plugins: dict[str, PluginBase] = {}
        self._apis: dict[str, PluginApi] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: PluginBase, api: PluginApi | None = None) -> None:
        """Register a plugin and the API it was activated with."""
        self._plugins[plugin.meta.name] = plugin
        if api is not None:
            self._apis[plugin.meta.name] = api
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    def clear(self) -> None:
        self._plugins.clear()
        self._apis.clear()

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, name: str) -> PluginBase | None:
        """Return the plugin with the given name, or None if not registered."""
        return self._plugins.get(name)

    def api_for(self, name: str) -> PluginApi | None:
        return self._apis.get(name)

    def all_plugins(self) -> list[PluginBase]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def is_registered(self, name: str) -> bool:
        """Return True if a plugin with the given name has been registered."""
        return name in self._plugins

    def assets(self) -> list[str]:
        """Return every asset registered by an enabled plugin."""
        return [
            asset
            for name, plugin in self._plugins.items()
            if plugin.enabled and name in self._apis
            for asset in self._apis[name].assets
        ]


# ── Global singleton ──────────────────────────────────────────────────────────
# Import this wherever you need to inspect registered plugins.
plugin_registry = PluginRegistry()
