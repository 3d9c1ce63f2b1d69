"""
Plugin Loader

Handles reading/writing plugin configuration from the JSON file named by
`settings.plugins_config_file` and activating all built-in plugins at
application startup.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from app.config import settings

if TYPE_CHECKING:
    from app.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

# ── Config file location ──────────────────────────────────────────────────────
_PLUGINS_CONFIG_FILE = Path(settings.plugins_config_file)

# ── Default plugin config (all built-in plugins enabled) ─────────────────────
_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "custom_fields": {"enabled": True},
}


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_plugins_config() -> dict[str, dict[str, Any]]:
    """
    Load plugin configuration from disk.

    Returns defaults if the file does not exist or cannot be parsed.
    """
    if _PLUGINS_CONFIG_FILE.exists():
        try:
            return json.loads(_PLUGINS_CONFIG_FILE.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return copy.deepcopy(_DEFAULT_CONFIG)


def save_plugins_config(config: dict[str, dict[str, Any]]) -> None:
    """Persist plugin configuration to disk."""
    _PLUGINS_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    _PLUGINS_CONFIG_FILE.write_text(
        json.dumps(config, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


# ── Startup initialisation ────────────────────────────────────────────────────


async def initialize_plugins(registry: PluginRegistry) -> None:
    """
    Load, activate and register all built-in plugins.

    Called from main.py lifespan() after the tables exist.  Deferred imports
    keep app.plugins importable from the services the plugins extend.
    """
    from app.plugins.api import PluginApi
    from app.plugins.custom_fields_plugin import CustomFieldsPlugin

    config = load_plugins_config()

    for plugin_class in [CustomFieldsPlugin]:
        plugin = plugin_class()
        plugin_config = config.get(plugin.meta.name, {"enabled": True})
        await plugin.on_load(plugin_config)
        api = PluginApi(plugin)
        plugin.activate(api)
        registry.register(plugin, api)

    logger.info("Plugin initialisation complete - %d plugins loaded", len(registry.all_plugins()))


async def shutdown_plugins(registry: PluginRegistry) -> None:
    for plugin in registry.all_plugins():
        await plugin.on_unload()
