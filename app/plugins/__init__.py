"""
Forum Plugin System

Public API for the plugin system:
    PluginMeta      - plugin metadata dataclass
    PluginBase      - abstract base class for all plugins
    PluginRegistry  - registry of loaded plugins
    plugin_registry - global singleton registry instance
    EventBus        - ordered event dispatch
    event_bus       - global singleton event bus

PluginApi lives in app.plugins.api and is imported from there directly.
"""

from .base import PluginBase, PluginMeta
from .events import EventBus, event_bus
from .registry import PluginRegistry, plugin_registry

__all__ = ["EventBus", "PluginBase", "PluginMeta", "PluginRegistry", "event_bus", "plugin_registry"]
