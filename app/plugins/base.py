"""
Plugin Base Classes

PluginMeta: declarative metadata for a plugin (name, version, site setting).
PluginBase: abstract base class all plugins must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.config import settings

if TYPE_CHECKING:
    from app.plugins.api import PluginApi


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a plugin.

    Attributes:
        name:            Machine-readable slug, e.g. "custom_fields".
        version:         Version string, e.g. "1.0".
        description:     Human-readable description ("about").
        authors:         Plugin author(s).
        url:             Project homepage.
        enabled_setting: Name of the boolean site setting gating the plugin,
                         or None when the plugin is always active.
        config_schema:   JSON Schema fragments describing configurable options.
    """

    name: str
    version: str
    description: str
    authors: str = "Forum Core Team"
    url: str | None = None
    enabled_setting: str | None = None
    config_schema: dict[str, Any] = field(default_factory=dict)


class PluginBase(ABC):
    """
    Abstract base class for all plugins.

    Subclasses must implement the `meta` property and usually override
    `activate()` to register their extensions.
    """

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the plugin's metadata."""
        ...

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    @property
    def enabled(self) -> bool:
        """
        True when the plugin is enabled in its config and its site setting is on.

        Evaluated on every call so toggling the setting takes effect without
        re-registering extensions.
        """
        if not self._config.get("enabled", True):
            return False
        if self.meta.enabled_setting is None:
            return True
        return bool(getattr(settings, self.meta.enabled_setting, False))

    async def on_load(self, config: dict[str, Any]) -> None:
        """Called once at startup with the plugin's persisted config dict."""
        self._config = config

    def activate(self, api: PluginApi) -> None:  # noqa: B027
        """
        Register the plugin's extensions with the host.

        Called once by the loader after on_load().  Default is a no-op.
        """

    async def on_unload(self) -> None:  # noqa: B027
        """Called when the application shuts down."""
