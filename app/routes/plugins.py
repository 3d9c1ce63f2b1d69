"""
Plugin Administration Routes

GET  /api/v1/plugins          → list all registered plugins
GET  /api/v1/plugins/{name}   → get single plugin by name
POST /api/v1/plugins/{name}/enable  → enable plugin
POST /api/v1/plugins/{name}/disable → disable plugin

Plugin state is stored in the plugins config file; the site setting named by
a plugin's meta is reported but not changed here.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.auth import get_current_user
from app.exceptions import ResourceNotFoundError
from app.models.user import User  # noqa: TC001
from app.plugins.base import PluginBase  # noqa: TC001
from app.plugins.loader import load_plugins_config, save_plugins_config
from app.plugins.registry import plugin_registry

router = APIRouter(tags=["Plugins"])
logger = logging.getLogger(__name__)


class PluginResponse(BaseModel):
    name: str
    version: str
    description: str
    authors: str
    url: str | None
    enabled: bool
    enabled_setting: str | None
    assets: list[str]
    config: dict[str, Any]


def _build_response(plugin: PluginBase) -> PluginResponse:
    api = plugin_registry.api_for(plugin.meta.name)
    return PluginResponse(
        name=plugin.meta.name,
        version=plugin.meta.version,
        description=plugin.meta.description,
        authors=plugin.meta.authors,
        url=plugin.meta.url,
        enabled=plugin.enabled,
        enabled_setting=plugin.meta.enabled_setting,
        assets=api.assets if api else [],
        config=plugin.config,
    )


def _get_or_404(name: str) -> PluginBase:
    plugin = plugin_registry.get(name)
    if plugin is None:
        raise ResourceNotFoundError("Plugin", name)
    return plugin


def _set_enabled(plugin: PluginBase, enabled: bool) -> None:
    all_config = load_plugins_config()
    plugin_config = all_config.get(plugin.meta.name, {})
    plugin_config["enabled"] = enabled
    all_config[plugin.meta.name] = plugin_config
    save_plugins_config(all_config)
    plugin.config["enabled"] = enabled
    logger.info("Plugin %s: %s", "enabled" if enabled else "disabled", plugin.meta.name)


@router.get("/", response_model=list[PluginResponse])
async def list_plugins(_current_user: User = Depends(get_current_user)) -> list[PluginResponse]:
    """List all registered plugins with their status."""
    return [_build_response(p) for p in plugin_registry.all_plugins()]


@router.get("/{name}", response_model=PluginResponse)
async def get_plugin(name: str, _current_user: User = Depends(get_current_user)) -> PluginResponse:
    return _build_response(_get_or_404(name))


@router.post("/{name}/enable", response_model=PluginResponse, status_code=status.HTTP_200_OK)
async def enable_plugin(name: str, _current_user: User = Depends(get_current_user)) -> PluginResponse:
    plugin = _get_or_404(name)
    _set_enabled(plugin, True)
    return _build_response(plugin)


@router.post("/{name}/disable", response_model=PluginResponse, status_code=status.HTTP_200_OK)
async def disable_plugin(name: str, _current_user: User = Depends(get_current_user)) -> PluginResponse:
    plugin = _get_or_404(name)
    _set_enabled(plugin, False)
    return _build_response(plugin)
