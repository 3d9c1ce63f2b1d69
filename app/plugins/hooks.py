"""
Event Name Constants

Centralised list of host events that plugins can subscribe to with
PluginApi.on().  Names follow the `entity.action` convention.
"""

from __future__ import annotations

# ── Topic lifecycle ────────────────────────────────────────────────────────────
HOOK_TOPIC_CREATED = "topic.created"
HOOK_TOPIC_EDITED = "topic.edited"

# ── Master list ───────────────────────────────────────────────────────────────
ALL_HOOKS: list[str] = [
    HOOK_TOPIC_CREATED,
    HOOK_TOPIC_EDITED,
]
