"""
Event Bus

EventBus keeps an ordered list of named handlers per event and runs them
inline, one after another, in registration order.  Unlike admin-side hook
notifications, handler exceptions are not swallowed: a failing handler
aborts the dispatch and propagates to the caller (e.g. a failed save in a
topic.created handler fails the request).
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventHandler:
    event: str
    name: str
    callback: Callable[..., Any]
    owner: str | None = None


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(
        self,
        event: str,
        callback: Callable[..., Any],
        *,
        name: str | None = None,
        owner: str | None = None,
    ) -> EventHandler:
        """
        Subscribe `callback` to `event`.

        Re-subscribing a handler with the same name replaces it in place, so
        repeated plugin initialisation does not stack duplicate handlers.
        """
        handler = EventHandler(event=event, name=name or callback.__qualname__, callback=callback, owner=owner)
        handlers = self._handlers[event]
        for index, existing in enumerate(handlers):
            if existing.name == handler.name:
                handlers[index] = handler
                break
        else:
            handlers.append(handler)
        logger.debug("Handler %s subscribed to %s", handler.name, event)
        return handler

    def off(self, event: str, name: str) -> None:
        self._handlers[event] = [h for h in self._handlers.get(event, []) if h.name != name]

    def handlers(self, event: str) -> list[EventHandler]:
        return list(self._handlers.get(event, []))

    def clear(self) -> None:
        self._handlers.clear()

    async def trigger(self, event: str, *args: Any) -> list[Any]:
        """
        Run every handler of `event` with `args`, awaiting coroutine results.

        Returns:
            Handler return values in registration order.
        """
        results: list[Any] = []
        for handler in self.handlers(event):
            result = handler.callback(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results


# ── Global singleton ──────────────────────────────────────────────────────────
event_bus = EventBus()
