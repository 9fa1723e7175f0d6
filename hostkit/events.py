"""Host hook names and an in-process hook dispatcher.

Design:
- actions (``trigger``) call every handler and collect results
- filters (``filter``) thread a value through every handler
- lower priority numbers run first; equal priorities keep registration order
- a failing action handler is logged and does not stop the others
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

Handler = Callable[..., Any]


class HostEvent(str, Enum):
    """Hook names the extension base binds to."""

    ACTIVATION = "activate"
    DEACTIVATION = "deactivate"
    INIT = "init"
    ADMIN_NOTICES = "admin_notices"
    ADMIN_ENQUEUE_SCRIPTS = "admin_enqueue_scripts"
    ADMIN_INIT = "admin_init"
    ENQUEUE_SCRIPTS = "wp_enqueue_scripts"
    ADMIN_MENU = "admin_menu"
    PLUGIN_ACTION_LINKS = "plugin_action_links"
    MAIL_CONTENT_TYPE = "wp_mail_content_type"
    PLUGIN_LOCALE = "plugin_locale"

    def scoped(self, basename: str) -> str:
        """Return the per-extension hook name, e.g. ``activate_demo/demo.py``."""
        return f"{self.value}_{basename}"


def _hook_name(event_name: str) -> str:
    if isinstance(event_name, Enum):
        return str(event_name.value)
    return event_name


@dataclass(slots=True)
class _RegisteredHandler:
    handler: Handler
    priority: int
    sequence: int


class HookDispatcher:
    """Register handlers by hook name and dispatch host events to them.

    Example:
        dispatcher = HookDispatcher()
        dispatcher.on("init", load_translations)
        dispatcher.trigger("init")
        content_type = dispatcher.filter("wp_mail_content_type", "text/plain")
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[_RegisteredHandler]] = defaultdict(list)
        self._sequence = 0
        self._dispatch_count = 0
        self._error_count = 0

    def on(self, event_name: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> None:
        """Register ``handler`` for ``event_name``.

        Raises:
            ValueError: If ``handler`` is not callable.
        """
        if not callable(handler):
            raise ValueError(f"Handler must be callable, got {type(handler)}")

        self._sequence += 1
        entries = self._handlers[_hook_name(event_name)]
        entries.append(_RegisteredHandler(handler, priority, self._sequence))
        entries.sort(key=lambda entry: (entry.priority, entry.sequence))

        logger.debug("Registered handler for %s with priority %d", event_name, priority)

    def off(self, event_name: str, handler: Handler) -> bool:
        """Remove the first registration of ``handler``; return whether one existed."""
        entries = self._handlers.get(_hook_name(event_name), [])
        for i, entry in enumerate(entries):
            if entry.handler == handler:
                entries.pop(i)
                logger.debug("Unregistered handler for %s", event_name)
                return True
        return False

    def has(self, event_name: str) -> bool:
        return bool(self._handlers.get(_hook_name(event_name)))

    def handlers(self, event_name: str) -> list[Handler]:
        """Return handlers for ``event_name`` in dispatch order."""
        return [entry.handler for entry in self._handlers.get(_hook_name(event_name), [])]

    def trigger(self, event_name: str, *args: Any) -> list[Any]:
        """Run every handler registered for an action and collect results."""
        self._dispatch_count += 1
        results: list[Any] = []
        for entry in list(self._handlers.get(_hook_name(event_name), [])):
            try:
                results.append(entry.handler(*args))
            except Exception:
                self._error_count += 1
                logger.exception("Handler error for %s", event_name, extra={"hook": _hook_name(event_name)})
        return results

    def filter(self, event_name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every handler registered for a filter.

        Unlike actions, a failing filter handler propagates: there is no
        sensible value to continue with.
        """
        self._dispatch_count += 1
        for entry in list(self._handlers.get(_hook_name(event_name), [])):
            value = entry.handler(value, *args)
        return value

    def get_stats(self) -> dict[str, Any]:
        return {
            "dispatch_count": self._dispatch_count,
            "error_count": self._error_count,
            "handlers": {name: len(entries) for name, entries in self._handlers.items()},
        }
