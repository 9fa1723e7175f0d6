"""Protocol definitions for the host facilities an extension consumes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventDispatcher(Protocol):
    """Contract for the host's hook/event system."""

    def on(self, event_name: str, handler: Callable[..., Any], priority: int = 10) -> None:
        """Register a handler for an action or filter."""

    def trigger(self, event_name: str, *args: Any) -> list[Any]:
        """Run all handlers registered for an action."""

    def filter(self, event_name: str, value: Any, *args: Any) -> Any:
        """Pass a value through all handlers registered for a filter."""


@runtime_checkable
class OptionStoreProtocol(Protocol):
    """Contract for the host's durable key/value store."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value or ``default``."""

    def set(self, key: str, value: Any) -> None:
        """Store a value."""

    def delete(self, key: str) -> None:
        """Remove a value."""


@runtime_checkable
class ExpiringCacheProtocol(Protocol):
    """Contract for the host's expiring cache."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, ``None`` when missing or expired."""

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Cache a value for ``ttl`` seconds (forever when ``None``)."""

    def delete(self, key: str) -> None:
        """Remove a cached value."""


@runtime_checkable
class Translator(Protocol):
    """Contract for the localization provider."""

    def translate(self, text: str) -> str:
        """Return the translation of ``text`` for the active locale."""

    def locale(self) -> str:
        """Return the active locale, e.g. ``en_US``."""

    def load_textdomain(self, domain: str, path: str, locale: str | None = None) -> bool:
        """Load translations for ``domain`` from ``path``."""


@runtime_checkable
class AdminSurface(Protocol):
    """Contract for the host's administration screens."""

    def add_menu_page(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], None],
    ) -> str:
        """Register a top-level admin page."""

    def add_submenu_page(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], None],
    ) -> str:
        """Register an admin subpage."""

    def admin_url(self, path: str = "") -> str:
        """Return the absolute URL of an admin path."""

    def enqueue_style(self, handle: str, src: str) -> None:
        """Queue a stylesheet for the current admin screen."""

    def plugin_basename(self, plugin_file: str) -> str:
        """Return ``<directory>/<file>`` for an extension entry file."""

    def plugin_dir_url(self, plugin_file: str) -> str:
        """Return the public URL of the extension directory, with a trailing slash."""
