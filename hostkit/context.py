"""Request-scoped host context passed explicitly to extensions.

This module provides the rendering surface (:class:`Response`), the submitted
form (:class:`Request`), the session (:class:`SessionContext`) and the bundle
of host services an extension is constructed against (:class:`HostServices`).
"""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .admin import AdminRegistry
from .cache import CacheBackend, FileCache, MemoryCache
from .config import ExtensionSettings
from .events import HookDispatcher
from .exceptions import HostFacilityUnavailable
from .i18n import CatalogTranslator
from .options import JsonOptionStore, MemoryOptionStore, OptionStore
from .protocols import AdminSurface, EventDispatcher, Translator

FORM_TOKEN_KEY = "contact_form_token"


@dataclass(slots=True)
class Request:
    """The submitted form of the current request."""

    form: Mapping[str, str] = field(default_factory=dict)

    def field_equals(self, name: str, expected: str) -> bool:
        return self.form.get(name) == expected


@dataclass(slots=True)
class Response:
    """Markup fragments written for the current screen, in order."""

    fragments: list[str] = field(default_factory=list)

    def write(self, fragment: str) -> None:
        if fragment:
            self.fragments.append(fragment)

    @property
    def body(self) -> str:
        return "".join(self.fragments)


@dataclass(slots=True)
class SessionContext:
    """Per-visitor session data."""

    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def ensure_form_token(self) -> str:
        """Return the session form token, generating it on first use."""
        token = self.data.get(FORM_TOKEN_KEY)
        if not token:
            token = secrets.token_hex(16)
            self.data[FORM_TOKEN_KEY] = token
        return str(token)


@dataclass(slots=True)
class HostServices:
    """Host facilities an extension is constructed against.

    Attributes:
        dispatcher: Hook/event system.
        options: Durable option store.
        cache: Expiring cache.
        translator: Localization provider.
        admin: Administration surface.
        response: Rendering surface for the current request.
        settings: Library settings.
    """

    dispatcher: EventDispatcher
    options: OptionStore
    cache: CacheBackend
    translator: Translator = field(default_factory=CatalogTranslator)
    admin: AdminSurface = field(default_factory=AdminRegistry)
    response: Response = field(default_factory=Response)
    settings: ExtensionSettings = field(default_factory=ExtensionSettings)

    def __post_init__(self) -> None:
        for name in ("dispatcher", "options", "cache"):
            if getattr(self, name) is None:
                raise HostFacilityUnavailable(
                    f"Host facility '{name}' is not available",
                    context={"facility": name},
                )


def create_memory_host(settings: ExtensionSettings | None = None, **overrides: Any) -> HostServices:
    """Return host services backed entirely by process memory."""
    settings = settings or ExtensionSettings()
    services: dict[str, Any] = {
        "dispatcher": HookDispatcher(),
        "options": MemoryOptionStore(),
        "cache": MemoryCache(),
        "admin": AdminRegistry(base_url=settings.admin.base_url),
        "settings": settings,
    }
    services.update(overrides)
    return HostServices(**services)


def create_file_host(
    settings: ExtensionSettings,
    root: str | Path = ".",
    **overrides: Any,
) -> HostServices:
    """Return host services whose option store and cache live on disk."""
    root_path = Path(root)
    services: dict[str, Any] = {
        "dispatcher": HookDispatcher(),
        "options": JsonOptionStore(root_path / settings.storage.options_path),
        "cache": FileCache(root_path / settings.storage.cache_dir),
        "admin": AdminRegistry(base_url=settings.admin.base_url),
        "settings": settings,
    }
    services.update(overrides)
    return HostServices(**services)
