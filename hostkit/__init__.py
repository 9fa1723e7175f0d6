"""
hostkit - host facilities consumed by extensions: hooks, stores, admin, i18n.
"""

__version__ = "1.0.0"

from hostkit.context import (
    HostServices,
    Request,
    Response,
    SessionContext,
    create_file_host,
    create_memory_host,
)
from hostkit.events import HookDispatcher, HostEvent

__all__ = [
    "HookDispatcher",
    "HostEvent",
    "HostServices",
    "Request",
    "Response",
    "SessionContext",
    "create_file_host",
    "create_memory_host",
]
