"""Extension base: identity contract, notices, flags and lifecycle hooks."""

from .base import ExtensionBase
from .flags import PersistentFlagStore
from .identity import (
    ExtensionIdentity,
    IdentityConfig,
    IdentityContract,
    VerificationResult,
    slugify,
)
from .lifecycle import LifecycleBinding, LifecycleOrchestrator, LifecycleState
from .notices import MessageBus, NoticeKind, NoticeRequest, OutputBuffer

__all__ = [
    "ExtensionBase",
    "ExtensionIdentity",
    "IdentityConfig",
    "IdentityContract",
    "LifecycleBinding",
    "LifecycleOrchestrator",
    "LifecycleState",
    "MessageBus",
    "NoticeKind",
    "NoticeRequest",
    "OutputBuffer",
    "PersistentFlagStore",
    "VerificationResult",
    "slugify",
]
