"""Lifecycle state machine and hook binding for one extension instance."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hostkit.events import DEFAULT_PRIORITY
from hostkit.protocols import EventDispatcher

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    CONSTRUCTING = "constructing"
    VERIFIED = "verified"
    REGISTERED = "registered"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


@dataclass(frozen=True, slots=True)
class LifecycleBinding:
    """One ``event_name -> handler`` pair handed to the host dispatcher."""

    event_name: str
    handler: Callable[..., Any]
    priority: int = DEFAULT_PRIORITY

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))


class LifecycleError(RuntimeError):
    """A lifecycle transition was requested out of order."""


class LifecycleOrchestrator:
    """Drive an extension from construction to deactivation.

    ``CONSTRUCTING -> VERIFIED -> REGISTERED -> ACTIVE -> DEACTIVATED``.
    The move to ``ACTIVE`` happens when the host first calls a bound handler.
    """

    def __init__(self, dispatcher: EventDispatcher, owner: str = "extension") -> None:
        self._dispatcher = dispatcher
        self._owner = owner
        self._state = LifecycleState.CONSTRUCTING
        self._bindings: tuple[LifecycleBinding, ...] = ()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def bindings(self) -> tuple[LifecycleBinding, ...]:
        return self._bindings

    def mark_verified(self) -> None:
        self._require(LifecycleState.CONSTRUCTING)
        self._transition(LifecycleState.VERIFIED)

    def bind(self, bindings: Iterable[LifecycleBinding]) -> tuple[LifecycleBinding, ...]:
        """Register ``bindings`` with the dispatcher, in order, exactly once."""
        self._require(LifecycleState.VERIFIED)
        self._bindings = tuple(bindings)
        for binding in self._bindings:
            self._dispatcher.on(binding.event_name, self._track(binding.handler), binding.priority)
            logger.debug("%s bound %s -> %s", self._owner, binding.event_name, binding.handler_name)
        self._transition(LifecycleState.REGISTERED)
        return self._bindings

    def deactivate(self) -> None:
        if self._state is LifecycleState.DEACTIVATED:
            return
        self._transition(LifecycleState.DEACTIVATED)

    def _track(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(handler)
        def tracked(*args: Any) -> Any:
            if self._state is LifecycleState.REGISTERED:
                self._transition(LifecycleState.ACTIVE)
            return handler(*args)

        return tracked

    def _require(self, expected: LifecycleState) -> None:
        if self._state is not expected:
            raise LifecycleError(
                f"{self._owner}: expected state {expected.value}, got {self._state.value}"
            )

    def _transition(self, new_state: LifecycleState) -> None:
        logger.debug("%s: %s -> %s", self._owner, self._state.value, new_state.value)
        self._state = new_state
