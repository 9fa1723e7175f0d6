"""Exception hierarchy and helpers for the extension base library.

This module provides a consistent exception model used by host facilities
and extensions:

- ``ExtensionError`` as the base class with error code, context and root cause.
- ``MissingIdentityField`` describing a non-fatal identity contract gap.
- ``HostFacilityUnavailable`` for missing host services (fatal).
- ``ConfigError`` for unreadable or invalid configuration files.
- ``OptionStoreError`` for an option file that cannot be read back.
- Utility helpers to wrap external exceptions and to format errors.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

TExtensionError = TypeVar("TExtensionError", bound="ExtensionError")


class ExtensionError(Exception):
    """Base exception for all library-level errors.

    Attributes:
        message: Human-readable error message.
        code: Stable error code for programmatic processing.
        context: Extra metadata useful for debugging and logging.
        cause: Original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        code: str = "EXTENSION_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message: str = message
        self.code: str = code
        self.context: dict[str, Any] = dict(context) if context is not None else {}
        self.cause: Exception | None = cause

        super().__init__(message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return a formatted, readable exception string."""
        return format_exception(self)


class ConfigError(ExtensionError):
    """Configuration related error."""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class HostFacilityUnavailable(ExtensionError):
    """A required host service (dispatcher, option store, cache) is absent."""

    def __init__(
        self,
        message: str,
        code: str = "HOST_FACILITY_UNAVAILABLE",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class OptionStoreError(ExtensionError):
    """The durable option store holds data that cannot be trusted."""

    def __init__(
        self,
        message: str,
        code: str = "OPTION_STORE_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class MissingIdentityField(ExtensionError):
    """An extension class did not declare a required identity field.

    Never raised by the identity contract: instances are collected and
    rendered as warnings instead.
    """

    def __init__(
        self,
        field: str,
        owner: str,
        message: str | None = None,
        code: str = "MISSING_IDENTITY_FIELD",
    ) -> None:
        self.field = field
        self.owner = owner
        super().__init__(
            message=message
            or f"You have to override `{field}` in your extension class `{owner}`",
            code=code,
            context={"field": field, "owner": owner},
        )


def wrap_exception(
    exc: Exception,
    error_class: type[TExtensionError],
    message: str,
    *,
    code: str | None = None,
    context: Mapping[str, Any] | None = None,
) -> TExtensionError:
    """Wrap an external exception with a library exception class.

    Args:
        exc: Original exception raised by external dependency or lower layer.
        error_class: Target ``ExtensionError`` subclass to construct.
        message: Message for the wrapped exception.
        code: Optional explicit error code overriding class default.
        context: Optional context payload.

    Returns:
        An instance of ``error_class`` that chains ``exc`` as its cause.
    """
    kwargs: dict[str, Any] = {"context": context, "cause": exc}
    if code is not None:
        kwargs["code"] = code
    return error_class(message, **kwargs)


def format_exception(exc: BaseException) -> str:
    """Format exception into a readable one-line text.

    For ``ExtensionError`` it includes code, message, context and cause.
    For generic exceptions, it returns ``<Type>: <message>``.
    """
    if isinstance(exc, ExtensionError):
        base = f"[{exc.code}] {exc.message}"
        context_part = ""
        if exc.context:
            context_items = ", ".join(
                f"{key}={value!r}" for key, value in sorted(exc.context.items())
            )
            context_part = f" | context: {context_items}"

        cause_part = ""
        if exc.cause is not None:
            cause_part = f" | cause: {type(exc.cause).__name__}: {exc.cause}"

        return f"{base}{context_part}{cause_part}"

    return f"{type(exc).__name__}: {exc}"


__all__ = [
    "ExtensionError",
    "ConfigError",
    "HostFacilityUnavailable",
    "MissingIdentityField",
    "OptionStoreError",
    "wrap_exception",
    "format_exception",
]
