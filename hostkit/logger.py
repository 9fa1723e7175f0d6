"""Logging utilities for the extension base library.

Library modules log through ``logging.getLogger(__name__)``. Code acting for
one extension logs through :func:`get_logger` with ``extension=<slug>``, which
stamps the slug on every record. Hosts and the command line call
:func:`setup_logging` once to attach handlers.

Records may carry these attributes besides the standard ones:

- ``extension``: slug of the extension the record concerns (``"-"`` when none).
- ``notice_kind`` / ``dedup_key``: the admin notice a record is about.
- ``flag``: key of the persisted flag being written or cleared.
- ``identity_field``: identity field an extension class failed to declare.
- ``hook``: name of the hook whose handler raised.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any, TypedDict


class LoggingSetupConfig(TypedDict, total=False):
    """Configuration options for :func:`setup_logging`.

    Attributes:
        level: Logging level name (e.g. ``"INFO"``) or integer level.
        format: Logging formatter pattern for text output; may use
            ``%(extension)s``.
        file_path: Optional file path for file handler output.
        json_format: Whether to output logs as JSON lines.
    """

    level: str | int
    format: str
    file_path: str
    json_format: bool


DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(extension)s] %(name)s: %(message)s"
NO_EXTENSION = "-"
CONTEXT_FIELDS = ("notice_kind", "dedup_key", "flag", "identity_field", "hook")


class ExtensionContextFilter(logging.Filter):
    """Give every record an ``extension`` attribute so formats can rely on it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "extension"):
            record.extension = NO_EXTENSION
        return True


class ExtensionLogger(logging.LoggerAdapter):
    """Logger adapter that stamps one extension's slug on its records."""

    def __init__(self, logger: logging.Logger, slug: str) -> None:
        super().__init__(logger, {"extension": slug})

    @property
    def slug(self) -> str:
        return str(self.extra["extension"])

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    ``extension`` is always present; the notice, flag, identity and hook
    attributes listed in :data:`CONTEXT_FIELDS` are grouped under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "extension": getattr(record, "extension", NO_EXTENSION),
            "message": record.getMessage(),
        }
        context = {
            field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)
        }
        if context:
            payload["context"] = context
        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str, extension: str | None = None) -> logging.Logger | ExtensionLogger:
    """Return the logger ``name``, bound to ``extension`` when a slug is given."""
    logger = logging.getLogger(name)
    if extension is None:
        return logger
    return ExtensionLogger(logger, extension)


def setup_logging(config: Mapping[str, Any] | None = None) -> None:
    """Configure root logging handlers and formatter.

    Existing root handlers are removed and closed first, so calling this
    twice leaves exactly one console handler (plus the optional file one).

    Args:
        config: Optional mapping with logging options, see
            :class:`LoggingSetupConfig`.
    """
    conf = dict(config or {})

    level = _parse_level(conf.get("level", "INFO"))
    file_path = conf.get("file_path")

    formatter: logging.Formatter
    if conf.get("json_format", False):
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(str(conf.get("format", DEFAULT_FORMAT)))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if isinstance(file_path, str) and file_path:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ExtensionContextFilter())
        root_logger.addHandler(handler)


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    parsed_level = logging.getLevelName(level.upper())
    if isinstance(parsed_level, int):
        return parsed_level

    return logging.INFO
