"""Admin notices and the deferred output buffer they are written into."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from enum import Enum

from hostkit.config import DAY_IN_SECONDS
from hostkit.context import Response
from hostkit.logger import ExtensionLogger

from .flags import PersistentFlagStore

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    """Notice types and the CSS class the host styles them with."""

    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    UPDATE = "update"

    @property
    def css_class(self) -> str:
        if self is NoticeKind.UPDATE:
            return "updated"
        return self.value


def _coerce_kind(kind: NoticeKind | str) -> NoticeKind:
    try:
        return NoticeKind(kind)
    except ValueError:
        # Unknown kinds render like updates.
        return NoticeKind.UPDATE


@dataclass(frozen=True, slots=True)
class NoticeRequest:
    """One notice to render. ``body`` is markup and is not escaped."""

    kind: NoticeKind
    body: str
    dismissible: bool = True
    deduplicate: bool = False

    @property
    def css_class(self) -> str:
        if self.dismissible:
            return f"{self.kind.css_class} is-dismissible"
        return self.kind.css_class

    @property
    def dedup_key(self) -> str:
        return f"{self.kind.value}_message_displayed"

    def render(self) -> str:
        return f'<div class="{html.escape(self.css_class)}"><p>{self.body}</p></div>'


class OutputBuffer:
    """Collect markup until the admin-notice hook flushes it to the response.

    Opened when the extension is constructed. :meth:`flush` hands the
    collected markup to the response exactly once; afterwards writes go
    straight to the response.
    """

    def __init__(self, response: Response) -> None:
        self._response = response
        self._chunks: list[str] = []
        self._flushed = False

    @property
    def flushed(self) -> bool:
        return self._flushed

    @property
    def pending(self) -> str:
        return "".join(self._chunks)

    def write(self, fragment: str) -> None:
        if self._flushed:
            self._response.write(fragment)
        else:
            self._chunks.append(fragment)

    def flush(self) -> str:
        """Write buffered markup to the response and close the buffer."""
        if self._flushed:
            return ""
        content = self.pending
        self._chunks.clear()
        self._flushed = True
        self._response.write(content)
        logger.debug("Flushed %d characters of deferred output", len(content))
        return content


class MessageBus:
    """Render typed notices into the output buffer.

    Deduplicated notices share one expiring flag per kind: after a
    deduplicated warning is shown, no other deduplicated warning renders
    until the flag expires.
    """

    def __init__(
        self,
        buffer: OutputBuffer,
        flags: PersistentFlagStore,
        dedup_ttl_seconds: float = DAY_IN_SECONDS,
        log: logging.Logger | ExtensionLogger | None = None,
    ) -> None:
        self._buffer = buffer
        self._flags = flags
        self._dedup_ttl_seconds = dedup_ttl_seconds
        self._log = log or logger

    def emit(
        self,
        kind: NoticeKind | str,
        body: str,
        dismissible: bool = True,
        deduplicate: bool = False,
    ) -> None:
        request = NoticeRequest(_coerce_kind(kind), body, dismissible, deduplicate)

        if request.deduplicate and self._flags.is_ttl_active(request.dedup_key):
            self._log.debug(
                "Suppressed duplicate %s notice",
                request.kind.value,
                extra={"notice_kind": request.kind.value, "dedup_key": request.dedup_key},
            )
            return

        self._buffer.write(request.render())

        if request.deduplicate:
            self._flags.set_ttl(request.dedup_key, self._dedup_ttl_seconds)

    def error(self, body: str, dismissible: bool = True, deduplicate: bool = False) -> None:
        self.emit(NoticeKind.ERROR, body, dismissible, deduplicate)

    def warning(self, body: str, dismissible: bool = True, deduplicate: bool = False) -> None:
        self.emit(NoticeKind.WARNING, body, dismissible, deduplicate)

    def notice(self, body: str, dismissible: bool = True, deduplicate: bool = False) -> None:
        self.emit(NoticeKind.NOTICE, body, dismissible, deduplicate)

    def write(self, markup: str) -> None:
        """Write pre-rendered markup, e.g. the activation announcement."""
        self._buffer.write(markup)
