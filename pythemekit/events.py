"""Progress and error notifications flowing from the sync engine to reporting.

Producers hand events to an :class:`EventLog` without blocking. A single
forwarding thread per log moves them, in emission order, into the sink
queue that the reporter consumes.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from .exceptions import ThemeKitAPIError
from .models import RequestVerb, ThemeResponse

logger = logging.getLogger(__name__)

_CLOSED = object()


class ThemeEvent(ABC):
    """Common contract of every event: message, outcome, error, structure."""

    error: Optional[BaseException] = None

    @property
    def successful(self) -> bool:
        return self.error is None

    @abstractmethod
    def message(self) -> str:
        """Human readable description."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Structured form of the event."""

    def as_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    def __str__(self) -> str:
        return self.message()


@dataclass
class BasicEvent(ThemeEvent):
    """A plain notice, or a failure notification when ``error`` is set."""

    text: str
    title: str = "Notice"
    event_type: str = "message"
    target: str = ""
    error: Optional[BaseException] = None

    @classmethod
    def from_error(cls, error: BaseException, target: str = "") -> "BasicEvent":
        return cls(
            text=str(error), title="Error", event_type="error", target=target, error=error
        )

    def message(self) -> str:
        return self.text

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "basicEvent",
            "event_type": self.event_type,
            "title": self.title,
            "target": self.target,
            "message": self.text,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class FSEvent(ThemeEvent):
    """A change made to the local filesystem."""

    target: str
    action: str = "Write"
    error: Optional[BaseException] = None

    def message(self) -> str:
        if self.error is not None:
            return f"Could not write {self.target} to disk: {self.error}"
        return f"Successfully wrote {self.target} to disk"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "fsevent",
            "event_type": self.action,
            "title": "FS Event",
            "target": self.target,
            "message": self.message(),
            "error": str(self.error) if self.error else None,
        }


@dataclass
class APIEvent(ThemeEvent):
    """The outcome of one admin API call for one asset."""

    verb: RequestVerb
    key: str
    host: str = ""
    status_code: int = 0
    error: Optional[BaseException] = None

    @classmethod
    def from_response(cls, response: ThemeResponse, key: str) -> "APIEvent":
        error = None
        if response.errors:
            error = ThemeKitAPIError(
                str(response.errors), status_code=response.status_code
            )
        return cls(
            verb=response.verb,
            key=key,
            host=response.host,
            status_code=response.status_code,
            error=error,
        )

    @classmethod
    def from_error(
        cls, verb: RequestVerb, key: str, error: ThemeKitAPIError
    ) -> "APIEvent":
        return cls(verb=verb, key=key, status_code=error.status_code or 0, error=error)

    @property
    def successful(self) -> bool:
        return self.error is None and 200 <= self.status_code < 300

    def message(self) -> str:
        if self.successful:
            return (
                f"Successfully performed {self.verb.name} operation "
                f"for file {self.key} to {self.host}"
            )
        return (
            f"[{self.status_code}] Could not complete {self.verb.name} "
            f"for {self.key}: {self.error}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "apiResponse",
            "event_type": self.verb.name,
            "title": "API Response",
            "target": self.key,
            "host": self.host,
            "code": self.status_code,
            "message": self.message(),
            "error": str(self.error) if self.error else None,
        }


class EventLog:
    """Non-blocking event channel with a single ordered consumer side.

    ``emit`` never blocks: events go to an unbounded backlog and a dedicated
    thread forwards them into the sink queue, which may be bounded. Once
    ``close`` is called and everything before it has been consumed, ``get``
    returns None and iteration stops.

    Args:
        maxsize: Capacity of the sink queue (0 for unbounded)
    """

    def __init__(self, maxsize: int = 0):
        self._backlog: queue.SimpleQueue = queue.SimpleQueue()
        self._sink: queue.Queue = queue.Queue(maxsize)
        self._lock = threading.Lock()
        self._closed = False
        self._exhausted = False
        self._worker = threading.Thread(
            target=self._forward, name="event-log", daemon=True
        )
        self._worker.start()

    def _forward(self) -> None:
        while True:
            event = self._backlog.get()
            self._sink.put(event)
            if event is _CLOSED:
                return

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def exhausted(self) -> bool:
        """True once the consumer has read past the close marker."""
        return self._exhausted

    def emit(self, event: ThemeEvent) -> None:
        with self._lock:
            if self._closed:
                logger.warning(f"Dropping event emitted after close: {event}")
                return
            self._backlog.put(event)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._backlog.put(_CLOSED)

    def get(self, timeout: Optional[float] = None) -> Optional[ThemeEvent]:
        """Return the next event, or None once the log is closed and drained.

        Raises:
            queue.Empty: If ``timeout`` elapses first
        """
        if self._exhausted:
            return None
        event = self._sink.get(timeout=timeout)
        if event is _CLOSED:
            self._exhausted = True
            return None
        return event

    def __iter__(self) -> Iterator[ThemeEvent]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event


def log_event(event: ThemeEvent, event_log: EventLog) -> None:
    """Hand ``event`` to ``event_log`` without blocking the caller."""
    event_log.emit(event)


def notify(event_log: EventLog, text: str) -> None:
    log_event(BasicEvent(text=text), event_log)


def notify_error(event_log: EventLog, error: BaseException, target: str = "") -> None:
    """Report a non-fatal failure as a notification event."""
    logger.debug(f"Reporting failure for {target or 'operation'}: {error}")
    log_event(BasicEvent.from_error(error, target=target), event_log)


def merge_events(dest: EventLog, sources: Sequence[EventLog]) -> threading.Thread:
    """Forward every event of each source into ``dest``.

    Each source is drained by its own thread, so order is preserved within
    a source but not across sources. The returned thread finishes once all
    sources are exhausted. Closing ``dest`` is left to the caller.
    """

    def forward(source: EventLog) -> None:
        for event in source:
            dest.emit(event)

    workers = [
        threading.Thread(target=forward, args=(source,), name="merge-events", daemon=True)
        for source in sources
    ]

    def join_all() -> None:
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    merger = threading.Thread(target=join_all, name="merge-events", daemon=True)
    merger.start()
    return merger


def drain_errors(errors: "queue.Queue[Optional[BaseException]]", event_log: EventLog) -> None:
    """Turn errors into notifications until the None terminator arrives."""
    while True:
        error = errors.get()
        if error is None:
            return
        notify_error(event_log, error)
