from __future__ import annotations

import collections.abc
import datetime
import logging
import threading
import typing

from .logtypes import LoggedEvent
from .util import now

if typing.TYPE_CHECKING:
    from .logtypes import LoggedKind

logger = logging.getLogger(__name__)


class EventBuffer:
    """In-memory holding area between the capture callback and the log writer.

    append() only ever touches memory under a short lock, so it is safe to call straight from an input hook thread.
    When the buffer fills up, on_full is called once; it won't be called again until the next drain() has taken the
    events away. on_full runs on the appending thread, with the lock released, and must not block.
    """

    def __init__(
        self,
        capacity: int,
        on_full: typing.Optional[collections.abc.Callable[[], None]] = None,
        clock: collections.abc.Callable[[], datetime.datetime] = now,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.on_full = on_full
        self.clock = clock
        self._lock = threading.Lock()
        self._events: list[LoggedEvent] = []
        self._last_timestamp: typing.Optional[datetime.datetime] = None
        self._full_signalled = False
        self._closed = False
        self.refused = 0

    def __len__(self):
        with self._lock:
            return len(self._events)

    @property
    def closed(self):
        return self._closed

    def append(self, kind: LoggedKind) -> bool:
        signal_full = False
        with self._lock:
            if self._closed:
                self.refused += 1
                logger.debug("Buffer is closed; refusing %r", kind)
                return False
            timestamp = self.clock()
            # wall clocks can step backwards; the log must not
            if self._last_timestamp is not None and timestamp < self._last_timestamp:
                timestamp = self._last_timestamp
            self._last_timestamp = timestamp
            self._events.append(LoggedEvent(timestamp=timestamp, kind=kind))
            if len(self._events) >= self.capacity and not self._full_signalled:
                self._full_signalled = True
                signal_full = True
        if signal_full and self.on_full is not None:
            self.on_full()
        return True

    def drain(self) -> list[LoggedEvent]:
        with self._lock:
            batch = self._events
            self._events = []
            self._full_signalled = False
        return batch

    def close(self):
        with self._lock:
            self._closed = True
