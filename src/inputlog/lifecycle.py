from __future__ import annotations

import datetime
import enum
import logging
import typing

import trio
import trio_util

from .buffer import EventBuffer
from .commontypes import LogWriteError
from .durations import format_duration
from .keystreams import Dispatcher, KeyTranslator
from .logfile import LogWriter

if typing.TYPE_CHECKING:
    from .device.types import EventSource
    from .settings import Settings

logger = logging.getLogger(__name__)


class LifecycleState(enum.Enum):
    RUNNING = enum.auto()
    FLUSHING = enum.auto()
    SHUTTING_DOWN = enum.auto()
    TERMINATED = enum.auto()


class LifecycleController:
    """Drives the buffer into the log file, and decides when the run is over.

    Two timers: a periodic flush (which a full buffer can also trigger early) and a one-shot run duration. When the run
    duration expires, or shutdown() is called some other way, intake stops, the buffer gets one last flush, and the log
    file is closed. Only the first call to shutdown() does any of that.
    """

    state: trio_util.AsyncValue[LifecycleState]
    flush_requested: trio_util.AsyncBool

    def __init__(
        self,
        source: EventSource,
        dispatcher: Dispatcher,
        writer: LogWriter,
        flush_interval: datetime.timedelta,
        run_duration: datetime.timedelta,
    ):
        self.source = source
        self.dispatcher = dispatcher
        self.buffer = dispatcher.buffer
        self.buffer.on_full = self.request_flush
        self.writer = writer
        self.flush_interval = flush_interval
        self.run_duration = run_duration
        self.state = trio_util.AsyncValue(LifecycleState.RUNNING)
        self.flush_requested = trio_util.AsyncBool(False)
        self.flushed = 0
        self.write_error: typing.Optional[LogWriteError] = None
        self._flush_lock = trio.Lock()
        self._intake_scope = trio.CancelScope()
        self._flush_timer_scope = trio.CancelScope()
        self._intake_stopped = trio.Event()
        self._trio_token: typing.Optional[trio.lowlevel.TrioToken] = None
        self._nursery: typing.Optional[trio.Nursery] = None

    @classmethod
    def from_settings(cls, settings: Settings, source: EventSource):
        buffer = EventBuffer(settings.buffer_capacity)
        dispatcher = Dispatcher(KeyTranslator(settings.keymaps), buffer)
        return cls(
            source=source,
            dispatcher=dispatcher,
            writer=LogWriter(settings.log_path),
            flush_interval=settings.flush_interval,
            run_duration=settings.run_duration,
        )

    @property
    def terminated(self):
        return self.state.value is LifecycleState.TERMINATED

    def request_flush(self):
        # called by the buffer, possibly from the input hook's thread
        token = self._trio_token
        if token is None:
            return
        try:
            token.run_sync_soon(self._set_flush_requested)
        except trio.RunFinishedError:
            logger.debug("Flush requested after the run finished; ignoring")

    def _set_flush_requested(self):
        self.flush_requested.value = True

    async def flush(self) -> int:
        async with self._flush_lock:
            batch = self.buffer.drain()
            if not batch:
                return 0
            if self.write_error is not None:
                raise LogWriteError(f"Refusing to write {len(batch)} events after an earlier write failure") from self.write_error
            if self.state.value is LifecycleState.RUNNING:
                self.state.value = LifecycleState.FLUSHING
            try:
                # once drained, a batch has to reach the file even if we're being cancelled
                with trio.CancelScope(shield=True):
                    await trio.to_thread.run_sync(self.writer.write, batch)
            except LogWriteError as exc:
                self.write_error = exc
                raise
            finally:
                if self.state.value is LifecycleState.FLUSHING:
                    self.state.value = LifecycleState.RUNNING
            self.flushed += len(batch)
            return len(batch)

    async def _flush_periodically(self, *, task_status=trio.TASK_STATUS_IGNORED):
        with self._flush_timer_scope:
            task_status.started()
            while True:
                with trio.move_on_after(self.flush_interval.total_seconds()):
                    await self.flush_requested.wait_value(True)
                # a tick and a capacity request landing together still make one flush
                self.flush_requested.value = False
                await self.flush()

    async def _run_intake(self, *, task_status=trio.TASK_STATUS_IGNORED):
        try:
            with self._intake_scope:
                await self.source.run(self.dispatcher, task_status=task_status)
        finally:
            self._intake_stopped.set()

    async def _expire_after(self, duration: datetime.timedelta):
        await trio.sleep(duration.total_seconds())
        logger.info("Run duration of %s has elapsed", format_duration(duration))
        await self.shutdown()

    async def shutdown(self):
        if self.state.value in (LifecycleState.SHUTTING_DOWN, LifecycleState.TERMINATED):
            return
        logger.info("Shutting down…")
        self.state.value = LifecycleState.SHUTTING_DOWN
        self._intake_scope.cancel()
        self._flush_timer_scope.cancel()
        with trio.CancelScope(shield=True):
            if self._nursery is not None:
                await self._intake_stopped.wait()
            self.buffer.close()
            try:
                if self.write_error is None:
                    count = await self.flush()
                    logger.debug("Final flush wrote %d events", count)
            finally:
                self.writer.close()
                self.state.value = LifecycleState.TERMINATED
        if self.buffer.refused:
            logger.warning("%d events arrived after intake stopped and were not logged", self.buffer.refused)
        logger.info("Logged %d events to %s", self.flushed, self.writer.path)
        if self._nursery is not None:
            self._nursery.cancel_scope.cancel()

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        self._trio_token = trio.lowlevel.current_trio_token()
        self.writer.open()
        try:
            async with trio.open_nursery() as nursery:
                self._nursery = nursery
                await nursery.start(self._run_intake)
                await nursery.start(self._flush_periodically)
                nursery.start_soon(self._expire_after, self.run_duration)
                logger.debug(
                    "Running for %s, flushing every %s or every %d events",
                    format_duration(self.run_duration),
                    format_duration(self.flush_interval),
                    self.buffer.capacity,
                )
                task_status.started()
        finally:
            self._nursery = None
            self.writer.close()
