# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import logging
import pathlib
import threading
import time
import typing

import msgspec
import trio

from .hwtypes import RawSignal

if typing.TYPE_CHECKING:
    from .types import EventSource, SignalCallback

logger = logging.getLogger(__name__)


class RecordedSignal(msgspec.Struct, frozen=True):
    # seconds since the previous signal
    delay: float
    signal: RawSignal


recording_encoder = msgspec.json.Encoder()
recording_decoder = msgspec.json.Decoder(RecordedSignal)


def load_recording(path: pathlib.Path) -> list[RecordedSignal]:
    recording = []
    with path.open("rb") as infile:
        for lineno, line in enumerate(infile, start=1):
            if not line.strip():
                continue
            try:
                recording.append(recording_decoder.decode(line))
            except msgspec.DecodeError as exc:
                raise ValueError(f"{path}:{lineno}: {exc}") from exc
    return recording


class Recorder:
    """Wraps another event source, passing its signals along while keeping a copy that save_events() can write out."""

    def __init__(self, wrapped: EventSource):
        self.wrapped = wrapped
        self.last_time = None
        self.events: list[RecordedSignal] = []
        self._lock = threading.Lock()

    def save_events(self, path: pathlib.Path):
        with self._lock:
            events = list(self.events)
        with path.open("wb") as outfile:
            for event in events:
                outfile.write(recording_encoder.encode(event) + b"\n")
        logger.debug("Saved %d recorded signals to %s", len(events), path)

    def _recording(self, deliver: SignalCallback) -> SignalCallback:
        def record_and_deliver(signal: RawSignal):
            with self._lock:
                now = time.monotonic()
                delay = 0.0 if self.last_time is None else now - self.last_time
                self.last_time = now
                self.events.append(RecordedSignal(delay=delay, signal=signal))
            deliver(signal)

        return record_and_deliver

    async def run(self, deliver: SignalCallback, *, task_status=trio.TASK_STATUS_IGNORED):
        await self.wrapped.run(self._recording(deliver), task_status=task_status)


class ReplaySource:
    """Delivers a recorded sequence of signals, sleeping between them to keep the original timing."""

    def __init__(self, recording: collections.abc.Iterable[RecordedSignal]):
        self.recording = list(recording)

    @classmethod
    def from_path(cls, path: pathlib.Path):
        return cls(load_recording(path))

    async def run(self, deliver: SignalCallback, *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        for entry in self.recording:
            if entry.delay > 0:
                await trio.sleep(entry.delay)
            else:
                await trio.lowlevel.checkpoint()
            deliver(entry.signal)
        logger.debug("Replayed all %d signals", len(self.recording))
