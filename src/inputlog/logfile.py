from __future__ import annotations

import collections.abc
import logging
import os
import pathlib
import typing

import msgspec

from .commontypes import LogWriteError
from .logtypes import LoggedEvent

logger = logging.getLogger(__name__)

encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder(dict[str, typing.Any])


def encode_event(event: LoggedEvent) -> bytes:
    return encoder.encode(event.to_record()) + b"\n"


class LogWriter:
    """Append-only JSON-lines log.

    Each batch is staged in memory and written as one unit, then fsynced. If anything goes wrong partway through,
    the file is cut back to where the batch started so a reader never sees half a batch, and LogWriteError is raised.
    The batch is not retried or kept; deciding what to do next is the caller's business.
    """

    def __init__(self, path: pathlib.Path):
        self.path = path
        self._file: typing.Optional[typing.BinaryIO] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, _exc_type, _exc_value, _traceback):
        self.close()
        return False

    @property
    def closed(self):
        return self._file is None

    def open(self):
        if self._file is not None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # unbuffered, so a successful write() has really been handed to the OS
            self._file = open(self.path, "ab", buffering=0)
        except OSError as exc:
            raise LogWriteError(f"Unable to open log file {self.path}: {exc}") from exc
        logger.debug("Opened %s", self.path)

    def close(self):
        if self._file is None:
            return
        f = self._file
        self._file = None
        try:
            f.close()
        except OSError as exc:
            raise LogWriteError(f"Unable to close log file {self.path}: {exc}") from exc
        logger.debug("Closed %s", self.path)

    def write(self, batch: collections.abc.Sequence[LoggedEvent]):
        if self._file is None:
            raise LogWriteError(f"Log file {self.path} is not open")
        if not batch:
            return

        staging = bytearray()
        for event in batch:
            staging += encode_event(event)

        fd = self._file.fileno()
        start = os.lseek(fd, 0, os.SEEK_END)
        try:
            view = memoryview(staging)
            while view:
                written = self._file.write(view)
                if written is None:
                    # only happens for non-blocking files, which this is not
                    raise OSError("write would block")
                view = view[written:]
            os.fsync(fd)
        except OSError as exc:
            self._rollback(fd, start)
            raise LogWriteError(f"Unable to write {len(batch)} events to {self.path}: {exc}") from exc
        logger.debug("Wrote %d events (%d bytes) to %s", len(batch), len(staging), self.path)

    def _rollback(self, fd: int, length: int):
        try:
            os.ftruncate(fd, length)
        except OSError:
            logger.exception("Unable to truncate %s back to %d bytes after a failed write", self.path, length)


def read_log(path: pathlib.Path) -> collections.abc.Iterator[LoggedEvent]:
    with path.open("rb") as infile:
        for line in infile:
            if not line.strip():
                continue
            yield LoggedEvent.from_record(decoder.decode(line))
