from __future__ import annotations

import collections.abc
import typing

import trio

if typing.TYPE_CHECKING:
    from .hwtypes import RawSignal

SignalCallback = collections.abc.Callable[["RawSignal"], None]


@typing.runtime_checkable
class EventSource(typing.Protocol):
    """Something that pushes raw input signals into a callback.

    run() delivers signals until it is cancelled; cancelling it is how intake gets stopped. The callback may be invoked
    from a foreign thread, and must return promptly.
    """

    async def run(self, deliver: SignalCallback, *, task_status: trio.TaskStatus = trio.TASK_STATUS_IGNORED) -> None:
        ...
