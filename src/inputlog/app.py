from __future__ import annotations

import argparse
import logging
import pathlib
import signal
import sys

import trio

from .commontypes import LogWriteError, SettingsError
from .device.pynput_source import PynputSource
from .device.recorded_source import Recorder, ReplaySource
from .durations import parse_duration
from .lifecycle import LifecycleController
from .settings import Settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WRITE_FAILED = 1
EXIT_BAD_CONFIG = 2


def positive_int(val: str) -> int:
    number = int(val)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {val}")
    return number


def duration(val: str):
    try:
        return parse_duration(val)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


parser = argparse.ArgumentParser(prog="inputlog", description="Log keyboard and mouse input to a JSON-lines file.")
parser.add_argument("--settings", type=pathlib.Path, help="JSON settings file")
parser.add_argument("--log-path", type=pathlib.Path, help="where to append events (default: log_<timestamp>.jsonl)")
parser.add_argument("--capacity", type=positive_int, dest="buffer_capacity", help="events held in memory before a flush")
parser.add_argument("--flush-interval", type=duration, help="time between flushes, e.g. 5s")
parser.add_argument("--run-duration", type=duration, help="stop after this long, e.g. 5m")
source_group = parser.add_mutually_exclusive_group()
source_group.add_argument("--replay", type=pathlib.Path, help="read raw signals from a recording instead of the OS hook")
source_group.add_argument("--record", type=pathlib.Path, help="also save the raw signals captured to this file")
parser.add_argument("-v", "--verbose", action="store_true")


def load_settings(parsed: argparse.Namespace) -> Settings:
    if parsed.settings is not None:
        settings = Settings.load(parsed.settings)
    else:
        settings = Settings.defaults()
    return settings.replace(
        log_path=parsed.log_path,
        buffer_capacity=parsed.buffer_capacity,
        flush_interval=parsed.flush_interval,
        run_duration=parsed.run_duration,
    )


def leaf_exceptions(group: BaseExceptionGroup):
    for exc in group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            yield from leaf_exceptions(exc)
        else:
            yield exc


async def watch_signals(controller: LifecycleController, *, task_status=trio.TASK_STATUS_IGNORED):
    with trio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        task_status.started()
        async for signum in signals:
            logger.info("Received %s", signal.Signals(signum).name)
            await controller.shutdown()
            return


async def start_logging(settings: Settings, source):
    controller = LifecycleController.from_settings(settings, source)
    async with trio.open_nursery() as nursery:
        await nursery.start(watch_signals, controller)
        await controller.run()
        nursery.cancel_scope.cancel()


def main(argv=sys.argv):
    """Run the logger until its run duration elapses or it's interrupted.

    Returns 0 after a normal shutdown, 1 if the log file couldn't be written, and 2 for unusable settings.
    """
    parsed = parser.parse_args(argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(parsed)
    except SettingsError as exc:
        logger.critical("%s", exc)
        return EXIT_BAD_CONFIG

    if parsed.replay is not None:
        try:
            source = ReplaySource.from_path(parsed.replay)
        except (OSError, ValueError) as exc:
            logger.critical("Unable to load recording: %s", exc)
            return EXIT_BAD_CONFIG
    else:
        source = PynputSource()
        if parsed.record is not None:
            source = Recorder(source)

    logger.info("Logging input to %s", settings.log_path)
    exit_code = EXIT_OK
    try:
        trio.run(start_logging, settings, source)
    except* LogWriteError as group:
        for exc in leaf_exceptions(group):
            logger.critical("%s", exc)
        exit_code = EXIT_WRITE_FAILED
    finally:
        if isinstance(source, Recorder):
            try:
                source.save_events(parsed.record)
            except OSError as exc:
                logger.critical("Unable to save recording to %s: %s", parsed.record, exc)
                exit_code = EXIT_WRITE_FAILED
    return exit_code


def run():
    sys.exit(main())
