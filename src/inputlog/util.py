from __future__ import annotations

import datetime
import pathlib

from dateutil.tz import tzlocal


def maybe_int(val: float):
    return int(val) if val.is_integer() else val


def now():
    return datetime.datetime.now(tzlocal())


def default_log_path(when: datetime.datetime | None = None, directory: pathlib.Path | None = None) -> pathlib.Path:
    if when is None:
        when = now()
    if directory is None:
        directory = pathlib.Path.cwd()
    return directory / f"log_{when.strftime('%Y%m%d_%H%M%S')}.jsonl"
