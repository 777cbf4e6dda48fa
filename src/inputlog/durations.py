"""Convert timedeltas to and from strings in a format based on Go's Duration format, such as "1h30m" or "2.5s"."""
import datetime
import decimal
import re

from .util import maybe_int

UNITS = {
    "h": datetime.timedelta(hours=1),
    "m": datetime.timedelta(minutes=1),
    "s": datetime.timedelta(seconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "us": datetime.timedelta(microseconds=1),
}

# longer unit names first, so "ms" isn't read as "m" followed by garbage
COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?)(us|ms|h|m|s)")


def parse_duration(val: str) -> datetime.timedelta:
    sign = 1
    if val.startswith("-"):
        sign = -1
        val = val[1:]
    elif val.startswith("+"):
        val = val[1:]
    if len(val) == 0:
        raise ValueError("Empty duration string")
    if val == "0":
        return datetime.timedelta()

    accum = datetime.timedelta()
    pos = 0
    while pos < len(val):
        match = COMPONENT_RE.match(val, pos)
        if match is None:
            raise ValueError(f"Invalid duration string {val!r} at position {pos}")
        number = decimal.Decimal(match.group(1))
        unit = UNITS[match.group(2)]
        num, denom = number.as_integer_ratio()
        accum += num * unit / denom
        pos = match.end()

    return sign * accum


def format_duration(val: datetime.timedelta) -> str:
    if val == datetime.timedelta():
        return "0"

    parts = []
    if val < datetime.timedelta():
        parts.append("-")
        val = -val

    # below a second, express the whole thing in a single small unit
    if val < UNITS["ms"]:
        parts.append(f"{val.microseconds}us")
    elif val < UNITS["s"]:
        parts.append(f"{maybe_int(val / UNITS['ms'])}ms")
    else:
        hours, val = divmod(val, UNITS["h"])
        minutes, val = divmod(val, UNITS["m"])
        if hours:
            parts.append(f"{hours}h")
        if minutes:
            parts.append(f"{minutes}m")
        if val:
            parts.append(f"{maybe_int(val.total_seconds())}s")

    return "".join(parts)
