"""Go-style duration strings ("2h", "900s", "1h30m", "250ms").

The config format predates this package and stores every interval the way
Go's ``time.ParseDuration`` reads it, so that is the grammar accepted here.
"""
import math
import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

# nanoseconds per unit
_UNITS = {
    "ns": 1,
    "us": 10**3,
    "µs": 10**3,  # micro sign
    "μs": 10**3,  # greek mu
    "ms": 10**6,
    "s": 10**9,
    "m": 60 * 10**9,
    "h": 3600 * 10**9,
}
_PART = re.compile(r"(\d*(?:\.\d*)?)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    s = text
    if not s:
        raise ValueError("invalid duration: empty string")
    sign = 1
    if s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return timedelta(0)

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        m = _PART.match(s, pos)
        if m is None or m.group(1) in ("", "."):
            raise ValueError(f"invalid duration: {text!r}")
        try:
            total += Decimal(m.group(1)) * _UNITS[m.group(2)]
        except InvalidOperation:
            raise ValueError(f"invalid duration: {text!r}") from None
        pos = m.end()
    if pos == 0:
        raise ValueError(f"invalid duration: {text!r}")

    # timedelta cannot hold sub-microsecond precision
    try:
        return timedelta(microseconds=sign * int(total // 1000))
    except OverflowError:
        raise ValueError(f"invalid duration: {text!r} out of range") from None


def coerce_duration(value: Any) -> timedelta:
    """Accept a timedelta, a number of seconds, or a duration string."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError("invalid duration: boolean")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"invalid duration: {value!r}")
        try:
            return timedelta(seconds=value)
        except OverflowError:
            raise ValueError(f"invalid duration: {value!r} out of range") from None
    if isinstance(value, str):
        return parse_duration(value)
    raise ValueError(f"invalid duration type: {type(value).__name__}")


def _frac(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{rest:0{width}d}".rstrip("0")


def format_duration(td: timedelta) -> str:
    us = td // timedelta(microseconds=1)
    sign = "-" if us < 0 else ""
    us = abs(us)
    if us == 0:
        return "0s"
    if us < 1000:
        return f"{sign}{us}µs"
    if us < 10**6:
        return f"{sign}{_frac(us, 1000)}ms"

    hours, rest = divmod(us, 3600 * 10**6)
    minutes, rest = divmod(rest, 60 * 10**6)
    out = f"{_frac(rest, 10**6)}s"
    if hours or minutes:
        out = f"{minutes}m{out}"
    if hours:
        out = f"{hours}h{out}"
    return sign + out
