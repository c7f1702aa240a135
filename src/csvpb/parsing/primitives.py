from __future__ import annotations

import base64
import binascii
import math
import re
import struct
from datetime import datetime, timedelta
from typing import Mapping

from .schema import Kind
from .types import FormatError
from .wellknown import Duration, Timestamp, Value


# the sentinel for "not set" on fields with presence.
NULL_LITERAL = "null"

# unquoted float specials.
_NON_FINITE: Mapping[str, float] = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}

_INT_RANGES: Mapping[Kind, tuple[int, int]] = {
    Kind.INT32: (-(2**31), 2**31 - 1),
    Kind.INT64: (-(2**63), 2**63 - 1),
    Kind.UINT32: (0, 2**32 - 1),
    Kind.UINT64: (0, 2**64 - 1),
}

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
# no in-range integer needs more significant digits than this.
_MAX_INT_DIGITS = 20
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_WORD_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

# well-known Duration range, in seconds.
_MAX_DURATION_SECONDS = 315_576_000_000
_DURATION_RE = re.compile(r"([+-]?)([0-9]+(?:\.[0-9]*)?|\.[0-9]+)s")
_MAX_DURATION_DIGITS = len(str(_MAX_DURATION_SECONDS))

_TIMESTAMP_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?(Z|[+-]\d{2}:\d{2})"
)
_EPOCH = datetime(1970, 1, 1)

# `1,t,T,0,f,F` would parse as booleans but are far more likely numbers/flags.
_AMBIGUOUS_BOOL_TOKENS = frozenset({"1", "t", "T", "0", "f", "F"})


def strip_quotes(s: str) -> str:
    """Remove exactly one layer of surrounding double quotes, if present."""
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s


def _significant_digits(s: str) -> int:
    return len(s.lstrip("+-").lstrip("0"))


def _bool_token(s: str) -> bool | None:
    """The boolean a token spells, or `None`."""
    if s in ("1", "t", "T", "TRUE", "true", "True"):
        return True
    if s in ("0", "f", "F", "FALSE", "false", "False"):
        return False
    return None


def _float_token(s: str) -> float:
    """
    Parse a decimal or `inf`/`nan` token to a 64-bit float.
    Raises `ValueError` on malformed text or overflow to infinity.
    """
    if _FLOAT_WORD_RE.fullmatch(s):
        return float(s)
    if not _FLOAT_RE.fullmatch(s):
        raise ValueError(f"malformed number {s!r}")
    v = float(s)
    if math.isinf(v):
        raise ValueError(f"value out of range {s!r}")
    return v


## -- scalar rules

def parse_bool(v: str, *, field: str) -> bool:
    """Parse a boolean cell: one layer of quotes is dropped, case is ignored."""
    s = strip_quotes(v).lower()
    b = _bool_token(s)
    if b is None:
        raise FormatError(f"{field}: invalid boolean {v!r}", field=field)
    return b


def parse_int(v: str, kind: Kind, *, field: str) -> int:
    """
    Parse a quoted or unquoted base-10 integer and check it fits `kind`'s width.
    Unsigned kinds take no sign at all.
    """
    s = strip_quotes(v)
    lo, hi = _INT_RANGES[kind]
    pattern = _UNSIGNED_RE if lo == 0 else _SIGNED_RE
    if not pattern.fullmatch(s):
        raise FormatError(f"{field}: invalid {kind.value} value {v!r}", field=field)
    if _significant_digits(s) > _MAX_INT_DIGITS:
        raise FormatError(f"{field}: {kind.value} value out of range {v!r}", field=field)
    n = int(s)
    if not lo <= n <= hi:
        raise FormatError(f"{field}: {kind.value} value out of range {v!r}", field=field)
    return n


def parse_float(v: str, kind: Kind, *, field: str) -> float:
    """
    Parse a float cell. The unquoted tokens `NaN`, `Infinity` and `-Infinity`
    are the IEEE specials; anything else may be quoted once.
    `Kind.FLOAT` values are rounded to single precision.
    """
    if v in _NON_FINITE:
        return _NON_FINITE[v]
    s = strip_quotes(v)
    try:
        d = _float_token(s)
    except ValueError:
        raise FormatError(f"{field}: invalid {kind.value} value {v!r}", field=field)
    if kind is Kind.FLOAT and math.isfinite(d):
        try:
            return struct.unpack("<f", struct.pack("<f", d))[0]
        except OverflowError:
            raise FormatError(f"{field}: float value out of range {v!r}", field=field)
    return d


def parse_number(v: str, kind: Kind, *, field: str) -> int | float:
    if kind in (Kind.FLOAT, Kind.DOUBLE):
        return parse_float(v, kind, field=field)
    return parse_int(v, kind, field=field)


def parse_bytes(v: str, *, field: str) -> bytes:
    """Standard, padded base64."""
    try:
        return base64.b64decode(v, validate=True)
    except (binascii.Error, ValueError):
        raise FormatError(f"{field}: invalid base64 {v!r}", field=field)


def parse_enum(v: str, values: Mapping[str, int], *, enum_id: str, field: str) -> int:
    """
    Resolve an enum cell to its ordinal: a symbolic name first, else an
    unsigned number (unknown ordinals are kept, enums are open).
    """
    s = v.strip()
    n = values.get(s)
    if n is not None:
        return n
    if (
        not _UNSIGNED_RE.fullmatch(s)
        or _significant_digits(s) > _MAX_INT_DIGITS
        or int(s) > _INT_RANGES[Kind.UINT32][1]
    ):
        raise FormatError(f"{field}: unknown value {s!r} for enum {enum_id}", field=field)
    return parse_int(s, Kind.INT32, field=field)


## -- well-known types

def parse_duration(v: str, *, field: str) -> Duration:
    """
    Parse `<signed decimal seconds>s`, e.g. `4s`, `-1.5s`, `3.000s`.
    Sub-nanosecond digits are truncated.
    """
    m = _DURATION_RE.fullmatch(v)
    if m is None:
        raise FormatError(f"{field}: bad Duration {v!r}", field=field)
    sign, number = m.groups()
    whole, _, frac = number.partition(".")
    if _significant_digits(whole) > _MAX_DURATION_DIGITS:
        raise FormatError(f"{field}: Duration out of range {v!r}", field=field)
    seconds = int(whole or "0")
    nanos = int(frac[:9].ljust(9, "0"))
    if seconds > _MAX_DURATION_SECONDS:
        raise FormatError(f"{field}: Duration out of range {v!r}", field=field)
    if sign == "-":
        seconds, nanos = -seconds, -nanos
    return Duration(seconds=seconds, nanos=nanos)


def parse_timestamp(v: str, *, field: str) -> Timestamp:
    """
    Parse an RFC3339 timestamp with up to nanosecond precision, e.g.
    `2014-05-13T16:53:20.021Z` or `1969-12-31T23:59:58+01:00`.
    Pre-epoch instants yield negative seconds with a positive nanos remainder.
    """
    m = _TIMESTAMP_RE.fullmatch(v)
    if m is None:
        raise FormatError(f"{field}: bad Timestamp {v!r}", field=field)
    year, month, day, hour, minute, second, frac, zone = m.groups()
    try:
        dt = datetime(int(year), int(month), int(day), int(hour), int(minute), int(second))
    except ValueError as e:
        raise FormatError(f"{field}: bad Timestamp {v!r}: {e}", field=field)

    offset = timedelta(0)
    if zone != "Z":
        zh, zm = int(zone[1:3]), int(zone[4:6])
        if zh > 23 or zm > 59:
            raise FormatError(f"{field}: bad Timestamp offset {v!r}", field=field)
        offset = timedelta(hours=zh, minutes=zm)
        if zone[0] == "-":
            offset = -offset

    delta = dt - _EPOCH - offset
    seconds = delta.days * 86400 + delta.seconds
    nanos = int((frac or "").ljust(9, "0"))
    return Timestamp(seconds=seconds, nanos=nanos)


def parse_value(v: str) -> Value:
    """
    Guess a dynamic value's type from its text. Never fails.

    Precedence: empty -> null; text with a `.` that parses as a float -> number;
    a boolean spelling other than `1,t,T,0,f,F` -> bool; any float -> number;
    otherwise the text itself as a string.
    """
    if v == "":
        return Value.null()

    if "." in v:
        try:
            return Value.number(_float_token(v))
        except ValueError:
            pass

    if v not in _AMBIGUOUS_BOOL_TOKENS:
        b = _bool_token(v)
        if b is not None:
            return Value.boolean(b)

    try:
        return Value.number(_float_token(v))
    except ValueError:
        # no good way to detect anything else, keep the text
        return Value.string(v)
