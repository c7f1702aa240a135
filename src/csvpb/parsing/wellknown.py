from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union


class NullValue(int, Enum):
    """The single null marker a dynamic `Value` can hold."""
    NULL_VALUE = 0


@dataclass(frozen=True, slots=True)
class Duration:
    """Signed span of time. `seconds` and `nanos` always carry the same sign."""
    seconds: int = 0
    nanos: int = 0


@dataclass(frozen=True, slots=True)
class Timestamp:
    """Point in time as seconds since the Unix epoch (negative before it) plus a non-negative nanosecond remainder."""
    seconds: int = 0
    nanos: int = 0


ValueKind = Literal["null_value", "number_value", "string_value", "bool_value"]


@dataclass(frozen=True, slots=True)
class Value:
    """
    Dynamically typed cell value. `kind` names the active alternative,
    `payload` holds it (`NullValue.NULL_VALUE` for null).
    """
    kind: ValueKind
    payload: Union[NullValue, float, str, bool]

    @classmethod
    def null(cls) -> Value:
        return cls("null_value", NullValue.NULL_VALUE)

    @classmethod
    def number(cls, v: float) -> Value:
        return cls("number_value", float(v))

    @classmethod
    def string(cls, v: str) -> Value:
        return cls("string_value", v)

    @classmethod
    def boolean(cls, v: bool) -> Value:
        return cls("bool_value", bool(v))


@dataclass(frozen=True, slots=True)
class ListValue:
    """Ordered list of dynamically typed values."""
    values: list[Value] = field(default_factory=list)
