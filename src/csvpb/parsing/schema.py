from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Sequence


class Kind(str, Enum):
    """Closed set of field type tags the decoder dispatches on."""
    # scalars
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"                 # float32
    DOUBLE = "double"               # float64
    STRING = "string"
    BYTES = "bytes"
    ENUM = "enum"
    # well-known wrappers around a single scalar
    DOUBLE_VALUE = "google.protobuf.DoubleValue"
    FLOAT_VALUE = "google.protobuf.FloatValue"
    INT64_VALUE = "google.protobuf.Int64Value"
    UINT64_VALUE = "google.protobuf.UInt64Value"
    INT32_VALUE = "google.protobuf.Int32Value"
    UINT32_VALUE = "google.protobuf.UInt32Value"
    BOOL_VALUE = "google.protobuf.BoolValue"
    STRING_VALUE = "google.protobuf.StringValue"
    BYTES_VALUE = "google.protobuf.BytesValue"
    # other well-known types
    DURATION = "google.protobuf.Duration"
    TIMESTAMP = "google.protobuf.Timestamp"
    VALUE = "google.protobuf.Value"
    LIST_VALUE = "google.protobuf.ListValue"
    STRUCT = "google.protobuf.Struct"
    ANY = "google.protobuf.Any"
    # structured
    MESSAGE = "message"
    MAP = "map"


# wrapper kind -> the scalar kind its single inner field is decoded as.
WRAPPER_KINDS: Mapping[Kind, Kind] = {
    Kind.DOUBLE_VALUE: Kind.DOUBLE,
    Kind.FLOAT_VALUE: Kind.FLOAT,
    Kind.INT64_VALUE: Kind.INT64,
    Kind.UINT64_VALUE: Kind.UINT64,
    Kind.INT32_VALUE: Kind.INT32,
    Kind.UINT32_VALUE: Kind.UINT32,
    Kind.BOOL_VALUE: Kind.BOOL,
    Kind.STRING_VALUE: Kind.STRING,
    Kind.BYTES_VALUE: Kind.BYTES,
}

WELL_KNOWN_KINDS = frozenset(WRAPPER_KINDS) | {
    Kind.DURATION, Kind.TIMESTAMP, Kind.VALUE, Kind.LIST_VALUE, Kind.STRUCT, Kind.ANY,
}

INTEGER_KINDS = frozenset({Kind.INT32, Kind.INT64, Kind.UINT32, Kind.UINT64})
FLOAT_KINDS = frozenset({Kind.FLOAT, Kind.DOUBLE})
NUMERIC_KINDS = INTEGER_KINDS | FLOAT_KINDS


class Label(str, Enum):
    """Field cardinality."""
    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


@dataclass(frozen=True, slots=True)
class EnumSpec:
    """An enum's symbolic name table."""
    full_name: str                  # enum id, e.g. `"shop.Widget.Color"`.
    values: Mapping[str, int]       # symbolic name -> ordinal.

    def name_of(self, number: int) -> str | None:
        for name, n in self.values.items():
            if n == number:
                return name
        return None


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """
    One declared field of a message type.

    `name` is the canonical (declared) spelling, `json_name` the display/camel
    spelling. When `json_name` is `None` the canonical name is the only one accepted.

    `presence` marks a field that distinguishes "unset" from its zero value
    (proto2 optional scalars, oneof members). Well-known types, messages and
    maps always have presence.
    """
    name: str
    kind: Kind
    json_name: str | None = None
    label: Label = Label.OPTIONAL
    presence: bool = False
    enum: str | None = None                 # enum id, only for `Kind.ENUM`.
    message: MessageSpec | None = None      # nested type for `Kind.MESSAGE` / message-valued `Kind.MAP`.
    oneof: str | None = None                # oneof group id, if a member of one.

    @property
    def repeated(self) -> bool:
        return self.label is Label.REPEATED

    @property
    def required(self) -> bool:
        return self.label is Label.REQUIRED

    @property
    def has_presence(self) -> bool:
        """Whether `null` may mean "not set" for this field."""
        if self.repeated:
            return False
        return (
            self.presence
            or self.required
            or self.oneof is not None
            or self.kind in WELL_KNOWN_KINDS
            or self.kind in (Kind.MESSAGE, Kind.MAP)
        )

    @property
    def accepted_names(self) -> tuple[str, str]:
        """`(canonical, display)` spellings, both equal when no display name is declared."""
        return self.name, self.json_name or self.name

    def element(self) -> FieldSpec:
        """The same field viewed as a single, non-repeated element."""
        return FieldSpec(
            name=self.name,
            kind=self.kind,
            json_name=self.json_name,
            enum=self.enum,
            message=self.message,
        )


@dataclass(frozen=True, slots=True)
class MessageSpec:
    """
    A message type's shape: its fields in declaration order.

    Oneof members are declared inline with `oneof` set to their group id;
    they are kept out of `fields` iteration order only by `regular_fields()`.
    """
    full_name: str
    fields: Sequence[FieldSpec] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen: dict[str, str] = {}
        for f in self.fields:
            for n in set(f.accepted_names):
                owner = seen.get(n)
                if owner is not None and owner != f.name:
                    raise ValueError(f"{self.full_name}: name {n!r} used by both {owner!r} and {f.name!r}")
                seen[n] = f.name

    def regular_fields(self) -> Iterator[FieldSpec]:
        """Fields outside any oneof, in declaration order."""
        return (f for f in self.fields if f.oneof is None)

    def oneof_fields(self) -> Iterator[FieldSpec]:
        """Oneof alternatives, in declaration order."""
        return (f for f in self.fields if f.oneof is not None)

    def oneof_groups(self) -> list[str]:
        """Oneof group ids, in order of first declaration."""
        groups: list[str] = []
        for f in self.oneof_fields():
            if f.oneof not in groups:
                groups.append(f.oneof)
        return groups

    def field_named(self, name: str) -> FieldSpec | None:
        """Find a field by either accepted spelling."""
        for f in self.fields:
            if name in f.accepted_names:
                return f
        return None
