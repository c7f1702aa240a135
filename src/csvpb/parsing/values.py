from __future__ import annotations

from typing import Any

from csvpb.ingest.tokenizer import split_cell

from .primitives import (
    NULL_LITERAL,
    parse_bool,
    parse_bytes,
    parse_duration,
    parse_enum,
    parse_number,
    parse_timestamp,
    parse_value,
)
from .registry import enum_value_map
from .schema import NUMERIC_KINDS, WRAPPER_KINDS, FieldSpec, Kind
from .types import UnsupportedTypeError
from .wellknown import ListValue, Value


class _Unset:
    """Marker for "leave the field unset"."""
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def decode_value(raw: str, spec: FieldSpec) -> Any:
    """
    Convert one raw cell into the typed value of the field `spec` describes.

    Returns `UNSET` when the cell is the `null` sentinel on a field with presence.
    Raises `FormatError` for text that does not fit the type, `UnsupportedTypeError`
    for types this decoder cannot produce.
    """
    # `null` on a field with presence means not set, except for a dynamic
    # value where it is the explicit null.
    if spec.has_presence and raw == NULL_LITERAL:
        if spec.kind is Kind.VALUE:
            return Value.null()
        return UNSET

    if spec.repeated:
        return _decode_repeated(raw, spec)

    return _decode_single(raw, spec)


def _decode_repeated(raw: str, spec: FieldSpec) -> list[Any]:
    """Every element of a cell packed as its own sub-record, in order. Empty text has none."""
    if spec.kind is Kind.MAP:
        raise UnsupportedTypeError(f"{spec.name}: map fields are not supported", field=spec.name)
    element = spec.element()
    return [_decode_single(cell, element) for cell in split_cell(raw, field=spec.name)]


def _decode_single(raw: str, spec: FieldSpec) -> Any:
    kind = spec.kind
    name = spec.name

    ## -- well-known types
    inner = WRAPPER_KINDS.get(kind)
    if inner is not None:
        return _decode_scalar(raw, inner, spec)

    if kind is Kind.DURATION:
        return parse_duration(raw, field=name)

    if kind is Kind.TIMESTAMP:
        return parse_timestamp(raw, field=name)

    if kind is Kind.LIST_VALUE:
        return ListValue([parse_value(cell) for cell in split_cell(raw, field=name)])

    if kind is Kind.VALUE:
        return parse_value(raw)

    if kind is Kind.ANY:
        raise UnsupportedTypeError(f"{name}: cannot determine type of Any", field=name)

    if kind is Kind.STRUCT:
        raise UnsupportedTypeError(f"{name}: Struct values are not supported", field=name)

    ## -- structured
    if kind is Kind.MESSAGE:
        raise UnsupportedTypeError(f"{name}: nested messages are not supported", field=name)

    if kind is Kind.MAP:
        raise UnsupportedTypeError(f"{name}: map fields are not supported", field=name)

    return _decode_scalar(raw, kind, spec)


def _decode_scalar(raw: str, kind: Kind, spec: FieldSpec) -> Any:
    name = spec.name

    if kind is Kind.ENUM:
        if spec.enum is None:
            raise UnsupportedTypeError(f"{name}: enum field declares no enum", field=name)
        return parse_enum(raw, enum_value_map(spec.enum), enum_id=spec.enum, field=name)

    if kind is Kind.BYTES:
        return parse_bytes(raw, field=name)

    if kind is Kind.BOOL:
        return parse_bool(raw, field=name)

    if kind in NUMERIC_KINDS:
        return parse_number(raw, kind, field=name)

    if kind is Kind.STRING:
        # quotes are the tokenizer's business
        return raw

    raise UnsupportedTypeError(f"{name}: unsupported target type {kind.value}", field=name)
