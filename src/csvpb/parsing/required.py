from __future__ import annotations

from typing import Any, Iterable

from .message import Message
from .schema import FieldSpec, Kind
from .types import InvalidTargetError, RequiredFieldMissingError


def find_missing_required(message: Message, *, path: str = "") -> RequiredFieldMissingError | None:
    """
    Walk `message` in field-declaration order and return the first required
    field that is unset, or `None`.

    Descends into message values wherever they can sit: singular message fields,
    each element of repeated message fields, each value of map fields, and the
    active alternative of a oneof. Schemas are acyclic, so the walk terminates.
    """
    if not isinstance(message, Message):
        raise InvalidTargetError(f"cannot validate {type(message).__name__}, expected Message")

    for f in message.spec.fields:
        if f.oneof is not None:
            # only the active alternative is a real field
            active = message.oneofs.get(f.oneof)
            if active is None or active.field != f.name:
                continue
            value = active.value
        elif f.name in message.values:
            value = message.values[f.name]
        else:
            if f.required:
                return RequiredFieldMissingError(
                    f"required field {path + f.name!r} is not set", field=f.name
                )
            continue

        err = _check_nested(f, value, path=f"{path}{f.name}.")
        if err is not None:
            return err
    return None


def _check_nested(f: FieldSpec, value: Any, *, path: str) -> RequiredFieldMissingError | None:
    if f.kind not in (Kind.MESSAGE, Kind.MAP):
        return None

    children: Iterable[Any]
    if f.kind is Kind.MAP:
        children = value.values() if isinstance(value, dict) else ()
    elif f.repeated:
        children = value or ()
    else:
        children = (value,)

    for child in children:
        if isinstance(child, Message):
            err = find_missing_required(child, path=path)
            if err is not None:
                return err
    return None


def validate(message: Message) -> None:
    """Raise `RequiredFieldMissingError` for the first unset required field."""
    err = find_missing_required(message)
    if err is not None:
        raise err
