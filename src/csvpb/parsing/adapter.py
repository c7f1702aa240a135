from __future__ import annotations

from typing import Sequence

from csvpb.parsing.schema import FieldSpec
from csvpb.parsing.types import UnknownFieldError


RawFieldMap = dict[str, str]


def zip_record(header: Sequence[str], record: Sequence[str]) -> RawFieldMap:
    """
    Pair header names with a record's cells by position.

    - A duplicate header name keeps the last cell written for it.
    - Header names past the end of a short record are simply absent.
    - Cells past the end of the header are keyed by 1-based column (`"#4"`),
      so they surface through the unknown-field policy.
    """
    raw: RawFieldMap = {}
    for i, cell in enumerate(record):
        name = header[i] if i < len(header) else f"#{i + 1}"
        raw[name] = cell
    return raw


def consume_field(raw: RawFieldMap, spec: FieldSpec) -> str | None:
    """
    Take the raw text for `spec` out of `raw`, accepting both its canonical and
    display spellings. If both are present the display spelling wins and both
    keys are removed. Returns `None` when neither is present.
    """
    orig, camel = spec.accepted_names
    found = False
    text = ""
    if orig in raw:
        text = raw.pop(orig)
        found = True
    if camel in raw:
        text = raw.pop(camel)
        found = True
    return text if found else None


def check_unknown(raw: RawFieldMap, *, message: str, allow_unknown_fields: bool) -> None:
    """
    Whatever is still in `raw` after every field consumed its cells is unknown.
    Raises `UnknownFieldError` unless `allow_unknown_fields`, in which case the
    leftovers are dropped.
    """
    if not raw:
        return
    if allow_unknown_fields:
        raw.clear()
        return
    # ordered ASC, reproducible.
    unknown = sorted(raw)
    raise UnknownFieldError(f"unknown fields {unknown} in {message}", field=unknown[0])
