from __future__ import annotations

import csv
import io
from typing import Iterator, TextIO

from csvpb.parsing.types import TokenizeError


Record = list[str]


def open_records(stream: TextIO) -> Iterator[Record]:
    """
    RFC4180 records from a text stream.

    `stream` should be opened with `newline=""` so quoted cells keep their embedded line breaks.
    """
    return csv.reader(stream, strict=True)


def next_record(records: Iterator[Record]) -> Record | None:
    """
    The next non-blank record, or `None` at end of input.
    Raises `TokenizeError` on malformed quoting or undecodable text.
    """
    while True:
        try:
            row = next(records)
        except StopIteration:
            return None
        except (csv.Error, UnicodeDecodeError) as e:
            line = getattr(records, "line_num", "?")
            raise TokenizeError(f"line {line}: {e}") from e
        # blank lines are not records
        if row:
            return row


def split_cell(text: str, *, field: str | None = None) -> Record:
    """
    Tokenize one cell's own text as a single sub-record (same dialect, so
    quoting and embedded commas work the same way). Empty text has no cells.
    """
    if text == "":
        return []
    try:
        row = next_record(open_records(io.StringIO(text, newline="")))
    except TokenizeError as e:
        raise TokenizeError(f"{field}: {e.detail}" if field else e.detail, field=field) from e
    return row or []
