from __future__ import annotations

import io
import threading

import pytest

from csvpb.ingest.splitio import PEEK_SIZE, split_sequential


@pytest.mark.parametrize(
    "data, left, right",
    [
        (b"foo,bar,my\n1,2,3", b"foo,bar,my", b"1,2,3"),
        (b"foo,bar,my\n", b"foo,bar,my", b""),
        (b"\n1,2,3", b"", b"1,2,3"),
        (b"foo,bar,my\n1\n2,3", b"foo,bar,my", b"1\n2,3"),
        (b"no separator", b"no separator", b""),
        (b"", b"", b""),
    ],
)
def test_split_at_first_separator(data: bytes, left: bytes, right: bytes) -> None:
    """Left then right reconstructs the input minus the first separator."""
    lhs, rhs = split_sequential(io.BytesIO(data), b"\n")
    assert lhs.read() == left
    assert rhs.read() == right


def test_separator_beyond_one_peek_window() -> None:
    head = b"h" * (PEEK_SIZE * 3 + 7)
    lhs, rhs = split_sequential(io.BytesIO(head + b"|" + b"tail|more"), b"|")
    assert lhs.read() == head
    assert rhs.read() == b"tail|more"


def test_small_reads_on_left_never_take_right_bytes() -> None:
    lhs, rhs = split_sequential(io.BytesIO(b"abcdef\nrest"), b"\n")
    chunks = []
    while True:
        chunk = lhs.read(2)
        if not chunk:
            break
        chunks.append(chunk)
    assert b"".join(chunks) == b"abcdef"
    assert rhs.read() == b"rest"


def test_left_reports_end_repeatedly() -> None:
    lhs, _ = split_sequential(io.BytesIO(b"a\nb"), b"\n")
    assert lhs.read() == b"a"
    assert lhs.read() == b""
    assert lhs.read(10) == b""


def test_right_blocks_until_left_is_drained() -> None:
    """Reading right before left finished waits; abandoning left would wait forever."""
    lhs, rhs = split_sequential(io.BytesIO(b"head\nbody"), b"\n")
    got: list[bytes] = []
    reader = threading.Thread(target=lambda: got.append(rhs.read()), daemon=True)
    reader.start()

    reader.join(timeout=0.2)
    assert reader.is_alive()
    assert got == []

    assert lhs.read() == b"head"
    reader.join(timeout=5)
    assert not reader.is_alive()
    assert got == [b"body"]


def test_separator_must_be_one_byte() -> None:
    with pytest.raises(ValueError):
        split_sequential(io.BytesIO(b"a\r\nb"), b"\r\n")
