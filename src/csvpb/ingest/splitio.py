from __future__ import annotations

import io
import logging
import threading
from typing import BinaryIO

logger = logging.getLogger(__name__)

# upper bound on how far the left side looks ahead for the separator per read.
PEEK_SIZE = 1024


class _LeftReader(io.RawIOBase):
    """Everything before the first separator. The separator itself is dropped."""

    def __init__(self, buffered: io.BufferedReader, done: threading.Event, sep: bytes) -> None:
        super().__init__()
        self._buffered = buffered
        self._done = done
        self._sep = sep
        self._finished = False

    def readable(self) -> bool:
        return True

    def _finish(self) -> None:
        self._finished = True
        # the right side may start reading now
        self._done.set()
        logger.debug("left stream drained, handing over the source")

    def readinto(self, b) -> int:  # type: ignore[override]
        if self._finished or len(b) == 0:
            return 0

        want = min(len(b), PEEK_SIZE)
        window = self._buffered.peek(want)[:want]
        if not window:
            # source ended without a separator
            self._finish()
            return 0

        i = window.find(self._sep)
        if i == -1:
            data = self._buffered.read1(len(window))
        else:
            data = self._buffered.read1(i) if i else b""
            self._buffered.read1(1)     # drop the separator
            self._finish()

        n = len(data)
        b[:n] = data
        return n


class _RightReader(io.RawIOBase):
    """Everything after the first separator. Blocks until the left side is drained."""

    def __init__(self, buffered: io.BufferedReader, done: threading.Event) -> None:
        super().__init__()
        self._buffered = buffered
        self._done = done

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # type: ignore[override]
        self._done.wait()
        return self._buffered.readinto1(b)


def split_sequential(source: BinaryIO, sep: bytes = b"\n") -> tuple[io.RawIOBase, io.RawIOBase]:
    """
    Split one byte source at the first occurrence of `sep`.

    Returns `(left, right)`:
    - `left` yields the bytes before the first `sep` (the whole source if there
      is none), then end-of-stream. `sep` goes to neither side.
    - `right` yields the bytes after it, but any read on it waits until `left`
      has reported end-of-stream, so only one side ever touches the source.

    `left` must be read to its end, otherwise reads on `right` block forever.
    No timeout is applied here; bound the wait on `right` from the outside.
    """
    if len(sep) != 1:
        raise ValueError(f"separator must be a single byte, got {sep!r}")
    buffered = source if isinstance(source, io.BufferedReader) else io.BufferedReader(source)  # type: ignore[arg-type]
    done = threading.Event()
    return _LeftReader(buffered, done, sep), _RightReader(buffered, done)
