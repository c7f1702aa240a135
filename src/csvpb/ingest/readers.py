from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, TextIO, Union

from csvpb.ingest.tokenizer import Record, next_record, open_records
from csvpb.parsing.types import TokenizeError

logger = logging.getLogger(__name__)


class DecoderState(str, Enum):
    """Lookahead states. Only ever move forward: ready -> exhausted, or ready -> failed."""
    ready = "ready"
    exhausted = "exhausted"
    failed = "failed"


class RecordDecoder:
    """
    Records from a tokenizer, always holding the next one already fetched.

    `has_more()` never reads; it reports what `decode()` will do next:
    - end of input is a normal terminal: `has_more()` is `False` and
      `decode()` keeps returning `None` without reading again.
    - a tokenizer error is raised by `decode()` exactly once. Until then
      `has_more()` stays `True`; afterwards it is `False` and `decode()` returns `None`.

    Not safe for concurrent use without external locking.
    """

    def __init__(self, source: Union[TextIO, Iterable[Record]]) -> None:
        # a text stream is tokenized here, anything else is already a record iterator
        self._records: Iterator[Record] = open_records(source) if hasattr(source, "read") else iter(source)
        self._next: Record | None = None
        self._error: TokenizeError | None = None
        self._reported = False
        self._state = DecoderState.ready
        self._prefetch()

    def _prefetch(self) -> None:
        try:
            self._next = next_record(self._records)
        except TokenizeError as e:
            self._next = None
            self._error = e
            self._state = DecoderState.failed
            logger.debug("tokenizer failed: %s", e)
            return
        if self._next is None:
            self._state = DecoderState.exhausted

    @property
    def state(self) -> DecoderState:
        return self._state

    def has_more(self) -> bool:
        """Whether `decode()` will return a record or raise a not yet reported error."""
        if self._state is DecoderState.failed:
            return not self._reported
        return self._state is DecoderState.ready

    def decode(self) -> Record | None:
        """The next record, `None` at end of input. Raises a pending `TokenizeError` once."""
        if self._state is DecoderState.failed:
            if self._reported:
                # no forward progress past an error
                return None
            self._reported = True
            assert self._error is not None
            raise self._error

        if self._state is DecoderState.exhausted:
            return None

        current = self._next
        self._prefetch()
        return current

    def __iter__(self) -> Iterator[Record]:
        while self.has_more():
            record = self.decode()
            if record is None:
                return
            yield record
