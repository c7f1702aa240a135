from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence, TextIO

from csvpb.config import DecodeOptions
from csvpb.ingest.readers import RecordDecoder
from csvpb.ingest.splitio import split_sequential
from csvpb.ingest.summary import LoadSummary
from csvpb.ingest.tokenizer import split_cell
from csvpb.parsing.assembler import RecordAssembler
from csvpb.parsing.message import Message
from csvpb.parsing.required import validate
from csvpb.parsing.schema import MessageSpec
from csvpb.parsing.types import DecodeError, FormatError, ParsedRecord, RejectRecord, TokenizeError

logger = logging.getLogger(__name__)


def split_header(
    source: BinaryIO,
    *,
    sep: bytes = b"\n",
    encoding: str = "utf-8",
) -> tuple[list[str], TextIO]:
    """
    Read the header line off a single byte source and hand back the rest as text.

    The header must fit on one line (no quoted line breaks in field names).
    The body stream is only readable because the header side was drained here.
    """
    left, right = split_sequential(source, sep)
    try:
        header_text = left.read().decode(encoding)
    except UnicodeDecodeError as e:
        raise TokenizeError(f"header: undecodable input: {e}") from e
    header = split_cell(header_text.rstrip("\r"))
    body = io.TextIOWrapper(io.BufferedReader(right), encoding=encoding, newline="")
    return header, body


@dataclass
class LoadResult:
    """Every record of one input, each either accepted or rejected."""
    parsed: list[ParsedRecord]
    rejected: list[RejectRecord]
    summary: LoadSummary


@dataclass
class Unmarshaler:
    """
    Decodes CSV records into messages.

    The header is taken from `options.header`, or read from the first record
    of the first input and kept for every later call.
    """
    options: DecodeOptions = field(default_factory=DecodeOptions)
    header: list[str] | None = None

    def __post_init__(self) -> None:
        if self.header is None and self.options.header is not None:
            self.header = list(self.options.header)

    def _assembler(self, spec: MessageSpec) -> RecordAssembler:
        return RecordAssembler(spec, allow_unknown_fields=self.options.allow_unknown_fields)

    def _ensure_header(self, decoder: RecordDecoder) -> list[str]:
        if self.header is None:
            header = decoder.decode()
            if header is None:
                raise FormatError("input has no header record")
            self.header = header
        return self.header

    def unmarshal_next(self, decoder: RecordDecoder, target: Message) -> bool:
        """
        Decode the next record of `decoder` into `target`, then check required fields.
        Returns `False` (and leaves `target` alone) at end of input.
        """
        header = self._ensure_header(decoder)
        record = decoder.decode()
        if record is None:
            return False
        self._assembler(target.spec).assemble(header, record, target)
        validate(target)
        return True

    def unmarshal(self, stream: TextIO, target: Message) -> bool:
        """Decode the first data record of `stream` into `target`."""
        return self.unmarshal_next(RecordDecoder(stream), target)

    def unmarshal_string(self, text: str, target: Message) -> bool:
        return self.unmarshal(io.StringIO(text, newline=""), target)

    def iter_messages(self, stream: TextIO, spec: MessageSpec) -> Iterator[Message]:
        """A fresh, validated message per data record. The first error ends the iteration."""
        decoder = RecordDecoder(stream)
        self._ensure_header(decoder)
        while decoder.has_more():
            target = Message(spec)
            if not self.unmarshal_next(decoder, target):
                return
            yield target

    def load(self, stream: TextIO, spec: MessageSpec, *, source: str = "<stream>") -> LoadResult:
        """
        Decode every data record of `stream`.

        - decode, unknown-field and required-field errors reject that record only,
        - a tokenizer error is recorded once and ends the load (no progress past it).

        Raises only when the header record itself cannot be read.
        """
        decoder = RecordDecoder(stream)
        header = self._ensure_header(decoder)
        assembler = self._assembler(spec)

        parsed: list[ParsedRecord] = []
        rejected: list[RejectRecord] = []
        total = 0

        while decoder.has_more():
            source_row = total + 1
            try:
                record = decoder.decode()
            except TokenizeError as e:
                total += 1
                rejected.append(
                    RejectRecord(
                        reason_code=e.code,
                        reason_detail=e.detail,
                        raw_payload={"header": list(header)},
                        source_row=source_row,
                    )
                )
                logger.debug("%s row %d: tokenizer error, stopping: %s", spec.full_name, source_row, e)
                break
            if record is None:
                break
            total += 1

            raw_payload = {"header": list(header), "record": list(record)}
            try:
                msg = assembler.assemble(header, record)
                validate(msg)
            except DecodeError as e:
                rejected.append(
                    RejectRecord(
                        reason_code=e.code,
                        reason_detail=e.detail,
                        raw_payload=raw_payload,
                        source_row=source_row,
                    )
                )
            else:
                parsed.append(ParsedRecord(message=msg, source_row=source_row, raw_payload=raw_payload))

            if total % self.options.batch_size == 0:
                logger.debug("%s: %d records decoded so far", spec.full_name, total)

        summary = LoadSummary(
            message_type=spec.full_name,
            source=source,
            total=total,
            loaded=len(parsed),
            rejected=len(rejected),
        )
        logger.info(summary.render_one_line())
        return LoadResult(parsed=parsed, rejected=rejected, summary=summary)

    def load_file(self, path: Path, spec: MessageSpec) -> LoadResult:
        with path.open("r", encoding="utf-8", newline="") as f:
            return self.load(f, spec, source=str(path))

    def load_bytes(self, source: BinaryIO, spec: MessageSpec, *, name: str = "<bytes>") -> LoadResult:
        """
        Like `load`, for a single byte source whose first line is the header.
        A header already configured on this unmarshaler takes precedence over that line.
        """
        header, body = split_header(source, sep=self.options.separator)
        if self.header is None:
            self.header = header
        return self.load(body, spec, source=name)


def unmarshal_next(decoder: RecordDecoder, target: Message, *, header: Sequence[str] | None = None) -> bool:
    return Unmarshaler(header=None if header is None else list(header)).unmarshal_next(decoder, target)


def unmarshal(stream: TextIO, target: Message) -> bool:
    """Decode the header and first data record of `stream` into `target`."""
    return Unmarshaler().unmarshal(stream, target)


def unmarshal_string(text: str, target: Message) -> bool:
    """Decode the header and first data record of `text` into `target`."""
    return Unmarshaler().unmarshal_string(text, target)
