from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from .message import Message


class ErrorCode(str, Enum):
    """Typed error classifications."""
    tokenize = "tokenize"                   # malformed text at the tokenizer boundary
    invalid_format = "invalid_format"       # cell does not match its declared type's grammar
    unsupported_type = "unsupported_type"   # schema/decoder mismatch, never bad data
    unknown_field = "unknown_field"
    missing_required = "missing_required"
    invalid_target = "invalid_target"


@dataclass(eq=False)
class DecodeError(Exception):
    """Base of every classified decode failure."""
    code: ErrorCode
    detail: str
    field: str | None = None    # offending field name, when known.

    def __str__(self) -> str:
        return self.detail


class TokenizeError(DecodeError):
    """Raw text could not be split into cells. Carries the tokenizer's message unchanged."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.tokenize, detail, field)


class FormatError(DecodeError):
    """A cell's text does not match the grammar of its declared type."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.invalid_format, detail, field)


class UnsupportedTypeError(DecodeError):
    """The target declares a type the decoder has no rule for."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.unsupported_type, detail, field)


class UnknownFieldError(DecodeError):
    """Raw data names a field the schema does not declare."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.unknown_field, detail, field)


class RequiredFieldMissingError(DecodeError):
    """A required field is still unset after assembly."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.missing_required, detail, field)


class InvalidTargetError(DecodeError):
    """Programming misuse: the target does not exist or has the wrong shape."""
    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(ErrorCode.invalid_target, detail, field)


@dataclass(frozen=True, slots=True)
class ParsedRecord:
    """Accepted record's decoded message."""
    message: Message
    source_row: int
    raw_payload: Mapping[str, Any]

    def to_mapping(self) -> Mapping[str, Any]:
        """The set fields of the decoded message, keyed by primary name."""
        return self.message.to_dict()


@dataclass(frozen=True, slots=True)
class RejectRecord:
    """Rejected record's contents."""
    reason_code: ErrorCode
    reason_detail: str
    raw_payload: Mapping[str, Any]  # the raw unmutated cells being decoded.
    source_row: int                 # 1-based data row number, header not counted.
