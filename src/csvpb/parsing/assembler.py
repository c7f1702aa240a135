from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .adapter import check_unknown, consume_field, zip_record
from .message import Message
from .schema import MessageSpec
from .types import InvalidTargetError
from .values import UNSET, decode_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordAssembler:
    """
    Decode a single record into a message.

    Order of work is always:
    - 1st: every regular field, in declaration order (first decode error aborts)
    - 2nd: oneof alternatives, in declaration order; the first alternative of a
      group found in the record wins, the group's other names are never looked up
    - 3rd: leftover cells are unknown fields (fatal unless `allow_unknown_fields`)

    Required fields are not checked here, see `csvpb.parsing.required`.
    """
    spec: MessageSpec
    allow_unknown_fields: bool = False

    def assemble(self, header: Sequence[str], record: Sequence[str], target: Message | None = None) -> Message:
        """
        Fill `target` (a fresh message if `None`) from `record` read against `header`.
        Only fields present in the record are written.
        """
        if target is None:
            target = Message(self.spec)
        elif not isinstance(target, Message) or target.spec.full_name != self.spec.full_name:
            got = target.spec.full_name if isinstance(target, Message) else type(target).__name__
            raise InvalidTargetError(f"cannot decode {self.spec.full_name} into {got}")

        raw = zip_record(header, record)

        ## -- regular fields
        for f in self.spec.regular_fields():
            text = consume_field(raw, f)
            if text is None:
                continue
            value = decode_value(text, f)
            if value is UNSET:
                continue
            target.set(f.name, value)

        ## -- oneof alternatives
        resolved: set[str] = set()
        for f in self.spec.oneof_fields():
            if not raw:
                break
            if f.oneof in resolved:
                continue
            text = consume_field(raw, f)
            if text is None:
                continue
            resolved.add(f.oneof)
            value = decode_value(text, f)
            if value is UNSET:
                continue
            target.set(f.name, value)
            logger.debug("%s: oneof %s resolved to %s", self.spec.full_name, f.oneof, f.name)

        # No support for proto2 extensions.
        check_unknown(raw, message=self.spec.full_name, allow_unknown_fields=self.allow_unknown_fields)
        return target


def assemble(
    spec: MessageSpec,
    header: Sequence[str],
    record: Sequence[str],
    *,
    target: Message | None = None,
    allow_unknown_fields: bool = False,
) -> Message:
    """Decode one record against `header` into a message of type `spec`."""
    return RecordAssembler(spec, allow_unknown_fields=allow_unknown_fields).assemble(header, record, target)
