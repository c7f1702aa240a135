from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Sequence

DEFAULT_BATCH_SIZE = 500        # config: increase or decrease.

_TRUTHY = {"1", "true", "t", "yes", "y"}


@dataclass(frozen=True, slots=True)
class DecodeOptions:
    """Decoding behaviour shared by every record of a run."""
    allow_unknown_fields: bool = False      # drop cells with no matching field instead of failing.
    header: Sequence[str] | None = None     # field names; read from the input's first record if `None`.
    separator: bytes = b"\n"                # splits header from body on a single byte source.
    batch_size: int = DEFAULT_BATCH_SIZE    # records per logged progress batch when loading.

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> DecodeOptions:
        """
        Options with environment overrides applied:
        - `CSVPB_ALLOW_UNKNOWN_FIELDS` (`1/true/t/yes/y` enables lenient mode)
        - `CSVPB_BATCH_SIZE`
        """
        env = os.environ if env is None else env
        opts = cls()
        if "CSVPB_ALLOW_UNKNOWN_FIELDS" in env:
            opts = replace(opts, allow_unknown_fields=env["CSVPB_ALLOW_UNKNOWN_FIELDS"].strip().lower() in _TRUTHY)
        if "CSVPB_BATCH_SIZE" in env:
            try:
                size = int(env["CSVPB_BATCH_SIZE"])
            except ValueError:
                raise ValueError(f"CSVPB_BATCH_SIZE must be an integer, got {env['CSVPB_BATCH_SIZE']!r}")
            if size <= 0:
                raise ValueError(f"CSVPB_BATCH_SIZE must be positive, got {size}")
            opts = replace(opts, batch_size=size)
        return opts

    def with_header(self, header: Sequence[str]) -> DecodeOptions:
        return replace(self, header=tuple(header))
