from __future__ import annotations

from typing import Mapping

from .schema import EnumSpec, MessageSpec
from .types import UnsupportedTypeError


# Registries are filled once at startup (generated code or hand-declared schemas)
# and only read afterwards.
_ENUMS: dict[str, EnumSpec] = {}
_MESSAGES: dict[str, MessageSpec] = {}


def register_enum(spec: EnumSpec) -> EnumSpec:
    """Register an enum's name table under its id. Re-registering the same table is a no-op."""
    existing = _ENUMS.get(spec.full_name)
    if existing is not None and existing != spec:
        raise ValueError(f"enum {spec.full_name!r} already registered with a different name table")
    _ENUMS[spec.full_name] = spec
    return spec


def register_message(spec: MessageSpec) -> MessageSpec:
    """Register a message type under its full name."""
    existing = _MESSAGES.get(spec.full_name)
    if existing is not None and existing is not spec:
        raise ValueError(f"message {spec.full_name!r} already registered")
    _MESSAGES[spec.full_name] = spec
    return spec


def enum_value_map(enum_id: str) -> Mapping[str, int]:
    """
    The symbolic name -> ordinal table of a registered enum.
    Raises `UnsupportedTypeError` if no table was registered for `enum_id`.
    """
    spec = _ENUMS.get(enum_id)
    if spec is None:
        raise UnsupportedTypeError(f"no name table registered for enum {enum_id!r}")
    return spec.values


def get_message_spec(full_name: str) -> MessageSpec:
    """
    A registry that returns a message type's shape by its full name.
    """
    spec = _MESSAGES.get(full_name)
    if spec is None:
        raise ValueError(f"Unknown message type: {full_name}")
    return spec
