from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .schema import FieldSpec, MessageSpec
from .types import InvalidTargetError


@dataclass(frozen=True, slots=True)
class OneofValue:
    """The active alternative of a oneof group: which field is set, and its value."""
    field: str
    value: Any


@dataclass
class Message:
    """
    A decoded message, owned by the caller and filled in place.

    Regular fields live in `values` keyed by canonical name; an absent key means
    "not set". Oneof groups live in `oneofs` keyed by group id, holding at most
    one `OneofValue` each.
    """
    spec: MessageSpec
    values: dict[str, Any] = field(default_factory=dict)
    oneofs: dict[str, OneofValue] = field(default_factory=dict)

    def _field(self, name: str) -> FieldSpec:
        f = self.spec.field_named(name)
        if f is None:
            raise InvalidTargetError(f"{self.spec.full_name} has no field {name!r}", field=name)
        return f

    def set(self, name: str, value: Any) -> None:
        """Set a field by either spelling. Setting a oneof member replaces the group's active alternative."""
        f = self._field(name)
        if f.oneof is not None:
            self.oneofs[f.oneof] = OneofValue(f.name, value)
        else:
            self.values[f.name] = value

    def clear(self, name: str) -> None:
        f = self._field(name)
        if f.oneof is not None:
            active = self.oneofs.get(f.oneof)
            if active is not None and active.field == f.name:
                del self.oneofs[f.oneof]
        else:
            self.values.pop(f.name, None)

    def has(self, name: str) -> bool:
        f = self._field(name)
        if f.oneof is not None:
            active = self.oneofs.get(f.oneof)
            return active is not None and active.field == f.name
        return f.name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        f = self._field(name)
        if f.oneof is not None:
            active = self.oneofs.get(f.oneof)
            if active is None or active.field != f.name:
                return default
            return active.value
        return self.values.get(f.name, default)

    def __getitem__(self, name: str) -> Any:
        if not self.has(name):
            raise KeyError(name)
        return self.get(name)

    def which_oneof(self, group: str) -> str | None:
        """Canonical name of the group's active alternative, or `None`."""
        if group not in self.spec.oneof_groups():
            raise InvalidTargetError(f"{self.spec.full_name} has no oneof {group!r}")
        active = self.oneofs.get(group)
        return None if active is None else active.field

    def to_dict(self) -> dict[str, Any]:
        """Every set field, oneof alternatives flattened in, keyed by canonical name."""
        out = dict(self.values)
        for active in self.oneofs.values():
            out[active.field] = active.value
        return out
