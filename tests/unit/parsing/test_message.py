from __future__ import annotations

import pytest

from csvpb.parsing.message import Message, OneofValue
from csvpb.parsing.registry import enum_value_map, get_message_spec, register_enum, register_message
from csvpb.parsing.schema import EnumSpec, FieldSpec, Kind, Label, MessageSpec
from csvpb.parsing.types import InvalidTargetError, UnsupportedTypeError


def test_oneof_holds_one_alternative(oneof_spec: MessageSpec) -> None:
    """The group itself records which alternative is active."""
    msg = Message(oneof_spec)
    assert msg.which_oneof("union") is None
    msg.set("salary", 1)
    msg.set("homeAddress", "Sydney")
    assert msg.oneofs == {"union": OneofValue("home_address", "Sydney")}
    assert not msg.has("salary")
    assert msg.get("salary", "unset") == "unset"

    msg.clear("home_address")
    assert msg.which_oneof("union") is None


def test_unknown_names_are_invalid_targets(oneof_spec: MessageSpec) -> None:
    msg = Message(oneof_spec)
    with pytest.raises(InvalidTargetError):
        msg.set("nope", 1)
    with pytest.raises(InvalidTargetError):
        msg.which_oneof("nope")
    with pytest.raises(KeyError):
        msg["title"]


def test_duplicate_names_in_schema_are_rejected() -> None:
    with pytest.raises(ValueError):
        MessageSpec(
            "testdata.Clash",
            fields=(FieldSpec("a_b", Kind.STRING, json_name="aB"), FieldSpec("aB", Kind.STRING)),
        )


def test_field_presence() -> None:
    assert FieldSpec("x", Kind.DURATION).has_presence
    assert FieldSpec("x", Kind.STRING, label=Label.REQUIRED).has_presence
    assert FieldSpec("x", Kind.STRING, oneof="g").has_presence
    assert not FieldSpec("x", Kind.STRING).has_presence
    assert not FieldSpec("x", Kind.DURATION, label=Label.REPEATED).has_presence


def test_enum_registry() -> None:
    spec = EnumSpec("testdata.Registry.Size", {"SMALL": 0, "LARGE": 1})
    register_enum(spec)
    register_enum(spec)
    assert enum_value_map("testdata.Registry.Size") == {"SMALL": 0, "LARGE": 1}
    assert spec.name_of(1) == "LARGE"
    with pytest.raises(ValueError):
        register_enum(EnumSpec("testdata.Registry.Size", {"SMALL": 1}))
    with pytest.raises(UnsupportedTypeError):
        enum_value_map("testdata.Registry.Missing")


def test_message_registry(required_spec: MessageSpec) -> None:
    register_message(required_spec)
    assert get_message_spec("testdata.MsgWithRequired") is required_spec
    with pytest.raises(ValueError):
        get_message_spec("testdata.Missing")


def test_clear_regular_and_inactive_oneof_fields(oneof_spec: MessageSpec) -> None:
    """Clearing an alternative that is not active leaves the group alone."""
    msg = Message(oneof_spec)
    msg.set("title", "Dr")
    msg.set("Country", "Australia")
    msg.clear("salary")
    assert msg.which_oneof("union") == "Country"
    msg.clear("title")
    msg.clear("title")
    assert msg.to_dict() == {"Country": "Australia"}
