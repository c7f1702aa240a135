from __future__ import annotations

import pytest

from csvpb.parsing.registry import register_enum
from csvpb.parsing.schema import EnumSpec, FieldSpec, Kind, Label, MessageSpec


COLOR = EnumSpec("testdata.Widget.Color", {"RED": 0, "GREEN": 1, "BLUE": 2})
HUMOUR = EnumSpec("testdata.Message.Humour", {"UNKNOWN": 0, "PUNS": 1, "SLAPSTICK": 2, "BILL_BAILEY": 3})


@pytest.fixture(scope="session", autouse=True)
def _registered_enums() -> None:
    """Enum name tables are registered once per test session, as generated code would."""
    register_enum(COLOR)
    register_enum(HUMOUR)


def _scalar(name: str, json_name: str, kind: Kind) -> FieldSpec:
    return FieldSpec(name, kind, json_name=json_name, presence=True)


@pytest.fixture(scope="session")
def simple_spec() -> MessageSpec:
    """Proto2-style message: one optional field per scalar type."""
    return MessageSpec(
        "testdata.Simple",
        fields=(
            _scalar("o_bool", "oBool", Kind.BOOL),
            _scalar("o_int32", "oInt32", Kind.INT32),
            _scalar("o_int32_str", "oInt32Str", Kind.INT32),
            _scalar("o_int64", "oInt64", Kind.INT64),
            _scalar("o_int64_str", "oInt64Str", Kind.INT64),
            _scalar("o_uint32", "oUint32", Kind.UINT32),
            _scalar("o_uint64", "oUint64", Kind.UINT64),
            _scalar("o_float", "oFloat", Kind.FLOAT),
            _scalar("o_double", "oDouble", Kind.DOUBLE),
            _scalar("o_string", "oString", Kind.STRING),
            FieldSpec("o_bytes", Kind.BYTES, json_name="oBytes"),
        ),
    )


@pytest.fixture(scope="session")
def repeats_spec() -> MessageSpec:
    """One repeated field per scalar type."""
    def rep(name: str, json_name: str, kind: Kind) -> FieldSpec:
        return FieldSpec(name, kind, json_name=json_name, label=Label.REPEATED)

    return MessageSpec(
        "testdata.Repeats",
        fields=(
            rep("r_bool", "rBool", Kind.BOOL),
            rep("r_int32", "rInt32", Kind.INT32),
            rep("r_int64", "rInt64", Kind.INT64),
            rep("r_uint64", "rUint64", Kind.UINT64),
            rep("r_double", "rDouble", Kind.DOUBLE),
            rep("r_string", "rString", Kind.STRING),
            rep("r_bytes", "rBytes", Kind.BYTES),
        ),
    )


@pytest.fixture(scope="session")
def widget_spec() -> MessageSpec:
    return MessageSpec(
        "testdata.Widget",
        fields=(
            FieldSpec("color", Kind.ENUM, enum=COLOR.full_name, presence=True),
            FieldSpec("r_color", Kind.ENUM, json_name="rColor", enum=COLOR.full_name, label=Label.REPEATED),
        ),
    )


@pytest.fixture(scope="session")
def known_types_spec() -> MessageSpec:
    """One field per well-known type."""
    return MessageSpec(
        "testdata.KnownTypes",
        fields=(
            FieldSpec("an", Kind.ANY),
            FieldSpec("dur", Kind.DURATION),
            FieldSpec("st", Kind.STRUCT),
            FieldSpec("ts", Kind.TIMESTAMP),
            FieldSpec("lv", Kind.LIST_VALUE),
            FieldSpec("val", Kind.VALUE),
            FieldSpec("dbl", Kind.DOUBLE_VALUE),
            FieldSpec("flt", Kind.FLOAT_VALUE),
            FieldSpec("i64", Kind.INT64_VALUE),
            FieldSpec("u64", Kind.UINT64_VALUE),
            FieldSpec("i32", Kind.INT32_VALUE),
            FieldSpec("u32", Kind.UINT32_VALUE),
            FieldSpec("bool", Kind.BOOL_VALUE),
            FieldSpec("str", Kind.STRING_VALUE),
            FieldSpec("bytes", Kind.BYTES_VALUE),
        ),
    )


@pytest.fixture(scope="session")
def oneof_spec() -> MessageSpec:
    return MessageSpec(
        "testdata.MsgWithOneof",
        fields=(
            FieldSpec("title", Kind.STRING),
            FieldSpec("salary", Kind.INT64, oneof="union"),
            FieldSpec("Country", Kind.STRING, oneof="union"),
            FieldSpec("home_address", Kind.STRING, json_name="homeAddress", oneof="union"),
        ),
    )


@pytest.fixture(scope="session")
def required_spec() -> MessageSpec:
    return MessageSpec(
        "testdata.MsgWithRequired",
        fields=(
            FieldSpec("str", Kind.STRING, label=Label.REQUIRED),
            FieldSpec("note", Kind.STRING),
        ),
    )


@pytest.fixture(scope="session")
def inner_spec() -> MessageSpec:
    return MessageSpec(
        "testdata.Inner",
        fields=(FieldSpec("id", Kind.INT64, label=Label.REQUIRED),),
    )


@pytest.fixture(scope="session")
def outer_spec(inner_spec: MessageSpec) -> MessageSpec:
    """Message values nested every way the required-field walk descends."""
    return MessageSpec(
        "testdata.Outer",
        fields=(
            FieldSpec("name", Kind.STRING),
            FieldSpec("inner", Kind.MESSAGE, message=inner_spec),
            FieldSpec("items", Kind.MESSAGE, message=inner_spec, label=Label.REPEATED),
            FieldSpec("by_key", Kind.MAP, json_name="byKey", message=inner_spec),
            FieldSpec("picked", Kind.MESSAGE, message=inner_spec, oneof="choice"),
            FieldSpec("label", Kind.STRING, oneof="choice"),
        ),
    )
