"""Unit tests for argument synthesis and scalar coercion."""

from __future__ import annotations

import datetime
import enum
import math
import struct
from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from graphmeta.construction.coercion import (
    TypeCoercer,
    is_logical_primitive,
    is_primitive,
    strip_quotes,
)
from graphmeta.domain.errors import CoercionFailed
from graphmeta.domain.models import PrimitiveKind
from graphmeta.reflection import DeclaredType, PythonType

STR = PythonType(str)
INT = DeclaredType.primitive(PrimitiveKind.INT)
K = PrimitiveKind


class Opaque:
    pass


class Phase(enum.Enum):
    DRAFT = 1
    FINAL = 2


class Vacant(enum.Enum):
    pass


@pytest.fixture
def coercer() -> TypeCoercer:
    return TypeCoercer()


def test_primitives_always_get_zero_values(coercer: TypeCoercer) -> None:
    for prefer_empty in (True, False):
        assert coercer.default_for(int, prefer_empty) == 0
        assert coercer.default_for(float, prefer_empty) == 0.0
        assert coercer.default_for(bool, prefer_empty) is False
        assert coercer.default_for(DeclaredType.primitive(K.CHAR), prefer_empty) == "\0"


def test_nullable_primitives_follow_the_policy(coercer: TypeCoercer) -> None:
    optional_int = PythonType(int, nullable=True)

    assert coercer.default_for(optional_int, True) is None
    assert coercer.default_for(optional_int, False) == 0


def test_placeholders_are_only_used_by_the_populate_policy(coercer: TypeCoercer) -> None:
    assert coercer.default_for(str, True) is None
    assert coercer.default_for(str, False) == ""
    assert coercer.default_for(Phase, False) is Phase.DRAFT
    assert coercer.default_for(type, False) is str
    assert coercer.default_for(Decimal, False) == Decimal(10)

    stamp = coercer.default_for(datetime.datetime, False)
    assert isinstance(stamp, datetime.datetime)
    assert stamp.tzinfo is datetime.UTC


def test_unrecognized_types_get_none_and_arrays_get_empty_lists(coercer: TypeCoercer) -> None:
    assert coercer.default_for(Opaque, False) is None
    assert coercer.default_for(DeclaredType("com.acme.Buffer[]", is_array=True), False) == []
    assert coercer.default_for(DeclaredType("com.acme.Opaque"), False) is None


def test_fill_args_uses_one_value_per_parameter(coercer: TypeCoercer) -> None:
    assert coercer.fill_args([STR, INT], True) == [None, 0]
    assert coercer.fill_args([STR, INT], False) == ["", 0]
    assert coercer.fill_args([], False) == []


def test_fill_args_with_hints_reports_the_satisfied_fraction(coercer: TypeCoercer) -> None:
    values, ratio = coercer.fill_args_with_hints([STR, INT], {str: "x"}, False)
    assert values == ["x", 0]
    assert ratio == 0.5

    values, ratio = coercer.fill_args_with_hints([STR, INT], {INT: 7}, True)
    assert values == [None, 7]
    assert ratio == 0.5

    assert coercer.fill_args_with_hints([], {}, True) == ([], 1.0)


@pytest.mark.parametrize(
    ("kind", "raw", "expected"),
    [
        (K.INT, "42", 42),
        (K.INT, '"42"', 42),
        (K.INT, "+7", 7),
        (K.INT, "", 0),
        (K.INT, '""', 0),
        (K.INT, None, 0),
        (K.INT, True, 1),
        (K.BYTE, 300, 44),
        (K.BYTE, 200, -56),
        (K.SHORT, 70000, 4464),
        (K.INT, 2**31, -(2**31)),
        (K.LONG, 3.9, 3),
        (K.INT, -3.9, -3),
        (K.LONG, Decimal("12.7"), 12),
        (K.BOOLEAN, "TRUE", True),
        (K.BOOLEAN, "yes", False),
        (K.BOOLEAN, 1, True),
        (K.BOOLEAN, None, False),
        (K.CHAR, '"', '"'),
        (K.CHAR, "abc", "a"),
        (K.CHAR, "", "\0"),
        (K.CHAR, None, "\0"),
        (K.CHAR, 65, "A"),
        (K.DOUBLE, "1.5", 1.5),
        (K.DOUBLE, "", 0.0),
        (K.DOUBLE, 2, 2.0),
        (K.FLOAT, "2.5f", 2.5),
        (K.FLOAT, "0.5", 0.5),
    ],
)
def test_coerce_primitive_kinds(
    coercer: TypeCoercer, kind: PrimitiveKind, raw: object, expected: object
) -> None:
    assert coercer.coerce(kind, raw) == expected


def test_float_kind_rounds_to_single_precision(coercer: TypeCoercer) -> None:
    single = struct.unpack("f", struct.pack("f", 0.1))[0]

    assert coercer.coerce(K.FLOAT, "0.1") == single
    assert coercer.coerce(K.DOUBLE, "0.1") == 0.1


@pytest.mark.parametrize(
    ("kind", "raw"),
    [
        (K.INT, "abc"),
        (K.INT, "99999999999"),
        (K.INT, "1.5"),
        (K.BYTE, object()),
        (K.INT, 1 + 2j),
        (K.DOUBLE, "x"),
        (K.BOOLEAN, [1]),
        (K.CHAR, 1.5),
    ],
)
def test_coerce_failures_name_the_target_and_raw_input(
    coercer: TypeCoercer, kind: PrimitiveKind, raw: object
) -> None:
    with pytest.raises(CoercionFailed) as excinfo:
        coercer.coerce(kind, raw)

    assert excinfo.value.type_name == kind.value
    assert excinfo.value.raw is raw
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize("raw", ["99999999999999999999", 10**20, '"-99999999999999999999"'])
def test_out_of_range_epoch_millis_fail_naming_the_datetime_target(
    coercer: TypeCoercer, raw: object
) -> None:
    with pytest.raises(CoercionFailed) as excinfo:
        coercer.coerce(datetime.datetime, raw)

    assert excinfo.value.type_name == "datetime.datetime"
    assert excinfo.value.raw == raw


def test_integers_beyond_float_range_saturate_to_infinity(coercer: TypeCoercer) -> None:
    assert coercer.coerce(K.DOUBLE, 10**400) == math.inf
    assert coercer.coerce(K.DOUBLE, -(10**400)) == -math.inf
    assert coercer.coerce(K.FLOAT, 10**400) == math.inf
    assert coercer.coerce(float, 10**400) == math.inf


def test_member_less_enums_have_no_placeholder(coercer: TypeCoercer) -> None:
    assert coercer.default_for(Phase, True) is None
    # A member-less enum has nothing to offer, even under the populate policy.
    assert coercer.default_for(Vacant, False) is None


def test_declared_primitive_descriptors_coerce_by_kind(coercer: TypeCoercer) -> None:
    assert coercer.coerce(DeclaredType.primitive(K.SHORT), 70000) == 4464


def test_python_int_targets_are_unbounded(coercer: TypeCoercer) -> None:
    assert coercer.coerce(int, "123456789012345678901234567890") == 123456789012345678901234567890
    assert coercer.coerce(int, 2**70) == 2**70
    assert coercer.coerce(int, "1e3") == 1000
    assert coercer.coerce(int, 3.7) == 3
    assert coercer.coerce(PythonType(int, nullable=True), None) == 0
    with pytest.raises(CoercionFailed):
        coercer.coerce(int, "twelve")


def test_decimal_and_python_scalar_targets(coercer: TypeCoercer) -> None:
    assert coercer.coerce(Decimal, 0.1) == Decimal("0.1")
    assert coercer.coerce(Decimal, '"3.14"') == Decimal("3.14")
    assert coercer.coerce(Decimal, "") == Decimal(0)
    assert coercer.coerce(bool, "TRUE") is True
    assert coercer.coerce(float, "2.5") == 2.5
    with pytest.raises(CoercionFailed, match="pi"):
        coercer.coerce(Decimal, "pi")


def test_datetime_targets_accept_iso_text_and_epoch_millis(coercer: TypeCoercer) -> None:
    epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.UTC)

    assert coercer.coerce(datetime.datetime, 0) == epoch
    assert coercer.coerce(datetime.datetime, "86400000") == epoch + datetime.timedelta(days=1)
    assert coercer.coerce(datetime.datetime, '"2024-01-02T03:04:05+00:00"') == datetime.datetime(
        2024, 1, 2, 3, 4, 5, tzinfo=datetime.UTC
    )
    with pytest.raises(CoercionFailed):
        coercer.coerce(datetime.datetime, "not a date")
    with pytest.raises(CoercionFailed):
        coercer.coerce(datetime.datetime, None)


def test_types_without_scalar_coercion_are_rejected(coercer: TypeCoercer) -> None:
    with pytest.raises(CoercionFailed, match="no scalar coercion") as excinfo:
        coercer.coerce(str, "x")
    assert excinfo.value.type_name == "builtins.str"


@given(value=st.integers(min_value=-(2**70), max_value=2**70))
@settings(max_examples=200, derandomize=True, deadline=None)
def test_int_kind_wraps_like_a_32_bit_register(value: int) -> None:
    result = TypeCoercer().coerce(K.INT, value)

    assert isinstance(result, int)
    assert -(2**31) <= result < 2**31
    assert (result - value) % 2**32 == 0


@given(value=st.integers(min_value=-(2**63), max_value=2**63 - 1))
@settings(max_examples=200, derandomize=True, deadline=None)
def test_long_kind_parses_its_own_text(value: int) -> None:
    coercer = TypeCoercer()

    assert coercer.coerce(K.LONG, str(value)) == value
    assert coercer.coerce(K.LONG, f'"{value}"') == value


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('"abc"', "abc"),
        ('""x""', '"x"'),
        ("abc", "abc"),
        ('"', ""),
        ("", ""),
    ],
)
def test_strip_quotes_removes_one_layer(text: str, expected: str) -> None:
    assert strip_quotes(text) == expected


def test_primitive_classification() -> None:
    assert is_primitive(int)
    assert is_primitive(PythonType(float, nullable=True))
    assert is_primitive(DeclaredType.primitive(K.CHAR))
    assert not is_primitive(str)

    assert is_logical_primitive(str)
    assert is_logical_primitive(Decimal)
    assert is_logical_primitive(datetime.date)
    assert is_logical_primitive(Phase)
    assert is_logical_primitive(type)
    assert not is_logical_primitive(list)
    assert not is_logical_primitive(DeclaredType("com.acme.Opaque"))
