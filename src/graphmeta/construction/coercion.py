"""
graphmeta — type coercion

File: src/graphmeta/construction/coercion.py
Last updated: 2026-10-18

Purpose
- Synthesize constructor arguments (zero values, empty values, placeholders).
- Convert raw scalar/text input into primitive kinds and the big-number/date
  targets the codec reads from JSON.

Coercion policy
- Text input loses one layer of leading/trailing double quotes.
- Empty text and ``None`` become the kind's zero value.
- A lone double quote coerces to the quote character for ``char``.
- Numeric input is narrowed by its own value: fixed-width integer kinds wrap
  (two's complement), floats truncate toward zero.
- Anything else raises CoercionFailed naming the target and the raw input.
"""

from __future__ import annotations

import collections
import collections.abc
import datetime
import enum
import fractions
import inspect
import io
import math
import numbers
import pathlib
import re
import struct
import threading
import urllib.parse
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final
from zoneinfo import ZoneInfo

from graphmeta.domain.errors import CoercionFailed
from graphmeta.domain.models import PrimitiveKind, TypeDescriptor
from graphmeta.reflection.descriptor import describe, type_key

_INTEGER_BITS: Final[dict[PrimitiveKind, int]] = {
    PrimitiveKind.BYTE: 8,
    PrimitiveKind.SHORT: 16,
    PrimitiveKind.INT: 32,
    PrimitiveKind.LONG: 64,
}
_ZERO_VALUES: Final[dict[PrimitiveKind, object]] = {
    PrimitiveKind.BOOLEAN: False,
    PrimitiveKind.BYTE: 0,
    PrimitiveKind.SHORT: 0,
    PrimitiveKind.INT: 0,
    PrimitiveKind.LONG: 0,
    PrimitiveKind.FLOAT: 0.0,
    PrimitiveKind.DOUBLE: 0.0,
    PrimitiveKind.CHAR: "\0",
}
_INTEGER_TEXT: Final[re.Pattern[str]] = re.compile(r"^[+-]?\d+$")
_FLOAT_SUFFIX: Final[re.Pattern[str]] = re.compile(r"(?<=[\d.])[fFdD]$")
_EPOCH_MILLIS_TEXT: Final[re.Pattern[str]] = re.compile(r"^-?\d+$")

_CONCRETE_CONTAINERS: Final[tuple[type, ...]] = (
    list,
    tuple,
    set,
    frozenset,
    dict,
    collections.deque,
)
_ABSTRACT_CONTAINERS: Final[tuple[tuple[type, Callable[[], object]], ...]] = (
    (collections.abc.Mapping, dict),
    (collections.abc.Set, set),
    (collections.abc.Sequence, list),
    (collections.abc.Collection, list),
    (collections.abc.Iterable, list),
)


@dataclass(frozen=True, slots=True)
class _Placeholder:
    kind: type
    build: Callable[[type], object]


def _tzinfo_placeholder(cls: type) -> object:
    if cls in (datetime.tzinfo, datetime.timezone):
        return datetime.timezone.utc
    return cls()


def _first_member(cls: type) -> object:
    for member in cls:  # type: ignore[attr-defined]
        return member
    # A member-less enum has no value at all; the parameter gets None.
    raise LookupError(f"{cls.__qualname__} has no members")


# Checked in order; the first ``issubclass`` match builds the placeholder.
_PLACEHOLDERS: Final[tuple[_Placeholder, ...]] = (
    _Placeholder(enum.Enum, _first_member),
    _Placeholder(str, lambda cls: cls()),
    _Placeholder(bytes, lambda cls: cls()),
    _Placeholder(bytearray, lambda cls: cls()),
    _Placeholder(io.StringIO, lambda cls: cls()),
    _Placeholder(io.BytesIO, lambda cls: cls()),
    _Placeholder(datetime.datetime, lambda cls: cls.now(datetime.UTC)),
    _Placeholder(datetime.date, lambda cls: cls.today()),
    _Placeholder(datetime.time, lambda cls: cls()),
    _Placeholder(datetime.timedelta, lambda cls: cls()),
    _Placeholder(ZoneInfo, lambda cls: cls("UTC")),
    _Placeholder(datetime.tzinfo, _tzinfo_placeholder),
    _Placeholder(Decimal, lambda cls: cls(10)),
    _Placeholder(fractions.Fraction, lambda cls: cls(10)),
    _Placeholder(complex, lambda cls: cls()),
    _Placeholder(uuid.UUID, lambda cls: cls(int=0)),
    _Placeholder(pathlib.PurePath, lambda cls: cls(".")),
    _Placeholder(urllib.parse.ParseResult, lambda _cls: urllib.parse.urlparse("http://localhost")),
    _Placeholder(urllib.parse.SplitResult, lambda _cls: urllib.parse.urlsplit("http://localhost")),
    _Placeholder(range, lambda _cls: range(0)),
    _Placeholder(threading.Event, lambda cls: cls()),
    _Placeholder(type, lambda _cls: str),
)


def zero_value(kind: PrimitiveKind) -> object:
    return _ZERO_VALUES[kind]


def strip_quotes(text: str) -> str:
    """Remove one leading and one trailing double quote, when present."""
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def is_primitive(target: type | TypeDescriptor) -> bool:
    """True for primitives and their nullable (wrapper) forms."""
    return describe(target).primitive_kind is not None


def is_logical_primitive(target: type | TypeDescriptor) -> bool:
    """True for types written by value: primitives, text, numbers, dates, enums, ``type``."""
    descriptor = describe(target)
    if descriptor.primitive_kind is not None:
        return True
    cls = descriptor.python_type
    if cls is None:
        return False
    return cls is type or issubclass(
        cls,
        (str, numbers.Number, datetime.date, datetime.time, datetime.timedelta, enum.Enum),
    )


class TypeCoercer:
    """Default-value synthesis and scalar coercion for constructor arguments."""

    def default_for(self, target: type | TypeDescriptor, prefer_empty: bool) -> object:
        """Return the argument value synthesized for one parameter type.

        Primitives always get their zero value. With ``prefer_empty`` every
        other type gets ``None``; otherwise nullable primitives get their zero
        value and recognized types get a concrete placeholder instance.
        """
        descriptor = describe(target)
        kind = descriptor.primitive_kind
        if descriptor.is_primitive and kind is not None:
            return zero_value(kind)
        if prefer_empty:
            return None
        if kind is not None:
            return zero_value(kind)
        return _placeholder_for(descriptor)

    def fill_args(
        self, parameter_types: Sequence[TypeDescriptor], prefer_empty: bool
    ) -> list[object]:
        return [self.default_for(param, prefer_empty) for param in parameter_types]

    def fill_args_with_hints(
        self,
        parameter_types: Sequence[TypeDescriptor],
        hints: Mapping[object, object],
        prefer_empty: bool,
    ) -> tuple[list[object], float]:
        """Fill arguments preferring ``hints`` (keyed by class or descriptor).

        Returns the values and the fraction of parameters satisfied by a hint;
        a parameterless constructor scores 1.0.
        """
        values: list[object] = []
        found = 0
        for param in parameter_types:
            hint = hints.get(type_key(param))
            if hint is not None:
                found += 1
                values.append(hint)
            else:
                values.append(self.default_for(param, prefer_empty))
        if not parameter_types:
            return values, 1.0
        return values, found / len(parameter_types)

    def coerce(self, target: PrimitiveKind | type | TypeDescriptor, raw: object) -> object:
        """Convert ``raw`` into a value of ``target``."""
        if isinstance(target, PrimitiveKind):
            return _coerce_primitive(target, raw)

        descriptor = describe(target)
        cls = descriptor.python_type
        if cls is not None and cls in _SCALAR_TARGETS:
            return _SCALAR_TARGETS[cls](raw)
        kind = descriptor.primitive_kind
        if cls is None and kind is not None:
            return _coerce_primitive(kind, raw)
        raise CoercionFailed(
            f"{descriptor.name} has no scalar coercion", type_name=descriptor.name, raw=raw
        )


def _placeholder_for(descriptor: TypeDescriptor) -> object:
    cls = descriptor.python_type
    if cls is None:
        return [] if descriptor.is_array else None
    if cls is object:
        return object()
    try:
        for placeholder in _PLACEHOLDERS:
            if issubclass(cls, placeholder.kind):
                return placeholder.build(cls)
        if issubclass(cls, _CONCRETE_CONTAINERS) and not inspect.isabstract(cls):
            return cls()
        for abstract, factory in _ABSTRACT_CONTAINERS:
            if issubclass(cls, abstract):
                return factory()
    except (TypeError, ValueError, LookupError):
        return None
    return [] if descriptor.is_array else None


def _fail(target_name: str, raw: object, cause: Exception | None = None) -> CoercionFailed:
    error = CoercionFailed(
        f"cannot coerce {raw!r} to {target_name}", type_name=target_name, raw=raw
    )
    if cause is not None:
        error.__cause__ = cause
    return error


def _coerce_primitive(kind: PrimitiveKind, raw: object) -> object:
    if kind is PrimitiveKind.CHAR:
        return _coerce_char(raw)
    if raw is None:
        return zero_value(kind)
    if isinstance(raw, str):
        text = strip_quotes(raw)
        if not text:
            return zero_value(kind)
        return _parse_primitive(kind, text, raw)
    if kind is PrimitiveKind.BOOLEAN:
        if isinstance(raw, numbers.Number) and not isinstance(raw, complex):
            return bool(raw)
        raise _fail(kind.value, raw)
    if isinstance(raw, complex) or not isinstance(raw, (numbers.Number, Decimal)):
        raise _fail(kind.value, raw)
    return _narrow(kind, raw, raw)


def _parse_primitive(kind: PrimitiveKind, text: str, raw: object) -> object:
    if kind is PrimitiveKind.BOOLEAN:
        return text.lower() == "true"
    if kind in _INTEGER_BITS:
        if not _INTEGER_TEXT.match(text):
            raise _fail(kind.value, raw)
        value = int(text)
        bits = _INTEGER_BITS[kind]
        if not -(1 << (bits - 1)) <= value < (1 << (bits - 1)):
            raise _fail(kind.value, raw)
        return value
    try:
        parsed = float(_FLOAT_SUFFIX.sub("", text))
    except ValueError as exc:
        raise _fail(kind.value, raw, exc) from exc
    return _to_single(parsed) if kind is PrimitiveKind.FLOAT else parsed


def _narrow(kind: PrimitiveKind, number: object, raw: object) -> object:
    if kind in _INTEGER_BITS:
        try:
            value = int(number)  # type: ignore[call-overload]
        except (ValueError, OverflowError) as exc:
            raise _fail(kind.value, raw, exc) from exc
        bits = _INTEGER_BITS[kind]
        value &= (1 << bits) - 1
        if value >= 1 << (bits - 1):
            value -= 1 << bits
        return value
    try:
        as_float = float(number)  # type: ignore[arg-type]
    except OverflowError:
        as_float = math.inf if number > 0 else -math.inf  # type: ignore[operator]
    return _to_single(as_float) if kind is PrimitiveKind.FLOAT else as_float


def _to_single(value: float) -> float:
    try:
        return float(struct.unpack("f", struct.pack("f", value))[0])
    except OverflowError:
        return math.copysign(math.inf, value)


def _coerce_char(raw: object) -> str:
    if raw is None:
        return "\0"
    if isinstance(raw, str):
        if raw == '"':
            return '"'
        text = strip_quotes(raw)
        return text[0] if text else "\0"
    if isinstance(raw, int) and not isinstance(raw, bool):
        return chr(raw & 0xFFFF)
    raise _fail(PrimitiveKind.CHAR.value, raw)


def _coerce_big_integer(raw: object) -> int:
    if raw is None:
        return 0
    if isinstance(raw, str):
        text = strip_quotes(raw).strip()
        if not text:
            return 0
        if _INTEGER_TEXT.match(text):
            return int(text)
        try:
            raw_number: object = _coerce_decimal(text)
        except CoercionFailed as exc:
            raise _fail("int", raw, exc) from exc
    else:
        raw_number = raw
    if isinstance(raw_number, complex) or not isinstance(raw_number, (numbers.Number, Decimal)):
        raise _fail("int", raw)
    try:
        return int(raw_number)  # type: ignore[call-overload]
    except (ValueError, OverflowError) as exc:
        raise _fail("int", raw, exc) from exc


def _coerce_decimal(raw: object) -> Decimal:
    if raw is None:
        return Decimal(0)
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, bool):
        return Decimal(int(raw))
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))
    if isinstance(raw, str):
        text = strip_quotes(raw).strip()
        if not text:
            return Decimal(0)
        try:
            return Decimal(text)
        except InvalidOperation as exc:
            raise _fail("decimal.Decimal", raw, exc) from exc
    raise _fail("decimal.Decimal", raw)


def _coerce_datetime(raw: object) -> datetime.datetime:
    if isinstance(raw, datetime.datetime):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        return _from_epoch_millis(raw, raw)
    if isinstance(raw, str):
        text = strip_quotes(raw).strip()
        if _EPOCH_MILLIS_TEXT.match(text):
            return _from_epoch_millis(int(text), raw)
        try:
            return datetime.datetime.fromisoformat(text)
        except ValueError as exc:
            raise _fail("datetime.datetime", raw, exc) from exc
    raise _fail("datetime.datetime", raw)


def _from_epoch_millis(millis: int, raw: object) -> datetime.datetime:
    try:
        return datetime.datetime.fromtimestamp(millis / 1000, tz=datetime.UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise _fail("datetime.datetime", raw, exc) from exc


_SCALAR_TARGETS: Final[dict[type, Callable[[object], object]]] = {
    bool: lambda raw: _coerce_primitive(PrimitiveKind.BOOLEAN, raw),
    float: lambda raw: _coerce_primitive(PrimitiveKind.DOUBLE, raw),
    int: _coerce_big_integer,
    Decimal: _coerce_decimal,
    datetime.datetime: _coerce_datetime,
}


__all__ = [
    "TypeCoercer",
    "is_logical_primitive",
    "is_primitive",
    "strip_quotes",
    "zero_value",
]
