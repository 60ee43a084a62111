"""Unit tests for core domain models and the error hierarchy."""

from __future__ import annotations

import pytest

from graphmeta.domain import errors
from graphmeta.domain.models import (
    ArgumentPolicy,
    ConstructorCandidate,
    ResolvedConstructor,
    Visibility,
)
from graphmeta.reflection import DeclaredType


def _candidate(
    visibility: Visibility, *params: DeclaredType, label: str = "__init__"
) -> ConstructorCandidate:
    return ConstructorCandidate(
        owner=DeclaredType("com.acme.Owner"),
        parameter_types=tuple(params),
        visibility=visibility,
        factory=lambda *args: args,
        label=label,
    )


def test_visibility_rank_groups_private_and_package() -> None:
    assert [v.rank for v in Visibility] == [0, 1, 2, 2]
    assert Visibility.PRIVATE.rank == Visibility.PACKAGE.rank


def test_sort_key_orders_by_visibility_then_arity_then_names() -> None:
    text = DeclaredType("com.acme.String")
    number = DeclaredType("com.acme.Integer")

    assert _candidate(Visibility.PUBLIC, text).sort_key() == (0, 1, ("com.acme.String",))
    ordered = sorted(
        [
            _candidate(Visibility.PRIVATE, label="private"),
            _candidate(Visibility.PUBLIC, text, number, label="two"),
            _candidate(Visibility.PUBLIC, text, label="text"),
            _candidate(Visibility.PUBLIC, number, label="number"),
            _candidate(Visibility.PROTECTED, label="protected"),
        ],
        key=ConstructorCandidate.sort_key,
    )

    assert [item.label for item in ordered] == ["number", "text", "two", "protected", "private"]


def test_candidates_invoke_their_factory_and_grant_access_by_default() -> None:
    candidate = _candidate(Visibility.PUBLIC, DeclaredType("com.acme.String"))

    assert candidate.arity == 1
    assert candidate.make_accessible() is True
    assert candidate.invoke(["x"]) == ("x",)
    assert candidate.invoke() == ()


def test_resolved_constructor_policy() -> None:
    candidate = _candidate(Visibility.PUBLIC)

    assert ResolvedConstructor(candidate, True).policy is ArgumentPolicy.NULL_PREFERRING
    assert ResolvedConstructor(candidate, False).policy is ArgumentPolicy.POPULATE
    raw = ResolvedConstructor(None, None)
    assert raw.raw_allocation
    assert raw.policy is None
    assert not ResolvedConstructor(candidate, True).raw_allocation


def test_argument_policy_prefers_empty_only_when_null_preferring() -> None:
    assert ArgumentPolicy.NULL_PREFERRING.prefer_empty
    assert not ArgumentPolicy.POPULATE.prefer_empty


@pytest.mark.parametrize(
    "error_type",
    [
        errors.SecurityDenied,
        errors.UnsupportedInterface,
        errors.NoConstructorFound,
    ],
)
def test_instantiation_failures_share_a_base(error_type: type[errors.GraphMetaError]) -> None:
    error = error_type("boom", type_name="com.acme.X")

    assert isinstance(error, errors.InstantiationError)
    assert isinstance(error, errors.GraphMetaError)
    assert error.type_name == "com.acme.X"
    assert str(error) == "boom"


def test_value_errors_carry_their_context() -> None:
    coercion = errors.CoercionFailed("bad", type_name="int", raw="x")
    denied = errors.FieldAssignmentDenied("no", type_name=None, field_name="code")

    assert isinstance(coercion, ValueError)
    assert coercion.raw == "x"
    assert isinstance(errors.ConfigLoadError("cfg"), ValueError)
    assert errors.ConfigLoadError("cfg").type_name is None
    assert denied.field_name == "code"
    assert not isinstance(denied, errors.InstantiationError)
