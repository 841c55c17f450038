"""Tests for implicit rule derivation and rule composition."""

from __future__ import annotations

import pytest

from dtokit.domain.fields import FieldMeta
from dtokit.domain.rules import compose_rules, derive_implicit_rules, merge_rules
from dtokit.domain.signatures import FieldShape

IMPLICIT_CASES = [
    ("string", "|required|string"),
    ("?string", "|nullable|string"),
    ("str", "|required|string"),
    ("int", "|required|numeric"),
    ("?int", "|nullable|numeric"),
    ("integer", "|required|numeric"),
    ("float", "|required|numeric"),
    ("double", "|required|numeric"),
    ("bool", "|required|boolean"),
    ("boolean", "|required|boolean"),
    ("array", "|required|array"),
    ("?array", "|nullable|array"),
    ("array<string>", "|required|array"),
    ("array<int>", "|required|array"),
    ("Collection<app.dtos.Address>", "|required"),
    ("app.dtos.Address", "|required"),
    ("int|null", "|nullable|numeric"),
    ("int|string", "|required|numeric|string"),
    ("mixed", "|required"),
]


class TestDeriveImplicitRules:
    @pytest.mark.parametrize("signature,expected", IMPLICIT_CASES)
    def test_derivation(self, signature: str, expected: str) -> None:
        assert derive_implicit_rules(signature) == expected

    @pytest.mark.parametrize("signature", [sig for sig, _ in IMPLICIT_CASES])
    def test_required_nullable_exclusive(self, signature: str) -> None:
        """Exactly one of required/nullable is derived for every signature."""
        names = derive_implicit_rules(signature).split("|")
        assert ("required" in names) != ("nullable" in names)

    def test_generic_argument_does_not_imply_type(self) -> None:
        names = derive_implicit_rules("array<string>").split("|")
        assert "string" not in names

    def test_stable(self) -> None:
        assert derive_implicit_rules("?float") == derive_implicit_rules("?float")


class TestMergeRules:
    def test_explicit_first(self) -> None:
        assert merge_rules("max:255", "|required|string") == "max:255|required|string"

    def test_absent_explicit(self) -> None:
        assert merge_rules(None, "|required") == "|required"


def _meta(name: str, type_: str, **kwargs: object) -> FieldMeta:
    return FieldMeta(name=name, input_name=kwargs.pop("input_name", name), type=type_, **kwargs)


class TestComposeRules:
    def test_keys_are_input_names(self) -> None:
        rules = compose_rules([_meta("first_name", "string", input_name="firstName")])
        assert rules == {"firstName": "|required|string"}

    def test_explicit_rules_precede_implicit(self) -> None:
        rules = compose_rules(
            [_meta("floor", "?string", rules="required_with:building_number")]
        )
        assert rules["floor"] == "required_with:building_number|nullable|string"

    def test_primitive_array_registers_wildcard(self) -> None:
        meta = _meta("groups", "array<string>", shape=FieldShape.PRIMITIVE_ARRAY, ref="string")
        rules = compose_rules([meta])
        assert rules == {"groups": "|required|array", "groups.*": "string"}
        assert list(rules) == ["groups", "groups.*"]

    def test_wildcard_follows_signature_not_shape(self) -> None:
        rules = compose_rules([_meta("tags", "?array<string>")])
        assert rules == {"tags": "|nullable|array", "tags.*": "string"}

    def test_collection_has_no_wildcard(self) -> None:
        meta = _meta("items", "Collection<app.A>", shape=FieldShape.DTO_COLLECTION, ref="app.A")
        assert compose_rules([meta]) == {"items": "|required"}

    def test_order_follows_fields(self) -> None:
        rules = compose_rules([_meta("b", "string"), _meta("a", "int")])
        assert list(rules) == ["b", "a"]
