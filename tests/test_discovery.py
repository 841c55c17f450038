"""Tests for field metadata discovery from annotations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, Literal, Optional

import pytest

from dtokit import BaseDto, SchemaConfigurationError, ValidationError, dto_field
from dtokit.discovery import clear_cache, discover_fields, signature_from_annotation
from dtokit.domain.signatures import FieldShape
from tests.dtos import Address, Customer, Employee, Person, Tagged


class TestSignatureFromAnnotation:
    @pytest.mark.parametrize(
        "hint,expected",
        [
            (str, "string"),
            (int, "int"),
            (float, "float"),
            (bool, "bool"),
            (list, "array"),
            (dict, "array"),
            (dict[str, int], "array"),
            (Any, "mixed"),
            (str | None, "?string"),
            (Optional[int], "?int"),  # noqa: UP007
            (int | str, "int|string"),
            (int | str | None, "int|string|null"),
            (list[str], "array<string>"),
            (tuple[int, ...], "array<int>"),
            (Sequence[bool], "array<bool>"),
            (list[dict], "array<array>"),
            (tuple[list, ...], "array<array>"),
            (list[Any], "array"),
            (list[Address], "Collection<tests.dtos.Address>"),
            (Address, "tests.dtos.Address"),
            (Address | None, "?tests.dtos.Address"),
        ],
    )
    def test_translation(self, hint: Any, expected: str) -> None:
        assert signature_from_annotation(hint) == expected

    def test_nested_generic_rejected(self) -> None:
        with pytest.raises(SchemaConfigurationError, match="Nested generic"):
            signature_from_annotation(list[list[int]])

    def test_unsupported_annotation(self) -> None:
        with pytest.raises(SchemaConfigurationError, match="no type signature"):
            signature_from_annotation(Literal["a"])


class TestDiscoverFields:
    def test_declaration_order(self) -> None:
        names = [meta.name for meta in discover_fields(Address)]
        assert names == ["address_one", "building_number", "floor", "city", "phone"]

    def test_input_name_defaults_to_attribute(self) -> None:
        assert {meta.input_name for meta in discover_fields(Address)} == {
            "address_one",
            "building_number",
            "floor",
            "city",
            "phone",
        }

    def test_dto_field_metadata(self) -> None:
        first = discover_fields(Person)[0]
        assert first.name == "first_name"
        assert first.input_name == "firstName"
        assert first.rules == "max:10"
        assert first.type == "string"

    def test_shapes(self) -> None:
        by_name = {meta.name: meta for meta in discover_fields(Customer)}
        assert by_name["full_name"].shape is FieldShape.PRIMITIVE
        assert by_name["addresses"].shape is FieldShape.DTO_COLLECTION
        assert by_name["addresses"].ref == "tests.dtos.Address"

        groups = discover_fields(Tagged)[0]
        assert groups.shape is FieldShape.PRIMITIVE_ARRAY
        assert groups.ref == "string"

    def test_inherited_fields_first(self) -> None:
        assert [meta.name for meta in discover_fields(Employee)][-1] == "badge"

    def test_cached(self) -> None:
        assert discover_fields(Address) is discover_fields(Address)

    def test_clear_cache(self) -> None:
        before = discover_fields(Tagged)
        clear_cache()
        after = discover_fields(Tagged)
        assert before is not after
        assert before == after

    def test_private_and_classvar_skipped(self) -> None:
        class WithExtras(BaseDto):
            kind: ClassVar[str] = "sample"
            _internal: int
            value: str

        assert [meta.name for meta in discover_fields(WithExtras)] == ["value"]

    def test_type_override(self) -> None:
        class Overridden(BaseDto):
            value: Any = dto_field(type="?string")

        meta = discover_fields(Overridden)[0]
        assert meta.type == "?string"
        assert meta.shape is FieldShape.PRIMITIVE


class TestDeclarationErrors:
    def test_duplicate_input_name(self) -> None:
        class Clash(BaseDto):
            first: str
            second: str = dto_field(input_name="first")

        with pytest.raises(SchemaConfigurationError, match="share the input name"):
            discover_fields(Clash)

    def test_empty_input_name(self) -> None:
        class Blank(BaseDto):
            value: str = dto_field(input_name="")

        with pytest.raises(SchemaConfigurationError, match="Invalid field declaration"):
            discover_fields(Blank)

    def test_unresolvable_annotation(self) -> None:
        class Dangling(BaseDto):
            value: Undefined  # noqa: F821

        with pytest.raises(SchemaConfigurationError, match="Cannot resolve annotations"):
            discover_fields(Dangling)

    @pytest.mark.parametrize("name", ["create", "fields", "rules", "to_dict"])
    def test_reserved_attribute_name(self, name: str) -> None:
        clashing = type("Clashing", (BaseDto,), {"__annotations__": {name: str}})

        with pytest.raises(SchemaConfigurationError, match="reserved") as exc_info:
            discover_fields(clashing)
        assert exc_info.value.details == {"field": name}

    def test_reserved_name_checked_on_create(self) -> None:
        class Shadowing(BaseDto):
            rules: str

        with pytest.raises(SchemaConfigurationError, match="reserved"):
            Shadowing.create({"rules": "max:3"})

    def test_collection_override_with_nested_generic(self) -> None:
        class Grid(BaseDto):
            rows: Any = dto_field(type="Collection<array<string>>")

        assert discover_fields(Grid)[0].shape is FieldShape.DTO_COLLECTION
        with pytest.raises(SchemaConfigurationError, match="Collection<array<string>>"):
            Grid.create({"rows": [["a"]]})


def _local_basket() -> tuple[type[BaseDto], type[BaseDto]]:
    class Line(BaseDto):
        sku: str

    # String annotations cannot see function locals, so pass the class object.
    annotations = {"lines": list[Line], "first": Line | None}
    basket = type("Basket", (BaseDto,), {"__annotations__": annotations})
    return Line, basket


class TestFunctionScopedDtos:
    def test_collection_shape(self) -> None:
        line, basket = _local_basket()
        by_name = {meta.name: meta for meta in discover_fields(basket)}

        assert "<locals>" in by_name["lines"].type
        assert by_name["lines"].shape is FieldShape.DTO_COLLECTION
        assert by_name["lines"].dto_class is line
        assert by_name["first"].shape is FieldShape.NESTED_DTO
        assert by_name["first"].dto_class is line

    def test_items_hydrated(self) -> None:
        line, basket = _local_basket()
        payload = {"lines": [{"sku": "A-1"}, {"sku": "B-2"}], "first": {"sku": "A-1"}}
        instance = basket.create(payload)

        assert [type(item) for item in instance.lines] == [line, line]
        assert [item.sku for item in instance.lines] == ["A-1", "B-2"]
        assert isinstance(instance.first, line)

    def test_items_validated(self) -> None:
        _line, basket = _local_basket()
        with pytest.raises(ValidationError):
            basket.create({"lines": [{"sku": None}], "first": None})

    def test_dto_class_left_out_of_dump(self) -> None:
        _line, basket = _local_basket()
        assert "dto_class" not in discover_fields(basket)[0].model_dump()


class TestUntypedSequences:
    def test_list_of_dicts(self) -> None:
        class Rows(BaseDto):
            rows: list[dict]

        meta = discover_fields(Rows)[0]
        assert meta.shape is FieldShape.PRIMITIVE_ARRAY
        assert Rows.rules() == {"rows": "|required|array", "rows.*": "array"}
        assert Rows.create({"rows": [{"a": 1}]}).rows == [{"a": 1}]

    def test_list_of_any(self) -> None:
        class Loose(BaseDto):
            values: list[Any]

        assert discover_fields(Loose)[0].shape is FieldShape.PRIMITIVE
        assert Loose.create({"values": [1, "two", None]}).values == [1, "two", None]
