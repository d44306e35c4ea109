"""Tests for schema module."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from record_sheets._exceptions import SchemaError
from record_sheets.decorations import Format, Hidden, Layout, Tooltip
from record_sheets.schema import (
    FieldSpec,
    RecordSchema,
    column,
    decorated,
    fields_for_read,
    fields_for_write,
    forget_schema,
    kind_of,
    register_schema,
    schema_for,
    sheet_record,
)


@dataclass
class Product:
    name: str = ""
    price: Decimal = column(Format("0.00"), default=Decimal(0))
    secret: str = column(Hidden(), default="")
    note: str = column(Hidden("Archive"), default="")
    count: int | None = None
    tags: list[str] = field(default_factory=list, init=False, metadata={})

    @property
    @decorated(Tooltip("Price times count"))
    def total(self) -> Decimal:
        return self.price * (self.count or 0)


@sheet_record(Layout("vertical"), name="People")
@dataclass
class Person:
    name: str = ""
    age: int = 0


class Plain:
    def __init__(self) -> None:
        self.label = ""


@pytest.fixture(autouse=True)
def _forget_schemas() -> Generator[None, None, None]:
    yield
    for record_type in (Product, Person, Plain):
        forget_schema(record_type)


def test_kind_of() -> None:
    assert kind_of(str) == "text"
    assert kind_of(int) == "number"
    assert kind_of(float) == "number"
    assert kind_of(Decimal) == "number"
    assert kind_of(bool) == "other"
    assert kind_of(list) == "other"


def test_schema_for_dataclass_orders_fields_then_properties() -> None:
    @dataclass
    class Simple:
        a: str = ""
        b: int = 0

        @property
        def c(self) -> str:
            return self.a * 2

    schema = schema_for(Simple)
    assert [spec.name for spec in schema.fields] == ["a", "b", "c"]
    assert schema.name == "Simple"
    assert schema.flow == "horizontal"
    assert schema.field("c") is not None
    assert schema.field("missing") is None
    forget_schema(Simple)


def test_schema_for_rejects_generic_annotations() -> None:
    with pytest.raises(SchemaError):
        schema_for(Product)


def test_schema_for_rejects_non_dataclass() -> None:
    with pytest.raises(SchemaError):
        schema_for(Plain)


def test_schema_for_is_cached() -> None:
    assert schema_for(Person) is schema_for(Person)


def test_sheet_record_sets_name_and_layout() -> None:
    schema = schema_for(Person)
    assert schema.name == "People"
    assert schema.flow == "vertical"


def test_sheet_record_rejects_two_layouts() -> None:
    with pytest.raises(SchemaError):

        @sheet_record(Layout("vertical"), Layout("horizontal"))
        @dataclass
        class Twice:
            a: str = ""


def _product_schema() -> RecordSchema[Product]:
    # Register the fields by hand, leaving out the unsupported list field
    derived = [
        FieldSpec("name", str, getter=lambda r: r.name, init=True),
        FieldSpec("price", Decimal, getter=lambda r: r.price, init=True, decorations=(Format("0.00"),)),
        FieldSpec("secret", str, getter=lambda r: r.secret, init=True, decorations=(Hidden(),)),
        FieldSpec("note", str, getter=lambda r: r.note, init=True, decorations=(Hidden("Archive"),)),
        FieldSpec("count", int, getter=lambda r: r.count, init=True, optional=True),
        FieldSpec("total", Decimal, getter=lambda r: r.total),
    ]
    return register_schema(RecordSchema(record_type=Product, fields=tuple(derived), factory=Product))


def test_fields_for_write_drops_hidden_fields() -> None:
    schema = _product_schema()
    assert [spec.name for spec in fields_for_write(schema, "Product")] == ["name", "price", "note", "count", "total"]
    assert [spec.name for spec in fields_for_write(schema, "Archive")] == ["name", "price", "count", "total"]


def test_fields_for_read_matches_headers() -> None:
    schema = _product_schema()
    header = ["count", "unknown", "name", "secret", "name", "", "price"]
    pairs = fields_for_read(schema, "Product", header)
    assert [(spec.name, index) for spec, index in pairs] == [("count", 0), ("name", 2)]


def test_fields_for_read_respects_sheet_specific_hidden() -> None:
    schema = _product_schema()
    pairs = fields_for_read(schema, "Archive", ["note", "name"])
    assert [spec.name for spec, _ in pairs] == ["name"]
    pairs = fields_for_read(schema, "Product", ["note", "name"])
    assert [spec.name for spec, _ in pairs] == ["note", "name"]


def test_column_and_decorated_attach_decorations() -> None:
    @dataclass
    class Decorated:
        value: Decimal = column(Format("0.0"), Hidden("Other"), default=Decimal(1))
        items: str = column(default_factory=str)

        @property
        @decorated(Tooltip("Twice the value"))
        def doubled(self) -> Decimal:
            return self.value * 2

    schema = schema_for(Decorated)
    value = schema.field("value")
    doubled = schema.field("doubled")
    assert value is not None and doubled is not None
    assert value.decorations == (Format("0.0"), Hidden("Other"))
    assert doubled.decorations == (Tooltip("Twice the value"),)
    assert doubled.writable is False
    assert Decorated().items == ""
    forget_schema(Decorated)


def test_optional_and_init_false_fields() -> None:
    @dataclass
    class Mixed:
        amount: int | None = None
        computed: str = field(default="x", init=False)

    schema = schema_for(Mixed)
    amount = schema.field("amount")
    computed = schema.field("computed")
    assert amount is not None and computed is not None
    assert amount.optional is True
    assert amount.value_type is int
    assert computed.writable is False
    forget_schema(Mixed)


def test_build_passes_init_fields_and_assigns_setters() -> None:
    @dataclass
    class WithSetter:
        name: str = ""
        _size: int = 0

        @property
        def size(self) -> int:
            return self._size

        @size.setter
        def size(self, value: int) -> None:
            self._size = value

    schema = schema_for(WithSetter)
    record = schema.build({"name": "a", "size": 3})
    assert record.name == "a"
    assert record.size == 3
    forget_schema(WithSetter)


def test_build_missing_required_field_raises() -> None:
    @dataclass
    class Required:
        name: str

    schema = schema_for(Required)
    with pytest.raises(SchemaError):
        schema.build({})
    forget_schema(Required)


def test_register_schema_for_plain_class() -> None:
    def set_label(record: object, value: object) -> None:
        assert isinstance(record, Plain) and isinstance(value, str)
        record.label = value

    schema = register_schema(
        RecordSchema(
            record_type=Plain,
            fields=(FieldSpec("label", str, getter=lambda r: r.label, setter=set_label),),
            factory=Plain,
            sheet_name="Labels",
        )
    )
    assert schema_for(Plain) is schema
    record = schema.build({"label": "hello"})
    assert record.label == "hello"


def test_register_schema_validates_fields() -> None:
    with pytest.raises(SchemaError):
        register_schema(RecordSchema(record_type=Plain, fields=(), factory=Plain))
    duplicate = FieldSpec("label", str, getter=lambda r: r.label)
    with pytest.raises(SchemaError):
        register_schema(RecordSchema(record_type=Plain, fields=(duplicate, duplicate), factory=Plain))
