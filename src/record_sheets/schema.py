"""Record schemas: which fields of a type become columns, and how.

A RecordSchema is an ordered list of FieldSpec descriptors (name, accessor,
mutator, value type, decorations) built once per record type and cached.
Schemas come from two places:

- schema_for(cls) derives one from a dataclass: dataclass fields in
  declaration order, then public properties in definition order.
- register_schema(RecordSchema(...)) registers a hand-built schema for any
  other class.

fields_for_write() and fields_for_read() pick the fields that take part in
a given sheet, honoring Hidden decorations.
"""

from __future__ import annotations

import dataclasses
import operator
import types
import typing
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Generic, TypeVar

from record_sheets._exceptions import SchemaError
from record_sheets.decorations import Decoration, Hidden, Layout
from record_sheets.types.common import DEFAULT_FLOW, Flow, ValueKind

T = TypeVar("T")

_METADATA_KEY = "record_sheets"
_DECORATIONS_ATTR = "__record_sheets_decorations__"
_OPTIONS_ATTR = "__record_sheets_options__"

_NUMBER_TYPES: tuple[type, ...] = (int, float, Decimal)

_REGISTRY: dict[type, RecordSchema[object]] = {}


def kind_of(value_type: type) -> ValueKind:
    """Return the semantic kind that decides how a value is written."""
    if issubclass(value_type, bool):
        return "other"
    if issubclass(value_type, str):
        return "text"
    if issubclass(value_type, _NUMBER_TYPES):
        return "number"
    return "other"


@dataclass(frozen=True)
class FieldSpec:
    """A field of a record type that maps to one column.

    Attributes:
        name: Column header and lookup key.
        value_type: Python type values are converted to when read.
        getter: Returns the field value of a record.
        setter: Assigns the field after construction; None if not assignable.
        optional: Whether the value may be None (empty cell).
        init: Whether the value is passed to the record constructor.
        decorations: Presentation and visibility rules.
    """

    name: str
    value_type: type
    getter: Callable[[object], object]
    setter: Callable[[object, object], None] | None = None
    optional: bool = False
    init: bool = False
    decorations: tuple[Decoration, ...] = ()

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value_type)

    @property
    def writable(self) -> bool:
        """Whether reading can populate this field."""
        return self.init or self.setter is not None

    def hidden_on(self, sheet_name: str) -> bool:
        """Return True if a Hidden decoration excludes this field from the sheet."""
        return any(
            isinstance(decoration, Hidden) and decoration.hides(sheet_name)
            for decoration in self.decorations
        )


@dataclass(frozen=True)
class RecordSchema(Generic[T]):
    """Ordered field descriptors for a record type.

    Attributes:
        record_type: The described class.
        fields: Fields in declaration (column) order.
        factory: Builds a record; receives the init fields as keyword arguments.
        sheet_name: Default sheet name; the class name when None.
        flow: Default layout direction for this type.
    """

    record_type: type[T]
    fields: tuple[FieldSpec, ...]
    factory: Callable[..., T]
    sheet_name: str | None = None
    flow: Flow = DEFAULT_FLOW

    @property
    def name(self) -> str:
        """Sheet name used when the caller does not pass one."""
        if self.sheet_name is not None:
            return self.sheet_name
        return self.record_type.__name__

    def field(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def build(self, values: Mapping[str, object]) -> T:
        """Construct a record from decoded field values.

        Init fields go to the factory, other writable fields are assigned
        afterwards, read-only fields are left at their defaults.

        Raises:
            SchemaError: If the factory rejects the arguments (for example a
                required dataclass field has no column in the sheet).
        """
        kwargs = {spec.name: values[spec.name] for spec in self.fields if spec.init and spec.name in values}
        try:
            record = self.factory(**kwargs)
        except TypeError as exc:
            raise SchemaError(self.record_type.__name__, f"Cannot construct record ({exc})") from exc

        for spec in self.fields:
            if spec.init or spec.setter is None or spec.name not in values:
                continue
            spec.setter(record, values[spec.name])
        return record


@dataclass(frozen=True)
class _SheetOptions:
    sheet_name: str | None
    layout: Layout | None


def column(
    *decorations: Decoration,
    default: object = dataclasses.MISSING,
    default_factory: Callable[[], object] | None = None,
    init: bool = True,
) -> Any:
    """Declare a dataclass field with decorations.

    Usage:
        @dataclass
        class Employee:
            salary: Decimal = column(Format("#,##0.00"), default=Decimal(0))
    """
    metadata = {_METADATA_KEY: tuple(decorations)}
    if default_factory is not None:
        return field(default_factory=default_factory, init=init, metadata=metadata)
    return field(default=default, init=init, metadata=metadata)


def decorated(*decorations: Decoration) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Attach decorations to a property getter.

    Usage:
        @property
        @decorated(Format("0%"))
        def margin(self) -> float: ...
    """

    def wrap(fn: Callable[..., T]) -> Callable[..., T]:
        setattr(fn, _DECORATIONS_ATTR, tuple(decorations))
        return fn

    return wrap


def sheet_record(
    *decorations: Layout,
    name: str | None = None,
) -> Callable[[type[T]], type[T]]:
    """Class decorator setting the sheet name and layout of a record type.

    Usage:
        @sheet_record(Layout("vertical"), name="Staff")
        @dataclass
        class Employee: ...
    """
    layouts = [decoration for decoration in decorations if isinstance(decoration, Layout)]

    def wrap(cls: type[T]) -> type[T]:
        if len(layouts) > 1:
            raise SchemaError(cls.__name__, "At most one Layout decoration is allowed")
        setattr(cls, _OPTIONS_ATTR, _SheetOptions(name, layouts[0] if layouts else None))
        _REGISTRY.pop(cls, None)
        return cls

    return wrap


def _unwrap_optional(owner: str, name: str, hint: object) -> tuple[type, bool]:
    """Split `X | None` into (X, True); plain types return (X, False)."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) != 1 or not isinstance(args[0], type):
            raise SchemaError(owner, f"Field '{name}' must be a single type or Optional of one")
        return args[0], True
    if origin is not None or not isinstance(hint, type):
        raise SchemaError(owner, f"Field '{name}' has unsupported annotation {hint!r}")
    return hint, False


def _attribute_setter(name: str) -> Callable[[object, object], None]:
    def assign(record: object, value: object) -> None:
        setattr(record, name, value)

    return assign


def _dataclass_fields(cls: type) -> list[FieldSpec]:
    hints = typing.get_type_hints(cls)
    specs: list[FieldSpec] = []
    for dc_field in dataclasses.fields(cls):
        value_type, optional = _unwrap_optional(cls.__name__, dc_field.name, hints[dc_field.name])
        specs.append(
            FieldSpec(
                name=dc_field.name,
                value_type=value_type,
                getter=operator.attrgetter(dc_field.name),
                optional=optional,
                init=dc_field.init,
                decorations=tuple(dc_field.metadata.get(_METADATA_KEY, ())),
            )
        )
    return specs


def _property_fields(cls: type) -> list[FieldSpec]:
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__[:-1]):
        for name, member in vars(klass).items():
            if isinstance(member, property) and not name.startswith("_"):
                found[name] = member

    specs: list[FieldSpec] = []
    for name, prop in found.items():
        if prop.fget is None:
            continue
        hint = typing.get_type_hints(prop.fget).get("return", str)
        value_type, optional = _unwrap_optional(cls.__name__, name, hint)
        specs.append(
            FieldSpec(
                name=name,
                value_type=value_type,
                getter=operator.attrgetter(name),
                setter=_attribute_setter(name) if prop.fset is not None else None,
                optional=optional,
                decorations=tuple(getattr(prop.fget, _DECORATIONS_ATTR, ())),
            )
        )
    return specs


def _validate(schema: RecordSchema[T]) -> None:
    owner = schema.record_type.__name__
    if not schema.fields:
        raise SchemaError(owner, "Record type has no fields")
    seen: set[str] = set()
    for spec in schema.fields:
        if spec.name == "":
            raise SchemaError(owner, "Field names must not be empty")
        if spec.name in seen:
            raise SchemaError(owner, f"Duplicate field name '{spec.name}'")
        seen.add(spec.name)


def register_schema(schema: RecordSchema[T]) -> RecordSchema[T]:
    """Register a hand-built schema, replacing any cached one for the type.

    Raises:
        SchemaError: If the schema has no fields or duplicate names.
    """
    _validate(schema)
    _REGISTRY[schema.record_type] = schema
    return schema


def schema_for(record_type: type[T]) -> RecordSchema[T]:
    """Return the schema of a record type, deriving it from a dataclass once.

    Raises:
        SchemaError: If the type is neither registered nor a dataclass, or
            its fields cannot be described.
    """
    cached = _REGISTRY.get(record_type)
    if cached is not None:
        return cached

    if not dataclasses.is_dataclass(record_type):
        raise SchemaError(record_type.__name__, "Type is neither a dataclass nor a registered schema")

    fields = _dataclass_fields(record_type) + _property_fields(record_type)
    options: _SheetOptions | None = getattr(record_type, _OPTIONS_ATTR, None)
    schema = RecordSchema(
        record_type=record_type,
        fields=tuple(fields),
        factory=record_type,
        sheet_name=options.sheet_name if options is not None else None,
        flow=options.layout.flow if options is not None and options.layout is not None else DEFAULT_FLOW,
    )
    return register_schema(schema)


def forget_schema(record_type: type) -> None:
    """Drop a cached or registered schema."""
    _REGISTRY.pop(record_type, None)


def fields_for_write(schema: RecordSchema[T], sheet_name: str) -> list[FieldSpec]:
    """Return the fields written to `sheet_name`, in column order."""
    return [spec for spec in schema.fields if not spec.hidden_on(sheet_name)]


def fields_for_read(
    schema: RecordSchema[T],
    sheet_name: str,
    header: Sequence[str],
) -> list[tuple[FieldSpec, int]]:
    """Match header labels to fields.

    Scanning stops at the first empty label. Labels with no matching field
    are ignored, hidden fields are skipped, and when a label repeats the
    left-most column wins.

    Returns:
        (field, column index) pairs in header order.
    """
    pairs: list[tuple[FieldSpec, int]] = []
    mapped: set[str] = set()
    for index, label in enumerate(header):
        if label == "":
            break
        spec = schema.field(label)
        if spec is None or spec.name in mapped or spec.hidden_on(sheet_name):
            continue
        mapped.add(spec.name)
        pairs.append((spec, index))
    return pairs


__all__ = [
    "FieldSpec",
    "RecordSchema",
    "column",
    "decorated",
    "fields_for_read",
    "fields_for_write",
    "forget_schema",
    "kind_of",
    "register_schema",
    "schema_for",
    "sheet_record",
]
