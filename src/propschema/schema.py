"""Typed representation of the fields an entity declares for property testing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union

from propschema.core.errors import IncorrectUsage, UnknownSchemaError

SCHEMA_ATTR = "__prop_schema__"

# Plain type name like "string", or a parametrised type like ("array", "integer")
TypeTag = Union[str, tuple[Any, ...]]
Declaration = Sequence[tuple[str, tuple[TypeTag, Mapping[str, Any]]]]


@dataclass(frozen=True)
class FieldSpec:
    """A single field with its semantic type and constraint metadata."""

    name: str
    type: TypeTag
    constraints: Mapping[str, Any]

    __slots__ = ("name", "type", "constraints")

    def __init__(self, name: str, type: TypeTag, constraints: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "name", str(name))
        object.__setattr__(self, "type", type)
        object.__setattr__(self, "constraints", MappingProxyType(dict(constraints or {})))

    def __hash__(self) -> int:
        return hash((self.name, self.type))

    @property
    def required(self) -> bool:
        return bool(self.constraints.get("required", False))

    @property
    def default(self) -> Any:
        return self.constraints.get("default")

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def as_declaration(self) -> tuple[str, tuple[TypeTag, dict[str, Any]]]:
        return self.name, (self.type, dict(self.constraints))


class Schema:
    """Ordered, read-only collection of fields."""

    __slots__ = ("_fields", "_by_name")

    def __init__(self, fields: Iterable[FieldSpec] = ()) -> None:
        self._fields = tuple(fields)
        by_name: dict[str, FieldSpec] = {}
        for field in self._fields:
            if field.name in by_name:
                raise IncorrectUsage(f"Field `{field.name}` is declared more than once")
            by_name[field.name] = field
        self._by_name = MappingProxyType(by_name)

    @classmethod
    def from_declaration(cls, declaration: Declaration) -> Schema:
        """Build a schema from `[(name, (type, constraints)), ...]`."""
        fields = []
        for entry in declaration:
            if isinstance(entry, FieldSpec):
                fields.append(entry)
                continue
            try:
                name, (type_, constraints) = entry
            except (TypeError, ValueError):
                raise IncorrectUsage(
                    f"Invalid field declaration: {entry!r}. Expected `(name, (type, constraints))`"
                ) from None
            fields.append(FieldSpec(name, type_, constraints))
        return cls(fields)

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return self._fields

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(field.name for field in self._fields)

    def get(self, name: str) -> FieldSpec | None:
        return self._by_name.get(name)

    def without(self, name: str) -> tuple[FieldSpec, ...]:
        """Fields in schema order, with `name` left out."""
        if name not in self._by_name:
            raise IncorrectUsage(f"Field `{name}` is not declared in the schema. Known fields: {', '.join(self.names)}")
        return tuple(field for field in self._fields if field.name != name)

    def as_declaration(self) -> list[tuple[str, tuple[TypeTag, dict[str, Any]]]]:
        return [field.as_declaration() for field in self._fields]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        return f"Schema({', '.join(self.names)})"


def prop_field(name: str, type: TypeTag, **constraints: Any) -> FieldSpec:
    """Declare a field that takes part in property testing.

    Example:
        ```python
        prop_field("example_string", "string", string_type="alphanumeric", required=True)
        ```

    """
    return FieldSpec(name, type, constraints)


def prop_schema(*fields: FieldSpec) -> Callable[[], list[tuple[str, tuple[TypeTag, dict[str, Any]]]]]:
    """Collect field declarations into a schema introspection function.

    Example:
        ```python
        class User:
            __prop_schema__ = prop_schema(
                prop_field("name", "string", required=True),
                prop_field("age", "integer", positive=True),
            )
        ```

    """
    schema = Schema(fields)

    def __prop_schema__() -> list[tuple[str, tuple[TypeTag, dict[str, Any]]]]:
        return schema.as_declaration()

    return staticmethod(__prop_schema__)  # type: ignore[return-value]


def get_schema(target: Any) -> Schema:
    """Read the schema declared by `target`."""
    if isinstance(target, Schema):
        return target
    declared = getattr(target, SCHEMA_ATTR, None)
    if declared is None:
        raise UnknownSchemaError(target)
    if isinstance(declared, Schema):
        return declared
    if callable(declared):
        declared = declared()
    if isinstance(declared, Schema):
        return declared
    return Schema.from_declaration(declared)
