"""Value generation rules for schema fields.

A provider is any object (usually a module or a class) that may define two functions:

    generate_prop(field, type, constraints) -> GenerationRule | (key, strategy) | strategy | None
    generate_misc(excluded_field) -> [GenerationRule | (key, strategy)] | None

Both are optional. Returning `None` means the provider has nothing for the given input.
"""

from __future__ import annotations

import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timezone
from decimal import Decimal
from typing import Any

from hypothesis import strategies as st

from propschema.core.errors import IncorrectUsage
from propschema.core.registries import Registry
from propschema.schema import TypeTag

ALPHANUMERIC = string.ascii_letters + string.digits
# Printable ASCII range, 32..126
ASCII = "".join(chr(code) for code in range(32, 127))


@dataclass(frozen=True)
class GenerationRule:
    """A field key paired with the strategy that produces its values."""

    key: str
    strategy: st.SearchStrategy

    __slots__ = ("key", "strategy")

    def as_optional(self) -> GenerationRule:
        return GenerationRule(self.key, st.one_of(self.strategy, st.none()))


def to_rule(field: str, value: Any) -> GenerationRule:
    """Normalize whatever a provider returned into a rule."""
    if isinstance(value, GenerationRule):
        return value
    if isinstance(value, st.SearchStrategy):
        return GenerationRule(str(field), value)
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], st.SearchStrategy):
        return GenerationRule(str(value[0]), value[1])
    raise IncorrectUsage(
        f"Provider returned {value!r} for `{field}`. "
        "Expected a `GenerationRule`, a `(key, strategy)` pair or a Hypothesis strategy"
    )


def split_type(type_: TypeTag) -> tuple[str, tuple[Any, ...]]:
    if isinstance(type_, tuple):
        if not type_:
            raise IncorrectUsage("Empty type tag")
        return str(type_[0]), tuple(type_[1:])
    return str(type_), ()


TypeHandler = Callable[["BaseProperties", tuple[Any, ...], Mapping[str, Any]], "st.SearchStrategy | None"]

BASE_TYPES: Registry[TypeHandler] = Registry()


def _register(*names: str) -> Callable[[TypeHandler], TypeHandler]:
    def decorator(func: TypeHandler) -> TypeHandler:
        for name in names:
            BASE_TYPES.register(func, name=name)
        return func

    return decorator


class BaseProperties:
    """Built-in provider that covers the common field types."""

    def __init__(self, types: Registry[TypeHandler] | None = None) -> None:
        self.types = types if types is not None else BASE_TYPES

    @staticmethod
    def register(*names: str) -> Callable[[TypeHandler], TypeHandler]:
        """Add a handler for one or more type names to the built-in table.

        Example:
            ```python
            @BaseProperties.register("money")
            def money(base, args, constraints):
                return st.decimals(min_value=0, places=2, allow_nan=False, allow_infinity=False)
            ```

        """
        return _register(*names)

    def supports(self, type_: TypeTag) -> bool:
        name, _ = split_type(type_)
        return name in self.types

    def strategy_for(self, type_: TypeTag, constraints: Mapping[str, Any]) -> st.SearchStrategy | None:
        """Strategy for a non-null value of the given type, or `None` if the type is unknown."""
        name, args = split_type(type_)
        handler = self.types.get_one(name)
        if handler is None:
            return None
        return handler(self, args, constraints)

    def generate_prop(self, field: str, type: TypeTag, constraints: Mapping[str, Any]) -> GenerationRule | None:
        strategy = self.strategy_for(type, constraints)
        if strategy is None:
            return None
        rule = GenerationRule(str(field), strategy)
        if not constraints.get("required", False):
            return rule.as_optional()
        return rule


def _length_bounds(constraints: Mapping[str, Any], *, at_least: int = 0) -> dict[str, Any]:
    min_size = max(constraints.get("min_length") or 0, at_least)
    kwargs: dict[str, Any] = {"min_size": min_size}
    if constraints.get("max_length") is not None:
        kwargs["max_size"] = constraints["max_length"]
    return kwargs


def _alphabet(string_type: str) -> str | st.SearchStrategy:
    if string_type == "alphanumeric":
        return ALPHANUMERIC
    if string_type == "ascii":
        return ASCII
    if string_type == "printable":
        return st.characters(codec="utf-8", exclude_categories=("Cc", "Cs"))
    if string_type == "utf8":
        return st.characters(codec="utf-8")
    raise IncorrectUsage(
        f"Unknown `string_type`: {string_type!r}. Expected one of: alphanumeric, ascii, printable, utf8"
    )


@_register("string")
def _string(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    alphabet = _alphabet(constraints.get("string_type", "alphanumeric"))
    # Required strings are never blank
    at_least = 1 if constraints.get("required", False) else 0
    return st.text(alphabet=alphabet, **_length_bounds(constraints, at_least=at_least))


@_register("integer")
def _integer(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    min_value = constraints.get("min")
    if constraints.get("positive", False):
        min_value = 1 if min_value is None else max(min_value, 1)
    return st.integers(min_value=min_value, max_value=constraints.get("max"))


@_register("float")
def _float(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    min_value = constraints.get("min")
    exclude_min = False
    if constraints.get("positive", False) and (min_value is None or min_value <= 0):
        min_value = 0.0
        exclude_min = True
    return st.floats(
        min_value=min_value,
        max_value=constraints.get("max"),
        exclude_min=exclude_min,
        allow_nan=False,
        allow_infinity=False,
    )


def is_positive(value: Decimal) -> bool:
    return value > 0


@_register("decimal")
def _decimal(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    min_value = constraints.get("min")
    positive = constraints.get("positive", False)
    if positive and (min_value is None or min_value < 0):
        min_value = 0
    strategy = st.decimals(
        min_value=min_value,
        max_value=constraints.get("max"),
        places=constraints.get("places"),
        allow_nan=False,
        allow_infinity=False,
    )
    if positive:
        return strategy.filter(is_positive)
    return strategy


@_register("boolean")
def _boolean(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.booleans()


@_register("date")
def _date(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.dates()


@_register("time")
def _time(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.times()


@_register("datetime", "naive_datetime")
def _naive_datetime(
    base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]
) -> st.SearchStrategy:
    return st.datetimes()


@_register("utc_datetime")
def _utc_datetime(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.datetimes(timezones=st.just(timezone.utc))


@_register("uuid", "binary_id")
def _uuid(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.uuids().map(str)


@_register("binary")
def _binary(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.binary(**_length_bounds(constraints))


@_register("map")
def _map(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    return st.dictionaries(
        st.text(alphabet=ALPHANUMERIC, min_size=1),
        st.text(alphabet=ALPHANUMERIC),
        **_length_bounds(constraints),
    )


@_register("enum")
def _enum(base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]) -> st.SearchStrategy:
    values = list(args[0]) if args else constraints.get("values")
    if not values:
        raise IncorrectUsage("`enum` fields require a non-empty `values` constraint")
    return st.sampled_from(values)


@_register("array")
def _array(
    base: BaseProperties, args: tuple[Any, ...], constraints: Mapping[str, Any]
) -> st.SearchStrategy | None:
    inner = args[0] if args else constraints.get("items")
    if inner is None:
        raise IncorrectUsage("`array` fields require an item type, e.g. `('array', 'integer')`")
    item_constraints = {"required": True, **constraints.get("item_constraints", {})}
    items = base.strategy_for(inner, item_constraints)
    if items is None:
        return None
    return st.lists(items, **_length_bounds(constraints))


BASE_PROPERTIES = BaseProperties()
