"""Compose per-field generation rules into record-shaped strategies."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from hypothesis import strategies as st

from propschema.core.errors import DecoyCollisionError
from propschema.generation.filters import apply_rule_filter, get_record_predicate
from propschema.generation.properties import BASE_PROPERTIES, BaseProperties
from propschema.generation.resolution import as_provider, resolve_misc, resolve_rule
from propschema.schema import FieldSpec, Schema, get_schema


@dataclass(frozen=True)
class RecordGenerator:
    """Strategy for complete or field-omitted records."""

    rules: Mapping[str, st.SearchStrategy]
    excluded: str | None
    predicate: Callable[[dict[str, Any]], bool] | None

    __slots__ = ("rules", "excluded", "predicate")

    def __init__(
        self,
        rules: Mapping[str, st.SearchStrategy],
        excluded: str | None = None,
        predicate: Callable[[dict[str, Any]], bool] | None = None,
    ) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(rules)))
        object.__setattr__(self, "excluded", excluded)
        object.__setattr__(self, "predicate", predicate)

    def __hash__(self) -> int:
        return hash((self.keys, self.excluded))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self.rules)

    @property
    def strategy(self) -> st.SearchStrategy[dict[str, Any]]:
        strategy = st.fixed_dictionaries(dict(self.rules))
        if self.predicate is not None:
            return strategy.filter(self.predicate)
        return strategy

    def example(self) -> dict[str, Any]:
        """Draw a single record. Meant for exploration in a shell, not for use inside tests."""
        return self.strategy.example()


def _resolve_fields(
    schema: Schema,
    fields: tuple[FieldSpec, ...] | Schema,
    additional: Any,
    base: BaseProperties,
    excluded_field: str | None = None,
) -> dict[str, st.SearchStrategy]:
    rules: dict[str, st.SearchStrategy] = {}
    for field in fields:
        rule = resolve_rule(field.name, field.type, field.constraints, additional, base=base)
        # A rule may be keyed differently from its field, but never onto another field
        if rule.key != field.name and (rule.key in schema or rule.key in rules):
            raise DecoyCollisionError(rule.key, excluded_field)
        rules[rule.key] = rule.strategy
    return rules


def build_complete(
    schema: Schema,
    additional: Any = None,
    filters: Any = None,
    *,
    base: BaseProperties = BASE_PROPERTIES,
) -> RecordGenerator:
    """Generator for records with every schema field present."""
    rules = _resolve_fields(schema, schema, additional, base)
    rules = apply_rule_filter(filters, None, rules)
    return RecordGenerator(rules, excluded=None, predicate=get_record_predicate(filters, None))


def build_incomplete(
    schema: Schema,
    excluded_field: str,
    additional: Any = None,
    filters: Any = None,
    *,
    base: BaseProperties = BASE_PROPERTIES,
) -> RecordGenerator:
    """Generator for records that never contain `excluded_field`."""
    rules = _resolve_fields(schema, schema.without(excluded_field), additional, base, excluded_field)
    for decoy in resolve_misc(excluded_field, additional):
        if decoy.key in schema or decoy.key in rules:
            raise DecoyCollisionError(decoy.key, excluded_field)
        rules[decoy.key] = decoy.strategy
    rules = apply_rule_filter(filters, excluded_field, rules)
    return RecordGenerator(rules, excluded=excluded_field, predicate=get_record_predicate(filters, excluded_field))


def build_all_incomplete(
    schema: Schema,
    additional: Any = None,
    filters: Any = None,
    *,
    base: BaseProperties = BASE_PROPERTIES,
) -> list[RecordGenerator]:
    return [build_incomplete(schema, field.name, additional, filters, base=base) for field in schema]


def complete_map(target: Any, additional: Any = None, filters: Any = None) -> st.SearchStrategy[dict[str, Any]]:
    """Strategy for complete records of the entity `target` declares.

    Providers may be passed as objects or as `package.module[:attribute]` paths.

    Example:
        ```python
        from hypothesis import given

        @given(record=complete_map(User, additional=my_props))
        def test_user(record):
            ...
        ```

    """
    return build_complete(get_schema(target), as_provider(additional), as_provider(filters)).strategy


def incomplete_map(
    target: Any, excluded_field: str, additional: Any = None, filters: Any = None
) -> st.SearchStrategy[dict[str, Any]]:
    """Strategy for records of `target` with `excluded_field` left out."""
    return build_incomplete(get_schema(target), excluded_field, as_provider(additional), as_provider(filters)).strategy


def all_incomplete_maps(
    target: Any, additional: Any = None, filters: Any = None
) -> dict[str, st.SearchStrategy[dict[str, Any]]]:
    schema = get_schema(target)
    return {
        generator.excluded: generator.strategy  # type: ignore[misc]
        for generator in build_all_incomplete(schema, as_provider(additional), as_provider(filters))
    }
