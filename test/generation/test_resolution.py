import types

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from propschema.errors import ExtensionError, IncorrectUsage, UnresolvedTypeError
from propschema.generation import Extensions, resolve_misc, resolve_rule
from propschema.generation.properties import GenerationRule


def test_additional_takes_precedence(positive_ints):
    rule = resolve_rule("example_int", "integer", {"required": False}, positive_ints)

    @given(value=rule.strategy)
    @settings(max_examples=100)
    def check(value):
        assert value > 0

    check()


def test_fallback_to_base(positive_ints):
    # Provider returns None for any other field
    rule = resolve_rule("example_string", "string", {"required": True}, positive_ints)

    assert rule.key == "example_string"


def test_provider_without_generate_prop():
    provider = types.SimpleNamespace()

    assert resolve_rule("name", "string", {}, provider).key == "name"


def test_no_provider():
    assert resolve_rule("name", "string", {}).key == "name"


def test_additional_covers_unknown_type():
    class Geometry:
        @staticmethod
        def generate_prop(field, type, constraints):
            if type == "geometry":
                return st.tuples(st.floats(allow_nan=False), st.floats(allow_nan=False))
            return None

    rule = resolve_rule("location", "geometry", {}, Geometry)

    assert rule.key == "location"


def test_unresolved_type():
    with pytest.raises(UnresolvedTypeError) as exc:
        resolve_rule("location", "geometry", {"required": True})

    assert exc.value.field == "location"
    assert exc.value.type == "geometry"
    assert "Can not generate data for field `location`" in str(exc.value)


def test_unresolved_with_declining_provider(positive_ints):
    with pytest.raises(UnresolvedTypeError):
        resolve_rule("location", "geometry", {}, positive_ints)


def test_misc(decoys):
    rules = resolve_misc("example_int", decoys)

    assert [rule.key for rule in rules] == ["decoy_example_int"]


@pytest.mark.parametrize("provider", [None, types.SimpleNamespace()])
def test_misc_without_provider(provider):
    assert resolve_misc("example_int", provider) == []


def test_misc_single_value():
    class Single:
        @staticmethod
        def generate_misc(excluded_field):
            return GenerationRule("extra", st.none())

    assert [rule.key for rule in resolve_misc("a", Single)] == ["extra"]


def test_misc_requires_names():
    class Unnamed:
        @staticmethod
        def generate_misc(excluded_field):
            return [st.integers()]

    with pytest.raises(IncorrectUsage, match="must be named"):
        resolve_misc("a", Unnamed)


def test_load_extensions(make_module):
    name = make_module(
        """
        def generate_prop(field, type, constraints):
            return None


        class Filters:
            @staticmethod
            def filter_rules(excluded_field, rules):
                return None
        """
    )

    extensions = Extensions.load(additional=name, filters=f"{name}:Filters")

    assert extensions.additional.__name__ == name
    assert extensions.filters.__name__ == "Filters"


@pytest.mark.parametrize("path", ["propschema_does_not_exist", "propschema:DoesNotExist", ":attribute"])
def test_load_invalid_extension(path):
    with pytest.raises(ExtensionError, match="Unable to load"):
        Extensions.load(additional=path)
