import sys
import textwrap
import uuid

import pytest
import tomli_w
from _pytest.main import ExitCode
from click.testing import CliRunner
from hypothesis import strategies as st

import propschema.cli
from propschema import Config, ValidationResult, prop_field, prop_schema
from propschema.core.loading import EXTENSIONS_MODULE_ENV_VAR
from propschema.generation.properties import BASE_TYPES


class Example:
    """Entity used throughout the tests."""

    __prop_schema__ = prop_schema(
        prop_field("example_string", "string", string_type="alphanumeric", required=True),
        prop_field("example_int", "integer", required=False),
    )

    @staticmethod
    def validate(record):
        errors = {}
        value = record.get("example_string")
        if not value:
            errors["example_string"] = ["can't be blank"]
        elif not value.isalnum():
            errors["example_string"] = ["has invalid format"]
        integer = record.get("example_int")
        if integer is not None and not isinstance(integer, int):
            errors["example_int"] = ["is invalid"]
        return ValidationResult.with_errors(errors)


class Owner:
    """Entity with a required field that has a default."""

    __prop_schema__ = prop_schema(
        prop_field("name", "string", required=True),
        prop_field("role", "string", required=True, default="member"),
        prop_field("age", "integer", positive=True),
    )

    @staticmethod
    def validate(record):
        errors = {}
        if not record.get("name"):
            errors["name"] = ["can't be blank"]
        if record.get("age") is not None and record["age"] < 1:
            errors["age"] = ["must be greater than 0"]
        return ValidationResult.with_errors(errors)


class PositiveInts:
    """Additional properties that force positive integers."""

    @staticmethod
    def generate_prop(field, type, constraints):
        if field == "example_int":
            return ("example_int", st.integers(min_value=1))
        return None


class Decoys:
    @staticmethod
    def generate_misc(excluded_field):
        return [(f"decoy_{excluded_field}", st.integers())]


@pytest.fixture
def example():
    return Example


@pytest.fixture
def owner():
    return Owner


@pytest.fixture
def positive_ints():
    return PositiveInts


@pytest.fixture
def decoys():
    return Decoys


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def fast_config():
    config = Config()
    config.generation.update(max_examples=25, database="none")
    return config


@pytest.fixture
def base_types():
    """Restore the built-in type table after a test registers custom types."""
    names = set(BASE_TYPES.get_all_names())
    yield BASE_TYPES
    for name in set(BASE_TYPES.get_all_names()) - names:
        BASE_TYPES.unregister(name)


@pytest.fixture
def make_module(tmp_path, monkeypatch):
    """Write an importable module and return its name."""
    monkeypatch.syspath_prepend(str(tmp_path))
    created = []

    def _make(source: str) -> str:
        name = f"propschema_test_{uuid.uuid4().hex}"
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source), encoding="utf-8")
        created.append(name)
        return name

    yield _make
    for name in created:
        sys.modules.pop(name, None)


ENTITY_MODULE = """
from hypothesis import strategies as st

from propschema import ValidationResult, prop_field, prop_schema


class Example:
    __prop_schema__ = prop_schema(
        prop_field("example_string", "string", string_type="alphanumeric", required=True),
        prop_field("example_int", "integer", required=False),
    )

    @staticmethod
    def validate(record):
        if not record.get("example_string"):
            return ValidationResult.with_errors({"example_string": ["can't be blank"]})
        return ValidationResult.ok()


class Lenient:
    __prop_schema__ = Example.__prop_schema__

    @staticmethod
    def validate(record):
        return True


class Unknown:
    __prop_schema__ = prop_schema(prop_field("when", "geometry", required=True))


class Undeclared:
    pass


def generate_prop(field, type, constraints):
    if field == "example_int":
        return ("example_int", st.integers(min_value=1))
    return None


def always_valid(target, record):
    return True
"""


@pytest.fixture
def entity_module(make_module):
    return make_module(ENTITY_MODULE)


@pytest.fixture
def cli(tmp_path):
    """CLI runner helper.

    Provides in-process execution via `click.CliRunner`.
    """
    cli_runner = CliRunner()

    class Runner:
        @staticmethod
        def run(*args, **kwargs):
            return Runner.main("run", *args, **kwargs)

        @staticmethod
        def print(*args, **kwargs):
            return Runner.main("print", *args, **kwargs)

        @staticmethod
        def main(*args, config=None, extensions=None, **kwargs):
            if config is not None:
                path = tmp_path / "config.toml"
                path.write_text(tomli_w.dumps(config), encoding="utf-8")
                args = ["--config-file", str(path), *args]
            if extensions is not None:
                env = kwargs.setdefault("env", {})
                env[EXTENSIONS_MODULE_ENV_VAR] = extensions
            result = cli_runner.invoke(propschema.cli.propschema, args, **kwargs)
            if result.exception and not isinstance(result.exception, SystemExit):
                raise result.exception
            return result

        @staticmethod
        def run_and_assert(*args, exit_code: ExitCode = ExitCode.OK, **kwargs):
            result = Runner.run(*args, **kwargs)
            assert result.exit_code == exit_code, result.output
            return result

    return Runner()
