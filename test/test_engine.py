import logging
import types

import pytest

from propschema import Config, ValidationResult, Validity, assert_validity, run
from propschema.engine import Status, as_validation_result, build_scenarios, execute, get_validator
from propschema.errors import (
    DecoyCollisionError,
    IncorrectUsage,
    ScenarioAssertionFailure,
    UnknownSchemaError,
    UnresolvedTypeError,
)
from propschema.generation import Extensions
from propschema.schema import prop_field, prop_schema


def test_end_to_end(example, fast_config):
    results = list(run(example, config=fast_config))

    assert [result.scenario.name for result in results] == [
        "valid record",
        "invalid record - missing example_string",
        "valid record - missing example_int",
    ]
    assert all(result.is_success for result in results), [result.failure for result in results]
    assert all(result.samples > 0 for result in results)


def test_missing_required_field_reports_error(example):
    record = {"example_int": 1}

    assert example.validate(record).errors == {"example_string": ["can't be blank"]}
    assert_validity(example, record, "invalid")


def test_validator_ignoring_required_field(example, fast_config, caplog):
    def lenient(target, record):
        return True

    results = {result.scenario.name: result for result in run(example, lenient, config=fast_config)}

    failed = results["invalid record - missing example_string"]
    assert failed.status == Status.FAILURE
    assert "expected invalid, got none" in failed.failure.message
    assert failed.failure.expected == Validity.INVALID
    # Sibling scenarios are unaffected
    assert results["valid record"].is_success
    assert results["valid record - missing example_int"].is_success
    assert "Test will fail because: No errors" in caplog.text


def test_failure_includes_validator_errors(example, fast_config):
    def strict(target, record):
        return ValidationResult.with_errors({"example_int": ["is required"]})

    results = list(run(example, strict, config=fast_config))

    failure = results[0].failure
    assert results[0].status == Status.FAILURE
    assert failure.errors == {"example_int": ["is required"]}
    assert "{'example_int': ['is required']}" in failure.message


def test_failing_sample_short_circuits(example):
    calls = []

    def rejecting(target, record):
        calls.append(record)
        return False

    config = Config()
    config.generation.update(max_examples=50, no_shrink=True, database="none")
    scenario = build_scenarios(example)[0]

    result = execute(scenario, rejecting, config)

    assert result.status == Status.FAILURE
    # Sampling stops at the first failing record
    assert len(calls) < 50


def test_validator_exception_is_an_error(example, fast_config):
    def broken(target, record):
        raise ZeroDivisionError("boom")

    results = list(run(example, broken, config=fast_config))

    assert all(result.status == Status.ERROR for result in results)
    assert isinstance(results[0].error, ZeroDivisionError)


def test_additional_property_overrides_base(example, positive_ints, fast_config):
    seen = []

    def recording(target, record):
        seen.append(record)
        return example.validate(record)

    list(run(example, recording, Extensions(additional=positive_ints), fast_config))

    values = [record["example_int"] for record in seen if "example_int" in record]
    assert values
    assert all(value > 0 for value in values)


def test_decoys_reach_validator(example, decoys, fast_config):
    seen = []

    def recording(target, record):
        seen.append(set(record))
        return example.validate(record)

    list(run(example, recording, Extensions(additional=decoys), fast_config))

    assert {"example_string", "decoy_example_int"} in seen
    assert {"example_int", "decoy_example_string"} in seen


@pytest.mark.parametrize(
    ("schema", "error"),
    [
        (prop_schema(prop_field("area", "geometry", required=True)), UnresolvedTypeError),
        (None, UnknownSchemaError),
    ],
)
def test_build_errors_prevent_sampling(schema, error):
    calls = []

    class Entity:
        @staticmethod
        def validate(record):
            calls.append(record)
            return True

    if schema is not None:
        Entity.__prop_schema__ = schema

    with pytest.raises(error):
        run(Entity)
    assert calls == []


def test_decoy_collision_prevents_sampling(example):
    calls = []

    class Colliding:
        @staticmethod
        def generate_misc(excluded_field):
            from hypothesis import strategies as st

            return [("example_string", st.text())]

    with pytest.raises(DecoyCollisionError):
        run(example, lambda target, record: calls.append(record), Extensions(additional=Colliding))
    assert calls == []


def test_workers(example, fast_config):
    fast_config.update(workers=3)

    results = list(run(example, config=fast_config))

    # Results keep plan order
    assert [result.scenario.combination.excluded for result in results] == [None, "example_string", "example_int"]
    assert all(result.is_success for result in results)


def test_seed_is_reproducible(example):
    def draws():
        seen = []

        def recording(target, record):
            seen.append(record)
            return example.validate(record)

        config = Config(seed=42)
        config.generation.update(max_examples=10, database="none")
        list(run(example, recording, config=config))
        return seen

    assert draws() == draws()


def test_extensions_from_config(make_module, example, fast_config):
    name = make_module(
        """
        from hypothesis import strategies as st


        def generate_prop(field, type, constraints):
            if field == "example_int":
                return ("example_int", st.just(-1))
            return None
        """
    )
    fast_config.update(additional_properties=name)
    seen = []

    def recording(target, record):
        seen.append(record.get("example_int", -1))
        return example.validate(record)

    list(run(example, recording, config=fast_config))

    assert set(seen) == {-1}


def test_default_validator_required():
    class Entity:
        __prop_schema__ = prop_schema(prop_field("name", "string"))

    with pytest.raises(IncorrectUsage, match="does not define `validate"):
        run(Entity)


def test_explicit_validator_wins(example):
    def custom(target, record):
        return True

    assert get_validator(example, custom) is custom
    assert get_validator(example)(example, {"example_string": "a"}).valid


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, ValidationResult(valid=True)),
        (False, ValidationResult(valid=False)),
        (ValidationResult(valid=False, errors={"a": ["x"]}), ValidationResult(valid=False, errors={"a": ["x"]})),
        (types.SimpleNamespace(valid=False, errors={"a": ["x"]}), ValidationResult(valid=False, errors={"a": ["x"]})),
        (types.SimpleNamespace(is_valid=lambda: True, errors=lambda: {}), ValidationResult(valid=True)),
    ],
    ids=["true", "false", "result", "attributes", "callables"],
)
def test_as_validation_result(value, expected):
    assert as_validation_result(value) == expected


def test_as_validation_result_invalid():
    with pytest.raises(IncorrectUsage, match="Validator returned"):
        as_validation_result(None)


def test_assert_validity_failure(example, caplog):
    caplog.set_level(logging.ERROR)

    with pytest.raises(ScenarioAssertionFailure) as exc:
        assert_validity(example, {"example_int": 1}, "valid", scenario="valid record - missing example_int")

    assert isinstance(exc.value, AssertionError)
    assert exc.value.message.startswith("valid record - missing example_int: expected valid, got errors:")
    assert "Test will fail because: {'example_string': [\"can't be blank\"]}" in caplog.text
