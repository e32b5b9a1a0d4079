from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any

import hypothesis

from propschema.config import GenerationConfig, PropSchemaConfig
from propschema.core.errors import IncorrectUsage, ScenarioAssertionFailure
from propschema.engine.validation import ValidationResult, Validator, as_validation_result, get_validator
from propschema.generation.maps import RecordGenerator, build_all_incomplete, build_complete
from propschema.generation.planner import Combination, Validity, plan
from propschema.generation.resolution import Extensions
from propschema.schema import get_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    """A planned combination paired with the generator for its records."""

    target: Any
    combination: Combination
    generator: RecordGenerator

    __slots__ = ("target", "combination", "generator")

    @property
    def name(self) -> str:
        return self.combination.name

    @property
    def expected(self) -> Validity:
        return self.combination.expected


class Status(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


@dataclass
class ScenarioResult:
    scenario: Scenario
    status: Status
    # Number of records checked, including the ones Hypothesis draws while shrinking
    samples: int
    elapsed: float
    failure: ScenarioAssertionFailure | None = None
    error: Exception | None = None

    @property
    def is_success(self) -> bool:
        return self.status == Status.SUCCESS


def build_scenarios(target: Any, extensions: Extensions | None = None) -> list[Scenario]:
    """Plan every combination for `target` and build its generators.

    Build errors are raised here, before any record is drawn.
    """
    extensions = extensions or Extensions()
    schema = get_schema(target)
    complete = build_complete(schema, extensions.additional, extensions.filters, base=extensions.base)
    incomplete = {
        generator.excluded: generator
        for generator in build_all_incomplete(schema, extensions.additional, extensions.filters, base=extensions.base)
    }
    scenarios = []
    for combination in plan(schema):
        if combination.excluded is None:
            generator = complete
        else:
            generator = incomplete[combination.excluded]
        scenarios.append(Scenario(target=target, combination=combination, generator=generator))
    return scenarios


def check_sample(
    scenario: str, target: Any, record: dict[str, Any], expected: Validity, validator: Validator
) -> ValidationResult:
    """Validate one record and compare the outcome with the expectation."""
    result = as_validation_result(validator(target, record))
    if expected.is_valid and not result.valid:
        logger.error("Test will fail because: %r", result.errors)
        raise ScenarioAssertionFailure(scenario, expected, record, result.errors)
    if not expected.is_valid and result.valid:
        logger.error("Test will fail because: No errors")
        raise ScenarioAssertionFailure(scenario, expected, record)
    return result


def assert_validity(
    target: Any,
    record: dict[str, Any],
    expected: Validity | str,
    validator: Validator | None = None,
    scenario: str | None = None,
) -> None:
    """Entry point for generated test modules."""
    expected = Validity(expected)
    check_sample(scenario or f"{expected.value} record", target, record, expected, get_validator(target, validator))


def create_test(
    scenario: Scenario,
    validator: Validator,
    generation: GenerationConfig,
    seed: int | None = None,
    on_sample: Callable[[], None] | None = None,
) -> Callable[[], None]:
    """Wrap the per-record check into a Hypothesis test for this scenario."""

    @hypothesis.given(record=scenario.generator.strategy)
    def test(record: dict[str, Any]) -> None:
        if on_sample is not None:
            on_sample()
        check_sample(scenario.name, scenario.target, record, scenario.expected, validator)

    test.__name__ = test.__qualname__ = to_test_name(scenario.name)
    test = generation.as_settings()(test)
    if seed is not None:
        test = hypothesis.seed(seed)(test)
    return test


def to_test_name(name: str) -> str:
    return "test_" + re.sub(r"\W+", "_", name).strip("_")


def get_test_names(scenarios: Sequence[Scenario]) -> list[str]:
    """Test function names for `scenarios`, in order.

    Field names that only differ in punctuation collapse into the same test name.
    """
    names: dict[str, str] = {}
    for scenario in scenarios:
        name = to_test_name(scenario.name)
        if name in names:
            raise IncorrectUsage(
                f"Scenarios `{names[name]}` and `{scenario.name}` both map to the test name `{name}`. "
                "Rename one of the fields"
            )
        names[name] = scenario.name
    return list(names)


def execute(scenario: Scenario, validator: Validator, config: PropSchemaConfig | None = None) -> ScenarioResult:
    """Run the bounded sampling loop for one scenario."""
    config = config or PropSchemaConfig()
    samples = 0

    def on_sample() -> None:
        nonlocal samples
        samples += 1

    test = create_test(scenario, validator, config.generation, seed=config.seed, on_sample=on_sample)
    logger.debug("Running scenario: %s", scenario.name)
    start = time.monotonic()
    try:
        test()
    except ScenarioAssertionFailure as exc:
        status, failure, error = Status.FAILURE, exc, None
    except Exception as exc:
        logger.debug("Scenario %s errored", scenario.name, exc_info=True)
        status, failure, error = Status.ERROR, None, exc
    else:
        status, failure, error = Status.SUCCESS, None, None
    elapsed = time.monotonic() - start
    logger.debug("Scenario %s finished with %s after %d samples", scenario.name, status.value, samples)
    return ScenarioResult(
        scenario=scenario, status=status, samples=samples, elapsed=elapsed, failure=failure, error=error
    )


def run(
    target: Any,
    validator: Validator | None = None,
    extensions: Extensions | None = None,
    config: PropSchemaConfig | None = None,
) -> Iterator[ScenarioResult]:
    """Build all scenarios for `target` and execute them.

    Build errors propagate immediately; scenario failures are reported through results
    and never stop sibling scenarios.
    """
    config = config or PropSchemaConfig()
    validator = get_validator(target, validator)
    if extensions is None:
        extensions = Extensions.load(additional=config.additional_properties, filters=config.filters)
    scenarios = build_scenarios(target, extensions)
    if config.workers > 1 and len(scenarios) > 1:
        return _run_threaded(scenarios, validator, config)
    return (execute(scenario, validator, config) for scenario in scenarios)


def _run_threaded(scenarios: list[Scenario], validator: Validator, config: PropSchemaConfig) -> Iterator[ScenarioResult]:
    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="propschema") as pool:
        futures = [pool.submit(execute, scenario, validator, config) for scenario in scenarios]
        for future in futures:
            yield future.result()
