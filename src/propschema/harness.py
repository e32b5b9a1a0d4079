"""Expose generated scenarios as plain test functions.

Example:
    ```python
    # test_user.py
    from propschema import make_tests

    from myapp.models import User

    globals().update(make_tests(User, additional="myapp.testing.props"))
    ```

pytest then collects one test per scenario, e.g. `test_valid_record` and
`test_invalid_record_missing_name`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from propschema.config import PropSchemaConfig
from propschema.engine.core import Scenario, build_scenarios, create_test, get_test_names
from propschema.engine.validation import Validator, get_validator
from propschema.generation.resolution import Extensions, as_provider


def make_tests(
    target: Any,
    validator: Validator | None = None,
    additional: Any = None,
    filters: Any = None,
    config: PropSchemaConfig | None = None,
) -> dict[str, Callable[[], None]]:
    """Build one Hypothesis test per scenario, keyed by test name.

    Providers may be given as objects or as `package.module[:attribute]` paths.
    Scenarios are built eagerly, so schema and provider problems surface at collection time.
    """
    config = config or PropSchemaConfig()
    validator = get_validator(target, validator)
    extensions = Extensions(
        additional=as_provider(additional or config.additional_properties),
        filters=as_provider(filters or config.filters),
    )
    scenarios = build_scenarios(target, extensions)
    return {
        name: _make_test(scenario, validator, config)
        for name, scenario in zip(get_test_names(scenarios), scenarios)
    }


def _make_test(scenario: Scenario, validator: Validator, config: PropSchemaConfig) -> Callable[[], None]:
    test = create_test(scenario, validator, config.generation, seed=config.seed)
    test.__doc__ = scenario.name
    return test
