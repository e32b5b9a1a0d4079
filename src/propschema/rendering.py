"""Render planned scenarios as the source of a pytest module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from textwrap import indent

from propschema.config import GenerationConfig
from propschema.core import HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER
from propschema.engine.core import Scenario, get_test_names, to_test_name


@dataclass
class TargetImport:
    statement: str
    reference: str

    __slots__ = ("statement", "reference")

    @classmethod
    def from_path(cls, path: str) -> TargetImport:
        """`package.module:Entity` or a bare `package.module`."""
        module, _, attribute = path.partition(":")
        if not attribute:
            return cls(statement=f"import {module}", reference=module)
        root = attribute.split(".")[0]
        return cls(statement=f"from {module} import {root}", reference=attribute)


def render_database(generation: GenerationConfig) -> str:
    if generation.database_disabled:
        return "None"
    if generation.database == HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER:
        return "InMemoryExampleDatabase()"
    return f"DirectoryBasedExampleDatabase({generation.database!r})"


def render_settings(generation: GenerationConfig) -> str | None:
    arguments = []
    if generation.max_examples is not None:
        arguments.append(f"max_examples={generation.max_examples}")
    if generation.deterministic:
        arguments.append("derandomize=True")
    if generation.no_shrink or generation.database_disabled:
        phases = ", ".join(f"Phase.{phase.name}" for phase in generation.get_phases())
        arguments.append(f"phases=[{phases}]")
    if generation.database is not None:
        arguments.append(f"database={render_database(generation)}")
    if not arguments:
        return None
    return f"@settings({', '.join(arguments)})"


def render_imports(generation: GenerationConfig, seed: int | None) -> list[str]:
    names = ["given"]
    if render_settings(generation) is not None:
        names.append("settings")
    if generation.no_shrink or generation.database_disabled:
        names.append("Phase")
    if seed is not None:
        names.append("seed")
    imports = [f"from hypothesis import {', '.join(sorted(names))}"]
    database = generation.database
    if database is not None and not generation.database_disabled:
        if database == HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER:
            imports.append("from hypothesis.database import InMemoryExampleDatabase")
        else:
            imports.append("from hypothesis.database import DirectoryBasedExampleDatabase")
    return imports


def _render_strategy_call(scenario: Scenario, reference: str, providers: str) -> str:
    excluded = scenario.combination.excluded
    if excluded is None:
        return f"complete_map({reference}{providers})"
    return f"incomplete_map({reference}, {excluded!r}{providers})"


def render_test(
    scenario: Scenario,
    reference: str,
    generation: GenerationConfig,
    additional: str | None = None,
    filters: str | None = None,
    validator: str | None = None,
    seed: int | None = None,
    name: str | None = None,
) -> str:
    providers = ""
    if additional is not None:
        providers += f", additional={additional!r}"
    if filters is not None:
        providers += f", filters={filters!r}"
    checks = f"{reference}, record, {scenario.expected.value!r}, scenario={scenario.name!r}"
    if validator is not None:
        checks += f", validator={validator}"
    lines = [indent(repr(scenario.generator.strategy), "# ", lambda _: True)]
    if seed is not None:
        lines.append(f"@seed({seed})")
    settings = render_settings(generation)
    if settings is not None:
        lines.append(settings)
    lines.extend(
        [
            f"@given(record={_render_strategy_call(scenario, reference, providers)})",
            f"def {name or to_test_name(scenario.name)}(record):",
            f'    """{scenario.name}"""',
            f"    assert_validity({checks})",
        ]
    )
    return "\n".join(lines)


def render_tests(
    target_path: str,
    scenarios: Sequence[Scenario],
    generation: GenerationConfig | None = None,
    additional: str | None = None,
    filters: str | None = None,
    validator: str | None = None,
    seed: int | None = None,
) -> str:
    """Source of a pytest module with one property test per scenario.

    Each test is preceded by a comment with the strategy it draws records from.
    The seed and generation settings are carried over into the rendered decorators.
    """
    generation = generation or GenerationConfig()
    names = get_test_names(scenarios)
    target = TargetImport.from_path(target_path)
    header = "\n".join(
        [
            f'"""Property tests for `{target_path}`, generated by propschema."""',
            "",
            *render_imports(generation, seed),
            "",
            "from propschema.engine import assert_validity",
            "from propschema.generation.maps import complete_map, incomplete_map",
            "",
            target.statement,
        ]
    )
    validator_reference = None
    if validator is not None:
        validator_import = TargetImport.from_path(validator)
        header += f"\n{validator_import.statement}"
        validator_reference = validator_import.reference
    tests = [
        render_test(scenario, target.reference, generation, additional, filters, validator_reference, seed, name)
        for name, scenario in zip(names, scenarios)
    ]
    return "\n\n\n".join([header, *tests]) + "\n"
