from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from propschema.cli.output import display_error, display_header, display_result, display_summary
from propschema.config import ConfigError, PropSchemaConfig
from propschema.core.errors import (
    DecoyCollisionError,
    ExtensionError,
    IncorrectUsage,
    UnknownSchemaError,
    UnresolvedTypeError,
    format_exception,
)
from propschema.core.loading import load_from_env, load_object
from propschema.core.version import PROPSCHEMA_VERSION
from propschema.engine import build_scenarios, run as run_scenarios
from propschema.generation.resolution import Extensions
from propschema.rendering import render_tests

if sys.version_info < (3, 11):
    from tomli import TOMLDecodeError
else:
    from tomllib import TOMLDecodeError

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"
BUILD_ERRORS = (UnknownSchemaError, UnresolvedTypeError, DecoyCollisionError, IncorrectUsage)


def _abort(ctx: click.Context, title: str, error: BaseException) -> NoReturn:
    logger.warning("%s: %s", title, error)
    detail = str(error)
    if error.__cause__ is not None:
        detail += f"\n\n{format_exception(error.__cause__)}"
    display_error(title, detail)
    ctx.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)  # type: ignore[untyped-decorator]
@click.option(  # type: ignore[untyped-decorator]
    "--config-file",
    "config_file",
    help="The path to `propschema.toml` file to use for configuration",
    metavar="PATH",
    type=str,
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")  # type: ignore[untyped-decorator]
@click.version_option(PROPSCHEMA_VERSION)  # type: ignore[untyped-decorator]
@click.pass_context  # type: ignore[untyped-decorator]
def propschema(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """Property-based tests generated from entity schemas."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    try:
        if config_file is not None:
            config = PropSchemaConfig.from_path(config_file)
        else:
            config = PropSchemaConfig.discover()
    except FileNotFoundError:
        display_error(f"Failed to load configuration file from {config_file}", "The configuration file does not exist")
        ctx.exit(1)
    except (TOMLDecodeError, ConfigError) as exc:
        if isinstance(exc, TOMLDecodeError):
            detail = "The configuration file content is not valid TOML"
        else:
            detail = "The loaded configuration is incorrect"
        display_error(
            f"Failed to load configuration file{f' from {config_file}' if config_file else ''}", f"{detail}\n\n{exc}"
        )
        ctx.exit(1)
    try:
        load_from_env()
    except ExtensionError as exc:
        _abort(ctx, "Unable to load propschema extensions", exc)
    ctx.obj = config


def _load_target(ctx: click.Context, target: str) -> Any:
    try:
        return load_object(target)
    except ExtensionError as exc:
        _abort(ctx, f"Can not resolve target `{target}`", exc)


def _load_extensions(ctx: click.Context, additional: str | None, filters: str | None) -> Extensions:
    try:
        return Extensions.load(additional=additional, filters=filters)
    except ExtensionError as exc:
        _abort(ctx, "Can not load providers", exc)


additional_props_option = click.option(
    "--additional-props",
    "additional_props",
    help="Module with custom `generate_prop` / `generate_misc` definitions, e.g. `myapp.testing.props`",
    metavar="MODULE",
    type=str,
)
filters_option = click.option(
    "--filters",
    "filters",
    help="Module with custom `filter_rules` / `filter_record` definitions",
    metavar="MODULE",
    type=str,
)
validator_option = click.option(
    "--validator",
    "validator",
    help="Validator as `package.module:function`, called as `function(target, record)`. "
    "Defaults to the target's own `validate(record)`",
    metavar="REF",
    type=str,
)
max_examples_option = click.option(
    "--max-examples",
    "-n",
    "max_examples",
    help="Maximum number of records drawn per scenario",
    type=click.IntRange(1),
)
seed_option = click.option("--seed", type=int, help="Seed for reproducible runs")


@propschema.command(name="print", context_settings=CONTEXT_SETTINGS)  # type: ignore[untyped-decorator]
@click.argument("target", type=str)  # type: ignore[untyped-decorator]
@click.option(  # type: ignore[untyped-decorator]
    "--output-path",
    "output_path",
    help="Write the generated tests to this file instead of printing them. The file is created if missing",
    type=click.Path(dir_okay=False, writable=True),
)
@additional_props_option
@filters_option
@validator_option
@max_examples_option
@seed_option
@click.pass_context  # type: ignore[untyped-decorator]
def print_(
    ctx: click.Context,
    target: str,
    output_path: str | None,
    additional_props: str | None,
    filters: str | None,
    validator: str | None,
    max_examples: int | None,
    seed: int | None,
) -> None:
    """Print the property tests generated for TARGET.

    TARGET is the entity declaring `__prop_schema__`, given as `package.module:Entity` or `package.module`.
    """
    config: PropSchemaConfig = ctx.obj
    config.update(seed=seed, additional_properties=additional_props, filters=filters)
    config.generation.update(max_examples=max_examples)
    entity = _load_target(ctx, target)
    extensions = _load_extensions(ctx, config.additional_properties, config.filters)
    try:
        source = render_tests(
            target,
            build_scenarios(entity, extensions),
            config.generation,
            additional=config.additional_properties,
            filters=config.filters,
            validator=validator,
            seed=config.seed,
        )
    except BUILD_ERRORS as exc:
        _abort(ctx, f"Can not generate tests for `{target}`", exc)
    if output_path is None:
        click.echo(source, nl=False)
    else:
        Path(output_path).write_text(source, encoding="utf-8")
        logger.info("Generated tests for %s written to %s", target, output_path)


@propschema.command(context_settings=CONTEXT_SETTINGS)  # type: ignore[untyped-decorator]
@click.argument("target", type=str)  # type: ignore[untyped-decorator]
@additional_props_option
@filters_option
@validator_option
@max_examples_option
@seed_option
@click.option(  # type: ignore[untyped-decorator]
    "--workers",
    "-w",
    type=click.IntRange(1),
    help="Number of scenarios executed concurrently",
)
@click.option("--no-shrink", "no_shrink", is_flag=True, help="Do not shrink failing records")  # type: ignore[untyped-decorator]
@click.option(  # type: ignore[untyped-decorator]
    "--deterministic", is_flag=True, help="Draw the same records on every run"
)
@click.pass_context  # type: ignore[untyped-decorator]
def run(
    ctx: click.Context,
    target: str,
    additional_props: str | None,
    filters: str | None,
    validator: str | None,
    max_examples: int | None,
    seed: int | None,
    workers: int | None,
    no_shrink: bool,
    deterministic: bool,
) -> None:
    """Run the property tests generated for TARGET against its validator."""
    config: PropSchemaConfig = ctx.obj
    config.update(seed=seed, workers=workers, additional_properties=additional_props, filters=filters)
    # Flags only override the config file when passed
    config.generation.update(
        max_examples=max_examples, no_shrink=no_shrink or None, deterministic=deterministic or None
    )
    entity = _load_target(ctx, target)
    validate = _load_target(ctx, validator) if validator is not None else None
    extensions = _load_extensions(ctx, config.additional_properties, config.filters)
    display_header(PROPSCHEMA_VERSION)
    try:
        results = run_scenarios(entity, validate, extensions, config)
    except BUILD_ERRORS as exc:
        _abort(ctx, f"Can not generate tests for `{target}`", exc)
    collected = []
    for result in results:
        display_result(result)
        collected.append(result)
    display_summary(collected)
    if not all(result.is_success for result in collected):
        ctx.exit(1)
