from __future__ import annotations

import click

from propschema.core.errors import format_exception
from propschema.engine.core import ScenarioResult, Status

HEADER_SEPARATOR = "━"
STATUS_STYLES = {
    Status.SUCCESS: ("✅", "green"),
    Status.FAILURE: ("❌", "red"),
    Status.ERROR: ("🚫", "red"),
}


def display_header(version: str) -> None:
    prefix = "v" if version != "dev" else ""
    header = f"propschema {prefix}{version}"
    click.secho(header, bold=True)
    click.secho(HEADER_SEPARATOR * len(header), bold=True)
    click.echo()


def display_error(title: str, detail: str) -> None:
    click.secho(f"❌  {title}", fg="red", bold=True)
    click.echo(f"\n{detail}")


def display_result(result: ScenarioResult) -> None:
    icon, color = STATUS_STYLES[result.status]
    click.echo(f"{icon}  {click.style(result.scenario.name, fg=color)} ({result.samples} samples, {result.elapsed:.2f}s)")
    if result.failure is not None:
        click.echo(f"\n{result.failure.message}\n")
    elif result.error is not None:
        click.echo(f"\n{format_exception(result.error, with_traceback=True)}\n")


def display_summary(results: list[ScenarioResult]) -> None:
    counts = {status: 0 for status in Status}
    for result in results:
        counts[result.status] += 1
    parts = [f"{counts[status]} {status.value}" for status in Status if counts[status]]
    color = "green" if counts[Status.SUCCESS] == len(results) else "red"
    click.echo()
    click.secho(f"{len(results)} scenarios: {', '.join(parts)}", fg=color, bold=True)
