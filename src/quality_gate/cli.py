"""Typer CLI for quality-gate.

Commands:
  evaluate  Evaluate a single condition against a measure
  check     Evaluate a quality gate document (YAML) and fail when the gate fails
  reindex   Resubmit branch issue-sync tasks to the task queue
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.table import Table

from quality_gate.config import GateSettings
from quality_gate.evaluator import ConditionEvaluator
from quality_gate.gate import EvaluationStatus, QualityGateEvaluator, load_gate_document
from quality_gate.models import Condition, Measure, Metric
from quality_gate.types import Level, MetricType, Operator, is_new_metric
from quality_gate.values import raw

app = typer.Typer(
    name="quality-gate",
    help="Quality gate condition evaluation",
    no_args_is_help=True,
)
console = Console()

STATUS_COLORS = {
    EvaluationStatus.OK: "green",
    EvaluationStatus.ERROR: "red",
    EvaluationStatus.NO_VALUE: "dim",
}


def _settings() -> GateSettings:
    return GateSettings()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level")] = False,
) -> None:
    """Quality gate condition evaluation."""
    level = "DEBUG" if verbose else _settings().log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def evaluate(
    metric_key: Annotated[str, typer.Option("--metric-key", "-k", help="Metric key")],
    metric_type: Annotated[MetricType, typer.Option("--type", "-t", help="Metric type")],
    operator: Annotated[
        str, typer.Option("--operator", "-o", help="Operator code (EQ, NE, GT, LT)")
    ],
    threshold: Annotated[str, typer.Option("--threshold", help="Error threshold")],
    value: Annotated[
        str | None, typer.Option("--value", help="Measure value (omit for no value)")
    ] = None,
    variation: Annotated[
        float | None, typer.Option("--variation", help="Measure variation")
    ] = None,
    metric_name: Annotated[
        str | None, typer.Option("--metric-name", help="Metric display name")
    ] = None,
    use_variation: Annotated[
        bool | None,
        typer.Option(
            "--use-variation/--absolute",
            help="Compare the variation (default: only for new-code metrics)",
        ),
    ] = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Evaluate a single condition against a measure."""
    settings = _settings()
    metric = Metric(key=metric_key, name=metric_name or metric_key, type=metric_type)

    try:
        if use_variation is None:
            use_variation = is_new_metric(metric_key, settings.new_metric_prefix)
        condition = Condition(
            metric=metric,
            operator=Operator.from_db_value(operator),
            error_threshold=threshold,
            use_variation=use_variation,
        )
        measure = Measure.for_metric(metric, value, variation=variation)
        result = ConditionEvaluator().evaluate(condition, measure)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if format == "json":
        console.print(result.model_dump_json(indent=2))
        return

    color = "red" if result.level == Level.ERROR else "green"
    console.print(f"[bold]Level:[/bold] [{color}]{result.level}[/{color}]")
    console.print(f"[bold]Evaluated value:[/bold] {result.raw_value}")


@app.command()
def check(
    gate_file: Annotated[Path, typer.Argument(help="Quality gate YAML document")],
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Evaluate a quality gate document; exit code 1 when the gate fails."""
    settings = _settings()

    try:
        document = yaml.safe_load(gate_file.read_text()) or {}
        gate, measures = load_gate_document(
            document, new_metric_prefix=settings.new_metric_prefix
        )
        status = QualityGateEvaluator(hours_per_day=settings.hours_per_day).evaluate(
            gate, measures
        )
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error reading {gate_file}: {e}[/red]")
        raise typer.Exit(1) from None
    except (ValueError, TypeError, KeyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if format == "json":
        console.print(status.model_dump_json(indent=2))
    else:
        table = Table(title=f"Quality Gate: {gate.name}")
        table.add_column("Metric", style="cyan")
        table.add_column("Condition")
        table.add_column("Value")
        table.add_column("Status")
        for cs in status.conditions:
            c = cs.condition
            color = STATUS_COLORS[cs.status]
            table.add_row(
                c.metric.name,
                f"{'Δ ' if c.use_variation else ''}{c.operator.symbol} {c.error_threshold}",
                "" if cs.value is None else str(raw(cs.value)),
                f"[{color}]{cs.status}[/{color}]",
            )
        console.print(table)
        level_color = "red" if status.level == Level.ERROR else "green"
        console.print(f"[bold]Gate:[/bold] [{level_color}]{status.level}[/{level_color}]")
        for cs in status.failed_conditions:
            console.print(f"  [red]✗[/red] {cs.label}")

    if status.level == Level.ERROR:
        raise typer.Exit(1)


@app.command()
def reindex(
    dsn: Annotated[
        str | None, typer.Option("--dsn", help="PostgreSQL DSN (default: settings)")
    ] = None,
) -> None:
    """Resubmit an issue-sync task for every branch, most recently analysed projects first."""
    settings = _settings()
    dsn = dsn or settings.database_dsn
    if not dsn:
        console.print("[red]No --dsn given and QUALITY_GATE_DATABASE_DSN is not set.[/red]")
        raise typer.Exit(1)

    tasks = asyncio.run(_run_reindex(dsn, settings.issue_sync_task_type))
    console.print(f"[green]Submitted {len(tasks)} issue sync task(s)[/green]")


async def _run_reindex(dsn: str, task_type: str) -> list:
    import asyncpg

    from quality_gate.reindex import IssueSyncStore, IssueSyncTrigger

    pool = await asyncpg.create_pool(dsn, min_size=1, max_size=2)
    try:
        trigger = IssueSyncTrigger(IssueSyncStore(pool=pool), task_type=task_type)
        return await trigger.trigger_on_index_creation()
    finally:
        await pool.close()


if __name__ == "__main__":
    app()
