"""
CLI interface for Content Budget.

Provides command-line access to the budget store.
"""

import logging
import sys
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from content_budget.config.loader import AppConfig, default_config, load_budget_config
from content_budget.core.budget import BudgetHealth
from content_budget.core.pipelines import (
    IMAGE_MODELS,
    PIPELINE_CATALOG,
    VIDEO_MODELS,
    ContentType,
    PipelineSpec,
    pipelines_for_content_type,
)
from content_budget.core.store import BudgetStore
from content_budget.storage.repository import get_repository

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

_HEALTH_STYLE = {
    BudgetHealth.HEALTHY: "green",
    BudgetHealth.HIGH: "yellow",
    BudgetHealth.CRITICAL: "red",
}

_HEALTH_MESSAGE = {
    BudgetHealth.HEALTHY: "Budget is healthy. Generate away!",
    BudgetHealth.HIGH: "Budget usage is high. Use resources wisely.",
    BudgetHealth.CRITICAL: "Budget nearly exhausted. Consider upgrading or waiting for next month.",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_config(ctx: typer.Context) -> AppConfig:
    config_path = ctx.obj.get("config_path")
    if config_path:
        return load_budget_config(config_path)
    return default_config()


def _open_store(ctx: typer.Context) -> Tuple[BudgetStore, AppConfig]:
    """Build a store from config and rehydrate it from its slot."""
    config = _load_config(ctx)
    db_path = ctx.obj.get("db_path") or config.storage.db_path
    repository = get_repository(db_path)
    repository.initialize_schema()
    store = BudgetStore(
        total_budget_cents=config.budget.monthly_cents,
        repository=repository,
        slot=config.storage.slot,
        autosave=True,
    )
    store.load()
    return store, config


def _pipeline_models(pipeline: PipelineSpec) -> str:
    models = [IMAGE_MODELS[pipeline.image_model].name]
    if pipeline.video_model:
        models.append(VIDEO_MODELS[pipeline.video_model].name)
    return " -> ".join(models)


def _format_currency(cents: float) -> str:
    """Format an amount in cents as dollars."""
    return f"${cents / 100:,.2f}"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to YAML budget configuration"
    ),
    db: Optional[str] = typer.Option(
        None, "--db", help="Override the SQLite database path"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    """Content Budget CLI."""
    _setup_logging(log_level)
    ctx.obj = {"config_path": config, "db_path": db}
    if ctx.invoked_subcommand is None:
        console.print("Content Budget - Use --help to see available commands")


@app.command()
def init(
    ctx: typer.Context,
    reset: bool = typer.Option(False, "--reset", help="Discard any saved store state"),
):
    """Initialize the store database."""
    try:
        config = _load_config(ctx)
        repository = get_repository(ctx.obj.get("db_path") or config.storage.db_path)
        repository.initialize_schema()
        if reset and repository.delete_slot(config.storage.slot):
            console.print(f"[yellow]Discarded saved state in slot {config.storage.slot}[/]")
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def status(ctx: typer.Context):
    """Show this month's budget."""
    try:
        store, config = _open_store(ctx)
        budget_status = store.get_budget_status()
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    health = budget_status.health(
        config.budget.warning_percent, config.budget.critical_percent
    )
    style = _HEALTH_STYLE[health]

    console.print("\n[bold]Monthly Budget[/bold]")
    console.print("-" * 40)
    console.print(f"Spent: {_format_currency(budget_status.spent_cents)}")
    console.print(f"Remaining: [{style}]{_format_currency(budget_status.remaining_cents)}[/]")
    console.print(f"Budget: {_format_currency(budget_status.total_budget_cents)}")
    console.print(
        f"{budget_status.percent_used:.1f}% used, {store.month_generation_count} generations"
    )
    console.print(f"[{style}]{_HEALTH_MESSAGE[health]}[/]")
    if not budget_status.can_generate:
        console.print("[bold red]Generation budget exhausted[/]")


@app.command()
def record(
    ctx: typer.Context,
    pipeline_id: str = typer.Argument(..., help="Pipeline that produced the generation"),
    cost_cents: int = typer.Option(..., "--cost", help="Cost in cents"),
    latency_ms: float = typer.Option(0.0, "--latency", help="Call duration in ms"),
    name: Optional[str] = typer.Option(
        None, "--name", help="Display name (defaults to the catalog name)"
    ),
    content_type: Optional[str] = typer.Option(None, "--content-type"),
    city_id: Optional[str] = typer.Option(None, "--city"),
):
    """Record a completed generation."""
    try:
        store, _ = _open_store(ctx)
        if name is None:
            pipeline = PIPELINE_CATALOG.pipelines.get(pipeline_id)
            name = pipeline.name if pipeline else pipeline_id
        generation_id = store.record_generation(
            pipeline_id=pipeline_id,
            pipeline_name=name,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            content_type=content_type,
            city_id=city_id,
        )
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(generation_id)


@app.command()
def winner(
    ctx: typer.Context,
    generation_id: str = typer.Argument(..., help="Id returned by `record`"),
):
    """Mark a generation as the winner of a comparison."""
    try:
        store, _ = _open_store(ctx)
        store.record_winner(generation_id)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"[green]✓[/] Winner recorded for {generation_id}")


@app.command()
def leaderboard(
    ctx: typer.Context,
    top: int = typer.Option(5, "--top", "-n", help="Number of pipelines to show"),
):
    """Rank pipelines by win rate."""
    try:
        store, _ = _open_store(ctx)
        entries = store.get_pipeline_leaderboard()
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if not entries:
        console.print("[dim]No generations recorded yet.[/]")
        return

    table = Table(title="Pipeline Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("Pipeline")
    table.add_column("Runs", justify="right")
    table.add_column("Win rate", justify="right")
    table.add_column("Cost/gen", justify="right")
    table.add_column("Latency", justify="right")
    for rank, entry in enumerate(entries[:top], start=1):
        table.add_row(
            str(rank),
            entry.pipeline_name,
            str(entry.total_generations),
            f"{entry.win_rate:.0f}%",
            _format_currency(entry.avg_cost_cents),
            f"{entry.avg_latency_ms:,.0f} ms",
        )
    console.print(table)


@app.command("reset-month")
def reset_month(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Clear this month's spend and history."""
    if not yes and not typer.confirm("Discard this month's spend and history?"):
        console.print("Aborted")
        sys.exit(EXIT_CODE_FAIL)
    try:
        store, _ = _open_store(ctx)
        store.reset_month()
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print("[green]✓[/] Month reset")


@app.command()
def pipelines(
    content_type: Optional[ContentType] = typer.Option(
        None, "--content-type", help="Only pipelines suited to this content type"
    ),
):
    """List the pipeline catalog."""
    if content_type is None:
        catalog = list(PIPELINE_CATALOG.pipelines.values())
    else:
        catalog = pipelines_for_content_type(content_type)

    table = Table(title="Pipelines")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Models")
    table.add_column("Best for")
    table.add_column("Est. cost", justify="right")
    table.add_column("Est. latency", justify="right")
    for pipeline in catalog:
        table.add_row(
            pipeline.id,
            pipeline.name,
            _pipeline_models(pipeline),
            pipeline.best_for,
            _format_currency(pipeline.estimated_cost_cents),
            f"{pipeline.estimated_latency_ms:,} ms",
        )
    console.print(table)


if __name__ == "__main__":
    app()
