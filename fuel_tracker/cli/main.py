"""
CLI interface for Fuel Tracker.

Presentation adapter: collects input, asks for confirmations and renders the
fuel log. All state changes go through the controller.
"""

import logging
import sys
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from fuel_tracker.config.loader import TrackerConfig, load_tracker_config
from fuel_tracker.core.controller import (
    AppState,
    FuelLogController,
    RequestDelete,
    RequestEdit,
    Submit,
)
from fuel_tracker.core.errors import (
    EntryNotFoundError,
    InvalidEntryError,
    SubmissionCancelled,
)
from fuel_tracker.core.summary import MonthlySummary, monthly_summary
from fuel_tracker.storage.repository import LogStore, initialize_schema

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

PLACEHOLDER = "-"


def _today() -> date:
    return date.today()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML configuration file"
    ),
    db: Optional[str] = typer.Option(
        None,
        "--db",
        help="Override the database file from the configuration"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    )
):
    """Fuel Tracker CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    
    try:
        tracker_config = load_tracker_config(config) if config else TrackerConfig()
    except Exception as e:
        console.print(f"[red]Error loading configuration:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    
    db_path = db or tracker_config.storage.db_path
    ctx.obj = (tracker_config, LogStore(db_path=db_path, key=tracker_config.storage.key))
    
    if ctx.invoked_subcommand is None:
        console.print("Fuel Tracker - Use --help to see available commands")


def _controller(ctx: typer.Context, yes: bool = False) -> FuelLogController:
    tracker_config, store = ctx.obj
    
    def confirm(message: str) -> bool:
        return yes or typer.confirm(message, default=False)
    
    return FuelLogController(
        store=store,
        confirm=confirm,
        tank_capacity=tracker_config.tank_capacity
    )


@app.command()
def init(ctx: typer.Context):
    """Initialize the fuel log database."""
    _, store = ctx.obj
    try:
        initialize_schema(store.db_path)
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def add(
    ctx: typer.Context,
    liters: str = typer.Option(..., "--liters", "-l", help="Liters added"),
    amount: str = typer.Option(..., "--amount", "-a", help="Money paid"),
    rate: str = typer.Option(..., "--rate", "-r", help="Price per liter"),
    meter: str = typer.Option(..., "--meter", "-m", help="Odometer reading"),
    date_value: str = typer.Option(..., "--date", "-d", help="Fill-up date as YYYY-MM-DD"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to confirmations")
):
    """Record a new fill-up."""
    controller = _controller(ctx, yes)
    state = controller.start()
    command = Submit(
        date=date_value,
        liters=liters,
        amount=amount,
        rate=rate,
        meter=meter
    )
    state = _run(controller, state, command)
    console.print("[green]✓[/] Entry added")
    _display_log(state)


@app.command()
def edit(
    ctx: typer.Context,
    entry_id: int = typer.Argument(..., help="Id of the entry to edit"),
    liters: Optional[str] = typer.Option(None, "--liters", "-l", help="Liters added"),
    amount: Optional[str] = typer.Option(None, "--amount", "-a", help="Money paid"),
    rate: Optional[str] = typer.Option(None, "--rate", "-r", help="Price per liter"),
    meter: Optional[str] = typer.Option(None, "--meter", "-m", help="Odometer reading"),
    date_value: Optional[str] = typer.Option(None, "--date", "-d", help="Fill-up date as YYYY-MM-DD"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to confirmations")
):
    """Update an entry; options left out keep their current values."""
    controller = _controller(ctx, yes)
    state = _run(controller, controller.start(), RequestEdit(entry_id))
    current = state.editing_entry
    if current is None:
        _fail(EntryNotFoundError(entry_id))
    
    command = Submit(
        date=date_value if date_value is not None else current.date.isoformat(),
        liters=liters if liters is not None else current.liters,
        amount=amount if amount is not None else current.amount,
        rate=rate if rate is not None else current.rate,
        meter=meter if meter is not None else current.meter
    )
    state = _run(controller, state, command)
    console.print(f"[green]✓[/] Entry {entry_id} updated")
    _display_log(state)


@app.command()
def delete(
    ctx: typer.Context,
    entry_id: int = typer.Argument(..., help="Id of the entry to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking")
):
    """Delete an entry."""
    controller = _controller(ctx, yes)
    state = controller.start()
    if not any(entry.id == entry_id for entry in state.entries):
        _fail(EntryNotFoundError(entry_id))
    state = _run(controller, state, RequestDelete(entry_id))
    console.print(f"[green]✓[/] Entry {entry_id} deleted")
    _display_log(state)


@app.command(name="list")
def list_entries(ctx: typer.Context):
    """Show the fuel log in odometer order."""
    state = _controller(ctx).start()
    _display_log(state)


@app.command()
def summary(
    ctx: typer.Context,
    month: Optional[str] = typer.Option(
        None,
        "--month",
        help="Month to summarize as YYYY-MM (defaults to the current month)"
    )
):
    """Show totals and averages for one month."""
    if month is None:
        reference = _today()
    else:
        try:
            year, month_number = month.split("-")
            reference = date(int(year), int(month_number), 1)
        except ValueError:
            console.print(f"[red]Error:[/] Month must be YYYY-MM, got {month!r}")
            sys.exit(EXIT_CODE_FAIL)
    
    state = _controller(ctx).start()
    _display_summary(monthly_summary(state.entries, reference))


def _run(controller: FuelLogController, state: AppState, command) -> AppState:
    """Dispatch a command, turning user-facing errors into exit codes."""
    try:
        return controller.dispatch(state, command)
    except (InvalidEntryError, SubmissionCancelled, EntryNotFoundError) as e:
        _fail(e)


def _fail(error: Exception) -> None:
    if isinstance(error, SubmissionCancelled):
        console.print(f"[yellow]{str(error)}[/]")
    else:
        console.print(f"[red]Error:[/] {str(error)}")
    sys.exit(EXIT_CODE_FAIL)


def _format_number(value: Optional[float]) -> str:
    """Format a number with two decimals, or the placeholder when absent."""
    if value is None:
        return PLACEHOLDER
    return f"{value:,.2f}"


def _display_log(state: AppState):
    """Display the fuel log as a table in canonical order."""
    if not state.entries:
        console.print("\n[dim]No fill-ups recorded yet.[/]")
        return
    
    table = Table(title="Fuel Log")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Liters", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Meter", justify="right")
    table.add_column("Mileage", justify="right")
    table.add_column("Cost/km", justify="right")
    
    for entry in state.entries:
        table.add_row(
            str(entry.id),
            entry.date.isoformat(),
            _format_number(entry.liters),
            _format_number(entry.amount),
            _format_number(entry.rate),
            str(entry.meter),
            _format_number(entry.mileage),
            _format_number(entry.cost)
        )
    
    console.print(table)


def _display_summary(result: MonthlySummary):
    """Display a monthly summary."""
    console.print(f"\n[bold]Summary for {result.label}[/bold]")
    console.print("-" * 40)
    console.print(f"Fill-ups: {result.entry_count}")
    console.print(f"Total cost: {_format_number(result.total_cost)}")
    console.print(f"Total liters: {_format_number(result.total_liters)}")
    console.print(f"Average mileage: {_format_number(result.avg_mileage)}")
    console.print(f"Average cost/km: {_format_number(result.avg_cost)}")


if __name__ == "__main__":
    app()
