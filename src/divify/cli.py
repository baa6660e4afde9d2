"""CLI for Divify using Typer."""

import logging
import sys
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_settings
from .exceptions import DivifyError
from .export import SETTLED_MESSAGE, render_json, write_report
from .mcp_server import run_server
from .models import SettlementSummary
from .money import format_money, round_amount
from .service import SettlementService
from .ui import collect_participants_interactive

app = typer.Typer(
    name="divify",
    help="Split shared expenses fairly and work out who pays whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def colored_money(amount: Decimal, rounding: str = ROUND_HALF_UP) -> str:
    """Money with Rich markup: green when owed money, red when owing."""
    amount = round_amount(amount, rounding)
    if amount < 0:
        return f"[red]{format_money(amount, rounding)}[/red]"
    if amount > 0:
        return f"[green]{format_money(amount, rounding)}[/green]"
    return f"[dim]{format_money(amount, rounding)}[/dim]"


def display_summary(summary: SettlementSummary):
    """Display balances and transactions in table format."""
    rounding = summary.rounding
    console.print("\n[bold]Settlement:[/bold]")
    console.print(f"  Participants: {summary.participant_count}")
    console.print(f"  Total: {format_money(summary.total, rounding)}")
    console.print(f"  Share per person: {format_money(summary.average, rounding)}")
    console.print()

    balances = Table(title="Balances", show_header=True, header_style="bold magenta")
    balances.add_column("Name", style="cyan")
    balances.add_column("Paid", justify="right")
    balances.add_column("Balance", justify="right")

    for balance in summary.balances:
        balances.add_row(
            escape(balance.name),
            format_money(balance.amount, rounding),
            colored_money(balance.balance, rounding),
        )

    console.print(balances)
    console.print()

    if summary.is_settled:
        console.print(f"[green]✓ {SETTLED_MESSAGE}[/green]")
        return

    transactions = Table(
        title="Transactions", show_header=True, header_style="bold magenta"
    )
    transactions.add_column("#", style="dim", width=4)
    transactions.add_column("From", style="red")
    transactions.add_column("To", style="green")
    transactions.add_column("Amount", justify="right")

    for number, transaction in enumerate(summary.transactions, start=1):
        transactions.add_row(
            str(number),
            escape(transaction.from_),
            escape(transaction.to),
            format_money(transaction.amount, rounding),
        )

    console.print(transactions)


@app.command()
def settle(
    entries: list[str] | None = typer.Argument(
        None, help='Participants as "Name=Amount", e.g. Ana=30 Luis=12.50'
    ),
    count: int | None = typer.Option(
        None, "--count", "-n", help="Resize the group to this many people"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Enter names and amounts interactively"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    export: Path | None = typer.Option(
        None, "--export", "-e", help="Save a report (.json for JSON, else text)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Work out who pays whom so everyone contributes the same share.

    Each participant's contribution is compared against the average; people
    who paid less pay the difference to people who paid more.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)

        if interactive:
            participants = collect_participants_interactive(service)
            if participants is None:
                console.print("[yellow]No group entered.[/yellow]")
                return
        else:
            participants = service.parse_participants(entries or [])
            if count is not None:
                participants = service.resize(participants, count)

        if not participants:
            console.print(
                "[yellow]No participants given.[/yellow] "
                "Pass entries like [cyan]Ana=30 Luis=12.50[/cyan] or use "
                "[cyan]--interactive[/cyan]."
            )
            return

        summary = service.settle(participants)

        if as_json:
            console.print_json(render_json(summary))
        else:
            display_summary(summary)

        if export is not None:
            path = write_report(summary, export)
            console.print(f"\n[green]✓ Report saved to {escape(str(path))}[/green]")

    except DivifyError as e:
        console.print(f"\n[bold yellow]⚠️  {escape(str(e))}[/bold yellow]\n")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def mcp():
    """Start the MCP server for assistant integration."""
    run_server()


if __name__ == "__main__":
    app()
