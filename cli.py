#!/usr/bin/env python3
"""Command-line interface for the LNURL client."""

import sys
from typing import NoReturn, Optional

import click
import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from lnurl_client.config import load_config
from lnurl_client.exceptions import LNURLClientError
from lnurl_client.lnurl.address import normalize_address
from lnurl_client.main import Application

# Initialize CLI app
app = typer.Typer(
    name="lnurl-client",
    help="LNURL channel, withdraw and auth client for Core Lightning",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

USAGE = """Usage:
  lnurl-client request-channel <url|ip>
  lnurl-client request-withdraw <url|ip> <amount_msat> [description]
  lnurl-client request-auth <url|ip>"""


def print_usage() -> None:
    """Print usage to stderr."""
    err_console.print(USAGE, highlight=False)


def fail(message: str) -> NoReturn:
    """Report an error on stderr and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    raise typer.Exit(1)


def parse_address(address: str) -> str:
    """Normalize the server address or exit with usage."""
    try:
        return normalize_address(address)
    except LNURLClientError as e:
        print_usage()
        fail(str(e))


def get_app() -> Application:
    """Get initialized application instance."""
    try:
        config = load_config()
        application = Application(config)
        application.initialize()
        return application
    except Exception as e:
        fail(f"Failed to initialize application: {e}")


@app.command()
def request_channel(
    address: str = typer.Argument(..., help="LNURL server URL, LNURL or ip[:port]"),
):
    """
    Ask an LNURL server to open a channel to the local node.

    Connects to the server's node, then calls back with our node id.
    """
    base_url = parse_address(address)
    application = get_app()

    try:
        with console.status("[bold yellow]Requesting channel..."):
            outcome = application.channel_service.request_channel(base_url)

        if not outcome.ok:
            fail(f"Channel open failed: {outcome.reason}")

        console.print("\n[bold green]✓ Channel opened successfully![/bold green]\n")

        table = Table(show_header=False, box=None)
        if outcome.transaction_id:
            table.add_row("Transaction ID:", f"[cyan]{outcome.transaction_id}[/cyan]")
        if outcome.channel_id:
            table.add_row("Channel ID:", f"[cyan]{outcome.channel_id}[/cyan]")
        console.print(table)

    except LNURLClientError as e:
        fail(str(e))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    finally:
        application.cleanup()


@app.command()
def request_withdraw(
    address: str = typer.Argument(..., help="LNURL server URL, LNURL or ip[:port]"),
    amount_msat: int = typer.Argument(..., min=0, help="Amount to receive in millisatoshis"),
    description: Optional[str] = typer.Argument(None, help="Invoice description (server default if omitted)"),
):
    """
    Receive a payment from an LNURL-withdraw server.

    Creates an invoice on the local node and submits it to the server.
    """
    base_url = parse_address(address)
    application = get_app()

    try:
        with console.status("[bold yellow]Requesting withdrawal..."):
            outcome = application.withdraw_service.withdraw(
                base_url,
                amount_msat=amount_msat,
                description=description,
            )

        if not outcome.ok:
            fail(f"Withdrawal failed: {outcome.reason}")

        console.print("\n[bold green]✓ Withdrawal successful! Payment received.[/bold green]\n")

        invoice = application.withdraw_service.invoice
        table = Table(show_header=False, box=None)
        table.add_row("Amount:", f"[green]{amount_msat} msat[/green]")
        if invoice is not None:
            table.add_row("Invoice label:", f"[cyan]{invoice.label}[/cyan]")
        console.print(table)

    except LNURLClientError as e:
        fail(str(e))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    finally:
        application.cleanup()


@app.command()
def request_auth(
    address: str = typer.Argument(..., help="LNURL server URL, LNURL or ip[:port]"),
):
    """
    Authenticate to an LNURL server by signing its challenge.
    """
    base_url = parse_address(address)
    application = get_app()

    try:
        with console.status("[bold yellow]Authenticating..."):
            outcome = application.auth_service.authenticate(base_url)

        if not outcome.ok:
            fail(f"Authentication failed: {outcome.reason}")

        console.print("\n[bold green]✓ Authentication successful![/bold green]\n")

    except LNURLClientError as e:
        fail(str(e))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    finally:
        application.cleanup()


app.command("lnurl-auth", hidden=True)(request_auth)


@app.command()
def version():
    """Display version information."""
    from lnurl_client import __version__

    console.print(Panel(
        f"[bold cyan]LNURL Client[/bold cyan]\n"
        f"Version: [green]{__version__}[/green]\n"
        f"LNURL channel, withdraw and auth for Core Lightning",
        title="Version Info",
        border_style="cyan",
    ))


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    try:
        exit_code = app(standalone_mode=False)
    except click.UsageError as e:
        err_console.print(f"[red]Error:[/red] {e.format_message()}", highlight=False)
        print_usage()
        sys.exit(1)
    except click.Abort:
        sys.exit(1)
    except Exception as e:
        err_console.print(f"\n[red]Fatal error:[/red] {e}")
        sys.exit(1)

    sys.exit(exit_code if isinstance(exit_code, int) else 0)


if __name__ == "__main__":
    main()
