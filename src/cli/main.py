"""Main CLI entry point for the Steam item forwarder."""

import typer
from rich.console import Console

from src.cli.commands.check import check_command
from src.cli.commands.code import code_command
from src.cli.commands.run import run_command

app = typer.Typer(
    name="steam-forwarder",
    help="Forward tradable Steam items from managed accounts to their recipients",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.command("run")
def run(
    config_path: str = typer.Option(..., "-c", "--config", help="Bot configuration YAML"),
    factory: str = typer.Option(..., "-f", "--factory", help="Client factory, as module:attribute"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Log every bot in and forward items until stopped."""
    run_command(config_path, factory, log_level)


@app.command("check")
def check(
    config_path: str = typer.Option(..., "-c", "--config", help="Bot configuration YAML"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Validate the bot configuration."""
    check_command(config_path, json_flag)


@app.command("code")
def code(
    config_path: str = typer.Option(..., "-c", "--config", help="Bot configuration YAML"),
    account: str = typer.Option(..., "-a", "--account", help="Account username"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the current Steam Guard code for an account."""
    code_command(config_path, account, json_flag)


def main() -> None:
    """Entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        raise typer.Exit(130)
