"""Print the current Steam Guard code for a configured account."""

from pathlib import Path

import typer
from rich.console import Console

from src.cli.output import format_error, json_output
from src.forwarder.config import ConfigError, load_bots
from src.steam.exceptions import InvalidSecretError
from src.steam.guard import generate_auth_code

console = Console()


def code_command(config_path: str, account: str, json_flag: bool) -> None:
    """Generate the two-factor code the forwarder would use right now."""
    try:
        bots = load_bots(Path(config_path))
    except ConfigError as e:
        format_error(console, str(e))
        raise typer.Exit(code=1)

    bot = next((b for b in bots if b.username == account), None)
    if bot is None:
        format_error(console, f"No bot named {account!r} in {config_path}",
                     hint=f"Configured: {', '.join(b.username for b in bots)}")
        raise typer.Exit(code=1)

    try:
        code = generate_auth_code(bot.shared_secret)
    except InvalidSecretError as e:
        format_error(console, str(e))
        raise typer.Exit(code=1)

    if json_flag:
        json_output(console, {"account": bot.username, "code": code})
    else:
        console.print(f"[cyan]{bot.username}[/cyan]: [bold]{code}[/bold]")
