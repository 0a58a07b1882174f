"""Run the forwarder for every configured bot."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from src.cli.output import format_error
from src.forwarder.config import ConfigError, load_bots, load_timings_from_env
from src.forwarder.log import configure_logging
from src.forwarder.runner import FactoryError, load_factory, run_bots

console = Console()


def run_command(config_path: str, factory_path: str, log_level: str) -> None:
    """Start all bots and keep running until interrupted."""
    try:
        bots = load_bots(Path(config_path))
        factory = load_factory(factory_path)
    except ConfigError as e:
        format_error(console, str(e))
        raise typer.Exit(code=1)
    except FactoryError as e:
        format_error(console, str(e), hint="Pass an import path such as 'mypkg.clients:build_clients'")
        raise typer.Exit(code=1)

    configure_logging(log_level)
    console.print(f"[green]Starting {len(bots)} bot(s)[/green]")
    asyncio.run(run_bots(bots, factory, load_timings_from_env()))
