"""Validate a bot configuration file."""

from pathlib import Path

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, format_table, json_output
from src.forwarder.config import ConfigError, load_bots
from src.forwarder.log import redact
from src.steam.exceptions import InvalidSecretError
from src.steam.guard import decode_secret

console = Console()


def _describe(config_path: Path) -> list[dict]:
    bots = load_bots(config_path)
    rows = []
    for bot in bots:
        try:
            decode_secret(bot.shared_secret)
            secret_ok = True
        except InvalidSecretError:
            secret_ok = False
        rows.append({
            **redact(bot.model_dump(mode="json")),
            "targets": list(bot.targets),
            "shared_secret_valid": secret_ok,
        })
    return rows


def check_command(config_path: str, json_flag: bool) -> None:
    """Load, validate and summarise the bot configuration."""
    try:
        bots = _describe(Path(config_path))
    except ConfigError as e:
        if json_flag:
            json_output(console, {"status": "invalid", "error": str(e)})
        else:
            format_error(console, str(e), hint="Each bot needs username, password, shared_secret, "
                                               "identity_secret and target")
        raise typer.Exit(code=1)

    bad_secrets = [b["username"] for b in bots if not b["shared_secret_valid"]]
    if json_flag:
        json_output(console, {"status": "invalid" if bad_secrets else "valid", "bots": bots})
    else:
        rows = [
            (b["username"], ", ".join(b["targets"]), b["proxy"] or "-", f"{b['app_id']}/{b['context_id']}",
             "ok" if b["shared_secret_valid"] else "invalid")
            for b in bots
        ]
        format_table(console, "Configured Bots", ["Account", "Targets", "Proxy", "Inventory", "Shared Secret"], rows)
        if not bad_secrets:
            format_success(console, f"{len(bots)} bot(s) configured correctly")
        else:
            format_error(console, f"Shared secret is not valid base64 for: {', '.join(bad_secrets)}")
    if bad_secrets:
        raise typer.Exit(code=1)
