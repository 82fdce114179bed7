"""
CLI commands for Pwned Passwords breach checking.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json

import click
import httpx
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from propvault.config import VaultConfig
from propvault.errors import BreachCheckError
from propvault.pwned.client import PwnedPasswordsClient
from propvault.pwned.models import RiskLevel

console = Console()


RISK_STYLES = {
    RiskLevel.SAFE: "green",
    RiskLevel.LOW: "yellow",
    RiskLevel.MEDIUM: "dark_orange",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold white on red",
}


def risk_color(risk: RiskLevel) -> str:
    """Rich style for a risk level."""
    return RISK_STYLES[risk]


@click.group()
@click.pass_context
def pwned(ctx: click.Context) -> None:
    """Pwned Passwords - breach checking commands.

    Password checks use k-anonymity: only the first 5 characters of
    the SHA-1 hash are sent to the API.
    """
    ctx.ensure_object(dict)


@pwned.command("password")
@click.option("--password", "-p", help="Password to check (or prompts securely)")
@click.option("--hash", "password_hash", help="SHA-1 hash to check instead")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def check_password(
    ctx: click.Context,
    password: str | None,
    password_hash: str | None,
    json_output: bool,
) -> None:
    """Check if a password has been exposed in data breaches.

    Uses k-anonymity - only the first 5 characters of the SHA-1 hash
    are sent to the API. Your password never leaves your system.

    Example:
        propvault pwned password
        propvault pwned password --hash 5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8
    """
    if not password and not password_hash:
        password = click.prompt("Password to check", hide_input=True)

    config: VaultConfig = ctx.obj.setdefault("config", VaultConfig.from_env())
    http_client: httpx.Client | None = ctx.obj.get("http_client")

    try:
        with PwnedPasswordsClient(
            endpoint_base=config.pwned_endpoint,
            timeout=config.pwned_timeout,
            client=http_client,
        ) as client, Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Checking password...", total=None)
            if password_hash:
                result = client.check_hash(password_hash)
            else:
                result = client.check(password)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--hash")
    except BreachCheckError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)
    finally:
        password = None  # noqa: F841

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return

    style = risk_color(result.risk_level)
    lines = [
        f"Exposure: [{style}]{result.risk_level.value.upper()}[/{style}]"
        f" ({result.times_seen:,} breach records)",
        f"Range queried: {result.hash_prefix}",
        "",
        result.risk_description,
    ]
    console.print(Panel(
        "\n".join(lines),
        title="Breach index lookup",
        border_style=style,
    ))
