"""
propvault CLI - Main entry point for the command-line interface.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from propvault import __version__
from propvault.config import VaultConfig

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="propvault")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """propvault - encrypted local property store

    Keeps named secrets in one file that only your user account on this
    host can decrypt, and checks passwords against known breaches.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("console", console)
    config = ctx.obj.setdefault("config", VaultConfig.from_env())

    errors = config.validate()
    if errors:
        console.print(f"[red]Configuration errors: {', '.join(errors)}[/red]")
        raise SystemExit(1)


# Import and register subcommand groups
from propvault.store.cli import store
from propvault.pwned.cli import pwned

main.add_command(store)
main.add_command(pwned)


if __name__ == "__main__":
    main()
