"""
CLI commands for the property store.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.table import Table

from propvault.config import VaultConfig
from propvault.errors import (
    DecryptionFailed,
    NotFound,
    PropvaultError,
)
from propvault.store.protector import Protector, default_protector
from propvault.store.store import (
    DeleteOutcome,
    auto_set_property,
    create_store,
    delete_property,
    get_property,
    list_properties,
    set_property,
)

console = Console()


def get_config(ctx: click.Context) -> VaultConfig:
    """Get configuration from the context or environment."""
    ctx.ensure_object(dict)
    return ctx.obj.setdefault("config", VaultConfig.from_env())


def get_protector(ctx: click.Context) -> Protector:
    """Get the protector for the current user."""
    ctx.ensure_object(dict)
    if ctx.obj.get("protector") is None:
        ctx.obj["protector"] = default_protector(get_config(ctx))
    return ctx.obj["protector"]


def resolve_path(ctx: click.Context, store_path: str | None) -> Path:
    if store_path:
        return Path(store_path)
    return get_config(ctx).get_store_path()


@contextmanager
def store_errors() -> Iterator[None]:
    """Report store errors and exit non-zero."""
    try:
        yield
    except NotFound as e:
        console.print(f"[red]Store not found: {e.path}[/red]")
        console.print("Create one with: propvault store new")
        raise SystemExit(1)
    except DecryptionFailed as e:
        console.print(f"[red]Cannot decrypt store: {e}[/red]")
        console.print("The store can only be opened by the user and host that created it.")
        raise SystemExit(1)
    except PropvaultError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)


path_option = click.option(
    "--path", "-p", "store_path",
    type=click.Path(dir_okay=False),
    help="Store file (default: PROPVAULT_STORE_PATH or ~/.propvault/properties.vault)",
)


@click.group()
@click.pass_context
def store(ctx: click.Context) -> None:
    """Encrypted property store commands.

    Properties are kept in a single file encrypted for the current
    user on this host.
    """
    ctx.ensure_object(dict)


@store.command("new")
@path_option
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing store")
@click.pass_context
def store_new(ctx: click.Context, store_path: str | None, force: bool) -> None:
    """Create a new, empty store."""
    path = resolve_path(ctx, store_path)

    if path.exists() and not force:
        click.confirm(
            f"Store {path} already exists. Replace it with an empty store?",
            abort=True,
        )

    with store_errors():
        create_store(path, get_protector(ctx))

    console.print(f"[green]Created store: {path}[/green]")


@store.command("set")
@click.argument("name")
@click.option("--value", help="Property value (prompts securely if not provided)")
@path_option
@click.pass_context
def store_set(ctx: click.Context, name: str, value: str | None, store_path: str | None) -> None:
    """Add or update a property."""
    if value is None:
        value = click.prompt("Value", hide_input=True, confirmation_prompt=True)

    path = resolve_path(ctx, store_path)
    with store_errors():
        set_property(path, name, value, get_protector(ctx))
    value = None  # noqa: F841

    console.print(f"[green]Saved property: {name}[/green]")


@store.command("auto")
@click.argument("name")
@click.option("--length", "-l", type=int, help="Secret length (default: PROPVAULT_SECRET_LENGTH or 32)")
@click.option("--special", "-s", is_flag=True, help="Include special characters")
@click.option("--show", is_flag=True, help="Print the generated value")
@path_option
@click.pass_context
def store_auto(
    ctx: click.Context,
    name: str,
    length: int | None,
    special: bool,
    show: bool,
    store_path: str | None,
) -> None:
    """Set a property to a generated secret."""
    path = resolve_path(ctx, store_path)
    if length is None:
        length = get_config(ctx).default_secret_length

    with store_errors():
        value = auto_set_property(
            path, name, length, get_protector(ctx), use_special_characters=special,
        )

    console.print(f"[green]Saved generated {length} character property: {name}[/green]")
    if show:
        click.echo(value)


@store.command("get")
@click.argument("name")
@path_option
@click.pass_context
def store_get(ctx: click.Context, name: str, store_path: str | None) -> None:
    """Print a property value."""
    path = resolve_path(ctx, store_path)
    with store_errors():
        value = get_property(path, name, get_protector(ctx))
    click.echo(value)


@store.command("list")
@path_option
@click.pass_context
def store_list(ctx: click.Context, store_path: str | None) -> None:
    """List property names (not values)."""
    path = resolve_path(ctx, store_path)
    with store_errors():
        names = list_properties(path, get_protector(ctx))

    if not names:
        console.print("[yellow]Store is empty[/yellow]")
        return

    table = Table(title=f"Properties ({len(names)})")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)


@store.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@path_option
@click.pass_context
def store_delete(ctx: click.Context, name: str, yes: bool, store_path: str | None) -> None:
    """Delete a property."""
    if not yes:
        click.confirm(f"Delete property {name}?", abort=True)

    path = resolve_path(ctx, store_path)
    with store_errors():
        outcome = delete_property(path, name, get_protector(ctx))

    if outcome == DeleteOutcome.PROPERTY_NOT_FOUND:
        console.print(f"[yellow]Property not found: {name}[/yellow]")
        return

    console.print(f"[green]Deleted property: {name}[/green]")
