"""Command-line interface for the MoteBase admin console.

This module provides the CLI commands for signing in and managing
collections and records of a MoteBase server.
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from motebase_admin.application.services.console import AdminConsole
from motebase_admin.core.config import Settings, get_settings
from motebase_admin.core.exceptions import ConsoleError
from motebase_admin.core.logging import configure_logging, get_logger
from motebase_admin.domain.entities.route import RouteName
from motebase_admin.domain.services.field_kinds import display_value
from motebase_admin.infrastructure.api.client import MoteBaseClient
from motebase_admin.infrastructure.persistence.session_store import SessionStore
from motebase_admin.infrastructure.ui.terminal import ClickConfirmation, ClickNotifier

logger = get_logger(__name__)


def create_client(settings: Settings) -> MoteBaseClient:
    """Build the REST client for a command run."""
    return MoteBaseClient.from_settings(settings)


def run_console(
    ctx: click.Context,
    action: Callable[[AdminConsole], Awaitable[Any]],
    assume_yes: bool = False,
    require_session: bool = True,
) -> Any:
    """Run one console action on a fresh event loop.

    The persisted session is restored first; commands that need it exit
    with status 1 when nobody is logged in.
    """
    settings: Settings = ctx.obj["settings"]

    async def execute() -> Any:
        async with create_client(settings) as client:
            console = AdminConsole(
                client,
                session_store=SessionStore(settings.session_file),
                confirm=ClickConfirmation(assume_yes=assume_yes),
                notifier=ClickNotifier(),
                settings=settings,
            )
            if require_session and not await console.restore_session():
                click.echo("Not logged in. Run 'motebase-admin login' first.", err=True)
                raise click.exceptions.Exit(1)
            return await action(console)

    try:
        return asyncio.run(execute())
    except ConsoleError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


async def _open_collection(console: AdminConsole, name: str) -> None:
    outcome = await console.navigate(f"/collections/{name}")
    if outcome.route.name != RouteName.COLLECTION:
        raise click.exceptions.Exit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="MoteBase Admin")
@click.option(
    "--api-url",
    type=str,
    default=None,
    help="MoteBase server URL (overrides MOTEBASE_ADMIN_API_URL)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides config)",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str | None, log_level: str | None) -> None:
    """MoteBase Admin - operator console for a MoteBase server."""
    overrides: dict[str, Any] = {}
    if api_url:
        overrides["api_url"] = api_url
    if log_level:
        overrides["log_level"] = log_level

    settings = Settings(**overrides) if overrides else get_settings()
    configure_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--email", type=str, default=None, help="Operator email (prompts if not provided)")
@click.option("--password", type=str, default=None, help="Operator password (prompts if not provided)")
@click.pass_context
def login(ctx: click.Context, email: str | None, password: str | None) -> None:
    """Sign in and remember the session."""
    if email is None:
        email = click.prompt("Email", type=str)
    if password is None:
        password = click.prompt("Password", hide_input=True)

    async def action(console: AdminConsole) -> bool:
        return await console.login(email, password)

    if not run_console(ctx, action, require_session=False):
        raise SystemExit(1)
    click.echo(f"Logged in as {email}")


@cli.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Forget the remembered session."""

    async def action(console: AdminConsole) -> None:
        await console.logout()

    run_console(ctx, action, require_session=False)
    click.echo("Logged out.")


@cli.command()
@click.option("--search", type=str, default="", help="Only show collections whose name or type contains this text")
@click.pass_context
def collections(ctx: click.Context, search: str) -> None:
    """List collections."""

    async def action(console: AdminConsole) -> list[Any]:
        console.state.browser.search(search)
        return console.state.browser.filtered(console.state.collections)

    found = run_console(ctx, action)
    if not found:
        click.echo("No collections found.")
        return
    for collection in found:
        click.echo(f"{collection.name:<30} {collection.type:<6} {len(collection.fields)} field(s)")


@cli.command()
@click.argument("collection")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--filter", "filter_query", type=str, default="", help="Filter expression")
@click.option("--sort", type=str, default=None, help="Field to sort by; prefix with '-' for descending")
@click.pass_context
def records(ctx: click.Context, collection: str, page: int, filter_query: str, sort: str | None) -> None:
    """List one page of a collection's records."""

    async def action(console: AdminConsole) -> tuple[list[str], list[list[str]], str]:
        await _open_collection(console, collection)
        state = console.state.records
        reload = False
        if filter_query:
            state.set_filter(filter_query)
            reload = True
        if sort:
            state.toggle_sort(sort.lstrip("-"))
            if sort.startswith("-"):
                state.toggle_sort(sort.lstrip("-"))
            reload = True
        if page > 1:
            state.page = page
            reload = True
        if reload:
            await console.load_records()

        fields = console.visible_fields()
        header = ["id"] + [f.name + state.sort_indicator(f.name) for f in fields]
        rows = [
            [str(item.get("id", ""))] + [display_value(item.get(f.name), f) for f in fields]
            for item in state.items
        ]
        footer = f"Page {state.page} of {state.total_pages} ({state.total_items} records)"
        return header, rows, footer

    header, rows, footer = run_console(ctx, action)
    click.echo("\t".join(header))
    for row in rows:
        click.echo("\t".join(row))
    click.echo(footer)


@cli.command("delete-records")
@click.argument("collection")
@click.argument("record_ids", nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_records(ctx: click.Context, collection: str, record_ids: tuple[str, ...], yes: bool) -> None:
    """Delete records by id."""

    async def action(console: AdminConsole) -> int:
        await _open_collection(console, collection)
        console.state.records.selected_ids = list(dict.fromkeys(record_ids))
        return await console.bulk_delete()

    deleted = run_console(ctx, action, assume_yes=yes)
    click.echo(f"Deleted {deleted} of {len(set(record_ids))} record(s).")
    if deleted < len(set(record_ids)):
        raise SystemExit(1)


@cli.command()
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of the dated default name",
)
@click.pass_context
def export(ctx: click.Context, output: Path | None) -> None:
    """Export all collection definitions to a JSON file."""

    async def action(console: AdminConsole) -> tuple[str, str] | None:
        return await console.export_collections()

    result = run_console(ctx, action)
    if result is None:
        raise SystemExit(1)
    filename, content = result
    target = output or Path(filename)
    target.write_text(content, encoding="utf-8")
    click.echo(f"Exported collections to {target}")


@cli.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--delete-missing", is_flag=True, help="Delete collections not present in the file")
@click.option("--apply", "apply_changes", is_flag=True, help="Apply the import after the review")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def import_collections(
    ctx: click.Context, file: Path, delete_missing: bool, apply_changes: bool, yes: bool
) -> None:
    """Review (and optionally apply) a collection import file."""
    text = file.read_text(encoding="utf-8")

    async def action(console: AdminConsole) -> bool:
        session = console.open_import()
        if not console.load_import(text):
            click.echo(f"Error: {session.error}", err=True)
            return False
        console.set_delete_missing(delete_missing)

        for change in session.changes:
            click.echo(_describe_change(change))
        summary = session.summary
        click.echo(
            f"{summary.creates} to create, {summary.updates} to update, "
            f"{summary.renames} to rename, {summary.deletes} to delete, "
            f"{summary.conflicts} conflict(s)"
        )

        if not apply_changes:
            return not session.has_conflicts
        if not session.has_conflicts and not console.confirm.confirm("Apply this import?"):
            click.echo("Cancelled.")
            return True
        if not await console.apply_import():
            return False
        click.echo("Import applied.")
        return True

    if not run_console(ctx, action, assume_yes=yes):
        raise SystemExit(1)


def _describe_change(change: Any) -> str:
    if change.kind == "create":
        return f"  + create {change.name} ({change.field_count} fields)"
    if change.kind == "rename":
        return f"  ~ rename {change.old_name} -> {change.name}"
    if change.kind == "update":
        parts = [label for label, flag in (("schema", change.schema_changed), ("rules", change.rules_changed)) if flag]
        return f"  ~ update {change.name} ({', '.join(parts) or 'no changes'})"
    if change.kind == "conflict":
        return f"  ! conflict {change.name}: {change.reason}"
    return f"  - delete {change.name}"


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Display console configuration."""
    settings: Settings = ctx.obj["settings"]

    click.echo(f"""
MoteBase Admin v{settings.app_version}
{'=' * 40}

Server:
  API URL:      {settings.base_url}
  Timeout:      {settings.request_timeout or 'none'}

Session:
  File:         {settings.session_file}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `motebase-admin` command is run
    or when using `python -m motebase_admin`.
    """
    cli()


if __name__ == "__main__":
    main()
