"""Typer CLI for Later search: init, import and search commands."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from result import Ok

from later.config import Config
from later.models.content import parse_content_type
from later.models.search import SearchQuery, SearchResult

app = typer.Typer(
    name="later",
    help="Later: search notes, todo lists and lists within a space.",
    no_args_is_help=True,
)

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", help="Directory holding the Later database"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _config(data_dir: Path | None, user_id: str | None = None) -> Config:
    if data_dir is None:
        return Config(user_id=user_id)
    return Config(data_dir=data_dir, user_id=user_id)


@app.command()
def init(data_dir: DataDirOption = None) -> None:
    """Create the database and its full-text indexes."""
    config = _config(data_dir)
    asyncio.run(_do_init(config))


async def _do_init(config: Config) -> None:
    from later.data.db import Database

    async with Database(config.db_path) as db:
        if db.schema_was_rebuilt:
            typer.echo("Schema version changed; existing content was dropped.")
    typer.echo(f"Database ready at {config.db_path}")


@app.command("import")
def import_snapshot(
    snapshot: Annotated[Path, typer.Argument(help="JSON file with content tables")],
    data_dir: DataDirOption = None,
) -> None:
    """Import spaces, notes, lists and items from a JSON snapshot."""
    try:
        payload = json.loads(snapshot.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"Error: cannot read {snapshot}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    config = _config(data_dir)
    asyncio.run(_do_import(config, payload))


async def _do_import(config: Config, payload: dict) -> None:
    from later.data.db import Database
    from later.data.importer import ContentImporter

    async with Database(config.db_path) as db:
        result = await ContentImporter(db).import_snapshot(payload)
    typer.echo(f"Done! {result}")


@app.command()
def search(
    text: Annotated[str, typer.Argument(help="Search text")],
    space: Annotated[str, typer.Option("--space", "-s", help="Space ID to search in")],
    content_type: Annotated[
        list[str] | None,
        typer.Option("--type", "-t", help="Restrict to a content type (repeatable)"),
    ] = None,
    tag: Annotated[
        list[str] | None, typer.Option("--tag", help="Require one of these tags (repeatable)")
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", min=1, help="Results per content type (defaults to the configured limit)"),
    ] = None,
    user: Annotated[str | None, typer.Option("--user", help="Restrict to a user ID")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print results as JSON")] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Search content in a space."""
    try:
        types = [parse_content_type(value) for value in content_type] if content_type else None
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--type") from exc
    query = SearchQuery(
        text=text,
        space_id=space,
        content_types=frozenset(types) if types is not None else None,
        tags=tuple(tag) if tag else None,
        limit=limit,
    )
    config = _config(data_dir, user_id=user)
    exit_code = asyncio.run(_do_search(config, query, as_json))
    if exit_code:
        raise typer.Exit(code=exit_code)


async def _do_search(config: Config, query: SearchQuery, as_json: bool) -> int:
    from later.services.container import ServiceContainer

    services = await ServiceContainer.create(config)
    try:
        result = await services.search_service.search(query)
    finally:
        await services.close()

    if not isinstance(result, Ok):
        error = result.err_value
        typer.echo(f"Error ({error.code.value}): {error.get_user_message()}", err=True)
        return 2

    results = result.ok_value
    if as_json:
        typer.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
    else:
        for r in results:
            typer.echo(_format_result(r))
        typer.echo(f"\n{len(results)} results")
    return 0


def _format_result(result: SearchResult) -> str:
    line = f"[{result.type.display_name}] {result.title}"
    if result.parent_name:
        line += f" (in {result.parent_name})"
    line += f"  {result.updated_at:%Y-%m-%d %H:%M}"
    if result.preview:
        line += f"\n    {result.preview}"
    return line
