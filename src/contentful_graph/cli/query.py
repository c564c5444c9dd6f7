import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from contentful_graph.client import ContentfulClient
from contentful_graph.config import ContentfulOptions
from contentful_graph.core.export import export_graph
from contentful_graph.errors import ContentfulException

query_app = typer.Typer(help="Query a space through the Delivery or Preview API.")
console = Console()

R = TypeVar("R")


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]], total: int) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} of {total} rows)")


def _get_client(preview: bool) -> ContentfulClient:
    options = ContentfulOptions.from_env()
    if preview:
        options = options.model_copy(update={"use_preview_api": True})
    if not options.space_id:
        console.print("[red]CONTENTFUL_SPACE_ID is not set.[/red]")
        raise typer.Exit(1)
    return ContentfulClient.from_options(options)


def _run(client: ContentfulClient, call: Callable[[ContentfulClient], Awaitable[R]]) -> R:
    async def _main() -> R:
        try:
            return await call(client)
        finally:
            await client.dispose()

    try:
        return asyncio.run(_main())
    except ContentfulException as exc:
        console.print(f"[red]{exc.status_code}: {exc.message}[/red]")
        raise typer.Exit(1) from exc


@query_app.command("entries")
def entries(
    content_type: Annotated[str | None, typer.Option(help="Only entries of this content type.")] = None,
    entry_id: Annotated[str | None, typer.Option("--id", help="Only the entry with this id.")] = None,
    limit: Annotated[int, typer.Option(help="Max entries to return.")] = 100,
    skip: Annotated[int, typer.Option(help="Entries to skip.")] = 0,
    preview: Annotated[bool, typer.Option(help="Use the Preview API.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print resolved entries as JSON.")] = False,
) -> None:
    """Fetch entries and resolve their links."""
    client = _get_client(preview)
    query = {"content_type": content_type, "sys.id": entry_id, "limit": limit, "skip": skip}
    collection = _run(client, lambda c: c.get_entries(query))

    if as_json:
        console.print_json(data={"total": collection.total, "items": export_graph(collection.items)})
        return
    rows = []
    for node in collection.items:
        sys = node["sys"]
        content_type_id = ((sys.get("contentType") or {}).get("sys") or {}).get("id", "-")
        rows.append((sys["id"], content_type_id, sys.get("updatedAt", "-")))
    _render_table(["id", "content_type", "updated_at"], rows, collection.total)
    for error in collection.errors:
        console.print(f"[yellow]Unresolved {error.link_type} link {error.id}[/yellow]")


@query_app.command("assets")
def assets(
    limit: Annotated[int, typer.Option(help="Max assets to return.")] = 100,
    skip: Annotated[int, typer.Option(help="Assets to skip.")] = 0,
    preview: Annotated[bool, typer.Option(help="Use the Preview API.")] = False,
) -> None:
    """List assets."""
    client = _get_client(preview)
    collection = _run(client, lambda c: c.get_assets({"limit": limit, "skip": skip}))
    rows = [
        (a.sys.id, a.title or "-", a.file.url if a.file and a.file.url else "-")
        for a in collection.items
    ]
    _render_table(["id", "title", "url"], rows, collection.total)
