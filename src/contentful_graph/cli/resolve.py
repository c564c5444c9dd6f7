import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from contentful_graph.core.export import export_graph
from contentful_graph.core.links import ResolutionPolicy, is_resource
from contentful_graph.core.resolver import resolve_document

console = Console()


def _summary(node: Any) -> tuple[str, str, str, str]:
    if not is_resource(node):
        return ("-", type(node).__name__, "-", "-")
    sys = node["sys"]
    content_type = ((sys.get("contentType") or {}).get("sys") or {}).get("id", "-")
    fields = node.get("fields") or {}
    return (sys["id"], sys["type"], content_type, ", ".join(sorted(fields)))


def resolve(
    path: Annotated[Path, typer.Argument(help="Saved Delivery API collection response (JSON).")],
    policy: Annotated[
        ResolutionPolicy, typer.Option(help="Expand only what items reach, or every included resource.")
    ] = ResolutionPolicy.ON_DEMAND,
    as_json: Annotated[bool, typer.Option("--json", help="Print the resolved items as JSON.")] = False,
) -> None:
    """Resolve the links of a saved response offline."""
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[red]Could not read {path}: {exc}[/red]")
        raise typer.Exit(1) from exc
    if not isinstance(document, dict):
        console.print(f"[red]{path} does not contain a JSON object.[/red]")
        raise typer.Exit(1)

    resolved = resolve_document(document, policy)

    if as_json:
        console.print_json(
            data={
                "items": export_graph(resolved.items),
                "errors": [e.model_dump(by_alias=True) for e in resolved.errors],
            }
        )
        return

    table = Table(show_lines=False)
    for header in ("id", "type", "content_type", "fields"):
        table.add_column(header)
    for node in resolved.items:
        table.add_row(*_summary(node))
    console.print(table)
    console.print(
        f"({len(resolved.items)} items, {resolved.stats.expanded} expanded, "
        f"{resolved.stats.back_references} back-references)"
    )
    for error in resolved.errors:
        console.print(f"[yellow]Unresolved {error.link_type} link {error.id} ({error.reason})[/yellow]")
