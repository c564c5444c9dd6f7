from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("api")
def api(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8000,
) -> None:
    """Start the FastAPI REST API server."""
    import uvicorn

    from contentful_graph.api.app import create_app

    app = create_app()
    console.print(f"[green]Starting API server on {host}:{port}[/green]")
    uvicorn.run(app, host=host, port=port)
