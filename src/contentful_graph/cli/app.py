import logging
from typing import Annotated

import typer

from contentful_graph.cli.query import query_app
from contentful_graph.cli.resolve import resolve
from contentful_graph.cli.serve import serve_app

app = typer.Typer(
    name="contentful-graph",
    help="Contentful Graph CLI: resolve links in delivery responses and query a space.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution details.")] = False,
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


app.command("resolve")(resolve)
app.add_typer(query_app, name="query")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
