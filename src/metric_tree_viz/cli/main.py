"""Main CLI application for metric-tree-viz."""

import typer
from loguru import logger

from .. import __version__
from .commands.visualize import export, serve

app = typer.Typer(
    name="metric-tree-viz",
    help="🌳 Interactive node-link diagrams for multi-metric trees",
    add_completion=False,
    rich_markup_mode="rich",
)

app.command()(serve)
app.command()(export)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"metric-tree-viz {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """🌳 Render metric trees as interactive node-link diagrams."""
    if verbose:
        logger.enable("metric_tree_viz")
        logger.info("Verbose logging enabled")


if __name__ == "__main__":
    app()
