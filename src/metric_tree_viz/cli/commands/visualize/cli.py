"""Visualization commands: serve the interactive page or export a render."""

from __future__ import annotations

import asyncio
from pathlib import Path

import orjson
import typer
from loguru import logger
from rich.console import Console

from ....config.defaults import get_default_config_path
from ....config.settings import VisualizationSettings
from ....core.exceptions import MetricTreeVizError
from ....core.providers import DataProvider, HttpTreeProvider, JsonFileTreeProvider
from ....core.view_state import ViewState
from .engine import RenderResult, VisualizationEngine
from .server import find_free_port, start_visualization_server
from .svg_export import panel_to_html, scene_to_svg
from .templates import generate_static_html

console = Console()

EXPORT_FORMATS = (".svg", ".html", ".json")


def _make_provider(
    data: Path | None, url: str | None, settings: VisualizationSettings
) -> DataProvider:
    if data and url:
        console.print("[red]Error:[/red] Use either --data or --url, not both")
        raise typer.Exit(1)
    if data:
        return JsonFileTreeProvider(data)
    if url:
        return HttpTreeProvider(url, timeout=settings.provider_timeout)
    console.print("[red]Error:[/red] One of --data or --url is required")
    raise typer.Exit(1)


def _load_settings(config_file: Path | None) -> VisualizationSettings:
    path = config_file or get_default_config_path(Path.cwd())
    try:
        return VisualizationSettings.load(path)
    except MetricTreeVizError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def serve(
    data: Path | None = typer.Option(
        None,
        "--data",
        "-d",
        help="JSON file with a nested tree or a flat project list",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    url: str | None = typer.Option(
        None, "--url", "-u", help="Base URL of a tree endpoint (GET {url}/tree)"
    ),
    port: int | None = typer.Option(
        None, "--port", help="Port for HTTP server (auto-detected if not specified)"
    ),
    width: int | None = typer.Option(
        None, "--width", "-w", help="Target diagram width", min=100
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Settings YAML file", dir_okay=False
    ),
    no_open: bool = typer.Option(
        False, "--no-open", help="Do not open the browser automatically"
    ),
) -> None:
    """🌳 Serve the interactive metric tree page.

    [bold cyan]Examples:[/bold cyan]

    [green]Serve a local tree file:[/green]
        $ metric-tree-viz serve --data projects.json

    [green]Proxy a live endpoint:[/green]
        $ metric-tree-viz serve --url https://review.example.com/config/server/zenith
    """
    settings = _load_settings(config_file)
    if width:
        settings.layout.width = width
    provider = _make_provider(data, url, settings)

    try:
        chosen_port = port or find_free_port()
    except OSError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    start_visualization_server(
        chosen_port, provider, settings, auto_open=not no_open
    )


def export(
    output: Path = typer.Option(
        ..., "--output", "-o", help="Output file (.svg, .html or .json)"
    ),
    data: Path | None = typer.Option(
        None,
        "--data",
        "-d",
        help="JSON file with a nested tree or a flat project list",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    url: str | None = typer.Option(
        None, "--url", "-u", help="Base URL of a tree endpoint (GET {url}/tree)"
    ),
    fragment: str = typer.Option(
        "", "--fragment", "-f", help="View state, e.g. '#config=state&open=a/b'"
    ),
    width: int | None = typer.Option(
        None, "--width", "-w", help="Target diagram width", min=100
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Settings YAML file", dir_okay=False
    ),
) -> None:
    """📄 Render one view state to a static file.

    [bold cyan]Examples:[/bold cyan]

    [green]Color by submit type and open one project:[/green]
        $ metric-tree-viz export -d projects.json -o tree.html \\
            -f "#config=default_submit_type&open=team/app"
    """
    suffix = output.suffix.lower()
    if suffix not in EXPORT_FORMATS:
        console.print(
            f"[red]Error:[/red] Unsupported output '{suffix}'. "
            f"Use one of: {', '.join(EXPORT_FORMATS)}"
        )
        raise typer.Exit(1)

    settings = _load_settings(config_file)
    if width:
        settings.layout.width = width
    provider = _make_provider(data, url, settings)
    view_state = ViewState.from_fragment(fragment)

    try:
        result = asyncio.run(VisualizationEngine(provider, view_state, settings).render())
    except MetricTreeVizError as e:
        logger.error(f"Export failed: {e}")
        console.print(f"[red]Error:[/red] Export failed: {e}")
        raise typer.Exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(render_export(result, suffix))

    console.print(
        f"[green]✓[/green] Wrote {len(result.scene.nodes)} nodes "
        f"(metric: [cyan]{view_state.active_key}[/cyan]) to {output}"
    )


def render_export(result: RenderResult, suffix: str) -> bytes:
    """Serialize a render result for the given file suffix."""
    svg = scene_to_svg(result.scene, result.view_state)
    if suffix == ".svg":
        return svg.encode("utf-8")
    if suffix == ".html":
        return generate_static_html(svg, panel_to_html(result.panel)).encode("utf-8")
    return orjson.dumps(
        {
            "fragment": result.fragment,
            "scene": result.scene,
            "panel": result.panel,
        },
        option=orjson.OPT_INDENT_2,
    )
