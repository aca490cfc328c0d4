"""HTTP server for the interactive metric tree page.

The page forwards its location hash to ``/api/render``; the server runs one
render cycle for that view state and returns diagram and panel markup.
"""

import socket
import webbrowser

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger
from rich.console import Console
from rich.panel import Panel

from ....config.defaults import DEFAULT_PORT, PORT_RANGE_END
from ....config.settings import VisualizationSettings
from ....core.exceptions import DataFetchError
from ....core.providers import DataProvider
from ....core.view_state import ViewState
from .engine import VisualizationEngine
from .svg_export import panel_to_html, scene_to_svg
from .templates import generate_html_template

console = Console()

NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def find_free_port(start_port: int = DEFAULT_PORT, end_port: int = PORT_RANGE_END) -> int:
    """Find a free port in the given range.

    Args:
        start_port: Starting port number to check
        end_port: Ending port number to check

    Returns:
        First available port in the range

    Raises:
        OSError: If no free ports available in range
    """
    for test_port in range(start_port, end_port + 1):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(("", test_port))
                return test_port
        except OSError:
            continue
    raise OSError(f"No free ports available in range {start_port}-{end_port}")


def create_app(
    provider: DataProvider,
    settings: VisualizationSettings | None = None,
    title: str = "Metric Tree",
) -> FastAPI:
    """Create FastAPI application for the visualization server.

    Args:
        provider: Source of metric trees
        settings: Layout and render settings
        title: Page title

    Returns:
        Configured FastAPI application

    Error Handling:
    - Provider failure: 502 with ``{"error": ...}``; the page keeps showing
      the previous diagram
    """
    settings = settings or VisualizationSettings()
    app = FastAPI(title=title)

    @app.get("/")
    async def serve_index() -> HTMLResponse:
        """Serve the page shell with no-cache headers."""
        return HTMLResponse(generate_html_template(title), headers=NO_CACHE)

    @app.get("/api/render")
    async def render(request: Request) -> JSONResponse:
        """Render the diagram for the view state carried in the query string.

        Returns:
            JSON with svg, panel_html, fragment and summary fields
        """
        view_state = ViewState.from_fragment(request.url.query)
        engine = VisualizationEngine(provider, view_state, settings)
        try:
            result = await engine.render()
        except DataFetchError as e:
            logger.warning(f"Render failed for '{view_state.to_fragment()}': {e}")
            return JSONResponse(
                {"error": str(e), "fragment": view_state.to_fragment()},
                status_code=502,
                headers=NO_CACHE,
            )

        return JSONResponse(
            {
                "fragment": result.fragment,
                "query": view_state.query,
                "active_key": view_state.active_key,
                "open": result.panel.node_name if result.panel else None,
                "node_count": len(result.scene.nodes),
                "legend": result.scene.legend,
                "svg": scene_to_svg(result.scene, view_state),
                "panel_html": panel_to_html(result.panel),
            },
            headers=NO_CACHE,
        )

    @app.get("/api/tree")
    async def get_tree(query: str | None = None) -> JSONResponse:
        """Return the raw tree for a filter query."""
        try:
            tree = await provider.fetch_tree(query or None)
        except DataFetchError as e:
            return JSONResponse({"error": str(e)}, status_code=502)
        return JSONResponse(tree.to_json() if tree else None, headers=NO_CACHE)

    return app


def start_visualization_server(
    port: int,
    provider: DataProvider,
    settings: VisualizationSettings | None = None,
    auto_open: bool = True,
) -> None:
    """Start HTTP server for the visualization.

    Args:
        port: Port number to use
        provider: Source of metric trees
        settings: Layout and render settings
        auto_open: Whether to automatically open browser

    Raises:
        typer.Exit: If server fails to start
    """
    try:
        app = create_app(provider, settings)
        url = f"http://localhost:{port}"

        console.print()
        console.print(
            Panel.fit(
                f"[green]✓[/green] Visualization server running\n\n"
                f"URL: [cyan]{url}[/cyan]\n\n"
                f"[dim]Press Ctrl+C to stop[/dim]",
                title="Server Started",
                border_style="green",
            )
        )

        if auto_open:
            webbrowser.open(url)

        config = uvicorn.Config(
            app,
            host="127.0.0.1",
            port=port,
            log_level="warning",
            access_log=False,
        )
        server = uvicorn.Server(config)
        server.run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Stopping server...[/yellow]")
    except OSError as e:
        if "Address already in use" in str(e):
            console.print(
                f"[red]✗ Port {port} is already in use. Try a different port with --port[/red]"
            )
        else:
            console.print(f"[red]✗ Server error: {e}[/red]")
        import typer

        raise typer.Exit(1)
