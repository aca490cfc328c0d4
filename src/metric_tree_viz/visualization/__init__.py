"""Public API for metric tree visualization.

This module re-exports the visualization components from their internal
implementation paths, providing a stable public interface for external consumers.

Exported symbols:

Layout and scene:
    compute_layout: Tidy tree layout for a Node tree and a target width.
    build_scene: Convert a layout into colored, labeled shapes for one metric.
    build_detail_panel: Group one node's metrics by key path.

Render cycle:
    VisualizationEngine: Fetch → layout → scene → panel, with stale-response
        protection and last-good-result retention.
    RenderResult: Output of one render.

Exporters:
    scene_to_svg: Scene → SVG markup.
    panel_to_html: Detail panel → HTML markup.

Server:
    create_app: FastAPI app serving the interactive page.
    find_free_port: Find an available TCP port for the local server.
    start_visualization_server: Start the HTTP visualization server.

Example::

    from metric_tree_viz.core import JsonFileTreeProvider, ViewState
    from metric_tree_viz.visualization import VisualizationEngine, scene_to_svg

    engine = VisualizationEngine(
        JsonFileTreeProvider(Path("projects.json")),
        ViewState.from_fragment("#config=state"),
    )
    result = await engine.render()
    svg = scene_to_svg(result.scene, result.view_state)
"""

from metric_tree_viz.cli.commands.visualize.detail_panel import (
    DetailPanel,
    PanelGroup,
    PanelRow,
    build_detail_panel,
    split_key,
)
from metric_tree_viz.cli.commands.visualize.engine import (
    RenderResult,
    VisualizationEngine,
)
from metric_tree_viz.cli.commands.visualize.layout_engine import (
    PositionedNode,
    TreeLayout,
    compute_layout,
)
from metric_tree_viz.cli.commands.visualize.renderer import (
    NodeShape,
    Scene,
    build_scene,
    truncate_label,
)
from metric_tree_viz.cli.commands.visualize.server import (
    create_app,
    find_free_port,
    start_visualization_server,
)
from metric_tree_viz.cli.commands.visualize.svg_export import (
    panel_to_html,
    scene_to_svg,
)

__all__ = [
    # Layout and scene
    "PositionedNode",
    "TreeLayout",
    "compute_layout",
    "NodeShape",
    "Scene",
    "build_scene",
    "truncate_label",
    "DetailPanel",
    "PanelGroup",
    "PanelRow",
    "build_detail_panel",
    "split_key",
    # Render cycle
    "RenderResult",
    "VisualizationEngine",
    # Exporters
    "panel_to_html",
    "scene_to_svg",
    # Server
    "create_app",
    "find_free_port",
    "start_visualization_server",
]
