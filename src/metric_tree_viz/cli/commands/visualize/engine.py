"""Render cycle: view state → fetch → layout → scene → detail panel.

One ``VisualizationEngine`` owns a view state and the most recent render
result. A render either replaces the whole result or leaves the previous one
untouched; nothing is patched in place.

Design Decision: last initiated render wins

Rationale: the fetch is the only await point, so two renders can overlap
when the filter changes twice quickly. Each render takes a generation
number when it starts; a render whose fetch returns after a newer render
started is discarded, so an older response can never overwrite a newer view.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ....config.defaults import PARAM_CONFIG, PARAM_OPEN, PARAM_QUERY
from ....config.settings import VisualizationSettings
from ....core.exceptions import DataFetchError, StaleRenderError
from ....core.models import Node
from ....core.providers import DataProvider
from ....core.view_state import ViewState
from .detail_panel import DetailPanel, build_detail_panel
from .layout_engine import TreeLayout, compute_layout
from .renderer import Scene, admin_url_for, build_scene


@dataclass(frozen=True)
class RenderResult:
    """Everything one completed render produced."""

    generation: int
    view_state: ViewState
    tree: Node | None
    layout: TreeLayout
    scene: Scene
    panel: DetailPanel | None

    @property
    def fragment(self) -> str:
        return self.view_state.to_fragment()


class VisualizationEngine:
    """Drives render cycles for one diagram."""

    def __init__(
        self,
        provider: DataProvider,
        view_state: ViewState | None = None,
        settings: VisualizationSettings | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            provider: Source of metric trees
            view_state: Initial view state (empty if not given)
            settings: Layout and render settings (defaults if not given)
        """
        self.provider = provider
        self.view_state = view_state or ViewState()
        self.settings = settings or VisualizationSettings()
        self.result: RenderResult | None = None
        self.panel: DetailPanel | None = None
        self._generation = 0

    @property
    def scene(self) -> Scene | None:
        return self.result.scene if self.result else None

    @property
    def tree(self) -> Node | None:
        return self.result.tree if self.result else None

    async def render(self) -> RenderResult | None:
        """Run one full render cycle.

        Returns:
            The new result, or the current one if this render was superseded

        Raises:
            DataFetchError: If the provider failed for the latest render; the
                previous result and the view state are left as they were.
                Failures of superseded renders are dropped like stale results
        """
        try:
            return await self._render_once()
        except StaleRenderError as e:
            logger.debug(f"Dropping stale render: {e}")
            return self.result

    async def _render_once(self) -> RenderResult:
        self._generation += 1
        generation = self._generation
        state = self.view_state.copy()

        try:
            tree = await self.provider.fetch_tree(state.query)
        except DataFetchError as e:
            # A superseded render's failure is as stale as its success
            if generation != self._generation:
                raise StaleRenderError(generation, self._generation) from e
            logger.warning(f"Render {generation} aborted: {e}")
            raise

        if generation != self._generation:
            raise StaleRenderError(generation, self._generation)

        layout_settings = self.settings.layout
        render_settings = self.settings.render
        layout = compute_layout(
            tree,
            layout_settings.width,
            dx=layout_settings.dx,
            min_dy=layout_settings.min_dy,
            margin=layout_settings.margin,
            label_room=layout_settings.label_room,
        )
        scene = build_scene(
            layout,
            state.active_key,
            node_radius=render_settings.node_radius,
            label_budget=render_settings.label_budget,
            admin_url_template=render_settings.admin_url_template,
        )

        # The open node is resolved during the same pass over positioned nodes
        panel = None
        open_name = state.open_node
        if open_name is not None:
            for placed in layout.nodes:
                if placed.name == open_name:
                    panel = self._build_panel(placed.node, state)
                    break
            else:
                logger.debug(f"Open node '{open_name}' not in tree, panel stays closed")

        result = RenderResult(
            generation=generation,
            view_state=state,
            tree=tree,
            layout=layout,
            scene=scene,
            panel=panel,
        )
        self.result = result
        self.panel = panel
        return result

    def _build_panel(self, node: Node, state: ViewState) -> DetailPanel:
        return build_detail_panel(
            node,
            state,
            admin_url=admin_url_for(
                node.name, self.settings.render.admin_url_template
            ),
        )

    def open_node(self, name: str) -> DetailPanel | None:
        """Open the detail panel for a node of the current tree.

        Replaces any panel already open. Unknown names leave the panel closed.
        """
        if self.result is None:
            return None
        for placed in self.result.layout.nodes:
            if placed.name == name:
                self.view_state.set(PARAM_OPEN, name)
                self.panel = self._build_panel(placed.node, self.view_state)
                return self.panel
        logger.debug(f"Cannot open '{name}': not in current tree")
        return None

    def close_panel(self) -> None:
        """Close the detail panel; the diagram itself is not re-rendered."""
        self.view_state.set(PARAM_OPEN, None)
        self.panel = None

    async def select_metric(self, key: str) -> RenderResult | None:
        """Make ``key`` the active metric and re-render."""
        self.view_state.set(PARAM_CONFIG, key)
        return await self.render()

    async def set_query(self, query: str | None) -> RenderResult | None:
        """Change the filter text and re-render."""
        self.view_state.set(PARAM_QUERY, query or None)
        return await self.render()
