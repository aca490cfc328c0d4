"""Diagram renderer: positioned tree → backend-independent scene.

The scene is plain data (circles, labels, connector paths, click actions).
Backends such as ``svg_export`` turn it into markup; layout and render
decisions stay testable without any drawing surface.
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass, field
from urllib.parse import quote

from loguru import logger

from ....config.defaults import (
    DEFAULT_ADMIN_URL_TEMPLATE,
    DEFAULT_LABEL_BUDGET,
    DEFAULT_NODE_RADIUS,
    ELLIPSIS,
    INHERIT_MARKER,
    PALETTE_LIGHTNESS,
    PALETTE_SATURATION,
)
from ....core.models import count_distinct_metric_values, resolve_metric
from .layout_engine import TreeLayout


@dataclass(frozen=True)
class LinkShape:
    """Horizontal cubic connector from parent to child."""

    source: str
    target: str
    path: str


@dataclass(frozen=True)
class NodeShape:
    """Marker, labels and interaction for one node."""

    name: str
    x: float
    y: float
    radius: float
    color: str
    label: str  # Primary label, truncated
    full_label: str  # Primary label before truncation (tooltip)
    short_name: str  # Secondary label
    is_leaf: bool
    admin_url: str
    click_action: str = "open"


@dataclass(frozen=True)
class Scene:
    """Everything a backend needs to draw one render."""

    active_key: str
    width: float
    height: float
    view_box: tuple[float, float, float, float]
    nodes: list[NodeShape] = field(default_factory=list)
    links: list[LinkShape] = field(default_factory=list)
    legend: dict[str, str] = field(default_factory=dict)  # value -> color

    @property
    def is_empty(self) -> bool:
        return not self.nodes


class OrdinalColorScale:
    """Discrete color scale over evenly spaced hues.

    Values receive colors in the order they are first seen, cycling through
    the palette if more values appear than it holds.
    """

    def __init__(self, size: int) -> None:
        self.palette = generate_palette(size)
        self._assigned: dict[str, str] = {}

    def __call__(self, value: str) -> str:
        color = self._assigned.get(value)
        if color is None:
            color = self.palette[len(self._assigned) % len(self.palette)]
            self._assigned[value] = color
        return color

    @property
    def domain(self) -> dict[str, str]:
        return dict(self._assigned)


def generate_palette(size: int) -> list[str]:
    """Return ``size`` hex colors spread around the hue circle."""
    size = max(size, 1)
    colors = []
    for i in range(size):
        r, g, b = colorsys.hls_to_rgb(i / size, PALETTE_LIGHTNESS, PALETTE_SATURATION)
        colors.append(f"#{round(r * 255):02x}{round(g * 255):02x}{round(b * 255):02x}")
    return colors


def truncate_label(text: str, budget: int = DEFAULT_LABEL_BUDGET) -> str:
    """Cut ``text`` to ``budget`` characters, appending an ellipsis if cut."""
    if len(text) <= budget:
        return text
    return text[:budget] + ELLIPSIS


def format_value_label(value: str, is_inherited: bool) -> str:
    return f"{value} {INHERIT_MARKER}" if is_inherited else value


def horizontal_link_path(
    source: tuple[float, float], target: tuple[float, float]
) -> str:
    """SVG path for a horizontal connector between two (x, y) layout points.

    Layout ``x`` is vertical on screen and ``y`` horizontal, so coordinates
    are swapped when emitted.
    """
    sx, sy = source
    tx, ty = target
    mid = (sy + ty) / 2
    return f"M{sy:g},{sx:g}C{mid:g},{sx:g} {mid:g},{tx:g} {ty:g},{tx:g}"


def admin_url_for(name: str, template: str = DEFAULT_ADMIN_URL_TEMPLATE) -> str:
    return template.format(name=quote(name, safe=""))


def build_scene(
    layout: TreeLayout,
    active_key: str,
    node_radius: float = DEFAULT_NODE_RADIUS,
    label_budget: int = DEFAULT_LABEL_BUDGET,
    admin_url_template: str = DEFAULT_ADMIN_URL_TEMPLATE,
) -> Scene:
    """Convert a layout into a fresh scene colored by ``active_key``.

    Args:
        layout: Positioned tree from ``compute_layout``
        active_key: Metric key driving color and primary label
        node_radius: Marker radius
        label_budget: Max primary label length before truncation
        admin_url_template: Per-entity admin page, ``{name}`` is substituted

    Returns:
        A new Scene; nothing is shared with scenes from earlier renders
    """
    if layout.is_empty:
        return Scene(
            active_key=active_key,
            width=layout.width,
            height=layout.height,
            view_box=layout.view_box,
        )

    root = layout.nodes[0].node
    scale = OrdinalColorScale(count_distinct_metric_values(root, active_key) + 1)

    links = [
        LinkShape(
            source=link.source.name,
            target=link.target.name,
            path=horizontal_link_path(
                (link.source.x, link.source.y), (link.target.x, link.target.y)
            ),
        )
        for link in layout.links
    ]

    nodes = []
    for placed in layout.nodes:
        metric = resolve_metric(placed.node, active_key)
        full_label = format_value_label(metric.value, metric.is_inherited)
        nodes.append(
            NodeShape(
                name=placed.name,
                x=placed.x,
                y=placed.y,
                radius=node_radius,
                color=scale(metric.value),
                label=truncate_label(full_label, label_budget),
                full_label=full_label,
                short_name=placed.node.short_name,
                is_leaf=not placed.node.children,
                admin_url=admin_url_for(placed.name, admin_url_template),
            )
        )

    logger.debug(
        f"Scene: {len(nodes)} nodes, {len(links)} links, "
        f"{len(scale.domain)} colors for '{active_key}'"
    )

    return Scene(
        active_key=active_key,
        width=layout.width,
        height=layout.height,
        view_box=layout.view_box,
        nodes=nodes,
        links=links,
        legend=scale.domain,
    )
