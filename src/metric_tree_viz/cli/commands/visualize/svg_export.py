"""SVG and HTML output for scenes and detail panels.

Markup carries ``data-*`` attributes with the view-state fragment each
interaction leads to; the browser client only swaps fragments in and out.
"""

from __future__ import annotations

from html import escape

from ....config.defaults import PARAM_OPEN
from ....core.view_state import ViewState
from .detail_panel import DetailPanel, PanelGroup
from .renderer import Scene


def _num(value: float) -> str:
    return f"{value:g}"


def scene_to_svg(scene: Scene, view_state: ViewState | None = None) -> str:
    """Render a scene as a standalone SVG element.

    Args:
        scene: Scene from ``build_scene``
        view_state: Used to compute each node's click target fragment

    Returns:
        SVG markup; an empty scene yields an empty ``<svg>``
    """
    state = view_state or ViewState()
    if scene.is_empty:
        return '<svg class="metric-tree" width="0" height="0"></svg>'

    view_box = " ".join(_num(v) for v in scene.view_box)
    parts = [
        f'<svg class="metric-tree" xmlns="http://www.w3.org/2000/svg" '
        f'width="{_num(scene.width)}" height="{_num(scene.height)}" '
        f'viewBox="{view_box}" '
        f'style="max-width: 100%; height: auto; font: 10px sans-serif;">',
        '<g class="links" fill="none" stroke="#555" stroke-opacity="0.4" '
        'stroke-width="1.5">',
    ]
    for link in scene.links:
        parts.append(
            f'<path d="{link.path}" data-source="{escape(link.source)}" '
            f'data-target="{escape(link.target)}"/>'
        )
    parts.append("</g>")

    parts.append('<g class="nodes" stroke-linejoin="round" stroke-width="3">')
    for node in scene.nodes:
        target = state.with_param(PARAM_OPEN, node.name).to_fragment()
        # Leaves put labels on the right, inner nodes on the left
        anchor, offset = ("start", 8) if node.is_leaf else ("end", -8)
        parts.append(
            f'<g class="node" transform="translate({_num(node.y)},{_num(node.x)})" '
            f'data-node="{escape(node.name)}" data-action="{node.click_action}" '
            f'data-fragment="{escape(target)}">'
            f"<title>{escape(node.name)}\n{escape(node.full_label)}</title>"
            f'<circle r="{_num(node.radius)}" fill="{node.color}"/>'
            f'<text class="value-label" dy="-0.4em" x="{offset}" '
            f'text-anchor="{anchor}">{escape(node.label)}</text>'
            f'<a href="{escape(node.admin_url)}" target="_blank" rel="noopener">'
            f'<text class="name-label" dy="1em" x="{offset}" '
            f'text-anchor="{anchor}">{escape(node.short_name)}</text></a>'
            "</g>"
        )
    parts.append("</g>")
    parts.append("</svg>")
    return "".join(parts)


def _group_to_html(group: PanelGroup) -> str:
    parts = []
    for child in group.groups:
        parts.append(
            f'<details class="panel-group depth-{child.depth}" open '
            f'data-path="{escape(child.path)}" '
            f'style="margin-left: {(child.depth - 1) * 12}px;">'
            f"<summary>{escape(child.title)}</summary>"
            f"{_group_to_html(child)}</details>"
        )
    if group.rows is not None:
        parts.append('<ul class="panel-rows">')
        for row in group.rows:
            classes = "panel-row active" if row.active else "panel-row"
            inherited = ' data-inherited="true"' if row.is_inherited else ""
            parts.append(
                f'<li class="{classes}"{inherited}>'
                f'<a href="#{escape(row.target_fragment)}" class="metric-key" '
                f'data-fragment="{escape(row.target_fragment)}" '
                f'title="{escape(row.key)}">{escape(row.label)}</a>'
                f'<span class="metric-value">{escape(row.display_value)}</span>'
                "</li>"
            )
        parts.append("</ul>")
    return "".join(parts)


def panel_to_html(panel: DetailPanel | None) -> str:
    """Render a detail panel; ``None`` yields an empty string."""
    if panel is None:
        return ""
    admin = (
        f'<a class="admin-link" href="{escape(panel.admin_url)}" '
        f'target="_blank" rel="noopener">open</a>'
        if panel.admin_url
        else ""
    )
    return (
        f'<div class="detail-panel" data-node="{escape(panel.node_name)}">'
        f'<div class="panel-header">'
        f'<span class="panel-title" title="{escape(panel.node_name)}">'
        f"{escape(panel.short_name)}</span>{admin}"
        f'<button class="close-btn" data-fragment="{escape(panel.close_fragment)}">'
        "×</button></div>"
        f'<div class="panel-body">{_group_to_html(panel.body)}</div>'
        "</div>"
    )
