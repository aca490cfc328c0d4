"""Detail panel builder: one node's metrics as a nested outline.

Metric keys are space-separated paths such as ``"refs/heads/* push admins"``.
Every segment but the last becomes a group header; groups are created once
per unique path prefix and reused by every key sharing it. The last segment
becomes a row showing the resolved value. Each row carries the view-state
fragment that makes its key the active metric.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ....config.defaults import (
    GROUP_PATH_DELIMITER,
    KEY_SEGMENT_DELIMITER,
    PARAM_CONFIG,
    PARAM_OPEN,
)
from ....core.models import Node, resolve_metric
from ....core.view_state import ViewState
from .renderer import format_value_label


@dataclass
class PanelRow:
    label: str  # Last key segment
    key: str  # Full metric key
    value: str
    is_inherited: bool
    active: bool  # Key is the active metric
    target_fragment: str  # View state that activates this key

    @property
    def display_value(self) -> str:
        return format_value_label(self.value, self.is_inherited)


@dataclass
class PanelGroup:
    """A group header with nested groups and a row list.

    ``rows`` stays ``None`` until the first row lands in the group, so empty
    groups carry no row container.
    """

    title: str
    path: str
    depth: int
    groups: list[PanelGroup] = field(default_factory=list)
    rows: list[PanelRow] | None = None


@dataclass
class DetailPanel:
    node_name: str
    short_name: str
    admin_url: str | None
    body: PanelGroup  # Untitled root group at depth 0
    close_fragment: str

    @property
    def is_empty(self) -> bool:
        return not self.body.groups and not self.body.rows


def split_key(key: str) -> list[str]:
    """Split a metric key into path segments.

    Keys that are empty or irregularly spaced (leading, trailing or repeated
    spaces) are kept whole as a single segment.
    """
    segments = key.split(KEY_SEGMENT_DELIMITER)
    if any(not segment for segment in segments):
        return [key]
    return segments


def build_detail_panel(
    node: Node,
    view_state: ViewState,
    admin_url: str | None = None,
) -> DetailPanel:
    """Group ``node``'s metrics by key path.

    Keys are processed in sorted order, so the same metrics always produce
    the same groups and the same row order within each group.

    Args:
        node: Node whose metrics are shown
        view_state: Current view state; rows link to it with ``config`` replaced
        admin_url: Optional link to the node's admin page

    Returns:
        DetailPanel; a node without metrics yields an empty body
    """
    state = view_state.with_param(PARAM_OPEN, node.name)
    active_key = view_state.active_key
    body = PanelGroup(title="", path="", depth=0)
    # Keyed by segment tuple; joined paths could collide on hyphenated segments
    groups: dict[tuple[str, ...], PanelGroup] = {(): body}

    for key in sorted(node.metrics):
        segments = split_key(key)
        parent = body
        for depth, segment in enumerate(segments[:-1], start=1):
            prefix = tuple(segments[:depth])
            group = groups.get(prefix)
            if group is None:
                group = PanelGroup(
                    title=segment,
                    path=GROUP_PATH_DELIMITER.join(prefix),
                    depth=depth,
                )
                parent.groups.append(group)
                groups[prefix] = group
            parent = group

        metric = resolve_metric(node, key)
        if parent.rows is None:
            parent.rows = []
        parent.rows.append(
            PanelRow(
                label=segments[-1],
                key=key,
                value=metric.value,
                is_inherited=metric.is_inherited,
                active=key == active_key,
                target_fragment=state.with_param(PARAM_CONFIG, key).to_fragment(),
            )
        )

    return DetailPanel(
        node_name=node.name,
        short_name=node.short_name,
        admin_url=admin_url,
        body=body,
        close_fragment=view_state.with_param(PARAM_OPEN, None).to_fragment(),
    )
