"""Tidy tree layout for the metric tree diagram.

This module positions an arbitrary-depth tree inside a bounded viewport:
    - Depth maps to the horizontal axis (``y = depth * dy``)
    - Siblings stack on the vertical axis, at least ``dx`` apart
    - Parents are centered over the vertical extent of their children

Design Principles:
    - Deterministic: Same tree + width → same positions (no randomness)
    - Compact: Subtrees are packed as tightly as separation allows
    - Iterative: No recursion, deep trees do not hit the recursion limit
    - Performance: O(n) time (Buchheim, Jünger & Leipert's improvement of
      the Walker algorithm, the same one d3-hierarchy's ``tree()`` uses)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from ....config.defaults import (
    DEFAULT_DX,
    DEFAULT_LABEL_ROOM,
    DEFAULT_MARGIN,
    DEFAULT_MIN_DY,
)
from ....core.models import Node, tree_depth


@dataclass(frozen=True)
class PositionedNode:
    """A node with its computed position.

    ``x`` is the vertical (sibling) axis, ``y`` the horizontal (depth) axis.
    """

    node: Node
    x: float
    y: float
    depth: int
    parent_name: str | None = None

    @property
    def name(self) -> str:
        return self.node.name


@dataclass(frozen=True)
class LayoutLink:
    """Connector from a parent position to a child position."""

    source: PositionedNode
    target: PositionedNode


@dataclass(frozen=True)
class Bounds:
    x_min: float = 0.0
    x_max: float = 0.0
    y_min: float = 0.0
    y_max: float = 0.0


@dataclass(frozen=True)
class TreeLayout:
    """Layout output: positions in pre-order, links and canvas size."""

    nodes: list[PositionedNode] = field(default_factory=list)
    links: list[LayoutLink] = field(default_factory=list)
    bounds: Bounds = field(default_factory=Bounds)
    width: float = 0.0
    height: float = 0.0
    view_box: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    dx: float = DEFAULT_DX
    dy: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.nodes


class _TidyNode:
    """Working state for one node during the tidy layout passes.

    Field names follow the published algorithm: ``prelim`` (preliminary x),
    ``mod`` (modifier), ``change``/``shift`` (pending subtree moves),
    ``thread`` (contour link) and ``ancestor``.
    """

    __slots__ = (
        "node",
        "parent",
        "children",
        "index",
        "depth",
        "prelim",
        "mod",
        "change",
        "shift",
        "thread",
        "ancestor",
        "default_ancestor",
        "x",
    )

    def __init__(self, node: Node | None, index: int, depth: int) -> None:
        self.node = node
        self.parent: _TidyNode | None = None
        self.children: list[_TidyNode] = []
        self.index = index
        self.depth = depth
        self.prelim = 0.0
        self.mod = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: _TidyNode | None = None
        self.ancestor: _TidyNode = self
        self.default_ancestor: _TidyNode | None = None
        self.x = 0.0


def _separation(a: _TidyNode, b: _TidyNode) -> float:
    # Siblings sit one slot apart, cousins two
    return 1.0 if a.parent is b.parent else 2.0


def _next_left(v: _TidyNode) -> _TidyNode | None:
    return v.children[0] if v.children else v.thread


def _next_right(v: _TidyNode) -> _TidyNode | None:
    return v.children[-1] if v.children else v.thread


def _move_subtree(wm: _TidyNode, wp: _TidyNode, shift: float) -> None:
    change = shift / (wp.index - wm.index)
    wp.change -= change
    wp.shift += shift
    wm.change += change
    wp.prelim += shift
    wp.mod += shift


def _execute_shifts(v: _TidyNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.prelim += shift
        w.mod += shift
        change += w.change
        shift += w.shift + change


def _next_ancestor(vim: _TidyNode, v: _TidyNode, ancestor: _TidyNode) -> _TidyNode:
    return vim.ancestor if vim.ancestor.parent is v.parent else ancestor


def _apportion(
    v: _TidyNode, w: _TidyNode | None, ancestor: _TidyNode
) -> _TidyNode:
    """Push ``v``'s subtree right until it clears its left siblings' subtrees."""
    if w is None:
        return ancestor

    vip: _TidyNode | None = v
    vop: _TidyNode = v
    vim: _TidyNode | None = w
    vom: _TidyNode = v.parent.children[0]  # type: ignore[union-attr]
    sip = vip.mod
    sop = vop.mod
    sim = vim.mod
    som = vom.mod

    vim = _next_right(vim)
    vip = _next_left(vip)
    while vim is not None and vip is not None:
        vom = _next_left(vom)  # type: ignore[assignment]
        vop = _next_right(vop)  # type: ignore[assignment]
        vop.ancestor = v
        shift = vim.prelim + sim - vip.prelim - sip + _separation(vim, vip)
        if shift > 0:
            _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
            sip += shift
            sop += shift
        sim += vim.mod
        sip += vip.mod
        som += vom.mod
        sop += vop.mod
        vim = _next_right(vim)
        vip = _next_left(vip)

    if vim is not None and _next_right(vop) is None:
        vop.thread = vim
        vop.mod += sim - sop
    if vip is not None and _next_left(vom) is None:
        vom.thread = vip
        vom.mod += sip - som
        ancestor = v
    return ancestor


def _build_working_tree(root: Node) -> tuple[_TidyNode, list[_TidyNode]]:
    """Mirror the tree into working nodes; returns (sentinel, pre-order list).

    The sentinel is a virtual parent of the root so the root can be treated
    like any other node during the first walk.
    """
    sentinel = _TidyNode(None, 0, -1)
    top = _TidyNode(root, 0, 0)
    top.parent = sentinel
    sentinel.children = [top]

    preorder: list[_TidyNode] = []
    stack = [top]
    while stack:
        current = stack.pop()
        preorder.append(current)
        for i, child in enumerate(current.node.children):  # type: ignore[union-attr]
            tidy = _TidyNode(child, i, current.depth + 1)
            tidy.parent = current
            current.children.append(tidy)
        stack.extend(reversed(current.children))
    return sentinel, preorder


def _postorder(top: _TidyNode) -> list[_TidyNode]:
    # Reversing a right-to-left pre-order gives a left-to-right post-order
    order: list[_TidyNode] = []
    stack = [top]
    while stack:
        current = stack.pop()
        order.append(current)
        stack.extend(current.children)
    order.reverse()
    return order


def _first_walk(v: _TidyNode) -> None:
    parent = v.parent
    siblings = parent.children  # type: ignore[union-attr]
    w = siblings[v.index - 1] if v.index else None
    if v.children:
        _execute_shifts(v)
        midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
        if w is not None:
            v.prelim = w.prelim + _separation(v, w)
            v.mod = v.prelim - midpoint
        else:
            v.prelim = midpoint
    elif w is not None:
        v.prelim = w.prelim + _separation(v, w)
    parent.default_ancestor = _apportion(  # type: ignore[union-attr]
        v, w, parent.default_ancestor or siblings[0]  # type: ignore[union-attr]
    )


def compute_depth_spacing(
    width: float, max_depth: int, margin: float, min_dy: float
) -> float:
    """Horizontal distance between depth levels.

    ``max((width - margin) / (max_depth + 1), min_dy)`` keeps shallow trees
    spread across the viewport and deep trees readable.
    """
    return max((width - margin) / (max_depth + 1), min_dy)


def compute_layout(
    root: Node | None,
    width: float,
    dx: float = DEFAULT_DX,
    min_dy: float = DEFAULT_MIN_DY,
    margin: float = DEFAULT_MARGIN,
    label_room: float = DEFAULT_LABEL_ROOM,
) -> TreeLayout:
    """Compute node positions and links for a tree.

    Args:
        root: Tree root (None draws nothing)
        width: Target viewport width
        dx: Vertical separation between siblings
        min_dy: Lower bound for the horizontal separation between levels
        margin: Subtracted from ``width`` before splitting it across levels
        label_room: Space kept right of the deepest level for leaf labels

    Returns:
        TreeLayout with nodes in pre-order, links, bounds and canvas size.
        The canvas height spans the vertical extent plus ``dx`` on each side.
        The canvas width is ``width`` unless the depth extent, the ``dy/3``
        left offset and ``label_room`` need more; it then grows to fit.

    Time Complexity: O(n) where n = number of nodes
    Space Complexity: O(n) for the working tree

    Example:
        >>> layout = compute_layout(Node(name="root"), 600)
        >>> (layout.nodes[0].x, layout.nodes[0].y)
        (0.0, 0.0)
    """
    if root is None:
        logger.debug("No tree to layout")
        return TreeLayout(dx=dx)

    max_depth = tree_depth(root)
    dy = compute_depth_spacing(width, max_depth, margin, min_dy)

    sentinel, preorder = _build_working_tree(root)

    # First walk runs post-order with siblings left to right
    for tidy in _postorder(sentinel.children[0]):
        _first_walk(tidy)
    sentinel.mod = -preorder[0].prelim

    # Pre-order second walk: accumulate modifiers into final positions
    for tidy in preorder:
        parent = tidy.parent
        tidy.x = tidy.prelim + parent.mod  # type: ignore[union-attr]
        tidy.mod += parent.mod  # type: ignore[union-attr]

    positioned: dict[int, PositionedNode] = {}
    nodes: list[PositionedNode] = []
    links: list[LayoutLink] = []
    for tidy in preorder:
        parent = tidy.parent
        parent_pos = positioned.get(id(parent))
        placed = PositionedNode(
            node=tidy.node,  # type: ignore[arg-type]
            x=tidy.x * dx,
            y=tidy.depth * dy,
            depth=tidy.depth,
            parent_name=parent_pos.name if parent_pos else None,
        )
        positioned[id(tidy)] = placed
        nodes.append(placed)
        if parent_pos is not None:
            links.append(LayoutLink(source=parent_pos, target=placed))

    x_min = min(n.x for n in nodes)
    x_max = max(n.x for n in nodes)
    y_min = min(n.y for n in nodes)
    y_max = max(n.y for n in nodes)
    height = x_max - x_min + dx * 2
    # Clamped dy can push deep levels past the requested width
    canvas_width = max(width, y_max - y_min + dy / 3 + label_room)

    logger.debug(
        f"Tree layout: {len(nodes)} nodes, depth={max_depth}, "
        f"dy={dy:.1f}, {canvas_width:.1f}x{height:.1f}"
    )

    return TreeLayout(
        nodes=nodes,
        links=links,
        bounds=Bounds(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max),
        width=canvas_width,
        height=height,
        view_box=(y_min - dy / 3, x_min - dx, canvas_width, height),
        dx=dx,
        dy=dy,
    )
