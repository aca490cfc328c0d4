"""Tree model: nodes, metric values and traversal helpers.

The tree is fetched as one immutable snapshot per render cycle. Models are
frozen pydantic models so that nothing downstream of the fetch (layout,
renderer, detail panel) can mutate the snapshot it was handed.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..config.defaults import NOT_AVAILABLE


class MetricValue(BaseModel):
    """A named, possibly inherited metric value attached to a node."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str | None = Field(default=None, description="Pre-formatted value")
    is_inherited: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_inherited", "isInherited"),
        description="Value was inherited from an ancestor or default",
    )

    @property
    def is_available(self) -> bool:
        return bool(self.value)


SENTINEL = MetricValue(value=NOT_AVAILABLE, is_inherited=False)


class Node(BaseModel):
    """One addressable entity in the hierarchy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    metrics: dict[str, MetricValue] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metrics", "values"),
    )
    children: list[Node] = Field(default_factory=list)

    @property
    def short_name(self) -> str:
        return short_name(self.name)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Node:
        """Build a tree from the provider's JSON shape.

        ``values``/``metrics`` may be ``null`` on the wire; that is treated
        as an empty mapping.
        """
        return cls.model_validate(_normalize(data))

    def to_json(self) -> dict[str, Any]:
        """Serialize using the provider's wire field names."""
        return {
            "name": self.name,
            "values": {
                key: {"value": metric.value, "is_inherited": metric.is_inherited}
                for key, metric in self.metrics.items()
            },
            "children": [child.to_json() for child in self.children],
        }


Node.model_rebuild()


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    # Iterative copy: fixes null containers without recursing per level
    root = dict(data)
    stack = [root]
    while stack:
        current = stack.pop()
        for field_name in ("values", "metrics"):
            if field_name in current and current[field_name] is None:
                current[field_name] = {}
        children = [dict(child) for child in current.get("children") or []]
        current["children"] = children
        stack.extend(children)
    return root


def short_name(name: str) -> str:
    """Return the last path segment of a node name."""
    stripped = name.rstrip("/")
    if not stripped:
        return name
    return stripped.rsplit("/", 1)[-1]


def resolve_metric(node: Node, key: str) -> MetricValue:
    """Look up a node's metric, falling back to the NOT_AVAILABLE sentinel.

    Never raises: a missing key and a value that is empty or absent both
    resolve to ``MetricValue(value="NOT_AVAILABLE", is_inherited=False)``.
    """
    metric = node.metrics.get(key)
    if metric is None or not metric.is_available:
        return SENTINEL
    return metric


def iter_preorder(root: Node | None) -> Iterator[Node]:
    """Yield every node of the tree in pre-order (parent before children)."""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_distinct_metric_values(root: Node | None, key: str) -> int:
    """Count distinct resolved values of ``key`` across the whole tree.

    Used to size the discrete color palette (palette size = count + 1).
    A ``None`` root counts as zero.
    """
    values = {resolve_metric(node, key).value for node in iter_preorder(root)}
    logger.debug(f"Distinct values for '{key}': {len(values)}")
    return len(values)


def find_node(root: Node | None, name: str) -> Node | None:
    """Return the first node (pre-order) with the given name."""
    for node in iter_preorder(root):
        if node.name == name:
            return node
    return None


def tree_depth(root: Node | None) -> int:
    """Height of the tree in edges; -1 for an empty tree."""
    if root is None:
        return -1
    deepest = 0
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in node.children)
    return deepest
