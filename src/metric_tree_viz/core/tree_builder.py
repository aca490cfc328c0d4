"""Build metric trees from flat project records.

Hosts that expose projects as a flat list (each record naming its parent)
are turned into a single rooted tree here. Hierarchical metrics defined on a
parent (access rules, label settings, plugin options) are copied down to
children that do not override them, flagged as inherited.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ..config.defaults import (
    DEFAULT_METRIC_KEY,
    INHERITABLE_MIN_SEGMENTS,
    KEY_SEGMENT_DELIMITER,
    SYNTHETIC_ROOT_NAME,
)
from .exceptions import DataFetchError
from .models import MetricValue, Node


def is_inheritable_key(key: str) -> bool:
    """Keys with three or more segments are copied to children."""
    return len(key.split(KEY_SEGMENT_DELIMITER)) >= INHERITABLE_MIN_SEGMENTS


def build_tree(records: list[dict[str, Any]]) -> Node | None:
    """Assemble a tree from ``{name, parent, values}`` records.

    Records may come in any order. A record whose parent is not in the list
    becomes a root. Roots and siblings are ordered by name. One root is
    returned as-is; several are wrapped in a synthetic ``"root"`` node.

    Args:
        records: Flat list of project records

    Returns:
        Root node, or None when there are no records

    Raises:
        DataFetchError: If a record has no name or the parent links form a cycle
    """
    if not records:
        logger.debug("No records to build a tree from")
        return None

    by_name: dict[str, dict[str, Any]] = {}
    for record in records:
        name = record.get("name")
        if not name:
            raise DataFetchError(f"Project record without a name: {record!r}")
        by_name[name] = record

    children_of: dict[str, list[str]] = {name: [] for name in by_name}
    roots: list[str] = []
    for name in sorted(by_name):
        parent = by_name[name].get("parent")
        if parent and parent in by_name and parent != name:
            children_of[parent].append(name)
        else:
            roots.append(name)

    _check_reachable(by_name, roots, children_of)

    def metrics_for(name: str) -> dict[str, Any]:
        record = by_name[name]
        values = dict(record.get("values") or record.get("metrics") or {})
        if DEFAULT_METRIC_KEY not in values:
            values[DEFAULT_METRIC_KEY] = {
                "value": record.get("parent"),
                "is_inherited": False,
            }
        return values

    # Build bottom-up without recursion: post-order over an explicit stack
    built: dict[str, Node] = {}
    for root_name in roots:
        stack = [(root_name, False)]
        while stack:
            name, expanded = stack.pop()
            if expanded:
                built[name] = Node(
                    name=name,
                    metrics=metrics_for(name),
                    children=[built[child] for child in children_of[name]],
                )
                continue
            stack.append((name, True))
            stack.extend((child, False) for child in reversed(children_of[name]))

    top = [built[name] for name in roots]
    logger.debug(f"Built tree from {len(records)} records, {len(top)} root(s)")
    if len(top) == 1:
        return top[0]
    return Node(name=SYNTHETIC_ROOT_NAME, metrics={}, children=top)


def _check_reachable(
    by_name: dict[str, dict[str, Any]],
    roots: list[str],
    children_of: dict[str, list[str]],
) -> None:
    seen: set[str] = set()
    stack = list(roots)
    while stack:
        name = stack.pop()
        seen.add(name)
        stack.extend(children_of[name])
    missing = sorted(set(by_name) - seen)
    if missing:
        raise DataFetchError(
            f"Parent links form a cycle: {', '.join(missing)}",
            context={"projects": missing},
        )


def access_prefix(key: str) -> str:
    """The ``<ref> <permission>`` part of an access key."""
    return KEY_SEGMENT_DELIMITER.join(key.split(KEY_SEGMENT_DELIMITER, 2)[:2])


def exclusive_prefixes(records: list[dict[str, Any]]) -> dict[str, frozenset[str]]:
    """Collect each record's ``exclusive`` list of ``"<ref> <permission>"``.

    A project marking a permission exclusive does not inherit any rule of
    that permission from its ancestors.

    Raises:
        DataFetchError: If ``exclusive`` is not a list of strings
    """
    result: dict[str, frozenset[str]] = {}
    for record in records:
        exclusive = record.get("exclusive")
        if not exclusive:
            continue
        if not isinstance(exclusive, list) or not all(
            isinstance(prefix, str) for prefix in exclusive
        ):
            raise DataFetchError(
                f"Project {record.get('name')!r}: 'exclusive' must be a list of strings",
                context={"project": record.get("name")},
            )
        result[record["name"]] = frozenset(exclusive)
    return result


def _flatten(root: Node) -> tuple[list[Node], list[int], list[list[int]]]:
    # Pre-order nodes with parent index and child indices; parents come first
    nodes: list[Node] = []
    parents: list[int] = []
    children: list[list[int]] = []
    stack = [(root, -1)]
    while stack:
        node, parent_index = stack.pop()
        index = len(nodes)
        nodes.append(node)
        parents.append(parent_index)
        children.append([])
        if parent_index >= 0:
            children[parent_index].append(index)
        stack.extend((child, index) for child in reversed(node.children))
    return nodes, parents, children


def propagate_inherited(
    root: Node | None,
    exclusive: dict[str, frozenset[str]] | None = None,
) -> Node | None:
    """Copy inheritable metrics from parents to children that lack them.

    Values already present on a child win. Copied values are flagged as
    inherited; values the child defines itself keep their own flag. A child
    listing ``"<ref> <permission>"`` in ``exclusive`` inherits none of that
    permission's rules, and neither do its descendants through it. Returns
    a new tree, the input is left untouched.

    Args:
        root: Tree to process
        exclusive: Exclusive access prefixes by node name
    """
    if root is None:
        return None
    exclusive = exclusive or {}
    nodes, parents, children = _flatten(root)

    # Top-down: a parent's passed-down metrics are ready before its children
    metrics_at: list[dict[str, MetricValue]] = []
    passed_down: list[dict[str, MetricValue]] = []
    for index, node in enumerate(nodes):
        metrics = dict(node.metrics)
        parent_index = parents[index]
        if parent_index >= 0:
            blocked = exclusive.get(node.name, frozenset())
            for key, metric in passed_down[parent_index].items():
                if key not in metrics and access_prefix(key) not in blocked:
                    metrics[key] = MetricValue(value=metric.value, is_inherited=True)
        metrics_at.append(metrics)
        passed_down.append({k: v for k, v in metrics.items() if is_inheritable_key(k)})

    built: list[Node] = [root] * len(nodes)
    for index in range(len(nodes) - 1, -1, -1):
        built[index] = Node(
            name=nodes[index].name,
            metrics=metrics_at[index],
            children=[built[i] for i in children[index]],
        )
    return built[0]


def filter_tree(root: Node | None, query: str | None) -> Node | None:
    """Keep nodes whose name contains ``query`` plus all their ancestors.

    Matching is case-insensitive. An empty query keeps the tree as-is; a
    query matching nothing yields None.
    """
    if root is None or not query:
        return root
    needle = query.lower()
    nodes, _, children = _flatten(root)

    # Bottom-up: children are decided before their parent
    kept: list[Node | None] = [None] * len(nodes)
    for index in range(len(nodes) - 1, -1, -1):
        node = nodes[index]
        kept_children = [kept[i] for i in children[index] if kept[i] is not None]
        if kept_children or needle in node.name.lower():
            kept[index] = Node(
                name=node.name, metrics=node.metrics, children=kept_children
            )

    result = kept[0]
    logger.debug(f"Filter '{query}': {'match' if result else 'no match'}")
    return result
