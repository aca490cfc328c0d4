"""Shared fixtures for metric-tree-viz tests."""

from __future__ import annotations

import asyncio

import pytest

from metric_tree_viz.core.exceptions import DataFetchError
from metric_tree_viz.core.models import Node


def make_node(name: str, children: list[Node] | None = None, **metrics) -> Node:
    """Build a node; keyword metrics are ``key=(value, is_inherited)`` pairs."""
    return Node(
        name=name,
        metrics={
            key.replace("__", " "): {"value": value, "is_inherited": inherited}
            for key, (value, inherited) in metrics.items()
        },
        children=children or [],
    )


class FakeProvider:
    """In-memory provider recording every query it was asked for."""

    def __init__(self, tree: Node | None = None) -> None:
        self.tree = tree
        self.queries: list[str | None] = []
        self.error: DataFetchError | None = None

    async def fetch_tree(self, query: str | None = None) -> Node | None:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.tree


class GatedProvider:
    """Provider whose responses are released manually, in any order."""

    def __init__(self) -> None:
        self.pending: dict[str | None, tuple[asyncio.Event, Node | None]] = {}
        self.started: dict[str | None, asyncio.Event] = {}
        self.errors: dict[str | None, DataFetchError] = {}

    def prepare(
        self,
        query: str | None,
        tree: Node | None,
        error: DataFetchError | None = None,
    ) -> None:
        self.pending[query] = (asyncio.Event(), tree)
        self.started[query] = asyncio.Event()
        if error is not None:
            self.errors[query] = error

    def release(self, query: str | None) -> None:
        self.pending[query][0].set()

    async def fetch_tree(self, query: str | None = None) -> Node | None:
        gate, tree = self.pending[query]
        self.started[query].set()
        await gate.wait()
        if query in self.errors:
            raise self.errors[query]
        return tree


@pytest.fixture
def scenario_tree() -> Node:
    """Root with value X and one child inheriting value Y."""
    return Node.from_json(
        {
            "name": "root",
            "values": {"parent": {"value": "X", "is_inherited": False}},
            "children": [
                {
                    "name": "a",
                    "values": {"parent": {"value": "Y", "isInherited": True}},
                    "children": [],
                }
            ],
        }
    )


@pytest.fixture
def project_tree() -> Node:
    """Small project hierarchy with shared and per-node metrics."""
    return make_node(
        "All-Projects",
        children=[
            make_node(
                "platform",
                children=[
                    make_node(
                        "platform/core",
                        state=("ACTIVE", False),
                        submit__type=("MERGE_IF_NECESSARY", True),
                    ),
                    make_node(
                        "platform/ui",
                        state=("READ_ONLY", False),
                        submit__type=("REBASE_ALWAYS", False),
                    ),
                ],
                state=("ACTIVE", False),
                submit__type=("MERGE_IF_NECESSARY", False),
            ),
            make_node("tools", state=("HIDDEN", False)),
        ],
        state=("ACTIVE", False),
        parent=("", False),
    )
