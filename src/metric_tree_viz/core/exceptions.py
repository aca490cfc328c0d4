"""Typed exception hierarchy for metric-tree-viz.

Hierarchy
---------
MetricTreeVizError (base)
├── DataFetchError         – data provider failed or returned malformed data
├── RenderError            – render-cycle failures
│   └── StaleRenderError   – a newer render superseded this one
└── ConfigError            – configuration / validation errors
    └── ConfigurationError – (alias)

Missing metrics, empty trees and malformed metric keys are deliberately *not*
represented here: they resolve to sentinel values or empty results instead.
"""

from typing import Any


class MetricTreeVizError(Exception):
    """Base exception for metric-tree-viz."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Data provider boundary ─────────────────────────────────────────────


class DataFetchError(MetricTreeVizError):
    """The data provider call failed or returned malformed data.

    Raised by ``DataProvider.fetch_tree()``. The render cycle that triggered
    the fetch is aborted and the previous result stays on screen.
    """

    pass


# ── Render cycle ────────────────────────────────────────────────────────


class RenderError(MetricTreeVizError):
    """Render cycle failed."""

    pass


class StaleRenderError(RenderError):
    """A render finished after a newer render had already been initiated."""

    def __init__(self, generation: int, latest: int) -> None:
        super().__init__(
            f"Render {generation} superseded by render {latest}",
            context={"generation": generation, "latest": latest},
        )
        self.generation = generation
        self.latest = latest


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(MetricTreeVizError):
    """Configuration / validation errors."""

    pass


ConfigurationError = ConfigError
