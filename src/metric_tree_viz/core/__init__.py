"""Core functionality for metric-tree-viz."""

from .exceptions import (
    ConfigError,
    ConfigurationError,
    DataFetchError,
    MetricTreeVizError,
    RenderError,
    StaleRenderError,
)
from .models import (
    SENTINEL,
    MetricValue,
    Node,
    count_distinct_metric_values,
    find_node,
    iter_preorder,
    resolve_metric,
    short_name,
)
from .providers import DataProvider, HttpTreeProvider, JsonFileTreeProvider
from .view_state import ViewState

__all__ = [
    "ConfigError",
    "ConfigurationError",
    "DataFetchError",
    "MetricTreeVizError",
    "RenderError",
    "StaleRenderError",
    "SENTINEL",
    "MetricValue",
    "Node",
    "count_distinct_metric_values",
    "find_node",
    "iter_preorder",
    "resolve_metric",
    "short_name",
    "DataProvider",
    "HttpTreeProvider",
    "JsonFileTreeProvider",
    "ViewState",
]
