"""metric-tree-viz - interactive node-link diagrams for multi-metric trees."""

from loguru import logger

__version__ = "0.1.0"

from .core.exceptions import MetricTreeVizError  # noqa: E402

# Library users opt in to log output with logger.enable("metric_tree_viz")
logger.disable("metric_tree_viz")

__all__ = ["MetricTreeVizError", "__version__"]
