"""Configuration for metric-tree-viz."""

from .settings import LayoutSettings, RenderSettings, VisualizationSettings

__all__ = ["LayoutSettings", "RenderSettings", "VisualizationSettings"]
