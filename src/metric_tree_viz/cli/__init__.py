"""Command-line interface for metric-tree-viz."""
