"""Metric tree visualization: layout, scene, detail panel and server."""

from .cli import export, serve

__all__ = ["export", "serve"]
