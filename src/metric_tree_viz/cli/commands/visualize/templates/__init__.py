"""Templates for the metric tree page."""

from .base import generate_html_template, generate_static_html
from .scripts import get_all_scripts
from .styles import get_all_styles

__all__ = [
    "generate_html_template",
    "generate_static_html",
    "get_all_scripts",
    "get_all_styles",
]
