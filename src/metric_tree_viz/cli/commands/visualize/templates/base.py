"""HTML template generation for the metric tree page.

This module combines CSS and JavaScript from the other template modules
into the page shell, and builds self-contained static exports.
"""

from html import escape

from .scripts import get_all_scripts
from .styles import get_all_styles


def generate_html_template(title: str = "Metric Tree") -> str:
    """Generate the interactive page shell served by the visualization server.

    Args:
        title: Page title

    Returns:
        Complete HTML string with embedded CSS and JavaScript
    """
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>
{get_all_styles()}
    </style>
</head>
<body>
    <div id="controls">
        <h1>{escape(title)}</h1>
        <form id="query-form">
            <input id="query" type="search" placeholder="Filter by name...">
        </form>
        <span id="status"></span>
    </div>

    <div id="diagram"></div>
    <div id="detail-panel"></div>

    <script>
{get_all_scripts()}
    </script>
</body>
</html>"""


def generate_static_html(
    svg: str, panel_html: str = "", title: str = "Metric Tree"
) -> str:
    """Build a standalone HTML document around an already rendered diagram.

    Args:
        svg: Diagram markup
        panel_html: Detail panel markup (empty for no panel)
        title: Page title

    Returns:
        HTML string without any client script
    """
    panel_class = "open" if panel_html else ""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>
{get_all_styles()}
    </style>
</head>
<body>
    <div id="diagram">{svg}</div>
    <div id="detail-panel" class="{panel_class}">{panel_html}</div>
</body>
</html>"""
