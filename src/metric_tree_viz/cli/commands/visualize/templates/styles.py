"""CSS styles for the metric tree page.

Organized by page region: base layout, filter controls, the diagram and the
detail panel.
"""


def get_base_styles() -> str:
    """Get base styles for body and core layout.

    Returns:
        CSS string for base styling
    """
    return """
        body {
            margin: 0;
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            background: #0d1117;
            color: #c9d1d9;
        }

        h1 { margin: 0 0 16px 0; font-size: 18px; }
    """


def get_controls_styles() -> str:
    """Get styles for the filter and metric controls.

    Returns:
        CSS string for control styling
    """
    return """
        #controls {
            display: flex;
            gap: 12px;
            align-items: center;
            padding: 16px 20px;
            border-bottom: 1px solid #30363d;
        }

        #controls input {
            padding: 6px;
            background: #161b22;
            border: 1px solid #30363d;
            border-radius: 6px;
            color: #c9d1d9;
            font-size: 12px;
            min-width: 220px;
        }

        #status { font-size: 12px; color: #8b949e; }
        #status.error { color: #f85149; }
    """


def get_graph_styles() -> str:
    """Get styles for the diagram.

    Returns:
        CSS string for nodes, labels and links
    """
    return """
        #diagram { padding: 20px; overflow: auto; }

        .metric-tree .node { cursor: pointer; }
        .metric-tree .node text { fill: #c9d1d9; }
        .metric-tree .node text.name-label { fill: #58a6ff; }
        .metric-tree .node:hover circle { stroke: #f0f6fc; stroke-width: 2; }
        .metric-tree .links path { stroke: #8b949e; }
    """


def get_panel_styles() -> str:
    """Get styles for the detail panel.

    Returns:
        CSS string for the drill-down panel
    """
    return """
        #detail-panel {
            position: fixed;
            top: 0;
            right: 0;
            width: 420px;
            height: 100vh;
            overflow-y: auto;
            background: rgba(13, 17, 23, 0.97);
            border-left: 1px solid #30363d;
            box-shadow: -8px 0 24px rgba(0, 0, 0, 0.4);
            display: none;
        }

        #detail-panel.open { display: block; }

        .panel-header {
            display: flex;
            align-items: center;
            gap: 8px;
            padding: 12px 16px;
            border-bottom: 1px solid #30363d;
        }

        .panel-title { flex: 1; font-weight: 600; }
        .admin-link { color: #58a6ff; font-size: 12px; }

        .close-btn {
            background: none;
            border: none;
            color: #8b949e;
            font-size: 20px;
            cursor: pointer;
        }

        .panel-body { padding: 8px 16px; font-size: 12px; }
        .panel-group summary { cursor: pointer; padding: 2px 0; color: #d2a8ff; }
        .panel-rows { list-style: none; margin: 0; padding-left: 12px; }

        .panel-row {
            display: flex;
            justify-content: space-between;
            gap: 12px;
            padding: 2px 0;
        }

        .panel-row .metric-key { color: #c9d1d9; text-decoration: none; }
        .panel-row .metric-key:hover { text-decoration: underline; }
        .panel-row.active .metric-key { color: #3fb950; font-weight: 600; }
        .panel-row[data-inherited="true"] .metric-value { color: #8b949e; font-style: italic; }
    """


def get_all_styles() -> str:
    """Get all styles combined.

    Returns:
        Complete CSS string
    """
    return "\n".join(
        [
            get_base_styles(),
            get_controls_styles(),
            get_graph_styles(),
            get_panel_styles(),
        ]
    )
