"""Default configuration values for metric-tree-viz."""

from pathlib import Path

# Metric key used when the view state does not name one
DEFAULT_METRIC_KEY = "parent"

# Sentinel value for missing or empty metrics
NOT_AVAILABLE = "NOT_AVAILABLE"

# Appended to labels of inherited values
INHERIT_MARKER = "(INHERIT)"

# View-state parameter names
PARAM_QUERY = "query"
PARAM_CONFIG = "config"
PARAM_OPEN = "open"

# Layout
DEFAULT_WIDTH = 1200  # Target viewport width
DEFAULT_DX = 30  # Vertical separation between siblings
DEFAULT_MIN_DY = 180  # Minimum horizontal separation between depth levels
DEFAULT_MARGIN = 120  # Subtracted from width before dividing by depth
DEFAULT_LABEL_ROOM = 150  # Kept right of the deepest level for leaf labels

# Rendering
DEFAULT_NODE_RADIUS = 4
DEFAULT_LABEL_BUDGET = 20  # Max characters of the primary label
ELLIPSIS = "..."
PALETTE_SATURATION = 0.75
PALETTE_LIGHTNESS = 0.5

# Detail panel
GROUP_PATH_DELIMITER = "-"  # Joins key segments into a group path
KEY_SEGMENT_DELIMITER = " "  # Separates segments inside a metric key

# Keys with at least this many segments are copied down to children
INHERITABLE_MIN_SEGMENTS = 3

# Name of the synthetic node wrapping several roots
SYNTHETIC_ROOT_NAME = "root"

# Per-entity admin page, formatted with the URL-quoted node name
DEFAULT_ADMIN_URL_TEMPLATE = "/admin/repos/{name}"

# HTTP provider
DEFAULT_PROVIDER_TIMEOUT = 30.0
XSSI_PREFIX = ")]}'"

# Server
DEFAULT_PORT = 8090
PORT_RANGE_END = 8109

CONFIG_FILENAME = "metric-tree-viz.yaml"


def get_default_config_path(project_root: Path) -> Path:
    """Get the default settings file path for a directory."""
    return project_root / CONFIG_FILENAME
