"""Settings for layout, rendering and serving."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_ADMIN_URL_TEMPLATE,
    DEFAULT_DX,
    DEFAULT_LABEL_BUDGET,
    DEFAULT_LABEL_ROOM,
    DEFAULT_MARGIN,
    DEFAULT_MIN_DY,
    DEFAULT_NODE_RADIUS,
    DEFAULT_PROVIDER_TIMEOUT,
    DEFAULT_WIDTH,
)


@dataclass
class LayoutSettings:
    """Spacing used by the layout engine."""

    width: int = DEFAULT_WIDTH
    dx: float = DEFAULT_DX  # Sibling separation
    min_dy: float = DEFAULT_MIN_DY  # Depth separation floor
    margin: float = DEFAULT_MARGIN
    label_room: float = DEFAULT_LABEL_ROOM  # Right of the deepest level


@dataclass
class RenderSettings:
    """Visual parameters for the diagram renderer."""

    node_radius: float = DEFAULT_NODE_RADIUS
    label_budget: int = DEFAULT_LABEL_BUDGET
    admin_url_template: str = DEFAULT_ADMIN_URL_TEMPLATE


@dataclass
class VisualizationSettings:
    """Complete visualization configuration."""

    layout: LayoutSettings = field(default_factory=LayoutSettings)
    render: RenderSettings = field(default_factory=RenderSettings)
    provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT

    @classmethod
    def load(cls, path: Path) -> VisualizationSettings:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            VisualizationSettings instance (defaults if the file is missing)

        Raises:
            ConfigError: If the file is not valid YAML or has unknown keys
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid settings file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VisualizationSettings:
        """Create settings from dictionary.

        Args:
            data: Settings dictionary

        Returns:
            VisualizationSettings instance
        """
        layout_data = data.get("layout") or {}
        render_data = data.get("render") or {}

        _check_keys(LayoutSettings, layout_data, "layout")
        _check_keys(RenderSettings, render_data, "render")
        unknown = set(data) - {"layout", "render", "provider_timeout"}
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

        settings = cls(
            layout=LayoutSettings(**layout_data),
            render=RenderSettings(**render_data),
            provider_timeout=float(
                data.get("provider_timeout", DEFAULT_PROVIDER_TIMEOUT)
            ),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Reject values the layout and renderer cannot work with."""
        if self.layout.width <= 0:
            raise ConfigError("layout.width must be positive")
        if self.layout.dx <= 0 or self.layout.min_dy <= 0:
            raise ConfigError("layout.dx and layout.min_dy must be positive")
        if self.layout.label_room < 0:
            raise ConfigError("layout.label_room must not be negative")
        if self.render.label_budget < 1:
            raise ConfigError("render.label_budget must be at least 1")
        if "{name}" not in self.render.admin_url_template:
            raise ConfigError("render.admin_url_template must contain '{name}'")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def save(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _check_keys(cls: type, data: dict[str, Any], section: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(
            f"Unknown {section} settings: {', '.join(sorted(unknown))}",
            context={"section": section, "keys": sorted(unknown)},
        )
