"""Tests for YAML-backed visualization settings."""

import pytest

from metric_tree_viz.config.defaults import get_default_config_path
from metric_tree_viz.config.settings import (
    LayoutSettings,
    RenderSettings,
    VisualizationSettings,
)
from metric_tree_viz.core.exceptions import ConfigError


class TestLoad:
    """Tests for VisualizationSettings.load."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = VisualizationSettings.load(tmp_path / "absent.yaml")

        assert settings.layout == LayoutSettings()
        assert settings.render == RenderSettings()

    def test_partial_file_overrides(self, tmp_path):
        path = tmp_path / "viz.yaml"
        path.write_text("layout:\n  width: 800\nrender:\n  label_budget: 12\n")

        settings = VisualizationSettings.load(path)

        assert settings.layout.width == 800
        assert settings.layout.dx == LayoutSettings().dx
        assert settings.render.label_budget == 12

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "viz.yaml"
        path.write_text("")

        assert VisualizationSettings.load(path) == VisualizationSettings()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "viz.yaml"
        path.write_text("layout: [unclosed\n")

        with pytest.raises(ConfigError):
            VisualizationSettings.load(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "viz.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="mapping"):
            VisualizationSettings.load(path)

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "viz.yaml"
        settings = VisualizationSettings(
            layout=LayoutSettings(width=640, min_dy=90),
            render=RenderSettings(admin_url_template="https://host/p/{name}"),
            provider_timeout=5.0,
        )

        settings.save(path)

        assert VisualizationSettings.load(path) == settings


class TestValidation:
    """Tests for rejected settings."""

    @pytest.mark.parametrize(
        "data",
        [
            {"colour": "red"},
            {"layout": {"height": 10}},
            {"render": {"font": "serif"}},
        ],
    )
    def test_unknown_keys(self, data):
        with pytest.raises(ConfigError, match="Unknown"):
            VisualizationSettings.from_dict(data)

    @pytest.mark.parametrize(
        "data",
        [
            {"layout": {"width": 0}},
            {"layout": {"dx": -1}},
            {"layout": {"min_dy": 0}},
            {"layout": {"label_room": -1}},
            {"render": {"label_budget": 0}},
            {"render": {"admin_url_template": "/admin/repos"}},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            VisualizationSettings.from_dict(data)

    def test_defaults_are_valid(self):
        VisualizationSettings().validate()


def test_default_config_path_is_in_project_dir(tmp_path):
    assert get_default_config_path(tmp_path).parent == tmp_path
