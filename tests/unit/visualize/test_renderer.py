"""Tests for scene construction: colors, labels, connectors and links."""

from __future__ import annotations

import pytest
from conftest import make_node

from metric_tree_viz.cli.commands.visualize.layout_engine import compute_layout
from metric_tree_viz.cli.commands.visualize.renderer import (
    OrdinalColorScale,
    admin_url_for,
    build_scene,
    format_value_label,
    generate_palette,
    horizontal_link_path,
    truncate_label,
)


def _scene(tree, key="parent", **kwargs):
    return build_scene(compute_layout(tree, 1200), key, **kwargs)


class TestLabels:
    def test_inherited_value_is_marked(self, scenario_tree):
        scene = _scene(scenario_tree)
        labels = {shape.name: shape.label for shape in scene.nodes}

        assert labels == {"root": "X", "a": "Y (INHERIT)"}

    def test_missing_metric_shows_not_available(self, scenario_tree):
        scene = _scene(scenario_tree, key="state")

        assert {shape.label for shape in scene.nodes} == {"NOT_AVAILABLE"}

    def test_long_label_is_truncated(self):
        value = "refs/heads/feature/very-long-branch-name"
        tree = make_node("r", parent=(value, False))

        shape = _scene(tree, label_budget=20).nodes[0]

        assert shape.label == value[:20] + "..."
        assert shape.full_label == value

    @pytest.mark.parametrize(
        "text,budget,expected",
        [
            ("short", 20, "short"),
            ("x" * 20, 20, "x" * 20),
            ("x" * 21, 20, "x" * 20 + "..."),
            ("abcdef", 1, "a..."),
        ],
    )
    def test_truncate_label(self, text, budget, expected):
        assert truncate_label(text, budget) == expected

    def test_format_value_label(self):
        assert format_value_label("MERGE", False) == "MERGE"
        assert format_value_label("MERGE", True) == "MERGE (INHERIT)"

    def test_secondary_label_is_short_name(self, project_tree):
        shapes = {shape.name: shape for shape in _scene(project_tree).nodes}

        assert shapes["platform/core"].short_name == "core"
        assert shapes["platform/core"].is_leaf
        assert not shapes["platform"].is_leaf


class TestColors:
    def test_distinct_values_get_distinct_colors(self, scenario_tree):
        scene = _scene(scenario_tree)
        colors = {shape.name: shape.color for shape in scene.nodes}

        assert colors["root"] != colors["a"]
        assert scene.legend == {"X": colors["root"], "Y": colors["a"]}

    def test_equal_values_share_a_color(self, project_tree):
        shapes = {shape.name: shape for shape in _scene(project_tree, "state").nodes}

        assert shapes["All-Projects"].color == shapes["platform/core"].color
        assert shapes["platform/ui"].color != shapes["platform/core"].color

    def test_palette_has_one_spare_color(self, project_tree):
        scene = _scene(project_tree, "state")

        # ACTIVE, READ_ONLY, HIDDEN
        assert len(scene.legend) == 3
        assert len(set(scene.legend.values())) == 3

    def test_generate_palette(self):
        palette = generate_palette(4)

        assert len(palette) == 4
        assert len(set(palette)) == 4
        assert all(color.startswith("#") and len(color) == 7 for color in palette)
        assert generate_palette(0) == generate_palette(1)

    def test_scale_assigns_in_first_seen_order(self):
        scale = OrdinalColorScale(3)

        first = scale("b")
        second = scale("a")

        assert first == scale.palette[0]
        assert second == scale.palette[1]
        assert scale("b") == first
        assert list(scale.domain) == ["b", "a"]


class TestLinksAndActions:
    def test_link_path_is_horizontal_cubic(self):
        path = horizontal_link_path((-15, 0), (15, 360))

        assert path == "M0,-15C180,-15 180,15 360,15"

    def test_one_link_per_child(self, project_tree):
        scene = _scene(project_tree)

        assert len(scene.links) == 4
        assert ("platform", "platform/ui") in {
            (link.source, link.target) for link in scene.links
        }

    def test_admin_url_is_encoded(self):
        assert admin_url_for("platform/core") == "/admin/repos/platform%2Fcore"
        assert (
            admin_url_for("a b", "https://host/p/{name}/info")
            == "https://host/p/a%20b/info"
        )

    def test_nodes_open_the_detail_panel(self, project_tree):
        scene = _scene(project_tree)

        assert {shape.click_action for shape in scene.nodes} == {"open"}
        assert scene.nodes[0].admin_url == "/admin/repos/All-Projects"


class TestFreshScene:
    def test_each_render_builds_a_new_scene(self, project_tree):
        layout = compute_layout(project_tree, 1200)

        first = build_scene(layout, "state")
        second = build_scene(layout, "parent")

        assert first is not second
        assert first.nodes is not second.nodes
        assert first.active_key == "state"
        assert second.active_key == "parent"

    def test_empty_layout(self):
        scene = build_scene(compute_layout(None, 1200), "parent")

        assert scene.is_empty
        assert scene.links == []
        assert scene.legend == {}
