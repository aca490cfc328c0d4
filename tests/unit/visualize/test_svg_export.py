"""Tests for SVG and panel markup."""

from __future__ import annotations

from conftest import make_node

from metric_tree_viz.cli.commands.visualize.detail_panel import build_detail_panel
from metric_tree_viz.cli.commands.visualize.layout_engine import compute_layout
from metric_tree_viz.cli.commands.visualize.renderer import build_scene
from metric_tree_viz.cli.commands.visualize.svg_export import panel_to_html, scene_to_svg
from metric_tree_viz.cli.commands.visualize.templates import generate_static_html
from metric_tree_viz.core.view_state import ViewState


def _svg(tree, fragment="", key="parent"):
    state = ViewState.from_fragment(fragment)
    return scene_to_svg(build_scene(compute_layout(tree, 1200), key), state)


class TestSceneToSvg:
    def test_one_group_per_node(self, project_tree):
        svg = _svg(project_tree)

        assert svg.count('<g class="node"') == 5
        assert svg.count("<path ") == 4
        assert svg.endswith("</svg>")

    def test_labels(self, scenario_tree):
        svg = _svg(scenario_tree)

        assert ">X</text>" in svg
        assert ">Y (INHERIT)</text>" in svg

    def test_node_click_targets_keep_state(self, project_tree):
        svg = _svg(project_tree, "query=plat&config=state")

        assert 'data-fragment="query=plat&amp;config=state&amp;open=platform%2Fui"' in svg
        assert 'data-action="open"' in svg

    def test_name_label_links_to_admin_page(self, project_tree):
        svg = _svg(project_tree)

        assert '<a href="/admin/repos/platform%2Fcore" target="_blank"' in svg

    def test_markup_is_escaped(self):
        tree = make_node("<b>&", parent=('"quoted"', False))

        svg = _svg(tree)

        assert "<b>&" not in svg
        assert "&lt;b&gt;&amp;" in svg
        assert "&quot;quoted&quot;" in svg

    def test_empty_scene(self):
        assert _svg(None) == '<svg class="metric-tree" width="0" height="0"></svg>'


class TestPanelToHtml:
    def test_none(self):
        assert panel_to_html(None) == ""

    def test_groups_and_rows(self):
        node = make_node(
            "team/app",
            refs__push__admins=("ALLOW", True),
            state=("ACTIVE", False),
        )
        panel = build_detail_panel(
            node, ViewState.from_fragment("config=state"), admin_url="/admin/x"
        )

        html = panel_to_html(panel)

        assert html.count('<details class="panel-group') == 2
        assert 'data-path="refs-push"' in html
        assert '<li class="panel-row active">' in html
        assert ">ALLOW (INHERIT)</span>" in html
        assert 'data-inherited="true"' in html
        assert 'class="admin-link" href="/admin/x"' in html

    def test_close_button_fragment(self):
        panel = build_detail_panel(
            make_node("tools"), ViewState.from_fragment("config=state&open=tools")
        )

        assert '<button class="close-btn" data-fragment="config=state">' in panel_to_html(
            panel
        )

    def test_no_admin_link_without_url(self):
        panel = build_detail_panel(make_node("tools"), ViewState())

        assert "admin-link" not in panel_to_html(panel)


def test_static_html_embeds_diagram_and_panel(scenario_tree):
    svg = _svg(scenario_tree)

    page = generate_static_html(svg, "<div>panel</div>", title="Export")

    assert "<title>Export</title>" in page
    assert svg in page
    assert 'class="open"><div>panel</div>' in page
    assert "<script>" not in page
