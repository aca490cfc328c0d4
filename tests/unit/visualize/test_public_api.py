"""The public visualization API re-exports the internal implementations."""

import pytest

import metric_tree_viz.visualization as visualization
from metric_tree_viz.cli.commands.visualize import engine, layout_engine


def test_all_names_resolve():
    for name in visualization.__all__:
        assert getattr(visualization, name) is not None


def test_reexports_are_the_same_objects():
    assert visualization.VisualizationEngine is engine.VisualizationEngine
    assert visualization.compute_layout is layout_engine.compute_layout


@pytest.mark.asyncio
async def test_documented_usage(tmp_path):
    from metric_tree_viz.core import JsonFileTreeProvider, ViewState

    path = tmp_path / "projects.json"
    path.write_text('[{"name": "All-Projects"}, {"name": "a", "parent": "All-Projects"}]')

    result = await visualization.VisualizationEngine(
        JsonFileTreeProvider(path), ViewState.from_fragment("#config=state")
    ).render()
    svg = visualization.scene_to_svg(result.scene, result.view_state)

    assert svg.count('<g class="node"') == 2
