import json

import pytest

from conftest import node, wire
from graph_models import DanglingEdgeError
from graph_scene import DEFAULT_MATERIAL, RenderSettings, Scene


@pytest.fixture
def mixed_graph(write_graph):
    return write_graph(
        name="mixed.json",
        node_vertices={"v0": node("Z", x=2.0), "h": node("hadamard", x=4.0)},
        wire_vertices={"b0": wire()},
        undir_edges={"e0": ["b0", "v0"], "e1": ["v0", "h"]},
    )


def test_load_builds_blocks_and_edges(mixed_graph, data_dir):
    scene = Scene.load(mixed_graph, data_dir)

    assert scene.source == mixed_graph
    assert list(scene.blocks) == ["v0", "h", "b0"]
    assert list(scene.edges) == ["e0", "e1"]
    assert scene.edges["e1"].position.x == 3.0


def test_primitives_list_blocks_then_edges(mixed_graph, data_dir):
    prims = Scene.load(mixed_graph, data_dir).primitives()

    assert [(p.role, p.key) for p in prims] == [
        ("block", "v0"), ("block", "h"), ("block", "b0"),
        ("edge", "e0"), ("edge", "e1"),
    ]


def test_hadamard_blocks_get_their_own_material(mixed_graph, data_dir):
    prims = {p.key: p for p in Scene.load(mixed_graph, data_dir).primitives()}

    assert prims["h"].material == "hadamard"
    assert prims["v0"].material == DEFAULT_MATERIAL
    assert prims["b0"].material == DEFAULT_MATERIAL
    assert prims["e1"].material == DEFAULT_MATERIAL


def test_preserve_sign_is_passed_to_edge_resolution(write_graph, data_dir):
    source = write_graph(
        node_vertices={"a": node("Z", x=3.0), "b": node("X")},
        undir_edges={"e": ["a", "b"]},
    )

    assert Scene.load(source, data_dir).edges["e"].scale.x == 0.9
    assert Scene.load(source, data_dir, preserve_sign=True).edges["e"].scale.x == -3.0


def test_payload_is_json_serializable(mixed_graph, data_dir):
    payload = Scene.load(mixed_graph, data_dir).to_payload()

    decoded = json.loads(json.dumps(payload))

    assert decoded["source"] == mixed_graph
    assert decoded["blocks"]["h"]["kind"] == "hadamard"
    assert decoded["edges"]["e0"]["position"] == {"x": 1.0, "y": 0.0, "z": 0.0}
    assert len(decoded["primitives"]) == 5
    assert decoded["settings"]["camera_position"] == [12.0, 9.0, 2.0]


def test_default_render_settings():
    settings = RenderSettings()

    assert settings.camera_fov == 90.0
    assert (settings.camera_near, settings.camera_far) == (0.1, 500.0)
    assert settings.grid_position == (0.5, -0.5, 0.5)
    assert settings.spin_duration_ms == 1000


def test_scenes_are_independent(mixed_graph, two_block_graph, data_dir):
    first = Scene.load(mixed_graph, data_dir)
    second = Scene.load(two_block_graph, data_dir, settings=RenderSettings(camera_fov=60.0))

    second.dispose()

    assert second.is_disposed
    assert not first.is_disposed
    assert len(first.primitives()) == 5
    assert first.settings.camera_fov == 90.0


def test_disposed_scene_refuses_primitives(mixed_graph, data_dir):
    scene = Scene.load(mixed_graph, data_dir)
    scene.dispose()

    assert scene.blocks == {}
    assert scene.edges == {}
    with pytest.raises(RuntimeError, match="disposed"):
        scene.primitives()


def test_load_fails_without_partial_scene(write_graph, data_dir):
    source = write_graph(node_vertices={"a": node("Z")}, undir_edges={"e": ["a", "missing"]})

    with pytest.raises(DanglingEdgeError):
        Scene.load(source, data_dir)
