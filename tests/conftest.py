"""Shared fixtures: small graph documents written into a temporary data directory."""

import json

import pytest


def coord(x=0.0, y=0.0, z=0.0, rx=0.0, ry=0.0, rz=0.0, sx=1.0, sy=1.0, sz=1.0):
    return {
        "position_x": x, "position_y": y, "position_z": z,
        "rotation_x": rx, "rotation_y": ry, "rotation_z": rz,
        "scale_x": sx, "scale_y": sy, "scale_z": sz,
    }


def node(kind, **kwargs):
    return [{"coord": coord(**kwargs)}, {"type": kind}]


def wire(**kwargs):
    return [{"coord": coord(**kwargs)}]


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path


@pytest.fixture
def write_graph(data_dir):
    """Write a graph document and return its source id."""

    def _write(name="graph.json", node_vertices=None, wire_vertices=None, undir_edges=None, raw=None):
        if raw is None:
            raw = {
                "node_vertices": node_vertices or {},
                "wire_vertices": wire_vertices or {},
                "undir_edges": undir_edges or {},
            }
        path = data_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = raw if isinstance(raw, str) else json.dumps(raw)
        path.write_text(text, encoding="utf-8")
        return name

    return _write


@pytest.fixture
def two_block_graph(write_graph):
    """A at the origin, B four units along x, one edge A -> B."""
    return write_graph(
        node_vertices={"A": node("Z"), "B": node("X", x=4.0)},
        undir_edges={"e": ["A", "B"]},
    )
