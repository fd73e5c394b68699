"""
Block Graph - Edge Geometry Resolver

Derives a world-space transform for every undirected edge so that a unit
box stretched by that transform spans its two endpoint blocks:
- position: midpoint of the two endpoint positions
- rotation: copied from the `from` endpoint
- scale: per-axis delta, floored at MIN_EDGE_SCALE
"""

from pathlib import Path
from typing import Any, Optional

import numpy as np

from graph_importer import fetch_source, get_table
from graph_models import (
    EDGE_TABLE,
    Block,
    DanglingEdgeError,
    Transform,
    Vec3,
    parse_endpoints,
)


# Smallest edge extent along any axis, in world units
MIN_EDGE_SCALE = 0.9
# Largest edge extent, used when an axis delta overflows
MAX_EDGE_SCALE = float(np.finfo(np.float64).max)


def floor_scale(delta: np.ndarray, preserve_sign: bool = False) -> np.ndarray:
    """
    Apply the minimum edge extent to a per-axis delta.

    By default the floor is taken on the signed delta, so a short negative
    delta becomes +MIN_EDGE_SCALE. With preserve_sign the floor is taken on
    the magnitude and the sign is restored (zero counts as positive).
    """
    if not preserve_sign:
        return np.maximum(MIN_EDGE_SCALE, delta)

    sign = np.where(delta < 0, -1.0, 1.0)
    return sign * np.maximum(MIN_EDGE_SCALE, np.abs(delta))


def edge_transform(start: Block, end: Block, preserve_sign: bool = False) -> Transform:
    """Compute the transform of the edge running from `start` to `end`."""
    p0 = start.transform.position.as_array()
    p1 = end.transform.position.as_array()

    with np.errstate(over="ignore"):
        delta = p1 - p0
    mid = p0 + delta / 2

    # Endpoints near the float limits overflow the delta on that axis
    overflow = ~np.isfinite(delta)
    if overflow.any():
        mid = np.where(overflow, p0 / 2 + p1 / 2, mid)
        delta = np.nan_to_num(delta, posinf=MAX_EDGE_SCALE, neginf=-MAX_EDGE_SCALE)

    return Transform(
        position=Vec3.from_array(mid),
        rotation=start.transform.rotation,
        scale=Vec3.from_array(floor_scale(delta, preserve_sign)),
    )


def build_edges(
    data: dict[str, Any],
    blocks: dict[str, Block],
    preserve_sign: bool = False,
) -> dict[str, Transform]:
    """Build the edge map from an already parsed graph document."""
    edges = {}

    for key, entry in get_table(data, EDGE_TABLE).items():
        source, target = parse_endpoints(EDGE_TABLE, key, entry)

        for endpoint in (source, target):
            if endpoint not in blocks:
                raise DanglingEdgeError(key, endpoint)

        edges[key] = edge_transform(blocks[source], blocks[target], preserve_sign)

    return edges


def resolve_edges(
    source_id: str,
    blocks: dict[str, Block],
    data_dir: Optional[Path] = None,
    preserve_sign: bool = False,
) -> dict[str, Transform]:
    """Fetch the edge table of a graph document and resolve every edge against `blocks`."""
    return build_edges(fetch_source(source_id, data_dir), blocks, preserve_sign)
