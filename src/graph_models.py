"""
Block Graph - Data Models

Typed records shared by the importer, the edge resolver and the scene:
- Raw input schema (Coord) validated at the boundary
- Output models (Vec3, Transform, Block) handed to the renderer
- Error taxonomy for source loading and edge resolution
"""

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, ValidationError


BOUNDARY = "boundary"
HADAMARD = "hadamard"

NODE_TABLE = "node_vertices"
WIRE_TABLE = "wire_vertices"
EDGE_TABLE = "undir_edges"
TABLES = (NODE_TABLE, WIRE_TABLE, EDGE_TABLE)


# Errors

class GraphSourceError(Exception):
    """Base class for every failure raised while reading a graph document."""


class SourceFetchError(GraphSourceError):
    """The source could not be read or is not parseable JSON."""


class SourceNotFoundError(SourceFetchError):
    """No document exists for the source id."""


class SourcePathError(SourceFetchError):
    """The source id resolves outside the data directory."""


class MalformedSourceError(GraphSourceError):
    """A table or entry does not have the expected nested shape."""


class DanglingEdgeError(GraphSourceError):
    """An edge references an endpoint missing from the block map."""

    def __init__(self, edge_key: str, endpoint: str):
        self.edge_key = edge_key
        self.endpoint = endpoint
        super().__init__(f"Edge {edge_key!r} references unknown block {endpoint!r}")


# Raw input schema

class Coord(BaseModel):
    """The nine named scalars stored under a vertex's `coord` record."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True, allow_inf_nan=False)

    position_x: float
    position_y: float
    position_z: float
    rotation_x: float
    rotation_y: float
    rotation_z: float
    scale_x: float
    scale_y: float
    scale_z: float


# Output models

class Vec3(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, values) -> "Vec3":
        x, y, z = (float(v) for v in values)
        return cls(x=x, y=y, z=z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


class Transform(BaseModel):
    """Position, rotation (radians) and scale of one primitive in world space."""

    model_config = ConfigDict(frozen=True)

    position: Vec3
    rotation: Vec3
    scale: Vec3

    @classmethod
    def from_coord(cls, coord: Coord) -> "Transform":
        return cls(
            position=Vec3(x=coord.position_x, y=coord.position_y, z=coord.position_z),
            rotation=Vec3(x=coord.rotation_x, y=coord.rotation_y, z=coord.rotation_z),
            scale=Vec3(x=coord.scale_x, y=coord.scale_y, z=coord.scale_z),
        )


class Block(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    transform: Transform


# Entry shape helpers

def record_values(table: str, key: str, entry: Any) -> list:
    """
    Return the values of an ordered record.

    Entries are either JSON arrays or JSON objects read in document order,
    so `[{"coord": ...}, {"type": ...}]` and
    `{"annotation": {"coord": ...}, "data": {"type": ...}}` are equivalent.
    """
    if isinstance(entry, list):
        return entry
    if isinstance(entry, dict):
        return list(entry.values())
    raise MalformedSourceError(
        f"{table}[{key!r}]: expected an array or object, got {type(entry).__name__}"
    )


def parse_coord(table: str, key: str, values: list) -> Coord:
    """Validate the `coord` record held by the first field of a vertex entry."""
    if not values or not isinstance(values[0], dict) or "coord" not in values[0]:
        raise MalformedSourceError(f"{table}[{key!r}]: first field has no 'coord' record")

    raw = values[0]["coord"]
    if not isinstance(raw, dict):
        raise MalformedSourceError(f"{table}[{key!r}]: 'coord' must be an object")

    try:
        return Coord.model_validate(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedSourceError(f"{table}[{key!r}]: invalid coord fields: {fields}") from e


def parse_type(table: str, key: str, values: list) -> str:
    """Read the `type` tag held by the second field of a node-vertex entry."""
    if len(values) < 2 or not isinstance(values[1], dict) or "type" not in values[1]:
        raise MalformedSourceError(f"{table}[{key!r}]: second field has no 'type' tag")

    kind = values[1]["type"]
    if not isinstance(kind, str):
        raise MalformedSourceError(f"{table}[{key!r}]: 'type' must be a string")
    return kind


def parse_endpoints(table: str, key: str, entry: Any) -> tuple[str, str]:
    """Read the (from, to) block keys held by the first two fields of an edge entry."""
    values = record_values(table, key, entry)
    if len(values) < 2:
        raise MalformedSourceError(f"{table}[{key!r}]: expected two endpoint keys")

    endpoints = []
    for value in values[:2]:
        # JSON object keys are strings, so integer references are matched as text
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise MalformedSourceError(f"{table}[{key!r}]: endpoint keys must be strings")
        endpoints.append(str(value))
    return endpoints[0], endpoints[1]
