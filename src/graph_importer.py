"""
Block Graph - Importer

Loads a graph document from the data directory and normalizes its
node-vertex and wire-vertex tables into one map of Blocks.

Node vertices keep their declared type as the block kind. Wire vertices
are always plain boundary connectors. When a key appears in both tables
the wire vertex wins.
"""

import json
from pathlib import Path
from typing import Any, Optional

from graph_models import (
    BOUNDARY,
    NODE_TABLE,
    TABLES,
    WIRE_TABLE,
    Block,
    MalformedSourceError,
    SourceFetchError,
    SourceNotFoundError,
    SourcePathError,
    Transform,
    parse_coord,
    parse_type,
    record_values,
)


DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def resolve_source_path(source_id: str, data_dir: Optional[Path] = None) -> Path:
    """Resolve a source id to a file inside the data directory."""
    base = Path(data_dir or DEFAULT_DATA_DIR).resolve()
    path = (base / source_id).resolve()

    if base not in path.parents:
        raise SourcePathError(f"Source {source_id!r} is outside the data directory")
    return path


def fetch_source(source_id: str, data_dir: Optional[Path] = None) -> dict[str, Any]:
    """Read and parse one graph document."""
    path = resolve_source_path(source_id, data_dir)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SourceNotFoundError(f"Source {source_id!r} not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFetchError(f"Could not read source {source_id!r}: {e}") from e
    except json.JSONDecodeError as e:
        raise SourceFetchError(f"Source {source_id!r} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedSourceError(f"Source {source_id!r}: top level must be an object")
    return data


def get_table(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return one of the three sibling tables of a graph document."""
    if name not in data:
        raise MalformedSourceError(f"Missing table {name!r}")

    table = data[name]
    if not isinstance(table, dict):
        raise MalformedSourceError(f"Table {name!r} must be an object")
    return table


def build_blocks(data: dict[str, Any]) -> dict[str, Block]:
    """
    Build the block map from an already parsed graph document.

    All three tables must be present even though only the vertex tables
    are read here. The whole import fails on the first malformed entry.
    """
    for name in TABLES:
        get_table(data, name)

    blocks = {}

    # Main blocks
    for key, entry in get_table(data, NODE_TABLE).items():
        values = record_values(NODE_TABLE, key, entry)
        coord = parse_coord(NODE_TABLE, key, values)
        kind = parse_type(NODE_TABLE, key, values)
        blocks[key] = Block(kind=kind, transform=Transform.from_coord(coord))

    # Boundary vertices, overwriting node vertices on key collision
    for key, entry in get_table(data, WIRE_TABLE).items():
        values = record_values(WIRE_TABLE, key, entry)
        coord = parse_coord(WIRE_TABLE, key, values)
        blocks[key] = Block(kind=BOUNDARY, transform=Transform.from_coord(coord))

    return blocks


def load_blocks(source_id: str, data_dir: Optional[Path] = None) -> dict[str, Block]:
    """Fetch a graph document and return its blocks keyed by vertex key."""
    return build_blocks(fetch_source(source_id, data_dir))
