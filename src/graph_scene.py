"""
Block Graph - Scene Context

A Scene owns the blocks and edges of one loaded graph document together
with the render settings, and turns them into the flat list of box
primitives a renderer draws. Scenes are independent objects: loading a
second scene never touches the first.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from edge_resolver import resolve_edges
from graph_importer import load_blocks
from graph_models import HADAMARD, Block, Transform


DEFAULT_MATERIAL = "default"

# Blocks whose kind is listed here get their own material variant
KIND_MATERIALS = {
    HADAMARD: "hadamard",
}


@dataclass(frozen=True)
class Primitive:
    key: str
    role: str  # "block" or "edge"
    material: str
    transform: Transform

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "role": self.role,
            "material": self.material,
            "transform": self.transform.model_dump(),
        }


@dataclass(frozen=True)
class RenderSettings:
    """Camera, lighting, ground and animation constants for the viewer."""

    camera_fov: float = 90.0
    camera_near: float = 0.1
    camera_far: float = 500.0
    camera_position: tuple = (12.0, 9.0, 2.0)

    grid_size: int = 50
    grid_divisions: int = 50
    grid_position: tuple = (0.5, -0.5, 0.5)
    ground_size: float = 50.0
    ground_y: float = -0.5

    spotlight_position: tuple = (0.0, 25.0, 50.0)
    spotlight_intensity: float = 10000.0
    hemisphere_position: tuple = (10.0, 10.0, 10.0)

    # Radians per animation frame, and per orbit-controls change
    spin_per_frame: float = -0.0005
    spin_per_change: float = -0.001
    spin_duration_ms: int = 1000

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def material_for(kind: str) -> str:
    return KIND_MATERIALS.get(kind, DEFAULT_MATERIAL)


@dataclass
class Scene:
    """Everything a renderer needs to draw one graph document."""

    source: str
    blocks: dict[str, Block]
    edges: dict[str, Transform]
    settings: RenderSettings = field(default_factory=RenderSettings)
    is_disposed: bool = False

    @classmethod
    def load(
        cls,
        source_id: str,
        data_dir: Optional[Path] = None,
        preserve_sign: bool = False,
        settings: Optional[RenderSettings] = None,
    ) -> "Scene":
        """Load blocks, then resolve edges against them."""
        blocks = load_blocks(source_id, data_dir)
        edges = resolve_edges(source_id, blocks, data_dir, preserve_sign)
        return cls(
            source=source_id,
            blocks=blocks,
            edges=edges,
            settings=settings or RenderSettings(),
        )

    def primitives(self) -> list[Primitive]:
        """Blocks first, then edges, each in table order."""
        if self.is_disposed:
            raise RuntimeError(f"Scene {self.source!r} has been disposed")

        prims = [
            Primitive(key=key, role="block", material=material_for(block.kind), transform=block.transform)
            for key, block in self.blocks.items()
        ]
        prims.extend(
            Primitive(key=key, role="edge", material=DEFAULT_MATERIAL, transform=transform)
            for key, transform in self.edges.items()
        )
        return prims

    def to_payload(self) -> dict[str, Any]:
        """JSON-serializable view of the scene for the page generator and the API."""
        return {
            "source": self.source,
            "blocks": {key: block.model_dump() for key, block in self.blocks.items()},
            "edges": {key: transform.model_dump() for key, transform in self.edges.items()},
            "primitives": [p.to_dict() for p in self.primitives()],
            "settings": self.settings.to_dict(),
        }

    def dispose(self):
        self.blocks = {}
        self.edges = {}
        self.is_disposed = True
