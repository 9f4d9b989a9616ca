"""
TMX Map Model

In-memory description of a Tiled map as consumed by the OBJ export:
tiles, tile layers split into per-image meshes, object groups and the
map-level layout rules (orientation, draw order, pixel size).
"""

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, Iterator, List, Optional, Tuple

from .tmx_math import get_tile_id_without_flags

# 65536 vertices per mesh with four vertices per tile
MAX_TILES_PER_MESH = 16384

ORIENTATION_ORTHOGONAL = "orthogonal"
ORIENTATION_ISOMETRIC = "isometric"

IGNORE_NONE = ""
IGNORE_VISUAL = "visual"
IGNORE_COLLISION = "collision"
IGNORE_ALL = "all"

RENDER_ORDERS = {
    "right-down": (1, 1),
    "right-up": (1, -1),
    "left-down": (-1, 1),
    "left-up": (-1, -1),
}


@dataclass
class TmxImage:
    source: str
    width: int
    height: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def stem(self) -> str:
        return PurePath(self.source).stem


@dataclass
class TmxTile:
    """
    A tile definition reachable by its global id.

    Attributes:
        global_id: Tile id with flag bits cleared
        tile_size: (width, height) in pixels
        location_on_source: Top-left of the tile in its image
        image: Image the tile is cut from
        offset: Drawing offset of the owning tileset
    """
    global_id: int
    tile_size: Tuple[int, int]
    location_on_source: Tuple[int, int]
    image: TmxImage
    offset: Tuple[float, float] = (0.0, 0.0)


@dataclass
class TmxMesh:
    """Raw tile ids of one layer that share a source image."""
    unique_mesh_name: str
    image: TmxImage
    tile_ids: List[int]

    def get_tile_id_at(self, tile_index: int) -> int:
        return self.tile_ids[tile_index]

    @staticmethod
    def create_meshes(tmx_map: "TmxMap", layer: "TmxLayer") -> List["TmxMesh"]:
        """
        Split a layer into meshes, one per source image.

        Meshes are ordered by the first cell that uses their image. A mesh
        with more than MAX_TILES_PER_MESH tiles is split into chunks.
        Unknown tile ids are left in place so the exporter can report them.
        """
        by_image: Dict[str, List[int]] = {}
        images: Dict[str, TmxImage] = {}
        unresolved: List[int] = []

        for index, raw_id in enumerate(layer.tile_ids):
            if raw_id == 0:
                continue
            tile = tmx_map.tiles.get(get_tile_id_without_flags(raw_id))
            if tile is None:
                unresolved.append(index)
                continue
            key = tile.image.source
            if key not in by_image:
                by_image[key] = []
                images[key] = tile.image
            by_image[key].append(index)

        # Kept in a mesh of their own so the exporter can fail on them
        if unresolved:
            by_image[""] = unresolved
            images[""] = TmxImage("", 0, 0)

        meshes = []
        for key, indices in by_image.items():
            image = images[key]
            base_name = f"{layer.name}-{image.stem}" if image.stem else layer.name
            for chunk, start in enumerate(range(0, len(indices), MAX_TILES_PER_MESH)):
                tile_ids = [0] * len(layer.tile_ids)
                for index in indices[start:start + MAX_TILES_PER_MESH]:
                    tile_ids[index] = layer.tile_ids[index]
                name = base_name if chunk == 0 else f"{base_name}-{chunk}"
                meshes.append(TmxMesh(name, image, tile_ids))
        return meshes


@dataclass
class TmxLayer:
    name: str
    width: int
    height: int
    tile_ids: List[int]
    visible: bool = True
    ignore: str = IGNORE_NONE
    meshes: List[TmxMesh] = field(default_factory=list)

    def get_tile_index(self, x: int, y: int) -> int:
        return y * self.width + x

    @property
    def ignores_visual(self) -> bool:
        return self.ignore in (IGNORE_VISUAL, IGNORE_ALL)


@dataclass
class TmxObject:
    """
    A map object.

    Attributes:
        kind: "rectangle", "ellipse", "polygon", "polyline" or "tile"
        x, y: Object position in map pixels
        points: Vertices relative to (x, y) for polygons and polylines
        gid: Raw tile id for tile objects
        rotation: Clockwise rotation in degrees about (x, y)
    """
    kind: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    points: List[Tuple[float, float]] = field(default_factory=list)
    gid: int = 0
    name: str = ""
    visible: bool = True
    rotation: float = 0.0


@dataclass
class TmxObjectGroup:
    name: str
    objects: List[TmxObject] = field(default_factory=list)
    visible: bool = True


@dataclass
class TmxObjectTileMesh:
    """Mesh for tile objects; always holds exactly one tile id."""
    unique_mesh_name: str
    tile_ids: List[int]


@dataclass
class TmxMap:
    width: int
    height: int
    tile_width: int
    tile_height: int
    orientation: str = ORIENTATION_ORTHOGONAL
    draw_order_horizontal: int = 1
    draw_order_vertical: int = 1
    tiles: Dict[int, TmxTile] = field(default_factory=dict)
    layers: List[TmxLayer] = field(default_factory=list)
    object_groups: List[TmxObjectGroup] = field(default_factory=list)

    @property
    def map_size_in_pixels(self) -> Tuple[int, int]:
        if self.orientation == ORIENTATION_ISOMETRIC:
            span = self.width + self.height
            return (span * self.tile_width // 2, span * self.tile_height // 2)
        return (self.width * self.tile_width, self.height * self.tile_height)

    def get_map_position_at(self, x: int, y: int) -> Tuple[float, float]:
        """Top-left of cell (x, y) in map pixels."""
        if self.orientation == ORIENTATION_ISOMETRIC:
            px = (x - y + self.height - 1) * self.tile_width / 2
            py = (x + y) * self.tile_height / 2
            return (px, py)
        return (x * self.tile_width, y * self.tile_height)

    def set_render_order(self, render_order: str):
        if render_order not in RENDER_ORDERS:
            raise ValueError(f"Unknown render order: {render_order}")
        self.draw_order_horizontal, self.draw_order_vertical = RENDER_ORDERS[render_order]

    def horizontal_range(self, width: int) -> range:
        if self.draw_order_horizontal == 1:
            return range(width)
        return range(width - 1, -1, -1)

    def vertical_range(self, height: int) -> range:
        if self.draw_order_vertical == 1:
            return range(height)
        return range(height - 1, -1, -1)

    def enumerate_tile_layers(self) -> Iterator[TmxLayer]:
        return iter(self.layers)

    def find_tile(self, tile_id: int) -> Optional[TmxTile]:
        return self.tiles.get(get_tile_id_without_flags(tile_id))

    def get_unique_list_of_visible_object_tile_meshes(self) -> List[TmxObjectTileMesh]:
        """
        One mesh per distinct tile used by visible tile objects.

        Flip bits are ignored: objects that only differ in flips share the mesh.
        """
        meshes: Dict[int, TmxObjectTileMesh] = {}
        for group in self.object_groups:
            if not group.visible:
                continue
            for obj in group.objects:
                if not obj.visible or obj.kind != "tile":
                    continue
                tile_id = get_tile_id_without_flags(obj.gid)
                if tile_id in meshes:
                    continue
                tile = self.tiles.get(tile_id)
                stem = tile.image.stem if tile is not None else "missing"
                meshes[tile_id] = TmxObjectTileMesh(f"tile-obj-{stem}-{tile_id}", [tile_id])
        return list(meshes.values())
