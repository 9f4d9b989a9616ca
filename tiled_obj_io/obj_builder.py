"""
OBJ Mesh Builder Module

Walks the visible tile layers and tile objects of a map and collects the
vertices, texture coordinates and quad faces of the OBJ document.
"""

import logging
from typing import List, Optional, Tuple

from .index_store import HashIndexStore, IndexedValueStore, create_vertex_store
from .obj_face import (
    calculate_face_depth,
    calculate_face_texture_coordinates,
    calculate_face_vertices,
    calculate_face_vertices_tile_object,
)
from .settings import ExportSettings
from .tmx_map import TmxMap, TmxTile
from .tmx_math import (
    get_tile_id_without_flags,
    is_tile_flipped_diagonally,
    is_tile_flipped_horizontally,
    is_tile_flipped_vertically,
)
from .tmx_mesh_component import (
    FaceCorners,
    FaceRecord,
    MeshDocument,
    MeshGroup,
    TextureCoordinate,
)

logger = logging.getLogger(__name__)


class TileLookupError(KeyError):
    """A raw tile id refers to a tile the map does not define."""

    def __init__(self, raw_tile_id: int, context: str = ""):
        self.raw_tile_id = raw_tile_id
        self.tile_id = get_tile_id_without_flags(raw_tile_id)
        message = f"No tile definition for tile id {self.tile_id} (raw id {raw_tile_id})"
        if context:
            message += f" in {context}"
        super().__init__(message)

    def __str__(self):
        return self.args[0]


class ObjMeshBuilder:
    """
    Builds a MeshDocument from a TmxMap.

    Each build() call is a separate export pass with fresh stores.
    """

    def __init__(self, tmx_map: TmxMap, settings: Optional[ExportSettings] = None):
        self.tmx_map = tmx_map
        self.settings = settings if settings is not None else ExportSettings()

        self.vertex_store: IndexedValueStore = None
        self.uv_store: IndexedValueStore = None
        self.groups: List[MeshGroup] = []

    def build(self) -> MeshDocument:
        """
        Run the tile-layer pass followed by the tile-object pass.

        Returns:
            MeshDocument holding the stores' values and the face groups

        Raises:
            TileLookupError: A cell or tile object uses an undefined tile
        """
        self.vertex_store = create_vertex_store(self.settings.writable_vertices)
        self.uv_store = HashIndexStore()
        self.groups = []

        if self.settings.writable_vertices:
            logger.info("Using writable-vertices. This increases the size of the mesh "
                        "but allows vertices to be changed individually after import.")

        self._build_tile_layer_faces()
        self._build_tile_object_faces()

        return MeshDocument(
            vertices=list(self.vertex_store.values),
            uvs=list(self.uv_store.values),
            groups=self.groups,
        )

    def _lookup_tile(self, raw_tile_id: int, context: str) -> TmxTile:
        tile = self.tmx_map.find_tile(raw_tile_id)
        if tile is None:
            raise TileLookupError(raw_tile_id, context)
        return tile

    def _add_face(self, group: MeshGroup, corners: FaceCorners,
                  uvs: List[Tuple[float, float]]):
        pairs = []
        for vertex, (u, v) in zip(corners.vertices(), uvs):
            pairs.append((self.vertex_store.add(vertex),
                          self.uv_store.add(TextureCoordinate(u, v))))
        group.faces.append(FaceRecord(tuple(pairs)))

    def _build_tile_layer_faces(self):
        tmx_map = self.tmx_map
        map_height = tmx_map.map_size_in_pixels[1]

        for layer in tmx_map.enumerate_tile_layers():
            if not layer.visible or layer.ignores_visual:
                continue

            vertical_range = tmx_map.vertical_range(layer.height)
            horizontal_range = tmx_map.horizontal_range(layer.width)

            for mesh in layer.meshes:
                logger.info("Writing '%s' mesh group", mesh.unique_mesh_name)
                group = MeshGroup(mesh.unique_mesh_name)
                self.groups.append(group)

                for y in vertical_range:
                    for x in horizontal_range:
                        tile_index = layer.get_tile_index(x, y)
                        raw_id = mesh.get_tile_id_at(tile_index)

                        # Blank cell
                        if raw_id == 0:
                            continue

                        tile = self._lookup_tile(
                            raw_id, f"layer '{layer.name}' at ({x}, {y})")

                        position = tmx_map.get_map_position_at(x, y)
                        points = calculate_face_vertices(position, tile.tile_size,
                                                         tmx_map.tile_height)

                        depth_z = 0.0
                        if self.settings.depth_buffer_enabled:
                            depth_z = calculate_face_depth(position[1] + tmx_map.tile_height,
                                                           map_height)

                        uvs = calculate_face_texture_coordinates(
                            tile.location_on_source, tile.tile_size, tile.image.size,
                            is_tile_flipped_diagonally(raw_id),
                            is_tile_flipped_horizontally(raw_id),
                            is_tile_flipped_vertically(raw_id),
                            self.settings.texel_bias)

                        self._add_face(group, FaceCorners(points, depth_z), uvs)

    def _build_tile_object_faces(self):
        for tile_mesh in self.tmx_map.get_unique_list_of_visible_object_tile_meshes():
            logger.info("Writing '%s' tile group", tile_mesh.unique_mesh_name)
            group = MeshGroup(tile_mesh.unique_mesh_name)
            self.groups.append(group)

            tile = self._lookup_tile(tile_mesh.tile_ids[0],
                                     f"tile object mesh '{tile_mesh.unique_mesh_name}'")

            points = calculate_face_vertices_tile_object(tile.tile_size, tile.offset)
            uvs = calculate_face_texture_coordinates(
                tile.location_on_source, tile.tile_size, tile.image.size,
                texel_bias=self.settings.texel_bias)

            # Depth comes from whatever places the tile object
            self._add_face(group, FaceCorners(points, 0.0), uvs)


def build_mesh_document(tmx_map: TmxMap,
                        settings: Optional[ExportSettings] = None) -> MeshDocument:
    return ObjMeshBuilder(tmx_map, settings).build()
