"""
Tiled OBJ I/O - Python Implementation

Converts Tiled TMX maps into Wavefront OBJ meshes and finds the edges
shared between collision polygons.
"""

__version__ = "1.0.0"
__author__ = "Tiled OBJ I/O Project"

from .tmx_io import TMXReader, TMXReadError, read_tmx
from .tmx_map import TmxImage, TmxLayer, TmxMap, TmxMesh, TmxObject, TmxObjectGroup, TmxTile
from .tmx_mesh_component import (
    FaceCorners,
    FaceRecord,
    MeshDocument,
    MeshGroup,
    TextureCoordinate,
    Vertex3,
)
from .index_store import HashIndexStore, ListIndexStore, create_vertex_store
from .obj_face import (
    calculate_face_depth,
    calculate_face_texture_coordinates,
    calculate_face_vertices,
    calculate_face_vertices_tile_object,
)
from .obj_builder import ObjMeshBuilder, TileLookupError, build_mesh_document
from .obj_io import obj_string, obj_writer
from .polygon_edge_group import (
    AmbiguousEdgeError,
    CompositionPolygon,
    PolygonEdge,
    PolygonEdgeGroup,
)
from .collision_io import collect_collision_polygons
from .json_io import edge_group_to_json
from .settings import ExportSettings

__all__ = [
    'TMXReader',
    'TMXReadError',
    'read_tmx',
    'TmxImage',
    'TmxLayer',
    'TmxMap',
    'TmxMesh',
    'TmxObject',
    'TmxObjectGroup',
    'TmxTile',
    'FaceCorners',
    'FaceRecord',
    'MeshDocument',
    'MeshGroup',
    'TextureCoordinate',
    'Vertex3',
    'HashIndexStore',
    'ListIndexStore',
    'create_vertex_store',
    'calculate_face_depth',
    'calculate_face_texture_coordinates',
    'calculate_face_vertices',
    'calculate_face_vertices_tile_object',
    'ObjMeshBuilder',
    'TileLookupError',
    'build_mesh_document',
    'obj_string',
    'obj_writer',
    'AmbiguousEdgeError',
    'CompositionPolygon',
    'PolygonEdge',
    'PolygonEdgeGroup',
    'collect_collision_polygons',
    'edge_group_to_json',
    'ExportSettings',
]
