"""
OBJ Face Calculation Module

Computes the four corner positions and the four texture coordinates of a
tile quad. Both use the same slot order so that position i and uv i
describe the same corner.

Output space is Tiled pixel space with y negated. Corners enumerated as
(top-left, top-right, bottom-right, bottom-left) are stored into slots
(3, 2, 1, 0), which gives counter-clockwise winding in that space.
"""

from typing import List, Tuple

import numpy as np

from .tmx_math import transform_points_diag_first

Point = Tuple[float, float]

# Inward unit vector for each corner (TL, TR, BR, BL) in pixel space
_TUCKS = ((1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0), (1.0, -1.0))


def point_to_obj_vertex(point: Point) -> Point:
    x, y = point
    # 0 - y keeps the top row at +0.0
    return (float(x), 0.0 - float(y))


def point_to_texture_coordinate(point: Point, image_size: Tuple[int, int]) -> Point:
    """Pixel position on the source image to normalized (u, v), v measured from the bottom."""
    width, height = image_size
    return (point[0] / width, 1.0 - point[1] / height)


def _to_ccw_slots(corners: List[Point]) -> List[Point]:
    """(TL, TR, BR, BL) into slots (3, 2, 1, 0)."""
    return [corners[3], corners[2], corners[1], corners[0]]


def _rectangle_corners(origin: Point, size: Tuple[float, float]) -> List[Point]:
    x, y = origin
    w, h = size
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def calculate_face_vertices(map_location: Point, tile_size: Tuple[int, int],
                            map_tile_height: int) -> List[Point]:
    """
    Corner positions of a tile placed on a map cell.

    Tiles taller than the map's tile height hang upward from their cell.

    Args:
        map_location: Top-left of the cell in map pixels
        tile_size: (width, height) of the tile in pixels
        map_tile_height: Nominal tile height of the map

    Returns:
        Four output-space points in CCW order
    """
    x, y = map_location
    y = y - (tile_size[1] - map_tile_height)

    corners = _rectangle_corners((x, y), tile_size)
    return _to_ccw_slots([point_to_obj_vertex(pt) for pt in corners])


def calculate_face_vertices_tile_object(tile_size: Tuple[int, int],
                                        offset: Point) -> List[Point]:
    """
    Corner positions of a tile object quad.

    Tile objects are built at the origin and moved by the tile offset only;
    whatever places the object in the world supplies position and depth.
    """
    corners = _rectangle_corners((0.0, 0.0), tile_size)
    corners = [(px + offset[0], py + offset[1]) for px, py in corners]
    return _to_ccw_slots([point_to_obj_vertex(pt) for pt in corners])


def calculate_face_texture_coordinates(location_on_source: Tuple[int, int],
                                       tile_size: Tuple[int, int],
                                       image_size: Tuple[int, int],
                                       flip_diagonal: bool = False,
                                       flip_horizontal: bool = False,
                                       flip_vertical: bool = False,
                                       texel_bias: float = 0) -> List[Point]:
    """
    Texture coordinates for a tile's source rectangle.

    Flips are applied about the rectangle center (diagonal first). With a
    texel bias each corner is tucked 1/texel_bias inward; the tuck is put
    through the same flips so it follows the corner it belongs to.

    Args:
        location_on_source: Top-left of the tile in the source image (pixels)
        tile_size: (width, height) of the tile in pixels
        image_size: (width, height) of the source image in pixels
        flip_diagonal: Tile is flipped diagonally
        flip_horizontal: Tile is flipped horizontally
        flip_vertical: Tile is flipped vertically
        texel_bias: Tuck denominator, 0 disables the tuck

    Returns:
        Four (u, v) pairs in the same slot order as calculate_face_vertices
    """
    if image_size[0] <= 0 or image_size[1] <= 0:
        raise ValueError(f"Invalid source image size: {image_size}")
    if texel_bias < 0:
        raise ValueError(f"Texel bias must not be negative: {texel_bias}")

    corners = _rectangle_corners(location_on_source, tile_size)
    center = (location_on_source[0] + tile_size[0] * 0.5,
              location_on_source[1] + tile_size[1] * 0.5)
    points = transform_points_diag_first(corners, center,
                                         flip_diagonal, flip_horizontal, flip_vertical)

    bias = 0.0
    tucks = np.zeros((4, 2), dtype=np.float64)
    if texel_bias > 0:
        bias = 1.0 / texel_bias
        tucks = transform_points_diag_first(_TUCKS, (0.0, 0.0),
                                            flip_diagonal, flip_horizontal, flip_vertical)

    coordinates = []
    for (px, py), (tx, ty) in zip(points.tolist(), tucks.tolist()):
        u, v = point_to_texture_coordinate((px, py), image_size)
        coordinates.append((u + tx * bias, v - ty * bias))

    return _to_ccw_slots(coordinates)


def calculate_face_depth(position_y: float, map_height: float) -> float:
    """
    Depth for a face whose bottom edge sits at position_y.

    Strictly decreasing in position_y: faces lower on the map are closer
    to the camera.
    """
    if map_height <= 0:
        raise ValueError(f"Invalid map height: {map_height}")
    z = -(position_y / map_height)
    return 0.0 if z == 0 else z
