"""
TMX Math Module

Tile-id flag bits and the flip/rotate transform used for tile geometry.
"""

from typing import Sequence, Tuple

import numpy as np

FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000
ROTATED_HEXAGONAL_120_FLAG = 0x10000000

ALL_FLAGS = (FLIPPED_HORIZONTALLY_FLAG | FLIPPED_VERTICALLY_FLAG |
             FLIPPED_DIAGONALLY_FLAG | ROTATED_HEXAGONAL_120_FLAG)


def get_tile_id_without_flags(tile_id: int) -> int:
    return tile_id & ~ALL_FLAGS & 0xFFFFFFFF


def is_tile_flipped_horizontally(tile_id: int) -> bool:
    return (tile_id & FLIPPED_HORIZONTALLY_FLAG) != 0


def is_tile_flipped_vertically(tile_id: int) -> bool:
    return (tile_id & FLIPPED_VERTICALLY_FLAG) != 0


def is_tile_flipped_diagonally(tile_id: int) -> bool:
    return (tile_id & FLIPPED_DIAGONALLY_FLAG) != 0


def transform_points_diag_first(points: Sequence[Tuple[float, float]],
                                origin: Tuple[float, float],
                                diagonal: bool,
                                horizontal: bool,
                                vertical: bool) -> np.ndarray:
    """
    Flip points about an origin in Tiled's order: diagonal, horizontal, vertical.

    The diagonal flip transposes x and y. Horizontal and vertical flips
    mirror the x and y axis respectively.

    Args:
        points: Sequence of (x, y) points
        origin: Pivot of the transform
        diagonal: Apply the diagonal flip
        horizontal: Apply the horizontal flip
        vertical: Apply the vertical flip

    Returns:
        (n, 2) float64 array of transformed points
    """
    pts = np.array(points, dtype=np.float64).reshape(-1, 2)
    pivot = np.array(origin, dtype=np.float64)

    local = pts - pivot
    if diagonal:
        local = local[:, ::-1]
    if horizontal:
        local = local * np.array([-1.0, 1.0])
    if vertical:
        local = local * np.array([1.0, -1.0])

    return local + pivot


def rotate_points(points: Sequence[Tuple[float, float]],
                  origin: Tuple[float, float],
                  degrees: float) -> np.ndarray:
    """
    Rotate points about an origin the way Tiled rotates objects.

    Angles are in degrees and turn clockwise on screen, where y points down.

    Returns:
        (n, 2) float64 array of rotated points
    """
    pts = np.array(points, dtype=np.float64).reshape(-1, 2)
    pivot = np.array(origin, dtype=np.float64)

    theta = np.radians(degrees)
    cos_t, sin_t = np.cos(theta), np.sin(theta)
    rotation = np.array([[cos_t, -sin_t],
                         [sin_t, cos_t]])

    return (pts - pivot) @ rotation.T + pivot
