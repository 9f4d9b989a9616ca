"""
Collision Polygon Module

Collects collision shapes from the map's object groups as
counter-clockwise polygons in output space, ready for PolygonEdgeGroup.
"""

from typing import List, Tuple

from .tmx_map import TmxMap, TmxObject
from .tmx_math import rotate_points

Point = Tuple[float, float]


def compute_polygon_area_2d(vertices_2d: List[Point]) -> float:
    """
    Compute the signed area of a 2D polygon.

    Args:
        vertices_2d: List of 2D vertices

    Returns:
        Signed area (positive for CCW, negative for CW)
    """
    area = 0.0
    n = len(vertices_2d)
    for i in range(n):
        j = (i + 1) % n
        area += vertices_2d[i][0] * vertices_2d[j][1]
        area -= vertices_2d[j][0] * vertices_2d[i][1]
    return area * 0.5


def object_to_polygon(obj: TmxObject) -> List[Point]:
    """
    Outline of a rectangle or polygon object in output space (y up).

    Local points are rotated about the object position before y is negated.

    Returns an empty list for object kinds without an area outline.
    """
    if obj.kind == "rectangle":
        local = [(0.0, 0.0), (obj.width, 0.0), (obj.width, obj.height), (0.0, obj.height)]
    elif obj.kind == "polygon":
        local = obj.points
    else:
        return []

    if obj.rotation:
        rotated = rotate_points(local, (0.0, 0.0), obj.rotation)
        local = [(float(px), float(py)) for px, py in rotated]

    return [(obj.x + px, 0.0 - (obj.y + py)) for px, py in local]


def make_ccw(polygon: List[Point]) -> List[Point]:
    if compute_polygon_area_2d(polygon) < 0:
        return list(reversed(polygon))
    return list(polygon)


def collect_collision_polygons(tmx_map: TmxMap) -> List[List[Point]]:
    """
    CCW polygons from visible rectangle and polygon objects.

    Rings with fewer than three points or no area are dropped.
    """
    polygons = []
    for group in tmx_map.object_groups:
        if not group.visible:
            continue
        for obj in group.objects:
            if not obj.visible:
                continue
            polygon = object_to_polygon(obj)
            if len(polygon) < 3 or compute_polygon_area_2d(polygon) == 0:
                continue
            polygons.append(make_ccw(polygon))
    return polygons
