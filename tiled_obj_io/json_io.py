"""
JSON Writer Module

This module converts a PolygonEdgeGroup to plain JSON data for the step
that merges collision polygons into outlines.
"""

import json
from typing import Any, Dict, TextIO

from .polygon_edge_group import PolygonEdgeGroup


def edge_group_to_json(group: PolygonEdgeGroup) -> Dict[str, Any]:
    """
    Convert an edge group to JSON-serializable data.

    Args:
        group: Built PolygonEdgeGroup

    Returns:
        Dictionary with "Polygons" (points and edge handles) and "Edges"
        (endpoints and owning polygon handles, Minor is null when unshared)
    """
    polygons = []
    for polygon in group.polygons:
        polygons.append({
            "Points": [[x, y] for x, y in polygon.points],
            "Edges": list(polygon.edges),
        })

    edges = []
    for edge in group.edges:
        edges.append({
            "P": [edge.p[0], edge.p[1]],
            "Q": [edge.q[0], edge.q[1]],
            "Major": edge.major,
            "Minor": edge.minor,
        })

    return {"Polygons": polygons, "Edges": edges}


def edge_group_writer(json_out: TextIO, group: PolygonEdgeGroup):
    json.dump(edge_group_to_json(group), json_out, indent=4)
