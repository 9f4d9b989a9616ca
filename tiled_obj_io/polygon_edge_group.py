"""
Polygon Edge Group Module

Finds the edges shared between counter-clockwise polygons, the first step
towards merging adjoining collision shapes into simpler outlines.

Polygons and edges live in two lists and refer to each other by index:
an edge stores the handles of its polygons, a polygon stores the handles
of its edges.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

Point = Tuple[float, float]


class AmbiguousEdgeError(ValueError):
    """An edge is claimed by more than two polygons."""


@dataclass
class PolygonEdge:
    """
    A boundary edge and the polygons on either side of it.

    Attributes:
        p, q: Endpoints in the direction the major polygon runs them
        major: Handle of the polygon that added the edge (CCW side)
        major_point_index: Index of p within the major polygon
        minor: Handle of the polygon that runs the edge as q -> p, if any
    """
    p: Point
    q: Point
    major: int
    major_point_index: int
    minor: Optional[int] = None

    @property
    def is_shared(self) -> bool:
        return self.minor is not None

    def assign_minor_partner(self, polygon: int):
        if self.minor is not None:
            raise AmbiguousEdgeError(
                f"Edge {self.p} -> {self.q} already shared by polygons {self.major} "
                f"and {self.minor}; polygon {polygon} also claims it")
        self.minor = polygon


@dataclass
class CompositionPolygon:
    points: List[Point]
    edges: List[int] = field(default_factory=list)


class PolygonEdgeGroup:
    """
    Edges of a set of CCW polygons with shared edges paired up.

    Each boundary may border at most two polygons. A third claim raises
    AmbiguousEdgeError instead of replacing a partner.
    """

    def __init__(self, polygons: Optional[Iterable[Sequence[Point]]] = None):
        self.polygons: List[CompositionPolygon] = []
        self.edges: List[PolygonEdge] = []
        if polygons is not None:
            self.initialize(polygons)

    def initialize(self, polygons: Iterable[Sequence[Point]]):
        """
        Build the edge list from polygons.

        An edge found running the other way is paired with the current
        polygon as its minor partner. Any other edge, including a second
        claim in the same direction, is recorded as a new edge owned by the
        current polygon. The instance is only updated when the whole build
        succeeds.

        Args:
            polygons: Point sequences, each wound counter-clockwise

        Raises:
            AmbiguousEdgeError: A boundary is claimed by a third polygon
        """
        comp_polygons: List[CompositionPolygon] = []
        edges: List[PolygonEdge] = []
        edge_lookup: Dict[Tuple[Point, Point], int] = {}
        claims: Dict[FrozenSet[Point], int] = {}

        for polygon in polygons:
            points = [(float(x), float(y)) for x, y in polygon]
            handle = len(comp_polygons)
            comp_polygon = CompositionPolygon(points)
            comp_polygons.append(comp_polygon)

            # Pair each point with its predecessor
            for q_idx in range(len(points)):
                p_idx = q_idx - 1 if q_idx > 0 else len(points) - 1
                p = points[p_idx]
                q = points[q_idx]

                boundary = frozenset((p, q))
                claims[boundary] = claims.get(boundary, 0) + 1
                if claims[boundary] > 2:
                    raise AmbiguousEdgeError(
                        f"Edge {p} -> {q} of polygon {handle} is already claimed "
                        f"by two other polygons")

                # Recorded by an earlier polygon running the other way
                edge_idx = edge_lookup.get((q, p))
                if edge_idx is not None:
                    edges[edge_idx].assign_minor_partner(handle)
                    comp_polygon.edges.append(edge_idx)
                    continue

                edge_idx = len(edges)
                edges.append(PolygonEdge(p, q, major=handle, major_point_index=p_idx))
                # Reverse lookups match the first edge recorded for a direction
                edge_lookup.setdefault((p, q), edge_idx)
                comp_polygon.edges.append(edge_idx)

        self.polygons = comp_polygons
        self.edges = edges

    def edges_of(self, polygon: int) -> List[PolygonEdge]:
        return [self.edges[idx] for idx in self.polygons[polygon].edges]

    def shared_edges(self) -> List[PolygonEdge]:
        return [edge for edge in self.edges if edge.is_shared]

    def neighbors(self, polygon: int) -> List[int]:
        """Polygons sharing an edge with the given one, in edge order."""
        result = []
        for edge in self.edges_of(polygon):
            if not edge.is_shared:
                continue
            other = edge.minor if edge.major == polygon else edge.major
            if other != polygon and other not in result:
                result.append(other)
        return result

    def adjacency(self) -> Dict[int, List[int]]:
        return {handle: self.neighbors(handle) for handle in range(len(self.polygons))}
