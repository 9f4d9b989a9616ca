"""
TMX Mesh Component Data Structures

This module provides the value types shared by the OBJ export pass:
positions, texture coordinates, quad corners, face records and groups.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

# Every face of an exported map shares the single "vn 0 0 -1" normal
NORMAL_INDEX = 0


@dataclass(frozen=True)
class Vertex3:
    """A position in output model space. Equality is exact."""
    x: float
    y: float
    z: float

    @classmethod
    def from_point(cls, point: Tuple[float, float], depth: float) -> "Vertex3":
        return cls(point[0], point[1], depth)

    def __str__(self):
        return f"{self.x} {self.y} {self.z}"


@dataclass(frozen=True)
class TextureCoordinate:
    """A (u, v) texture coordinate. Equality is exact."""
    u: float
    v: float

    def __str__(self):
        return f"{self.u} {self.v}"


@dataclass
class FaceCorners:
    """
    The four corners of a quad in output space plus a shared depth.

    Attributes:
        points: Four (x, y) points in CCW order
        depth: z value given to every corner
    """
    points: Sequence[Tuple[float, float]]
    depth: float = 0.0

    @property
    def v0(self) -> Vertex3:
        return Vertex3.from_point(self.points[0], self.depth)

    @property
    def v1(self) -> Vertex3:
        return Vertex3.from_point(self.points[1], self.depth)

    @property
    def v2(self) -> Vertex3:
        return Vertex3.from_point(self.points[2], self.depth)

    @property
    def v3(self) -> Vertex3:
        return Vertex3.from_point(self.points[3], self.depth)

    def vertices(self) -> List[Vertex3]:
        return [self.v0, self.v1, self.v2, self.v3]


@dataclass(frozen=True)
class FaceRecord:
    """
    A quad face as four (vertex_index, uv_index) pairs.

    Indices are zero-based store indices; the writer shifts them to the
    1-based indices OBJ expects. The normal index is always NORMAL_INDEX.
    """
    corners: Tuple[Tuple[int, int], ...]
    normal_index: int = NORMAL_INDEX

    def __post_init__(self):
        if len(self.corners) != 4:
            raise ValueError(f"Quad face needs 4 corners, got {len(self.corners)}")


@dataclass
class MeshGroup:
    """A named "g" group and its faces in insertion order."""
    name: str
    faces: List[FaceRecord] = field(default_factory=list)


@dataclass
class MeshDocument:
    """
    Result of one export pass.

    Attributes:
        vertices: Stored positions in index order
        uvs: Stored texture coordinates in index order
        groups: Face groups in encounter order
    """
    vertices: List[Vertex3]
    uvs: List[TextureCoordinate]
    groups: List[MeshGroup]

    @property
    def face_count(self) -> int:
        return sum(len(group.faces) for group in self.groups)
