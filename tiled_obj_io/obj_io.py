"""
OBJ Writer Module

This module writes a built MeshDocument as Wavefront OBJ text: indexed
vertices, texture coordinates, one shared normal and grouped quad faces.
"""

import io
import logging
from typing import TextIO

import numpy as np

from .tmx_mesh_component import MeshDocument

logger = logging.getLogger(__name__)

OBJ_HEADER = "# Wavefront OBJ file automatically generated by tiled_obj_io"
OBJ_NORMAL = "vn 0 0 -1"


def format_obj_number(value: float) -> str:
    """
    Shortest positional text that reads back as the same float.

    Integral values lose their '.0' and -0 becomes 0.
    """
    return np.format_float_positional(value + 0.0, trim="-")


def obj_writer(obj_out: TextIO, document: MeshDocument):
    """
    Write a mesh document to an OBJ stream.

    Args:
        obj_out: Output file object
        document: MeshDocument from an export pass
    """
    obj_out.write(f"{OBJ_HEADER}\n\n")

    logger.info("Writing face vertices")
    obj_out.write(f"# Vertices (Count = {len(document.vertices)})\n")
    for vertex in document.vertices:
        obj_out.write(f"v {format_obj_number(vertex.x)} {format_obj_number(vertex.y)} "
                      f"{format_obj_number(vertex.z)}\n")
    obj_out.write("\n")

    logger.info("Writing face uv coordinates")
    obj_out.write(f"# Texture coordinates (Count = {len(document.uvs)})\n")
    for uv in document.uvs:
        obj_out.write(f"vt {format_obj_number(uv.u)} {format_obj_number(uv.v)}\n")
    obj_out.write("\n")

    # Every face shares the one normal
    obj_out.write("# Normal\n")
    obj_out.write(f"{OBJ_NORMAL}\n\n")

    obj_out.write(f"# Groups (Count = {len(document.groups)})\n")
    for group in document.groups:
        obj_out.write(f"\ng {group.name}\n")
        # OBJ uses 1-based indexing
        for face in group.faces:
            obj_out.write("f")
            for vertex_idx, uv_idx in face.corners:
                obj_out.write(f" {vertex_idx + 1}/{uv_idx + 1}/{face.normal_index + 1}")
            obj_out.write("\n")


def obj_string(document: MeshDocument) -> str:
    """Render a mesh document to OBJ text in memory."""
    buffer = io.StringIO()
    obj_writer(buffer, document)
    return buffer.getvalue()
