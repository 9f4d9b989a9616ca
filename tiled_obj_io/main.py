#!/usr/bin/env python3
"""
Tiled TMX to OBJ Converter - Main Program

Reads a TMX map, builds the Wavefront OBJ mesh of its visible tile layers
and tile objects, and optionally writes the shared-edge graph of the
map's collision polygons as JSON.

Usage:
    tiled-obj map.tmx -o map.obj --texel-bias 8192 --depth-buffer
    tiled-obj map.tmx --outline-json map_outlines.json
"""

import argparse
import io
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .collision_io import collect_collision_polygons
from .json_io import edge_group_writer
from .obj_builder import TileLookupError, build_mesh_document
from .obj_io import obj_writer
from .polygon_edge_group import AmbiguousEdgeError, PolygonEdgeGroup
from .settings import ExportSettings
from .tmx_io import TMXReadError, read_tmx

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a Tiled TMX map into a Wavefront OBJ mesh")
    parser.add_argument("tmx", type=Path, help="Path to the TMX map")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="OBJ output path (default: map path with .obj suffix)")
    parser.add_argument("--writable-vertices", action="store_true",
                        help="Do not share vertices between faces")
    parser.add_argument("--depth-buffer", action="store_true",
                        help="Give tile faces a depth from their vertical position")
    parser.add_argument("--texel-bias", type=float, default=0,
                        help="Texel bias denominator for seam tucking, 0 disables (default: 0)")
    parser.add_argument("--outline-json", type=Path, default=None,
                        help="Write the collision polygon edge graph to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log each mesh group as it is written")
    return parser.parse_args(argv)


def convert(tmx_path: Path, obj_path: Path, settings: ExportSettings,
            outline_path: Optional[Path] = None) -> dict:
    """
    Convert one map. Nothing is written unless the whole export succeeds.

    Returns:
        Dictionary with run statistics
    """
    tmx_map = read_tmx(tmx_path)
    document = build_mesh_document(tmx_map, settings)

    obj_text = io.StringIO()
    obj_writer(obj_text, document)

    edge_group = None
    if outline_path is not None:
        edge_group = PolygonEdgeGroup(collect_collision_polygons(tmx_map))
        logger.info("Collision polygons: %d, shared edges: %d",
                    len(edge_group.polygons), len(edge_group.shared_edges()))

    obj_path.parent.mkdir(parents=True, exist_ok=True)
    obj_path.write_text(obj_text.getvalue())

    if edge_group is not None:
        outline_path.parent.mkdir(parents=True, exist_ok=True)
        with open(outline_path, 'w') as json_out:
            edge_group_writer(json_out, edge_group)

    return {
        'vertices': len(document.vertices),
        'uvs': len(document.uvs),
        'groups': len(document.groups),
        'faces': document.face_count,
        'polygons': len(edge_group.polygons) if edge_group else 0,
        'shared_edges': len(edge_group.shared_edges()) if edge_group else 0,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main program entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    time_start = time.time()

    obj_path = args.output if args.output is not None else args.tmx.with_suffix(".obj")

    print("=" * 60)
    print("Tiled TMX to OBJ Converter")
    print("=" * 60)
    print(f"Map:                 {args.tmx}")
    print(f"OBJ output:          {obj_path}")

    try:
        settings = ExportSettings(
            writable_vertices=args.writable_vertices,
            depth_buffer_enabled=args.depth_buffer,
            texel_bias=args.texel_bias,
        )
        for key, value in settings.to_dict().items():
            print(f"{key + ':':<20} {value}")
        stats = convert(args.tmx, obj_path, settings, args.outline_json)
    except (TMXReadError, TileLookupError, AmbiguousEdgeError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    time_elapsed = time.time() - time_start

    print("\n" + "=" * 60)
    print("PROCESSING COMPLETE")
    print("=" * 60)
    print(f"Time elapsed:        {time_elapsed:.3f} seconds")
    print(f"Groups:              {stats['groups']}")
    print(f"Faces:               {stats['faces']}")
    print(f"Vertices:            {stats['vertices']}")
    print(f"Texture coordinates: {stats['uvs']}")
    if args.outline_json is not None:
        print(f"Outline JSON:        {args.outline_json}")
        print(f"Collision polygons:  {stats['polygons']}")
        print(f"Shared edges:        {stats['shared_edges']}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
