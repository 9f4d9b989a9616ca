"""
TMX Reader Module

This module reads Tiled TMX maps (and the external TSX tilesets they
reference) into the TmxMap model used by the OBJ export.
"""

import base64
import gzip
import logging
import xml.etree.ElementTree as ET
import zlib
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from .tmx_map import (
    IGNORE_ALL,
    IGNORE_COLLISION,
    IGNORE_NONE,
    IGNORE_VISUAL,
    ORIENTATION_ISOMETRIC,
    ORIENTATION_ORTHOGONAL,
    TmxImage,
    TmxLayer,
    TmxMap,
    TmxMesh,
    TmxObject,
    TmxObjectGroup,
    TmxTile,
)

logger = logging.getLogger(__name__)

IGNORE_PROPERTY = "unity:ignore"
_IGNORE_VALUES = (IGNORE_NONE, IGNORE_VISUAL, IGNORE_COLLISION, IGNORE_ALL)


class TMXReadError(Exception):
    """The TMX/TSX document cannot be read into a map."""


def _int_attr(element: ET.Element, name: str, default: Optional[int] = None) -> int:
    value = element.get(name)
    if value is None:
        if default is None:
            raise TMXReadError(f"<{element.tag}> is missing required attribute '{name}'")
        return default
    try:
        return int(value)
    except ValueError:
        raise TMXReadError(f"<{element.tag}> attribute '{name}' is not an integer: {value!r}")


def _float_attr(element: ET.Element, name: str, default: float = 0.0) -> float:
    value = element.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise TMXReadError(f"<{element.tag}> attribute '{name}' is not a number: {value!r}")


def _is_visible(element: ET.Element) -> bool:
    return element.get("visible", "1") != "0"


def _read_properties(element: ET.Element) -> Dict[str, str]:
    properties = {}
    props = element.find("properties")
    if props is None:
        return properties
    for prop in props.findall("property"):
        name = prop.get("name")
        if name is not None:
            properties[name] = prop.get("value", prop.text or "")
    return properties


def parse_points(points: str) -> List[Tuple[float, float]]:
    """
    Convert a TMX points attribute to (x, y) tuples.

    Args:
        points: Space-separated "x,y" pairs

    Returns:
        List of points
    """
    result = []
    for token in points.strip().split():
        try:
            x, y = token.split(",")
            result.append((float(x), float(y)))
        except ValueError:
            raise TMXReadError(f"Invalid point in points list: {token!r}")
    return result


def decode_layer_data(data: ET.Element, expected: int) -> List[int]:
    """
    Decode the <data> element of a tile layer to raw tile ids.

    Supports csv, base64 (uncompressed, zlib or gzip) and plain <tile>
    children.

    Args:
        data: The <data> element
        expected: Number of cells in the layer

    Returns:
        Raw tile ids (flag bits included) in row-major order
    """
    if data.find("chunk") is not None:
        raise TMXReadError("Infinite (chunked) maps are not supported")

    encoding = data.get("encoding")
    compression = data.get("compression")

    if encoding is None:
        tile_ids = [_int_attr(tile, "gid", 0) for tile in data.findall("tile")]
    elif encoding == "csv":
        text = (data.text or "").replace("\n", "").strip()
        try:
            tile_ids = [int(token) for token in text.split(",") if token.strip()]
        except ValueError as e:
            raise TMXReadError(f"Invalid csv layer data: {e}")
    elif encoding == "base64":
        try:
            raw = base64.b64decode((data.text or "").strip())
        except ValueError as e:
            raise TMXReadError(f"Invalid base64 layer data: {e}")

        try:
            if compression == "zlib":
                raw = zlib.decompress(raw)
            elif compression == "gzip":
                raw = gzip.decompress(raw)
            elif compression is not None:
                raise TMXReadError(f"Unsupported layer compression: {compression}")
        except (zlib.error, OSError, EOFError) as e:
            raise TMXReadError(f"Cannot decompress {compression} layer data: {e}")

        if len(raw) % 4 != 0:
            raise TMXReadError("base64 layer data is not a whole number of tile ids")
        tile_ids = np.frombuffer(raw, dtype="<u4").tolist()
    else:
        raise TMXReadError(f"Unsupported layer encoding: {encoding}")

    if len(tile_ids) != expected:
        raise TMXReadError(f"Layer data has {len(tile_ids)} tiles, expected {expected}")
    return tile_ids


class TMXReader:
    """
    Reader for Tiled TMX files using XML parsing.

    Builds a TmxMap with its tile definitions, tile layers (already split
    into meshes) and object groups.
    """

    def __init__(self, doc_path: Union[str, Path]):
        """
        Initialize TMX reader.

        Args:
            doc_path: Path to the TMX file
        """
        self.doc_path = Path(doc_path)
        self.root = self._parse(self.doc_path)
        if self.root.tag != "map":
            raise TMXReadError(f"{self.doc_path} is not a TMX map (root is <{self.root.tag}>)")

    @staticmethod
    def _parse(path: Path) -> ET.Element:
        try:
            return ET.parse(str(path)).getroot()
        except ET.ParseError as e:
            raise TMXReadError(f"Invalid XML in {path}: {e}")
        except FileNotFoundError:
            raise TMXReadError(f"File not found: {path}")

    def read(self) -> TmxMap:
        root = self.root
        if root.get("infinite", "0") == "1":
            raise TMXReadError("Infinite maps are not supported")

        orientation = root.get("orientation", ORIENTATION_ORTHOGONAL)
        if orientation not in (ORIENTATION_ORTHOGONAL, ORIENTATION_ISOMETRIC):
            raise TMXReadError(f"Unsupported map orientation: {orientation}")

        tmx_map = TmxMap(
            width=_int_attr(root, "width"),
            height=_int_attr(root, "height"),
            tile_width=_int_attr(root, "tilewidth"),
            tile_height=_int_attr(root, "tileheight"),
            orientation=orientation,
        )
        try:
            tmx_map.set_render_order(root.get("renderorder", "right-down"))
        except ValueError as e:
            raise TMXReadError(str(e))

        for tileset in root.findall("tileset"):
            self._read_tileset(tileset, tmx_map)

        self._read_layers(root, tmx_map, parent_visible=True)

        logger.info("Read map %s: %dx%d, %d tiles, %d tile layers, %d object groups",
                    self.doc_path.name, tmx_map.width, tmx_map.height, len(tmx_map.tiles),
                    len(tmx_map.layers), len(tmx_map.object_groups))
        return tmx_map

    def _read_tileset(self, element: ET.Element, tmx_map: TmxMap):
        first_gid = _int_attr(element, "firstgid")
        base_dir = self.doc_path.parent

        source = element.get("source")
        if source is not None:
            tsx_path = base_dir / source
            element = self._parse(tsx_path)
            if element.tag != "tileset":
                raise TMXReadError(f"{tsx_path} is not a TSX tileset")
            base_dir = tsx_path.parent

        name = element.get("name", "")
        tile_width = _int_attr(element, "tilewidth")
        tile_height = _int_attr(element, "tileheight")
        spacing = _int_attr(element, "spacing", 0)
        margin = _int_attr(element, "margin", 0)

        offset = (0.0, 0.0)
        tile_offset = element.find("tileoffset")
        if tile_offset is not None:
            offset = (_float_attr(tile_offset, "x"), _float_attr(tile_offset, "y"))

        image_elem = element.find("image")
        if image_elem is not None:
            image = self._read_image(image_elem, base_dir)
            columns = _int_attr(element, "columns", 0)
            if columns <= 0:
                columns = max(1, (image.width - 2 * margin + spacing) // (tile_width + spacing))
            rows = max(1, (image.height - 2 * margin + spacing) // (tile_height + spacing))
            tile_count = _int_attr(element, "tilecount", columns * rows)

            for local_id in range(tile_count):
                col = local_id % columns
                row = local_id // columns
                location = (margin + col * (tile_width + spacing),
                            margin + row * (tile_height + spacing))
                global_id = first_gid + local_id
                tmx_map.tiles[global_id] = TmxTile(global_id, (tile_width, tile_height),
                                                   location, image, offset)
        else:
            # Image collection: every tile brings its own image
            for tile_elem in element.findall("tile"):
                tile_image = tile_elem.find("image")
                if tile_image is None:
                    continue
                image = self._read_image(tile_image, base_dir)
                global_id = first_gid + _int_attr(tile_elem, "id")
                tmx_map.tiles[global_id] = TmxTile(global_id, image.size, (0, 0), image, offset)

        logger.debug("Read tileset '%s' (firstgid=%d)", name, first_gid)

    def _read_image(self, element: ET.Element, base_dir: Path) -> TmxImage:
        source = element.get("source")
        if source is None:
            raise TMXReadError("Embedded tileset image data is not supported")
        return TmxImage(
            source=str(base_dir / source),
            width=_int_attr(element, "width"),
            height=_int_attr(element, "height"),
        )

    def _read_layers(self, parent: ET.Element, tmx_map: TmxMap, parent_visible: bool):
        for child in parent:
            visible = parent_visible and _is_visible(child)
            if child.tag == "layer":
                tmx_map.layers.append(self._read_tile_layer(child, tmx_map, visible))
            elif child.tag == "objectgroup":
                tmx_map.object_groups.append(self._read_object_group(child, visible))
            elif child.tag == "group":
                self._read_layers(child, tmx_map, visible)

    def _read_tile_layer(self, element: ET.Element, tmx_map: TmxMap,
                         visible: bool) -> TmxLayer:
        width = _int_attr(element, "width", tmx_map.width)
        height = _int_attr(element, "height", tmx_map.height)

        data = element.find("data")
        if data is None:
            raise TMXReadError(f"Layer '{element.get('name', '')}' has no <data>")

        ignore = _read_properties(element).get(IGNORE_PROPERTY, IGNORE_NONE).lower()
        if ignore not in _IGNORE_VALUES:
            raise TMXReadError(f"Unknown {IGNORE_PROPERTY} value: {ignore!r}")

        layer = TmxLayer(
            name=element.get("name", ""),
            width=width,
            height=height,
            tile_ids=decode_layer_data(data, width * height),
            visible=visible,
            ignore=ignore,
        )
        layer.meshes = TmxMesh.create_meshes(tmx_map, layer)
        return layer

    def _read_object_group(self, element: ET.Element, visible: bool) -> TmxObjectGroup:
        group = TmxObjectGroup(name=element.get("name", ""), visible=visible)

        for obj_elem in element.findall("object"):
            obj = TmxObject(
                kind="rectangle",
                x=_float_attr(obj_elem, "x"),
                y=_float_attr(obj_elem, "y"),
                width=_float_attr(obj_elem, "width"),
                height=_float_attr(obj_elem, "height"),
                name=obj_elem.get("name", ""),
                visible=_is_visible(obj_elem),
                rotation=_float_attr(obj_elem, "rotation"),
            )

            if obj_elem.get("gid") is not None:
                obj.kind = "tile"
                obj.gid = _int_attr(obj_elem, "gid")
            elif obj_elem.find("polygon") is not None:
                obj.kind = "polygon"
                obj.points = parse_points(obj_elem.find("polygon").get("points", ""))
            elif obj_elem.find("polyline") is not None:
                obj.kind = "polyline"
                obj.points = parse_points(obj_elem.find("polyline").get("points", ""))
            elif obj_elem.find("ellipse") is not None:
                obj.kind = "ellipse"
            elif obj_elem.find("point") is not None:
                obj.kind = "point"

            group.objects.append(obj)

        return group


def read_tmx(doc_path: Union[str, Path]) -> TmxMap:
    return TMXReader(doc_path).read()
