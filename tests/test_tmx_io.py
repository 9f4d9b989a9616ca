"""
Tests for the TMX reader.
"""

import base64
import gzip
import struct
import xml.etree.ElementTree as ET
import zlib

import pytest

from tiled_obj_io.tmx_io import TMXReadError, TMXReader, decode_layer_data, parse_points, read_tmx

RAW_IDS = [1, 0, 0x80000002, 4]


def base64_data(compression=None):
    raw = struct.pack("<4I", *RAW_IDS)
    if compression == "zlib":
        raw = zlib.compress(raw)
    elif compression == "gzip":
        raw = gzip.compress(raw)
    attrs = 'encoding="base64"'
    if compression:
        attrs += f' compression="{compression}"'
    return ET.fromstring(f"<data {attrs}>{base64.b64encode(raw).decode()}</data>")


def write_map(tmp_path, body, attrs='orientation="orthogonal" renderorder="right-down"',
              width=2, height=2, name="map.tmx"):
    path = tmp_path / name
    path.write_text(
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<map version="1.10" {attrs} width="{width}" height="{height}" '
        f'tilewidth="32" tileheight="32">\n{body}\n</map>\n')
    return path


TILESET = """<tileset firstgid="1" name="tiles" tilewidth="32" tileheight="32" tilecount="4" columns="2">
  <image source="tiles.png" width="64" height="64"/>
 </tileset>"""

CSV_LAYER = """<layer id="1" name="ground" width="2" height="2">
  <data encoding="csv">1,0,2147483650,4</data>
 </layer>"""


# ============== Layer Data Tests ==============

class TestDecodeLayerData:

    def test_csv(self):
        data = ET.fromstring('<data encoding="csv">\n1,0,\n2147483650,4\n</data>')
        assert decode_layer_data(data, 4) == RAW_IDS

    @pytest.mark.parametrize("compression", [None, "zlib", "gzip"])
    def test_base64(self, compression):
        assert decode_layer_data(base64_data(compression), 4) == RAW_IDS

    def test_xml_tiles(self):
        data = ET.fromstring('<data><tile gid="1"/><tile/><tile gid="2147483650"/>'
                             '<tile gid="4"/></data>')
        assert decode_layer_data(data, 4) == RAW_IDS

    def test_wrong_count(self):
        data = ET.fromstring('<data encoding="csv">1,2,3</data>')
        with pytest.raises(TMXReadError):
            decode_layer_data(data, 4)

    def test_unsupported_compression(self):
        data = ET.fromstring('<data encoding="base64" compression="zstd">AAAA</data>')
        with pytest.raises(TMXReadError):
            decode_layer_data(data, 1)

    def test_corrupt_zlib(self):
        data = ET.fromstring('<data encoding="base64" compression="zlib">AAAAAA==</data>')
        with pytest.raises(TMXReadError):
            decode_layer_data(data, 1)

    def test_chunks_rejected(self):
        data = ET.fromstring('<data encoding="csv"><chunk x="0" y="0" width="1" height="1">'
                             '1</chunk></data>')
        with pytest.raises(TMXReadError):
            decode_layer_data(data, 1)


class TestParsePoints:

    def test_points(self):
        assert parse_points("0,0 32,0 32,-32.5") == [(0.0, 0.0), (32.0, 0.0), (32.0, -32.5)]

    def test_invalid(self):
        with pytest.raises(TMXReadError):
            parse_points("0,0 32")


# ============== Map Reading Tests ==============

class TestTMXReader:

    def test_simple_map(self, simple_tmx_path):
        tmx_map = read_tmx(simple_tmx_path)
        assert (tmx_map.width, tmx_map.height) == (2, 2)
        assert (tmx_map.tile_width, tmx_map.tile_height) == (32, 32)
        assert sorted(tmx_map.tiles) == [1, 2, 3, 4]
        assert tmx_map.tiles[4].location_on_source == (32, 32)
        assert tmx_map.tiles[4].image.size == (64, 64)

        layer = tmx_map.layers[0]
        assert layer.tile_ids == [1, 2, 0, 0x80000004]
        assert [mesh.unique_mesh_name for mesh in layer.meshes] == ["ground-tiles"]

    def test_objects(self, simple_tmx_path):
        tmx_map = read_tmx(simple_tmx_path)
        objects = tmx_map.object_groups[0].objects
        assert [obj.kind for obj in objects] == ["rectangle", "rectangle", "polygon", "tile"]
        assert objects[2].points == [(0.0, 0.0), (32.0, 0.0), (32.0, -32.0)]
        assert objects[3].gid == 3

    def test_object_rotation(self, tmp_path):
        body = TILESET + """
 <objectgroup name="solid">
  <object id="1" x="0" y="0" width="32" height="8" rotation="90"/>
  <object id="2" x="0" y="0" width="32" height="8"/>
 </objectgroup>"""
        objects = read_tmx(write_map(tmp_path, body)).object_groups[0].objects
        assert [obj.rotation for obj in objects] == [90.0, 0.0]

    def test_render_order(self, tmp_path):
        path = write_map(tmp_path, TILESET + CSV_LAYER,
                         attrs='orientation="orthogonal" renderorder="left-up"')
        tmx_map = read_tmx(path)
        assert (tmx_map.draw_order_horizontal, tmx_map.draw_order_vertical) == (-1, -1)

    def test_isometric(self, tmp_path):
        path = write_map(tmp_path, TILESET + CSV_LAYER, attrs='orientation="isometric"')
        tmx_map = read_tmx(path)
        assert tmx_map.map_size_in_pixels == (64, 64)
        assert tmx_map.get_map_position_at(0, 0) == (16.0, 0.0)
        assert tmx_map.get_map_position_at(1, 1) == (16.0, 32.0)

    def test_external_tileset(self, tmp_path):
        (tmp_path / "sets").mkdir()
        (tmp_path / "sets" / "tiles.tsx").write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<tileset version="1.10" name="tiles" tilewidth="16" tileheight="16" '
            'spacing="2" margin="1" tilecount="4" columns="2">\n'
            ' <tileoffset x="0" y="4"/>\n'
            ' <image source="tiles.png" width="36" height="36"/>\n'
            '</tileset>\n')
        path = write_map(tmp_path, '<tileset firstgid="1" source="sets/tiles.tsx"/>' + CSV_LAYER)
        tmx_map = read_tmx(path)
        tile = tmx_map.tiles[4]
        assert tile.location_on_source == (19, 19)
        assert tile.tile_size == (16, 16)
        assert tile.offset == (0.0, 4.0)
        assert tile.image.source.endswith("tiles.png")
        assert "sets" in tile.image.source

    def test_image_collection_tileset(self, tmp_path):
        body = TILESET + """
 <tileset firstgid="5" name="props" tilewidth="64" tileheight="96" tilecount="1" columns="0">
  <tile id="0"><image source="tree.png" width="64" height="96"/></tile>
 </tileset>""" + CSV_LAYER
        tmx_map = read_tmx(write_map(tmp_path, body))
        tree = tmx_map.tiles[5]
        assert tree.tile_size == (64, 96)
        assert tree.location_on_source == (0, 0)
        assert tree.image.stem == "tree"

    def test_layer_visibility_and_ignore(self, tmp_path):
        body = TILESET + """
 <group name="hidden" visible="0">
  <layer name="inner" width="2" height="2"><data encoding="csv">1,1,1,1</data></layer>
 </group>
 <layer name="collision-only" width="2" height="2">
  <properties><property name="unity:ignore" value="visual"/></properties>
  <data encoding="csv">1,1,1,1</data>
 </layer>"""
        tmx_map = read_tmx(write_map(tmp_path, body))
        inner, collision_only = tmx_map.layers
        assert inner.visible is False
        assert collision_only.ignore == "visual"
        assert collision_only.ignores_visual

    def test_reader_root_check(self, tmp_path):
        path = tmp_path / "not_a_map.tmx"
        path.write_text('<tileset name="x" tilewidth="1" tileheight="1"/>')
        with pytest.raises(TMXReadError):
            TMXReader(path)


class TestTMXReaderErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(TMXReadError):
            read_tmx(tmp_path / "missing.tmx")

    def test_invalid_xml(self, tmp_path):
        path = tmp_path / "broken.tmx"
        path.write_text("<map")
        with pytest.raises(TMXReadError):
            read_tmx(path)

    def test_infinite_map(self, tmp_path):
        path = write_map(tmp_path, TILESET, attrs='orientation="orthogonal" infinite="1"')
        with pytest.raises(TMXReadError):
            read_tmx(path)

    def test_unsupported_orientation(self, tmp_path):
        path = write_map(tmp_path, TILESET + CSV_LAYER, attrs='orientation="hexagonal"')
        with pytest.raises(TMXReadError):
            read_tmx(path)

    def test_bad_ignore_value(self, tmp_path):
        body = TILESET + """
 <layer name="x" width="2" height="2">
  <properties><property name="unity:ignore" value="sometimes"/></properties>
  <data encoding="csv">1,1,1,1</data>
 </layer>"""
        with pytest.raises(TMXReadError):
            read_tmx(write_map(tmp_path, body))

    def test_missing_attribute(self, tmp_path):
        path = tmp_path / "map.tmx"
        path.write_text('<map width="2" height="2" tilewidth="32"/>')
        with pytest.raises(TMXReadError):
            read_tmx(path)
