"""Shared fixtures for tiled_obj_io tests."""

import pytest

from tiled_obj_io.tmx_map import TmxImage, TmxLayer, TmxMap, TmxMesh, TmxTile


def add_image_tiles(tmx_map, image, tile_size, first_gid=1):
    """Register every tile of a grid image starting at first_gid."""
    tw, th = tile_size
    columns = image.width // tw
    rows = image.height // th
    for local_id in range(columns * rows):
        gid = first_gid + local_id
        location = ((local_id % columns) * tw, (local_id // columns) * th)
        tmx_map.tiles[gid] = TmxTile(gid, tile_size, location, image)


def add_layer(tmx_map, name, width, height, tile_ids, visible=True, ignore=""):
    layer = TmxLayer(name, width, height, list(tile_ids), visible=visible, ignore=ignore)
    layer.meshes = TmxMesh.create_meshes(tmx_map, layer)
    tmx_map.layers.append(layer)
    return layer


@pytest.fixture
def tiles_image():
    """64x64 image holding four 32x32 tiles (gids 1-4)."""
    return TmxImage("tiles.png", 64, 64)


@pytest.fixture
def make_map(tiles_image):
    """Factory for an orthogonal 32x32 map with one tile layer."""
    def _make(tile_ids, width, height, render_order="right-down", **layer_kwargs):
        tmx_map = TmxMap(width=width, height=height, tile_width=32, tile_height=32)
        tmx_map.set_render_order(render_order)
        add_image_tiles(tmx_map, tiles_image, (32, 32))
        add_layer(tmx_map, "ground", width, height, tile_ids, **layer_kwargs)
        return tmx_map
    return _make


@pytest.fixture
def simple_tmx_text():
    """2x2 orthogonal map with a csv layer, collision shapes and a tile object."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="orthogonal" renderorder="right-down" width="2" height="2" tilewidth="32" tileheight="32" infinite="0">
 <tileset firstgid="1" name="tiles" tilewidth="32" tileheight="32" tilecount="4" columns="2">
  <image source="tiles.png" width="64" height="64"/>
 </tileset>
 <layer id="1" name="ground" width="2" height="2">
  <data encoding="csv">
1,2,
0,2147483652
</data>
 </layer>
 <objectgroup id="2" name="collision">
  <object id="1" x="0" y="0" width="32" height="32"/>
  <object id="2" x="32" y="0" width="32" height="32"/>
  <object id="3" x="0" y="64">
   <polygon points="0,0 32,0 32,-32"/>
  </object>
  <object id="4" gid="3" x="0" y="96" width="32" height="32"/>
 </objectgroup>
</map>
"""


@pytest.fixture
def simple_tmx_path(tmp_path, simple_tmx_text):
    path = tmp_path / "simple.tmx"
    path.write_text(simple_tmx_text)
    return path
