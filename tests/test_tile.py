import io

import pytest

from snnref.tile import Tile


def test_conv_tile_vn_size_without_folding():
    tile = Tile(3, 3, 2, 4, 1, 1, 5, 6, False)
    assert tile.vn_size == 3 * 3 * 2


def test_conv_tile_folding_adds_one_multiplier():
    plain = Tile(3, 3, 2, 4, 1, 1, 5, 6, False)
    folded = Tile(3, 3, 2, 4, 1, 1, 5, 6, True)
    assert folded.vn_size == plain.vn_size + 1
    assert folded.num_vns == plain.num_vns


def test_conv_tile_num_vns():
    tile = Tile(1, 1, 1, 4, 2, 3, 5, 6, False)
    assert tile.num_vns == 4 * 2 * 3 * 5 * 6


def test_fully_connected_dimensions():
    tile = Tile.fully_connected(7, 5, 3, False)
    assert (tile.t_r, tile.t_s, tile.t_c) == (1, 3, 1)
    assert (tile.t_k, tile.t_g, tile.t_n) == (5, 1, 1)
    assert (tile.t_x_, tile.t_y_) == (7, 1)
    assert tile.vn_size == 3


def test_fully_connected_num_vns_counts_k():
    tile = Tile.fully_connected(7, 5, 3, True)
    assert tile.num_vns == 7 * 5 * 3
    assert tile.vn_size == 4
    assert tile.folding is True


@pytest.mark.parametrize("indent", [0, 2, 6])
def test_format_configuration_indentation(indent):
    tile = Tile(3, 2, 1, 4, 1, 1, 5, 6, False)
    lines = tile.format_configuration(indent).split("\n")
    assert lines[0] == " " * indent + '"TileConfiguration" : {'
    assert lines[-1] == " " * indent + "}"
    for line in lines[1:-1]:
        assert line.startswith(" " * (indent + 4) + '"')


def test_format_configuration_content():
    tile = Tile(3, 2, 1, 4, 1, 1, 5, 6, True)
    text = tile.format_configuration(0)
    assert '"T_R" : 3,' in text
    assert '"T_S" : 2,' in text
    assert f'"VN_Size" : {tile.vn_size},' in text
    assert f'"Num_VNs" : {tile.num_vns},' in text
    assert '"folding_enabled" : 1' in text
    assert not text.endswith("\n")


def test_format_configuration_folding_disabled():
    tile = Tile(1, 1, 1, 1, 1, 1, 1, 1, False)
    lines = tile.format_configuration(0).split("\n")
    assert lines[-2].strip() == '"folding_enabled" : 0'
    assert len(lines) == 13


def test_print_configuration_writes_formatted_text():
    tile = Tile.fully_connected(2, 3, 4, False)
    buffer = io.StringIO()
    tile.print_configuration(buffer, 2)
    assert buffer.getvalue() == tile.format_configuration(2)