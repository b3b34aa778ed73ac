import pytest

from agari.tiles import (
    ALL_TILES,
    InvalidTile,
    compare,
    index_to_tile,
    is_simple,
    is_terminal,
    is_terminal_or_honor,
    is_value_tile,
    next_dora_tile,
    normalize_tile,
    sort_tiles,
    tile_counts,
    tile_name,
    tile_to_index,
)


def test_normalize_red_fives_and_honor_kanji():
    assert normalize_tile("5mr") == "5m"
    assert normalize_tile("5pr") == "5p"
    assert normalize_tile("5sr") == "5s"
    assert normalize_tile("東") == "E"
    assert normalize_tile("中") == "C"
    assert normalize_tile("7s") == "7s"


@pytest.mark.parametrize("tile", ["0m", "10p", "4mr", "X", "", "m1"])
def test_normalize_rejects_unknown_codes(tile):
    with pytest.raises(InvalidTile):
        normalize_tile(tile)


def test_index_order_covers_every_tile_once():
    assert tile_to_index("1m") == 0
    assert tile_to_index("9s") == 26
    assert tile_to_index("E") == 27
    assert tile_to_index("C") == 33
    assert [index_to_tile(i) for i in range(34)] == list(ALL_TILES)


def test_sort_and_compare_follow_suit_then_number_then_honors():
    assert sort_tiles(["E", "1s", "9m", "1m", "5pr", "P"]) == ["1m", "9m", "5p", "1s", "E", "P"]
    assert compare("1m", "2m") == -1
    assert compare("9s", "E") == -1
    assert compare("C", "N") == 1
    assert compare("5mr", "5m") == 0


def test_tile_counts_merges_red_fives():
    counts = tile_counts(["5m", "5mr", "E"])
    assert counts[tile_to_index("5m")] == 2
    assert counts[tile_to_index("E")] == 1
    assert sum(counts) == 3


def test_tile_classes():
    assert is_terminal("1p") and is_terminal("9s")
    assert not is_terminal("E")
    assert is_terminal_or_honor("N")
    assert is_simple("2m") and is_simple("8p")
    assert not is_simple("1m") and not is_simple("P")


def test_value_tiles_depend_on_winds():
    assert is_value_tile("P")
    assert is_value_tile("E", round_wind="E", seat_wind="S")
    assert is_value_tile("S", round_wind="E", seat_wind="S")
    assert not is_value_tile("W", round_wind="E", seat_wind="S")
    assert not is_value_tile("5m", round_wind="E", seat_wind="S")


@pytest.mark.parametrize(
    "indicator,dora",
    [("4p", "5p"), ("9m", "1m"), ("5sr", "6s"), ("N", "E"), ("E", "S"), ("C", "P"), ("P", "F")],
)
def test_next_dora_tile_wraps_within_group(indicator, dora):
    assert next_dora_tile(indicator) == dora


def test_tile_name_shows_honors_as_kanji():
    assert tile_name("P") == "白"
    assert tile_name("3m") == "3m"
