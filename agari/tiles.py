from __future__ import annotations

import re
from collections.abc import Iterable

SUITS = ("m", "p", "s")
WINDS = ("E", "S", "W", "N")
DRAGONS = ("P", "F", "C")
HONORS = WINDS + DRAGONS

NUM_TILE_TYPES = 34
ALL_TILES = tuple(f"{n}{suit}" for suit in SUITS for n in range(1, 10)) + HONORS

TERMINAL_HONOR_TILES = frozenset({"1m", "9m", "1p", "9p", "1s", "9s", *HONORS})
ORPHAN_INDICES = (0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33)
GREEN_TILES = frozenset({"2s", "3s", "4s", "6s", "8s", "F"})

TILE_RE = re.compile(r"^(?:[1-9][mps]|5[mps]r|[ESWNPFC])$")

HONOR_ALIASES = {"東": "E", "南": "S", "西": "W", "北": "N", "白": "P", "發": "F", "中": "C"}
HONOR_NAMES = {v: k for k, v in HONOR_ALIASES.items()}


class InvalidTile(ValueError):
    pass


def normalize_tile(tile: str) -> str:
    t = HONOR_ALIASES.get(tile, tile)
    if not TILE_RE.fullmatch(t):
        raise InvalidTile(f"Invalid tile code: {tile}")
    if t in {"5mr", "5pr", "5sr"}:
        return t[:2]
    return t


def tile_to_index(tile: str) -> int:
    t = normalize_tile(tile)
    if len(t) == 2:
        return SUITS.index(t[1]) * 9 + int(t[0]) - 1
    return 27 + HONORS.index(t)


def index_to_tile(index: int) -> str:
    return ALL_TILES[index]


def tile_name(tile: str) -> str:
    """Display form: honors as kanji, suited tiles unchanged."""
    t = normalize_tile(tile)
    return HONOR_NAMES.get(t, t)


def compare(a: str, b: str) -> int:
    ia, ib = tile_to_index(a), tile_to_index(b)
    return (ia > ib) - (ia < ib)


def sort_tiles(tiles: Iterable[str]) -> list[str]:
    return sorted((normalize_tile(t) for t in tiles), key=tile_to_index)


def tile_counts(tiles: Iterable[str]) -> list[int]:
    counts = [0] * NUM_TILE_TYPES
    for tile in tiles:
        counts[tile_to_index(tile)] += 1
    return counts


def is_suited(tile: str) -> bool:
    return len(normalize_tile(tile)) == 2


def is_honor(tile: str) -> bool:
    return normalize_tile(tile) in HONORS


def is_wind(tile: str) -> bool:
    return normalize_tile(tile) in WINDS


def is_dragon(tile: str) -> bool:
    return normalize_tile(tile) in DRAGONS


def is_terminal(tile: str) -> bool:
    t = normalize_tile(tile)
    return len(t) == 2 and t[0] in {"1", "9"}


def is_terminal_or_honor(tile: str) -> bool:
    return normalize_tile(tile) in TERMINAL_HONOR_TILES


def is_simple(tile: str) -> bool:
    t = normalize_tile(tile)
    return len(t) == 2 and t[0] in {"2", "3", "4", "5", "6", "7", "8"}


def is_value_tile(tile: str, round_wind: str | None = None, seat_wind: str | None = None) -> bool:
    t = normalize_tile(tile)
    if t in DRAGONS:
        return True
    return t in WINDS and t in {round_wind, seat_wind}


def next_dora_tile(indicator: str) -> str:
    t = normalize_tile(indicator)
    if len(t) == 2:
        n = int(t[0])
        return f"{1 if n == 9 else n + 1}{t[1]}"
    order = WINDS if t in WINDS else DRAGONS
    return order[(order.index(t) + 1) % len(order)]
