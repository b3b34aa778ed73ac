from __future__ import annotations

from collections import Counter

from fastapi import HTTPException

from agari.schemas import MeldType, ScoreRequest, Wind, WinType
from agari.tiles import tile_to_index


def _reject(detail: str) -> None:
    raise HTTPException(status_code=422, detail=detail)


def validate_meld(meld_type: MeldType, tiles: list[str]) -> None:
    if meld_type in {MeldType.chi, MeldType.pon} and len(tiles) != 3:
        _reject(f"{meld_type.value} must contain exactly 3 tiles")
    if meld_type not in {MeldType.chi, MeldType.pon} and len(tiles) != 4:
        _reject(f"{meld_type.value} must contain exactly 4 tiles")

    indices = sorted(tile_to_index(t) for t in tiles)
    if meld_type == MeldType.chi:
        first = indices[0]
        if first >= 27 or first % 9 > 6 or indices != [first, first + 1, first + 2]:
            _reject(f"chi must be three consecutive tiles of one suit: {tiles}")
    elif len(set(indices)) != 1:
        _reject(f"{meld_type.value} must consist of identical tiles: {tiles}")


def validate_score_request(req: ScoreRequest) -> None:
    """Reject malformed requests before they reach the engine.

    Tile codes are already normalized by the schema. The dealer flag follows
    the seat wind.
    """
    ctx = req.context
    ctx.is_dealer = ctx.seat_wind == Wind.E

    all_tiles = list(req.hand.closed_tiles)
    if req.hand.win_tile is not None:
        all_tiles.append(req.hand.win_tile)
    for meld in req.hand.melds:
        validate_meld(meld.type, meld.tiles)
        all_tiles.extend(meld.tiles)

    for tile, count in Counter(all_tiles).items():
        if count >= 5:
            _reject(f"Tile appears 5+ times in hand: {tile}")

    if ctx.riichi and ctx.double_riichi:
        _reject("riichi and double_riichi cannot both be true")
    if not (ctx.riichi or ctx.double_riichi) and ctx.ippatsu:
        _reject("ippatsu cannot be true when riichi/double_riichi is false")
    if (ctx.riichi or ctx.double_riichi) and not req.hand.is_closed:
        _reject("riichi requires a closed hand")
    if ctx.win_type == WinType.ron and ctx.haitei:
        _reject("haitei cannot be true on ron")
    if ctx.win_type == WinType.tsumo and ctx.houtei:
        _reject("houtei cannot be true on tsumo")
    if ctx.win_type == WinType.ron and ctx.rinshan:
        _reject("rinshan cannot be true on ron")
    if ctx.win_type == WinType.tsumo and ctx.chankan:
        _reject("chankan cannot be true on tsumo")
    if ctx.chiihou and ctx.tenhou:
        _reject("chiihou and tenhou cannot both be true")
    if (ctx.chiihou or ctx.tenhou) and ctx.win_type != WinType.tsumo:
        _reject("chiihou/tenhou require tsumo")
    if ctx.tenhou and not ctx.is_dealer:
        _reject("tenhou requires dealer")
    if ctx.chiihou and ctx.is_dealer:
        _reject("chiihou requires non-dealer")
