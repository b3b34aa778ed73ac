from __future__ import annotations

from collections.abc import Sequence

from agari.decomposition import Decomposition, Group, GroupKind, find_decompositions, is_seven_pairs
from agari.schemas import FuBreakdownItem, Meld, RuleSet
from agari.tiles import DRAGONS, index_to_tile, is_terminal_or_honor, tile_counts
from agari.waits import WaitCandidate, is_pinfu_candidate, wait_candidates

OPEN_HAND_MIN_FU = 30


def _round_up(fu: int) -> int:
    return ((fu + 9) // 10) * 10


def pair_fu(pair_tile: str, round_wind: str | None, seat_wind: str | None, rules: RuleSet) -> int:
    if pair_tile in DRAGONS:
        return 2
    if pair_tile == round_wind and pair_tile == seat_wind:
        return rules.renpu_fu
    if pair_tile in {round_wind, seat_wind}:
        return 2
    return 0


def group_fu(group: Group, concealed: bool | None = None) -> int:
    if concealed is None:
        concealed = group.concealed
    if group.kind == GroupKind.run:
        return 0
    fu = 2 if group.kind == GroupKind.triplet else 8
    if is_terminal_or_honor(index_to_tile(group.first)):
        fu *= 2
    if concealed:
        fu *= 2
    return fu


def _candidate_fu(
    decomposition: Decomposition,
    candidate: WaitCandidate | None,
    base: list[FuBreakdownItem],
    is_tsumo: bool,
    round_wind: str | None,
    seat_wind: str | None,
    rules: RuleSet,
) -> tuple[int, list[FuBreakdownItem]]:
    details = list(base)

    pfu = pair_fu(index_to_tile(decomposition.pair), round_wind, seat_wind, rules)
    if pfu:
        details.append(FuBreakdownItem(name="雀頭", fu=pfu))

    if candidate is not None and candidate.wait.fu:
        details.append(FuBreakdownItem(name="待ち", fu=candidate.wait.fu))

    for idx, group in enumerate(decomposition.groups):
        concealed = group.concealed
        # a triplet finished on a discard counts as open
        if not is_tsumo and candidate is not None and candidate.group_index == idx and group.kind == GroupKind.triplet:
            concealed = False
        mfu = group_fu(group, concealed)
        if mfu:
            details.append(FuBreakdownItem(name="面子", fu=mfu))

    total = sum(item.fu for item in details)
    rounded = _round_up(total)
    if rounded > total:
        details.append(FuBreakdownItem(name="切り上げ", fu=rounded - total))
    return rounded, details


def calculate_fu_breakdown(
    tiles: Sequence[str],
    win_tile: str,
    is_tsumo: bool,
    is_closed: bool,
    round_wind: str | None = None,
    seat_wind: str | None = None,
    melds: Sequence[Meld] = (),
    rules: RuleSet | None = None,
) -> tuple[int, list[FuBreakdownItem]]:
    """Highest fu over every decomposition and every role of the winning tile."""
    rules = rules or RuleSet()
    if not melds and is_seven_pairs(tile_counts(tiles)):
        return 25, [FuBreakdownItem(name="七対子", fu=25)]

    base = [FuBreakdownItem(name="副底", fu=20)]
    if is_tsumo:
        base.append(FuBreakdownItem(name="ツモ", fu=2))
    if not is_tsumo and is_closed:
        base.append(FuBreakdownItem(name="門前ロン", fu=10))

    best: tuple[int, list[FuBreakdownItem]] | None = None
    for decomposition in find_decompositions(tiles, melds):
        candidates: list[WaitCandidate | None] = list(wait_candidates(decomposition, win_tile)) or [None]
        for candidate in candidates:
            if (
                is_tsumo
                and is_closed
                and candidate is not None
                and is_pinfu_candidate(decomposition, candidate, round_wind, seat_wind)
            ):
                scored = (20, [FuBreakdownItem(name="平和ツモ", fu=20)])
            else:
                scored = _candidate_fu(decomposition, candidate, base, is_tsumo, round_wind, seat_wind, rules)
            if best is None or scored[0] > best[0]:
                best = scored

    if best is None:
        total = sum(item.fu for item in base)
        best = (_round_up(total), base)

    fu, details = best
    if (not is_closed or any(m.is_open for m in melds)) and fu < OPEN_HAND_MIN_FU:
        details = details + [FuBreakdownItem(name="副露最低符", fu=OPEN_HAND_MIN_FU - fu)]
        fu = OPEN_HAND_MIN_FU
    return fu, details


def calculate_fu(
    tiles: Sequence[str],
    win_tile: str,
    is_tsumo: bool,
    is_closed: bool,
    round_wind: str | None = None,
    seat_wind: str | None = None,
    melds: Sequence[Meld] = (),
    rules: RuleSet | None = None,
) -> int:
    fu, _ = calculate_fu_breakdown(tiles, win_tile, is_tsumo, is_closed, round_wind, seat_wind, melds, rules)
    return fu
