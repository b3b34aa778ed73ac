from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from agari.decomposition import Decomposition, GroupKind
from agari.tiles import index_to_tile, is_value_tile, tile_to_index


class Wait(str, Enum):
    ryanmen = "ryanmen"  # open wait
    penchan = "penchan"  # edge wait
    kanchan = "kanchan"  # closed wait
    tanki = "tanki"  # pair wait
    shanpon = "shanpon"  # dual-pair wait

    @property
    def fu(self) -> int:
        return 0 if self == Wait.ryanmen else 2


@dataclass(frozen=True)
class WaitCandidate:
    wait: Wait
    group_index: int | None  # None when the winning tile completed the pair


def _run_wait(first: int, win: int) -> Wait:
    position = win - first
    if position == 1:
        return Wait.kanchan
    if position == 0 and first % 9 == 6:
        return Wait.penchan
    if position == 2 and first % 9 == 0:
        return Wait.penchan
    return Wait.ryanmen


def wait_candidates(decomposition: Decomposition, win_tile: str) -> list[WaitCandidate]:
    """Every role the winning tile can take inside one decomposition.

    Exposed melds never receive the winning tile. Identical concealed groups
    yield a single candidate.
    """
    win = tile_to_index(win_tile)
    candidates: list[WaitCandidate] = []
    if decomposition.pair == win:
        candidates.append(WaitCandidate(Wait.tanki, None))

    seen = set()
    for idx, group in enumerate(decomposition.groups):
        if not group.concealed or not group.contains(win) or group in seen:
            continue
        seen.add(group)
        if group.kind == GroupKind.run:
            candidates.append(WaitCandidate(_run_wait(group.first, win), idx))
        elif group.kind == GroupKind.triplet:
            candidates.append(WaitCandidate(Wait.shanpon, idx))
    return candidates


def classify_wait(decomposition: Decomposition, win_tile: str) -> Wait | None:
    candidates = wait_candidates(decomposition, win_tile)
    return candidates[0].wait if candidates else None


def is_pinfu_candidate(
    decomposition: Decomposition,
    candidate: WaitCandidate,
    round_wind: str | None = None,
    seat_wind: str | None = None,
) -> bool:
    """All concealed runs, a non-value pair and an open wait."""
    if candidate.wait != Wait.ryanmen:
        return False
    if not all(g.is_run and g.concealed for g in decomposition.groups):
        return False
    return not is_value_tile(index_to_tile(decomposition.pair), round_wind, seat_wind)
