"""Hand decomposition into one pair plus four groups.

Every function here is pure. The memo used by the recursive search lives in a
dict created per top-level call and is dropped when the call returns.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from agari.schemas import Meld, MeldType
from agari.tiles import ORPHAN_INDICES, index_to_tile, tile_counts, tile_to_index

_Partition = tuple["Group", ...]


class GroupKind(str, Enum):
    run = "run"
    triplet = "triplet"
    quad = "quad"


@dataclass(frozen=True, order=True)
class Group:
    kind: GroupKind
    first: int
    concealed: bool = True

    @property
    def indices(self) -> tuple[int, ...]:
        if self.kind == GroupKind.run:
            return (self.first, self.first + 1, self.first + 2)
        if self.kind == GroupKind.triplet:
            return (self.first,) * 3
        return (self.first,) * 4

    @property
    def tiles(self) -> list[str]:
        return [index_to_tile(i) for i in self.indices]

    @property
    def is_run(self) -> bool:
        return self.kind == GroupKind.run

    @property
    def is_set(self) -> bool:
        """Triplet or quad."""
        return self.kind != GroupKind.run

    def contains(self, index: int) -> bool:
        return index in self.indices


@dataclass(frozen=True)
class Decomposition:
    pair: int
    groups: tuple[Group, ...]

    @property
    def key(self) -> tuple[int, tuple[Group, ...]]:
        return self.pair, tuple(sorted(self.groups))

    @property
    def tiles(self) -> list[str]:
        tiles = [index_to_tile(self.pair)] * 2
        for group in self.groups:
            tiles.extend(group.tiles)
        return tiles

    @property
    def runs(self) -> list[Group]:
        return [g for g in self.groups if g.is_run]

    @property
    def sets(self) -> list[Group]:
        return [g for g in self.groups if g.is_set]


def group_from_meld(meld: Meld) -> Group:
    first = min(tile_to_index(t) for t in meld.tiles)
    if meld.type == MeldType.chi:
        return Group(GroupKind.run, first, concealed=False)
    if meld.type == MeldType.pon:
        return Group(GroupKind.triplet, first, concealed=False)
    return Group(GroupKind.quad, first, concealed=not meld.is_open)


def _partition(counts: tuple[int, ...], needed: int, cache: dict) -> list[_Partition]:
    key = (counts, needed)
    if key in cache:
        return cache[key]

    first = next((i for i, c in enumerate(counts) if c > 0), -1)
    result: list[_Partition] = []
    if first == -1:
        if needed == 0:
            result.append(())
    elif needed > 0:
        if counts[first] >= 3:
            work = list(counts)
            work[first] -= 3
            group = Group(GroupKind.triplet, first)
            result.extend((group,) + rest for rest in _partition(tuple(work), needed - 1, cache))

        if first < 27 and first % 9 <= 6 and counts[first + 1] > 0 and counts[first + 2] > 0:
            work = list(counts)
            work[first] -= 1
            work[first + 1] -= 1
            work[first + 2] -= 1
            group = Group(GroupKind.run, first)
            result.extend((group,) + rest for rest in _partition(tuple(work), needed - 1, cache))

    cache[key] = result
    return result


def decompose(counts: Sequence[int], groups_needed: int) -> list[Decomposition]:
    """All distinct (pair, groups) splits of a concealed 34-count vector."""
    if groups_needed < 0 or sum(counts) != groups_needed * 3 + 2:
        return []

    cache: dict = {}
    seen: set = set()
    results: list[Decomposition] = []
    for i, c in enumerate(counts):
        if c < 2:
            continue
        work = list(counts)
        work[i] -= 2
        for groups in _partition(tuple(work), groups_needed, cache):
            decomposition = Decomposition(pair=i, groups=groups)
            if decomposition.key in seen:
                continue
            seen.add(decomposition.key)
            results.append(decomposition)
    return results


def find_decompositions(tiles: Iterable[str], melds: Sequence[Meld] = ()) -> list[Decomposition]:
    """Decompositions of the concealed tiles with exposed melds appended as fixed groups."""
    fixed = tuple(group_from_meld(m) for m in melds)
    return [
        Decomposition(pair=d.pair, groups=d.groups + fixed)
        for d in decompose(tile_counts(tiles), 4 - len(melds))
    ]


def is_seven_pairs(counts: Sequence[int]) -> bool:
    return sum(1 for c in counts if c == 2) == 7 and all(c in {0, 2} for c in counts)


def is_thirteen_orphans(counts: Sequence[int]) -> bool:
    if sum(counts) != 14:
        return False
    if any(counts[i] > 0 and i not in ORPHAN_INDICES for i in range(len(counts))):
        return False
    return all(counts[i] >= 1 for i in ORPHAN_INDICES)


def is_winning_hand(tiles: Iterable[str], melds: Sequence[Meld] = ()) -> bool:
    counts = tile_counts(tiles)
    if not melds and (is_seven_pairs(counts) or is_thirteen_orphans(counts)):
        return True
    return bool(decompose(counts, 4 - len(melds)))
