from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from agari.decomposition import Decomposition, find_decompositions, is_seven_pairs, is_thirteen_orphans
from agari.schemas import ContextInput, DoraBreakdown, Meld, RuleSet, YakuItem
from agari.tiles import (
    DRAGONS,
    GREEN_TILES,
    WINDS,
    index_to_tile,
    is_honor,
    is_simple,
    is_terminal,
    is_terminal_or_honor,
    next_dora_tile,
    normalize_tile,
    tile_counts,
    tile_name,
)
from agari.waits import Wait, WaitCandidate, is_pinfu_candidate, wait_candidates

YAKUMAN_HAN = 13
CHUUREN_BASE = {1: 3, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1, 8: 1, 9: 3}


@dataclass
class HandView:
    """Quantities shared by the individual yaku checks."""

    concealed: list[str]
    win_tile: str
    melds: list[Meld]
    context: ContextInput
    all_tiles: list[str] = field(init=False)
    counts: Counter = field(init=False)
    concealed_counts: list[int] = field(init=False)
    decompositions: list[Decomposition] = field(init=False)

    def __post_init__(self) -> None:
        self.all_tiles = list(self.concealed)
        for meld in self.melds:
            self.all_tiles.extend(meld.tiles)
        self.counts = Counter(self.all_tiles)
        self.concealed_counts = tile_counts(self.concealed)
        self.decompositions = find_decompositions(self.concealed, self.melds)

    @property
    def is_closed(self) -> bool:
        return not any(m.is_open for m in self.melds)

    @property
    def quad_count(self) -> int:
        return sum(1 for m in self.melds if m.is_quad)

    def shapes(self) -> list[tuple[Decomposition, WaitCandidate | None]]:
        """Every (decomposition, winning-tile role) pairing."""
        pairs: list[tuple[Decomposition, WaitCandidate | None]] = []
        for d in self.decompositions:
            candidates = wait_candidates(d, self.win_tile)
            if not candidates:
                pairs.append((d, None))
            pairs.extend((d, c) for c in candidates)
        return pairs


def _concealed_set_count(d: Decomposition, candidate: WaitCandidate | None, is_tsumo: bool) -> int:
    count = 0
    for idx, group in enumerate(d.groups):
        if not group.is_set or not group.concealed:
            continue
        if not is_tsumo and candidate is not None and candidate.group_index == idx:
            continue
        count += 1
    return count


def _suits(view: HandView) -> set[str]:
    return {t[1] for t in view.all_tiles if len(t) == 2}


def _has_honor(view: HandView) -> bool:
    return any(is_honor(t) for t in view.all_tiles)


# Limit hands


def _is_kokushi(view: HandView) -> bool:
    return not view.melds and is_thirteen_orphans(view.concealed_counts)


def _is_kokushi_13_wait(view: HandView) -> bool:
    return view.counts[view.win_tile] == 2


def _suuankou_info(view: HandView) -> tuple[bool, bool]:
    """(four concealed triplets, won on the pair wait)."""
    found = tanki = False
    for d, candidate in view.shapes():
        if _concealed_set_count(d, candidate, view.context.is_tsumo) == 4:
            found = True
            if candidate is not None and candidate.wait == Wait.tanki:
                tanki = True
    return found, tanki


def _has_daisangen(view: HandView) -> bool:
    return all(view.counts[t] >= 3 for t in DRAGONS)


def _has_tsuuiisou(view: HandView) -> bool:
    return all(is_honor(t) for t in view.all_tiles)


def _has_ryuuiisou(view: HandView) -> bool:
    return all(t in GREEN_TILES for t in view.all_tiles)


def _has_chinroutou(view: HandView) -> bool:
    return all(is_terminal(t) for t in view.all_tiles)


def _chuuren_info(view: HandView) -> tuple[bool, bool]:
    if view.melds:
        return False, False
    if any(is_honor(t) for t in view.concealed) or len(_suits(view)) != 1:
        return False, False

    counts = Counter(int(t[0]) for t in view.concealed)
    if sum(counts.values()) != 14:
        return False, False
    if any(counts[n] < CHUUREN_BASE[n] for n in range(1, 10)):
        return False, False
    extras = [n for n in range(1, 10) for _ in range(counts[n] - CHUUREN_BASE[n])]
    if len(extras) != 1:
        return False, False
    return True, int(view.win_tile[0]) == extras[0]


def _has_daisuushii(view: HandView) -> bool:
    return all(view.counts[w] >= 3 for w in WINDS)


def _has_shousuushii(view: HandView) -> bool:
    triplets = sum(1 for w in WINDS if view.counts[w] >= 3)
    pairs = sum(1 for w in WINDS if view.counts[w] == 2)
    return triplets == 3 and pairs == 1


def _has_suukantsu(view: HandView) -> bool:
    return view.quad_count == 4


def _yakuman(name: str, double: bool, rules: RuleSet) -> YakuItem:
    han = YAKUMAN_HAN * (2 if double and rules.double_yakuman_ari else 1)
    return YakuItem(name=name, han=han, yakuman=True)


def _limit_hands(view: HandView, rules: RuleSet) -> list[YakuItem]:
    """Every limit hand the tiles satisfy, in priority order.

    Limit hands stack (大三元 with 字一色 scores both). A refined form such as
    四暗刻単騎 replaces its base form rather than adding to it.
    """
    hits: list[YakuItem] = []

    if _is_kokushi(view):
        if _is_kokushi_13_wait(view):
            hits.append(_yakuman("国士無双十三面待ち", True, rules))
        else:
            hits.append(_yakuman("国士無双", False, rules))

    suuankou, tanki = _suuankou_info(view)
    if suuankou:
        if tanki:
            hits.append(_yakuman("四暗刻単騎", True, rules))
        else:
            hits.append(_yakuman("四暗刻", False, rules))

    if _has_daisangen(view):
        hits.append(_yakuman("大三元", False, rules))
    if _has_tsuuiisou(view):
        hits.append(_yakuman("字一色", False, rules))
    if _has_ryuuiisou(view):
        hits.append(_yakuman("緑一色", False, rules))
    if _has_chinroutou(view):
        hits.append(_yakuman("清老頭", False, rules))

    chuuren, pure_chuuren = _chuuren_info(view)
    if chuuren:
        if pure_chuuren:
            hits.append(_yakuman("純正九蓮宝燈", True, rules))
        else:
            hits.append(_yakuman("九蓮宝燈", False, rules))

    if _has_shousuushii(view):
        hits.append(_yakuman("小四喜", False, rules))
    if _has_suukantsu(view):
        hits.append(_yakuman("四槓子", False, rules))
    return hits


# Ordinary yaku


def _has_tanyao(view: HandView, rules: RuleSet) -> bool:
    if not view.is_closed and not rules.kuitan_ari:
        return False
    return all(is_simple(t) for t in view.all_tiles)


def _has_pinfu(view: HandView) -> bool:
    if view.melds:
        return False
    round_wind = view.context.round_wind.value
    seat_wind = view.context.seat_wind.value
    return any(
        candidate is not None and is_pinfu_candidate(d, candidate, round_wind, seat_wind)
        for d, candidate in view.shapes()
    )


def _yakuhai(view: HandView) -> list[YakuItem]:
    yaku: list[YakuItem] = []
    for tile in DRAGONS:
        if view.counts[tile] >= 3:
            yaku.append(YakuItem(name=f"役牌 {tile_name(tile)}", han=1))

    round_wind = view.context.round_wind.value
    seat_wind = view.context.seat_wind.value
    if round_wind == seat_wind:
        if view.counts[round_wind] >= 3:
            yaku.append(YakuItem(name=f"場風・自風 {tile_name(round_wind)}", han=2))
        return yaku
    if view.counts[round_wind] >= 3:
        yaku.append(YakuItem(name=f"場風 {tile_name(round_wind)}", han=1))
    if view.counts[seat_wind] >= 3:
        yaku.append(YakuItem(name=f"自風 {tile_name(seat_wind)}", han=1))
    return yaku


def _has_chiitoitsu(view: HandView) -> bool:
    return not view.melds and is_seven_pairs(view.concealed_counts)


def _identical_run_pairs(d: Decomposition) -> int:
    counts = Counter(g.first for g in d.runs if g.concealed)
    return sum(c // 2 for c in counts.values())


def _has_ryanpeikou(view: HandView) -> bool:
    return view.is_closed and any(_identical_run_pairs(d) >= 2 for d in view.decompositions)


def _has_iipeikou(view: HandView) -> bool:
    return view.is_closed and any(_identical_run_pairs(d) >= 1 for d in view.decompositions)


def _has_toitoi(view: HandView) -> bool:
    return any(all(g.is_set for g in d.groups) for d in view.decompositions)


def _has_sanankou(view: HandView) -> bool:
    return any(_concealed_set_count(d, c, view.context.is_tsumo) >= 3 for d, c in view.shapes())


def _has_honroutou(view: HandView) -> bool:
    return all(is_terminal_or_honor(t) for t in view.all_tiles)


def _has_shousangen(view: HandView) -> bool:
    triplets = sum(1 for t in DRAGONS if view.counts[t] >= 3)
    pairs = sum(1 for t in DRAGONS if view.counts[t] == 2)
    return triplets == 2 and pairs == 1


def _outside_hand(d: Decomposition) -> bool:
    """Every group and the pair hold a terminal or honor, with at least one run."""
    if not d.runs:
        return False
    if not is_terminal_or_honor(index_to_tile(d.pair)):
        return False
    for group in d.groups:
        if group.is_run:
            if group.first % 9 not in {0, 6}:
                return False
        elif not is_terminal_or_honor(index_to_tile(group.first)):
            return False
    return True


def _has_junchan(view: HandView) -> bool:
    return not _has_honor(view) and any(_outside_hand(d) for d in view.decompositions)


def _has_chanta(view: HandView) -> bool:
    return _has_honor(view) and any(_outside_hand(d) for d in view.decompositions)


def _has_ittsuu(view: HandView) -> bool:
    for d in view.decompositions:
        starts = {g.first for g in d.runs}
        for base in (0, 9, 18):
            if {base, base + 3, base + 6} <= starts:
                return True
    return False


def _has_sanshoku_doujun(view: HandView) -> bool:
    for d in view.decompositions:
        starts = {g.first for g in d.runs}
        if any({n, n + 9, n + 18} <= starts for n in range(7)):
            return True
    return False


def _has_sanshoku_doukou(view: HandView) -> bool:
    for d in view.decompositions:
        firsts = {g.first for g in d.sets if g.first < 27}
        if any({n, n + 9, n + 18} <= firsts for n in range(9)):
            return True
    return False


def _has_sankantsu(view: HandView) -> bool:
    return view.quad_count == 3


def _has_honitsu(view: HandView) -> bool:
    return len(_suits(view)) == 1 and _has_honor(view)


def _has_chinitsu(view: HandView) -> bool:
    return len(_suits(view)) == 1 and not _has_honor(view)


def count_dora(tiles: Sequence[str], indicators: Sequence[str]) -> int:
    counts = Counter(normalize_tile(t) for t in tiles)
    return sum(counts.get(next_dora_tile(ind), 0) for ind in indicators)


def dora_breakdown(tiles: Sequence[str], context: ContextInput, rules: RuleSet) -> DoraBreakdown:
    """Ura dora count only under riichi; red fives only when the rule set uses them."""
    riichi = context.riichi or context.double_riichi
    return DoraBreakdown(
        dora=count_dora(tiles, context.dora_indicators),
        aka_dora=context.red_dora.total if rules.aka_ari else 0,
        ura_dora=count_dora(tiles, context.ura_dora_indicators) if riichi else 0,
    )


def detect_yaku(
    tiles: Sequence[str],
    win_tile: str,
    context: ContextInput,
    melds: Sequence[Meld] = (),
    rules: RuleSet | None = None,
) -> list[YakuItem]:
    """Yaku for a complete hand.

    ``tiles`` are the concealed tiles including the winning tile; exposed melds
    are passed separately. Limit hands short-circuit ordinary yaku. Dora are
    only listed when at least one real yaku is present.
    """
    rules = rules or RuleSet()
    win = normalize_tile(win_tile)
    view = HandView(concealed=[normalize_tile(t) for t in tiles], win_tile=win, melds=list(melds), context=context)

    if context.is_tsumo and context.tenhou and context.is_dealer:
        return [_yakuman("天和", False, rules)]
    if context.is_tsumo and context.chiihou and not context.is_dealer:
        return [_yakuman("地和", False, rules)]

    if _has_daisuushii(view):
        return [_yakuman("大四喜", True, rules)]

    limit_hands = _limit_hands(view, rules)
    if limit_hands:
        return limit_hands

    yaku: list[YakuItem] = []
    open_hand = not view.is_closed

    if not open_hand:
        if context.double_riichi:
            yaku.append(YakuItem(name="ダブル立直", han=2))
        elif context.riichi:
            yaku.append(YakuItem(name="立直", han=1))
        if context.ippatsu and (context.riichi or context.double_riichi):
            yaku.append(YakuItem(name="一発", han=1))
        if context.is_tsumo:
            yaku.append(YakuItem(name="門前清自摸和", han=1))

    if _has_tanyao(view, rules):
        yaku.append(YakuItem(name="断么九", han=1))
    chiitoitsu = _has_chiitoitsu(view)
    if not chiitoitsu and _has_pinfu(view):
        yaku.append(YakuItem(name="平和", han=1))
    yaku.extend(_yakuhai(view))

    if chiitoitsu:
        yaku.append(YakuItem(name="七対子", han=2))
    elif _has_ryanpeikou(view):
        yaku.append(YakuItem(name="二盃口", han=3))
    elif _has_iipeikou(view):
        yaku.append(YakuItem(name="一盃口", han=1))

    if _has_toitoi(view):
        yaku.append(YakuItem(name="対々和", han=2))
    if _has_sanankou(view):
        yaku.append(YakuItem(name="三暗刻", han=2))
    if _has_honroutou(view):
        yaku.append(YakuItem(name="混老頭", han=2))
    if _has_shousangen(view):
        yaku.append(YakuItem(name="小三元", han=2))

    if _has_junchan(view):
        yaku.append(YakuItem(name="純全帯么九", han=2 if open_hand else 3))
    elif _has_chanta(view):
        yaku.append(YakuItem(name="混全帯么九", han=1 if open_hand else 2))

    if _has_ittsuu(view):
        yaku.append(YakuItem(name="一気通貫", han=1 if open_hand else 2))
    if _has_sanshoku_doujun(view):
        yaku.append(YakuItem(name="三色同順", han=1 if open_hand else 2))
    if _has_sanshoku_doukou(view):
        yaku.append(YakuItem(name="三色同刻", han=2))
    if _has_sankantsu(view):
        yaku.append(YakuItem(name="三槓子", han=2))

    if _has_honitsu(view):
        yaku.append(YakuItem(name="混一色", han=2 if open_hand else 3))
    elif _has_chinitsu(view):
        yaku.append(YakuItem(name="清一色", han=5 if open_hand else 6))

    if context.haitei and context.is_tsumo:
        yaku.append(YakuItem(name="海底摸月", han=1))
    if context.houtei and not context.is_tsumo:
        yaku.append(YakuItem(name="河底撈魚", han=1))
    if context.rinshan and context.is_tsumo:
        yaku.append(YakuItem(name="嶺上開花", han=1))
    if context.chankan and not context.is_tsumo:
        yaku.append(YakuItem(name="槍槓", han=1))
    if context.nagashi_mangan:
        yaku.append(YakuItem(name="流し満貫", han=5))

    if not yaku:
        return yaku

    dora = dora_breakdown(view.all_tiles, context, rules)
    if dora.dora:
        yaku.append(YakuItem(name=f"ドラ{dora.dora}", han=dora.dora))
    if dora.ura_dora:
        yaku.append(YakuItem(name=f"裏ドラ{dora.ura_dora}", han=dora.ura_dora))
    if dora.aka_dora:
        yaku.append(YakuItem(name=f"赤ドラ{dora.aka_dora}", han=dora.aka_dora))
    return yaku
