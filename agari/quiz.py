"""Random score-quiz questions.

Hands are sampled from a handful of shape builders, scored with
``calculate_score`` and discarded unless the targeted yaku shows up. Every
random draw goes through the ``random.Random`` passed in, so a seeded
generator reproduces the same question.
"""

from __future__ import annotations

import logging
import random
import re
import time
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from agari.config import settings
from agari.hand_scoring import calculate_score
from agari.schemas import ContextInput, ExpectedScore, HandInput, QuizQuestion, ScoreError, Wind, WinType
from agari.tiles import ALL_TILES, HONORS

logger = logging.getLogger(__name__)

MAX_PAIR_TRIES = 40
INCORRECT_OFFSETS = (100, 200, 300, 400, 500)
INCORRECT_TRIES = 10

SUIT_NUMBERS = tuple(range(1, 10))
TANYAO_NUMBERS = tuple(range(2, 9))
SEQUENCE_STARTS = tuple(range(1, 8))
NON_EDGE_SEQUENCE_STARTS = (2, 3, 4, 5, 6)
YAKUHAI_TILES = ("E", "P", "F", "C")

_TSUMO_KO_RE = re.compile(r"子:\s*(\d+)点、親:\s*(\d+)点")
_TSUMO_OYA_RE = re.compile(r"(\d+)点オール")
_RON_RE = re.compile(r"(\d+)点")


@dataclass
class Candidate:
    tiles: list[str]
    win_tile: str
    context: ContextInput
    label: str
    required_yaku: tuple[str, ...]
    dora_indicators: list[str] = field(default_factory=list)


def parse_expected_score(score_text: str) -> ExpectedScore | None:
    if m := _TSUMO_KO_RE.search(score_text):
        return ExpectedScore(kind="tsumo-ko", ko=int(m.group(1)), oya=int(m.group(2)))
    if m := _TSUMO_OYA_RE.search(score_text):
        return ExpectedScore(kind="tsumo-oya", per_person=int(m.group(1)))
    if m := _RON_RE.search(score_text):
        return ExpectedScore(kind="ron", ron=int(m.group(1)))
    return None


def format_expected_score(expected: ExpectedScore) -> str:
    if expected.kind == "ron":
        return f"{expected.ron}点"
    if expected.kind == "tsumo-oya":
        return f"{expected.per_person}点オール"
    return f"子: {expected.ko}点 / 親: {expected.oya}点"


# Shape builders


def _sequence(suit: str, start: int) -> list[str]:
    return [f"{start}{suit}", f"{start + 1}{suit}", f"{start + 2}{suit}"]


def _triplet(tile: str) -> list[str]:
    return [tile] * 3


def _random_sequence(rng: random.Random, starts: Sequence[int] = SEQUENCE_STARTS) -> list[str]:
    suit = rng.choice("mps")
    return _sequence(suit, rng.choice(starts))


def _random_triplet(rng: random.Random, include_honors: bool = True) -> list[str]:
    if include_honors and rng.random() < 0.3:
        return _triplet(rng.choice(HONORS))
    return _triplet(f"{rng.choice(SUIT_NUMBERS)}{rng.choice('mps')}")


def _random_group(rng: random.Random, include_honors: bool = True) -> list[str]:
    if rng.random() < 0.6:
        return _random_sequence(rng)
    return _random_triplet(rng, include_honors)


def _suit_pair(rng: random.Random, numbers: Sequence[int] = SUIT_NUMBERS) -> list[str]:
    tile = f"{rng.choice(numbers)}{rng.choice('mps')}"
    return [tile, tile]


def _honor_pair(rng: random.Random) -> list[str]:
    tile = rng.choice(HONORS)
    return [tile, tile]


def _apply(counts: Counter, target: list[str], tiles: list[str]) -> bool:
    """Add ``tiles`` unless that would put a fifth copy of any tile in the hand."""
    added = Counter(tiles)
    if any(counts[t] + n > 4 for t, n in added.items()):
        return False
    counts.update(added)
    target.extend(tiles)
    return True


def _from_groups(groups: list[list[str]]) -> list[str] | None:
    counts: Counter = Counter()
    tiles: list[str] = []
    for group in groups:
        if not _apply(counts, tiles, group):
            return None
    return tiles if len(tiles) == 14 else None


def _assemble(
    groups: Callable[[], list[list[str]]],
    pair: Callable[[], list[str]],
    max_tries: int,
) -> list[str] | None:
    """Stack four groups, then retry the pair a bounded number of times."""
    for _ in range(max_tries):
        counts: Counter = Counter()
        tiles: list[str] = []
        if not all(_apply(counts, tiles, g) for g in groups()):
            continue
        if not any(_apply(counts, tiles, pair()) for _ in range(MAX_PAIR_TRIES)):
            continue
        if len(tiles) == 14:
            return tiles
    return None


def create_any_closed_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    return _assemble(
        lambda: [_random_group(rng) for _ in range(4)],
        lambda: _honor_pair(rng) if rng.random() < 0.2 else _suit_pair(rng),
        max_tries,
    )


def create_tanyao_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    def group() -> list[str]:
        if rng.random() < 0.7:
            return _sequence(rng.choice("mps"), rng.choice(NON_EDGE_SEQUENCE_STARTS))
        return _triplet(f"{rng.choice(TANYAO_NUMBERS)}{rng.choice('mps')}")

    return _assemble(lambda: [group() for _ in range(4)], lambda: _suit_pair(rng, TANYAO_NUMBERS), max_tries)


def create_yakuhai_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    return _assemble(
        lambda: [_triplet(rng.choice(YAKUHAI_TILES))] + [_random_group(rng, False) for _ in range(3)],
        lambda: _suit_pair(rng),
        max_tries,
    )


def create_sanshoku_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    for _ in range(max_tries):
        start = rng.choice(SEQUENCE_STARTS)
        groups = [_sequence(s, start) for s in "mps"] + [_random_group(rng, False), _suit_pair(rng)]
        if tiles := _from_groups(groups):
            return tiles
    return None


def create_ittsuu_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    for _ in range(max_tries):
        suit = rng.choice("mps")
        groups = [_sequence(suit, s) for s in (1, 4, 7)] + [_random_group(rng, False), _suit_pair(rng)]
        if tiles := _from_groups(groups):
            return tiles
    return None


def create_honitsu_hand(rng: random.Random, max_tries: int) -> list[str] | None:
    for _ in range(max_tries):
        suit = rng.choice("mps")
        groups = []
        for _ in range(4):
            if rng.random() < 0.7:
                groups.append(_sequence(suit, rng.choice(SEQUENCE_STARTS)))
            else:
                groups.append(_triplet(f"{rng.choice(SUIT_NUMBERS)}{suit}"))
        if tiles := _from_groups(groups + [_honor_pair(rng)]):
            return tiles
    return None


def create_pinfu_hand(rng: random.Random, max_tries: int) -> tuple[list[str], str] | None:
    """Four inner runs and a simple pair, won on an outer tile of one run."""
    for _ in range(max_tries):
        counts: Counter = Counter()
        tiles: list[str] = []
        runs = [_random_sequence(rng, NON_EDGE_SEQUENCE_STARTS) for _ in range(4)]
        if not all(_apply(counts, tiles, run) for run in runs):
            continue
        if not any(_apply(counts, tiles, _suit_pair(rng, TANYAO_NUMBERS)) for _ in range(MAX_PAIR_TRIES)):
            continue
        wait_run = rng.choice(runs)
        return tiles, wait_run[0] if rng.random() < 0.5 else wait_run[2]
    return None


# Candidates


def build_random_extras(rng: random.Random) -> tuple[bool, list[str]]:
    """(riichi, dora indicators)."""
    riichi = rng.random() < 0.35
    if rng.random() < 0.4:
        count = 0
    else:
        count = 1 if rng.random() < 0.7 else 2
    return riichi, [rng.choice(ALL_TILES) for _ in range(count)]


def _context(rng: random.Random, riichi: bool, dora_indicators: list[str]) -> ContextInput:
    is_dealer = rng.random() < 0.5
    return ContextInput(
        win_type=WinType.tsumo if rng.random() < 0.5 else WinType.ron,
        is_dealer=is_dealer,
        round_wind=Wind.E,
        seat_wind=Wind.E if is_dealer else Wind.S,
        riichi=riichi,
        dora_indicators=dora_indicators,
    )


def _candidate(
    rng: random.Random,
    tiles: list[str] | None,
    label: str,
    required: tuple[str, ...],
    win_tile: str | None = None,
    riichi: bool | None = None,
) -> Candidate | None:
    if tiles is None:
        return None
    extra_riichi, indicators = build_random_extras(rng)
    return Candidate(
        tiles=tiles,
        win_tile=win_tile or rng.choice(tiles),
        context=_context(rng, extra_riichi if riichi is None else riichi, indicators),
        label=label,
        required_yaku=required,
        dora_indicators=indicators,
    )


def build_riichi_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    return _candidate(rng, create_any_closed_hand(rng, max_tries), "リーチ", ("立直",), riichi=True)


def build_pinfu_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    hand = create_pinfu_hand(rng, max_tries)
    if hand is None:
        return None
    tiles, win_tile = hand
    return _candidate(rng, tiles, "平和", ("平和",), win_tile=win_tile)


def build_tanyao_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    return _candidate(rng, create_tanyao_hand(rng, max_tries), "断么九", ("断么九",))


def build_yakuhai_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    required = ("役牌 白", "役牌 發", "役牌 中", "場風 東", "自風 東", "場風・自風 東")
    return _candidate(rng, create_yakuhai_hand(rng, max_tries), "役牌", required)


def build_sanshoku_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    return _candidate(rng, create_sanshoku_hand(rng, max_tries), "三色同順", ("三色同順",))


def build_surprise_candidate(rng: random.Random, max_tries: int) -> Candidate | None:
    if rng.random() < 0.5:
        return _candidate(rng, create_ittsuu_hand(rng, max_tries), "意外性枠", ("一気通貫",))
    return _candidate(rng, create_honitsu_hand(rng, max_tries), "意外性枠", ("混一色",))


CANDIDATE_BUILDERS: tuple[Callable[[random.Random, int], Candidate | None], ...] = (
    build_riichi_candidate,
    build_pinfu_candidate,
    build_tanyao_candidate,
    build_yakuhai_candidate,
    build_sanshoku_candidate,
    build_surprise_candidate,
)


# Answers


def choose_correctness(history: Sequence[bool], rng: random.Random, window: int) -> bool:
    """Lean towards whichever answer is rarer among the last ``window`` questions."""
    recent = list(history)[-window:] if window > 0 else []
    correct = sum(1 for h in recent if h)
    incorrect = len(recent) - correct
    if correct > incorrect:
        return False
    if incorrect > correct:
        return True
    return rng.random() < 0.5


def make_incorrect_score(expected: ExpectedScore, rng: random.Random) -> ExpectedScore:
    for _ in range(INCORRECT_TRIES):
        delta = rng.choice(INCORRECT_OFFSETS) * (-1 if rng.random() < 0.5 else 1)
        if expected.kind == "ron":
            candidate = expected.model_copy(update={"ron": max(100, expected.ron + delta)})
        elif expected.kind == "tsumo-oya":
            candidate = expected.model_copy(update={"per_person": max(100, expected.per_person + delta)})
        elif rng.random() < 0.5:
            candidate = expected.model_copy(update={"ko": max(100, expected.ko + delta)})
        else:
            candidate = expected.model_copy(update={"oya": max(100, expected.oya + delta)})
        if candidate != expected:
            return candidate

    if expected.kind == "ron":
        return expected.model_copy(update={"ron": expected.ron + 100})
    if expected.kind == "tsumo-oya":
        return expected.model_copy(update={"per_person": expected.per_person + 100})
    return expected.model_copy(update={"ko": expected.ko + 100})


def _remove_one(tiles: list[str], tile: str) -> list[str] | None:
    if tile not in tiles:
        return None
    hand = list(tiles)
    hand.remove(tile)
    return hand


def generate_question(
    history: Sequence[bool] = (),
    rng: random.Random | None = None,
    max_tries: int | None = None,
    max_hand_tries: int | None = None,
    balance_window: int | None = None,
) -> QuizQuestion | None:
    """One quiz question, or None when no sample conformed within ``max_tries``.

    ``history`` holds whether each earlier presented score was correct.
    """
    rng = rng or random.Random()
    max_tries = settings.quiz_max_tries if max_tries is None else max_tries
    max_hand_tries = settings.quiz_max_hand_tries if max_hand_tries is None else max_hand_tries
    balance_window = settings.quiz_balance_window if balance_window is None else balance_window

    for attempt in range(max_tries):
        candidate = rng.choice(CANDIDATE_BUILDERS)(rng, max_hand_tries)
        if candidate is None:
            continue
        hand = _remove_one(candidate.tiles, candidate.win_tile)
        if hand is None:
            continue
        result = calculate_score(HandInput(closed_tiles=hand, win_tile=candidate.win_tile), candidate.context)
        if isinstance(result, ScoreError):
            continue
        names = {y.name for y in result.yaku}
        if not names.intersection(candidate.required_yaku):
            continue
        expected = parse_expected_score(result.score)
        if expected is None:
            continue

        is_correct = choose_correctness(history, rng, balance_window)
        presented = expected if is_correct else make_incorrect_score(expected, rng)
        logger.debug(f"quiz question after {attempt + 1} samples: {candidate.label}")
        return QuizQuestion(
            id=f"q-{int(time.time() * 1000)}-{rng.randrange(10000)}",
            label=f"自動生成（{candidate.label}）",
            hand=hand,
            win_tile=candidate.win_tile,
            context=candidate.context,
            dora_indicators=candidate.dora_indicators,
            presented_text=format_expected_score(presented),
            expected_text=format_expected_score(expected),
            is_correct=is_correct,
        )

    logger.warning(f"no quiz question generated in {max_tries} samples")
    return None
