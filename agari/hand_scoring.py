from __future__ import annotations

import logging

from agari.decomposition import is_winning_hand
from agari.fu import calculate_fu_breakdown
from agari.points import calculate_payment, point_label
from agari.schemas import (
    ContextInput,
    DoraBreakdown,
    HandInput,
    RuleSet,
    ScoreError,
    ScoreErrorCode,
    ScoreResult,
)
from agari.yaku import YAKUMAN_HAN, detect_yaku, dora_breakdown

logger = logging.getLogger(__name__)


def _error(code: ScoreErrorCode, message: str, details: dict | None = None) -> ScoreError:
    logger.debug(f"hand rejected: {code.value} ({message})")
    return ScoreError(code=code, message=message, details=details)


def calculate_score(hand: HandInput, context: ContextInput, rules: RuleSet | None = None) -> ScoreResult | ScoreError:
    """Hand shape + situation -> score, or the reason it cannot be scored.

    Problems with the input are returned as ``ScoreError`` values rather than
    raised, so callers can render the message directly.
    """
    rules = rules or RuleSet()

    expected = 13 - 3 * len(hand.melds)
    if len(hand.closed_tiles) != expected:
        return _error(
            ScoreErrorCode.wrong_hand_size,
            f"手牌は{expected}枚必要です",
            {"expected": expected, "actual": len(hand.closed_tiles)},
        )
    if hand.win_tile is None:
        return _error(ScoreErrorCode.no_winning_tile, "和了牌を選択してください")

    tiles = [*hand.closed_tiles, hand.win_tile]
    if not is_winning_hand(tiles, hand.melds):
        return _error(ScoreErrorCode.not_a_winning_shape, "和了形ではありません")

    yaku = detect_yaku(tiles, hand.win_tile, context, hand.melds, rules)
    if not yaku:
        return _error(ScoreErrorCode.no_yaku_present, "役がありません")

    han = sum(y.han for y in yaku)
    yakuman = [y.name for y in yaku if y.yakuman]
    if yakuman:
        multiplier = han // YAKUMAN_HAN
        payment = calculate_payment(
            han, 0, context.is_dealer, context.is_tsumo, context.honba, context.kyotaku, multiplier, rules
        )
        logger.info(f"yakuman {yakuman} x{multiplier}: {payment.breakdown.base_text}")
        return ScoreResult(
            han=han,
            fu=0,
            yaku=yaku,
            yakuman=yakuman,
            dora=DoraBreakdown(),
            point_label=point_label(han, 0, multiplier, rules),
            score=payment.breakdown.base_text,
            points=payment.points,
            payments=payment.payments,
            breakdown=payment.breakdown,
        )

    fu, fu_breakdown = calculate_fu_breakdown(
        tiles,
        hand.win_tile,
        context.is_tsumo,
        hand.is_closed,
        context.round_wind.value,
        context.seat_wind.value,
        hand.melds,
        rules,
    )
    all_tiles = tiles + [t for meld in hand.melds for t in meld.tiles]
    payment = calculate_payment(han, fu, context.is_dealer, context.is_tsumo, context.honba, context.kyotaku, rules=rules)
    logger.info(f"scored {han} han {fu} fu: {payment.breakdown.base_text}")
    return ScoreResult(
        han=han,
        fu=fu,
        fu_breakdown=fu_breakdown,
        yaku=yaku,
        dora=dora_breakdown(all_tiles, context, rules),
        point_label=point_label(han, fu, rules=rules),
        score=payment.breakdown.base_text,
        points=payment.points,
        payments=payment.payments,
        breakdown=payment.breakdown,
    )
