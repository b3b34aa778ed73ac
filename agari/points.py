from __future__ import annotations

from agari.schemas import Payments, PaymentResult, Points, RuleSet, ScoreBreakdown

MANGAN_BASE = 2000
YAKUMAN_BASE = 8000
HONBA_UNIT = 100
KYOTAKU_UNIT = 1000

LIMIT_BASE_POINTS = {
    "満貫": 2000,
    "跳満": 3000,
    "倍満": 4000,
    "三倍満": 6000,
    "数え役満": 8000,
}


def round_up_100(points: int) -> int:
    return ((points + 99) // 100) * 100


def yakuman_label(multiplier: int) -> str:
    if multiplier <= 1:
        return "役満"
    if multiplier == 2:
        return "ダブル役満"
    return f"{multiplier}倍役満"


def point_label(han: int, fu: int, yakuman_multiplier: int = 0, rules: RuleSet | None = None) -> str:
    rules = rules or RuleSet()
    if yakuman_multiplier:
        return yakuman_label(yakuman_multiplier)
    if han >= 13:
        return "数え役満" if rules.kazoe_yakuman_ari else "三倍満"
    if han >= 11:
        return "三倍満"
    if han >= 8:
        return "倍満"
    if han >= 6:
        return "跳満"
    if han == 5 or fu * 2 ** (han + 2) > MANGAN_BASE:
        return "満貫"
    return "通常"


def base_points(han: int, fu: int, yakuman_multiplier: int = 0, rules: RuleSet | None = None) -> int:
    if yakuman_multiplier:
        return YAKUMAN_BASE * yakuman_multiplier
    label = point_label(han, fu, rules=rules)
    if label in LIMIT_BASE_POINTS:
        return LIMIT_BASE_POINTS[label]
    return fu * 2 ** (han + 2)


def calculate_payment(
    han: int,
    fu: int,
    is_dealer: bool,
    is_tsumo: bool,
    honba: int = 0,
    kyotaku: int = 0,
    yakuman_multiplier: int = 0,
    rules: RuleSet | None = None,
) -> PaymentResult:
    """Point transfer for one win.

    Every payer's share is rounded up to 100 on its own before the shares are
    summed. Repeat counters add 100 per counter to each payer; deposited riichi
    sticks go to the winner whole.
    """
    base = base_points(han, fu, yakuman_multiplier, rules)
    honba_bonus = honba * HONBA_UNIT * 3
    kyotaku_bonus = kyotaku * KYOTAKU_UNIT

    if not is_tsumo:
        ron = round_up_100(base * (6 if is_dealer else 4))
        points = Points(ron=ron)
        received = ron
        base_text = f"{ron}点"
        honba_text = f"{honba}本場 +{honba_bonus}点" if honba else None
    elif is_dealer:
        each = round_up_100(base * 2)
        points = Points(tsumo_dealer_pay=each, tsumo_non_dealer_pay=each)
        received = each * 3
        base_text = f"{each}点オール（合計{received}点）"
        honba_text = f"{honba}本場 各+{honba * HONBA_UNIT}点（合計+{honba_bonus}点）" if honba else None
    else:
        pay_non_dealer = round_up_100(base)
        pay_dealer = round_up_100(base * 2)
        points = Points(tsumo_dealer_pay=pay_dealer, tsumo_non_dealer_pay=pay_non_dealer)
        received = pay_dealer + pay_non_dealer * 2
        base_text = f"子: {pay_non_dealer}点、親: {pay_dealer}点（合計{received}点）"
        honba_text = f"{honba}本場 各+{honba * HONBA_UNIT}点（合計+{honba_bonus}点）" if honba else None

    with_honba = received + honba_bonus
    return PaymentResult(
        points=points,
        payments=Payments(
            hand_points_received=received,
            hand_points_with_honba=with_honba,
            honba_bonus=honba_bonus,
            kyotaku_bonus=kyotaku_bonus,
            total_received=with_honba + kyotaku_bonus,
        ),
        breakdown=ScoreBreakdown(
            base_text=base_text,
            honba_text=honba_text,
            kyotaku_text=f"供託{kyotaku}本 +{kyotaku_bonus}点" if kyotaku else None,
        ),
    )


def calculate_final_score(
    han: int,
    fu: int,
    is_dealer: bool,
    is_tsumo: bool,
    yakuman_multiplier: int = 0,
    rules: RuleSet | None = None,
) -> str:
    return calculate_payment(han, fu, is_dealer, is_tsumo, yakuman_multiplier=yakuman_multiplier, rules=rules).breakdown.base_text
