import pytest

from agari.points import calculate_final_score, calculate_payment, point_label, round_up_100
from agari.schemas import RuleSet


def test_round_up_100():
    assert round_up_100(0) == 0
    assert round_up_100(320) == 400
    assert round_up_100(1900) == 1900
    assert round_up_100(1901) == 2000


def test_non_dealer_tsumo_rounds_each_share():
    assert calculate_final_score(2, 20, False, True) == "子: 400点、親: 700点（合計1500点）"


def test_dealer_tsumo():
    assert calculate_final_score(1, 30, True, True) == "500点オール（合計1500点）"


def test_ron_payments():
    assert calculate_final_score(2, 25, False, False) == "1600点"
    assert calculate_final_score(4, 30, True, False) == "11600点"
    assert calculate_final_score(4, 30, False, False) == "7700点"


@pytest.mark.parametrize(
    "han,fu,label",
    [
        (1, 30, "通常"),
        (3, 60, "通常"),
        (3, 70, "満貫"),
        (4, 40, "満貫"),
        (5, 30, "満貫"),
        (6, 30, "跳満"),
        (7, 30, "跳満"),
        (8, 30, "倍満"),
        (10, 30, "倍満"),
        (11, 30, "三倍満"),
        (12, 30, "三倍満"),
        (13, 30, "数え役満"),
    ],
)
def test_point_label(han, fu, label):
    assert point_label(han, fu) == label


def test_counted_yakuman_can_be_disabled():
    rules = RuleSet(kazoe_yakuman_ari=False)
    assert point_label(13, 30, rules=rules) == "三倍満"
    assert calculate_final_score(13, 30, False, False, rules=rules) == "24000点"


def test_limit_hands():
    assert calculate_final_score(5, 30, False, False) == "8000点"
    assert calculate_final_score(5, 30, True, False) == "12000点"
    assert calculate_final_score(6, 30, False, True) == "子: 3000点、親: 6000点（合計12000点）"
    assert calculate_final_score(13, 30, True, True) == "16000点オール（合計48000点）"


def test_yakuman_multiplier():
    payment = calculate_payment(26, 0, False, False, yakuman_multiplier=2)
    assert payment.points.ron == 64000
    assert point_label(26, 0, 2) == "ダブル役満"
    assert point_label(13, 0, 1) == "役満"


def test_honba_and_kyotaku_on_ron():
    payment = calculate_payment(1, 30, False, False, honba=2, kyotaku=1)
    assert payment.points.ron == 1000
    assert payment.payments.hand_points_received == 1000
    assert payment.payments.honba_bonus == 600
    assert payment.payments.hand_points_with_honba == 1600
    assert payment.payments.kyotaku_bonus == 1000
    assert payment.payments.total_received == 2600
    assert payment.breakdown.honba_text == "2本場 +600点"
    assert payment.breakdown.kyotaku_text == "供託1本 +1000点"


def test_honba_on_tsumo_is_per_payer():
    payment = calculate_payment(2, 20, False, True, honba=1)
    assert payment.points.tsumo_non_dealer_pay == 400
    assert payment.points.tsumo_dealer_pay == 700
    assert payment.payments.total_received == 1800
    assert payment.breakdown.honba_text == "1本場 各+100点（合計+300点）"
    assert payment.breakdown.kyotaku_text is None
