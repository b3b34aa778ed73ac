import pytest

from agari.decomposition import Decomposition, Group, GroupKind
from agari.tiles import tile_to_index
from agari.waits import Wait, WaitCandidate, classify_wait, is_pinfu_candidate, wait_candidates


def run(tile: str, concealed: bool = True) -> Group:
    return Group(GroupKind.run, tile_to_index(tile), concealed)


def triplet(tile: str) -> Group:
    return Group(GroupKind.triplet, tile_to_index(tile))


def hand(pair: str, *groups: Group) -> Decomposition:
    return Decomposition(pair=tile_to_index(pair), groups=groups)


@pytest.mark.parametrize(
    "first,win,expected",
    [
        ("1m", "1m", Wait.ryanmen),
        ("1m", "2m", Wait.kanchan),
        ("1m", "3m", Wait.penchan),
        ("7p", "7p", Wait.penchan),
        ("7p", "9p", Wait.ryanmen),
        ("4s", "4s", Wait.ryanmen),
        ("4s", "6s", Wait.ryanmen),
    ],
)
def test_run_waits(first, win, expected):
    d = hand("E", run(first))
    assert classify_wait(d, win) == expected


def test_pair_and_triplet_candidates():
    d = hand("5m", triplet("5p"), run("3m"))
    assert wait_candidates(d, "5m") == [WaitCandidate(Wait.tanki, None), WaitCandidate(Wait.ryanmen, 1)]
    assert wait_candidates(d, "5p") == [WaitCandidate(Wait.shanpon, 0)]


def test_identical_groups_yield_one_candidate():
    d = hand("9s", run("2m"), run("2m"))
    assert wait_candidates(d, "3m") == [WaitCandidate(Wait.kanchan, 0)]


def test_exposed_groups_never_take_the_winning_tile():
    d = hand("9s", run("1m", concealed=False))
    assert wait_candidates(d, "1m") == []
    assert classify_wait(d, "1m") is None


def test_wait_fu():
    assert Wait.ryanmen.fu == 0
    assert all(w.fu == 2 for w in (Wait.penchan, Wait.kanchan, Wait.tanki, Wait.shanpon))


def test_pinfu_candidate_conditions():
    d = hand("2p", run("1m"), run("4p"), run("6s"), run("2s"))
    assert is_pinfu_candidate(d, WaitCandidate(Wait.ryanmen, 1), "E", "S")
    assert not is_pinfu_candidate(d, WaitCandidate(Wait.kanchan, 1), "E", "S")

    value_pair = hand("S", run("1m"), run("4p"), run("6s"), run("2s"))
    assert not is_pinfu_candidate(value_pair, WaitCandidate(Wait.ryanmen, 1), "E", "S")

    with_triplet = hand("2p", run("1m"), run("4p"), run("6s"), triplet("9s"))
    assert not is_pinfu_candidate(with_triplet, WaitCandidate(Wait.ryanmen, 1), "E", "S")
