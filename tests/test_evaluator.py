import itertools
import random

import pytest

from holdem.cards import create_deck, parse_cards, shuffle
from holdem.evaluator import best_hand, compare_results, evaluate
from holdem.models import HandCategory
from holdem.rankings import HAND_RANKINGS


def _eval(*labels):
    return evaluate(parse_cards(labels))


@pytest.mark.parametrize(
    "labels, category",
    [
        (("As", "Ks", "Qs", "Js", "Ts"), HandCategory.ROYAL_FLUSH),
        (("9h", "8h", "7h", "6h", "5h"), HandCategory.STRAIGHT_FLUSH),
        (("5d", "4d", "3d", "2d", "Ad"), HandCategory.STRAIGHT_FLUSH),
        (("9s", "9h", "9d", "9c", "2h"), HandCategory.FOUR_OF_A_KIND),
        (("Ks", "Kh", "Kd", "4c", "4h"), HandCategory.FULL_HOUSE),
        (("Ah", "Jh", "8h", "4h", "2h"), HandCategory.FLUSH),
        (("Ts", "9h", "8d", "7c", "6s"), HandCategory.STRAIGHT),
        (("As", "2h", "3d", "4c", "5s"), HandCategory.STRAIGHT),
        (("7s", "7h", "7d", "Kc", "2s"), HandCategory.THREE_OF_A_KIND),
        (("Qs", "Qh", "5d", "5c", "9s"), HandCategory.TWO_PAIR),
        (("Js", "Jh", "8d", "4c", "2s"), HandCategory.ONE_PAIR),
        (("Ks", "Jh", "8d", "4c", "2s"), HandCategory.HIGH_CARD),
    ],
)
def test_categories(labels, category):
    result = evaluate(parse_cards(labels))
    assert result.category == category


def test_royal_flush_label():
    assert _eval("Ah", "Kh", "Qh", "Jh", "Th").label == "Royal Flush"


def test_wheel_plays_five_high():
    wheel = _eval("As", "2h", "3d", "4c", "5s")
    six_high = _eval("2s", "3h", "4d", "5c", "6s")
    assert wheel.tiebreak == (5,)
    assert wheel < six_high


def test_steel_wheel_is_lowest_straight_flush():
    steel = _eval("As", "2s", "3s", "4s", "5s")
    assert steel.category == HandCategory.STRAIGHT_FLUSH
    assert steel.tiebreak == (5,)
    assert steel < _eval("2s", "3s", "4s", "5s", "6s")


def test_kickers_decide_equal_pairs():
    aces_king = _eval("As", "Ah", "Kd", "7c", "3s")
    aces_queen = _eval("Ad", "Ac", "Qd", "7h", "3h")
    assert compare_results(aces_king, aces_queen) == 1
    assert compare_results(aces_queen, aces_king) == -1


def test_two_pair_kicker_and_ordering():
    assert _eval("Ks", "Kh", "5d", "5c", "9s") > _eval("Qs", "Qh", "Jd", "Jc", "As")
    assert _eval("Ks", "Kh", "5d", "5c", "9s") > _eval("Kd", "Kc", "5s", "5h", "8s")


def test_full_house_trips_rank_first():
    assert _eval("3s", "3h", "3d", "Ac", "Ah") > _eval("2s", "2h", "2d", "Kc", "Kh")


def test_same_ranks_different_suits_tie():
    left = _eval("Ks", "Jh", "8d", "4c", "2s")
    right = _eval("Kh", "Jd", "8c", "4s", "2h")
    assert compare_results(left, right) == 0


def test_evaluate_needs_five_cards():
    with pytest.raises(ValueError):
        evaluate(parse_cards(["As", "Ks", "Qs", "Js"]))


def test_best_hand_under_five_cards_is_none():
    assert best_hand(parse_cards(["As", "Ah"]), parse_cards(["Kd", "Qc"])) is None


def test_board_two_pair_plus_pocket_card_makes_full_house():
    result = best_hand(parse_cards(["Kc", "2h"]), parse_cards(["Ks", "Kd", "7h", "7c", "3s"]))
    assert result.category == HandCategory.FULL_HOUSE
    assert result.tiebreak == (13, 7)


def test_flush_beats_irrelevant_pocket_pair():
    result = best_hand(parse_cards(["4c", "4d"]), parse_cards(["Ah", "Jh", "8h", "5h", "2h"]))
    assert result.category == HandCategory.FLUSH
    assert result.tiebreak == (14, 11, 8, 5, 2)


def test_wheel_beats_a_pair():
    board = parse_cards(["3d", "4c", "5s", "Kh", "9c"])
    wheel = best_hand(parse_cards(["As", "2h"]), board)
    pair = best_hand(parse_cards(["Kd", "Qc"]), board)
    assert wheel.category == HandCategory.STRAIGHT
    assert wheel.tiebreak == (5,)
    assert wheel > pair


def test_best_hand_matches_exhaustive_search():
    rng = random.Random(7)
    for _ in range(40):
        deck = shuffle(create_deck(), rng)
        hole, community = deck[:2], deck[2:7]
        expected = max(evaluate(combo) for combo in itertools.combinations(hole + community, 5))
        assert best_hand(hole, community) == expected


def test_ordering_is_total_and_consistent():
    rng = random.Random(21)
    results = [evaluate(shuffle(create_deck(), rng)[:5]) for _ in range(60)]
    ordered = sorted(results)
    for low, high in zip(ordered, ordered[1:]):
        assert compare_results(low, high) in (-1, 0)
        assert compare_results(high, low) in (0, 1)


def test_ranking_examples_evaluate_to_their_category():
    assert [entry.category for entry in HAND_RANKINGS] == sorted(HandCategory, reverse=True)
    previous = None
    for entry in HAND_RANKINGS:
        result = evaluate(entry.cards)
        assert result.category == entry.category
        assert result.label == entry.name
        if previous is not None:
            assert result < previous
        previous = result
