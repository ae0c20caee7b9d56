import random

import pytest

from holdem.cards import Card, cards_to_labels, create_deck, deal, parse_label, shuffle
from holdem.errors import ExhaustedDeck


def test_fresh_deck_has_52_unique_cards():
    deck = create_deck()
    assert len(deck) == 52
    assert len(set(deck)) == 52
    assert deck[0] == Card("2", "s")
    assert deck[-1] == Card("A", "c")


def test_shuffle_is_a_permutation():
    deck = shuffle(create_deck(), random.Random(3))
    assert len(deck) == 52
    assert set(deck) == set(create_deck())
    assert deck != create_deck()


def test_seeded_shuffles_repeat():
    first = shuffle(create_deck(), random.Random(11))
    second = shuffle(create_deck(), random.Random(11))
    other = shuffle(create_deck(), random.Random(12))
    assert first == second
    assert first != other


def test_deal_takes_from_the_top():
    deck = create_deck()
    cards = deal(deck, 3)
    assert cards_to_labels(cards) == ["2s", "2h", "2d"]
    assert len(deck) == 49


def test_deal_past_the_end_raises():
    deck = create_deck()
    deal(deck, 50)
    with pytest.raises(ExhaustedDeck):
        deal(deck, 3)
    assert len(deck) == 2


def test_card_validation_and_labels():
    with pytest.raises(ValueError):
        Card("1", "s")
    with pytest.raises(ValueError):
        Card("A", "x")
    ten = parse_label("10h")
    assert ten == Card("T", "h")
    assert ten.value == 10
    assert str(ten) == "10♥"
    assert parse_label("as").label == "As"
