from __future__ import annotations

import itertools
from typing import Dict, List, Optional, Sequence

from .cards import Card
from .models import HandCategory, HandResult

HAND_LABELS: Dict[HandCategory, str] = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.HIGH_CARD: "High Card",
}

ROYAL_VALUES = {14, 13, 12, 11, 10}
WHEEL_VALUES = {14, 5, 4, 3, 2}


def _result(category: HandCategory, tiebreak: Sequence[int]) -> HandResult:
    return HandResult(category, tuple(tiebreak), HAND_LABELS[category])


def evaluate(cards: Sequence[Card]) -> HandResult:
    """Classify exactly five cards."""
    if len(cards) != 5:
        raise ValueError(f"evaluate() needs exactly 5 cards, got {len(cards)}")

    values = sorted((card.value for card in cards), reverse=True)
    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(values)

    counts: Dict[int, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    # Biggest group first, higher value first within equal group sizes.
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    shape = [count for _, count in groups]

    if straight_high and is_flush:
        if set(values) == ROYAL_VALUES:
            return _result(HandCategory.ROYAL_FLUSH, [straight_high])
        return _result(HandCategory.STRAIGHT_FLUSH, [straight_high])
    if shape[0] == 4:
        return _result(HandCategory.FOUR_OF_A_KIND, [groups[0][0], groups[1][0]])
    if shape[:2] == [3, 2]:
        return _result(HandCategory.FULL_HOUSE, [groups[0][0], groups[1][0]])
    if is_flush:
        return _result(HandCategory.FLUSH, values)
    if straight_high:
        return _result(HandCategory.STRAIGHT, [straight_high])
    if shape[0] == 3:
        return _result(HandCategory.THREE_OF_A_KIND, [value for value, _ in groups])
    if shape[:2] == [2, 2]:
        return _result(HandCategory.TWO_PAIR, [value for value, _ in groups])
    if shape[0] == 2:
        return _result(HandCategory.ONE_PAIR, [value for value, _ in groups])
    return _result(HandCategory.HIGH_CARD, values)


def _straight_high(values: List[int]) -> Optional[int]:
    distinct = set(values)
    if len(distinct) != 5:
        return None
    if distinct == WHEEL_VALUES:
        return 5  # ace plays low
    if max(distinct) - min(distinct) == 4:
        return max(distinct)
    return None


def best_hand(hole: Sequence[Card], community: Sequence[Card] = ()) -> Optional[HandResult]:
    """Best five-card result from hole + community cards, or None with fewer than five cards."""
    cards = list(hole) + list(community)
    if len(cards) < 5:
        return None
    best: Optional[HandResult] = None
    for combo in itertools.combinations(cards, 5):
        result = evaluate(combo)
        if best is None or result > best:
            best = result
    return best


def compare_results(left: HandResult, right: HandResult) -> int:
    if left > right:
        return 1
    if left < right:
        return -1
    return 0
