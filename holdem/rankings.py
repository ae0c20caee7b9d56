from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .cards import Card, parse_cards
from .evaluator import HAND_LABELS
from .models import HandCategory


@dataclass(frozen=True)
class RankingEntry:
    category: HandCategory
    description: str
    example: Tuple[str, ...]

    @property
    def name(self) -> str:
        return HAND_LABELS[self.category]

    @property
    def cards(self) -> List[Card]:
        return parse_cards(self.example)


# Best to worst.
HAND_RANKINGS: Tuple[RankingEntry, ...] = (
    RankingEntry(HandCategory.ROYAL_FLUSH, "A, K, Q, J, 10, all in the same suit.", ("As", "Ks", "Qs", "Js", "Ts")),
    RankingEntry(HandCategory.STRAIGHT_FLUSH, "Five cards in a sequence, all in the same suit.", ("9c", "8c", "7c", "6c", "5c")),
    RankingEntry(HandCategory.FOUR_OF_A_KIND, "All four cards of the same rank.", ("Qs", "Qh", "Qd", "Qc", "4d")),
    RankingEntry(HandCategory.FULL_HOUSE, "Three of a kind with a pair.", ("Js", "Jh", "Jc", "8d", "8c")),
    RankingEntry(HandCategory.FLUSH, "Any five cards of the same suit, but not in a sequence.", ("Kh", "Qh", "8h", "4h", "2h")),
    RankingEntry(HandCategory.STRAIGHT, "Five cards in a sequence, but not of the same suit.", ("7s", "6h", "5d", "4c", "3s")),
    RankingEntry(HandCategory.THREE_OF_A_KIND, "Three cards of the same rank.", ("As", "Ah", "Ad", "Tc", "5s")),
    RankingEntry(HandCategory.TWO_PAIR, "Two different pairs.", ("Ks", "Kc", "7d", "7h", "2c")),
    RankingEntry(HandCategory.ONE_PAIR, "Two cards of the same rank.", ("Ts", "Th", "9d", "6c", "4h")),
    RankingEntry(
        HandCategory.HIGH_CARD,
        "When you haven't made any of the hands above, the highest card plays.",
        ("Ad", "Kc", "9s", "7h", "4c"),
    ),
)
