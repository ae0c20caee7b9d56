from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .cards import Card, create_deck
from .evaluator import best_hand


@dataclass(frozen=True)
class MatchupEquity:
    iterations: int
    wins_a: int
    wins_b: int
    ties: int

    def _percent(self, count: int) -> float:
        return 100.0 * count / self.iterations if self.iterations else 0.0

    @property
    def a_percent(self) -> float:
        return self._percent(self.wins_a)

    @property
    def b_percent(self) -> float:
        return self._percent(self.wins_b)

    @property
    def tie_percent(self) -> float:
        return self._percent(self.ties)


def simulate_matchup(
    hand_a: Sequence[Card],
    hand_b: Sequence[Card],
    board: Sequence[Card] = (),
    iterations: int = 2_000,
    rng: Optional[random.Random] = None,
) -> MatchupEquity:
    """Monte Carlo equity of two known hands, running out the rest of the board."""
    if len(hand_a) != 2 or len(hand_b) != 2:
        raise ValueError("Each hand needs exactly two hole cards")
    if len(board) > 5:
        raise ValueError("Board cannot hold more than five cards")
    if iterations <= 0:
        raise ValueError("iterations must be positive")
    known = list(hand_a) + list(hand_b) + list(board)
    used = set(known)
    if len(used) != len(known):
        raise ValueError("The same card appears more than once")

    rng = rng or random.Random()
    remaining = [card for card in create_deck() if card not in used]
    missing = 5 - len(board)
    # A complete board has exactly one outcome.
    if missing == 0:
        iterations = 1

    wins_a = wins_b = ties = 0
    for _ in range(iterations):
        runout = list(board) + rng.sample(remaining, missing)
        result_a = best_hand(hand_a, runout)
        result_b = best_hand(hand_b, runout)
        if result_a > result_b:
            wins_a += 1
        elif result_b > result_a:
            wins_b += 1
        else:
            ties += 1
    return MatchupEquity(iterations=iterations, wins_a=wins_a, wins_b=wins_b, ties=ties)
