from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .cards import Card
from .evaluator import best_hand
from .models import HandResult, Player


@dataclass
class ShowdownResult:
    winners: List[int] = field(default_factory=list)
    payouts: Dict[int, int] = field(default_factory=dict)
    results: Dict[int, HandResult] = field(default_factory=dict)

    @property
    def uncontested(self) -> bool:
        return not self.results


def split_pot(amount: int, winners: Sequence[int]) -> Dict[int, int]:
    """Even split by floor division; the odd chips go to the first winner in seating order."""
    if not winners:
        return {}
    share, remainder = divmod(amount, len(winners))
    payouts = {player_id: share for player_id in winners}
    payouts[winners[0]] += remainder
    return payouts


def resolve_showdown(players: Sequence[Player], community: Sequence[Card], pot: int) -> ShowdownResult:
    """Pick the winner(s) among non-folded players and work out their share of ``pot``.

    ``players`` must be in seating order. Stacks are not touched here; the table
    applies the payouts.
    """
    contenders = [player for player in players if not player.has_folded]
    if not contenders:
        return ShowdownResult()

    if len(contenders) == 1:
        only = contenders[0].id
        return ShowdownResult(winners=[only], payouts={only: pot})

    results: Dict[int, HandResult] = {}
    for player in contenders:
        result = best_hand(player.hand, community)
        if result is None:
            raise ValueError(f"Player {player.id} has fewer than five cards available at showdown")
        results[player.id] = result

    top = max(results.values())
    winners = [player.id for player in contenders if results[player.id] == top]
    return ShowdownResult(winners=winners, payouts=split_pot(pot, winners), results=results)
