from __future__ import annotations

import random
from typing import Callable, Optional, Tuple

from holdem.models import ActionType
from holdem.table import Table

Decision = Tuple[ActionType, Optional[int]]
Strategy = Callable[[Table, int, random.Random], Decision]

FOLD_CHANCE = 0.2
BET_CHANCE = 0.2
OPEN_SIZES = (20, 25, 30)


def random_strategy(table: Table, player_id: int, rng: random.Random) -> Decision:
    """House opponent: mostly calls, folds one time in five to a bet, and now and then opens small."""

    _, call_amount, _, _ = table.legal_actions(player_id)
    player = table.player(player_id)
    roll = rng.random()

    if call_amount is not None:
        # Never fold when calling would just put the rest of the stack in.
        if roll < FOLD_CHANCE and player.stack > call_amount:
            return ActionType.FOLD, None
        return ActionType.CALL, None

    if roll > 1 - BET_CHANCE and player.stack > 0:
        return ActionType.BET, min(player.stack, rng.choice(OPEN_SIZES))
    return ActionType.CHECK, None


def fallback_decision(table: Table, player_id: int) -> Decision:
    legal, *_ = table.legal_actions(player_id)
    # Same preference order as a timed-out seat: check > call > fold.
    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    if ActionType.CALL in legal:
        return ActionType.CALL, None
    return ActionType.FOLD, None
