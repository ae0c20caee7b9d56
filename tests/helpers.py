from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Card, create_deck, parse_cards
from holdem.models import ActionType, TableConfig
from holdem.table import Table


def create_table(*, num_players: int = 2, starting_stack: int = 1_000, seed: int = 42) -> Table:
    """Instantiate a table with a seeded shuffle."""
    return Table(TableConfig(num_players=num_players, starting_stack=starting_stack), rng=random.Random(seed))


def deck_order(holes: Sequence[Sequence[str]], board: Sequence[str] = ()) -> List[str]:
    """Card labels in the order the table deals them: hole cards round-robin, then the board."""
    order = [hole[0] for hole in holes] + [hole[1] for hole in holes]
    return order + list(board)


def stack_deck(monkeypatch, labels: Sequence[str]) -> None:
    """Make the next deal_new_hand use ``labels`` first, then the rest of a fresh deck."""
    top = parse_cards(labels)
    rest = [card for card in create_deck() if card not in set(top)]
    deck: List[Card] = top + rest
    monkeypatch.setattr("holdem.table.create_deck", lambda: list(deck))
    monkeypatch.setattr("holdem.table.shuffle", lambda cards, rng=None: cards)


def perform_actions(table: Table, actions: Iterable[Tuple[int, ActionType, Optional[int]]]) -> None:
    """Apply a scripted sequence of actions (player_id, action, amount)."""
    for player_id, action, amount in actions:
        table.apply_action(player_id, action, amount)


def check_down(table: Table) -> None:
    """Advance the current hand with check/call until it is over."""
    while not table.is_hand_complete():
        actor = table.acting_player_id
        if actor is None:
            break
        legal, *_ = table.legal_actions(actor)
        if ActionType.CHECK in legal:
            table.apply_action(actor, ActionType.CHECK)
        else:
            table.apply_action(actor, ActionType.CALL)


def chips_in_play(table: Table) -> int:
    return table.pot + sum(player.stack + player.bet_this_street for player in table.players)
