import random

import pytest

from holdem.models import Street
from practice.bots import random_strategy

from .helpers import create_table


@pytest.mark.parametrize("num_players", [2, 3, 6])
def test_random_games_keep_chips_and_rules(num_players):
    rng = random.Random(num_players)
    table = create_table(num_players=num_players, seed=num_players)
    expected = num_players * 1_000
    totals = []
    table.subscribe(lambda snap: totals.append(snap.total_pot + sum(p.stack for p in snap.players)))

    hands = 0
    while hands < 150 and not table.game_over:
        table.deal_new_hand()
        hands += 1
        while not table.is_hand_complete():
            actor = table.acting_player_id
            assert actor is not None
            assert table.player(actor).can_act
            action, amount = random_strategy(table, actor, rng)
            table.apply_action(actor, action, amount)
            assert table.total_chips == expected

        assert table.street == Street.SHOWDOWN
        assert all(player.stack >= 0 for player in table.players)
        assert sum(winner.amount for winner in table.snapshot().winners) > 0

    assert set(totals) == {expected}
