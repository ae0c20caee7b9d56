from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Tuple

from .cards import Card, cards_to_labels, create_deck, deal, shuffle
from .errors import InvalidAction
from .models import (
    BETTING_STREETS,
    ActionType,
    Player,
    PlayerView,
    Street,
    TableConfig,
    TableSnapshot,
    Winner,
)
from .showdown import ShowdownResult, resolve_showdown

LOGGER = logging.getLogger("holdem.table")

# Table keeps all round state in memory. No pacing, sockets or rendering live
# here; drivers call deal_new_hand/apply_action/set_show_cards and read snapshots.

Event = Dict[str, object]
Listener = Callable[[TableSnapshot], None]

STREET_CARDS = {
    Street.PRE_FLOP: (Street.FLOP, 3),
    Street.FLOP: (Street.TURN, 1),
    Street.TURN: (Street.RIVER, 1),
}


@dataclass
class HandContext:
    # Everything that lives for one hand only (deck, board, pot, turn pointer).
    hand_id: str
    deck: List[Card]
    seating: List[int]
    community: List[Card] = field(default_factory=list)
    street: Street = Street.DEALING
    pot: int = 0
    acting_player_id: Optional[int] = None
    showdown: Optional[ShowdownResult] = None
    winners: List[Winner] = field(default_factory=list)


class Table:
    """Texas Hold'em round engine for one table of 2-6 players."""

    def __init__(self, config: Optional[TableConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or TableConfig()
        self.rng = rng or random.Random()
        self.players: List[Player] = []
        self.hand: Optional[HandContext] = None
        self.hand_counter = 0
        self.is_dealing = False
        self._listeners: List[Listener] = []
        self._last_events: List[Event] = []
        self.reset_to_setup()

    # Session lifecycle -------------------------------------------------

    def reset_to_setup(self, num_players: Optional[int] = None) -> None:
        if num_players is not None:
            self.config = replace(self.config, num_players=num_players)
        self.players = [
            Player(
                id=idx + 1,
                name="You" if idx == 0 else f"Player {idx + 1}",
                stack=self.config.starting_stack,
                is_user=idx == 0,
            )
            for idx in range(self.config.num_players)
        ]
        self.hand = None
        self.is_dealing = False
        self._emit([{"ev": "RESET", "players": self.config.num_players}])

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Read-side helpers -------------------------------------------------

    @property
    def street(self) -> Street:
        return self.hand.street if self.hand else Street.SETUP

    @property
    def acting_player_id(self) -> Optional[int]:
        return self.hand.acting_player_id if self.hand else None

    @property
    def pot(self) -> int:
        return self.hand.pot if self.hand else 0

    @property
    def community(self) -> List[Card]:
        return list(self.hand.community) if self.hand else []

    @property
    def game_over(self) -> bool:
        funded = [player for player in self.players if player.stack > 0]
        return self.street == Street.SHOWDOWN and len(funded) < 2

    @property
    def user(self) -> Optional[Player]:
        return next((player for player in self.players if player.is_user), None)

    @property
    def total_chips(self) -> int:
        return self.pot + sum(player.stack + player.bet_this_street for player in self.players)

    def can_user_act(self) -> bool:
        user = self.user
        if user is None or self.is_dealing or self.street not in BETTING_STREETS:
            return False
        return user.can_act and self.acting_player_id == user.id

    def is_hand_complete(self) -> bool:
        return bool(self.hand and self.hand.street == Street.SHOWDOWN)

    def player(self, player_id: int) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise KeyError(f"Unknown player {player_id}")

    def highest_bet(self) -> int:
        return max((player.bet_this_street for player in self.players), default=0)

    def snapshot(self) -> TableSnapshot:
        ctx = self.hand
        return TableSnapshot(
            hand_id=ctx.hand_id if ctx else None,
            street=self.street,
            players=tuple(PlayerView.of(player) for player in self.players),
            community=tuple(ctx.community) if ctx else (),
            pot=self.pot,
            acting_player_id=self.acting_player_id,
            can_user_act=self.can_user_act(),
            is_dealing=self.is_dealing,
            game_over=self.game_over,
            winners=tuple(ctx.winners) if ctx else (),
            events=tuple(dict(event) for event in self._last_events),
        )

    def legal_actions(self, player_id: int) -> Tuple[List[ActionType], Optional[int], Optional[int], Optional[int]]:
        """Legal moves plus helper numbers (amount to call, smallest and largest bet)."""
        ctx = self._require_betting()
        player = self.player(player_id)
        if player.id not in ctx.seating or not player.can_act:
            raise InvalidAction("PLAYER_NOT_ACTIVE", "Player cannot act this hand")

        legal: List[ActionType] = [ActionType.FOLD]
        to_call = self.highest_bet() - player.bet_this_street
        if to_call <= 0:
            legal.append(ActionType.CHECK)
            call_amount = None
        else:
            legal.append(ActionType.CALL)
            call_amount = min(to_call, player.stack)

        increment = self.config.min_increment
        min_bet = max(to_call, increment)
        if min_bet % increment:
            min_bet += increment - min_bet % increment
        min_bet = min(min_bet, player.stack)
        legal.extend([ActionType.BET, ActionType.ALL_IN])
        return legal, call_amount, min_bet, player.stack

    # Hand lifecycle ----------------------------------------------------

    def deal_new_hand(self) -> List[Event]:
        if self.hand and self.hand.street in BETTING_STREETS:
            raise InvalidAction("HAND_IN_PROGRESS", "Finish or reset the current hand first")

        funded = [player for player in self.players if player.stack > 0]
        if len(funded) < 2:
            if self.hand is None:
                self.hand = HandContext(hand_id=self._next_hand_id(), deck=[], seating=[])
            self.hand.street = Street.SHOWDOWN
            self.hand.acting_player_id = None
            events: List[Event] = [{"ev": "GAME_OVER", "players_with_chips": len(funded)}]
            LOGGER.info("Game over: %s player(s) with chips", len(funded))
            self._emit(events)
            return events

        for player in self.players:
            player.reset_for_hand()
            if player.stack == 0:
                # Busted players sit the hand out.
                player.has_folded = True

        ctx = HandContext(
            hand_id=self._next_hand_id(),
            deck=shuffle(create_deck(), self.rng),
            seating=[player.id for player in funded],
        )
        self.hand = ctx
        self.is_dealing = True
        self._emit([{"ev": "DEALING", "hand_id": ctx.hand_id}])

        events = [{"ev": "START_HAND", "hand_id": ctx.hand_id, "players": list(ctx.seating)}]
        self._deal_hole_cards(ctx)
        events.append(self._post_blinds(ctx))
        ctx.street = Street.PRE_FLOP
        self.is_dealing = False
        LOGGER.info("Hand %s dealt to %s", ctx.hand_id, ctx.seating)

        # Heads-up the small blind opens; otherwise the seat after the big blind.
        count = len(ctx.seating)
        first_index = 2 % count if count > 2 else 0
        events.extend(self._settle(ctx, first_index))
        self._emit(events)
        return events

    def _next_hand_id(self) -> str:
        hand_id = f"H-{time.strftime('%Y%m%d')}-{self.hand_counter:05d}"
        self.hand_counter += 1
        return hand_id

    def _deal_hole_cards(self, ctx: HandContext) -> None:
        seated = self._seated(ctx)
        for _ in range(2):
            for player in seated:
                player.hand.extend(deal(ctx.deck, 1))

    def _post_blinds(self, ctx: HandContext) -> Event:
        seated = self._seated(ctx)
        sb_player, bb_player = seated[0], seated[1]
        sb = min(self.config.small_blind, sb_player.stack)
        bb = min(self.config.big_blind, bb_player.stack)
        self._commit(sb_player, sb)
        self._commit(bb_player, bb)
        return {
            "ev": "POST_BLINDS",
            "sb_player": sb_player.id,
            "bb_player": bb_player.id,
            "sb": sb,
            "bb": bb,
        }

    def _commit(self, player: Player, amount: int) -> None:
        amount = min(amount, player.stack)
        player.stack -= amount
        player.bet_this_street += amount
        if player.stack == 0:
            player.is_all_in = True

    # Action handling ---------------------------------------------------

    def apply_action(self, player_id: int, action: ActionType, amount: Optional[int] = None) -> List[Event]:
        ctx = self._require_betting()
        if player_id != ctx.acting_player_id:
            raise InvalidAction("OUT_OF_TURN", "Not your turn")
        player = self.player(player_id)

        try:
            action = ActionType(action)
        except ValueError:
            raise InvalidAction("UNSUPPORTED_ACTION", f"Unsupported action {action}") from None

        highest = self.highest_bet()
        to_call = highest - player.bet_this_street
        events: List[Event] = []

        # Validate before touching state so a rejected action changes nothing.
        if action == ActionType.FOLD:
            player.has_folded = True
            events.append({"ev": "FOLD", "player_id": player_id})
        elif action == ActionType.CHECK:
            if to_call > 0:
                raise InvalidAction("CANNOT_CHECK", f"Cannot check when facing a bet; call {to_call} or fold")
            events.append({"ev": "CHECK", "player_id": player_id})
        elif action == ActionType.CALL:
            if to_call <= 0:
                events.append({"ev": "CHECK", "player_id": player_id})
            else:
                paid = min(to_call, player.stack)
                self._commit(player, paid)
                events.append({"ev": "CALL", "player_id": player_id, "amount": paid})
        else:
            if action == ActionType.ALL_IN:
                amount = player.stack
            self._validate_bet(player, amount, highest)
            self._commit(player, amount)
            if player.is_all_in:
                label = "ALL_IN"
            elif player.bet_this_street == highest:
                label = "CALL"  # a bet of exactly the amount owed
            else:
                label = "BET"
            events.append({"ev": label, "player_id": player_id, "amount": amount})

        player.has_acted = True
        if player.bet_this_street > highest:
            # A raise re-opens action for everyone still able to bet.
            for other in self._seated(ctx):
                if other is not player and other.can_act:
                    other.has_acted = False

        LOGGER.debug(
            "Applied action hand=%s player=%s action=%s amount=%s",
            ctx.hand_id,
            player_id,
            action.value,
            amount,
        )
        events.extend(self._settle(ctx, ctx.seating.index(player_id) + 1))
        self._emit(events)
        return events

    def _validate_bet(self, player: Player, amount: Optional[int], highest: int) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidAction("NON_POSITIVE", "Bet amount must be positive")
        if amount > player.stack:
            raise InvalidAction("INSUFFICIENT_STACK", "You cannot bet more than you have")
        if amount == player.stack:
            return  # all-in is always allowed, whatever the size
        increment = self.config.min_increment
        if amount % increment:
            raise InvalidAction("WRONG_INCREMENT", f"Bet must be in increments of {increment}")
        if player.bet_this_street + amount < highest:
            raise InvalidAction("BELOW_MINIMUM", f"Minimum bet is {highest - player.bet_this_street}")

    def set_show_cards(self, player_id: int, visible: bool) -> None:
        player = next((p for p in self.players if p.id == player_id), None)
        if player is None or not player.is_user:
            return
        player.wants_cards_shown = visible
        player.reveal_hand = visible or self.street == Street.SHOWDOWN
        self._emit([{"ev": "SHOW_CARDS", "player_id": player_id, "visible": visible}])

    # Driver loop -------------------------------------------------------

    def _settle(self, ctx: HandContext, start_index: int) -> List[Event]:
        """Advance streets / finish the hand until someone has to act."""
        events: List[Event] = []
        while True:
            seated = self._seated(ctx)
            contenders = [player for player in seated if not player.has_folded]
            if len(contenders) == 1:
                events.extend(self._showdown(ctx))
                return events

            actors = [player for player in contenders if not player.is_all_in]
            highest = self.highest_bet()
            if len(actors) <= 1 and all(player.bet_this_street >= highest for player in actors):
                # Nobody left to bet against: deal the rest of the board.
                while ctx.street != Street.SHOWDOWN:
                    events.extend(self._advance_street(ctx))
                return events

            if self._street_complete(actors, highest):
                events.extend(self._advance_street(ctx))
                if ctx.street == Street.SHOWDOWN:
                    return events
                start_index = 0
                continue

            ctx.acting_player_id = self._next_actor_from(ctx, start_index)
            return events

    def _street_complete(self, actors: List[Player], highest: int) -> bool:
        return all(player.has_acted and player.bet_this_street == highest for player in actors)

    def _next_actor_from(self, ctx: HandContext, start_index: int) -> Optional[int]:
        count = len(ctx.seating)
        for offset in range(count):
            player = self.player(ctx.seating[(start_index + offset) % count])
            if player.can_act:
                return player.id
        return None

    def _advance_street(self, ctx: HandContext) -> List[Event]:
        events = self._collect_bets(ctx)
        if ctx.street not in STREET_CARDS:
            events.extend(self._showdown(ctx))
            return events

        ctx.street, count = STREET_CARDS[ctx.street]
        cards = deal(ctx.deck, count)
        ctx.community.extend(cards)
        ctx.acting_player_id = None
        events.append({"ev": ctx.street.value, "cards": cards_to_labels(cards)})
        return events

    def _collect_bets(self, ctx: HandContext) -> List[Event]:
        events: List[Event] = []
        seated = self._seated(ctx)
        bets = sorted((player.bet_this_street for player in seated), reverse=True)
        if len(bets) > 1 and bets[0] > bets[1]:
            # Nobody could match the top bet; hand the unmatched part back.
            top = next(player for player in seated if player.bet_this_street == bets[0])
            excess = bets[0] - bets[1]
            top.bet_this_street -= excess
            top.stack += excess
            events.append({"ev": "RETURN", "player_id": top.id, "amount": excess})

        for player in seated:
            ctx.pot += player.bet_this_street
            player.reset_for_street()
        return events

    def _showdown(self, ctx: HandContext) -> List[Event]:
        if ctx.showdown is not None:
            return []

        seated = self._seated(ctx)
        pot = ctx.pot
        for player in seated:
            pot += player.bet_this_street
            player.reset_for_street()
        ctx.pot = 0

        result = resolve_showdown(seated, ctx.community, pot)
        ctx.showdown = result
        ctx.street = Street.SHOWDOWN
        ctx.acting_player_id = None

        events: List[Event] = []
        for player in seated:
            hand_result = result.results.get(player.id)
            if hand_result is not None:
                events.append(
                    {
                        "ev": "SHOWDOWN",
                        "player_id": player.id,
                        "hand": cards_to_labels(player.hand),
                        "board": cards_to_labels(ctx.community),
                        "rank": hand_result.label,
                    }
                )

        for player_id in result.winners:
            winner = self.player(player_id)
            amount = result.payouts[player_id]
            winner.stack += amount
            hand_result = result.results.get(player_id)
            ctx.winners.append(
                Winner(
                    player_id=player_id,
                    name=winner.name,
                    amount=amount,
                    hand_label=hand_result.label if hand_result else "",
                )
            )
            events.append({"ev": "POT_AWARD", "player_id": player_id, "amount": amount})

        for player in self.players:
            player.reveal_hand = True
        for player in seated:
            if player.stack == 0:
                events.append({"ev": "ELIMINATED", "player_id": player.id})

        LOGGER.info(
            "Hand %s finished; winners=%s stacks=%s",
            ctx.hand_id,
            [(winner.name, winner.amount, winner.hand_label) for winner in ctx.winners],
            [player.stack for player in self.players],
        )
        return events

    # Internals ---------------------------------------------------------

    def _require_betting(self) -> HandContext:
        ctx = self.hand
        if ctx is None or ctx.street not in BETTING_STREETS or self.is_dealing:
            raise InvalidAction("HAND_NOT_ACTIVE", "No betting round in progress")
        return ctx

    def _seated(self, ctx: HandContext) -> List[Player]:
        return [self.player(player_id) for player_id in ctx.seating]

    def _emit(self, events: List[Event]) -> None:
        self._last_events = list(events)
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
