from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

from .cards import Card

MIN_PLAYERS = 2
MAX_PLAYERS = 6


class Street(str, Enum):
    SETUP = "SETUP"
    DEALING = "DEALING"
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


BETTING_STREETS = (Street.PRE_FLOP, Street.FLOP, Street.TURN, Street.RIVER)


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    ALL_IN = "ALL_IN"


class HandCategory(IntEnum):
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


@dataclass(frozen=True, order=True)
class HandResult:
    category: HandCategory
    tiebreak: Tuple[int, ...]
    label: str = field(default="", compare=False)


@dataclass
class TableConfig:
    num_players: int = 2
    starting_stack: int = 1_000
    small_blind: int = 10
    big_blind: int = 20
    min_increment: int = 5

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")


@dataclass
class Player:
    id: int
    name: str
    stack: int
    is_user: bool = False
    hand: List[Card] = field(default_factory=list)
    has_folded: bool = False
    is_all_in: bool = False
    has_acted: bool = False
    bet_this_street: int = 0
    reveal_hand: bool = False
    wants_cards_shown: bool = False

    def reset_for_hand(self) -> None:
        self.hand.clear()
        self.has_folded = False
        self.is_all_in = False
        self.has_acted = False
        self.bet_this_street = 0
        # Showdown reveals everyone; only the user's own choice survives into the next hand.
        self.reveal_hand = self.wants_cards_shown

    def reset_for_street(self) -> None:
        self.bet_this_street = 0
        self.has_acted = False

    @property
    def can_act(self) -> bool:
        return not self.has_folded and not self.is_all_in


@dataclass(frozen=True)
class Winner:
    player_id: int
    name: str
    amount: int
    hand_label: str


@dataclass(frozen=True)
class PlayerView:
    id: int
    name: str
    stack: int
    hand: Tuple[Card, ...]
    has_folded: bool
    is_all_in: bool
    has_acted: bool
    bet_this_street: int
    is_user: bool
    reveal_hand: bool

    @classmethod
    def of(cls, player: Player) -> "PlayerView":
        return cls(
            id=player.id,
            name=player.name,
            stack=player.stack,
            hand=tuple(player.hand),
            has_folded=player.has_folded,
            is_all_in=player.is_all_in,
            has_acted=player.has_acted,
            bet_this_street=player.bet_this_street,
            is_user=player.is_user,
            reveal_hand=player.reveal_hand,
        )


@dataclass(frozen=True)
class TableSnapshot:
    hand_id: Optional[str]
    street: Street
    players: Tuple[PlayerView, ...]
    community: Tuple[Card, ...]
    pot: int
    acting_player_id: Optional[int]
    can_user_act: bool
    is_dealing: bool
    game_over: bool
    winners: Tuple[Winner, ...] = ()
    events: Tuple[Dict[str, object], ...] = ()

    @property
    def total_pot(self) -> int:
        return self.pot + sum(player.bet_this_street for player in self.players)

    def to_payload(self, viewer_id: Optional[int] = None) -> Dict[str, object]:
        players: List[Dict[str, object]] = []
        for player in self.players:
            visible = (
                player.reveal_hand
                or player.id == viewer_id
                or self.street == Street.SHOWDOWN
            )
            players.append(
                {
                    "id": player.id,
                    "name": player.name,
                    "stack": player.stack,
                    "hand": [card.label for card in player.hand] if visible else ["??"] * len(player.hand),
                    "has_folded": player.has_folded,
                    "is_all_in": player.is_all_in,
                    "bet_this_street": player.bet_this_street,
                    "is_user": player.is_user,
                    "reveal_hand": player.reveal_hand,
                }
            )
        return {
            "hand_id": self.hand_id,
            "street": self.street.value,
            "players": players,
            "community": [card.label for card in self.community],
            "pot": self.pot,
            "total_pot": self.total_pot,
            "acting_player_id": self.acting_player_id,
            "can_user_act": self.can_user_act,
            "is_dealing": self.is_dealing,
            "game_over": self.game_over,
            "winners": [
                {
                    "player_id": winner.player_id,
                    "name": winner.name,
                    "amount": winner.amount,
                    "hand": winner.hand_label,
                }
                for winner in self.winners
            ],
            "events": [dict(event) for event in self.events],
        }
