"""Texas Hold'em round engine: cards, hand evaluation, showdown and the table state machine."""

from .cards import Card, RANKS, SUITS, create_deck, deal, parse_cards, shuffle
from .equity import MatchupEquity, simulate_matchup
from .errors import ExhaustedDeck, InvalidAction
from .evaluator import best_hand, compare_results, evaluate
from .models import ActionType, HandCategory, HandResult, Player, Street, TableConfig, TableSnapshot
from .rankings import HAND_RANKINGS
from .showdown import ShowdownResult, resolve_showdown
from .table import HandContext, Table

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "create_deck",
    "deal",
    "parse_cards",
    "shuffle",
    "MatchupEquity",
    "simulate_matchup",
    "ExhaustedDeck",
    "InvalidAction",
    "best_hand",
    "compare_results",
    "evaluate",
    "ActionType",
    "HandCategory",
    "HandResult",
    "Player",
    "Street",
    "TableConfig",
    "TableSnapshot",
    "HAND_RANKINGS",
    "ShowdownResult",
    "resolve_showdown",
    "HandContext",
    "Table",
]
