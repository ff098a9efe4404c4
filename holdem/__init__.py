"""Texas Hold'em table engine driven by the chat bot."""

from .cards import Card, SUITS, VALUES, canonical_deck, parse_cards, parse_label
from .deck import Deck
from .errors import (
    EmptyDeckError,
    InsufficientPlayersError,
    InvalidActionError,
    NoEligiblePlayersError,
    PokerError,
)
from .evaluator import describe_rank, evaluate_best, rank
from .models import ActionType, Player, Stage, TableConfig
from .table import PokerTable, new_hand

__all__ = [
    "Card",
    "SUITS",
    "VALUES",
    "canonical_deck",
    "parse_cards",
    "parse_label",
    "Deck",
    "EmptyDeckError",
    "InsufficientPlayersError",
    "InvalidActionError",
    "NoEligiblePlayersError",
    "PokerError",
    "describe_rank",
    "evaluate_best",
    "rank",
    "ActionType",
    "Player",
    "Stage",
    "TableConfig",
    "PokerTable",
    "new_hand",
]
