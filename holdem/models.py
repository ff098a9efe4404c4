from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .cards import Card


class Stage(str, Enum):
    DRAW = "draw"
    PRE_FLOP = "pre-flop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


# Community cards revealed when the table enters each stage.
REVEALS = {
    Stage.PRE_FLOP: 0,
    Stage.FLOP: 3,
    Stage.TURN: 1,
    Stage.RIVER: 1,
    Stage.SHOWDOWN: 0,
}

NEXT_STAGE = {
    Stage.DRAW: Stage.PRE_FLOP,
    Stage.PRE_FLOP: Stage.FLOP,
    Stage.FLOP: Stage.TURN,
    Stage.TURN: Stage.RIVER,
    Stage.RIVER: Stage.SHOWDOWN,
}


class ActionType(str, Enum):
    RAISE = "RAISE"
    BET = "BET"
    CALL = "CALL"
    FOLD = "FOLD"


@dataclass
class TableConfig:
    small_blind: int = 5
    big_blind: int = 10
    starting_chips: int = 1_000
    min_players: int = 3


@dataclass
class Player:
    id: str
    nick: str = ""
    hand: List[Card] = field(default_factory=list)
    chips: int = 0
    bet: int = 0
    is_active: bool = True
    folded: bool = False
    has_acted: bool = False

    def reset_for_hand(self) -> None:
        self.hand.clear()
        self.bet = 0
        self.folded = False
        self.has_acted = False

    def reset_for_round(self) -> None:
        self.bet = 0
        self.has_acted = False
