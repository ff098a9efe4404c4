from __future__ import annotations

import random
from typing import Dict, Iterable, List

from holdem.cards import canonical_deck, parse_cards
from holdem.models import Player, Stage
from holdem.table import PokerTable


def make_players(count: int = 3, chips: int = 1_000, inactive: Iterable[int] = ()) -> List[Player]:
    inactive = set(inactive)
    return [
        Player(id=f"p{idx}", nick=f"Player{idx}", chips=chips, is_active=idx not in inactive)
        for idx in range(count)
    ]


def create_table(
    *,
    seats: int = 3,
    dealer: int = 0,
    chips: int = 1_000,
    sb: int = 5,
    bb: int = 10,
    seed: int = 42,
    inactive: Iterable[int] = (),
    deal: bool = True,
) -> PokerTable:
    """Instantiate a table with a populated, optionally dealt, set of seats."""
    table = PokerTable("gc-test", make_players(seats, chips, inactive), dealer, sb, bb, rng=random.Random(seed))
    if deal:
        table.deal_hole_cards()
    return table


def rig_table(table: PokerTable, hands: Dict[int, List[str]], board: List[str]) -> None:
    """Give seats fixed hole cards and stack the deck so ``board`` is revealed in order."""
    for seat_idx, labels in hands.items():
        table.players[seat_idx].hand = parse_cards(labels)
    board_cards = parse_cards(board)
    taken = {card for player in table.players for card in player.hand} | set(board_cards)
    rest = [card for card in canonical_deck() if card not in taken]
    # draw() takes from the end of the list.
    table.deck.cards = rest + list(reversed(board_cards))


def call_until(table: PokerTable, stage: Stage) -> int:
    """Call with whoever is to act until ``stage`` is reached; return the number of actions."""
    actions = 0
    while table.stage != stage and not table.concluded:
        table.call()
        actions += 1
    return actions
