from __future__ import annotations

from typing import Dict, List

from holdem.cards import cards_to_labels
from holdem.models import Player, Stage
from holdem.table import PokerTable

RULE = "---------------"


def seat_name(table: PokerTable, seat_idx: int) -> str:
    player = table.players[seat_idx]
    return player.nick or player.id


def render_hand(player: Player) -> str:
    return f"Hand: {' '.join(cards_to_labels(player.hand))}\n___________________________________"


def render_summary(table: PokerTable) -> str:
    community = " ".join(cards_to_labels(table.community)) or "-"
    lines = [
        RULE,
        f"Current Stage: {table.stage.value}",
        f"Community Cards: {community}",
        f"Pot: {table.pot}",
        RULE,
    ]
    if table.concluded:
        winners = ", ".join(
            f"{seat_name(table, seat_idx)} (+{table.payouts.get(seat_idx, 0)})" for seat_idx in table.winners
        )
        lines.append(f"Winner: {winners}")
        lines.append("Type !start to deal the next hand")
        return "\n".join(lines)

    if table.stage == Stage.DRAW and table.blinds_posted:
        lines.append(
            f"Blinds: SB {table.small_blind_size} from {seat_name(table, table.small_blind)}, "
            f"BB {table.big_blind_size} from {seat_name(table, table.big_blind)}"
        )
    current = table.players[table.current_player]
    to_call = max(table.current_bet - current.bet, 0)
    lines.append(f"Current Player: {seat_name(table, table.current_player)} (to call: {to_call}, chips: {current.chips})")
    return "\n".join(lines)


def render_events(table: PokerTable, events: List[Dict[str, object]]) -> str:
    lines = []
    for event in events:
        kind = event["ev"]
        seat_idx = event.get("seat")
        name = seat_name(table, seat_idx) if isinstance(seat_idx, int) else ""
        if kind == "FOLD":
            lines.append(f"{name} folds")
        elif kind == "CALL":
            lines.append(f"{name} calls {event['amount']}" if event["amount"] else f"{name} checks")
        elif kind == "BET":
            lines.append(f"{name} bets {event['to']}")
        elif kind == "RAISE":
            lines.append(f"{name} raises to {event['to']}")
        elif kind == "STAGE":
            cards = " ".join(event["cards"])  # type: ignore[arg-type]
            lines.append(f"*** {str(event['stage']).upper()} *** {cards}".rstrip())
        elif kind == "SHOWDOWN":
            lines.append(f"{name} shows {' '.join(event['hand'])} ({event['rank']})")  # type: ignore[arg-type]
        elif kind == "POT_AWARD":
            lines.append(f"{name} wins {event['amount']}")
    lines.append(render_summary(table))
    return "\n".join(lines)
