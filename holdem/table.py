from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Sequence

from .cards import Card, cards_to_labels
from .deck import Deck
from .errors import EmptyDeckError, InsufficientPlayersError, InvalidActionError, NoEligiblePlayersError
from .evaluator import describe_rank, rank
from .models import NEXT_STAGE, REVEALS, ActionType, Player, Stage, TableConfig

# PokerTable keeps one hand's state in memory. No chat or networking lives
# here, only seat rotation, betting order, dealing and pot accounting.

Event = Dict[str, object]


class PokerTable:
    """Texas Hold'em hand for a single chat group.

    The table has no internal locking; callers must serialize every
    operation on one table.
    """

    def __init__(
        self,
        table_id: str,
        players: Sequence[Player],
        dealer_position: int,
        small_blind_size: int,
        big_blind_size: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not players:
            raise NoEligiblePlayersError("Table has no seats")
        if not 0 <= dealer_position < len(players):
            raise ValueError(f"Dealer position {dealer_position} out of range")

        self.table_id = table_id
        self.players: List[Player] = list(players)
        self.community: List[Card] = []
        self.stage = Stage.DRAW
        self.pot = 0
        self.current_bet = 0
        self.small_blind_size = small_blind_size
        self.big_blind_size = big_blind_size
        self.winners: List[int] = []
        self.ranks: Dict[int, int] = {}
        self.payouts: Dict[int, int] = {}
        self.concluded = False
        self.blinds_posted = False
        self.pre_events: List[Event] = []

        self.dealer_position = dealer_position
        self.small_blind = self.next_active_position(dealer_position)
        self.big_blind = self.next_active_position(self.small_blind)
        # Dealing order governs the draw stage, so the small blind goes first.
        self.current_player = self.small_blind

        self.deck = Deck(rng)
        self.deck.shuffle()

    # Seat rotation ---------------------------------------------------

    def next_active_position(self, pos: int) -> int:
        return self._next_position(pos, lambda player: player.is_active)

    def next_active_not_folded_position(self, pos: int) -> int:
        return self._next_position(pos, lambda player: player.is_active and not player.folded)

    def _next_position(self, pos: int, eligible: Callable[[Player], bool]) -> int:
        count = len(self.players)
        for step in range(1, count + 1):
            idx = (pos + step) % count
            if eligible(self.players[idx]):
                return idx
        raise NoEligiblePlayersError(f"No eligible seat after position {pos}")

    def _active_from(self, start: int) -> List[int]:
        count = len(self.players)
        ordered = [(start + step) % count for step in range(count)]
        return [idx for idx in ordered if self.players[idx].is_active]

    def live_positions(self) -> List[int]:
        return [idx for idx, player in enumerate(self.players) if player.is_active and not player.folded]

    def all_players_acted(self) -> bool:
        return all(self.players[idx].has_acted for idx in self.live_positions())

    def seat_of(self, player_id: str) -> Optional[int]:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        return None

    # Dealing and blinds ----------------------------------------------

    def deal_hole_cards(self) -> None:
        order = self._active_from(self.small_blind)
        for idx in order:
            if self.players[idx].hand:
                raise InvalidActionError(f"Seat {idx} already holds cards", code="ALREADY_DEALT")
        if len(self.deck) < 2 * len(order):
            raise EmptyDeckError(f"Cannot deal {len(order)} hands from a deck of {len(self.deck)}")
        for _ in range(2):
            for idx in order:
                self.players[idx].hand.append(self.deck.draw())

    def post_blinds(self) -> List[Event]:
        if self.blinds_posted:
            raise InvalidActionError("Blinds already posted", code="BLINDS_POSTED")
        if self.stage != Stage.DRAW:
            raise InvalidActionError("Blinds are posted before betting starts")
        blinds = ((self.small_blind, self.small_blind_size), (self.big_blind, self.big_blind_size))
        for idx, size in blinds:
            player = self.players[idx]
            if player.chips < size:
                raise InvalidActionError(f"{player.nick or player.id} cannot cover the blind", code="INSUFFICIENT_CHIPS")

        # Blinds are dead money: they neither set the table's current bet nor
        # count toward the seat's bet for this round.
        for idx, size in blinds:
            self.players[idx].chips -= size
            self.pot += size
        self.blinds_posted = True
        event: Event = {
            "ev": "POST_BLINDS",
            "sb_seat": self.small_blind,
            "bb_seat": self.big_blind,
            "sb": self.small_blind_size,
            "bb": self.big_blind_size,
        }
        self.pre_events.append(event)
        return [event]

    def consume_pre_events(self) -> List[Event]:
        events = list(self.pre_events)
        self.pre_events.clear()
        return events

    def _commit_chips(self, player: Player, target: int) -> int:
        amount = target - player.bet
        player.chips -= amount
        player.bet = target
        self.pot += amount
        return amount

    # Action handling -------------------------------------------------

    def raise_to(self, amount: int) -> List[Event]:
        return self.apply_action(self.current_player, ActionType.RAISE, amount)

    def bet(self, amount: int) -> List[Event]:
        return self.apply_action(self.current_player, ActionType.BET, amount)

    def call(self) -> List[Event]:
        return self.apply_action(self.current_player, ActionType.CALL)

    def fold(self) -> List[Event]:
        return self.apply_action(self.current_player, ActionType.FOLD)

    def apply_action(self, seat_idx: int, action: ActionType, amount: Optional[int] = None) -> List[Event]:
        self._check_turn(seat_idx)
        player = self.players[seat_idx]
        events: List[Event] = []

        # Every branch validates before touching state, so a rejected action
        # leaves the table unchanged.
        if action == ActionType.FOLD:
            player.folded = True
            player.has_acted = True
            events.append({"ev": "FOLD", "seat": seat_idx})
        elif action == ActionType.CALL:
            target = max(self.current_bet, player.bet)
            self._require_chips(player, target)
            paid = self._commit_chips(player, target)
            player.has_acted = True
            events.append({"ev": "CALL", "seat": seat_idx, "amount": paid})
        elif action in (ActionType.RAISE, ActionType.BET):
            if not isinstance(amount, int) or amount <= 0:
                raise InvalidActionError(f"{action.value.capitalize()} requires a positive amount")
            if action == ActionType.RAISE and amount <= self.current_bet:
                raise InvalidActionError("Raise must exceed current bet")
            if amount < self.current_bet:
                raise InvalidActionError("Bet must at least match the current bet")
            if amount < player.bet:
                raise InvalidActionError("Cannot lower an existing bet")
            if amount == player.bet:
                raise InvalidActionError(f"{action.value.capitalize()} must add chips to the pot")
            self._require_chips(player, amount)
            paid = self._commit_chips(player, amount)
            player.has_acted = True
            if amount > self.current_bet:
                self.current_bet = amount
                self._reopen_action(seat_idx)
            events.append({"ev": action.value, "seat": seat_idx, "amount": paid, "to": amount})
        else:
            raise InvalidActionError(f"Unsupported action {action}")

        events.extend(self.progress())
        return events

    def _check_turn(self, seat_idx: int) -> None:
        if self.concluded or self.stage == Stage.SHOWDOWN:
            raise InvalidActionError("Hand is over", code="HAND_OVER")
        if not 0 <= seat_idx < len(self.players):
            raise InvalidActionError(f"Unknown seat {seat_idx}", code="UNKNOWN_SEAT")
        player = self.players[seat_idx]
        if not player.is_active:
            raise InvalidActionError("Seat not active", code="SEAT_INACTIVE")
        if player.folded:
            raise InvalidActionError("Seat already folded", code="SEAT_FOLDED")
        if seat_idx != self.current_player:
            raise InvalidActionError("Not your turn", code="OUT_OF_TURN")

    def _require_chips(self, player: Player, target: int) -> None:
        if target - player.bet > player.chips:
            raise InvalidActionError("Not enough chips", code="INSUFFICIENT_CHIPS")

    def _reopen_action(self, raiser: int) -> None:
        for idx in self.live_positions():
            if idx != raiser:
                self.players[idx].has_acted = False

    # Stage progression -----------------------------------------------

    def progress(self) -> List[Event]:
        events: List[Event] = []
        if self.concluded:
            return events

        live = self.live_positions()
        if not live:
            raise NoEligiblePlayersError("No seats left in the hand")
        if len(live) == 1:
            return self._award_uncontested(live[0])

        if not self.all_players_acted():
            self.current_player = self.next_active_not_folded_position(self.current_player)
            return events

        if self.stage == Stage.SHOWDOWN:
            return self._resolve_showdown()

        self.stage = NEXT_STAGE[self.stage]
        cards = self.deck.draw_many(REVEALS[self.stage])
        self.community.extend(cards)
        events.append({"ev": "STAGE", "stage": self.stage.value, "cards": cards_to_labels(cards)})

        if self.stage == Stage.SHOWDOWN:
            events.extend(self._resolve_showdown())
            return events

        for player in self.players:
            player.reset_for_round()
        self.current_bet = 0
        self.current_player = self.next_active_not_folded_position(self.big_blind)
        return events

    def _award_uncontested(self, seat_idx: int) -> List[Event]:
        self.stage = Stage.SHOWDOWN
        self.winners = [seat_idx]
        payouts = self.distribute_pot()
        self.concluded = True
        return [{"ev": "POT_AWARD", "seat": seat_idx, "amount": payouts[seat_idx]}]

    def _resolve_showdown(self) -> List[Event]:
        events: List[Event] = []
        board = cards_to_labels(self.community)
        self.determine_winners()
        for seat_idx, value in self.ranks.items():
            events.append(
                {
                    "ev": "SHOWDOWN",
                    "seat": seat_idx,
                    "hand": cards_to_labels(self.players[seat_idx].hand),
                    "board": board,
                    "rank": describe_rank(value),
                }
            )
        for seat_idx, amount in self.distribute_pot().items():
            events.append({"ev": "POT_AWARD", "seat": seat_idx, "amount": amount})
        self.concluded = True
        return events

    # Hand resolution -------------------------------------------------

    def determine_winners(self) -> List[int]:
        best: Optional[int] = None
        winners: List[int] = []
        self.ranks = {}
        for seat_idx in self.live_positions():
            player = self.players[seat_idx]
            value = rank(player.hand + self.community)
            self.ranks[seat_idx] = value
            if best is None or value < best:
                best = value
                winners = [seat_idx]
            elif value == best:
                winners.append(seat_idx)
        self.winners = winners
        return winners

    def distribute_pot(self) -> Dict[int, int]:
        """Split the pot evenly between the winners.

        Odd chips go one at a time to the winners closest to the dealer's
        left, so the whole pot is always paid out.
        """
        winners = self.winners or self.determine_winners()
        if not winners:
            return {}
        share, remainder = divmod(self.pot, len(winners))
        ordered = sorted(winners, key=self._distance_from_dealer)
        payouts: Dict[int, int] = {}
        for position, seat_idx in enumerate(ordered):
            payout = share + (1 if position < remainder else 0)
            self.players[seat_idx].chips += payout
            payouts[seat_idx] = payout
        self.pot = 0
        self.payouts = payouts
        return payouts

    def _distance_from_dealer(self, seat_idx: int) -> int:
        return (seat_idx - self.dealer_position - 1) % len(self.players)

    # Between hands ---------------------------------------------------

    def advance_dealer(self) -> None:
        self.dealer_position = self.next_active_position(self.dealer_position)
        self.small_blind = self.next_active_position(self.dealer_position)
        self.big_blind = self.next_active_position(self.small_blind)
        self.current_player = self.small_blind

    def reset_round(self) -> None:
        self.deck.clear()
        self.community = []
        self.pot = 0
        self.current_bet = 0
        self.stage = Stage.DRAW
        self.winners = []
        self.ranks = {}
        self.payouts = {}
        self.concluded = False
        self.blinds_posted = False
        self.pre_events.clear()
        for player in self.players:
            player.reset_for_hand()
        self.current_player = self.small_blind
        self.deck.shuffle()
        self.deal_hole_cards()

    # Snapshot helpers ------------------------------------------------

    def state(self) -> Dict[str, object]:
        return {
            "table_id": self.table_id,
            "stage": self.stage.value,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "community": cards_to_labels(self.community),
            "dealer": self.dealer_position,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "current_player": None if self.concluded else self.current_player,
            "winners": list(self.winners),
            "players": [
                {
                    "seat": idx,
                    "id": player.id,
                    "nick": player.nick,
                    "chips": player.chips,
                    "bet": player.bet,
                    "is_active": player.is_active,
                    "folded": player.folded,
                    "has_acted": player.has_acted,
                }
                for idx, player in enumerate(self.players)
            ],
        }


def new_hand(
    table_id: str,
    players: Sequence[Player],
    dealer_position: int,
    config: TableConfig,
    rng: Optional[random.Random] = None,
) -> PokerTable:
    """Seat ``players``, shuffle, deal hole cards and post the blinds."""
    active = [player for player in players if player.is_active]
    if len(active) < config.min_players:
        raise InsufficientPlayersError(f"Need at least {config.min_players} players, have {len(active)}")
    table = PokerTable(table_id, players, dealer_position, config.small_blind, config.big_blind, rng=rng)
    table.deal_hole_cards()
    table.post_blinds()
    return table
