from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, List, Optional, Set, Tuple

import websockets

from holdem.errors import EmptyDeckError, InsufficientPlayersError, InvalidActionError, NoEligiblePlayersError
from holdem.models import ActionType, Player, TableConfig
from holdem.table import PokerTable, new_hand

from .client import ChatClientError, GroupMessage
from .commands import Command, parse_command
from .render import render_events, render_hand, render_summary

LOGGER = logging.getLogger("holdem_bot")

# GameHost glues the table engine to the chat network. One PokerTable per
# group chat; every operation on a table runs under that group's lock so
# concurrent deliveries never interleave. Different groups run in parallel.

COMMAND_ACTIONS = {
    "call": ActionType.CALL,
    "check": ActionType.CALL,
    "bet": ActionType.BET,
    "raise": ActionType.RAISE,
    "fold": ActionType.FOLD,
}

CHAT_ERRORS = (ChatClientError, websockets.ConnectionClosed, asyncio.TimeoutError, OSError)

Outbox = List[Tuple[str, str]]


class GameHost:
    def __init__(self, client, config: TableConfig, rng: Optional[random.Random] = None) -> None:
        self.client = client
        self.config = config
        self.rng = rng
        self.tables: Dict[str, PokerTable] = {}
        self.locks: Dict[str, asyncio.Lock] = {}
        self.bot_id: Optional[str] = None

    def lock_for(self, gc_id: str) -> asyncio.Lock:
        lock = self.locks.get(gc_id)
        if lock is None:
            lock = asyncio.Lock()
            self.locks[gc_id] = lock
        return lock

    async def run(self) -> None:
        tasks: Set[asyncio.Task] = set()

        def finished(task: asyncio.Task) -> None:
            tasks.discard(task)
            if not task.cancelled() and task.exception() is not None:
                LOGGER.error("Message handler failed", exc_info=task.exception())

        async for message in self.client.messages():
            task = asyncio.create_task(self.handle_message(message))
            tasks.add(task)
            task.add_done_callback(finished)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def handle_message(self, message: GroupMessage) -> None:
        try:
            command = parse_command(message.text)
        except ValueError as exc:
            await self._reply(message.gc_id, f"{message.nick}: {exc}")
            return
        if command is None:
            return

        # State changes and rendering happen under the lock; chat I/O for the
        # replies happens after it is released.
        private: Outbox = []
        async with self.lock_for(message.gc_id):
            if command.name == "start":
                reply, private = await self._start_locked(message)
            elif command.name == "status":
                reply = self._status_locked(message.gc_id)
            else:
                reply = self._act_locked(message, command)

        for uid, text in private:
            await self._send_private(uid, text)
        if reply:
            await self._reply(message.gc_id, reply)

    # Commands --------------------------------------------------------

    async def _start_locked(self, message: GroupMessage) -> Tuple[str, Outbox]:
        gc_id = message.gc_id
        table = self.tables.get(gc_id)
        if table is not None and not table.concluded:
            return "A hand is already in progress", []

        try:
            if table is None:
                players = await self._seat_roster(gc_id)
                table = new_hand(gc_id, players, 0, self.config, rng=self.rng)
            else:
                table = await self._next_hand_locked(table)
        except InsufficientPlayersError as exc:
            LOGGER.info("Not starting hand in %s: %s", gc_id, exc)
            return f"Need more players to start: {exc.msg}", []
        except InvalidActionError as exc:
            LOGGER.warning("Could not deal in %s: %s", gc_id, exc)
            return f"Cannot start hand: {exc.msg}", []
        except CHAT_ERRORS as exc:
            LOGGER.warning("Roster lookup for %s failed: %r", gc_id, exc)
            return "Could not load the group roster, try again later", []
        except (EmptyDeckError, NoEligiblePlayersError) as exc:
            LOGGER.error("Aborting hand in %s: %s", gc_id, exc)
            self.tables.pop(gc_id, None)
            return f"Hand aborted ({exc.code}); start a new one with !start", []

        self.tables[gc_id] = table
        LOGGER.info(
            "Hand started in %s: dealer=%s sb=%s bb=%s seats=%s",
            gc_id,
            table.dealer_position,
            table.small_blind,
            table.big_blind,
            len(table.live_positions()),
        )
        private = [(player.id, render_hand(player)) for player in table.players if player.is_active]
        return render_summary(table), private

    async def _next_hand_locked(self, table: PokerTable) -> PokerTable:
        """Re-read the roster and deal the next hand, keeping stacks by player id.

        An unchanged roster reuses ``table`` in place. Otherwise a new table is
        built with the button moved past the previous dealer.
        """
        stacks = {player.id: player.chips for player in table.players}
        players = await self._seat_roster(table.table_id)
        for player in players:
            if player.is_active:
                player.chips = self._restack(table.table_id, player.id, stacks.get(player.id))
            else:
                player.chips = stacks.get(player.id, 0)
        active = [player for player in players if player.is_active]
        if len(active) < self.config.min_players:
            raise InsufficientPlayersError(f"Need at least {self.config.min_players} players, have {len(active)}")

        if [player.id for player in players] == [player.id for player in table.players]:
            for seat, fresh in zip(table.players, players):
                seat.nick = fresh.nick or seat.nick
                seat.chips = fresh.chips
                seat.is_active = fresh.is_active
            table.advance_dealer()
            table.reset_round()
            table.post_blinds()
            return table

        LOGGER.info("Roster of %s changed, reseating %s players", table.table_id, len(active))
        dealer_id = table.players[table.dealer_position].id
        ids = [player.id for player in players]
        dealer = ids.index(dealer_id) if dealer_id in ids else 0
        reseated = PokerTable(
            table.table_id,
            players,
            dealer,
            self.config.small_blind,
            self.config.big_blind,
            rng=self.rng,
        )
        reseated.advance_dealer()
        reseated.deal_hole_cards()
        reseated.post_blinds()
        return reseated

    def _restack(self, gc_id: str, player_id: str, chips: Optional[int]) -> int:
        if chips is None:
            return self.config.starting_chips
        if chips < self.config.big_blind:
            LOGGER.info("Rebuying %s in %s: %s chips left", player_id, gc_id, chips)
            return self.config.starting_chips
        return chips

    async def _seat_roster(self, gc_id: str) -> List[Player]:
        if self.bot_id is None:
            self.bot_id = (await self.client.user_info("")).uid
        members = await self.client.group_members(gc_id)
        players: List[Player] = []
        for member in members:
            if member == self.bot_id:
                # The bot is a group member but never plays.
                players.append(Player(id=member, is_active=False))
                continue
            try:
                info = await self.client.user_info(member)
            except ChatClientError as exc:
                LOGGER.warning("User lookup for %s failed, seating as inactive: %s", member, exc)
                players.append(Player(id=member, is_active=False))
                continue
            players.append(Player(id=member, nick=info.nick, chips=self.config.starting_chips))
        return players

    def _status_locked(self, gc_id: str) -> str:
        table = self.tables.get(gc_id)
        if table is None:
            return "No hand in progress, type !start to deal"
        return render_summary(table)

    def _act_locked(self, message: GroupMessage, command: Command) -> str:
        gc_id = message.gc_id
        table = self.tables.get(gc_id)
        if table is None or table.concluded:
            return f"{message.nick}: no hand in progress, type !start to deal"
        seat_idx = table.seat_of(message.uid)
        if seat_idx is None:
            return f"{message.nick}: you are not seated at this table"

        action = COMMAND_ACTIONS[command.name]
        player = table.players[seat_idx]
        if command.name == "check" and table.current_bet > player.bet:
            return f"{message.nick}: Cannot check when facing a bet"

        try:
            events = table.apply_action(seat_idx, action, command.amount)
        except InvalidActionError as exc:
            LOGGER.warning(
                "Rejected action gc=%s seat=%s action=%s amount=%s reason=%s",
                gc_id,
                seat_idx,
                action.value,
                command.amount,
                exc,
            )
            return f"{message.nick}: {exc.msg}"
        except (EmptyDeckError, NoEligiblePlayersError) as exc:
            LOGGER.error("Aborting hand in %s: %s", gc_id, exc)
            self.tables.pop(gc_id, None)
            return f"Hand aborted ({exc.code}); start a new one with !start"

        LOGGER.debug(
            "Applied action gc=%s seat=%s action=%s amount=%s stage=%s",
            gc_id,
            seat_idx,
            action.value,
            command.amount,
            table.stage.value,
        )
        if table.concluded:
            LOGGER.info("Hand finished in %s; winners=%s payouts=%s", gc_id, table.winners, table.payouts)
        return render_events(table, events)

    # Outbound --------------------------------------------------------

    async def _reply(self, gc_id: str, text: str) -> None:
        try:
            await self.client.send_gc(gc_id, text)
        except CHAT_ERRORS as exc:
            LOGGER.warning("Not possible to send message to %s: %s", gc_id, exc)

    async def _send_private(self, uid: str, text: str) -> None:
        try:
            await self.client.send_pm(uid, text)
        except CHAT_ERRORS as exc:
            LOGGER.warning("Not possible to send hand to %s: %s", uid, exc)
