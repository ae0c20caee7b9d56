from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, List, Optional

from holdem.errors import InvalidAction
from holdem.models import BETTING_STREETS, ActionType, TableConfig, TableSnapshot
from holdem.table import Table

from .bots import Strategy, fallback_decision, random_strategy

LOGGER = logging.getLogger("practice_host")

Event = Dict[str, object]


def _waiting_bot(table: Table) -> Optional[int]:
    actor = table.acting_player_id
    if actor is None or table.street not in BETTING_STREETS:
        return None
    if table.player(actor).is_user:
        return None
    return actor


def _bot_move(table: Table, actor: int, strategy: Strategy, rng: random.Random) -> List[Event]:
    action, amount = strategy(table, actor, rng)
    try:
        return table.apply_action(actor, action, amount)
    except InvalidAction as exc:
        LOGGER.warning("Bot %s chose an illegal %s (%s); falling back", actor, action, exc.code)
        action, amount = fallback_decision(table, actor)
        return table.apply_action(actor, action, amount)


def play_bots(table: Table, strategy: Strategy = random_strategy, rng: Optional[random.Random] = None) -> List[Event]:
    """Play automated seats until the user is up or the hand is over (no pacing)."""
    rng = rng or random.Random()
    events: List[Event] = []
    while True:
        actor = _waiting_bot(table)
        if actor is None:
            return events
        events.extend(_bot_move(table, actor, strategy, rng))


class PracticeSession:
    """One user against house bots. Owns the Table and is its only writer.

    Commands come in one at a time (``deal``, ``act``, ``show_cards``,
    ``reset``); every table mutation lands in ``snapshots`` for the host to
    forward. Bot turns run in a background task that sleeps ``bot_delay``
    seconds before each move and is cancelled whenever the hand is reset or
    redealt.
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        *,
        strategy: Strategy = random_strategy,
        rng: Optional[random.Random] = None,
        bot_delay: float = 0.8,
    ) -> None:
        self.rng = rng or random.Random()
        self.table = Table(config, rng=self.rng)
        self.strategy = strategy
        self.bot_delay = bot_delay
        self.snapshots: "asyncio.Queue[TableSnapshot]" = asyncio.Queue()
        self.lock = asyncio.Lock()
        self.bot_task: Optional[asyncio.Task] = None
        self._unsubscribe = self.table.subscribe(self.snapshots.put_nowait)

    @property
    def user_id(self) -> int:
        user = self.table.user
        assert user is not None
        return user.id

    async def deal(self) -> None:
        async with self.lock:
            # Raises mid-hand, so a pending bot turn is only cancelled once the deal succeeds.
            self.table.deal_new_hand()
            self._cancel_bots()
            self._schedule_bots()

    async def act(self, action: ActionType, amount: Optional[int] = None) -> None:
        async with self.lock:
            self.table.apply_action(self.user_id, action, amount)
            self._schedule_bots()

    async def show_cards(self, visible: bool) -> None:
        async with self.lock:
            self.table.set_show_cards(self.user_id, visible)

    async def reset(self, num_players: Optional[int] = None) -> None:
        async with self.lock:
            self._cancel_bots()
            self.table.reset_to_setup(num_players)

    async def wait_idle(self) -> None:
        """Wait until no bot turn is pending."""
        while self.bot_task is not None and not self.bot_task.done():
            await asyncio.wait({self.bot_task})

    async def close(self) -> None:
        self._cancel_bots()
        self._unsubscribe()

    def publish_current(self) -> None:
        self.snapshots.put_nowait(self.table.snapshot())

    def _schedule_bots(self) -> None:
        if self.bot_task is not None and not self.bot_task.done():
            return
        if _waiting_bot(self.table) is None:
            return
        self.bot_task = asyncio.create_task(self._run_bots())

    def _cancel_bots(self) -> None:
        if self.bot_task is not None and not self.bot_task.done():
            self.bot_task.cancel()
        self.bot_task = None

    async def _run_bots(self) -> None:
        while True:
            actor = _waiting_bot(self.table)
            if actor is None:
                return
            hand_id = self.table.hand.hand_id if self.table.hand else None
            await asyncio.sleep(self.bot_delay)
            async with self.lock:
                current = self.table.hand.hand_id if self.table.hand else None
                if current != hand_id or self.table.acting_player_id != actor:
                    continue
                try:
                    _bot_move(self.table, actor, self.strategy, self.rng)
                except Exception as exc:  # noqa: BLE001
                    LOGGER.exception("Bot %s turn crashed: %s", actor, exc)
                    if self.table.acting_player_id == actor:
                        action, amount = fallback_decision(self.table, actor)
                        self.table.apply_action(actor, action, amount)
