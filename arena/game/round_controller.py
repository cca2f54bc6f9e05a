"""
Round Controller - the authoritative state machine of one match.

    IDLE -> DRAWING -> PICKING -> AWAITING_REVEAL -> REVEALED -> (start_round) -> DRAWING

Every mutation runs under one asyncio lock per match, so the
read-validate-write of a pick never interleaves with another pick or a
round restart. Two players racing for the same slot resolve to the first
one processed; the second is rejected.

The reveal is the only timed transition. It runs as a task scheduled when
the last required pick lands, and re-checks the round number once the
delay is over: a round restarted in the meantime makes the task a no-op.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

from .events import (
    CardPicked,
    CardsDrawn,
    RevealEntry,
    RevealReady,
    RoundStarted,
    SlotLocked,
)
from .catalog import CardCatalog
from .effects import EffectSink, apply_effect
from .exceptions import ConfigurationError
from .registry import PlayerRegistry
from .round_state import (
    CardSlot,
    MatchConfig,
    PickRejection,
    PickResult,
    RoundPhase,
    RoundState,
    RoundView,
)
from .transport import Transport

log = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class RoundController:

    def __init__(
        self,
        catalog: CardCatalog,
        registry: PlayerRegistry,
        transport: Transport,
        config: MatchConfig | None = None,
        effect_sink: EffectSink | None = None,
        rng: random.Random | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.config = config or MatchConfig()
        if self.config.slot_count < 1:
            raise ConfigurationError(
                f"slot_count must be at least 1, got {self.config.slot_count}"
            )
        if self.config.slot_count > len(catalog):
            raise ConfigurationError(
                f"slot_count {self.config.slot_count} exceeds catalog size {len(catalog)}"
            )

        self.catalog = catalog
        self.registry = registry
        self.transport = transport
        self.effect_sink = effect_sink
        self._rng = rng or random.Random()
        self._sleep = sleep

        self._state = RoundState()
        self._lock = asyncio.Lock()
        self._reveal_task: asyncio.Task | None = None

    @property
    def phase(self) -> RoundPhase:
        return self._state.phase

    @property
    def round_number(self) -> int:
        return self._state.round_number

    @property
    def reveal_task(self) -> asyncio.Task | None:
        return self._reveal_task

    def snapshot(self) -> RoundView:
        return self._state.view()

    def resolve_required_pickers(self, connected: int) -> int:
        if self.config.required_pickers is not None:
            return self.config.required_pickers
        if self.config.allow_solo and connected == 1:
            return 1
        return max(2, connected)

    async def start_round(self) -> RoundView:
        """Reset the match for a new round and deal fresh cards.

        Safe to call at any time; an in-progress round, and any reveal still
        pending for it, is discarded.
        """
        async with self._lock:
            self._cancel_pending_reveal()

            state = self._state
            state.round_number += 1
            state.phase = RoundPhase.DRAWING
            state.picked_count = 0
            self.registry.reset_picks()
            state.required_pickers = self.resolve_required_pickers(
                self.registry.connected_count
            )

            card_ids = self.catalog.draw(self.config.slot_count, self._rng)
            state.slots = [CardSlot(card_id=card_id) for card_id in card_ids]
            state.phase = RoundPhase.PICKING

            log.info(
                f"Round {state.round_number} started in room {self.registry.room_id}: "
                f"cards {card_ids}, {state.required_pickers} picks required"
            )

            await self.transport.broadcast(
                RoundStarted(
                    round=state.round_number,
                    required_pickers=state.required_pickers,
                ).model_dump(mode="json")
            )
            await self.transport.broadcast(
                CardsDrawn(round=state.round_number, card_ids=card_ids).model_dump(mode="json")
            )
            return state.view()

    async def submit_pick(self, player_id: str, slot_index: int) -> PickResult:
        """Arbitrate one pick. Rejections change nothing and broadcast nothing.

        The lock covers arbitration and the lock broadcast; the card face
        and effect outcome are delivered to the picker once it is released.
        """
        async with self._lock:
            state = self._state

            rejection = self._check_pick(player_id, slot_index)
            if rejection is not None:
                log.debug(
                    f"Pick by {player_id} on slot {slot_index} rejected in round "
                    f"{state.round_number}: {rejection.value}"
                )
                return PickResult.rejected(slot_index, rejection)

            slot = state.slots[slot_index]
            slot.owner_id = player_id
            self.registry.mark_picked(player_id)
            state.picked_count += 1

            card = self.catalog[slot.card_id]
            outcome = apply_effect(card, player_id)

            reveal_scheduled = False
            if state.picked_count >= state.required_pickers:
                state.phase = RoundPhase.AWAITING_REVEAL
                self._schedule_reveal(state.round_number)
                reveal_scheduled = True
            elif self.registry.connected_count < state.required_pickers:
                log.info(
                    f"Round {state.round_number}: {state.picked_count}/{state.required_pickers} "
                    f"picked with {self.registry.connected_count} connected, waiting for opponents"
                )
            else:
                log.info(
                    f"Round {state.round_number}: {state.picked_count}/{state.required_pickers} picked"
                )

            log.info(f"Player {player_id} locked slot {slot_index} ({card.name})")

            await self.transport.broadcast(
                SlotLocked(
                    round=state.round_number, slot=slot_index, owner=player_id
                ).model_dump(mode="json")
            )
            picked = CardPicked(
                round=state.round_number,
                slot=slot_index,
                card_id=slot.card_id,
                card=card,
            ).model_dump(mode="json")
            result = PickResult(
                accepted=True,
                slot_index=slot_index,
                card_id=slot.card_id,
                reveal_scheduled=reveal_scheduled,
            )

        # private messages are sent outside the lock
        await self.transport.send_to(player_id, picked)
        if self.effect_sink is not None:
            await self.effect_sink(outcome)
        return result

    def _check_pick(self, player_id: str, slot_index: int) -> PickRejection | None:
        state = self._state
        if state.phase != RoundPhase.PICKING:
            return PickRejection.NOT_PICKING
        if not 0 <= slot_index < len(state.slots):
            return PickRejection.SLOT_OUT_OF_RANGE
        slot = state.slots[slot_index]
        if slot.locked:
            # a player re-sending their own pick has already picked
            if slot.owner_id == player_id:
                return PickRejection.ALREADY_PICKED
            return PickRejection.SLOT_TAKEN
        if player_id not in self.registry:
            return PickRejection.UNKNOWN_PLAYER
        # owner_slot also covers a player who reconnected mid-round
        if self.registry.has_picked(player_id) or state.owner_slot(player_id) is not None:
            return PickRejection.ALREADY_PICKED
        return None

    def _schedule_reveal(self, generation: int) -> None:
        task = asyncio.create_task(
            self._reveal_after(generation),
            name=f"reveal-{self.registry.room_id}-{generation}",
        )
        task.add_done_callback(self._on_reveal_done)
        self._reveal_task = task
        log.info(
            f"Reveal of round {generation} scheduled in {self.config.reveal_delay_seconds}s"
        )

    async def _reveal_after(self, generation: int) -> None:
        await self._sleep(self.config.reveal_delay_seconds)

        async with self._lock:
            state = self._state
            if state.round_number != generation or state.phase != RoundPhase.AWAITING_REVEAL:
                log.debug(f"Stale reveal timer for round {generation} ignored")
                return

            state.phase = RoundPhase.REVEALED
            entries = [
                RevealEntry(slot=index, owner=slot.owner_id, card_id=slot.card_id)
                for index, slot in enumerate(state.slots)
                if slot.locked
            ]
            hidden = [index for index, slot in enumerate(state.slots) if not slot.locked]

            log.info(f"Round {generation} revealed: {len(entries)} cards, {len(hidden)} hidden")
            await self.transport.broadcast(
                RevealReady(round=generation, entries=entries, hidden=hidden).model_dump(mode="json")
            )

    def _on_reveal_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error(f"Reveal task {task.get_name()} failed: {exc}", exc_info=exc)

    def _cancel_pending_reveal(self) -> None:
        if self._reveal_task is not None and not self._reveal_task.done():
            self._reveal_task.cancel()
        self._reveal_task = None

    def close(self) -> None:
        self._cancel_pending_reveal()
