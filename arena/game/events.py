"""Messages the authoritative node sends to peers."""

from typing import Literal

from pydantic import BaseModel

from .catalog import CardDefinition
from .effects import EffectOutcome


class RoundEvent(BaseModel):
    round: int


class RoundStarted(RoundEvent):
    type: Literal["round_started"] = "round_started"
    required_pickers: int


class CardsDrawn(RoundEvent):
    type: Literal["cards_drawn"] = "cards_drawn"
    card_ids: list[int]


class SlotLocked(RoundEvent):
    type: Literal["slot_locked"] = "slot_locked"
    slot: int
    owner: str


class RevealEntry(BaseModel):
    slot: int
    owner: str
    card_id: int


class RevealReady(RoundEvent):
    type: Literal["reveal_ready"] = "reveal_ready"
    entries: list[RevealEntry]
    hidden: list[int]


# private, owner only


class CardPicked(RoundEvent):
    type: Literal["card_picked"] = "card_picked"
    slot: int
    card_id: int
    card: CardDefinition


class PickRejected(RoundEvent):
    type: Literal["pick_rejected"] = "pick_rejected"
    slot: int
    reason: str


class EffectApplied(BaseModel):
    type: Literal["effect_applied"] = "effect_applied"
    outcome: EffectOutcome


class PlayerPresence(BaseModel):
    type: Literal["player_joined", "player_left"]
    username: str
    players: list[str]
