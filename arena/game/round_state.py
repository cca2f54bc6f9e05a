"""
Round state owned by the Round Controller.

Nothing here is handed out by reference: callers get ``RoundView``
snapshots, never the live ``RoundState``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class RoundPhase(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    PICKING = "picking"
    AWAITING_REVEAL = "awaiting_reveal"
    REVEALED = "revealed"


class PickRejection(str, Enum):
    NOT_PICKING = "not_picking"
    SLOT_OUT_OF_RANGE = "slot_out_of_range"
    SLOT_TAKEN = "slot_taken"
    ALREADY_PICKED = "already_picked"
    UNKNOWN_PLAYER = "unknown_player"


class MatchConfig(BaseModel):
    slot_count: int = 3
    allow_solo: bool = False
    required_pickers: int | None = Field(default=None, ge=1)
    reveal_delay_seconds: float = Field(default=5.0, ge=0.0)


@dataclass
class CardSlot:
    card_id: int
    owner_id: str | None = None

    @property
    def locked(self) -> bool:
        # a slot is locked exactly when it has an owner
        return self.owner_id is not None


@dataclass
class RoundState:
    phase: RoundPhase = RoundPhase.IDLE
    round_number: int = 0
    slots: list[CardSlot] = field(default_factory=list)
    required_pickers: int = 2
    picked_count: int = 0

    def owner_slot(self, player_id: str) -> int | None:
        for index, slot in enumerate(self.slots):
            if slot.owner_id == player_id:
                return index
        return None

    def view(self) -> RoundView:
        return RoundView(
            phase=self.phase,
            round_number=self.round_number,
            card_ids=[slot.card_id for slot in self.slots],
            owners=[slot.owner_id for slot in self.slots],
            required_pickers=self.required_pickers,
            picked_count=self.picked_count,
        )


class RoundView(BaseModel):
    """Read-only copy of the round, safe to hand to callers."""
    phase: RoundPhase
    round_number: int
    card_ids: list[int]
    owners: list[str | None]
    required_pickers: int
    picked_count: int

    @property
    def locked(self) -> list[bool]:
        return [owner is not None for owner in self.owners]


@dataclass(frozen=True)
class PickResult:
    accepted: bool
    slot_index: int
    reason: PickRejection | None = None
    card_id: int | None = None
    reveal_scheduled: bool = False

    @classmethod
    def rejected(cls, slot_index: int, reason: PickRejection) -> PickResult:
        return cls(accepted=False, slot_index=slot_index, reason=reason)
