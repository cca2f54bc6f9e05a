from pydantic import BaseModel, Field

from ..config import DEFAULT_REVEAL_DELAY_SECONDS, DEFAULT_SLOT_COUNT
from ..game.round_state import RoundView


class RoomCreate(BaseModel):
    room_name: str
    max_players: int = Field(default=2, ge=1)
    slot_count: int = Field(default=DEFAULT_SLOT_COUNT, ge=1)
    allow_solo: bool = False
    reveal_delay_seconds: float = Field(default=DEFAULT_REVEAL_DELAY_SECONDS, ge=0)
    # fixed number of picks before reveal, instead of the connected count
    required_pickers: int | None = Field(default=None, ge=1)


class RoomPublic(BaseModel):
    id: int
    room_name: str
    max_players: int
    slot_count: int
    allow_solo: bool
    reveal_delay_seconds: float
    required_pickers: int | None = None
    created_by: int | None
    players: list[str] = []
    round: RoundView | None = None
