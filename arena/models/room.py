from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class RoomBase(SQLModel):
    room_name: str = Field(index=True)
    max_players: int = Field(default=2, ge=1)
    slot_count: int = Field(default=3, ge=1)
    allow_solo: bool = Field(default=False)
    reveal_delay_seconds: float = Field(default=5.0, ge=0)
    required_pickers: int | None = Field(default=None, ge=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    disabled: bool = Field(default=False)


class Room(RoomBase, table=True):
    id: int | None = Field(default=None, primary_key=True)
    created_by: int | None = Field(default=None, foreign_key="user.id", index=True)

    def match_config(self):
        from ..game.round_state import MatchConfig

        return MatchConfig(
            slot_count=self.slot_count,
            allow_solo=self.allow_solo,
            reveal_delay_seconds=self.reveal_delay_seconds,
            required_pickers=self.required_pickers,
        )
