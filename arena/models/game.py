from pydantic import BaseModel


class PlayerInfo(BaseModel):
    player_id: str
    username: str
    connected_at: float
    has_picked: bool = False
    picks_submitted: int = 0

    def reset_for_new_round(self):
        self.has_picked = False
