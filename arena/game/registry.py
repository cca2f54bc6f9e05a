import time
import logging

from ..models.game import PlayerInfo
from .exceptions import PlayerAlreadyConnected, RoomFull

log = logging.getLogger(__name__)


class PlayerRegistry:
    """Connected players of one match and whether each has picked this round."""

    def __init__(self, room_id: str, max_players: int | None = None):
        self.room_id = room_id
        self.max_players = max_players
        self._players: dict[str, PlayerInfo] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    @property
    def connected_count(self) -> int:
        return len(self._players)

    @property
    def player_ids(self) -> list[str]:
        return list(self._players)

    @property
    def is_full(self) -> bool:
        return self.max_players is not None and len(self._players) >= self.max_players

    def get(self, player_id: str) -> PlayerInfo | None:
        return self._players.get(player_id)

    def add_player(self, player_id: str, username: str | None = None) -> PlayerInfo:
        if player_id in self._players:
            raise PlayerAlreadyConnected(player_id)
        if self.is_full:
            raise RoomFull(self.room_id)

        info = PlayerInfo(
            player_id=player_id,
            username=username or player_id,
            connected_at=time.time(),
        )
        self._players[player_id] = info
        log.info(f"Player {player_id} joined room {self.room_id}")
        return info

    def remove_player(self, player_id: str) -> None:
        if self._players.pop(player_id, None) is not None:
            log.info(f"Player {player_id} left room {self.room_id}")

    def reset_picks(self) -> None:
        for info in self._players.values():
            info.reset_for_new_round()

    def has_picked(self, player_id: str) -> bool:
        info = self._players.get(player_id)
        return info is not None and info.has_picked

    def mark_picked(self, player_id: str) -> None:
        info = self._players[player_id]
        info.has_picked = True
        info.picks_submitted += 1
