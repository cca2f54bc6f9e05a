import logging

from broadcaster import Broadcast
from fastapi import WebSocket

from .events import EffectApplied, PlayerPresence
from .catalog import CardCatalog
from .effects import EffectOutcome
from .registry import PlayerRegistry
from .round_controller import RoundController
from .round_state import MatchConfig
from .transport import RoomTransport

log = logging.getLogger(__name__)


class Match:
    """Live state of one room: who is connected and the round in play."""

    def __init__(
        self,
        room_id: str,
        catalog: CardCatalog,
        broadcast: Broadcast,
        config: MatchConfig,
        host: str | None = None,
        max_players: int | None = None,
    ):
        log.info(f"Creating match state for room {room_id}")
        self.room_id = room_id
        self.host = host
        self.registry = PlayerRegistry(room_id, max_players=max_players)
        self.transport = RoomTransport(room_id, broadcast)
        self.controller = RoundController(
            catalog=catalog,
            registry=self.registry,
            transport=self.transport,
            config=config,
            effect_sink=self._deliver_effect,
        )

    def __len__(self) -> int:
        return len(self.registry)

    @property
    def players(self) -> list[str]:
        return self.registry.player_ids

    def is_host(self, username: str) -> bool:
        # rooms without a known creator let anyone drive the rounds
        return self.host is None or self.host == username

    async def add_player(self, username: str, websocket: WebSocket) -> None:
        self.registry.add_player(username)
        self.transport.attach(username, websocket)
        await self.transport.broadcast(
            PlayerPresence(type="player_joined", username=username, players=self.players).model_dump()
        )

    async def remove_player(self, username: str) -> None:
        if username not in self.registry:
            return
        self.registry.remove_player(username)
        self.transport.detach(username)
        await self.transport.broadcast(
            PlayerPresence(type="player_left", username=username, players=self.players).model_dump()
        )

    async def _deliver_effect(self, outcome: EffectOutcome) -> None:
        log.info(f"Room {self.room_id}: {outcome.describe()}")
        await self.transport.send_to(
            outcome.acting_player, EffectApplied(outcome=outcome).model_dump(mode="json")
        )

    def close(self) -> None:
        self.controller.close()
