from .catalog import CardCatalog, CardDefinition, load_catalog
from .effects import EffectKind, EffectOutcome, apply_effect
from .exceptions import ArenaError, ConfigurationError, RoomNotFound
from .round_state import MatchConfig, PickRejection, PickResult, RoundPhase, RoundView
from .registry import PlayerRegistry
from .round_controller import RoundController
from .match import Match
from .room_manager import RoomManager

__all__ = [
    "CardCatalog",
    "CardDefinition",
    "load_catalog",
    "EffectKind",
    "EffectOutcome",
    "apply_effect",
    "ArenaError",
    "ConfigurationError",
    "RoomNotFound",
    "MatchConfig",
    "PickRejection",
    "PickResult",
    "RoundPhase",
    "RoundView",
    "PlayerRegistry",
    "RoundController",
    "Match",
    "RoomManager",
]
