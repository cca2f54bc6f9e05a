from .user import User, UserBase
from .room import Room, RoomBase
from .game import PlayerInfo

__all__ = ["User", "UserBase", "Room", "RoomBase", "PlayerInfo"]
