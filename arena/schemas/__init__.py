from .user import UserCreate, UserPublic, Token, TokenData
from .room import RoomCreate, RoomPublic
from .card import CardPublic

__all__ = [
    "UserCreate",
    "UserPublic",
    "Token",
    "TokenData",
    "RoomCreate",
    "RoomPublic",
    "CardPublic",
]
