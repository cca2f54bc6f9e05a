"""
Exceptions raised by the match core.

Per-pick arbitration failures are not exceptions: they come back as
``PickResult`` values. Everything here is either an operator problem
(bad setup) or a lookup/admission failure at the edges.
"""


class ArenaError(Exception):
    """Base class for all arena errors."""
    pass


class ConfigurationError(ArenaError):
    """Match setup is invalid (no slots, catalog too small, bad catalog file)."""
    pass


class RoomNotFound(ArenaError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(ArenaError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} is full")


class PlayerAlreadyConnected(ArenaError):
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id} already in room")
