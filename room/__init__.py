"""Room side: sequencer, adapter contract, field setup, history and settings."""

from room.adapter import RoomAdapter, RoomPlayer
from room.config import Settings, get_settings
from room.field import setup_game_field
from room.history import HistoryStore
from room.sequencer import Delays, GameSequencer

__all__ = [
    "RoomAdapter",
    "RoomPlayer",
    "Settings",
    "get_settings",
    "setup_game_field",
    "HistoryStore",
    "Delays",
    "GameSequencer",
]
