"""Room settings read from the environment."""

import os
from typing import Optional

from pydantic import BaseModel

from game.state import GameSettings

# Env var names
ENV_ROOM_NAME = "ROOM_NAME"
ENV_MAX_PLAYERS = "MAX_PLAYERS"
ENV_CLUE_TIME = "CLUE_TIME"
ENV_DISCUSSION_TIME = "DISCUSSION_TIME"
ENV_VOTING_TIME = "VOTING_TIME"
ENV_ADMIN_KEY = "ADMIN_KEY"
ENV_GAME_SEED = "GAME_SEED"


class Settings(BaseModel):
    # Shown by the status API
    ROOM_NAME: str = "🔴 THE IMPOSTOR"
    # Joins beyond this are kicked
    MAX_PLAYERS: int = 15

    # Phase durations (seconds)
    CLUE_TIME: int = 20
    DISCUSSION_TIME: int = 30
    VOTING_TIME: int = 20

    # Unset disables the !admin command
    ADMIN_KEY: Optional[str] = None

    # Fixed seed for reproducible rounds (tests, replays)
    GAME_SEED: Optional[int] = None

    def game_settings(self) -> GameSettings:
        return GameSettings(
            clue_seconds=self.CLUE_TIME,
            discussion_seconds=self.DISCUSSION_TIME,
            voting_seconds=self.VOTING_TIME,
        )


def _env_int(key: str, default: Optional[int]) -> Optional[int]:
    """Integer env var; missing or malformed values fall back to default."""
    value = os.environ.get(key)
    if not value:
        return default
    try:
        return int(value, 10)
    except ValueError:
        return default


def get_settings() -> Settings:
    return Settings(
        ROOM_NAME=os.environ.get(ENV_ROOM_NAME) or "🔴 THE IMPOSTOR",
        MAX_PLAYERS=_env_int(ENV_MAX_PLAYERS, 15),
        CLUE_TIME=_env_int(ENV_CLUE_TIME, 20),
        DISCUSSION_TIME=_env_int(ENV_DISCUSSION_TIME, 30),
        VOTING_TIME=_env_int(ENV_VOTING_TIME, 20),
        ADMIN_KEY=os.environ.get(ENV_ADMIN_KEY) or None,
        GAME_SEED=_env_int(ENV_GAME_SEED, None),
    )
