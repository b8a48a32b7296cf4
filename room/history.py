"""In-memory history store: player joins and round results. Replace with DB later if needed."""

import time
from typing import Any

from game.state import RoundResult
from room.adapter import RoomPlayer


class HistoryStore:
    """Append-only records kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._joins: list[dict[str, Any]] = []
        self._rounds: list[dict[str, Any]] = []

    def record_player_join(self, player: RoomPlayer) -> None:
        self._joins.append(
            {
                "id": player.id,
                "name": player.name,
                "auth": player.auth,
                "conn": player.conn,
                "joined_at": time.time(),
            }
        )

    def record_round(self, result: RoundResult) -> None:
        self._rounds.append(
            {
                "round_id": result.round_id,
                "footballer": result.footballer,
                "impostor_name": result.impostor_name,
                "impostor_won": result.impostor_won,
                "voted_out_name": result.voted_out_name,
                "recorded_at": time.time(),
            }
        )

    def joins(self) -> list[dict[str, Any]]:
        return list(self._joins)

    def rounds(self) -> list[dict[str, Any]]:
        """Round records, oldest first."""
        return list(self._rounds)
