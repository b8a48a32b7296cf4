"""Seat the round's players on the pitch through the room adapter."""

import asyncio
import logging
from dataclasses import dataclass

from room.adapter import (
    HOST_PLAYER_ID,
    TEAM_RED,
    TEAM_SPECTATORS,
    DiscProperties,
    RoomAdapter,
)

logger = logging.getLogger(__name__)

# Seat coordinates, one per round player, around the centre of the pitch
SEAT_POSITIONS: tuple[tuple[float, float], ...] = (
    (0, -130),
    (124, -40),
    (76, 105),
    (-76, 105),
    (-124, -40),
)


@dataclass(frozen=True)
class FieldDelays:
    """Pauses (seconds) between setup steps; the host drops commands sent back to back."""

    after_stop: float = 0.1
    after_clear: float = 0.1
    per_seat: float = 0.05
    before_start: float = 0.2
    after_start: float = 0.5


async def setup_game_field(
    adapter: RoomAdapter,
    seated_ids: list[int],
    delays: FieldDelays = FieldDelays(),
) -> None:
    """
    Stop the match, move everyone to spectators, put the seated players on the red team,
    restart and place each one on a seat with zero speed.
    Failures are logged; the round itself does not depend on the pitch.
    """
    try:
        await adapter.stop_game()
        await asyncio.sleep(delays.after_stop)

        for player in await adapter.get_player_list():
            if player.id != HOST_PLAYER_ID:
                await adapter.set_player_team(player.id, TEAM_SPECTATORS)
        await asyncio.sleep(delays.after_clear)

        for player_id in seated_ids:
            await adapter.set_player_team(player_id, TEAM_RED)
            await asyncio.sleep(delays.per_seat)

        await asyncio.sleep(delays.before_start)
        await adapter.start_game()
        await asyncio.sleep(delays.after_start)

        for player_id, (x, y) in zip(seated_ids, SEAT_POSITIONS):
            await adapter.set_player_disc_properties(player_id, DiscProperties(x=x, y=y))
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("Field setup failed for players %s", seated_ids)
