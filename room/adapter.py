"""Contract between the sequencer and the hosting game room."""

from dataclasses import dataclass
from typing import Optional, Protocol

from game.rules import Style

# Team ids used by the hosting engine
TEAM_SPECTATORS = 0
TEAM_RED = 1

# Id of the room's host player, never moved or seated
HOST_PLAYER_ID = 0


@dataclass(frozen=True)
class RoomPlayer:
    """A player as reported by the hosting room."""

    id: int
    name: str
    auth: str = ""
    conn: str = ""
    admin: bool = False
    team: int = TEAM_SPECTATORS


@dataclass(frozen=True)
class AnnouncementStyle:
    color: int
    font: str = "normal"


# How each announcement tone is rendered in the room
ANNOUNCEMENT_STYLES: dict[Style, AnnouncementStyle] = {
    Style.INFO: AnnouncementStyle(color=0xFFFFFF),
    Style.SUCCESS: AnnouncementStyle(color=0x00FF00),
    Style.WARNING: AnnouncementStyle(color=0xFF6B6B),
    Style.ERROR: AnnouncementStyle(color=0xFF0000),
    Style.HIGHLIGHT: AnnouncementStyle(color=0xFFD700, font="bold"),
    Style.CHAT: AnnouncementStyle(color=0xFFFFFF),
}

PRIVATE_STYLE = AnnouncementStyle(color=0xFFFF00, font="bold")


@dataclass(frozen=True)
class DiscProperties:
    x: float
    y: float
    xspeed: float = 0.0
    yspeed: float = 0.0


class RoomAdapter(Protocol):
    """
    Outbound calls the sequencer makes. Announcements, kicks and admin changes are
    fire-and-forget; team and pitch operations are awaited so they can be sequenced.
    """

    def send_announcement(
        self, message: str, target_id: Optional[int], style: AnnouncementStyle
    ) -> None: ...

    def kick_player(self, player_id: int, reason: str) -> None: ...

    def set_player_admin(self, player_id: int, admin: bool) -> None: ...

    async def set_player_team(self, player_id: int, team_id: int) -> None: ...

    async def start_game(self) -> None: ...

    async def stop_game(self) -> None: ...

    async def set_player_disc_properties(self, player_id: int, props: DiscProperties) -> None: ...

    async def get_player_list(self) -> list[RoomPlayer]: ...
