"""Chat command grammar: parse "!command" lines and validate them into engine actions."""

import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from game.engine import is_player_in_round
from game.rules import ROUND_PHASES, STARTABLE_PHASES
from game.state import Action, ActionKind, GameState, Player

COMMAND_PREFIX = "!"


class CommandType(str, Enum):
    """Recognized chat commands."""

    HELP = "help"
    JOIN = "join"
    LEAVE = "leave"
    START = "start"
    RESET = "reset"
    REVEAL = "reveal"
    SKIP = "skip"
    ADMIN = "admin"


# Spanish aliases are accepted as well
_ALIASES: dict[str, CommandType] = {
    "help": CommandType.HELP,
    "ayuda": CommandType.HELP,
    "join": CommandType.JOIN,
    "play": CommandType.JOIN,
    "jugar": CommandType.JOIN,
    "leave": CommandType.LEAVE,
    "salir": CommandType.LEAVE,
    "start": CommandType.START,
    "reset": CommandType.RESET,
    "reveal": CommandType.REVEAL,
    "skip": CommandType.SKIP,
    "admin": CommandType.ADMIN,
}

ADMIN_ONLY = (CommandType.RESET, CommandType.REVEAL, CommandType.SKIP)

HELP_TEXT = (
    "📖 !join: queue for the next round | !leave: leave the queue | !start: start when 5 are queued. "
    "Give ONE word when it is your turn, then vote with the suspect's number."
)


@dataclass(frozen=True)
class Command:
    type: CommandType
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandResult:
    """Outcome of validating a command: at most one action plus an optional private reply."""

    valid: bool
    action: Optional[Action] = None
    reply: Optional[str] = None
    grant_admin: bool = False


def parse_command(message: str) -> Optional[Command]:
    """Return the command in message, or None if it is not a recognized command."""
    text = (message or "").strip()
    if not text.startswith(COMMAND_PREFIX):
        return None
    parts = text[len(COMMAND_PREFIX):].split()
    if not parts:
        return None
    command_type = _ALIASES.get(parts[0].lower())
    if command_type is None:
        return None
    return Command(type=command_type, args=tuple(parts[1:]))


def validate_command(
    command: Command,
    player: Player,
    state: GameState,
    admin_key: Optional[str] = None,
) -> CommandResult:
    """Check a command against the current phase and the player's role."""
    if command.type in ADMIN_ONLY and not player.is_admin:
        return CommandResult(valid=False, reply="⛔ Admins only")

    if command.type == CommandType.HELP:
        return CommandResult(valid=True, reply=HELP_TEXT)

    if command.type == CommandType.JOIN:
        if player.id in state.queue:
            position = state.queue.index(player.id) + 1
            return CommandResult(valid=False, reply=f"You are already in the queue (position {position})")
        if state.phase in ROUND_PHASES and is_player_in_round(state, player.id):
            return CommandResult(valid=False, reply="You are already playing this round")
        return CommandResult(valid=True, action=Action(kind=ActionKind.JOIN_QUEUE, player_id=player.id))

    if command.type == CommandType.LEAVE:
        if player.id not in state.queue:
            return CommandResult(valid=False, reply="You are not in the queue")
        return CommandResult(valid=True, action=Action(kind=ActionKind.LEAVE_QUEUE, player_id=player.id))

    if command.type == CommandType.START:
        if state.phase not in STARTABLE_PHASES:
            return CommandResult(valid=False, reply="A round is already in progress")
        needed = state.settings.min_players
        if len(state.queue) < needed:
            return CommandResult(valid=False, reply=f"Need {needed} players in the queue ({len(state.queue)}/{needed})")
        return CommandResult(valid=True, action=Action(kind=ActionKind.START_GAME))

    if command.type == CommandType.RESET:
        return CommandResult(valid=True, action=Action(kind=ActionKind.RESET_GAME), reply="🔄 Game reset")

    if command.type == CommandType.REVEAL:
        if state.current_round is None:
            return CommandResult(valid=False, reply="No round in progress")
        return CommandResult(valid=True, action=Action(kind=ActionKind.FORCE_REVEAL))

    if command.type == CommandType.SKIP:
        return CommandResult(valid=True, action=Action(kind=ActionKind.SKIP_PHASE))

    if command.type == CommandType.ADMIN:
        if not admin_key:
            return CommandResult(valid=False)
        supplied = command.args[0] if command.args else ""
        if hmac.compare_digest(supplied.encode(), admin_key.encode()):
            return CommandResult(valid=True, reply="👑 Admin access granted", grant_admin=True)
        return CommandResult(valid=False, reply="❌ Access denied")

    return CommandResult(valid=False)
