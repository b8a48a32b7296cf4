"""Chat-intent gate: decide what a chat line means in the current phase."""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from game.commands import CommandType, parse_command, validate_command
from game.engine import ballot, get_current_actor, is_player_in_round
from game.rules import ACTIVE_PHASES, SPOILER_MIN_WORD_LENGTH, Phase
from game.state import Action, ActionKind, GameState, Player

SPOILER_WARNING = "❌ You can't say the footballer's name!"


class IntentKind(str, Enum):
    """What a chat line turned out to be."""

    COMMAND = "command"
    CLUE = "clue"
    VOTE = "vote"
    FREE_CHAT = "free_chat"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class ChatIntent:
    """Classified chat line. action goes to the engine, reply privately to the speaker."""

    kind: IntentKind
    action: Optional[Action] = None
    reply: Optional[str] = None
    grant_admin: bool = False


_SUPPRESSED = ChatIntent(kind=IntentKind.SUPPRESSED)
_FREE_CHAT = ChatIntent(kind=IntentKind.FREE_CHAT)


def normalize(text: str) -> str:
    """Case-fold and strip diacritics ("Müller" -> "muller")."""
    decomposed = unicodedata.normalize("NFD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def contains_spoiler(clue: str, footballer: str) -> bool:
    """True if any word of the footballer's name (3+ chars) appears inside the clue."""
    normalized_clue = normalize(clue)
    return any(
        len(part) >= SPOILER_MIN_WORD_LENGTH and part in normalized_clue
        for part in normalize(footballer).split()
    )


def _parse_ballot_number(message: str) -> Optional[int]:
    try:
        return int(message.strip())
    except ValueError:
        return None


def _command_intent(command, player: Player, state: GameState, admin_key: Optional[str]) -> ChatIntent:
    result = validate_command(command, player, state, admin_key=admin_key)
    return ChatIntent(
        kind=IntentKind.COMMAND,
        action=result.action if result.valid else None,
        reply=result.reply,
        grant_admin=result.grant_admin,
    )


def classify_chat(
    state: GameState,
    player: Player,
    message: str,
    admin_key: Optional[str] = None,
) -> ChatIntent:
    """
    Classify one chat line. First match wins:
    players outside the round are silenced during active phases (they may still !join),
    commands are never forwarded as chat, only the turn-holder gives a clue during CLUES
    (spoilers are rejected), seated players vote by ballot number during VOTING, and
    anything else is free chat.
    """
    command = parse_command(message)
    rnd = state.current_round
    seated = is_player_in_round(state, player.id)

    if state.phase in ACTIVE_PHASES and rnd is not None and not seated and not player.is_admin:
        if command is not None and command.type == CommandType.JOIN:
            return _command_intent(command, player, state, admin_key)
        return _SUPPRESSED

    if command is not None:
        return _command_intent(command, player, state, admin_key)

    if state.phase == Phase.CLUES and rnd is not None:
        if player.id != get_current_actor(state):
            return _FREE_CHAT if player.is_admin else _SUPPRESSED
        tokens = (message or "").split()
        if not tokens:
            return _SUPPRESSED
        clue = tokens[0]
        if contains_spoiler(clue, rnd.footballer):
            return ChatIntent(kind=IntentKind.SUPPRESSED, reply=SPOILER_WARNING)
        return ChatIntent(
            kind=IntentKind.CLUE,
            action=Action(kind=ActionKind.SUBMIT_CLUE, player_id=player.id, word=clue),
        )

    if state.phase == Phase.VOTING and rnd is not None:
        if not seated:
            return _FREE_CHAT if player.is_admin else _SUPPRESSED
        number = _parse_ballot_number(message or "")
        if number is None:
            return _SUPPRESSED
        entries = ballot(state)
        if not 1 <= number <= len(entries):
            return ChatIntent(kind=IntentKind.SUPPRESSED, reply=f"Pick a number from 1 to {len(entries)}")
        _, target_id, _ = entries[number - 1]
        return ChatIntent(
            kind=IntentKind.VOTE,
            action=Action(kind=ActionKind.SUBMIT_VOTE, player_id=player.id, target_id=target_id),
        )

    return _FREE_CHAT
