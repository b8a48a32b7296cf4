"""Game core for the Impostor room."""

from game.engine import (
    transition,
    get_current_actor,
    can_player_act,
    is_player_in_round,
    ballot,
)
from game.chat import ChatIntent, IntentKind, classify_chat, contains_spoiler
from game.commands import Command, CommandResult, CommandType, parse_command, validate_command
from game.rules import Phase, Style
from game.state import (
    Action,
    ActionKind,
    Effect,
    EffectKind,
    GameSettings,
    GameState,
    Player,
    Round,
    RoundResult,
    Transition,
)

__all__ = [
    "transition",
    "get_current_actor",
    "can_player_act",
    "is_player_in_round",
    "ballot",
    "ChatIntent",
    "IntentKind",
    "classify_chat",
    "contains_spoiler",
    "Command",
    "CommandResult",
    "CommandType",
    "parse_command",
    "validate_command",
    "Phase",
    "Style",
    "Action",
    "ActionKind",
    "Effect",
    "EffectKind",
    "GameSettings",
    "GameState",
    "Player",
    "Round",
    "RoundResult",
    "Transition",
]
