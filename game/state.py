"""Game state types for the Impostor room."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from game.rules import (
    CANCEL_THRESHOLD,
    DEFAULT_CLUE_SECONDS,
    DEFAULT_DISCUSSION_SECONDS,
    DEFAULT_VOTING_SECONDS,
    MIN_PLAYERS,
    ROUND_SIZE,
    Phase,
    Style,
)


@dataclass(frozen=True)
class Player:
    """A player connected to the room."""

    id: int
    name: str
    auth: str = ""
    is_admin: bool = False
    joined_at: float = 0.0


@dataclass(frozen=True)
class GameSettings:
    """Durations and seat counts, fixed for the lifetime of a room."""

    clue_seconds: float = DEFAULT_CLUE_SECONDS
    discussion_seconds: float = DEFAULT_DISCUSSION_SECONDS
    voting_seconds: float = DEFAULT_VOTING_SECONDS
    min_players: int = MIN_PLAYERS
    round_size: int = ROUND_SIZE
    cancel_threshold: int = CANCEL_THRESHOLD


@dataclass(frozen=True)
class RoundResult:
    """Outcome of a resolved round."""

    round_id: str
    impostor_won: bool
    impostor_name: str
    footballer: str
    voted_out_name: Optional[str] = None


@dataclass
class Round:
    """One round: five seated players, one secret, one impostor."""

    id: str
    footballer: str
    impostor_id: int
    normal_player_ids: list[int]
    clue_order: list[int]  # also the ballot order
    current_clue_index: int = 0
    clues: dict[int, str] = field(default_factory=dict)  # insertion order = submission order
    votes: dict[int, int] = field(default_factory=dict)  # voter -> target
    started_at: float = 0.0
    sub_round: int = 1
    eliminated_ids: list[int] = field(default_factory=list)
    seat_names: dict[int, str] = field(default_factory=dict)  # names at seating time, survives leaves
    result: Optional[RoundResult] = None


@dataclass
class GameState:
    """Full room state."""

    phase: Phase = Phase.WAITING
    players: dict[int, Player] = field(default_factory=dict)
    queue: list[int] = field(default_factory=list)
    current_round: Optional[Round] = None
    round_history: list[RoundResult] = field(default_factory=list)
    rounds_started: int = 0
    settings: GameSettings = field(default_factory=GameSettings)

    def get_player(self, player_id: int) -> Optional[Player]:
        """Return player by id or None."""
        return self.players.get(player_id)

    def player_name(self, player_id: int) -> str:
        player = self.players.get(player_id)
        return player.name if player else f"#{player_id}"


class ActionKind(str, Enum):
    """Inputs accepted by the transition function."""

    PLAYER_JOIN = "PLAYER_JOIN"
    PLAYER_LEAVE = "PLAYER_LEAVE"
    JOIN_QUEUE = "JOIN_QUEUE"
    LEAVE_QUEUE = "LEAVE_QUEUE"
    START_GAME = "START_GAME"
    BEGIN_CLUES = "BEGIN_CLUES"
    SUBMIT_CLUE = "SUBMIT_CLUE"
    CLUE_TIMEOUT = "CLUE_TIMEOUT"
    END_DISCUSSION = "END_DISCUSSION"
    SUBMIT_VOTE = "SUBMIT_VOTE"
    END_VOTING = "END_VOTING"
    END_REVEAL = "END_REVEAL"
    FORCE_REVEAL = "FORCE_REVEAL"
    SKIP_PHASE = "SKIP_PHASE"
    RESET_ROUND = "RESET_ROUND"
    RESET_GAME = "RESET_GAME"


@dataclass(frozen=True)
class Action:
    """A single input to the engine. Only the fields its kind needs are set."""

    kind: ActionKind
    player: Optional[Player] = None
    player_id: Optional[int] = None
    target_id: Optional[int] = None
    word: Optional[str] = None
    footballers: tuple[str, ...] = ()
    now: float = 0.0


class EffectKind(str, Enum):
    """Commands the sequencer executes on behalf of the engine."""

    ANNOUNCE_PUBLIC = "ANNOUNCE_PUBLIC"
    ANNOUNCE_PRIVATE = "ANNOUNCE_PRIVATE"
    SET_PHASE_TIMER = "SET_PHASE_TIMER"
    CLEAR_TIMER = "CLEAR_TIMER"
    AUTO_START_GAME = "AUTO_START_GAME"
    LOG_ROUND = "LOG_ROUND"


@dataclass(frozen=True)
class Effect:
    """An opaque command produced by a transition."""

    kind: EffectKind
    message: Optional[str] = None
    style: Style = Style.INFO
    player_id: Optional[int] = None
    seconds: Optional[float] = None
    result: Optional[RoundResult] = None


@dataclass
class Transition:
    """Result of applying one action: the new state and its effects, in order."""

    state: GameState
    effects: list[Effect] = field(default_factory=list)
