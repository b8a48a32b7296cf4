"""Game rules and constants for the Impostor room."""

from enum import Enum


class Phase(str, Enum):
    """Current game phase."""

    WAITING = "WAITING"
    ASSIGN = "ASSIGN"
    CLUES = "CLUES"
    DISCUSSION = "DISCUSSION"
    VOTING = "VOTING"
    REVEAL = "REVEAL"
    RESULTS = "RESULTS"


class Style(str, Enum):
    """Tone of a public announcement; the room adapter maps it to colors."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    HIGHLIGHT = "highlight"
    CHAT = "chat"


# Phases that carry a live round
ROUND_PHASES = (Phase.ASSIGN, Phase.CLUES, Phase.DISCUSSION, Phase.VOTING, Phase.REVEAL)

# Phases where players outside the round are silenced
ACTIVE_PHASES = (Phase.CLUES, Phase.DISCUSSION, Phase.VOTING, Phase.REVEAL)

# Phases from which a new round may be started
STARTABLE_PHASES = (Phase.WAITING, Phase.RESULTS)

# Players seated per round
ROUND_SIZE = 5

# Minimum queued players to start
MIN_PLAYERS = 5

# A seated player leaving cancels the round when the room drops below this
CANCEL_THRESHOLD = 3

# Recorded for a turn that was passed (timeout or absent player)
EMPTY_CLUE = "..."

# Words of the secret shorter than this are not checked for spoilers
SPOILER_MIN_WORD_LENGTH = 3

# Default phase durations in seconds
DEFAULT_CLUE_SECONDS = 20
DEFAULT_DISCUSSION_SECONDS = 30
DEFAULT_VOTING_SECONDS = 20
