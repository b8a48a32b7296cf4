"""Chat-intent gate tests: phase policy, spoiler filter, ballot parsing."""

import pytest

from game.chat import SPOILER_WARNING, IntentKind, classify_chat, contains_spoiler, normalize
from game.engine import transition
from game.rules import Phase
from game.state import Action, ActionKind, GameState, Player


class FirstPickRng:
    def choice(self, seq):
        return seq[0]

    def shuffle(self, seq):
        return None

    def getrandbits(self, k):
        return 0


def _act(state, kind, **fields):
    return transition(state, Action(kind=kind, **fields), FirstPickRng()).state


def _room(phase: Phase, extra: int = 1) -> GameState:
    """Five seated players (P1 impostor, P1 first to speak) plus `extra` spectators, driven to phase."""
    state = GameState()
    for pid in range(1, 6 + extra):
        state = _act(state, ActionKind.PLAYER_JOIN, player=Player(id=pid, name=f"P{pid}"))
    for pid in range(1, 6):
        state = _act(state, ActionKind.JOIN_QUEUE, player_id=pid)
    if phase == Phase.WAITING:
        return state
    state = _act(state, ActionKind.START_GAME, footballers=("Thomas Müller",))
    if phase == Phase.ASSIGN:
        return state
    state = _act(state, ActionKind.BEGIN_CLUES)
    if phase == Phase.CLUES:
        return state
    for _ in range(5):
        state = _act(state, ActionKind.CLUE_TIMEOUT)
    if phase == Phase.DISCUSSION:
        return state
    return _act(state, ActionKind.END_DISCUSSION)


def _player(state, pid, admin=False):
    if admin:
        return Player(id=pid, name=f"Admin{pid}", is_admin=True)
    return state.players[pid]


# --- Spoiler filter ------------------------------------------------------


@pytest.mark.parametrize(
    "clue,footballer,expected",
    [
        ("Messi", "Lionel Messi", True),
        ("Barcelona", "Lionel Messi", False),
        ("messiah", "Lionel Messi", True),
        ("MULLER", "Thomas Müller", True),
        ("müller", "Thomas Muller", True),
        ("Leo", "Lionel Messi", False),
        ("de", "Kevin De Bruyne", False),
        ("Pele", "Pelé", True),
    ],
)
def test_contains_spoiler(clue, footballer, expected):
    assert contains_spoiler(clue, footballer) is expected


def test_normalize_strips_accents_and_case():
    assert normalize("Ángel Di María") == "angel di maria"


# --- Ghost rule ----------------------------------------------------------


@pytest.mark.parametrize("phase", [Phase.CLUES, Phase.DISCUSSION, Phase.VOTING])
def test_spectators_are_silenced_during_active_round(phase):
    state = _room(phase)
    intent = classify_chat(state, _player(state, 6), "hello everyone")
    assert intent.kind == IntentKind.SUPPRESSED
    assert intent.action is None


def test_spectator_may_still_join_queue():
    state = _room(Phase.CLUES)
    intent = classify_chat(state, _player(state, 6), "!join")
    assert intent.kind == IntentKind.COMMAND
    assert intent.action.kind == ActionKind.JOIN_QUEUE
    assert intent.action.player_id == 6


def test_spectator_other_commands_are_silenced():
    state = _room(Phase.DISCUSSION)
    assert classify_chat(state, _player(state, 6), "!help").kind == IntentKind.SUPPRESSED


@pytest.mark.parametrize("phase", [Phase.WAITING, Phase.ASSIGN])
def test_spectators_chat_freely_outside_active_phases(phase):
    state = _room(phase)
    assert classify_chat(state, _player(state, 6), "gl hf").kind == IntentKind.FREE_CHAT


def test_admin_is_not_a_ghost():
    state = _room(Phase.DISCUSSION)
    assert classify_chat(state, _player(state, 99, admin=True), "carry on").kind == IntentKind.FREE_CHAT


# --- Clues ---------------------------------------------------------------


def test_turn_holder_gives_first_word_as_clue():
    state = _room(Phase.CLUES)
    intent = classify_chat(state, _player(state, 1), "Bayern forever")
    assert intent.kind == IntentKind.CLUE
    assert intent.action == Action(kind=ActionKind.SUBMIT_CLUE, player_id=1, word="Bayern")


def test_spoiler_clue_is_rejected_with_warning():
    state = _room(Phase.CLUES)
    intent = classify_chat(state, _player(state, 1), "Müller")
    assert intent.kind == IntentKind.SUPPRESSED
    assert intent.reply == SPOILER_WARNING
    assert intent.action is None


def test_seated_player_out_of_turn_is_silenced():
    state = _room(Phase.CLUES)
    assert classify_chat(state, _player(state, 2), "Bayern").kind == IntentKind.SUPPRESSED


def test_admin_out_of_turn_chats_freely():
    state = _room(Phase.CLUES)
    assert classify_chat(state, _player(state, 99, admin=True), "Bayern").kind == IntentKind.FREE_CHAT


def test_commands_win_over_clues():
    state = _room(Phase.CLUES)
    intent = classify_chat(state, _player(state, 1), "!help")
    assert intent.kind == IntentKind.COMMAND
    assert intent.action is None
    assert intent.reply


# --- Discussion and voting -----------------------------------------------


def test_discussion_is_free_chat_for_seated_players():
    state = _room(Phase.DISCUSSION)
    assert classify_chat(state, _player(state, 3), "P2 was sus").kind == IntentKind.FREE_CHAT


def test_ballot_number_is_a_vote():
    state = _room(Phase.VOTING)
    intent = classify_chat(state, _player(state, 3), " 2 ")
    assert intent.kind == IntentKind.VOTE
    assert intent.action == Action(kind=ActionKind.SUBMIT_VOTE, player_id=3, target_id=2)


def test_out_of_range_ballot_number_gets_hint():
    state = _room(Phase.VOTING)
    intent = classify_chat(state, _player(state, 3), "9")
    assert intent.kind == IntentKind.SUPPRESSED
    assert intent.reply == "Pick a number from 1 to 5"


def test_non_numeric_vote_is_silenced():
    state = _room(Phase.VOTING)
    intent = classify_chat(state, _player(state, 3), "it was P2")
    assert intent.kind == IntentKind.SUPPRESSED
    assert intent.reply is None
