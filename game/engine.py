"""Game engine: pure state transitions, no I/O."""

import copy
import random
from collections import Counter
from typing import Callable, Optional

from game.rules import (
    EMPTY_CLUE,
    STARTABLE_PHASES,
    ROUND_PHASES,
    Phase,
    Style,
)
from game.state import (
    Action,
    ActionKind,
    Effect,
    EffectKind,
    GameState,
    Round,
    RoundResult,
    Transition,
)


def _public(message: str, style: Style = Style.INFO) -> Effect:
    return Effect(kind=EffectKind.ANNOUNCE_PUBLIC, message=message, style=style)


def _private(player_id: int, message: str) -> Effect:
    return Effect(kind=EffectKind.ANNOUNCE_PRIVATE, player_id=player_id, message=message)


def _phase_timer(seconds: float) -> Effect:
    return Effect(kind=EffectKind.SET_PHASE_TIMER, seconds=seconds)


def _unchanged(state: GameState) -> Transition:
    return Transition(state=state, effects=[])


def transition(state: GameState, action: Action, rng=None) -> Transition:
    """
    Apply one action. Returns the new state and the effects to execute, in order.
    The input state is never mutated; unknown or out-of-phase actions return it unchanged.
    rng is any random.Random-compatible source (defaults to the random module).
    """
    handler = _HANDLERS.get(getattr(action, "kind", None))
    if handler is None:
        return _unchanged(state)
    return handler(state, action, rng or random)


# --- Queries -----------------------------------------------------------------


def get_current_actor(state: GameState) -> Optional[int]:
    """Return the id of the player whose clue turn it is, or None."""
    rnd = state.current_round
    if rnd is None or rnd.current_clue_index >= len(rnd.clue_order):
        return None
    return rnd.clue_order[rnd.current_clue_index]


def is_player_in_round(state: GameState, player_id: int) -> bool:
    rnd = state.current_round
    return rnd is not None and player_id in rnd.clue_order


def can_player_act(state: GameState, player_id: int, act: str) -> bool:
    """True if the player may give a clue ("clue") or vote ("vote") right now."""
    if state.current_round is None:
        return False
    if act == "clue":
        return state.phase == Phase.CLUES and get_current_actor(state) == player_id
    if act == "vote":
        return (
            state.phase == Phase.VOTING
            and is_player_in_round(state, player_id)
            and player_id in state.players
        )
    return False


def ballot(state: GameState) -> list[tuple[int, int, str]]:
    """Ballot entries as (number, player_id, name), numbered from 1 in clue order."""
    rnd = state.current_round
    if rnd is None:
        return []
    return [
        (i + 1, pid, rnd.seat_names.get(pid, state.player_name(pid)))
        for i, pid in enumerate(rnd.clue_order)
    ]


def _seat_name(state: GameState, rnd: Round, player_id: int) -> str:
    return rnd.seat_names.get(player_id) or state.player_name(player_id)


def _turn_seconds(state: GameState, player_id: int) -> float:
    """Clue time for a turn; an absent seat gets zero so the turn is passed at once."""
    if player_id not in state.players:
        return 0
    return state.settings.clue_seconds


def _all_present_voted(state: GameState, rnd: Round) -> bool:
    present = [pid for pid in rnd.clue_order if pid in state.players]
    return bool(present) and all(pid in rnd.votes for pid in present)


# --- Lobby -------------------------------------------------------------------


def _handle_player_join(state: GameState, action: Action, rng) -> Transition:
    player = action.player
    if player is None:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.players[player.id] = player
    return Transition(
        state=state,
        effects=[_private(player.id, '🔴 THE IMPOSTOR | Type "!join" to take a seat in the next round')],
    )


def _handle_player_leave(state: GameState, action: Action, rng) -> Transition:
    player_id = action.player_id
    if player_id not in state.players and player_id not in state.queue:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.players.pop(player_id, None)
    state.queue = [pid for pid in state.queue if pid != player_id]
    effects: list[Effect] = []

    rnd = state.current_round
    if rnd is None or state.phase not in ROUND_PHASES or player_id not in rnd.clue_order:
        return Transition(state=state, effects=effects)

    if len(state.players) < state.settings.cancel_threshold:
        state.phase = Phase.WAITING
        state.current_round = None
        effects.append(_public("⚠️ Round cancelled: not enough players left", Style.WARNING))
        effects.append(Effect(kind=EffectKind.CLEAR_TIMER))
        return Transition(state=state, effects=effects)

    # The seat stays in the round; its pending turn is passed and it is no longer awaited.
    if state.phase == Phase.CLUES and get_current_actor(state) == player_id:
        effects.append(_phase_timer(0))
    elif state.phase == Phase.VOTING and _all_present_voted(state, rnd):
        effects.extend(_resolve_votes(state))
    return Transition(state=state, effects=effects)


def _handle_join_queue(state: GameState, action: Action, rng) -> Transition:
    player_id = action.player_id
    if player_id not in state.players or player_id in state.queue:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.queue.append(player_id)
    size = len(state.queue)
    needed = state.settings.min_players
    effects: list[Effect] = []
    if state.phase == Phase.WAITING:
        effects.append(_public(f"✅ {state.player_name(player_id)} is ready ({size}/{needed})", Style.SUCCESS))
        if size >= needed:
            effects.append(Effect(kind=EffectKind.AUTO_START_GAME))
    else:
        effects.append(_private(player_id, f"✅ Queued for the next round (position {size})"))
    return Transition(state=state, effects=effects)


def _handle_leave_queue(state: GameState, action: Action, rng) -> Transition:
    if action.player_id not in state.queue:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.queue = [pid for pid in state.queue if pid != action.player_id]
    return Transition(state=state, effects=[_private(action.player_id, "👋 You left the queue")])


# --- Round assembly ----------------------------------------------------------


def _handle_start_game(state: GameState, action: Action, rng) -> Transition:
    """
    Seat the first queued players, pick the impostor and the secret footballer,
    and shuffle the clue order. Impostor and footballer are independent uniform draws.
    """
    settings = state.settings
    size = settings.round_size
    if state.phase not in STARTABLE_PHASES:
        return _unchanged(state)
    if len(state.queue) < max(size, settings.min_players) or not action.footballers:
        return _unchanged(state)

    state = copy.deepcopy(state)
    seated = state.queue[:size]
    state.queue = state.queue[size:]

    impostor_id = rng.choice(seated)
    footballer = rng.choice(list(action.footballers))
    clue_order = list(seated)
    rng.shuffle(clue_order)

    state.rounds_started += 1
    state.current_round = Round(
        id=f"round_{state.rounds_started}_{rng.getrandbits(32):08x}",
        footballer=footballer,
        impostor_id=impostor_id,
        normal_player_ids=[pid for pid in seated if pid != impostor_id],
        clue_order=clue_order,
        started_at=action.now,
        seat_names={pid: state.player_name(pid) for pid in seated},
    )
    state.phase = Phase.ASSIGN

    names = ", ".join(state.player_name(pid) for pid in clue_order)
    effects = [_public(f"🔴 ROUND STARTED | Players: {names}", Style.HIGHLIGHT)]
    for pid in seated:
        if pid == impostor_id:
            effects.append(_private(pid, "🕵️ You are the IMPOSTOR. Blend in!"))
        else:
            effects.append(_private(pid, f"⚽ Secret footballer: {footballer}"))
    return Transition(state=state, effects=effects)


# --- Clues -------------------------------------------------------------------


def _handle_begin_clues(state: GameState, action: Action, rng) -> Transition:
    if state.phase != Phase.ASSIGN or state.current_round is None:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.phase = Phase.CLUES
    rnd = state.current_round
    first = rnd.clue_order[0]
    return Transition(
        state=state,
        effects=[
            _public(f"📝 CLUES | One word each. Turn: {_seat_name(state, rnd, first)}", Style.HIGHLIGHT),
            _phase_timer(_turn_seconds(state, first)),
        ],
    )


def _record_clue(state: GameState, player_id: int, word: str) -> Transition:
    """Shared path for submitted and timed-out clues. Mutates the (already copied) state."""
    rnd = state.current_round
    rnd.clues[player_id] = word
    rnd.current_clue_index += 1
    effects = [_public(f"💬 {_seat_name(state, rnd, player_id)}: {word}", Style.CHAT)]

    if rnd.current_clue_index >= len(rnd.clue_order):
        state.phase = Phase.DISCUSSION
        effects.append(_public("🗣️ DISCUSSION | Who is the impostor? Talk it over.", Style.HIGHLIGHT))
        effects.append(_phase_timer(state.settings.discussion_seconds))
        return Transition(state=state, effects=effects)

    next_id = rnd.clue_order[rnd.current_clue_index]
    effects.append(_public(f"📝 Turn: {_seat_name(state, rnd, next_id)}"))
    effects.append(_phase_timer(_turn_seconds(state, next_id)))
    return Transition(state=state, effects=effects)


def _handle_submit_clue(state: GameState, action: Action, rng) -> Transition:
    if state.phase != Phase.CLUES or state.current_round is None:
        return _unchanged(state)
    if action.player_id is None or get_current_actor(state) != action.player_id:
        return _unchanged(state)
    word = (action.word or "").strip()
    if not word:
        return _unchanged(state)
    return _record_clue(copy.deepcopy(state), action.player_id, word)


def _handle_clue_timeout(state: GameState, action: Action, rng) -> Transition:
    if state.phase != Phase.CLUES or state.current_round is None:
        return _unchanged(state)
    actor = get_current_actor(state)
    if actor is None:
        return _unchanged(state)
    return _record_clue(copy.deepcopy(state), actor, EMPTY_CLUE)


# --- Discussion and voting ---------------------------------------------------


def _handle_end_discussion(state: GameState, action: Action, rng) -> Transition:
    if state.phase != Phase.DISCUSSION or state.current_round is None:
        return _unchanged(state)
    state = copy.deepcopy(state)
    state.phase = Phase.VOTING
    lines = "  ".join(f"{n}. {name}" for n, _, name in ballot(state))
    return Transition(
        state=state,
        effects=[
            _public(f"🗳️ VOTING | Type the number of your suspect: {lines}", Style.HIGHLIGHT),
            _phase_timer(state.settings.voting_seconds),
        ],
    )


def _handle_submit_vote(state: GameState, action: Action, rng) -> Transition:
    if not can_player_act(state, action.player_id, "vote"):
        return _unchanged(state)
    if not is_player_in_round(state, action.target_id):
        return _unchanged(state)
    state = copy.deepcopy(state)
    rnd = state.current_round
    rnd.votes[action.player_id] = action.target_id
    effects = [_private(action.player_id, f"🗳️ Vote registered: {_seat_name(state, rnd, action.target_id)}")]
    if _all_present_voted(state, rnd):
        effects.extend(_resolve_votes(state))
    return Transition(state=state, effects=effects)


def _handle_end_voting(state: GameState, action: Action, rng) -> Transition:
    if state.phase != Phase.VOTING or state.current_round is None:
        return _unchanged(state)
    state = copy.deepcopy(state)
    effects = _resolve_votes(state)
    return Transition(state=state, effects=effects)


def _resolve_votes(state: GameState) -> list[Effect]:
    """
    Tally by plurality; on a tie the target that first received a vote wins.
    Voting out the impostor ends the round for the players; voting out an innocent
    either hands the impostor the win (one innocent or fewer left) or starts another
    clue sub-round without the eliminated player. Mutates the (already copied) state.
    """
    rnd = state.current_round
    effects = [Effect(kind=EffectKind.CLEAR_TIMER)]
    tally = Counter(rnd.votes.values())
    if not tally:
        effects.append(_public("🤷 Nobody voted. The impostor slips away.", Style.WARNING))
        effects.extend(_finish_round(state, impostor_won=True, voted_out_id=None))
        return effects

    voted_out_id, count = tally.most_common(1)[0]
    name = _seat_name(state, rnd, voted_out_id)
    if voted_out_id == rnd.impostor_id:
        effects.append(_public(f"🎯 {name} was voted out ({count} votes) and was the IMPOSTOR!", Style.SUCCESS))
        effects.extend(_finish_round(state, impostor_won=False, voted_out_id=voted_out_id))
        return effects

    remaining = [pid for pid in rnd.normal_player_ids if pid != voted_out_id]
    effects.append(_public(f"❌ {name} was voted out ({count} votes) and was NOT the impostor.", Style.WARNING))
    if len(remaining) <= 1:
        effects.extend(_finish_round(state, impostor_won=True, voted_out_id=voted_out_id))
        return effects

    rnd.normal_player_ids = remaining
    rnd.clue_order = [pid for pid in rnd.clue_order if pid != voted_out_id]
    rnd.eliminated_ids.append(voted_out_id)
    rnd.clues = {}
    rnd.votes = {}
    rnd.current_clue_index = 0
    rnd.sub_round += 1
    state.phase = Phase.CLUES
    first = rnd.clue_order[0]
    effects.append(
        _public(
            f"📝 CLUES (round {rnd.sub_round}) | {len(remaining)} innocents left. "
            f"Turn: {_seat_name(state, rnd, first)}",
            Style.HIGHLIGHT,
        )
    )
    effects.append(_phase_timer(_turn_seconds(state, first)))
    return effects


def _finish_round(state: GameState, impostor_won: bool, voted_out_id: Optional[int]) -> list[Effect]:
    rnd = state.current_round
    result = RoundResult(
        round_id=rnd.id,
        impostor_won=impostor_won,
        impostor_name=_seat_name(state, rnd, rnd.impostor_id),
        footballer=rnd.footballer,
        voted_out_name=_seat_name(state, rnd, voted_out_id) if voted_out_id is not None else None,
    )
    rnd.result = result
    state.round_history.append(result)
    state.phase = Phase.REVEAL
    return [Effect(kind=EffectKind.LOG_ROUND, result=result)]


# --- End of round and overrides ----------------------------------------------


def _handle_end_reveal(state: GameState, action: Action, rng) -> Transition:
    rnd = state.current_round
    if state.phase != Phase.REVEAL or rnd is None or rnd.result is None:
        return _unchanged(state)
    result = rnd.result
    state = copy.deepcopy(state)
    state.phase = Phase.RESULTS
    state.current_round = None
    winner = "The IMPOSTOR wins" if result.impostor_won else "The players win"
    return Transition(
        state=state,
        effects=[
            _public(
                f"🏆 END: {winner}! The impostor was {result.impostor_name}, "
                f"the footballer was {result.footballer}.",
                Style.HIGHLIGHT,
            ),
            Effect(kind=EffectKind.AUTO_START_GAME),
        ],
    )


def _handle_reset(state: GameState, action: Action, rng) -> Transition:
    """RESET_GAME, RESET_ROUND and FORCE_REVEAL all return the room to WAITING."""
    effects: list[Effect] = []
    rnd = state.current_round
    if action.kind == ActionKind.FORCE_REVEAL and rnd is not None:
        effects.append(
            _public(
                f"👀 Revealed: the impostor was {_seat_name(state, rnd, rnd.impostor_id)}, "
                f"the footballer was {rnd.footballer}.",
                Style.WARNING,
            )
        )
    state = copy.deepcopy(state)
    state.phase = Phase.WAITING
    state.current_round = None
    if len(state.queue) >= state.settings.min_players:
        effects.append(Effect(kind=EffectKind.AUTO_START_GAME))
    return Transition(state=state, effects=effects)


def _handle_skip_phase(state: GameState, action: Action, rng) -> Transition:
    return _unchanged(state)


_HANDLERS: dict[ActionKind, Callable[[GameState, Action, object], Transition]] = {
    ActionKind.PLAYER_JOIN: _handle_player_join,
    ActionKind.PLAYER_LEAVE: _handle_player_leave,
    ActionKind.JOIN_QUEUE: _handle_join_queue,
    ActionKind.LEAVE_QUEUE: _handle_leave_queue,
    ActionKind.START_GAME: _handle_start_game,
    ActionKind.BEGIN_CLUES: _handle_begin_clues,
    ActionKind.SUBMIT_CLUE: _handle_submit_clue,
    ActionKind.CLUE_TIMEOUT: _handle_clue_timeout,
    ActionKind.END_DISCUSSION: _handle_end_discussion,
    ActionKind.SUBMIT_VOTE: _handle_submit_vote,
    ActionKind.END_VOTING: _handle_end_voting,
    ActionKind.END_REVEAL: _handle_end_reveal,
    ActionKind.FORCE_REVEAL: _handle_reset,
    ActionKind.RESET_ROUND: _handle_reset,
    ActionKind.RESET_GAME: _handle_reset,
    ActionKind.SKIP_PHASE: _handle_skip_phase,
}
