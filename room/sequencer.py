"""Sequencer: run the game in a live room. Owns the state, the timers and effect dispatch."""

import asyncio
import dataclasses
import logging
import random
import time
from collections import deque
from enum import Enum
from typing import Any, Optional

from game.chat import IntentKind, classify_chat
from game.engine import transition
from game.footballers import FOOTBALLERS
from game.rules import Phase, Style
from game.state import Action, ActionKind, Effect, EffectKind, GameState, Player

from room.adapter import ANNOUNCEMENT_STYLES, PRIVATE_STYLE, RoomAdapter, RoomPlayer
from room.config import Settings, get_settings
from room.field import FieldDelays, setup_game_field
from room.history import HistoryStore

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Delays:
    """Fixed pauses (seconds) between automatic transitions."""

    assign: float = 3.0
    reveal: float = 3.0
    results: float = 8.0
    auto_start: float = 2.0
    private: float = 0.15
    field: FieldDelays = dataclasses.field(default_factory=FieldDelays)


class TimerSlot(str, Enum):
    PHASE = "phase"
    ASSIGN = "assign"
    FOLLOW_UP = "follow_up"
    AUTO_START = "auto_start"


# Slots cancelled whenever the phase changes
PHASE_SCOPED_SLOTS = (TimerSlot.PHASE, TimerSlot.ASSIGN, TimerSlot.FOLLOW_UP)

# Action fired when the phase timer of each timed phase runs out
_PHASE_TIMEOUTS: dict[Phase, ActionKind] = {
    Phase.CLUES: ActionKind.CLUE_TIMEOUT,
    Phase.DISCUSSION: ActionKind.END_DISCUSSION,
    Phase.VOTING: ActionKind.END_VOTING,
}


@dataclasses.dataclass(eq=False)
class _Timer:
    phase: Phase
    action: Action
    handle: Optional[asyncio.TimerHandle] = None


class GameSequencer:
    """
    Glue between the room and the pure engine. Room events become actions, every action
    goes through transition(), and the resulting effects are executed against the adapter.
    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        adapter: RoomAdapter,
        settings: Optional[Settings] = None,
        footballers: Optional[tuple[str, ...]] = None,
        history: Optional[HistoryStore] = None,
        rng: Optional[random.Random] = None,
        delays: Optional[Delays] = None,
    ) -> None:
        self._adapter = adapter
        self._settings = settings or get_settings()
        self._footballers = tuple(footballers or FOOTBALLERS)
        self._history = history if history is not None else HistoryStore()
        self._rng = rng or random.Random(self._settings.GAME_SEED)
        self._delays = delays or Delays()
        self._state = GameState(settings=self._settings.game_settings())
        self._timers: dict[TimerSlot, _Timer] = {}
        self._private_handles: set[asyncio.TimerHandle] = set()
        self._setup_task: Optional[asyncio.Task] = None
        self._pending: deque[Action] = deque()
        self._dispatching = False

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def history(self) -> HistoryStore:
        return self._history

    # --- Room events ---------------------------------------------------------

    def on_player_join(self, room_player: RoomPlayer) -> None:
        try:
            self._history.record_player_join(room_player)
        except Exception as e:
            logger.warning("Failed to record join of %s: %s", room_player.name, e)

        wanted = room_player.name.casefold()
        if any(p.name.casefold() == wanted for p in self._state.players.values()):
            logger.info("Kicking %s (id %s): name already in use", room_player.name, room_player.id)
            self._announce(
                f'❌ The name "{room_player.name}" is already in use',
                room_player.id,
                ANNOUNCEMENT_STYLES[Style.ERROR],
            )
            self._adapter.kick_player(room_player.id, "That name is already in use")
            return

        if len(self._state.players) >= self._settings.MAX_PLAYERS:
            logger.info("Kicking %s (id %s): room full", room_player.name, room_player.id)
            self._adapter.kick_player(room_player.id, f"Room is full ({self._settings.MAX_PLAYERS} players)")
            return

        player = Player(
            id=room_player.id,
            name=room_player.name,
            auth=room_player.auth,
            is_admin=room_player.admin,
            joined_at=time.time(),
        )
        self.dispatch(Action(kind=ActionKind.PLAYER_JOIN, player=player))

    def on_player_leave(self, room_player: RoomPlayer) -> None:
        self.dispatch(Action(kind=ActionKind.PLAYER_LEAVE, player_id=room_player.id))

    def on_player_chat(self, room_player: RoomPlayer, message: str) -> bool:
        """Handle one chat line. Returns True if the room should broadcast it."""
        known = self._state.get_player(room_player.id)
        player = Player(
            id=room_player.id,
            name=known.name if known else room_player.name,
            auth=room_player.auth,
            is_admin=room_player.admin,
            joined_at=known.joined_at if known else 0.0,
        )
        intent = classify_chat(self._state, player, message, admin_key=self._settings.ADMIN_KEY)

        if intent.reply:
            self._send_private(player.id, intent.reply)
        if intent.grant_admin:
            logger.info("Admin granted to %s (id %s)", player.name, player.id)
            self._adapter.set_player_admin(player.id, True)
        if intent.action is not None:
            self.dispatch(intent.action)
        return intent.kind == IntentKind.FREE_CHAT

    # --- Dispatch ------------------------------------------------------------

    def dispatch(self, action: Action) -> None:
        """
        Apply an action. Calls made while another action is being applied are queued.
        If applying fails the queue is dropped, so nothing queued against that state
        is replayed by a later event.
        """
        self._pending.append(action)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                self._apply(self._pending.popleft())
        except Exception:
            dropped = len(self._pending)
            self._pending.clear()
            logger.exception("Dispatch failed in %s; dropped %d queued actions", self._state.phase.value, dropped)
            raise
        finally:
            self._dispatching = False

    def _apply(self, action: Action) -> None:
        if action.kind == ActionKind.START_GAME:
            action = dataclasses.replace(
                action,
                footballers=action.footballers or self._footballers,
                now=action.now or time.time(),
            )

        previous = self._state.phase
        result = transition(self._state, action, self._rng)
        self._state = result.state

        phase_changed = self._state.phase != previous
        if phase_changed:
            logger.info("Phase %s -> %s (%s)", previous.value, self._state.phase.value, action.kind.value)
            for slot in PHASE_SCOPED_SLOTS:
                self._clear_timer(slot)
            if previous == Phase.ASSIGN and self._state.phase == Phase.WAITING:
                self._cancel_field_setup()

        for effect in result.effects:
            try:
                self._execute(effect)
            except Exception:
                logger.exception("Effect %s failed after %s", effect.kind.value, action.kind.value)

        if phase_changed:
            self._arm_follow_ups()

    def _execute(self, effect: Effect) -> None:
        if effect.kind == EffectKind.ANNOUNCE_PUBLIC:
            self._announce(effect.message, None, ANNOUNCEMENT_STYLES[effect.style])
        elif effect.kind == EffectKind.ANNOUNCE_PRIVATE:
            self._send_private(effect.player_id, effect.message)
        elif effect.kind == EffectKind.SET_PHASE_TIMER:
            self._clear_timer(TimerSlot.PHASE)
            self._clear_timer(TimerSlot.ASSIGN)
            timeout = _PHASE_TIMEOUTS.get(self._state.phase)
            if timeout is not None:
                self._arm(TimerSlot.PHASE, effect.seconds or 0, Action(kind=timeout))
        elif effect.kind == EffectKind.CLEAR_TIMER:
            self._clear_timer(TimerSlot.PHASE)
            self._clear_timer(TimerSlot.ASSIGN)
        elif effect.kind == EffectKind.AUTO_START_GAME:
            self._arm(TimerSlot.AUTO_START, self._delays.auto_start, Action(kind=ActionKind.START_GAME))
        elif effect.kind == EffectKind.LOG_ROUND:
            try:
                self._history.record_round(effect.result)
            except Exception as e:
                logger.warning("Failed to record round %s: %s", effect.result.round_id, e)

    def _arm_follow_ups(self) -> None:
        phase = self._state.phase
        if phase == Phase.ASSIGN:
            self._arm(TimerSlot.ASSIGN, self._delays.assign, Action(kind=ActionKind.BEGIN_CLUES))
            self._start_field_setup(list(self._state.current_round.clue_order))
        elif phase == Phase.REVEAL:
            self._arm(TimerSlot.FOLLOW_UP, self._delays.reveal, Action(kind=ActionKind.END_REVEAL))
        elif phase == Phase.RESULTS:
            self._arm(TimerSlot.FOLLOW_UP, self._delays.results, Action(kind=ActionKind.RESET_GAME))

    # --- Timers --------------------------------------------------------------

    def _arm(self, slot: TimerSlot, seconds: float, action: Action) -> None:
        self._clear_timer(slot)
        timer = _Timer(phase=self._state.phase, action=action)
        timer.handle = asyncio.get_running_loop().call_later(max(0.0, seconds), self._on_timer, slot, timer)
        self._timers[slot] = timer

    def _clear_timer(self, slot: TimerSlot) -> None:
        timer = self._timers.pop(slot, None)
        if timer is not None:
            timer.handle.cancel()

    def _on_timer(self, slot: TimerSlot, timer: _Timer) -> None:
        if self._timers.get(slot) is timer:
            del self._timers[slot]
        if self._state.phase != timer.phase:
            logger.debug(
                "Dropping stale %s timer armed in %s (now %s)",
                slot.value,
                timer.phase.value,
                self._state.phase.value,
            )
            return
        self.dispatch(timer.action)

    def _cancel_field_setup(self) -> None:
        if self._setup_task is not None and not self._setup_task.done():
            self._setup_task.cancel()
        self._setup_task = None

    def _start_field_setup(self, seated_ids: list[int]) -> None:
        self._cancel_field_setup()
        self._setup_task = asyncio.get_running_loop().create_task(
            setup_game_field(self._adapter, seated_ids, self._delays.field)
        )

    # --- Output --------------------------------------------------------------

    def _announce(self, message: str, target_id: Optional[int], style) -> None:
        self._adapter.send_announcement(message, target_id, style)

    def _send_private(self, player_id: int, message: str) -> None:
        if self._delays.private <= 0:
            self._announce(message, player_id, PRIVATE_STYLE)
            return

        def deliver() -> None:
            self._private_handles.discard(handle)
            self._announce(message, player_id, PRIVATE_STYLE)

        handle = asyncio.get_running_loop().call_later(self._delays.private, deliver)
        self._private_handles.add(handle)

    # --- Introspection and shutdown ------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Pull-based view for status endpoints."""
        return {
            "phase": self._state.phase.value,
            "player_count": len(self._state.players),
            "queue_count": len(self._state.queue),
            "rounds_played": len(self._state.round_history),
        }

    def pending_timers(self) -> dict[str, str]:
        """Armed timer slots and the phase each was armed in."""
        return {slot.value: timer.phase.value for slot, timer in self._timers.items()}

    def close(self) -> None:
        for slot in list(self._timers):
            self._clear_timer(slot)
        for handle in self._private_handles:
            handle.cancel()
        self._private_handles.clear()
        self._cancel_field_setup()
