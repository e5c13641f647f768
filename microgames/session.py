from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Any

from microgames.catalog import Catalog, MicrogameDescriptor
from microgames.core.events import EventType, SessionEvent
from microgames.core.state import DEFAULT_STARTING_LIVES, SessionPhase, SessionSnapshot, SessionState
from microgames.errors import ConfigurationError, MissingDescriptorError
from microgames.fsm import SessionFSM
from microgames.screens import ScreenLoader, ScreenNames
from microgames.sequencer import ShuffleSequencer
from microgames.timer import RoundOutcome, RoundTimer

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent], None]


class SessionOrchestrator:
    """Runs one microgame session: Startup -> Command -> Microgame -> ... -> GameOver.

    Every transition method is a coroutine. Transitions are serialized and each
    one awaits the screen loader before returning, so the next phase never
    starts while a screen is still loading.

    Outcomes reach the orchestrator either from the host (`game_won` /
    `game_lost`) or from the round timer running out during `tick`. Each round
    latches exactly one of them.
    """

    def __init__(
        self,
        *,
        catalog: Catalog,
        screens: ScreenLoader,
        sequencer: ShuffleSequencer | None = None,
        rng: random.Random | None = None,
        seed: int | str | None = None,
        starting_lives: int = DEFAULT_STARTING_LIVES,
        screen_names: ScreenNames | None = None,
    ) -> None:
        if starting_lives < 1:
            raise ValueError("starting_lives must be >= 1")
        if sequencer is not None and sequencer.catalog is not catalog:
            raise ValueError("sequencer must be built over the same catalog")

        self._catalog = catalog
        self._screens = screens
        self._names = screen_names or ScreenNames()
        self._sequencer = sequencer or ShuffleSequencer(catalog, rng=rng, seed=seed)
        self._starting_lives = starting_lives

        self._state = SessionState(lives=starting_lives)
        self._fsm = SessionFSM(self._state)
        self._timer = RoundTimer(on_outcome=self._on_round_outcome)
        self._pending: RoundOutcome | None = None
        self._lock = asyncio.Lock()

        self.history: list[SessionEvent] = []
        self._listeners: list[SessionListener] = []

        if len(catalog) == 0:
            logger.error("Microgame catalog is empty; start_game() will fail")

    # ---- observers ----

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def sequencer(self) -> ShuffleSequencer:
        return self._sequencer

    @property
    def timer(self) -> RoundTimer:
        return self._timer

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def current(self) -> MicrogameDescriptor | None:
        return self._state.current

    @property
    def lives(self) -> int:
        return self._state.lives

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def active(self) -> bool:
        return self._state.active

    @property
    def screen_names(self) -> ScreenNames:
        return self._names

    def snapshot(self) -> SessionSnapshot:
        remaining = self._timer.remaining if self._state.phase is SessionPhase.microgame else None
        return SessionSnapshot.of(self._state, time_remaining=remaining)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    # ---- session control ----

    async def start_game(self) -> None:
        async with self._lock:
            await self._start()

    async def restart_game(self) -> None:
        async with self._lock:
            self._state.active = False
            await self._start()

    async def quit_game(self) -> None:
        async with self._lock:
            self._discard_round()
            self._state.active = False
            self._state.current = None
            self._send("quit")
            self._emit("SESSION_QUIT", {"score": self._state.score})
            await self._screens.load_screen(self._names.startup)

    async def game_over(self) -> None:
        async with self._lock:
            if self._state.phase is SessionPhase.startup:
                logger.info("Ignoring game_over(): no session has been started")
                return
            await self._game_over()

    # ---- round flow ----

    async def load_next_microgame(self, time_limit: float | None = None) -> None:
        """Command screen finished: load the current microgame and start its timer."""

        if time_limit is not None and time_limit <= 0:
            raise ValueError("time_limit must be > 0")

        async with self._lock:
            if not self._state.active:
                logger.info("Ignoring load_next_microgame(): session is not active")
                return
            if self._state.phase is not SessionPhase.command:
                logger.warning("Ignoring load_next_microgame() in phase %s", self._state.phase.value)
                return

            descriptor = self._state.current
            if descriptor is None:
                err = MissingDescriptorError("No current microgame set")
                logger.error("%s; ending session", err)
                await self._game_over()
                return

            self._send("play_round")
            self._state.round_id += 1
            limit = time_limit if time_limit is not None else descriptor.time_limit
            self._emit("ROUND_STARTED", {"microgame_id": descriptor.id, "time_limit": limit})

            try:
                await self._screens.load_screen(descriptor.scene_name)
            except Exception:
                logger.exception("Failed to load microgame screen %s; ending session", descriptor.scene_name)
                await self._game_over()
                return
            self._timer.start(limit)

    async def game_won(self) -> None:
        async with self._lock:
            await self._report(RoundOutcome.win)

    async def game_lost(self) -> None:
        async with self._lock:
            await self._report(RoundOutcome.lose)

    async def tick(self, delta: float) -> float:
        """Advance the round clock by `delta` seconds; returns the time left."""

        async with self._lock:
            if not self._state.active or self._state.phase is not SessionPhase.microgame:
                return self._timer.remaining
            remaining = self._timer.tick(delta)
            await self._apply_pending()
            return remaining

    def add_bonus_time(self, seconds: float) -> float:
        if self._state.phase is not SessionPhase.microgame:
            return self._timer.remaining
        return self._timer.add_bonus_time(seconds)

    # ---- internals ----

    async def _start(self) -> None:
        if self._state.active:
            logger.debug("Ignoring start_game(): session already active")
            return

        try:
            self._sequencer.reshuffle()
        except ConfigurationError:
            logger.error("Cannot start session: microgame catalog is empty")
            await self._screens.load_screen(self._names.startup)
            raise

        self._discard_round()
        self._state.reset(starting_lives=self._starting_lives)
        self._state.active = True
        self._emit("SESSION_STARTED", {"lives": self._state.lives, "microgames": len(self._catalog)})
        await self._show_command("begin")

    async def _show_command(self, event: str) -> None:
        self._send(event)
        descriptor = self._sequencer.current()
        self._state.current = descriptor
        self._emit("COMMAND_SHOWN", {"microgame_id": descriptor.id, "command_text": descriptor.command_text})
        await self._screens.load_screen(self._names.command)

    async def _report(self, outcome: RoundOutcome) -> None:
        if not self._state.active:
            logger.info("Dropping %s signal: session is not active", outcome.value)
            return

        if self._state.phase is SessionPhase.microgame:
            latched = self._timer.report_win() if outcome is RoundOutcome.win else self._timer.report_lose()
            if not latched:
                return
        elif self._timer.has_ended:
            # The previous round already latched and no new round has started.
            logger.debug("Dropping late %s signal: round %d already resolved", outcome.value, self._state.round_id)
            return
        else:
            self._pending = outcome

        await self._apply_pending()

    def _on_round_outcome(self, outcome: RoundOutcome) -> None:
        self._pending = outcome

    async def _apply_pending(self) -> None:
        outcome, self._pending = self._pending, None
        if outcome is None:
            return

        if outcome is RoundOutcome.win:
            await self._round_won()
        else:
            await self._round_lost(outcome)

    async def _round_won(self) -> None:
        self._state.score += 1
        logger.info("Round won! Score: %d, Lives: %d", self._state.score, self._state.lives)
        self._emit("ROUND_WON", {"score": self._state.score})
        self._sequencer.advance()
        await self._show_command("next_command")

    async def _round_lost(self, outcome: RoundOutcome) -> None:
        self._state.lives = max(0, self._state.lives - 1)
        logger.info("Round lost (%s). Lives remaining: %d", outcome.value, self._state.lives)
        self._emit(
            "ROUND_TIMED_OUT" if outcome is RoundOutcome.timeout else "ROUND_LOST",
            {"lives": self._state.lives},
        )

        if self._state.lives == 0:
            await self._game_over()
            return

        self._sequencer.advance()
        await self._show_command("next_command")

    async def _game_over(self) -> None:
        self._discard_round()
        self._state.active = False
        self._state.current = None
        self._send("end")
        logger.info("Game over! Final score: %d", self._state.score)
        self._emit("GAME_OVER", {"score": self._state.score})
        await self._screens.load_screen(self._names.game_over)

    def _discard_round(self) -> None:
        self._timer.cancel()
        self._pending = None

    def _send(self, event: str) -> None:
        self._fsm.send(event)
        self._fsm.sync_phase_to_model()

    def _emit(self, type: EventType, payload: dict[str, Any]) -> None:
        event = SessionEvent.now(type=type, round_id=self._state.round_id, payload=payload)
        self.history.append(event)
        for listener in self._listeners:
            listener(event)
