from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)


class RoundOutcome(StrEnum):
    win = "win"
    lose = "lose"
    timeout = "timeout"

    @property
    def is_loss(self) -> bool:
        return self is not RoundOutcome.win


OutcomeListener = Callable[[RoundOutcome], None]


class RoundTimer:
    """Countdown for a single round with a one-shot outcome latch.

    The host steps the timer with `tick(delta)` once per frame. Whichever of
    win, lose or timeout arrives first is latched and reported to
    `on_outcome`; everything after it is ignored until the next `start()`.
    """

    def __init__(self, *, on_outcome: OutcomeListener | None = None) -> None:
        self._on_outcome = on_outcome
        self._limit = 0.0
        self._remaining = 0.0
        self._started = False
        self._running = False
        self._outcome: RoundOutcome | None = None

    @property
    def limit(self) -> float:
        return self._limit

    @property
    def remaining(self) -> float:
        return max(0.0, self._remaining)

    @property
    def outcome(self) -> RoundOutcome | None:
        return self._outcome

    @property
    def has_ended(self) -> bool:
        return self._outcome is not None

    @property
    def is_running(self) -> bool:
        return self._started and self._running and self._outcome is None

    @property
    def progress(self) -> float:
        """Fraction of the limit already used, clamped at 0 while bonus time is banked."""
        if self._limit <= 0:
            return 1.0
        return max(0.0, (self._limit - self.remaining) / self._limit)

    @property
    def remaining_normalized(self) -> float:
        if self._limit <= 0:
            return 0.0
        return self.remaining / self._limit

    def start(self, limit: float) -> None:
        if limit <= 0:
            raise ValueError("limit must be > 0")
        self._limit = float(limit)
        self._remaining = float(limit)
        self._started = True
        self._running = True
        self._outcome = None
        logger.debug("Round timer started with %.2fs limit", self._limit)

    def tick(self, delta: float) -> float:
        if delta < 0:
            raise ValueError("delta must be >= 0")
        if not self.is_running:
            return self.remaining

        self._remaining = max(0.0, self._remaining - delta)
        if self._remaining <= 0.0:
            self._latch(RoundOutcome.timeout)
        return self._remaining

    def report_win(self) -> bool:
        return self._latch(RoundOutcome.win)

    def report_lose(self) -> bool:
        return self._latch(RoundOutcome.lose)

    def add_bonus_time(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        if self._started and self._outcome is None:
            self._remaining = min(self._remaining + seconds, self._limit * 2.0)
            logger.debug("Added %.2fs bonus time (remaining %.2fs)", seconds, self._remaining)
        return self.remaining

    def pause(self) -> None:
        self._running = False

    def resume(self) -> None:
        self._running = True

    def set_running(self, running: bool) -> None:
        if running:
            self.resume()
        else:
            self.pause()

    def cancel(self) -> None:
        """Drop the current round without reporting an outcome."""
        self._started = False
        self._running = False
        self._outcome = None
        self._remaining = 0.0

    def _latch(self, outcome: RoundOutcome) -> bool:
        if not self._started:
            return False
        if self._outcome is not None:
            logger.debug("Ignoring duplicate %s outcome (already %s)", outcome.value, self._outcome.value)
            return False

        self._outcome = outcome
        self._running = False
        if outcome is RoundOutcome.timeout:
            self._remaining = 0.0
        if self._on_outcome is not None:
            self._on_outcome(outcome)
        return True
