from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from microgames.catalog import MicrogameDescriptor

DEFAULT_STARTING_LIVES = 3


class SessionPhase(StrEnum):
    startup = "startup"
    command = "command"
    microgame = "microgame"
    game_over = "game_over"


@dataclass(slots=True)
class SessionState:
    """Mutable per-session bookkeeping owned by the orchestrator."""

    lives: int = DEFAULT_STARTING_LIVES
    score: int = 0
    phase: SessionPhase = SessionPhase.startup
    # Only meaningful during command/microgame phases.
    current: MicrogameDescriptor | None = None
    active: bool = False
    round_id: int = 0

    def reset(self, *, starting_lives: int) -> None:
        self.lives = starting_lives
        self.score = 0
        self.current = None
        self.round_id = 0


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    lives: int
    score: int
    phase: SessionPhase
    current: MicrogameDescriptor | None
    active: bool
    round_id: int
    time_remaining: float | None

    @staticmethod
    def of(state: SessionState, *, time_remaining: float | None = None) -> "SessionSnapshot":
        return SessionSnapshot(
            lives=state.lives,
            score=state.score,
            phase=state.phase,
            current=state.current,
            active=state.active,
            round_id=state.round_id,
            time_remaining=time_remaining,
        )
