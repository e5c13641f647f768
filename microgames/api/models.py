from __future__ import annotations

from pydantic import BaseModel, Field

from microgames.catalog import MAX_TIME_LIMIT, MicrogameDescriptor
from microgames.core.state import SessionPhase, SessionSnapshot


class MicrogameView(BaseModel):
    id: str
    scene_name: str
    command_text: str
    time_limit: float
    unlocked: bool

    @staticmethod
    def of(d: MicrogameDescriptor) -> "MicrogameView":
        return MicrogameView(
            id=d.id,
            scene_name=d.scene_name,
            command_text=d.command_text,
            time_limit=d.time_limit,
            unlocked=d.unlocked,
        )


class SessionView(BaseModel):
    phase: SessionPhase
    lives: int
    score: int
    active: bool
    round_id: int
    current: MicrogameView | None = None
    # Only set while a microgame round is on screen.
    time_remaining: float | None = None

    @staticmethod
    def of(s: SessionSnapshot) -> "SessionView":
        return SessionView(
            phase=s.phase,
            lives=s.lives,
            score=s.score,
            active=s.active,
            round_id=s.round_id,
            current=MicrogameView.of(s.current) if s.current is not None else None,
            time_remaining=s.time_remaining,
        )


class LoadNextRequest(BaseModel):
    # Overrides the microgame's own limit for this round.
    time_limit: float | None = Field(default=None, gt=0, le=2 * MAX_TIME_LIMIT)


class TickRequest(BaseModel):
    delta: float = Field(..., ge=0)


class BonusTimeRequest(BaseModel):
    seconds: float = Field(..., ge=0)


class TickResponse(BaseModel):
    time_remaining: float
    session: SessionView


class HighScoreResponse(BaseModel):
    high_score: int
    is_new: bool = False


class CatalogResponse(BaseModel):
    microgames: list[MicrogameView]
