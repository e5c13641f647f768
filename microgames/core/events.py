from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "SESSION_STARTED",
    "COMMAND_SHOWN",
    "ROUND_STARTED",
    "ROUND_WON",
    "ROUND_LOST",
    "ROUND_TIMED_OUT",
    "GAME_OVER",
    "SESSION_QUIT",
]


@dataclass(frozen=True, slots=True)
class SessionEvent:
    type: EventType
    round_id: int
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, round_id: int, payload: dict[str, Any]) -> "SessionEvent":
        return SessionEvent(type=type, round_id=round_id, payload=payload, ts=datetime.now(timezone.utc))
