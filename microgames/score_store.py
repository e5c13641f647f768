from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import redis

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "microgames:high_score"


class ScoreStore(Protocol):
    def load(self) -> int:  # pragma: no cover
        ...

    def save(self, score: int) -> None:  # pragma: no cover
        ...


class RedisScoreStore:
    """Persists the high score as a single integer under one Redis key."""

    def __init__(self, *, r: redis.Redis, key: str = HIGH_SCORE_KEY) -> None:
        self._r = r
        self.key = key

    def load(self) -> int:
        raw = self._r.get(self.key)
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer high score %r under %s", raw, self.key)
            return 0

    def save(self, score: int) -> None:
        if score < 0:
            raise ValueError("score must be >= 0")
        self._r.set(self.key, str(score))


class MemoryScoreStore:
    def __init__(self, initial: int = 0) -> None:
        self._value = initial

    def load(self) -> int:
        return self._value

    def save(self, score: int) -> None:
        if score < 0:
            raise ValueError("score must be >= 0")
        self._value = score


@dataclass(frozen=True, slots=True)
class HighScoreResult:
    high_score: int
    is_new: bool


def record_final_score(*, store: ScoreStore, score: int) -> HighScoreResult:
    """Compare a finished session's score against the stored best and keep the higher one."""

    best = store.load()
    if score > best:
        store.save(score)
        logger.info("New high score achieved: %d", score)
        return HighScoreResult(high_score=score, is_new=True)
    return HighScoreResult(high_score=best, is_new=False)
