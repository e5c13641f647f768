from __future__ import annotations

from collections.abc import Generator

import redis
from fastapi import Depends, Request

from microgames.infra.redis_client import create_redis
from microgames.score_store import RedisScoreStore
from microgames.session import SessionOrchestrator
from microgames.websocket_hub import SessionWebSocketHub


def get_redis() -> Generator[redis.Redis, None, None]:
    """One high-score connection per request, closed when the response is sent."""

    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_session(request: Request) -> SessionOrchestrator:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise RuntimeError("Session not initialized. Call init_session() at startup.")
    return session


def get_hub(request: Request) -> SessionWebSocketHub:
    return request.app.state.hub


def get_score_store(request: Request, r: redis.Redis = Depends(get_redis)) -> RedisScoreStore:
    return RedisScoreStore(r=r, key=request.app.state.settings.high_score_key)
