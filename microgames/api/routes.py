from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from microgames.api.deps import get_hub, get_score_store, get_session
from microgames.api.models import (
    BonusTimeRequest,
    CatalogResponse,
    HighScoreResponse,
    LoadNextRequest,
    MicrogameView,
    SessionView,
    TickRequest,
    TickResponse,
)
from microgames.errors import ConfigurationError
from microgames.score_store import RedisScoreStore, record_final_score
from microgames.session import SessionOrchestrator
from microgames.websocket_hub import SessionWebSocketHub

router = APIRouter()


async def _updated(session: SessionOrchestrator, hub: SessionWebSocketHub) -> SessionView:
    view = SessionView.of(session.snapshot())
    await hub.broadcast({"type": "session_updated", "session": view.model_dump(mode="json")})
    return view


@router.websocket("/ws/session")
async def session_updates_ws(websocket: WebSocket) -> None:
    hub: SessionWebSocketHub = websocket.app.state.hub
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/catalog", response_model=CatalogResponse)
async def catalog_route(session: SessionOrchestrator = Depends(get_session)) -> CatalogResponse:
    return CatalogResponse(microgames=[MicrogameView.of(d) for d in session.catalog])


@router.get("/session", response_model=SessionView)
async def get_session_route(session: SessionOrchestrator = Depends(get_session)) -> SessionView:
    return SessionView.of(session.snapshot())


@router.post("/session/start", response_model=SessionView)
async def start_route(
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    try:
        await session.start_game()
    except ConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return await _updated(session, hub)


@router.post("/session/restart", response_model=SessionView)
async def restart_route(
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    try:
        await session.restart_game()
    except ConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return await _updated(session, hub)


@router.post("/session/quit", response_model=SessionView)
async def quit_route(
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    await session.quit_game()
    return await _updated(session, hub)


@router.post("/session/load_next", response_model=SessionView)
async def load_next_route(
    payload: LoadNextRequest | None = None,
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    time_limit = payload.time_limit if payload is not None else None
    await session.load_next_microgame(time_limit=time_limit)
    return await _updated(session, hub)


@router.post("/session/won", response_model=SessionView)
async def won_route(
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    await session.game_won()
    return await _updated(session, hub)


@router.post("/session/lost", response_model=SessionView)
async def lost_route(
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> SessionView:
    await session.game_lost()
    return await _updated(session, hub)


@router.post("/session/tick", response_model=TickResponse)
async def tick_route(
    payload: TickRequest,
    session: SessionOrchestrator = Depends(get_session),
    hub: SessionWebSocketHub = Depends(get_hub),
) -> TickResponse:
    phase_before = session.phase
    remaining = await session.tick(payload.delta)
    if session.phase != phase_before:
        view = await _updated(session, hub)
    else:
        view = SessionView.of(session.snapshot())
    return TickResponse(time_remaining=remaining, session=view)


@router.post("/session/bonus_time", response_model=TickResponse)
async def bonus_time_route(
    payload: BonusTimeRequest,
    session: SessionOrchestrator = Depends(get_session),
) -> TickResponse:
    remaining = session.add_bonus_time(payload.seconds)
    return TickResponse(time_remaining=remaining, session=SessionView.of(session.snapshot()))


@router.get("/high_score", response_model=HighScoreResponse)
async def high_score_route(store: RedisScoreStore = Depends(get_score_store)) -> HighScoreResponse:
    return HighScoreResponse(high_score=store.load())


@router.post("/high_score/record", response_model=HighScoreResponse)
async def record_high_score_route(
    session: SessionOrchestrator = Depends(get_session),
    store: RedisScoreStore = Depends(get_score_store),
) -> HighScoreResponse:
    """Game-over screen helper: keep the session's score if it beats the stored best."""

    result = record_final_score(store=store, score=session.score)
    return HighScoreResponse(high_score=result.high_score, is_new=result.is_new)
