from fastapi import FastAPI
import asyncio
import logging

from microgames.api.routes import router
from microgames.clock import run_clock
from microgames.config import settings_from_env
from microgames.startup import init_session

app = FastAPI(title="microgames", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    settings = settings_from_env()
    logging.getLogger().setLevel(settings.log_level)
    session = init_session(app, settings=settings)

    app.state.clock_stop = asyncio.Event()
    app.state.clock_task = None
    if settings.tick_hz > 0:
        app.state.clock_task = asyncio.create_task(
            run_clock(session=session, hz=settings.tick_hz, stop=app.state.clock_stop)
        )


@app.on_event("shutdown")
async def _shutdown() -> None:
    app.state.clock_stop.set()
    if app.state.clock_task is not None:
        await app.state.clock_task


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "microgames", "version": "0.1.0"}
