from __future__ import annotations

import logging

from fastapi import FastAPI

from microgames.catalog import load_catalog_csv
from microgames.config import Settings
from microgames.screens import BroadcastScreenLoader, ScreenLoader
from microgames.session import SessionOrchestrator
from microgames.websocket_hub import SessionWebSocketHub

logger = logging.getLogger(__name__)


def build_session(*, settings: Settings, screens: ScreenLoader) -> SessionOrchestrator:
    """Load the catalog and wire up a session. Catalog problems raise ConfigurationError."""

    catalog = load_catalog_csv(settings.catalog_path)
    logger.info("Loaded %d microgames from %s", len(catalog), settings.catalog_path)
    return SessionOrchestrator(
        catalog=catalog,
        screens=screens,
        seed=settings.seed,
        starting_lives=settings.starting_lives,
    )


def init_session(app: FastAPI, *, settings: Settings) -> SessionOrchestrator:
    """Attach settings, the WebSocket hub and one session to the app."""

    hub = SessionWebSocketHub()
    session = build_session(settings=settings, screens=BroadcastScreenLoader(hub))
    app.state.settings = settings
    app.state.hub = hub
    app.state.session = session
    return session
