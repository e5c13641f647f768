from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from microgames.websocket_hub import SessionWebSocketHub

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScreenNames:
    startup: str = "StartupScene"
    command: str = "CommandScene"
    game_over: str = "GameOverScene"


class ScreenLoader(Protocol):
    """Presents a named screen; the orchestrator awaits completion before proceeding."""

    async def load_screen(self, name: str) -> None:  # pragma: no cover
        ...


class LoggingScreenLoader:
    """Completes immediately. Handy for headless hosts."""

    async def load_screen(self, name: str) -> None:
        logger.info("Loaded screen: %s", name)


@dataclass(slots=True)
class RecordingScreenLoader:
    """Remembers every requested screen, in order."""

    loaded: list[str] = field(default_factory=list)

    async def load_screen(self, name: str) -> None:
        self.loaded.append(name)

    @property
    def last(self) -> str | None:
        return self.loaded[-1] if self.loaded else None


class BroadcastScreenLoader:
    """Asks connected presentation clients to show a screen over WebSocket."""

    def __init__(self, hub: SessionWebSocketHub) -> None:
        self._hub = hub

    async def load_screen(self, name: str) -> None:
        await self._hub.broadcast({"type": "load_screen", "name": name})
        logger.debug("Requested screen %s from %d client(s)", name, self._hub.connection_count)
