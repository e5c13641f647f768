from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from microgames.core.state import DEFAULT_STARTING_LIVES
from microgames.score_store import HIGH_SCORE_KEY

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class Settings:
    catalog_path: Path
    starting_lives: int = DEFAULT_STARTING_LIVES
    # Seeds the shuffle; None means a fresh random order every run.
    seed: int | None = None
    high_score_key: str = HIGH_SCORE_KEY
    log_level: str = "INFO"
    # Server-side clock rate; 0 leaves ticking to the presentation client.
    tick_hz: float = 0.0


def _int_from_env(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer (got {raw!r})") from e


def settings_from_env() -> Settings:
    catalog_path = os.environ.get("MICROGAMES_CATALOG_PATH")
    tick_hz = os.environ.get("MICROGAMES_TICK_HZ", "0")
    try:
        hz = float(tick_hz)
    except ValueError as e:
        raise RuntimeError(f"MICROGAMES_TICK_HZ must be a number (got {tick_hz!r})") from e
    if hz < 0:
        raise RuntimeError(f"MICROGAMES_TICK_HZ must be >= 0 (got {tick_hz!r})")

    lives = _int_from_env("MICROGAMES_STARTING_LIVES", None)

    return Settings(
        catalog_path=Path(catalog_path) if catalog_path else PROJECT_ROOT / "catalog" / "microgames.csv",
        starting_lives=DEFAULT_STARTING_LIVES if lives is None else lives,
        seed=_int_from_env("MICROGAMES_SEED", None),
        high_score_key=os.environ.get("MICROGAMES_HIGH_SCORE_KEY", HIGH_SCORE_KEY),
        log_level=os.environ.get("MICROGAMES_LOG_LEVEL", "INFO").upper(),
        tick_hz=hz,
    )
