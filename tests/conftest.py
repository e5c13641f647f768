from __future__ import annotations

import os
import random
from collections.abc import Generator
from pathlib import Path

import pytest

from microgames.catalog import Catalog, MicrogameDescriptor, load_catalog_csv
from microgames.screens import RecordingScreenLoader
from microgames.session import SessionOrchestrator

TEST_ROOT = Path(__file__).resolve().parent


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs.

    In CI, we *don't* auto-load `.env` by default so local overrides can't leak
    into the suite. Opt-in with: MICROGAMES_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("MICROGAMES_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = TEST_ROOT.parent / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(scope="session", autouse=True)
def _point_catalog_at_test_fixtures() -> Generator[None, None, None]:
    """Keep tests hermetic: the app loads `tests/catalog/microgames.csv`, never the real catalog."""

    previous = {k: os.environ.get(k) for k in ("MICROGAMES_CATALOG_PATH", "MICROGAMES_SEED", "MICROGAMES_TICK_HZ")}
    os.environ["MICROGAMES_CATALOG_PATH"] = str(TEST_ROOT / "catalog" / "microgames.csv")
    os.environ["MICROGAMES_SEED"] = "7"
    os.environ["MICROGAMES_TICK_HZ"] = "0"
    yield
    for k, v in previous.items():
        if v is None:
            os.environ.pop(k, None)
        else:
            os.environ[k] = v


def _make_catalog(*specs: tuple[str, float]) -> Catalog:
    return Catalog.from_descriptors(
        [MicrogameDescriptor(id=i, scene_name=f"{i.title()}Scene", command_text=f"{i}!", time_limit=t) for i, t in specs]
    )


@pytest.fixture()
def make_catalog():
    """Build an in-memory catalog from (id, time_limit) pairs."""
    return _make_catalog


@pytest.fixture()
def catalog() -> Catalog:
    return load_catalog_csv(TEST_ROOT / "catalog" / "microgames.csv")


@pytest.fixture()
def screens() -> RecordingScreenLoader:
    return RecordingScreenLoader()


@pytest.fixture()
def session(catalog: Catalog, screens: RecordingScreenLoader) -> SessionOrchestrator:
    return SessionOrchestrator(catalog=catalog, screens=screens, rng=random.Random(1234))


@pytest.fixture()
def client_and_redis():
    """FastAPI TestClient wired to fakeredis for high score storage."""

    import fakeredis
    from fastapi.testclient import TestClient

    from microgames.api.deps import get_redis
    from microgames.main import app

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
