"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat engine/clock/override boilerplate.

Ledger and route tests run against a file-backed SQLite database per test;
the guarded UPDATEs behave the same there as on Postgres.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from api.deps import get_app_config, get_db, get_ledger
from api.main import app
from core.config import AppConfig
from db.ledger import UsageLedger
from db.models import Base
from db.session import make_engine, make_session_factory

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FROZEN_NOW: datetime = datetime(2026, 3, 10, 12, 0, 0, tzinfo=UTC)
"""Fixed 'now' for ledger tests: a Tuesday at noon UTC."""


# ---------------------------------------------------------------------------
# Fake clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Settable clock: call it for the current time, ``advance`` to move on."""

    def __init__(self, now: datetime = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    eng = make_engine(f"sqlite:///{tmp_path / 'chord_dice.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture()
def session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    with session_factory() as s:
        yield s


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ledger(session: Session, clock: FakeClock) -> UsageLedger:
    return UsageLedger(session, clock=clock)


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture()
def api_client(
    session: Session, ledger: UsageLedger, app_config: AppConfig
) -> Generator[TestClient, None, None]:
    """``TestClient`` wired to the per-test SQLite session and frozen-clock ledger."""

    def _override_db() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_app_config] = lambda: app_config

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
