import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from mood_journal_api.app.core.db import get_connection, get_db, init_db
from mood_journal_api.app.core.security import create_access_token
from mood_journal_api.app.main import create_app
from mood_journal_api.app.schemas.user import CurrentUser


def pytest_configure(config):
    config.addinivalue_line("markers", "api: tests going through the HTTP layer")


class FakeClock:
    """Clock that moves forward by ``step`` on every call."""

    def __init__(self, start=datetime(2025, 1, 1, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        self.current += self.step
        return self.current


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def conn():
    connection = get_connection(":memory:")
    init_db(connection, seed=False)
    yield connection
    connection.close()


@pytest.fixture()
def seeded_conn():
    connection = get_connection(":memory:")
    init_db(connection, seed=True)
    yield connection
    connection.close()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def alice():
    return CurrentUser(id="user-alice")


@pytest.fixture()
def bob():
    return CurrentUser(id="user-bob")


@pytest.fixture()
def client(conn):
    app = create_app(initialise_database=False)

    def override_get_db():
        yield conn

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture()
def alice_headers(alice):
    return auth_headers(alice.id)


@pytest.fixture()
def bob_headers(bob):
    return auth_headers(bob.id)
