import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from kvstore import JsonStore, Settings, SqlStore

# Long enough that the background job never fires during a test; tests drive
# the watcher by calling check() themselves.
SLOW_POLL = 3600.0


def write_external(path, text: str) -> None:
    """Rewrite the file the way another process would."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


@pytest.fixture()
def settings():
    return Settings(poll_interval=SLOW_POLL)


@pytest.fixture()
def store_path(tmp_path):
    return str(tmp_path / "data" / "store.json")


@pytest.fixture()
def store(store_path, settings):
    s = JsonStore(store_path, settings=settings)
    yield s
    s.close()


@pytest.fixture()
def sql_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture()
def sql_store(sql_engine, settings):
    s = SqlStore(engine=sql_engine, settings=settings)
    yield s
    s.close()


@pytest.fixture()
def read_file():
    def _read(path):
        assert os.path.exists(path)
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    return _read
