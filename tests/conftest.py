import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from kebab.config import Settings
from kebab.db import make_engine, make_session_factory
from kebab.main import create_app
from kebab.storage import BoardStore


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def app(engine):
    return create_app(Settings(DATABASE_URL="sqlite://"), engine=engine)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def store(app):
    session = app.state.session_factory()
    yield BoardStore(session)
    session.close()


@pytest.fixture
def count_rows(engine):
    """Count the rows of a mapped table through a fresh session."""

    def count(model) -> int:
        with make_session_factory(engine)() as session:
            return session.scalar(select(func.count()).select_from(model))

    return count
