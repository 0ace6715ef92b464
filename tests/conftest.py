import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dsa_tracker import models  # noqa: F401
from dsa_tracker.database import Base
from dsa_tracker.schemas.stats import PlatformStatistics
from dsa_tracker.schemas.user import UserContext
from dsa_tracker.services.external.base import PlatformAdapter
from dsa_tracker.services.platform_service import PlatformService


class StubAdapter(PlatformAdapter):
    """Adapter returning a canned result (or raising) and recording usernames."""

    def __init__(self, platform, result=None, error=None, implemented=True, on_fetch=None):
        super().__init__()
        self.platform = platform
        self.result = result
        self.error = error
        self.implemented = implemented
        self.on_fetch = on_fetch
        self.calls = []

    async def fetch_user_data(self, username):
        self.calls.append(username)
        if self.on_fetch:
            self.on_fetch(username)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def user_ctx():
    return UserContext(external_id="user_2abc", email="coder@example.com", name="Coder")


@pytest.fixture
def stats_factory():
    def make(total=16, easy=10, medium=5, hard=1, **extra):
        return PlatformStatistics(
            total_solved=total, easy_solved=easy, medium_solved=medium, hard_solved=hard, **extra
        )
    return make


@pytest.fixture
def make_service():
    def make(**adapters):
        stubs = [
            adapter if isinstance(adapter, StubAdapter) else StubAdapter(name, result=adapter)
            for name, adapter in adapters.items()
        ]
        return PlatformService(stubs)
    return make
