from datetime import datetime, timedelta

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.application.services.code_hasher import CodeHasher
from app.database import build_engine
from app.db import models  # noqa: F401  (registers tables)
from app.db.models import User, USER_STATUS_ACTIVE, USER_STATUS_SUSPENDED


class FakeClock:
    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fast_hasher():
    # lowest bcrypt cost keeps the suite quick
    return CodeHasher(rounds=4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    # separate sessions need separate connections to race each other
    engine = build_engine(f"sqlite:///{tmp_path / 'otp.db'}")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(User(id="user-1", phone_number="+15551234567", name="Alice", status=USER_STATUS_ACTIVE))
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def seed_users(engine):
    with Session(engine) as session:
        alice = User(id="user-1", phone_number="+15551234567", name="Alice", status=USER_STATUS_ACTIVE)
        bob = User(id="user-2", phone_number="+256700000001", name="Bob", status=USER_STATUS_SUSPENDED)
        session.add(alice)
        session.add(bob)
        session.commit()
    return {"active": "+15551234567", "suspended": "+256700000001"}
