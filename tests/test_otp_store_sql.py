from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from app.application.services.otp_lifecycle import OtpLifecycle, VerificationFailure
from app.db.models import OtpCode
from app.exceptions import StorageError
from app.infrastructure.persistence.sqlalchemy.repositories.otp_store_sql import SqlOtpStore


@pytest.fixture
def store(session, seed_users, clock):
    return SqlOtpStore(session, clock=clock)


def test_create_and_find_active(store, clock):
    created = store.create("user-1", "hash-1", clock.now + timedelta(minutes=5), "login")
    assert created.id is not None
    assert created.used_at is None
    assert created.created_at == clock.now

    found = store.find_active("user-1")
    assert found == created


def test_find_active_ignores_expired_and_used(store, clock):
    store.create("user-1", "expired", clock.now - timedelta(seconds=1), "login")
    used = store.create("user-1", "used", clock.now + timedelta(minutes=5), "login")
    store.mark_used(used.id)
    assert store.find_active("user-1") is None


def test_find_active_prefers_newest_then_highest_id(store, clock):
    expires = clock.now + timedelta(minutes=5)
    store.create("user-1", "older", expires, "login")
    clock.advance(seconds=1)
    tie_a = store.create("user-1", "tie-a", expires, "login")
    tie_b = store.create("user-1", "tie-b", expires, "login")
    assert tie_b.id > tie_a.id
    assert store.find_active("user-1").code_hash == "tie-b"


def test_invalidate_active_retires_every_open_row(store, session, clock):
    expires = clock.now + timedelta(minutes=5)
    store.create("user-1", "a", expires, "login")
    store.create("user-1", "b", expires, "login")
    store.create("user-2", "other-user", expires, "login")

    assert store.invalidate_active("user-1") == 2
    assert store.find_active("user-1") is None
    assert store.find_active("user-2") is not None

    rows = session.exec(select(OtpCode).where(OtpCode.user_id == "user-1")).all()
    assert all(r.used_at == clock.now for r in rows)


def test_mark_used_is_idempotent(store, session, clock):
    rec = store.create("user-1", "a", clock.now + timedelta(minutes=5), "login")
    assert store.mark_used(rec.id) is True
    first_used_at = session.get(OtpCode, rec.id).used_at

    clock.advance(seconds=30)
    assert store.mark_used(rec.id) is False
    assert store.mark_used(999_999) is False
    assert session.get(OtpCode, rec.id).used_at == first_used_at


def test_atomic_rolls_back_on_error(store, clock):
    expires = clock.now + timedelta(minutes=5)
    original = store.create("user-1", "a", expires, "login")

    with pytest.raises(RuntimeError):
        with store.atomic():
            store.invalidate_active("user-1")
            store.create("user-1", "b", expires, "login")
            raise RuntimeError("abandoned mid-flight")

    assert store.find_active("user-1").id == original.id


def test_database_errors_surface_as_storage_error(store, session, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "exec", boom)
    with pytest.raises(StorageError):
        store.find_active("user-1")


def test_lifecycle_over_sql_store(store, fast_hasher, clock):
    lifecycle = OtpLifecycle(store=store, hasher=fast_hasher, clock=clock)
    p1 = lifecycle.request_code("user-1")
    clock.advance(seconds=5)
    p2 = lifecycle.request_code("user-1")

    if p1 != p2:
        assert lifecycle.verify_code("user-1", p1).failure == VerificationFailure.MISMATCH
    assert lifecycle.verify_code("user-1", p2).success
    assert lifecycle.verify_code("user-1", p2).failure == VerificationFailure.NO_ACTIVE_CODE


def test_only_one_session_can_consume_a_code(file_engine, clock):
    with Session(file_engine) as first, Session(file_engine) as second:
        store_a = SqlOtpStore(first, clock=clock)
        store_b = SqlOtpStore(second, clock=clock)
        rec = store_a.create("user-1", "a", clock.now + timedelta(minutes=5), "login")

        # both workers see the code as active before either consumes it
        assert store_a.find_active("user-1").id == rec.id
        assert store_b.find_active("user-1").id == rec.id

        with store_a.atomic():
            assert store_a.mark_used(rec.id) is True
        with store_b.atomic():
            assert store_b.mark_used(rec.id) is False

        assert store_b.find_active("user-1") is None
        assert second.get(OtpCode, rec.id).used_at == clock.now
