"""
Unit tests for the session store: create, resolve, expiry, revoke, sweep.
"""
import asyncio
from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.security import get_password_hash
from app.main import app
from app.models.account import Pharmacy, Role, User
from app.models.auth_session import AuthSession
from app.services.session_store import SessionStore
from app.services import session_sweeper


def _pharmacy(db, username="p1"):
    account = Pharmacy(
        username=username,
        hashed_password=get_password_hash("secret123"),
        name="Central",
        location="Oran",
        phone_number="0555",
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def _consumer(db, username="u1"):
    account = User(username=username, hashed_password=get_password_hash("secret123"))
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def test_create_then_resolve_returns_snapshot(db):
    account = _pharmacy(db)
    token = SessionStore(db).create(account, Role.PHARMACY)

    identity = SessionStore(db).resolve(token)

    assert identity is not None
    assert identity.id == account.id
    assert identity.username == "p1"
    assert identity.role == Role.PHARMACY
    assert identity.name == "Central"


def test_consumer_snapshot_has_no_name(db):
    account = _consumer(db)
    token = SessionStore(db).create(account, Role.USER)
    assert SessionStore(db).resolve(token).name is None


def test_tokens_are_unique_and_opaque(db):
    account = _consumer(db)
    store = SessionStore(db)
    tokens = {store.create(account, Role.USER) for _ in range(5)}
    assert len(tokens) == 5
    assert all(str(account.id) != t and len(t) >= 32 for t in tokens)


def test_session_expires_after_ttl(db):
    account = _consumer(db)
    store = SessionStore(db)
    assert store.ttl == timedelta(hours=24)

    token = store.create(account, Role.USER)
    row = db.get(AuthSession, token)
    assert row.expires_at - row.created_at == timedelta(hours=24)


def test_unknown_or_missing_token_resolves_to_none(db):
    store = SessionStore(db)
    assert store.resolve(None) is None
    assert store.resolve("") is None
    assert store.resolve("not-a-token") is None


def test_expired_session_resolves_to_none_before_sweep(db):
    account = _consumer(db)
    token = SessionStore(db, ttl=timedelta(seconds=-1)).create(account, Role.USER)

    assert SessionStore(db).resolve(token) is None
    # still in the table until the sweep runs
    assert db.get(AuthSession, token) is not None


def test_revoke_is_idempotent(db):
    account = _consumer(db)
    store = SessionStore(db)
    token = store.create(account, Role.USER)

    store.revoke(token)
    store.revoke(token)
    store.revoke(None)

    assert store.resolve(token) is None
    assert db.get(AuthSession, token) is None


def test_sweep_removes_only_expired_rows(db):
    account = _consumer(db)
    live = SessionStore(db).create(account, Role.USER)
    expired = SessionStore(db, ttl=timedelta(hours=-1)).create(account, Role.USER)

    removed = SessionStore(db).sweep()

    assert removed == 1
    db.expire_all()
    assert db.get(AuthSession, expired) is None
    assert SessionStore(db).resolve(live) is not None


def test_sweeper_job_uses_its_own_session(db):
    account = _consumer(db)
    SessionStore(db, ttl=timedelta(hours=-1)).create(account, Role.USER)
    SessionStore(db, ttl=timedelta(hours=-2)).create(account, Role.USER)

    assert session_sweeper.sweep_expired_sessions() == 2
    assert session_sweeper.sweep_expired_sessions() == 0


def test_revoke_account_drops_only_that_accounts_sessions(db):
    consumer = _consumer(db)
    pharmacy = _pharmacy(db)
    store = SessionStore(db)
    store.create(consumer, Role.USER)
    store.create(consumer, Role.USER)
    other = store.create(pharmacy, Role.PHARMACY)

    assert store.revoke_account(consumer.id, Role.USER) == 2
    assert store.resolve(other) is not None


def test_list_active_skips_expired(db):
    account = _consumer(db)
    SessionStore(db).create(account, Role.USER)
    SessionStore(db, ttl=timedelta(hours=-1)).create(account, Role.USER)

    assert len(SessionStore(db).list_active(account.id, Role.USER)) == 1


def test_zero_ttl_is_honoured(db):
    account = _consumer(db)
    store = SessionStore(db, ttl=timedelta(0))
    assert store.ttl == timedelta(0)

    token = store.create(account, Role.USER)
    assert store.resolve(token) is None


def test_background_sweeper_removes_expired_rows_and_stops(db):
    account = _consumer(db)
    expired = SessionStore(db, ttl=timedelta(hours=-1)).create(account, Role.USER)
    live = SessionStore(db).create(account, Role.USER)

    async def run_briefly():
        task = session_sweeper.start_session_sweeper(interval=0.01)
        await asyncio.sleep(0.2)
        await session_sweeper.stop_session_sweeper()
        return task

    # asyncio.run also waits for the executor thread doing the sweep
    task = asyncio.run(run_briefly())

    assert task.done()
    assert session_sweeper._sweeper_task is None
    db.expire_all()
    assert db.get(AuthSession, expired) is None
    assert db.get(AuthSession, live) is not None


def test_lifespan_starts_and_stops_the_sweeper(monkeypatch):
    monkeypatch.setattr(settings, "SESSION_SWEEP_ENABLED", True)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        running = session_sweeper._sweeper_task
        assert running is not None and not running.done()

    assert session_sweeper._sweeper_task is None
    assert running.done()
