"""Tests for the bounded store retry helper."""
import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError

from stayback.config import settings
from stayback.services import retry
from stayback.services.retry import with_db_retry


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr(retry.time, "sleep", delays.append)
    return delays


def _flaky(failures, exc_factory):
    calls = {"n": 0}

    def query():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise exc_factory()
        return "row"

    return query, calls


def _dropped():
    return OperationalError("SELECT 1", {}, Exception("server closed the connection"))


def test_recovers_after_transient_failures(db, no_sleep):
    query, calls = _flaky(2, _dropped)
    assert with_db_retry(db, query, "lookup") == "row"
    assert calls["n"] == 3
    base = settings.DB_RETRY_BASE_DELAY_SECONDS
    assert no_sleep == [base, base * 2]


def test_exhaustion_is_503(db):
    query, calls = _flaky(10, _dropped)
    with pytest.raises(HTTPException) as exc_info:
        with_db_retry(db, query, "lookup")
    assert exc_info.value.status_code == 503
    assert calls["n"] == settings.DB_RETRY_ATTEMPTS


def test_non_transient_errors_propagate(db):
    query, calls = _flaky(1, lambda: IntegrityError("INSERT", {}, Exception("duplicate")))
    with pytest.raises(IntegrityError):
        with_db_retry(db, query, "insert")
    assert calls["n"] == 1
