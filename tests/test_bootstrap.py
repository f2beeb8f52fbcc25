"""
Tests for the boot-time connection loop (connect_with_retry) and pool creation.
"""
from __future__ import annotations

import logging
import ssl
from functools import partial

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from school_api.clients.parameter_store import ConnectionDescriptor, ParameterStoreError
from school_api.core.config import settings
from school_api.db.session import _ssl_context, connect_with_retry, create_pool
import school_api.main as main_module
from school_api.main import create_app

DESCRIPTOR = ConnectionDescriptor(host="db.internal", user="app", password="pw", database="school")


class FlakyFetcher:
    """Fails the first `failures` calls, then returns DESCRIPTOR."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    async def __call__(self) -> ConnectionDescriptor:
        self.calls += 1
        if self.calls <= self.failures:
            raise ParameterStoreError(f"ssm unavailable (call {self.calls})")
        return DESCRIPTOR


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _failure_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "school_api.db" and "DB connection failed" in r.getMessage()]


@pytest.mark.anyio
async def test_succeeds_on_tenth_attempt_after_nine_failures(db_url, caplog) -> None:
    caplog.set_level(logging.INFO, logger="school_api.db")
    fetcher = FlakyFetcher(failures=9)
    sleep = SleepRecorder()

    engine = await connect_with_retry(
        10, 3000,
        fetch_config=fetcher,
        engine_factory=lambda d: create_async_engine(db_url),
        sleep=sleep,
    )
    try:
        assert fetcher.calls == 10
        assert len(_failure_records(caplog)) == 9
        assert sleep.delays == [3.0] * 9
        assert any("attempt 10/10" in r.getMessage() for r in caplog.records if r.levelno == logging.INFO)
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_final_failure_propagates_last_error(caplog) -> None:
    fetcher = FlakyFetcher(failures=10)
    sleep = SleepRecorder()

    with pytest.raises(ParameterStoreError, match=r"call 10\)"):
        await connect_with_retry(10, 3000, fetch_config=fetcher, sleep=sleep)

    assert fetcher.calls == 10
    assert len(_failure_records(caplog)) == 10
    # no wait after the last attempt
    assert len(sleep.delays) == 9


@pytest.mark.anyio
async def test_first_attempt_success_makes_no_further_attempts(db_url) -> None:
    fetcher = FlakyFetcher(failures=0)
    sleep = SleepRecorder()

    engine = await connect_with_retry(
        10, 3000,
        fetch_config=fetcher,
        engine_factory=lambda d: create_async_engine(db_url),
        sleep=sleep,
    )
    await engine.dispose()

    assert fetcher.calls == 1
    assert sleep.delays == []


@pytest.mark.anyio
async def test_unreachable_database_counts_as_failed_attempt(tmp_path, db_url) -> None:
    bad_url = f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'x.db'}"
    urls = iter([bad_url, db_url])
    created = []

    def factory(descriptor):
        engine = create_async_engine(next(urls))
        created.append(engine)
        return engine

    engine = await connect_with_retry(
        3, 0,
        fetch_config=FlakyFetcher(failures=0),
        engine_factory=factory,
        sleep=SleepRecorder(),
    )
    try:
        assert len(created) == 2
        # each attempt gets its own pool
        assert engine is created[1]
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_retries_must_be_positive() -> None:
    with pytest.raises(ValueError):
        await connect_with_retry(0, 0, fetch_config=FlakyFetcher(failures=0))


def test_startup_failure_never_serves(caplog) -> None:
    connect = partial(
        connect_with_retry, 3, 0,
        fetch_config=FlakyFetcher(failures=3),
        sleep=SleepRecorder(),
    )
    app = create_app(connect=connect)

    with pytest.raises(ParameterStoreError):
        with TestClient(app):
            pass

    assert any(r.getMessage() == "App failed to start" for r in caplog.records)


def test_create_pool_is_bounded(monkeypatch) -> None:
    monkeypatch.setattr(settings, "DB_POOL_SIZE", 10)
    monkeypatch.setattr(settings, "DB_DRIVER", "postgresql+asyncpg")

    engine = create_pool(DESCRIPTOR)

    assert engine.url.host == "db.internal"
    assert engine.url.username == "app"
    assert engine.url.database == "school"
    assert engine.pool.size() == 10


def test_ssl_context_without_verification() -> None:
    ctx = _ssl_context(verify=False)
    assert ctx.verify_mode == ssl.CERT_NONE
    assert ctx.check_hostname is False

    strict = _ssl_context(verify=True)
    assert strict.verify_mode == ssl.CERT_REQUIRED


@pytest.mark.anyio
async def test_dispose_failure_does_not_hide_connection_error(caplog) -> None:
    class BrokenEngine:
        def connect(self):
            raise ConnectionRefusedError(111, "Connection refused")

        async def dispose(self):
            raise RuntimeError("dispose failed")

    with pytest.raises(ConnectionRefusedError):
        await connect_with_retry(
            1, 0,
            fetch_config=FlakyFetcher(failures=0),
            engine_factory=lambda d: BrokenEngine(),
        )

    assert any("Failed to dispose pool" in r.getMessage() for r in caplog.records)


def test_main_exits_nonzero_when_bootstrap_fails(monkeypatch) -> None:
    async def always_fail():
        raise ParameterStoreError("ssm unavailable")

    monkeypatch.setattr(main_module, "connect_with_retry", always_fail)
    monkeypatch.setattr(settings, "HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "PORT", 0)

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code not in (0, None)
