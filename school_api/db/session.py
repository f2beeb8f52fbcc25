# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import asyncio
import logging
import ssl
from typing import Awaitable, Callable, Optional
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from school_api.clients.parameter_store import ConnectionDescriptor, get_db_config
from school_api.core.config import settings

"""
Pool de conexões assíncrono via SQLAlchemy 2.0 (bootstrap com retry).


- `create_pool(descriptor)` cria o `AsyncEngine` (pool limitado, TLS opcional).
- `connect_with_retry()` busca credenciais no SSM e abre o pool, com N tentativas
  e espera fixa entre elas (sem backoff exponencial, sem jitter).
- `make_sessionmaker(engine)` expõe o `async_sessionmaker` usado pelas deps.
"""

log = logging.getLogger("school_api.db")

ConfigFetcher = Callable[[], Awaitable[ConnectionDescriptor]]
EngineFactory = Callable[[ConnectionDescriptor], AsyncEngine]


def _ssl_context(verify: bool) -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    if not verify:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def create_pool(descriptor: ConnectionDescriptor) -> AsyncEngine:
    """Cria o engine async (pool de até DB_POOL_SIZE conexões, sem overflow)."""
    url = URL.create(
        settings.DB_DRIVER,
        username=descriptor.user,
        password=descriptor.password,
        host=descriptor.host,
        port=settings.DB_PORT,
        database=descriptor.database,
    )
    connect_args = {}
    if settings.DB_SSL:
        connect_args["ssl"] = _ssl_context(settings.DB_SSL_VERIFY)

    return create_async_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=False,
    )


async def _probe(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def connect_with_retry(
    retries: Optional[int] = None,
    delay_ms: Optional[int] = None,
    *,
    fetch_config: ConfigFetcher = get_db_config,
    engine_factory: EngineFactory = create_pool,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncEngine:
    """
    Abre o pool do banco com até `retries` tentativas independentes.

    Cada tentativa: busca o descritor (SSM) -> cria o engine -> `SELECT 1`.
    Em falha: loga a tentativa, espera `delay_ms` e tenta de novo; na última
    tentativa a exceção é propagada.
    """
    retries = retries if retries is not None else settings.DB_CONNECT_RETRIES
    delay_ms = delay_ms if delay_ms is not None else settings.DB_CONNECT_DELAY_MS
    if retries < 1:
        raise ValueError("retries must be >= 1")

    attempt = 1
    while True:
        engine: Optional[AsyncEngine] = None
        try:
            descriptor = await fetch_config()
            engine = engine_factory(descriptor)
            await _probe(engine)
            log.info("Connected to database (attempt %d/%d)", attempt, retries)
            return engine
        except Exception as e:
            log.warning("DB connection failed (attempt %d/%d): %s", attempt, retries, e)
            if engine is not None:
                try:
                    await engine.dispose()
                except Exception as dispose_err:
                    log.warning("Failed to dispose pool (attempt %d): %s", attempt, dispose_err)
            if attempt >= retries:
                raise
            attempt += 1
            await sleep(delay_ms / 1000.0)


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
