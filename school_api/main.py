# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from school_api.core.config import settings
from school_api.api.router import api_router
from school_api.db.init_db import ensure_tables
from school_api.db.session import connect_with_retry, make_sessionmaker

"""
School Records API – FastAPI entrypoint.

- `create_app()` monta a instância do FastAPI com lifespan: bootstrap do pool
  (SSM + retry), criação idempotente das tabelas e dispose no shutdown.
- Configura CORS conforme settings (default: todas as origens).
- Handler único converte qualquer erro de banco em 500 `{"error": "DB error"}`.
- `python -m school_api.main` sobe o uvicorn em HOST:PORT (default 3500).
"""

log = logging.getLogger("school_api")


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def _normalize_cors(origins_setting: str) -> list[str]:
    """CSV (ex: 'http://...,http://...') -> lista de origens sem espaços."""
    return [o.strip() for o in (origins_setting or "").split(",") if o.strip()]


async def db_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("DB error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "DB error"})


def create_app(
    engine: Optional[AsyncEngine] = None,
    *,
    connect: Optional[Callable[[], Awaitable[AsyncEngine]]] = None,
) -> FastAPI:
    """
    Cria a app. Com `engine` informado o bootstrap (SSM + retry) é pulado;
    `connect` permite trocar o bootstrap (testes).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            pool = engine if engine is not None else await (connect or connect_with_retry)()
            await ensure_tables(pool)
        except Exception:
            log.exception("App failed to start")
            raise

        app.state.engine = pool
        app.state.sessionmaker = make_sessionmaker(pool)
        log.info("Server ready on %s:%s", settings.HOST, settings.PORT)
        try:
            yield
        finally:
            await pool.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(api_router)
    app.add_exception_handler(SQLAlchemyError, db_error_handler)
    # driver errors sem wrapper do SQLAlchemy (ex.: ConnectionRefusedError no reconnect)
    app.add_exception_handler(OSError, db_error_handler)

    origins = _normalize_cors(settings.CORS_ORIGINS) or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    log.debug("CORS habilitado para: %s", origins)
    return app


start_server = create_app()


def main() -> None:
    configure_logging()
    uvicorn.run(start_server, host=settings.HOST, port=settings.PORT, log_config=None, lifespan="on")


if __name__ == "__main__":
    main()
