# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
import logging
from sqlalchemy.ext.asyncio import AsyncEngine
from school_api.db.base import metadata

"""
Criação idempotente do schema.


- `ensure_tables(engine)` cria `student` e `teacher` se ainda não existirem.
- Seguro para rodar a cada boot; não faz migração de tabelas existentes.
"""

log = logging.getLogger("school_api.db")


async def ensure_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all, checkfirst=True)
    log.info("Tables verified: %s", ", ".join(sorted(metadata.tables)))
