# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

"""
Dependências reutilizáveis da API.


- `get_db()` injeta `AsyncSession` do pool criado no boot (app.state.sessionmaker).
- Padrão usado por todos os endpoints para acesso ao banco.
"""

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.sessionmaker() as session:
        yield session
