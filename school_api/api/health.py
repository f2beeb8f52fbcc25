# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from school_api.api.deps import get_db
from school_api.api.students import fetch_students

"""
Rota raiz / diagnóstico.


- `GET /` confirma que o backend está no ar e devolve a lista de alunos.
- Erros de banco viram 500 pelo handler global (ver main.py).
"""

router = APIRouter(tags=["Health"])

@router.get("/")
async def root(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    return {"message": "Backend is running", "data": await fetch_students(db)}
