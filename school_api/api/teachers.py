# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from school_api.api.deps import get_db
from school_api.db.base import ID_MAX, ID_MIN

"""
Endpoints de professores.


- `GET /teacher` lista todos os professores.
- `POST /addteacher` insere um professor (name, subject, class).
- `DELETE /teacher/{id}` remove por id.
"""

router = APIRouter()

class TeacherIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name:    Optional[str] = None
    subject: Optional[str] = None
    class_:  Optional[str] = Field(None, alias="class")


@router.get("/teacher", summary="Listar professores")
async def list_teachers(db: AsyncSession = Depends(get_db)) -> List[dict[str, Any]]:
    result = await db.execute(text("""
        SELECT id, name, subject, class, created_at
        FROM teacher
        ORDER BY id
    """))
    return [dict(r) for r in result.mappings().all()]


@router.post("/addteacher", summary="Adicionar professor")
async def add_teacher(payload: TeacherIn, db: AsyncSession = Depends(get_db)) -> dict[str, str]:
    await db.execute(
        text("INSERT INTO teacher (name, subject, class) VALUES (:name, :subject, :class_name)"),
        {"name": payload.name, "subject": payload.subject, "class_name": payload.class_},
    )
    await db.commit()
    return {"message": "Teacher added"}


@router.delete("/teacher/{teacher_id}", summary="Remover professor por id")
async def delete_teacher(
    teacher_id: int = Path(..., description="id do professor"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    # fora do INT da coluna nenhuma linha casa
    if ID_MIN <= teacher_id <= ID_MAX:
        await db.execute(text("DELETE FROM teacher WHERE id = :id"), {"id": teacher_id})
        await db.commit()
    return {"message": "Teacher deleted"}
