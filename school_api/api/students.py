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
Endpoints de alunos.


- `GET /student` lista todos os alunos.
- `POST /addstudent` insere um aluno (name, rollNo, class).
- `DELETE /student/{id}` remove por id (mesma resposta se o id não existir).
"""

router = APIRouter()

class StudentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name:    Optional[str] = None
    rollNo:  Optional[str] = None
    class_:  Optional[str] = Field(None, alias="class")


async def fetch_students(db: AsyncSession) -> List[dict[str, Any]]:
    result = await db.execute(text("""
        SELECT id, name, roll_number, class, created_at
        FROM student
        ORDER BY id
    """))
    return [dict(r) for r in result.mappings().all()]


@router.get("/student", summary="Listar alunos")
async def list_students(db: AsyncSession = Depends(get_db)) -> List[dict[str, Any]]:
    return await fetch_students(db)


@router.post("/addstudent", summary="Adicionar aluno")
async def add_student(payload: StudentIn, db: AsyncSession = Depends(get_db)) -> dict[str, str]:
    await db.execute(
        text("INSERT INTO student (name, roll_number, class) VALUES (:name, :roll_number, :class_name)"),
        {"name": payload.name, "roll_number": payload.rollNo, "class_name": payload.class_},
    )
    await db.commit()
    return {"message": "Student added"}


@router.delete("/student/{student_id}", summary="Remover aluno por id")
async def delete_student(
    student_id: int = Path(..., description="id do aluno"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    # fora do INT da coluna nenhuma linha casa
    if ID_MIN <= student_id <= ID_MAX:
        await db.execute(text("DELETE FROM student WHERE id = :id"), {"id": student_id})
        await db.commit()
    return {"message": "Student deleted"}
