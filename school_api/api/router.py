# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from fastapi import APIRouter
from school_api.api import health, students, teachers

"""
Roteador principal da API.


- Agrega os sub-routers (health, students, teachers) sem prefixo de versão.
- Importado por `main.py`.
"""

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(students.router, tags=["students"])
api_router.include_router(teachers.router, tags=["teachers"])
