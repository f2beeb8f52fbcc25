# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, text

"""
Definição das tabelas (SQLAlchemy Core).


- `student` e `teacher`, sem relacionamento entre si.
- `id` auto-incremento e `created_at` com default CURRENT_TIMESTAMP no servidor.
- Usadas apenas para o DDL idempotente; as consultas das rotas são SQL textual.
"""

# faixa do INT (32 bits) das colunas id
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1

metadata = MetaData()

student = Table(
    "student",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255)),
    Column("roll_number", String(255)),
    Column("class", String(255)),
    Column("created_at", DateTime, server_default=text("CURRENT_TIMESTAMP")),
    sqlite_autoincrement=True,
)

teacher = Table(
    "teacher",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255)),
    Column("subject", String(255)),
    Column("class", String(255)),
    Column("created_at", DateTime, server_default=text("CURRENT_TIMESTAMP")),
    sqlite_autoincrement=True,
)
