# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from school_api.core.config import settings

"""
Client do AWS SSM Parameter Store (credenciais do banco).


- Define `ConnectionDescriptor` e a exceção `ParameterStoreError`.
- `fetch_parameters(names, *, client, region)` faz um único GetParameters com decriptação.
- `get_db_config()` monta o descritor de conexão sem bloquear o event loop.
- Não faz retry: quem tenta de novo é o bootstrap do banco (db/session.py).
"""

DB_PARAM_KEYS = ("host", "user", "password", "name")


class ParameterStoreError(RuntimeError):
    """Erro ao consultar o Parameter Store."""


@dataclass(frozen=True)
class ConnectionDescriptor:
    host: str
    user: str
    password: str
    database: str

    def __repr__(self) -> str:
        return (
            f"ConnectionDescriptor(host={self.host!r}, user={self.user!r}, "
            f"password='***', database={self.database!r})"
        )


def db_parameter_names(prefix: str = settings.SSM_DB_PREFIX) -> list[str]:
    """Nomes completos dos quatro parâmetros do banco (ex.: /myapp/db/host)."""
    base = prefix.rstrip("/")
    return [f"{base}/{key}" for key in DB_PARAM_KEYS]


def fetch_parameters(
    names: Iterable[str],
    *,
    client: Any = None,
    region: str = settings.AWS_REGION,
) -> Dict[str, str]:
    """
    Busca os parâmetros num único GetParameters (WithDecryption=True).

    Retorna:
      - dict {último segmento do nome: valor}, ex. {"host": "db.local", ...}

    Erros:
      - ParameterStoreError: falha de rede/permissão ou parâmetro inexistente.
    """
    names = list(names)
    if client is None:
        client = boto3.client("ssm", region_name=region)

    try:
        resp = client.get_parameters(Names=names, WithDecryption=True)
    except (BotoCoreError, ClientError) as e:
        raise ParameterStoreError(f"SSM GetParameters failed: {e}") from e

    invalid = resp.get("InvalidParameters") or []
    if invalid:
        raise ParameterStoreError(f"SSM parameters not found: {', '.join(invalid)}")

    return {p["Name"].rsplit("/", 1)[-1]: p["Value"] for p in resp.get("Parameters", [])}


async def get_db_config(
    *,
    client: Any = None,
    prefix: Optional[str] = None,
) -> ConnectionDescriptor:
    """Lê host/user/password/name do SSM e devolve o descritor de conexão."""
    names = db_parameter_names(prefix if prefix is not None else settings.SSM_DB_PREFIX)
    # boto3 é síncrono
    params = await asyncio.to_thread(fetch_parameters, names, client=client)

    missing = [key for key in DB_PARAM_KEYS if key not in params]
    if missing:
        raise ParameterStoreError(f"SSM response missing keys: {', '.join(missing)}")

    return ConnectionDescriptor(
        host=params["host"],
        user=params["user"],
        password=params["password"],
        database=params["name"],
    )
