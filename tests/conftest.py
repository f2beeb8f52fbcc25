"""
Shared fixtures: a temporary SQLite database (aiosqlite) and a TestClient that runs the lifespan.

No test talks to real AWS or PostgreSQL. SSM is stubbed with botocore.stub.Stubber and the
pool is an AsyncEngine over a SQLite file under tmp_path.
"""
from __future__ import annotations
from pathlib import Path

import boto3
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from school_api.main import create_app


# Make anyio run on asyncio (so our async tests work everywhere)
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "school.db"


@pytest.fixture
def db_url(db_path: Path) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture
def engine(db_url: str):
    return create_async_engine(db_url)


@pytest.fixture
def client(engine):
    """App with the engine injected (no SSM, no retry); tables are created on startup."""
    with TestClient(create_app(engine)) as c:
        yield c


@pytest.fixture
def ssm_client():
    return boto3.client(
        "ssm",
        region_name="ap-south-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
