# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
import os
from dataclasses import dataclass
from dotenv import load_dotenv

"""
Central de configurações (Settings) da API de registros escolares.


- Carrega variáveis do .env (app/log/aws/db/cors).
- Fornece defaults seguros e tipados via dataclass.
- Expõe `settings` como singleton para uso em toda a app.
"""

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "School Records API")
    APP_ENV: str = os.getenv("APP_ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3500"))


    AWS_REGION: str = os.getenv("AWS_REGION", "ap-south-1")
    SSM_DB_PREFIX: str = os.getenv("SSM_DB_PREFIX", "/myapp/db")


    DB_DRIVER: str = os.getenv("DB_DRIVER", "postgresql+asyncpg")
    DB_PORT: int | None = int(os.environ["DB_PORT"]) if os.getenv("DB_PORT") else None
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_SSL: bool = _env_bool("DB_SSL", "true")
    DB_SSL_VERIFY: bool = _env_bool("DB_SSL_VERIFY", "false")

    DB_CONNECT_RETRIES: int = int(os.getenv("DB_CONNECT_RETRIES", "10"))
    DB_CONNECT_DELAY_MS: int = int(os.getenv("DB_CONNECT_DELAY_MS", "3000"))

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

settings = Settings()
