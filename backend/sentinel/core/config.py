"""
Project Sentinel settings

Every field can be set from the environment or a `.env` file. SECRET_KEY and
JWT_SECRET_KEY have no defaults; startup refuses to run without them.
"""

import json
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> List[str]:
    """Accept a JSON list or a comma-separated string"""
    value = value.strip()
    if value.startswith("["):
        try:
            return [str(origin) for origin in json.loads(value)]
        except json.JSONDecodeError:
            pass
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # ---------- service ----------
    APP_NAME: str = "Project Sentinel"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://localhost:5173"

    # ---------- project store ----------
    DATABASE_URL: str = "sqlite+aiosqlite:///./sentinel.db"
    DB_ECHO: bool = False

    # ---------- auth ----------
    SECRET_KEY: str
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60
    BCRYPT_ROUNDS: int = 12

    # ---------- analysis engine ----------
    ANALYSIS_DELAY_SECONDS: float = 2.0
    PERF_TEST_DELAY_SECONDS: float = 1.0
    PERF_TEST_TIMEOUT_SECONDS: float = 5.0
    TEST_RUN_DELAY_SECONDS: float = 0.1
    TEST_RUN_PASS_RATE: float = 0.7

    # ---------- repair sessions ----------
    REPAIR_SESSION_TTL_SECONDS: int = 3600
    REPAIR_SESSION_CLEANUP_INTERVAL: int = 300
    MAX_CODE_SIZE_BYTES: int = 512 * 1024

    # ---------- wizard store client ----------
    STORE_BASE_URL: str = "http://localhost:8000/api/v1"
    STORE_REQUEST_TIMEOUT: float = 30.0

    # ---------- logging ----------
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/sentinel.log"

    @field_validator("TEST_RUN_PASS_RATE")
    @classmethod
    def _probability(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("TEST_RUN_PASS_RATE must be between 0 and 1")
        return value

    @field_validator("ANALYSIS_DELAY_SECONDS", "PERF_TEST_DELAY_SECONDS", "TEST_RUN_DELAY_SECONDS")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
