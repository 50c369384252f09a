from typing import List, Optional
from pydantic import PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Content Engine"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/v1"
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "content_engine"
    POSTGRES_PORT: int = 5432

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # LLM providers
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    DEFAULT_PROVIDER: str = "claude"
    LLM_TEMPERATURE: float = 0.7

    # Rate limiting (sliding window, per provider)
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_CLAUDE_REQUESTS: int = 50
    RATE_LIMIT_OPENAI_REQUESTS: int = 50
    RATE_LIMIT_DEFAULT_REQUESTS: int = 60
    # None keeps a single global limiter per provider; an integer adds a
    # per-tenant ceiling inside each provider window.
    RATE_LIMIT_TENANT_REQUESTS: Optional[int] = None

    # Quality score cache
    QUALITY_CACHE_BACKEND: str = "database"  # "database" | "memory"
    QUALITY_CACHE_TTL_SECONDS: int = 60 * 60 * 24  # 24h

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
