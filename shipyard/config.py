from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_DB_PASSWORDS = {"postgres", ""}


class Settings(BaseSettings):
    APP_NAME: str = "Shipyard"
    APP_ENV: str = "development"
    API_PREFIX: str = "/api"

    # CORS (comma separated)
    BACKEND_CORS_ORIGINS: str = ""

    # Storage backend: "memory" (tests, local demos) or "database"
    STORAGE_BACKEND: str = "memory"
    # Demo data (admin/password); unset means on in development only
    SEED_SAMPLE_DATA: Optional[bool] = None

    # Database
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "shipyard"

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False
    SLOW_QUERY_THRESHOLD_MS: int = 500

    # Activity feed
    ACTIVITY_DEFAULT_LIMIT: int = 10
    ACTIVITY_MAX_LIMIT: int = 100

    # Host used when fabricating connection strings for provisioned databases
    DATABASE_HOST_TEMPLATE: str = "db-{suffix}.shipyard.local"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _validate_production_storage(self) -> "Settings":
        """Refuse to start production with throwaway storage, default credentials or demo data."""
        if self.STORAGE_BACKEND not in ("memory", "database"):
            raise ValueError(
                f"STORAGE_BACKEND must be 'memory' or 'database', got '{self.STORAGE_BACKEND}'"
            )
        if self.APP_ENV == "production":
            if self.STORAGE_BACKEND == "memory":
                raise ValueError(
                    "STORAGE_BACKEND=memory loses every record on restart. "
                    "Set STORAGE_BACKEND=database for production."
                )
            if self.DATABASE_URL is None and self.POSTGRES_PASSWORD in _DEFAULT_DB_PASSWORDS:
                raise ValueError(
                    "POSTGRES_PASSWORD is set to default 'postgres'. "
                    "Set a strong password in .env or environment."
                )
            if self.SEED_SAMPLE_DATA:
                raise ValueError(
                    "SEED_SAMPLE_DATA=true creates a demo admin with a known password. "
                    "Unset it for production."
                )
        if self.SEED_SAMPLE_DATA is None:
            self.SEED_SAMPLE_DATA = self.is_development
        return self

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.BACKEND_CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_staging(self) -> bool:
        return self.APP_ENV == "staging"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


settings = Settings()
