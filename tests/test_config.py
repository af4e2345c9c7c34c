"""Settings validation."""
import pytest
from pydantic import ValidationError

from shipyard.config import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.STORAGE_BACKEND == "memory"
    assert s.API_PREFIX == "/api"
    assert s.ACTIVITY_DEFAULT_LIMIT == 10
    assert s.database_url.startswith("postgresql://")


def test_database_url_override():
    s = Settings(_env_file=None, DATABASE_URL="sqlite:///./shipyard.db")
    assert s.database_url == "sqlite:///./shipyard.db"


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, STORAGE_BACKEND="redis")


def test_production_refuses_memory_storage():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, APP_ENV="production", STORAGE_BACKEND="memory")


def test_production_refuses_default_password():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, APP_ENV="production", STORAGE_BACKEND="database")

    s = Settings(
        _env_file=None,
        APP_ENV="production",
        STORAGE_BACKEND="database",
        POSTGRES_PASSWORD="long-random-value",
    )
    assert s.is_production


def test_cors_origins_split():
    s = Settings(_env_file=None, BACKEND_CORS_ORIGINS="https://a.io, https://b.io,")
    assert s.cors_origins == ["https://a.io", "https://b.io"]


def test_sample_data_on_in_development_only():
    assert Settings(_env_file=None).SEED_SAMPLE_DATA is True
    assert Settings(_env_file=None, APP_ENV="staging").SEED_SAMPLE_DATA is False

    s = Settings(
        _env_file=None,
        APP_ENV="production",
        STORAGE_BACKEND="database",
        POSTGRES_PASSWORD="long-random-value",
    )
    assert s.SEED_SAMPLE_DATA is False


def test_sample_data_can_be_turned_off_in_development():
    assert Settings(_env_file=None, SEED_SAMPLE_DATA=False).SEED_SAMPLE_DATA is False


def test_production_refuses_sample_data():
    with pytest.raises(ValidationError, match="SEED_SAMPLE_DATA"):
        Settings(
            _env_file=None,
            APP_ENV="production",
            STORAGE_BACKEND="database",
            POSTGRES_PASSWORD="long-random-value",
            SEED_SAMPLE_DATA=True,
        )
