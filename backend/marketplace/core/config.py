from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api"

    # database & redis
    DATABASE_URL: str = "sqlite:///./marketplace.db"
    # Keep this as a plain string so redis:// URLs are always accepted
    REDIS_URL: str = "redis://localhost:6379/0"

    # search engine (Meilisearch)
    MEILISEARCH_HOST: str = "http://127.0.0.1:7700"
    MEILISEARCH_API_KEY: str | None = None
    MEILISEARCH_INDEX: str = "listings"
    MEILISEARCH_TIMEOUT_SECONDS: int = 5
    MEILISEARCH_RETRY_ATTEMPTS: int = 2

    # geocoding
    GOOGLE_MAPS_API_KEY: str | None = None
    GEOCODING_BASE_URL: str = "https://maps.googleapis.com/maps/api/geocode/json"
    GEOCODING_TIMEOUT_SECONDS: int = 10
    GEOCODING_CACHE_TTL_SECONDS: int = 7 * 24 * 3600

    # auth / security
    ADMIN_SECRET: str | None = None
    JWT_SECRET: str = "dev-change-this-secret"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MIN: int = 60 * 24
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    # uploads
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    UPLOAD_MAX_BYTES: int = 15 * 1024 * 1024
    UPLOAD_MIN_IMAGE_WIDTH: int = 400
    UPLOAD_MIN_IMAGE_HEIGHT: int = 300

    # nightly full reindex (UTC hour)
    SEARCH_REINDEX_HOUR: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
