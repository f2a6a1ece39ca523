from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Tucker Orders"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/tucker_orders.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Bearer tokens issued by the auth service
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # Order creation
    ORDER_NUMBER_MAX_ATTEMPTS: int = 5

    # Idempotency-Key records older than this are purged by the worker
    IDEMPOTENCY_TTL_HOURS: int = 24

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"


settings = Settings()
