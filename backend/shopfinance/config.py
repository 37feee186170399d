"""Application configuration using pydantic-settings."""

from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_env: str = "development"
    app_debug: bool = True

    # Business clock: midnight, hour-of-day and weekday are evaluated here
    business_timezone: str = "Asia/Tashkent"

    # External storefront backend (orders, expenses, products)
    store_api_url: str = "http://localhost:8081/api"
    store_api_timeout: float = 10.0  # seconds per request

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
