"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Booking Scope"
    debug: bool = False
    log_file: str = ""  # Empty logs to stderr

    # Server
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./bookings.db"

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100
    default_currency: str = "usd"


settings = Settings()
