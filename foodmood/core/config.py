"""Application configuration."""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "FoodMood"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./foodmood.db"

    # Catalog (defaults to the bundled YAML file)
    catalog_file: Optional[str] = None

    # Pricing
    tax_rate: Decimal = Decimal("0.08")
    delivery_fee: Decimal = Decimal("2.99")

    # Sessions
    session_ttl_hours: int = 24

    # Orders
    order_submission_timeout: float = 10.0  # seconds

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
