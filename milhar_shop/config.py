"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Session storage
    storage_url: str = "sqlite:///./milhar_shop.db"

    # Service
    service_name: str = "milhar-shop"
    log_level: str = "INFO"

    # Business rules
    default_commission_rate: Decimal = Decimal("10")  # Percent, used when a seller is unknown
    enforce_stake_limits: bool = False
    enforce_operating_hours: bool = False

    # Dashboard
    recent_bets_limit: int = 5
    seed_demo_bets: bool = True


settings = Settings()
