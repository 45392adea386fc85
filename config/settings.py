"""Application settings loaded from environment variables."""

from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    tax_year: str = "2023-24"
    acc_rate: Decimal | None = None
    acc_max_liable_earnings: Decimal | None = None
    tax_table_file: str | None = None
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
