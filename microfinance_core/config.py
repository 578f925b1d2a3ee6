"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "microfinance-core"
    log_level: str = "INFO"

    # Loan requests
    min_purpose_length: int = 10

    # Rounding quantum for schedule amounts (decimal places)
    money_places: int = 2


settings = Settings()
