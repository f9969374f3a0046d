from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    port: int = 8000
    host: str = "0.0.0.0"

    usaspending_base_url: str = "https://api.usaspending.gov/api/v2/federal_obligations/"
    funding_agency_id: int = 315
    page_limit: int = 100
    request_timeout_seconds: Optional[float] = None  # env: REQUEST_TIMEOUT_SECONDS

    min_fiscal_year: int = 2019
    max_fiscal_year: int = 2025
    default_fiscal_year: int = 2019
    fetch_workers: int = 4

    log_level: str = "INFO"  # env: LOG_LEVEL
    log_format: str = "text"  # env: LOG_FORMAT (text|json)

    def supported_years(self) -> List[int]:
        return list(range(self.min_fiscal_year, self.max_fiscal_year + 1))


def get_settings() -> Settings:
    return Settings()
