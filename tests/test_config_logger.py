"""
Tests for app/config.py and utils/logger.py
"""
import json
import logging

from app.config import Settings, get_settings
from utils.logger import _JsonFormatter, configure_logging, kv_message


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("USASPENDING_BASE_URL", "FUNDING_AGENCY_ID", "PAGE_LIMIT", "MIN_FISCAL_YEAR",
                    "MAX_FISCAL_YEAR", "DEFAULT_FISCAL_YEAR", "REQUEST_TIMEOUT_SECONDS"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)
        assert settings.usaspending_base_url == "https://api.usaspending.gov/api/v2/federal_obligations/"
        assert settings.funding_agency_id == 315
        assert settings.page_limit == 100
        assert settings.request_timeout_seconds is None
        assert settings.supported_years() == [2019, 2020, 2021, 2022, 2023, 2024, 2025]
        assert settings.default_fiscal_year == 2019

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_FISCAL_YEAR", "2026")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "12.5")
        settings = get_settings()
        assert settings.supported_years()[-1] == 2026
        assert settings.request_timeout_seconds == 12.5


class TestLogger:
    def test_kv_message(self):
        assert kv_message("fetch_done") == "fetch_done"
        assert kv_message("fetch_done", year=2021, records=3) == 'fetch_done | {"records": 3, "year": 2021}'

    def test_json_formatter(self):
        record = logging.LogRecord("obligations", logging.INFO, __file__, 1, "hello", None, None)
        record.props = {"year": 2020}
        payload = json.loads(_JsonFormatter().format(record))
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["year"] == 2020

    def test_configure_logging_single_handler(self):
        configure_logging("DEBUG", "json", force=True)
        configure_logging("DEBUG", "json", force=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)
        configure_logging("INFO", "text", force=True)
