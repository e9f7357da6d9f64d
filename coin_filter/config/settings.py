# coin_filter/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def parse_float(value: str | None, default: Optional[float]) -> Optional[float]:
    if value is None or value.strip() == "":
        return default
    return float(value)


def parse_str(value: str | None, default: str) -> str:
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    MARKET_API_BASE_URL: str
    MARKET_API_TIMEOUT_SECONDS: Optional[float]
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            MARKET_API_BASE_URL=parse_str(os.getenv("MARKET_API_BASE_URL"), "http://localhost:8000"),
            # unset: no timeout
            MARKET_API_TIMEOUT_SECONDS=parse_float(os.getenv("MARKET_API_TIMEOUT_SECONDS"), None),
            LOG_LEVEL=parse_str(os.getenv("LOG_LEVEL"), "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
