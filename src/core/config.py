"""
Centralised application settings loaded from environment / .env file.
"""
from __future__ import annotations

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env from project root (two levels up from this file)
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseSettings):
    # ── Search backend ───────────────────────────────────
    search_api_base_url: str = "http://localhost:3001"
    search_timeout_seconds: float = 15.0
    search_page_size: int = 20
    max_visible_pages: int = 5

    # ── Result cache ─────────────────────────────────────
    result_cache_ttl: float = 300.0
    result_cache_max_size: int = 256

    # ── Analytics ────────────────────────────────────────
    category_top_n: int = 15

    # ── App ──────────────────────────────────────────────
    api_port: int = 8000
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
