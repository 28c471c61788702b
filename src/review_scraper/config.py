"""Centralized configuration loaded from .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Crawlbase token; empty = fetch pages directly
    crawlbase_token: str = ""
    fetch_timeout: int = 90

    # Retry when a page comes back without reviews
    empty_page_retries: int = 5
    retry_delay: float = 5.0

    # Pacing between pages
    g2_page_delay: float = 25.0
    generic_page_delay: float = 1.0

    # Generic sites are crawled over a fixed page range
    generic_first_page: int = 1
    generic_last_page: int = 6

    max_pages: int = 100
    output_dir: str = "output"

    @classmethod
    def from_env(cls) -> Settings:
        _load_env()
        return cls(
            crawlbase_token=os.getenv("CRAWLBASE_TOKEN") or os.getenv("TOKEN", ""),
            fetch_timeout=int(os.getenv("FETCH_TIMEOUT", "90")),
            empty_page_retries=int(os.getenv("EMPTY_PAGE_RETRIES", "5")),
            retry_delay=float(os.getenv("RETRY_DELAY", "5.0")),
            g2_page_delay=float(os.getenv("G2_PAGE_DELAY", "25.0")),
            generic_page_delay=float(os.getenv("GENERIC_PAGE_DELAY", "1.0")),
            generic_first_page=int(os.getenv("GENERIC_FIRST_PAGE", "1")),
            generic_last_page=int(os.getenv("GENERIC_LAST_PAGE", "6")),
            max_pages=int(os.getenv("MAX_PAGES", "100")),
            output_dir=os.getenv("OUTPUT_DIR", "output"),
        )
