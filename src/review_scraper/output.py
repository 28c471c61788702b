"""Write scrape results to timestamped JSON files."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from review_scraper.models import ScrapeResult

logger = logging.getLogger(__name__)

REVIEWS_SUFFIX = re.compile(r" Reviews$", re.IGNORECASE)
UNSAFE_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)
COMPANY_IN_PATH = re.compile(r"/review/([^/?]+)")


def company_slug(url: str) -> str:
    """Company name from a /review/<company> URL, used when a page has no title."""
    match = COMPANY_IN_PATH.search(url)
    return match.group(1).replace(".", "_") if match else "unknown_company"


def _timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return stamp.replace(":", "-").replace(".", "-")


def output_filename(product_name: str, fallback: str = "", now: datetime | None = None) -> str:
    name = REVIEWS_SUFFIX.sub("", product_name.strip()) or fallback or "reviews"
    return f"{UNSAFE_CHARS.sub('_', name).lower()}_{_timestamp(now)}.json"


def to_json(result: ScrapeResult) -> str:
    return json.dumps(result.to_document(), indent=2, ensure_ascii=False)


def save_result(
    result: ScrapeResult,
    output_dir: str | Path,
    source_url: str = "",
    now: datetime | None = None,
) -> Path:
    """Write the result under output_dir and return the file path."""
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    fallback = company_slug(source_url) if source_url else ""
    path = out_dir / output_filename(result.product_name, fallback, now)
    path.write_text(to_json(result), encoding="utf-8")
    logger.info("Wrote %d reviews to %s", result.total_scraped_reviews, path)
    return path
