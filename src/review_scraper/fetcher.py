"""Fetch rendered HTML via the Crawlbase Crawling API, with retry logic."""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from review_scraper.config import Settings

logger = logging.getLogger(__name__)

CRAWLBASE_ENDPOINT = "https://api.crawlbase.com/"
BROWSER_HEADERS = {"User-Agent": "Mozilla/5.0"}


class FetchError(Exception):
    """Raised when HTML fetching fails after all retries."""


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=2, min=4, max=30),
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.HTTPStatusError)),
    reraise=True,
)
def _get(url: str, settings: Settings) -> httpx.Response:
    with httpx.Client(timeout=settings.fetch_timeout, follow_redirects=True) as client:
        if settings.crawlbase_token:
            response = client.get(
                CRAWLBASE_ENDPOINT,
                params={"token": settings.crawlbase_token, "url": url},
            )
        else:
            response = client.get(url, headers=BROWSER_HEADERS)
        response.raise_for_status()
        return response


def fetch_html(url: str, settings: Settings) -> str:
    """
    Fetch the HTML body for a URL.

    Goes through Crawlbase when a token is configured, otherwise requests
    the page directly with a browser User-Agent. Timeouts and HTTP errors
    are retried; whatever still fails is raised as FetchError.
    """
    try:
        response = _get(url, settings)
    except Exception as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc

    pc_status = response.headers.get("pc_status")
    if pc_status:
        logger.debug("Crawlbase pc_status=%s original_status=%s",
                     pc_status, response.headers.get("original_status"))
    logger.info("Fetched %d bytes from %s", len(response.text), url)
    return response.text
