"""Page-by-page crawl loop: fetch, extract, retry empty pages, pace, advance.

One job walks the pages of a single review listing strictly in sequence:

  Fetch:    get the page HTML (Crawlbase or direct)
  Extract:  read product info and reviews with the site's selector table
  Retry:    re-fetch a page that came back without reviews
  Advance:  pause, then move on while the site says there is more

The product header comes from the first page only. Reviews are filtered
by date once the crawl is over.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable, Iterable
from datetime import datetime

from review_scraper.config import Settings
from review_scraper.dates import parse_date_range
from review_scraper.extractors import ExtractionError, extract_page
from review_scraper.fetcher import FetchError, fetch_html
from review_scraper.filters import filter_reviews
from review_scraper.models import (
    PageExtraction,
    ProductInfo,
    ReviewRecord,
    ScrapeRequest,
    ScrapeResult,
)
from review_scraper.pagination import build_page_url
from review_scraper.sites import Paging, SiteProfile, SiteVariant, detect_site, get_profile

logger = logging.getLogger(__name__)

LINE = "=" * 60

Fetch = Callable[[str, Settings], str]


class ScrapeError(Exception):
    """Raised when a scrape job fails with nothing usable to return."""


def _out(msg: str = "") -> None:
    """Print a status message to stderr so it doesn't mix with JSON output."""
    print(msg, file=sys.stderr, flush=True)


def _elapsed(t: float) -> str:
    """Format elapsed seconds as human-readable string."""
    secs = time.time() - t
    if secs < 60:
        return f"{secs:.1f}s"
    return f"{secs / 60:.1f}m"


def _page_numbers(profile: SiteProfile, settings: Settings) -> Iterable[int]:
    if profile.paging is Paging.FIXED_RANGE:
        return range(settings.generic_first_page, settings.generic_last_page + 1)
    if profile.paging is Paging.NEXT_LINK:
        return range(1, settings.max_pages + 1)
    return range(1, 2)


def _page_delay(profile: SiteProfile, settings: Settings) -> float:
    if profile.variant is SiteVariant.G2:
        return settings.g2_page_delay
    if profile.variant is SiteVariant.GENERIC:
        return settings.generic_page_delay
    return 0.0


def _fetch_page(
    url: str,
    page: int,
    profile: SiteProfile,
    settings: Settings,
    fetch: Fetch,
) -> tuple[PageExtraction, bool]:
    """Fetch and extract one page, re-fetching while it has no reviews.

    Returns the last extraction and whether it held any reviews.
    """
    attempts = max(settings.empty_page_retries, 1) if profile.retry_on_empty else 1
    for attempt in range(1, attempts + 1):
        html = fetch(url, settings)
        extraction = extract_page(profile, html)
        if extraction.reviews:
            return extraction, True
        if attempt < attempts:
            _out(f"  [!] Attempt {attempt} for page {page} returned 0 reviews, retrying...")
            logger.warning("Attempt %d for page %d returned 0 reviews", attempt, page)
            time.sleep(settings.retry_delay)
    return extraction, False


def crawl_pages(
    base_url: str,
    profile: SiteProfile,
    settings: Settings,
    fetch: Fetch | None = None,
) -> tuple[ProductInfo, list[ReviewRecord]]:
    """
    Walk the listing's pages and collect every review found.

    Stops when the site reports no next page, when the page range is
    exhausted, or when a page stays empty after its retries. A fetch or
    parse failure raises ScrapeError, except for incremental sites that
    already have pages in hand: those stop and keep what they collected.
    """
    fetch = fetch or fetch_html
    delay = _page_delay(profile, settings)
    product = ProductInfo()
    reviews: list[ReviewRecord] = []
    pages_done = 0
    first_page: int | None = None

    for page in _page_numbers(profile, settings):
        if first_page is None:
            first_page = page
        url = build_page_url(base_url, page)
        _out(f"[{page}] {url}")
        t0 = time.time()

        try:
            extraction, found = _fetch_page(url, page, profile, settings, fetch)
        except (FetchError, ExtractionError) as exc:
            if profile.incremental and pages_done:
                _out(f"  [!] Page {page} failed, keeping {len(reviews)} reviews: {exc}")
                logger.warning("Failed to scrape page %d: %s", page, exc)
                break
            logger.error("Failed to scrape page %d of %s: %s", page, base_url, exc)
            raise ScrapeError(f"Failed to scrape page {page} of {base_url}: {exc}") from exc

        if page == first_page:
            product = extraction.product

        if not found:
            _out(f"  [!] Page {page} has no reviews, stopping")
            logger.info("Page %d has no reviews, stopping pagination", page)
            break

        reviews.extend(extraction.reviews)
        pages_done += 1
        _out(
            f"  {len(extraction.reviews)} reviews ({_elapsed(t0)}) | "
            f"{len(reviews)} total"
        )

        if delay:
            time.sleep(delay)

        if profile.paging is Paging.NEXT_LINK and not extraction.has_next_page:
            break

    logger.info("Crawl of %s done: %d pages, %d reviews", base_url, pages_done, len(reviews))
    return product, reviews


def scrape(
    request: ScrapeRequest,
    settings: Settings | None = None,
    fetch: Fetch | None = None,
    variant: SiteVariant | None = None,
    now: datetime | None = None,
) -> ScrapeResult:
    """
    Run one scrape job and return the date-filtered result.

    Args:
        variant: Force a site layout instead of detecting it from the URL.
        now: Reference moment for relative dates such as "3 months ago".
    """
    if settings is None:
        settings = Settings.from_env()

    variant = variant or detect_site(request.url)
    profile = get_profile(variant)
    date_range = parse_date_range(request.start_date, request.end_date, now)
    started = time.time()

    _out(f"\n{LINE}")
    _out("  Review Scraper")
    _out(LINE)
    _out(f"  URL:      {request.url}")
    _out(f"  Site:     {variant.value}")
    _out(f"  Dates:    {request.start_date} .. {request.end_date}")
    _out(LINE)

    product, reviews = crawl_pages(request.url, profile, settings, fetch)
    result = ScrapeResult.from_parts(product, filter_reviews(reviews, date_range, now))

    _out()
    _out(LINE)
    _out("  SCRAPE COMPLETE")
    _out(LINE)
    _out(f"  Scraped reviews:  {len(reviews)}")
    _out(f"  In date range:    {result.total_scraped_reviews}")
    _out(f"  Total time:       {_elapsed(started)}")
    _out(LINE)

    return result
