"""review-scraper - Review page scraper for G2, Capterra and generic review sites."""

__version__ = "0.1.0"

from review_scraper.crawler import ScrapeError, crawl_pages, scrape
from review_scraper.models import ProductInfo, ReviewRecord, ScrapeRequest, ScrapeResult
from review_scraper.sites import SiteVariant

__all__ = [
    "ProductInfo",
    "ReviewRecord",
    "ScrapeError",
    "ScrapeRequest",
    "ScrapeResult",
    "SiteVariant",
    "crawl_pages",
    "scrape",
]
