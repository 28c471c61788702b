"""Date-window filtering of scraped reviews."""

from __future__ import annotations

import logging
from datetime import datetime

from review_scraper.dates import normalize_date
from review_scraper.models import DateRange, ReviewRecord

logger = logging.getLogger(__name__)


def filter_reviews(
    reviews: list[ReviewRecord],
    date_range: DateRange,
    now: datetime | None = None,
) -> list[ReviewRecord]:
    """Keep reviews dated inside the range, in their original order.

    Reviews whose date cannot be read are dropped without complaint.
    """
    now = now or datetime.now()
    kept = []
    for review in reviews:
        moment = normalize_date(review.review_date, now)
        if moment is not None and date_range.contains(moment):
            kept.append(review)
    logger.info("Date filter kept %d of %d reviews", len(kept), len(reviews))
    return kept
