"""Supported review sites and the selector tables used to read them.

Every site-specific CSS selector lives in this module. When a site
changes its markup, this is the only file that should need editing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class SiteVariant(str, Enum):
    GENERIC = "generic"
    G2 = "g2"
    CAPTERRA = "capterra"


class Paging(str, Enum):
    NEXT_LINK = "next_link"      # follow while the page shows a "Next" marker
    FIXED_RANGE = "fixed_range"  # crawl a configured page range
    SINGLE = "single"            # only the URL as given


class Pick(str, Enum):
    TEXT = "text"                  # text of every match, concatenated
    FIRST = "first"                # text of the first match
    ATTR = "attr"                  # attribute of the first match
    JOINED = "joined"              # text of each match, space separated
    NEXT_SIBLING = "next_sibling"  # text of the element after the first match


class UnsupportedSiteError(ValueError):
    """Raised when a URL cannot be mapped to any site variant."""


@dataclass(frozen=True)
class FieldRule:
    selector: str
    pick: Pick = Pick.TEXT
    attr: str | None = None
    letters_only: bool = False


@dataclass(frozen=True)
class SiteProfile:
    """Selector table plus the crawl behaviour of one site variant."""

    variant: SiteVariant
    review_block: str
    review_fields: dict[str, FieldRule]
    product_fields: dict[str, FieldRule] = field(default_factory=dict)
    pagination: FieldRule | None = None
    next_marker: str = "Next"
    paging: Paging = Paging.SINGLE
    retry_on_empty: bool = False
    incremental: bool = False
    strip_title_suffix: str = ""
    count_total_reviews: bool = False


G2 = SiteProfile(
    variant=SiteVariant.G2,
    product_fields={
        "product_name": FieldRule("div.product-head__title a.c-midnight-100"),
        "stars": FieldRule("#products-dropdown .fw-semibold", Pick.FIRST),
        "total_reviews": FieldRule(".filters-product h3"),
    },
    review_block=".nested-ajax-loading > div.paper",
    review_fields={
        "reviewer_name": FieldRule("[itemprop=author]"),
        "review_text": FieldRule(".pjax", letters_only=True),
        "stars": FieldRule("[itemprop='ratingValue']", Pick.ATTR, attr="content"),
        "profile_title": FieldRule(".mt-4th", Pick.JOINED),
        "review_date": FieldRule("time"),
        "review_link": FieldRule(".pjax", Pick.ATTR, attr="href"),
    },
    pagination=FieldRule(".pagination"),
    paging=Paging.NEXT_LINK,
    retry_on_empty=True,
    incremental=True,
)

CAPTERRA = SiteProfile(
    variant=SiteVariant.CAPTERRA,
    product_fields={
        "product_name": FieldRule("div#productHeader h1.mb-1"),
        "stars": FieldRule("span.star-rating-component span.ms-1"),
    },
    review_block="#reviews > div.review-card, div.i18n-translation_container.review-card",
    review_fields={
        "reviewer_name": FieldRule("div.fw-bold, div.h5.fw-bold"),
        "profile_title": FieldRule("div.text-ash", Pick.FIRST),
        "stars": FieldRule("span.ms-1"),
        "review_date": FieldRule("span.ms-2"),
        "review_text": FieldRule(
            'p:has(span:-soup-contains("Comments:")) span:not(:-soup-contains("Comments:"))'
        ),
        "pros": FieldRule('p:-soup-contains("Pros:")', Pick.NEXT_SIBLING),
        "cons": FieldRule('p:-soup-contains("Cons:")', Pick.NEXT_SIBLING),
    },
    paging=Paging.SINGLE,
    retry_on_empty=True,
    strip_title_suffix=" Reviews",
    count_total_reviews=True,
)

GENERIC = SiteProfile(
    variant=SiteVariant.GENERIC,
    product_fields={
        "product_name": FieldRule("h1 span", Pick.FIRST),
        "stars": FieldRule("[data-rating-typography]", Pick.FIRST),
        "total_reviews": FieldRule("[data-reviews-count-typography]", Pick.FIRST),
    },
    review_block='article[data-service-review-card-paper="true"]',
    review_fields={
        "reviewer_name": FieldRule("[data-consumer-name-typography]", Pick.FIRST),
        "review_text": FieldRule('p[data-service-review-text-typography="true"]'),
        "review_date": FieldRule("time", Pick.FIRST),
        "stars": FieldRule("[data-service-review-rating]", Pick.FIRST),
    },
    paging=Paging.FIXED_RANGE,
)

_PROFILES: dict[SiteVariant, SiteProfile] = {
    SiteVariant.G2: G2,
    SiteVariant.CAPTERRA: CAPTERRA,
    SiteVariant.GENERIC: GENERIC,
}

# Checked in order against the URL host
_HOST_MARKERS: list[tuple[str, SiteVariant]] = [
    ("capterra", SiteVariant.CAPTERRA),
    ("g2", SiteVariant.G2),
]


def detect_site(url: str) -> SiteVariant:
    """Map a review page URL to the site variant that can read it."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError) as exc:
        raise UnsupportedSiteError(f"Unsupported URL: {url!r}") from exc

    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise UnsupportedSiteError(f"Unsupported URL: {url!r}")

    host = parsed.hostname.lower()
    for marker, variant in _HOST_MARKERS:
        if marker in host:
            return variant
    logger.debug("No dedicated profile for %s, using generic layout", host)
    return SiteVariant.GENERIC


def get_profile(variant: SiteVariant) -> SiteProfile:
    return _PROFILES[variant]


def list_sites() -> list[str]:
    return sorted(v.value for v in _PROFILES)
