"""Table-driven extraction of product info and reviews from page HTML."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from review_scraper.models import PageExtraction, ProductInfo, ReviewRecord
from review_scraper.sites import FieldRule, Pick, SiteProfile

logger = logging.getLogger(__name__)

NOT_LETTERS = re.compile(r"[^a-zA-Z ]")


class ExtractionError(Exception):
    """Raised when a page cannot be parsed as HTML at all."""


def _read(scope: Tag, rule: FieldRule) -> str | None:
    if rule.pick is Pick.ATTR:
        el = scope.select_one(rule.selector)
        if el is None:
            return None
        value = el.get(rule.attr)
        if isinstance(value, list):
            value = " ".join(value)
        return value

    if rule.pick is Pick.FIRST:
        el = scope.select_one(rule.selector)
        text = el.get_text() if el else ""
    elif rule.pick is Pick.NEXT_SIBLING:
        label = scope.select_one(rule.selector)
        sibling = label.find_next_sibling() if label else None
        text = sibling.get_text() if sibling else ""
    elif rule.pick is Pick.JOINED:
        text = " ".join(el.get_text() for el in scope.select(rule.selector))
    else:
        text = "".join(el.get_text() for el in scope.select(rule.selector))

    if rule.letters_only:
        text = NOT_LETTERS.sub("", text)
    return text.strip()


def _read_fields(scope: Tag, rules: dict[str, FieldRule]) -> dict[str, str | None]:
    return {name: _read(scope, rule) for name, rule in rules.items()}


def _parse(html: str) -> BeautifulSoup:
    if not isinstance(html, str):
        raise ExtractionError(f"Non-text document: {type(html).__name__}")
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ExtractionError(f"Unparseable HTML: {exc}") from exc


def extract_page(profile: SiteProfile, html: str) -> PageExtraction:
    """
    Read one page with the profile's selector table.

    A page without reviews is a normal result with an empty list, and so
    is a blank body. Only a document that cannot be parsed raises
    ExtractionError.
    """
    soup = _parse(html)

    reviews = [
        ReviewRecord(**_read_fields(block, profile.review_fields))
        for block in soup.select(profile.review_block)
    ]

    product = _read_fields(soup, profile.product_fields)
    name = product.get("product_name") or ""
    suffix = profile.strip_title_suffix
    if suffix and name.lower().endswith(suffix.lower()):
        name = name[: -len(suffix)].rstrip()
    product["product_name"] = name
    if profile.count_total_reviews:
        product["total_reviews"] = str(len(reviews))

    has_next = False
    if profile.pagination is not None:
        has_next = profile.next_marker in (_read(soup, profile.pagination) or "")

    logger.debug(
        "%s page: %d reviews, next=%s", profile.variant.value, len(reviews), has_next,
    )
    return PageExtraction(
        product=ProductInfo(**{k: v or "" for k, v in product.items()}),
        reviews=reviews,
        has_next_page=has_next,
    )
