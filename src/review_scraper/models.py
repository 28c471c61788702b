"""Pydantic models for the scraping pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class ReviewRecord(BaseModel):
    """One review as scraped; which fields are set depends on the site."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    reviewer_name: str | None = None
    review_text: str | None = None
    stars: str | None = None
    profile_title: str | None = None
    review_date: str = Field(default="", description="Raw, site-native date text")
    review_link: str | None = None
    pros: str | None = None
    cons: str | None = None


class ProductInfo(BaseModel):
    """Product header, taken from the first page of a job."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_name: str = ""
    stars: str = ""
    total_reviews: str = ""


class PageExtraction(BaseModel):
    """What an extractor returns for a single page."""

    product: ProductInfo = Field(default_factory=ProductInfo)
    reviews: list[ReviewRecord] = Field(default_factory=list)
    has_next_page: bool = False


class DateRange(BaseModel):
    """Inclusive window of review dates."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class ScrapeRequest(BaseModel):
    """Job input, usually read from input.json."""

    model_config = ConfigDict(str_strip_whitespace=True)

    url: str = Field(min_length=1)
    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not an http(s) URL: {value!r}")
        return value


class ScrapeResult(BaseModel):
    """Final output of a scrape job, ready for persistence."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_name: str = ""
    stars: str = ""
    total_reviews: str = ""
    all_reviews: list[ReviewRecord] = Field(default_factory=list)

    @computed_field(alias="totalScrapedReviews")
    @property
    def total_scraped_reviews(self) -> int:
        return len(self.all_reviews)

    @classmethod
    def from_parts(cls, product: ProductInfo, reviews: list[ReviewRecord]) -> ScrapeResult:
        return cls(
            product_name=product.product_name,
            stars=product.stars,
            total_reviews=product.total_reviews,
            all_reviews=list(reviews),
        )

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; fields a site lacks are left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
