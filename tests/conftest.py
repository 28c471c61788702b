"""Shared fixtures and HTML samples for review_scraper tests."""

from __future__ import annotations

import pytest

from review_scraper.config import Settings


@pytest.fixture()
def settings() -> Settings:
    """Settings with every deliberate delay shrunk to zero."""
    return Settings(
        crawlbase_token="test-token",
        retry_delay=0.0,
        g2_page_delay=0.0,
        generic_page_delay=0.0,
    )


def g2_review(name: str, date: str, stars: str = "4.5", title: str = "Admin") -> str:
    return f"""
        <div class="paper">
            <div itemprop="author">{name}</div>
            <meta itemprop="ratingValue" content="{stars}">
            <div class="mt-4th">{title}</div>
            <div class="mt-4th">Small-Business (50 or fewer emp.)</div>
            <a class="pjax" href="https://www.g2.com/survey_responses/{name.lower()}">
                "Great product, 10/10!"
            </a>
            <time>{date}</time>
        </div>"""


def g2_page(reviews: list[str], has_next: bool = False, product_name: str = "Acme CRM") -> str:
    next_link = '<a href="?page=2">Next ›</a>' if has_next else ""
    return f"""<html><body>
        <div class="product-head__title"><a class="c-midnight-100">{product_name}</a></div>
        <div id="products-dropdown"><span class="fw-semibold">4.6</span>
            <span class="fw-semibold">ignored</span></div>
        <div class="filters-product"><h3>1,234 reviews</h3></div>
        <div class="nested-ajax-loading">{"".join(reviews)}</div>
        <div class="pagination"><a>1</a><a>2</a>{next_link}</div>
    </body></html>"""


CAPTERRA_PAGE = """\
<html><body>
<div id="productHeader"><h1 class="mb-1">Acme CRM Reviews</h1></div>
<span class="star-rating-component"><span class="ms-1">4.7</span></span>
<div id="reviews">
    <div class="review-card">
        <div class="h5 fw-bold">Jane D.</div>
        <div class="text-ash">Marketing Manager</div>
        <div class="text-ash">Computer Software, 11-50 employees</div>
        <span class="ms-1">5.0</span>
        <span class="ms-2">1/15/2024</span>
        <p><span>Comments:</span> <span>Easy to set up and use.</span></p>
        <p>Pros:</p>
        <p>Fast onboarding.</p>
        <p>Cons:</p>
        <p>Pricey add-ons.</p>
    </div>
    <div class="review-card">
        <div class="fw-bold">Sam K.</div>
        <div class="text-ash">Engineer</div>
        <span class="ms-1">3.0</span>
        <span class="ms-2">6/1/2023</span>
        <p><span>Comments:</span> <span>Does the job.</span></p>
        <p>Cons:</p>
        <p>Slow reports.</p>
    </div>
</div>
</body></html>
"""


def generic_review(name: str, date: str, text: str = "Solid service", rating: str = "5") -> str:
    return f"""
        <article data-service-review-card-paper="true">
            <span data-consumer-name-typography="true">{name}</span>
            <div data-service-review-rating="{rating}">{rating}</div>
            <time datetime="{date}">{date}</time>
            <p data-service-review-text-typography="true">{text}</p>
        </article>"""


def generic_page(reviews: list[str], company: str = "Example Shop") -> str:
    return f"""<html><body>
        <h1><span>{company}</span> Reviews</h1>
        <p data-rating-typography="true">4.2</p>
        <p data-reviews-count-typography="true">812</p>
        {"".join(reviews)}
    </body></html>"""


EMPTY_PAGE = "<html><body><div class='nested-ajax-loading'></div></body></html>"
