"""URL construction for paginated review listings."""

from __future__ import annotations


def build_page_url(base_url: str, page_number: int) -> str:
    """Return the URL of ``page_number``; page 1 is the base URL itself."""
    if page_number == 1:
        return base_url
    sep = "&" if "?" in base_url else "?"
    return f"{base_url}{sep}page={page_number}"
