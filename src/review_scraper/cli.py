"""Command-line interface for review-scraper."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from pydantic import ValidationError

from review_scraper.config import Settings
from review_scraper.crawler import ScrapeError, scrape
from review_scraper.models import ScrapeRequest
from review_scraper.output import save_result, to_json
from review_scraper.sites import SiteVariant, list_sites

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-scraper",
        description="Scrape G2, Capterra and generic review pages into JSON.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="input.json",
        help="JSON file with url, start_date and end_date (default: input.json)",
    )
    parser.add_argument("--url", default=None, help="Override the input file's url")
    parser.add_argument("--start-date", default=None, help="Override start_date")
    parser.add_argument("--end-date", default=None, help="Override end_date")
    parser.add_argument(
        "--site",
        choices=list_sites(),
        default=None,
        help="Force a site layout instead of detecting it from the URL",
    )
    parser.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Directory for the result file (default: from .env OUTPUT_DIR or ./output)",
    )
    parser.add_argument(
        "--first-page",
        type=int,
        default=None,
        help="First page for generic sites (default: 1)",
    )
    parser.add_argument(
        "--last-page",
        type=int,
        default=None,
        help="Last page for generic sites (default: 6)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Safety limit on pages followed on G2 (default: 100)",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Skip retry and pacing delays (may trigger rate limits)",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the JSON result instead of writing a file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def load_request(args: argparse.Namespace) -> ScrapeRequest:
    """Read the input file (if present) and apply command-line overrides."""
    data: dict = {}
    input_path = Path(args.input)
    if input_path.is_file():
        data = json.loads(input_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{input_path} must contain a JSON object")
    elif not args.url:
        raise FileNotFoundError(f"Input file not found: {input_path}")

    for key, override in (
        ("url", args.url),
        ("start_date", args.start_date),
        ("end_date", args.end_date),
    ):
        if override is not None:
            data[key] = override
    return ScrapeRequest.model_validate(data)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        request = load_request(args)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("Invalid input: %s", exc)
        return 1

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        logger.error("Invalid input: bad setting in environment: %s", exc)
        return 1

    # Apply CLI overrides
    overrides = {}
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.first_page is not None:
        overrides["generic_first_page"] = args.first_page
    if args.last_page is not None:
        overrides["generic_last_page"] = args.last_page
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages
    if args.no_delay:
        overrides.update(retry_delay=0.0, g2_page_delay=0.0, generic_page_delay=0.0)
    if overrides:
        settings = replace(settings, **overrides)

    variant = SiteVariant(args.site) if args.site else None
    try:
        result = scrape(request, settings=settings, variant=variant)
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return 1
    except ScrapeError as exc:
        logger.error("Failed to scrape data: %s", exc)
        return 1

    if args.stdout:
        print(to_json(result))
        return 0

    path = save_result(result, settings.output_dir, source_url=request.url)
    print("Scraping complete.")
    print(f"Product Name: {result.product_name}")
    print(f"Total Reviews (website): {result.total_reviews}")
    print(f"Filtered Reviews: {result.total_scraped_reviews}")
    print(f"Output saved to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
