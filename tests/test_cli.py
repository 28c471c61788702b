"""Tests for review_scraper.cli module."""

from __future__ import annotations

import json
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest

from review_scraper.cli import build_parser, load_request, main
from review_scraper.config import Settings
from review_scraper.crawler import ScrapeError
from review_scraper.models import ProductInfo, ReviewRecord, ScrapeResult
from review_scraper.sites import SiteVariant

G2_URL = "https://www.g2.com/products/acme/reviews"


@pytest.fixture()
def input_file(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps({
        "url": G2_URL,
        "start_date": "2024-01-01",
        "end_date": "2024-12-31",
    }))
    return path


@pytest.fixture()
def scrape_result():
    return ScrapeResult.from_parts(
        ProductInfo(product_name="Acme CRM", stars="4.6", total_reviews="1,234 reviews"),
        [ReviewRecord(reviewer_name="Ann", review_date="1/15/2024")],
    )


class TestBuildParser:
    def test_default_values(self):
        args = build_parser().parse_args([])
        assert args.input == "input.json"
        assert args.url is None
        assert args.site is None
        assert args.output_dir is None
        assert args.no_delay is False
        assert args.stdout is False
        assert args.verbose is False

    def test_site_choices(self):
        args = build_parser().parse_args(["--site", "capterra"])
        assert args.site == "capterra"
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--site", "amazon"])

    def test_page_flags(self):
        args = build_parser().parse_args(["--first-page", "2", "--last-page", "4", "--max-pages", "9"])
        assert (args.first_page, args.last_page, args.max_pages) == (2, 4, 9)


class TestLoadRequest:
    def test_reads_input_file(self, input_file):
        request = load_request(build_parser().parse_args([str(input_file)]))
        assert request.url == G2_URL
        assert request.start_date == "2024-01-01"

    def test_overrides_win(self, input_file):
        args = build_parser().parse_args([str(input_file), "--end-date", "2024-06-30"])
        assert load_request(args).end_date == "2024-06-30"

    def test_flags_alone_are_enough(self, tmp_path):
        args = build_parser().parse_args([
            str(tmp_path / "missing.json"),
            "--url", G2_URL, "--start-date", "2024-01-01", "--end-date", "2024-12-31",
        ])
        assert load_request(args).url == G2_URL

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_request(build_parser().parse_args([str(tmp_path / "missing.json")]))


class TestMain:
    def test_writes_result_file(self, input_file, scrape_result, tmp_path):
        out_dir = tmp_path / "out"
        with patch("review_scraper.cli.Settings.from_env", return_value=Settings()), \
             patch("review_scraper.cli.scrape", return_value=scrape_result) as mock_scrape, \
             patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            result = main([str(input_file), "-o", str(out_dir)])

        assert result == 0
        files = list(out_dir.glob("acme_crm_*.json"))
        assert len(files) == 1
        assert json.loads(files[0].read_text())["totalScrapedReviews"] == 1
        assert "Filtered Reviews: 1" in mock_stdout.getvalue()
        assert mock_scrape.call_args.kwargs["settings"].output_dir == str(out_dir)

    def test_stdout_mode(self, input_file, scrape_result, tmp_path):
        out_dir = tmp_path / "out"
        with patch("review_scraper.cli.Settings.from_env", return_value=Settings(output_dir=str(out_dir))), \
             patch("review_scraper.cli.scrape", return_value=scrape_result), \
             patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            result = main([str(input_file), "--stdout"])

        assert result == 0
        assert json.loads(mock_stdout.getvalue())["productName"] == "Acme CRM"
        assert not out_dir.exists()

    def test_no_delay_and_site_override(self, input_file, scrape_result, tmp_path):
        with patch("review_scraper.cli.Settings.from_env", return_value=Settings(output_dir=str(tmp_path))), \
             patch("review_scraper.cli.scrape", return_value=scrape_result) as mock_scrape, \
             patch("sys.stdout", new_callable=StringIO):
            main([str(input_file), "--no-delay", "--site", "g2"])

        kwargs = mock_scrape.call_args.kwargs
        assert kwargs["variant"] is SiteVariant.G2
        assert kwargs["settings"].retry_delay == 0.0
        assert kwargs["settings"].g2_page_delay == 0.0
        assert kwargs["settings"].generic_page_delay == 0.0

    def test_invalid_input_exits_before_scraping(self, tmp_path):
        bad = tmp_path / "input.json"
        bad.write_text(json.dumps({"url": G2_URL, "start_date": "2024-01-01"}))
        with patch("review_scraper.cli.scrape") as mock_scrape:
            assert main([str(bad)]) == 1
        mock_scrape.assert_not_called()

    def test_malformed_env_setting_exits_before_scraping(self, input_file, monkeypatch, caplog):
        monkeypatch.setenv("FETCH_TIMEOUT", "ninety")
        with patch("review_scraper.cli.scrape") as mock_scrape:
            assert main([str(input_file)]) == 1
        mock_scrape.assert_not_called()
        assert "Invalid input" in caplog.text

    def test_scrape_failure_writes_nothing(self, input_file, tmp_path):
        out_dir = tmp_path / "out"
        with patch("review_scraper.cli.Settings.from_env", return_value=Settings()), \
             patch("review_scraper.cli.scrape", side_effect=ScrapeError("blocked")):
            assert main([str(input_file), "-o", str(out_dir)]) == 1
        assert not out_dir.exists()

    def test_unreadable_dates_exit_with_error(self, input_file):
        with patch("review_scraper.cli.Settings.from_env", return_value=Settings()), \
             patch("review_scraper.cli.scrape", side_effect=ValueError("Unreadable start_date")):
            assert main([str(input_file)]) == 1

    def test_end_to_end_with_fake_fetch(self, input_file, tmp_path):
        from .conftest import g2_page, g2_review

        page = g2_page([g2_review("Ann", "Jan 15, 2024"), g2_review("Bob", "2022/1/1")])
        out_dir = tmp_path / "out"
        settings = Settings(retry_delay=0.0, g2_page_delay=0.0, output_dir=str(out_dir))
        with patch("review_scraper.cli.Settings.from_env", return_value=settings), \
             patch("review_scraper.crawler.fetch_html", MagicMock(return_value=page)), \
             patch("sys.stdout", new_callable=StringIO):
            assert main([str(input_file)]) == 0

        (path,) = out_dir.glob("*.json")
        doc = json.loads(path.read_text())
        assert [r["reviewerName"] for r in doc["allReviews"]] == ["Ann"]
        assert doc["totalScrapedReviews"] == 1
