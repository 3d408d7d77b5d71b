"""
Tests for the sector rotation monitor feed.
"""

import pytest
from datetime import date
from pathlib import Path
import tempfile

from stockfeeds.exceptions import DirectoryReadError
from stockfeeds.feeds.rotation import (
    FEED_TITLE,
    NO_FILES_DESCRIPTION,
    NO_PAIRS_DESCRIPTION,
    READ_FAILED_TITLE,
    UNKNOWN_INDUSTRY,
    build_image_url,
    build_rotation_feed,
    format_rotation_markdown,
    group_rotation_files,
)
from stockfeeds.sources import list_directory, parse_csv

TOP_CSV = "ts_code,name,industry\n000001.SZ,PingAn,Banking\n600036.SH,CMB,Banking\n"
BOTTOM_CSV = "ts_code,name,industry\n601857.SH,PetroChina,Oil & Gas\n"
BASE_URL = "http://img.example/charts"


def _write(directory: str, name: str, content: str = "") -> None:
    (Path(directory) / name).write_text(content, encoding="utf-8")


def _write_day(directory: str, date_str: str, top: bool = True, bottom: bool = True, image: bool = False) -> None:
    if top:
        _write(directory, f"{date_str}_top_industry_stocks.csv", TOP_CSV)
    if bottom:
        _write(directory, f"{date_str}_bottom_industry_stocks.csv", BOTTOM_CSV)
    if image:
        (Path(directory) / f"{date_str}_industry_performance_trend.png").write_bytes(b"\x89PNG\r\n")


class TestGroupRotationFiles:
    """Tests for date grouping."""

    def test_only_complete_days_newest_first(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_day(tmpdir, "20240102", image=True)
            _write_day(tmpdir, "20240103")
            _write_day(tmpdir, "20240104", bottom=False, image=True)
            _write_day(tmpdir, "20240105", top=False, image=True)

            days = group_rotation_files(list_directory(tmpdir))

            assert [d.date_str for d in days] == ["20240103", "20240102"]
            assert days[0].image is None
            assert days[1].image == Path(tmpdir) / "20240102_industry_performance_trend.png"
            assert days[1].top == Path(tmpdir) / "20240102_top_industry_stocks.csv"
            assert days[1].bottom == Path(tmpdir) / "20240102_bottom_industry_stocks.csv"


class TestFormatRotationMarkdown:
    """Tests for the Markdown body."""

    def test_sections_and_chart(self):
        body = format_rotation_markdown(
            "20240102",
            parse_csv(TOP_CSV, "-"),
            parse_csv(BOTTOM_CSV, "-"),
            image_url=f"{BASE_URL}/20240102_industry_performance_trend.png",
        )

        assert "Leading sector today: Banking" in body
        assert "High-potential sector today: Oil &amp; Gas" in body
        assert "1. **PingAn** (000001.SZ)" in body
        assert "2. **CMB** (600036.SH)" in body
        assert f"![Industry performance trend]({BASE_URL}/20240102_industry_performance_trend.png)" in body
        assert "No industry performance chart available" not in body

    def test_markdown_punctuation_in_cells_is_literal(self):
        top = parse_csv("ts_code,name,industry\n600518.SH,*ST Kangmei,Pharma_CN\n000002.SZ,*ST Other,Pharma_CN\n", "-")
        body = format_rotation_markdown("20240102", top, parse_csv(BOTTOM_CSV, "-"))

        assert "1. **\\*ST Kangmei** (600518.SH)" in body
        assert "Leading sector today: Pharma\\_CN" in body

    def test_placeholder_without_chart(self):
        body = format_rotation_markdown("20240102", parse_csv(TOP_CSV, "-"), parse_csv(BOTTOM_CSV, "-"))
        assert "> No industry performance chart available" in body
        assert "![" not in body

    def test_unknown_industry(self):
        body = format_rotation_markdown("20240102", [], parse_csv("ts_code,name\nX,Y\n", "-"))
        assert f"Leading sector today: {UNKNOWN_INDUSTRY}" in body
        assert f"High-potential sector today: {UNKNOWN_INDUSTRY}" in body

    def test_image_url_joins_base(self):
        assert build_image_url("http://a/b/", "x.png") == "http://a/b/x.png"
        assert build_image_url("http://a/b", "x.png") == "http://a/b/x.png"


class TestBuildRotationFeed:
    """Tests for the full rotation pipeline."""

    @pytest.mark.asyncio
    async def test_items_rendered_as_html(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_day(tmpdir, "20240102", image=True)
            _write_day(tmpdir, "20240103")

            feed = await build_rotation_feed(tmpdir, image_base_url=BASE_URL)

            assert feed.title == FEED_TITLE
            assert feed.link == tmpdir
            assert [i.pub_date for i in feed.items] == [date(2024, 1, 3), date(2024, 1, 2)]

            newest, older = feed.items
            assert newest.title == "20240103 Sector rotation monitor"
            assert newest.category == ["rotation", "stock"]
            assert newest.is_html
            assert "<strong>PingAn</strong>" in newest.description
            assert "No industry performance chart available" in newest.description
            assert f"{BASE_URL}/20240102_industry_performance_trend.png" in older.description
            assert "<img" in older.description
            assert "No industry performance chart available" not in older.description

    @pytest.mark.asyncio
    async def test_top_only_date_produces_no_item(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_day(tmpdir, "20240102")
            _write_day(tmpdir, "20240103", bottom=False)

            feed = await build_rotation_feed(tmpdir)

            assert [i.pub_date for i in feed.items] == [date(2024, 1, 2)]

    @pytest.mark.asyncio
    async def test_no_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_day(tmpdir, "20240102", bottom=False)

            feed = await build_rotation_feed(tmpdir)

            assert feed.items == []
            assert feed.description == NO_FILES_DESCRIPTION

    @pytest.mark.asyncio
    async def test_no_complete_pairs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write_day(tmpdir, "20240102", bottom=False)
            _write_day(tmpdir, "20240103", top=False)

            feed = await build_rotation_feed(tmpdir)

            assert feed.items == []
            assert feed.description == NO_PAIRS_DESCRIPTION

    @pytest.mark.asyncio
    async def test_csv_markup_is_escaped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "20240102_top_industry_stocks.csv",
                   "ts_code,name,industry\n000001.SZ,<script>alert(1)</script>,Banking\n")
            _write(tmpdir, "20240102_bottom_industry_stocks.csv", BOTTOM_CSV)

            feed = await build_rotation_feed(tmpdir)

            description = feed.items[0].description
            assert "<script>" not in description
            assert "&lt;script&gt;" in description

    @pytest.mark.asyncio
    async def test_unreadable_directory_raises_with_degraded_feed(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = str(Path(tmpdir) / "gone")

            with pytest.raises(DirectoryReadError) as exc_info:
                await build_rotation_feed(missing)

            degraded = exc_info.value.feed
            assert degraded.title == READ_FAILED_TITLE
            assert degraded.items == []
            assert missing in degraded.description
            assert isinstance(exc_info.value.cause, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_markdown_punctuation_does_not_become_emphasis(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "20240102_top_industry_stocks.csv",
                   "ts_code,name,industry\n600518.SH,*ST Kangmei,Pharma\n000002.SZ,*ST Other,Pharma\n")
            _write(tmpdir, "20240102_bottom_industry_stocks.csv", BOTTOM_CSV)

            feed = await build_rotation_feed(tmpdir)

            description = feed.items[0].description
            assert "<strong>*ST Kangmei</strong>" in description
            assert "<em>" not in description
