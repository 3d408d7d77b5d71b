"""
Tests for the split-based CSV parser.
"""

import pytest
from pathlib import Path
import tempfile

from stockfeeds.sources import parse_csv, read_csv_files


SAMPLE = (
    "ts_code,target_weight,name,industry,pe,pe_percentile\n"
    "000001.SZ,0.05,PingAn,Banking,10.2,50\n"
    "600519.SH,0.10,Moutai,Liquor,30.1,80\n"
)


class TestParseCsv:
    """Tests for parse_csv."""

    def test_header_and_rows(self):
        records = parse_csv(SAMPLE)
        assert len(records) == 2
        assert records[0] == {
            "ts_code": "000001.SZ",
            "target_weight": "0.05",
            "name": "PingAn",
            "industry": "Banking",
            "pe": "10.2",
            "pe_percentile": "50",
        }
        assert records[1]["name"] == "Moutai"

    def test_preserves_row_order(self):
        records = parse_csv("code\nc\na\nb\n")
        assert [r["code"] for r in records] == ["c", "a", "b"]

    def test_missing_trailing_columns_default_to_empty(self):
        records = parse_csv("ts_code,name,pe,pe_percentile\n000001.SZ,PingAn\n")
        assert records == [{"ts_code": "000001.SZ", "name": "PingAn", "pe": "", "pe_percentile": ""}]

    def test_missing_and_blank_cells_use_placeholder(self):
        records = parse_csv("ts_code,name,industry\n000001.SZ, ,\n600000.SH\n", placeholder="-")
        assert records[0] == {"ts_code": "000001.SZ", "name": "-", "industry": "-"}
        assert records[1] == {"ts_code": "600000.SH", "name": "-", "industry": "-"}

    def test_surplus_cells_are_dropped(self):
        records = parse_csv("a,b\n1,2,3,4\n")
        assert records == [{"a": "1", "b": "2"}]

    def test_whitespace_and_blank_lines(self):
        content = "\n  ts_code , name \r\n\r\n 000001.SZ ,  PingAn \r\n   \r\n"
        records = parse_csv(content)
        assert records == [{"ts_code": "000001.SZ", "name": "PingAn"}]

    def test_empty_content(self):
        assert parse_csv("") == []
        assert parse_csv("   \n\n") == []

    def test_header_only(self):
        assert parse_csv("ts_code,name\n") == []

    def test_quoted_fields_are_not_supported(self):
        # Quoted commas are split like any other comma
        records = parse_csv('name,industry\n"Ping, An",Banking\n')
        assert records[0]["name"] == '"Ping'
        assert records[0]["industry"] == 'An"'

    def test_parsing_is_idempotent(self):
        assert parse_csv(SAMPLE) == parse_csv(SAMPLE)

    def test_byte_order_mark_is_ignored(self):
        records = parse_csv("\ufeffts_code,name\n000001.SZ,PingAn\n")
        assert records == [{"ts_code": "000001.SZ", "name": "PingAn"}]


class TestReadCsvFiles:
    """Tests for concurrent CSV reads."""

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            first = Path(tmpdir) / "first.csv"
            second = Path(tmpdir) / "second.csv"
            first.write_text("name\nalpha\n", encoding="utf-8")
            second.write_text("name\nbeta\ngamma\n", encoding="utf-8")

            results = await read_csv_files([second, first])

            assert [r["name"] for r in results[0]] == ["beta", "gamma"]
            assert [r["name"] for r in results[1]] == ["alpha"]

    @pytest.mark.asyncio
    async def test_placeholder_is_applied(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "rows.csv"
            path.write_text("name,industry\nalpha\n", encoding="utf-8")

            results = await read_csv_files([path], placeholder="-")

            assert results == [[{"name": "alpha", "industry": "-"}]]

    @pytest.mark.asyncio
    async def test_single_failed_read_aborts_batch(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            good = Path(tmpdir) / "good.csv"
            good.write_text("name\nalpha\n", encoding="utf-8")

            with pytest.raises(FileNotFoundError):
                await read_csv_files([good, Path(tmpdir) / "missing.csv"])

    @pytest.mark.asyncio
    async def test_byte_order_mark_and_undecodable_bytes(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "rows.csv"
            path.write_bytes(b"\xef\xbb\xbfts_code,name\n000001.SZ," + "平安".encode("gbk") + b"\n")

            results = await read_csv_files([path])

            assert results[0][0]["ts_code"] == "000001.SZ"
            assert "\ufffd" in results[0][0]["name"]
