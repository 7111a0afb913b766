"""Pytest configuration and shared fixtures."""

import pytest
from openpyxl import Workbook

from ioc_convert.config import ConverterConfig
from ioc_convert.models import Indicator, IndicatorBatch, IndicatorType


def write_workbook(path, sheets):
    """Write a workbook with one worksheet per (title, rows) pair."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(list(row))
    wb.save(path)
    return str(path)


@pytest.fixture
def workbook_factory(tmp_path):
    """Return a function writing a named workbook under tmp_path."""

    def _factory(name, sheets):
        return write_workbook(tmp_path / name, sheets)

    return _factory


@pytest.fixture
def valid_workbook(tmp_path):
    """Create a two-sheet workbook covering every exported indicator type."""
    return write_workbook(
        tmp_path / "indicators.xlsx",
        [
            (
                "Network",
                [
                    ("type", "indicator", "comment"),
                    ("domain", "evil.example.com", "c2"),
                    ("ip_address", "10.0.0.1", ""),
                    ("url", "http://malware.site/payload.exe", "dropper"),
                    ("domain", "evil.example.com", "duplicate"),
                ],
            ),
            (
                "Files",
                [
                    ("Indicator", "Type"),
                    ("d41d8cd98f00b204e9800998ecf8427e", "hash_md5"),
                    ("da39a3ee5e6b4b0d3255bfef95601890afd80709", "hash_sha1"),
                    ("not-a-type-value", "registry_key"),
                ],
            ),
        ],
    )


@pytest.fixture
def scenario_batch():
    """Two domains, one IP and three URLs."""
    return IndicatorBatch(
        indicators=tuple(
            Indicator(IndicatorType(t), v)
            for t, v in (
                ("domain", "a.com"),
                ("domain", "b.com"),
                ("ip_address", "1.1.1.1"),
                ("url", "http://x"),
                ("url", "http://y"),
                ("url", "http://z"),
            )
        )
    )


@pytest.fixture
def converter_config(tmp_path):
    """Config writing all outputs under tmp_path."""
    return ConverterConfig(
        splunk_output=str(tmp_path / "out" / "MSOC 2 Week.csv"),
        hx_dir=str(tmp_path / "out" / "hx"),
    )
