"""Splunk table exporter: aligns domains, IPs and URLs into one CSV."""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ioc_convert.exporters.base import IndicatorExporter
from ioc_convert.models import AlignedRow, ExportResult, IndicatorBatch, IndicatorType

if TYPE_CHECKING:
    from ioc_convert.config import ConverterConfig

logger = logging.getLogger("ioc_convert.splunk")

SPLUNK_CSV_HEADER = ["Domain", "IP", "URL", "Date"]

# Column order of the table; other indicator types are not exported here
TABLE_COLUMNS = (IndicatorType.DOMAIN, IndicatorType.IP_ADDRESS, IndicatorType.URL)

DATE_FORMAT = "%Y%m%d"


def build_table(
    batch: IndicatorBatch,
    today: Optional[date] = None,
) -> tuple[list[AlignedRow], dict[str, int]]:
    """
    Align the unique sorted domains, IPs and URLs of a batch into rows.

    Row i holds the i-th value of each column, or "" where a column is
    shorter. Only row 0 carries the date. An empty batch still yields a
    single all-empty row.

    Args:
        batch: Loaded indicators.
        today: Date stamped on the first row (defaults to the current date).

    Returns:
        Tuple of (rows, unique count per indicator type value).
    """
    groups = {t: batch.unique_values(t) for t in TABLE_COLUMNS}
    counts = {t.value: len(values) for t, values in groups.items()}
    max_len = max(counts.values())

    domains = groups[IndicatorType.DOMAIN]
    ips = groups[IndicatorType.IP_ADDRESS]
    urls = groups[IndicatorType.URL]

    rows: list[AlignedRow] = []
    for i in range(max(max_len, 1)):
        rows.append(
            AlignedRow(
                domain=domains[i] if i < len(domains) else "",
                ip=ips[i] if i < len(ips) else "",
                url=urls[i] if i < len(urls) else "",
            )
        )

    rows[0].date = (today or date.today()).strftime(DATE_FORMAT)
    return rows, counts


def write_table(rows: list[AlignedRow], output_path: str | Path) -> Path:
    """Write aligned rows to a CSV file with the Domain,IP,URL,Date header."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(SPLUNK_CSV_HEADER)
        writer.writerows(row.as_csv_row() for row in rows)

    return path


class SplunkTableExporter(IndicatorExporter):
    """Writes the column-per-type Splunk lookup CSV."""

    def __init__(self, config: "ConverterConfig", today: Optional[date] = None) -> None:
        self._output = config.splunk_output
        self._today = today

    def name(self) -> str:
        return "splunk"

    def export(self, batch: IndicatorBatch) -> ExportResult:
        rows, counts = build_table(batch, today=self._today)
        path = write_table(rows, self._output)

        logger.info(
            f"Splunk: {counts['domain']} domains, {counts['ip_address']} IPs, "
            f"{counts['url']} URLs -> {len(rows)} rows written to {path}"
        )

        return ExportResult(
            name=self.name(),
            unique_count=sum(counts.values()),
            row_count=len(rows),
            counts=counts,
            outputs=[path],
        )
