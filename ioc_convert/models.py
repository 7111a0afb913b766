"""Data models for indicator conversion."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class IndicatorType(Enum):
    """Supported indicator types, as written in the spreadsheet's type column."""

    DOMAIN = "domain"
    IP_ADDRESS = "ip_address"
    URL = "url"
    HASH_MD5 = "hash_md5"
    HASH_SHA1 = "hash_sha1"
    HASH_SHA256 = "hash_sha256"
    EMAIL_ADDRESS = "email_address"
    FILENAME = "filename"

    @classmethod
    def parse(cls, raw: str) -> Optional["IndicatorType"]:
        """Return the member named by a raw type cell, or None if unknown."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Indicator:
    """A single typed indicator loaded from one spreadsheet row.

    Equality and hashing use (indicator_type, value) only, exact match.
    """

    indicator_type: IndicatorType
    value: str
    sheet: str = field(default="", compare=False)
    row_number: int = field(default=0, compare=False)
    extra: dict[str, str] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class SkippedRow:
    """A spreadsheet row that could not be loaded as an indicator."""

    sheet: str
    row_number: int
    raw_type: str
    reason: str


@dataclass(frozen=True)
class IndicatorBatch:
    """All indicators loaded from one input file, in worksheet order."""

    indicators: tuple[Indicator, ...] = ()
    skipped_rows: tuple[SkippedRow, ...] = ()

    def __len__(self) -> int:
        return len(self.indicators)

    def __iter__(self):
        return iter(self.indicators)

    def of_types(self, *types: IndicatorType) -> list[Indicator]:
        """Return a new list holding only indicators of the given types."""
        wanted = set(types)
        return [ind for ind in self.indicators if ind.indicator_type in wanted]

    def unique_values(self, indicator_type: IndicatorType) -> list[str]:
        """Return the sorted, deduplicated values of one indicator type."""
        return sorted({ind.value for ind in self.of_types(indicator_type)})


@dataclass
class AlignedRow:
    """One row of the Splunk table: the i-th value of each tracked column."""

    domain: str = ""
    ip: str = ""
    url: str = ""
    date: str = ""

    def as_csv_row(self) -> list[str]:
        """Return the row in Domain,IP,URL,Date column order."""
        return [self.domain, self.ip, self.url, self.date]


@dataclass
class ChunkFile:
    """One bounded slice of the sorted HX indicator list."""

    number: int
    values: list[str]
    path: Optional[Path] = None


@dataclass
class ExportResult:
    """Diagnostics returned by an exporter after writing its output."""

    name: str
    unique_count: int = 0
    row_count: int = 0
    chunk_count: int = 0
    counts: dict[str, int] = field(default_factory=dict)
    outputs: list[Path] = field(default_factory=list)


@dataclass
class ConversionSummary:
    """Outcome of one conversion run."""

    source: str
    loaded: int
    skipped: int
    results: dict[str, ExportResult] = field(default_factory=dict)
    total_processed: int = 0

    @property
    def ran_splunk(self) -> bool:
        return "splunk" in self.results

    @property
    def ran_hx(self) -> bool:
        return "hx" in self.results
