"""Indicator spreadsheet loader."""

import csv
import logging
import zipfile
from contextlib import closing
from pathlib import Path
from typing import Any, Iterable, Iterator

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from ioc_convert.errors import InvalidPathError, UnsupportedFormatError
from ioc_convert.models import Indicator, IndicatorBatch, IndicatorType, SkippedRow

logger = logging.getLogger("ioc_convert.loader")

TYPE_HEADER = "type"
INDICATOR_HEADER = "indicator"

OPENPYXL_EXTENSIONS = (".xlsx", ".xlsm", ".xltx", ".xltm")
XLRD_EXTENSIONS = (".xls",)
CSV_EXTENSIONS = (".csv",)
SUPPORTED_EXTENSIONS = OPENPYXL_EXTENSIONS + XLRD_EXTENSIONS + CSV_EXTENSIONS

# A worksheet as (sheet name, rows of raw cell values)
Sheet = tuple[str, Iterable[Iterable[Any]]]


def cell_text(value: Any) -> str:
    """Render a raw cell value as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _iter_openpyxl_sheets(path: Path) -> Iterator[Sheet]:
    workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    with closing(workbook):
        for worksheet in workbook.worksheets:
            yield worksheet.title, worksheet.iter_rows(values_only=True)


def _iter_xlrd_sheets(path: Path) -> Iterator[Sheet]:
    book = xlrd.open_workbook(str(path), on_demand=True)
    try:
        for sheet in book.sheets():
            yield sheet.name, (sheet.row_values(i) for i in range(sheet.nrows))
    finally:
        book.release_resources()


def _iter_csv_sheets(path: Path) -> Iterator[Sheet]:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        yield path.stem, csv.reader(f)


_READERS = {
    **{ext: _iter_openpyxl_sheets for ext in OPENPYXL_EXTENSIONS},
    **{ext: _iter_xlrd_sheets for ext in XLRD_EXTENSIONS},
    **{ext: _iter_csv_sheets for ext in CSV_EXTENSIONS},
}


def _load_sheet(
    sheet_name: str,
    rows: Iterable[Iterable[Any]],
    indicators: list[Indicator],
    skipped: list[SkippedRow],
) -> None:
    """Append the indicators of one worksheet, using its first non-empty row as header."""
    header: list[str] | None = None
    type_col = indicator_col = -1
    loaded = 0

    for row_number, raw_row in enumerate(rows, start=1):
        cells = [cell_text(v) for v in raw_row]
        if not any(cells):
            continue

        if header is None:
            header = [c.lower() for c in cells]
            if TYPE_HEADER not in header or INDICATOR_HEADER not in header:
                logger.warning(
                    f"Sheet {sheet_name!r}: header row lacks "
                    f"'{TYPE_HEADER}' and '{INDICATOR_HEADER}' columns, skipping sheet"
                )
                return
            type_col = header.index(TYPE_HEADER)
            indicator_col = header.index(INDICATOR_HEADER)
            continue

        cells += [""] * (len(header) - len(cells))
        raw_type = cells[type_col]
        value = cells[indicator_col]
        if not value:
            continue

        indicator_type = IndicatorType.parse(raw_type)
        if indicator_type is None:
            skipped.append(
                SkippedRow(sheet_name, row_number, raw_type, "Unrecognized indicator type")
            )
            continue

        extra = {
            name: cells[i]
            for i, name in enumerate(header)
            if name and i not in (type_col, indicator_col)
        }
        indicators.append(
            Indicator(
                indicator_type=indicator_type,
                value=value,
                sheet=sheet_name,
                row_number=row_number,
                extra=extra,
            )
        )
        loaded += 1

    logger.debug(f"Sheet {sheet_name!r}: loaded {loaded} indicators")


def load_indicators(file_path: str | Path) -> IndicatorBatch:
    """
    Load every indicator from every worksheet of a spreadsheet.

    Args:
        file_path: Path to a .xlsx/.xlsm/.xltx/.xltm, .xls or .csv file

    Returns:
        IndicatorBatch with indicators in worksheet order and the rows skipped
        because of an unrecognized type.

    Raises:
        InvalidPathError: The file does not exist or cannot be read.
        UnsupportedFormatError: The extension is not a supported format.
    """
    path = Path(file_path)
    if not path.is_file():
        raise InvalidPathError(f"Source file not found: {file_path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedFormatError(
            f"Unsupported source format {path.suffix!r}: expected one of "
            f"{', '.join(SUPPORTED_EXTENSIONS)}"
        )

    indicators: list[Indicator] = []
    skipped: list[SkippedRow] = []

    try:
        with closing(reader(path)) as sheets:
            for sheet_name, rows in sheets:
                _load_sheet(sheet_name, rows, indicators, skipped)
    except (
        OSError,
        KeyError,
        UnicodeDecodeError,
        zipfile.BadZipFile,
        InvalidFileException,
        xlrd.XLRDError,
    ) as e:
        raise InvalidPathError(f"Cannot read source file {file_path}: {e}") from e

    logger.info(
        f"Loaded {len(indicators)} indicators from {path.name}"
        + (f" ({len(skipped)} rows with unrecognized type skipped)" if skipped else "")
    )
    return IndicatorBatch(indicators=tuple(indicators), skipped_rows=tuple(skipped))
