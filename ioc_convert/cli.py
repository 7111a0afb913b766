"""CLI entrypoint for the indicator converter."""

import argparse
import logging
import sys
from typing import Optional

from ioc_convert.config import (
    SPLUNK_OUTPUT_EXTENSION,
    ConverterConfig,
    load_config,
    validate_chunk_size,
)
from ioc_convert.errors import (
    ConversionError,
    InvalidOutputFormatError,
    InvalidPathError,
)
from ioc_convert.exporters.hx import HXChunkExporter
from ioc_convert.exporters.splunk import SplunkTableExporter
from ioc_convert.loader import load_indicators
from ioc_convert.logging_setup import setup_logging
from ioc_convert.models import ConversionSummary, IndicatorType

logger = logging.getLogger("ioc_convert")

# Registry of available output paths, in the order they run
EXPORTER_REGISTRY = {
    "splunk": SplunkTableExporter,
    "hx": HXChunkExporter,
}


def select_exporters(splunk: bool, hx: bool) -> list[str]:
    """Return the output paths to run; with neither flag set, both run."""
    if not splunk and not hx:
        return list(EXPORTER_REGISTRY)
    return [name for name, enabled in (("splunk", splunk), ("hx", hx)) if enabled]


def validate_splunk_output(output_path: str) -> str:
    """Reject a Splunk output name that does not end in .csv."""
    if not output_path.lower().endswith(SPLUNK_OUTPUT_EXTENSION):
        raise InvalidOutputFormatError(
            f"Splunk output file must end in {SPLUNK_OUTPUT_EXTENSION}: {output_path!r}"
        )
    return output_path


def compute_total_processed(summary: ConversionSummary, unique_md5: int) -> int:
    """
    Compute the "total unique indicators processed" figure.

    With both paths: Splunk row count plus unique MD5 hashes. With one path:
    that path's own count (Splunk rows, or HX unique values).
    """
    splunk = summary.results.get("splunk")
    hx = summary.results.get("hx")
    if splunk and hx:
        return splunk.row_count + unique_md5
    if hx:
        return hx.unique_count
    if splunk:
        return splunk.row_count
    return 0


def convert(
    source: str,
    config: ConverterConfig,
    splunk: bool = False,
    hx: bool = False,
) -> ConversionSummary:
    """
    Load a spreadsheet and run the selected output paths.

    Args:
        source: Path to the indicator spreadsheet.
        config: Output locations and chunk settings.
        splunk: Run the Splunk table path.
        hx: Run the HX chunk path. With neither flag, both run.

    Returns:
        ConversionSummary with per-path results and the total processed count.

    Raises:
        InvalidOutputFormatError: Splunk output name does not end in .csv.
        InvalidPathError: Source file missing or unreadable.
        UnsupportedFormatError: Source extension not supported.
    """
    selected = select_exporters(splunk, hx)
    if "splunk" in selected:
        validate_splunk_output(config.splunk_output)

    exporters = [EXPORTER_REGISTRY[name](config) for name in selected]

    logger.info(f"Converting indicators from {source}")
    batch = load_indicators(source)

    summary = ConversionSummary(
        source=source,
        loaded=len(batch),
        skipped=len(batch.skipped_rows),
    )

    for row in batch.skipped_rows:
        logger.debug(
            f"Skipped {row.sheet!r} row {row.row_number}: {row.reason} ({row.raw_type!r})"
        )

    for exporter in exporters:
        summary.results[exporter.name()] = exporter.export(batch)

    logger.info(
        f"Outputs written: Splunk {'yes' if summary.ran_splunk else 'no'}, "
        f"HX {'yes' if summary.ran_hx else 'no'}"
    )

    unique_md5 = len(batch.unique_values(IndicatorType.HASH_MD5))
    summary.total_processed = compute_total_processed(summary, unique_md5)

    logger.info(f"Total unique indicators processed: {summary.total_processed}")
    return summary


def convert_command(args: argparse.Namespace, config: ConverterConfig) -> int:
    """
    Execute a conversion from parsed CLI arguments.

    Returns:
        Exit code (0 = success, 1 = invalid format, 2 = source not found).
    """
    if args.splunk_output is not None:
        config.splunk_output = args.splunk_output
    if args.hx_dir is not None:
        config.hx_dir = args.hx_dir
    if args.chunk_size is not None:
        config.hx_chunk_size = args.chunk_size

    try:
        convert(args.source, config, splunk=args.splunk, hx=args.hx)
    except InvalidPathError as e:
        logger.error(str(e))
        return 2
    except ConversionError as e:
        logger.error(str(e))
        return 1

    return 0


def _chunk_size_arg(value: str) -> int:
    try:
        return validate_chunk_size(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert an indicator spreadsheet to Splunk CSV and HX text files"
    )
    parser.add_argument("source", help="Path to the indicator spreadsheet")
    parser.add_argument(
        "-s",
        "--splunk",
        action="store_true",
        help="Write the Splunk CSV (default: both outputs when neither flag is given)",
    )
    parser.add_argument(
        "-x",
        "--hx",
        action="store_true",
        help="Write the HX chunk files (default: both outputs when neither flag is given)",
    )
    parser.add_argument(
        "-o",
        "--splunk-output",
        default=None,
        help="Splunk CSV file name, must end in .csv (default: 'MSOC 2 Week.csv')",
    )
    parser.add_argument(
        "-d",
        "--hx-dir",
        default=None,
        help="Directory for HX chunk files (default: hx)",
    )
    parser.add_argument(
        "--chunk-size",
        type=_chunk_size_arg,
        default=None,
        help="Maximum indicators per HX file (default: 10000)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only print errors"
    )
    parser.add_argument(
        "-c", "--count", action="store_true", help="Reserved, currently has no effect"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(debug=args.debug or config.debug, quiet=args.quiet)

    sys.exit(convert_command(args, config))


if __name__ == "__main__":
    main()
