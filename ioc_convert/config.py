"""Configuration loader for the indicator converter."""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_SPLUNK_OUTPUT = "MSOC 2 Week.csv"
DEFAULT_HX_DIR = "hx"
DEFAULT_HX_PREFIX = "HX_Indicators_"
DEFAULT_CHUNK_SIZE = 10000

SPLUNK_OUTPUT_EXTENSION = ".csv"


def _bool_from_str(value: str, default: bool = False) -> bool:
    """Convert string to boolean."""
    return value.lower() in ("true", "1", "yes") if value else default


def _positive_int(value: Optional[str], name: str, default: int) -> int:
    """Parse a positive integer setting, falling back to default when unset."""
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"Invalid {name}: '{value}'. Must be an integer") from None
    return validate_chunk_size(number, name)


def validate_chunk_size(value: int, name: str = "chunk size") -> int:
    """Validate that a chunk size is at least 1."""
    if value < 1:
        raise ValueError(f"Invalid {name}: {value}. Must be at least 1")
    return value


@dataclass
class ConverterConfig:
    """Converter configuration from environment variables."""

    # Splunk table output
    splunk_output: str = DEFAULT_SPLUNK_OUTPUT

    # HX chunk output
    hx_dir: str = DEFAULT_HX_DIR
    hx_prefix: str = DEFAULT_HX_PREFIX
    hx_chunk_size: int = DEFAULT_CHUNK_SIZE

    debug: bool = False


def load_config() -> ConverterConfig:
    """Load configuration from environment variables."""
    return ConverterConfig(
        splunk_output=os.environ.get("IOC_SPLUNK_OUTPUT") or DEFAULT_SPLUNK_OUTPUT,
        hx_dir=os.environ.get("IOC_HX_DIR") or DEFAULT_HX_DIR,
        hx_prefix=os.environ.get("IOC_HX_PREFIX") or DEFAULT_HX_PREFIX,
        hx_chunk_size=_positive_int(
            os.environ.get("IOC_HX_CHUNK_SIZE"), "IOC_HX_CHUNK_SIZE", DEFAULT_CHUNK_SIZE
        ),
        debug=_bool_from_str(os.environ.get("IOC_DEBUG", "")),
    )
