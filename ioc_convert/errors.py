"""Errors raised while converting an indicator spreadsheet."""


class ConversionError(Exception):
    """Base class for fail-fast conversion errors."""

    pass


class InvalidPathError(ConversionError):
    """Raised when the source spreadsheet is missing or unreadable."""

    pass


class UnsupportedFormatError(ConversionError):
    """Raised when the source file extension is not a known spreadsheet format."""

    pass


class InvalidOutputFormatError(ConversionError):
    """Raised when the Splunk table output name does not end in .csv."""

    pass
