"""Base class for indicator output paths."""

from abc import ABC, abstractmethod

from ioc_convert.models import ExportResult, IndicatorBatch


class IndicatorExporter(ABC):
    """Base class for all indicator exporters.

    Exporters receive the full loaded batch and filter their own view of it;
    the batch itself is never modified, so exporters do not interfere.
    """

    @abstractmethod
    def export(self, batch: IndicatorBatch) -> ExportResult:
        """
        Write this exporter's output for the given batch.

        Args:
            batch: All indicators loaded from the source file.

        Returns:
            ExportResult with counts and written paths.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        """Return the output path name (e.g. 'splunk', 'hx')."""
        ...
