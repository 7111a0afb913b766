"""HX exporter: splits unique hashes, IPs and domains into bounded text files."""

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ioc_convert.config import DEFAULT_CHUNK_SIZE, DEFAULT_HX_PREFIX, validate_chunk_size
from ioc_convert.exporters.base import IndicatorExporter
from ioc_convert.models import ChunkFile, ExportResult, IndicatorBatch, IndicatorType

if TYPE_CHECKING:
    from ioc_convert.config import ConverterConfig

logger = logging.getLogger("ioc_convert.hx")

HX_TYPES = (IndicatorType.HASH_MD5, IndicatorType.IP_ADDRESS, IndicatorType.DOMAIN)

CHUNK_EXTENSION = ".txt"


def collect_hx_values(batch: IndicatorBatch) -> list[str]:
    """Return the sorted unique values of all HX-eligible indicators."""
    return sorted({ind.value for ind in batch.of_types(*HX_TYPES)})


def chunk_values(values: list[str], max_chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[ChunkFile]:
    """
    Split values into consecutive chunks of at most max_chunk_size.

    Chunk k (numbered k + 1) holds values[k * size : (k + 1) * size].
    """
    size = validate_chunk_size(max_chunk_size)
    return [
        ChunkFile(number=k + 1, values=values[start : start + size])
        for k, start in enumerate(range(0, len(values), size))
    ]


def chunk_filename(prefix: str, number: int) -> str:
    """Return the file name of chunk number (1-based)."""
    return f"{prefix}{number}{CHUNK_EXTENSION}"


def _chunk_file_re(prefix: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(prefix)}\d+{re.escape(CHUNK_EXTENSION)}$")


def find_chunk_files(output_dir: str | Path, prefix: str = DEFAULT_HX_PREFIX) -> list[Path]:
    """List the chunk files in a directory that follow the naming convention."""
    directory = Path(output_dir)
    if not directory.is_dir():
        return []
    pattern = _chunk_file_re(prefix)
    return sorted(p for p in directory.iterdir() if p.is_file() and pattern.match(p.name))


def _write_chunk(path: Path, values: list[str]) -> None:
    with path.open("w", encoding="ascii", errors="replace", newline="\n") as f:
        for value in values:
            f.write(f"{value}\n")


def write_chunks(
    chunks: list[ChunkFile],
    output_dir: str | Path,
    prefix: str = DEFAULT_HX_PREFIX,
) -> list[Path]:
    """
    Replace the chunk files in output_dir with the given chunks.

    Chunks are first staged in a temporary directory beside output_dir, so a
    failure while writing leaves the previous chunk set untouched. Old chunk
    files are then removed and the staged files moved in. Files that do not
    match the chunk naming convention are left alone.

    Args:
        chunks: Chunks to write, in order.
        output_dir: Destination directory (created if missing).
        prefix: Chunk file name prefix.

    Returns:
        Paths of the written chunk files, in chunk order.
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    staging = Path(tempfile.mkdtemp(prefix=f".{directory.name}-", dir=directory.parent))
    try:
        staged: list[tuple[Path, Path]] = []
        for chunk in chunks:
            name = chunk_filename(prefix, chunk.number)
            _write_chunk(staging / name, chunk.values)
            staged.append((staging / name, directory / name))

        for old in find_chunk_files(directory, prefix):
            logger.debug(f"Removing previous chunk file {old}")
            old.unlink()

        written: list[Path] = []
        for src, dest in staged:
            os.replace(src, dest)
            written.append(dest)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    for chunk, path in zip(chunks, written):
        chunk.path = path
    return written


class HXChunkExporter(IndicatorExporter):
    """Writes unique HX indicators as numbered plain-text chunk files."""

    def __init__(self, config: "ConverterConfig") -> None:
        self._output_dir = config.hx_dir
        self._prefix = config.hx_prefix
        self._chunk_size = validate_chunk_size(config.hx_chunk_size, "HX chunk size")

    def name(self) -> str:
        return "hx"

    def export(self, batch: IndicatorBatch) -> ExportResult:
        values = collect_hx_values(batch)
        chunks = chunk_values(values, self._chunk_size)
        paths = write_chunks(chunks, self._output_dir, self._prefix)

        counts = {
            t.value: len(set(ind.value for ind in batch.of_types(t))) for t in HX_TYPES
        }
        logger.info(
            f"HX: {len(values)} unique indicators written to {len(paths)} file(s) "
            f"in {self._output_dir}"
        )

        return ExportResult(
            name=self.name(),
            unique_count=len(values),
            chunk_count=len(chunks),
            counts=counts,
            outputs=paths,
        )
