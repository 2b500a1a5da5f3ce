from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
import logging
import re
import zipfile

from ala_data.domain.services.normalization import Table, format_datetime


WRITE_CHUNK_BYTES = 64 * 1024
logger = logging.getLogger(__name__)


class _ChunkSink:
    """Write-only, non-seekable target for ZipFile; compressed bytes are drained as they arrive."""

    def __init__(self):
        self._chunks: list[bytes] = []

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        return None

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


def _safe_symbol(symbol: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", symbol) or "UNKNOWN"


def _stamp(generated_at: datetime) -> str:
    return re.sub(r"[:.]", "-", format_datetime(generated_at))


def build_bundle_filename(*, symbol: str, days: int, generated_at: datetime) -> str:
    return f"uniswap_v3_{_safe_symbol(symbol)}_{days}days_{_stamp(generated_at)}.zip"


def build_table_filename(*, table: str, symbol: str, days: int, generated_at: datetime) -> str:
    return f"{table}_{_safe_symbol(symbol)}_{days}days_{_stamp(generated_at)}.csv"


def iter_zip_bundle(tables: Iterable[Table], *, compresslevel: int = 9) -> Iterator[bytes]:
    """Yield a deflated ZIP holding one CSV member per table.

    Compressed bytes are yielded while members are written, so the whole archive
    is never held in memory. Callers pass tables that are already normalized.
    """
    sink = _ChunkSink()
    members = 0
    with zipfile.ZipFile(
        sink,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compresslevel,
    ) as archive:
        for table in tables:
            payload = table.render().encode("utf-8")
            with archive.open(table.filename, mode="w") as member:
                for offset in range(0, len(payload), WRITE_CHUNK_BYTES):
                    member.write(payload[offset : offset + WRITE_CHUNK_BYTES])
                    chunk = sink.drain()
                    if chunk:
                        yield chunk
            members += 1
            chunk = sink.drain()
            if chunk:
                yield chunk

    tail = sink.drain()
    if tail:
        yield tail
    logger.info("zip_bundle: finished members=%s", members)
