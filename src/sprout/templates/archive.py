"""Streaming extraction of GitHub tarballs.

The archive flows through three stages without ever being held in memory
as a whole: raw gzip chunks -> decompressed tar bytes -> filtered entries
written to disk.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from collections.abc import Iterable, Iterator
from pathlib import Path

from sprout.templates.base import ResolvedTemplate

logger = logging.getLogger(__name__)

# wbits for zlib that accepts only a gzip header and trailer
GZIP_WBITS = 16 + zlib.MAX_WBITS


def gunzip_chunks(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Decompress a stream of gzip chunks lazily.

    Raises:
        zlib.error: On corrupt input.
        EOFError: If the stream ends before the gzip trailer.
    """
    decompressor = zlib.decompressobj(GZIP_WBITS)
    for chunk in chunks:
        data = decompressor.decompress(chunk)
        if data:
            yield data
    tail = decompressor.flush()
    if tail:
        yield tail
    if not decompressor.eof:
        raise EOFError("Compressed archive ended unexpectedly")


class ChunkReader(io.RawIOBase):
    """Read-only file object over an iterator of byte chunks."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = iter(chunks)
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


def include_entry(name: str, sub_path: str) -> bool:
    """Decide whether an archive entry belongs to the template.

    The decision looks only at the path below the synthetic top-level
    ``<repo>-<revision>/`` directory.
    """
    parts = name.split("/")
    if len(parts) < 2:
        return False
    if not sub_path:
        return True
    relative = "/".join(parts[1:])
    return relative == sub_path or relative.startswith(f"{sub_path}/")


def strip_entry(name: str, strip_count: int) -> str | None:
    """Drop ``strip_count`` leading segments; None if nothing is left."""
    parts = [part for part in name.split("/")[strip_count:] if part]
    if not parts:
        return None
    return "/".join(parts)


def extract_archive(
    chunks: Iterable[bytes],
    template: ResolvedTemplate,
    staging_dir: Path,
) -> int:
    """Extract the template part of a gzip tarball into ``staging_dir``.

    Args:
        chunks: Gzip-compressed tarball bytes, in order.
        template: The resolved template; its sub-path selects the entries
            and its strip count sets their depth on disk.
        staging_dir: Existing directory to write into.

    Returns:
        Number of entries written.

    Raises:
        zlib.error, EOFError, tarfile.TarError, OSError: On corrupt input
            or write failure. Errors raised by ``chunks`` propagate unchanged.
    """
    sub_path = template.sub_path
    strip_count = template.strip_count
    written = 0

    decompressed = gunzip_chunks(chunks)
    reader = io.BufferedReader(ChunkReader(decompressed))
    with tarfile.open(fileobj=reader, mode="r|") as archive:
        for member in archive:
            if not include_entry(member.name, sub_path):
                continue
            target = strip_entry(member.name, strip_count)
            if target is None:
                continue
            member.name = target
            if member.islnk():
                # Hard links name another archive member; move it to the same depth
                link_target = strip_entry(member.linkname, strip_count)
                if link_target is None:
                    continue
                member.linkname = link_target
            archive.extract(member, staging_dir, filter="data")
            written += 1

    # Drain the stream so a truncated or corrupt trailer is still detected
    for _ in decompressed:
        pass

    logger.debug("Extracted %d entries for %s", written, template.display_name)
    return written
