"""Compression framing for export file sinks."""

import gzip
import io
import zipfile
from enum import Enum
from typing import BinaryIO, List

from ..util.logging import get_logger

logger = get_logger(__name__)


class Compression(str, Enum):
    """Compression applied to an export file."""

    NONE = "NONE"
    GZIP = "GZIP"
    ZIP = "ZIP"

    @property
    def extension(self) -> str:
        """Filesystem suffix for this compression, empty for NONE."""
        if self is Compression.NONE:
            return ""
        if self is Compression.GZIP:
            return ".gz"
        return "." + self.value.lower()


class FramedSink(io.BufferedIOBase):
    """Byte sink writing through a compression frame.

    Closing finalizes every layer in order (innermost frame first) and ends
    with the underlying sink, so one ``close()`` leaves a complete file.
    """

    def __init__(self, stream: BinaryIO, layers: List) -> None:
        super().__init__()
        self._stream = stream
        self._layers = layers
        self._finalized = False

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed sink")
        return self._stream.write(data)

    def flush(self) -> None:
        if not self._finalized:
            self._stream.flush()

    def close(self) -> None:
        if self.closed:
            return
        self._finalized = True
        try:
            for layer in self._layers:
                layer.close()
        finally:
            super().close()


def decorate_sink(sink: BinaryIO, entry_name: str, compression: Compression) -> BinaryIO:
    """Wrap a raw byte sink according to the compression mode.

    NONE returns ``sink`` itself. GZIP frames the bytes as a gzip stream.
    ZIP opens a deflated archive on ``sink`` holding exactly one entry called
    ``entry_name``; all bytes written land in that entry.
    """
    compression = Compression(compression)

    if compression is Compression.NONE:
        return sink

    if compression is Compression.GZIP:
        gz = gzip.GzipFile(filename="", mode="wb", fileobj=sink)
        return FramedSink(gz, [gz, sink])

    archive = zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED)
    entry = archive.open(entry_name, mode="w", force_zip64=True)
    logger.debug(f"Opened zip entry {entry_name}")
    return FramedSink(entry, [entry, archive, sink])
