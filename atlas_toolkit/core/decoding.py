from __future__ import annotations

"""UTF-8 normalisation of input streams.

Documents are read as UTF-8 and handed to the tokenizer as UTF-8 bytes with
the tokenizer's encoding pinned to UTF-8. A leading byte order mark is
dropped. Bytes that are not valid UTF-8 are replaced with U+FFFD rather than
aborting the load.
"""

import codecs
import io
import locale
import logging
from typing import BinaryIO, Iterator, TextIO

logger = logging.getLogger(__name__)

__all__ = ["DOCUMENT_ENCODING", "open_utf8_reader", "iter_utf8_chunks"]

DOCUMENT_ENCODING = "utf-8"
# Same as UTF-8 but drops a leading byte order mark
_READER_ENCODING = "utf-8-sig"


def _reader_encoding() -> str:
    try:
        codecs.lookup(_READER_ENCODING)
        return _READER_ENCODING
    except LookupError:
        fallback = locale.getpreferredencoding(False)
        logger.warning("UTF-8 codec unavailable, reading documents as %s", fallback)
        return fallback


def open_utf8_reader(stream: BinaryIO) -> TextIO:
    """Wrap the binary *stream* in a UTF-8 text reader.

    Falls back to the platform's preferred encoding if the UTF-8 codec
    cannot be found. The returned reader does not close *stream* when it is
    garbage collected.
    """
    buffered = io.BufferedReader(_Unclosable(stream))
    return io.TextIOWrapper(buffered, encoding=_reader_encoding(),
                            errors="replace", newline="")


def iter_utf8_chunks(reader: TextIO, chunk_size: int) -> Iterator[bytes]:
    """Yield the text of *reader* re-encoded as UTF-8, *chunk_size* chars at a time."""
    while True:
        text = reader.read(chunk_size)
        if not text:
            return
        yield text.encode(DOCUMENT_ENCODING, errors="replace")


class _Unclosable(io.RawIOBase):
    """Read-only view on a stream that leaves it open when closed.

    Closing the stream stays the responsibility of whoever opened it.
    """

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        data = self._stream.read(len(buffer))
        if not data:
            return 0
        size = len(data)
        buffer[:size] = data
        return size
