from __future__ import annotations

"""Exception classes for resource loading.

Only structural failures of a load (malformed XML, unreadable stream,
tokenizer construction) are raised to the caller. Validation problems on
individual ``<sheet>``/``<sprite>`` elements are reported as diagnostics
instead, see :mod:`atlas_toolkit.core.diagnostics`.
"""

from typing import Optional

__all__ = [
    "AtlasError",
    "ResourceLoadError",
    "MalformedDocumentError",
    "StreamReadError",
    "ParserSetupError",
    "SourceNotFoundError",
    "ImageNotLoadedError",
]


class AtlasError(Exception):
    """Base exception for all atlas toolkit errors.

    Carries the optional *source* the error relates to (a file path or a
    sheet ``source`` attribute) and the underlying *cause*.
    """

    def __init__(self, message: str, source: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.source = source
        self.cause = cause

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {super().__str__()}"
        return super().__str__()


class ResourceLoadError(AtlasError):
    """Raised when a resource document cannot be loaded at all.

    Nothing after the failure point has been parsed; entries added to the
    catalog before the failure are kept.
    """
    pass


class MalformedDocumentError(ResourceLoadError):
    """Raised when the XML document is not well-formed."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, source, cause)
        self.line = line
        self.column = column


class StreamReadError(ResourceLoadError):
    """Raised when the input stream cannot be read."""
    pass


class ParserSetupError(ResourceLoadError):
    """Raised when the XML tokenizer cannot be constructed."""
    pass


class SourceNotFoundError(AtlasError):
    """Raised by a source resolver when a ``source`` cannot be opened."""
    pass


class ImageNotLoadedError(AtlasError):
    """Raised when pixel data is requested from a sheet that has none."""
    pass
