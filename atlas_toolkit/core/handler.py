from __future__ import annotations

"""Load sprite sheet documents into a resource catalog.

:class:`ResourceHandler` wires the pieces together: it normalises the input
stream to UTF-8, pushes it through lxml's incremental parser and lets a
:class:`~atlas_toolkit.core.parser.ResourceParser` build sheets and sprites
from the resulting tag events.

Only structural failures abort a load (see
:class:`~atlas_toolkit.core.exceptions.ResourceLoadError`); everything else
ends up as diagnostics.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from lxml import etree as ET

from atlas_toolkit.config import LoaderSettings

from .catalog import ResourceCatalog
from .decoding import DOCUMENT_ENCODING, iter_utf8_chunks, open_utf8_reader
from .diagnostics import Diagnostic, DiagnosticsSink, LoggingSink
from .exceptions import (
    MalformedDocumentError,
    ParserSetupError,
    StreamReadError,
)
from .factories import ResourceFactory
from .models import SpriteResource, SpriteSheetResource
from .parser import ParserTarget, ResourceParser

logger = logging.getLogger(__name__)

__all__ = ["ResourceHandler"]


class ResourceHandler:
    """Parse resource documents and keep the resulting sheets.

    Args:
        factory: Creates the sheet and sprite instances.
        catalog: Catalog to fill; a new empty one is created when omitted.
            Successive loads accumulate into the same catalog.
        sink: Receives diagnostics. Defaults to a :class:`LoggingSink`.
        settings: Loader tunables. Read from ``loader.yml`` when omitted.
    """

    def __init__(self, factory: ResourceFactory,
                 catalog: Optional[ResourceCatalog] = None,
                 sink: Optional[DiagnosticsSink] = None,
                 settings: Optional[LoaderSettings] = None) -> None:
        self.factory = factory
        self.settings = settings if settings is not None else LoaderSettings.from_config()
        self._catalog = catalog if catalog is not None else ResourceCatalog()
        self._parser = ResourceParser(
            factory,
            self._catalog,
            sink if sink is not None else LoggingSink(),
            report_unknown_attributes=self.settings.report_unknown_attributes,
        )
        self.logger = logging.getLogger(f"{__name__}.ResourceHandler")

    @property
    def catalog(self) -> ResourceCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Catalog access
    # ------------------------------------------------------------------
    def put(self, name: str, sheet: SpriteSheetResource) -> None:
        self._catalog.put(name, sheet)

    def get(self, name: str) -> Optional[SpriteSheetResource]:
        return self._catalog.get(name)

    # ------------------------------------------------------------------
    # Factory delegation
    # ------------------------------------------------------------------
    def create_sheet(self) -> SpriteSheetResource:
        return self.factory.create_sheet()

    def create_sprite(self, sheet: SpriteSheetResource, x: int, y: int,
                      w: int, h: int) -> SpriteResource:
        return self.factory.create_sprite(sheet, x, y, w, h)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, stream: BinaryIO, source: Optional[str] = None) -> List[Diagnostic]:
        """Parse the document read from *stream* into the catalog.

        Args:
            stream: Binary stream positioned at the start of the document.
                It is not closed.
            source: Optional label (e.g. the file name) used in error messages.

        Returns:
            Diagnostics reported while parsing this document

        Raises:
            MalformedDocumentError: If the XML is not well-formed
            StreamReadError: If *stream* cannot be read
            ParserSetupError: If the XML tokenizer cannot be created
        """
        self._parser.reset()
        xml_parser = self._create_xml_parser(source)
        self.logger.debug("Loading resource document %s", source or "<stream>")

        try:
            for chunk in self._read_chunks(stream, source):
                xml_parser.feed(chunk)
            diagnostics = xml_parser.close()
        except ET.XMLSyntaxError as e:
            line, column = e.position if e.position else (None, None)
            raise MalformedDocumentError(
                f"XML syntax error: {e.msg}", source, line, column, e
            ) from e

        self.logger.debug("Loaded %s: %d sheets in catalog, %d diagnostics",
                          source or "<stream>", len(self._catalog), len(diagnostics))
        return diagnostics

    def load_path(self, path: Union[str, Path]) -> List[Diagnostic]:
        """Open the file at *path* and :meth:`load` it."""
        path = Path(path)
        try:
            with open(path, "rb") as fh:
                return self.load(fh, source=str(path))
        except OSError as e:
            raise StreamReadError(f"Failed to open document: {e}", str(path), e) from e

    def _read_chunks(self, stream: BinaryIO, source: Optional[str]) -> Iterator[bytes]:
        reader = open_utf8_reader(stream)
        try:
            yield from iter_utf8_chunks(reader, self.settings.chunk_size)
        except (OSError, ValueError) as e:
            raise StreamReadError(f"Failed to read document: {e}", source, e) from e

    def _create_xml_parser(self, source: Optional[str]) -> ET.XMLParser:
        try:
            return ET.XMLParser(
                target=ParserTarget(self._parser),
                encoding=DOCUMENT_ENCODING,
                resolve_entities="internal",  # External entities stay unresolved
                no_network=True,
                huge_tree=self.settings.huge_tree,
            )
        except (TypeError, ValueError, LookupError) as e:
            raise ParserSetupError(f"Cannot create XML parser: {e}", source, e) from e
