from __future__ import annotations

"""Command line inspection of sprite sheet documents.

Usage::

    python run.py sprites.xml [--base-dir DIR] [--decode] [--strict] [-v]

Without ``--decode`` the document is only validated: sheets and sprites are
built from the plain model classes and no image is opened.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from atlas_toolkit import __version__
from atlas_toolkit.core.diagnostics import DiagnosticCollector, LoggingSink
from atlas_toolkit.core.exceptions import ResourceLoadError
from atlas_toolkit.core.factories import SimpleResourceFactory
from atlas_toolkit.core.handler import ResourceHandler
from atlas_toolkit.core.images import ImageResourceHandler, ImageSheet
from atlas_toolkit.core.sources import FileSystemResolver
from atlas_toolkit.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_LOAD_FAILED = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlas-inspect",
        description="Load sprite sheet XML documents and list their contents.",
    )
    parser.add_argument("documents", nargs="+", type=Path,
                        help="XML documents to load, in order, into one catalog")
    parser.add_argument("--base-dir", type=Path, default=None,
                        help="directory sheet sources are resolved against "
                             "(default: directory of each document)")
    parser.add_argument("--decode", action="store_true",
                        help="decode sheet images with Pillow")
    parser.add_argument("--strict", action="store_true",
                        help="exit with status 1 if any error diagnostic was reported")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="show info-level log messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _make_handler(args: argparse.Namespace, document: Path,
                  previous: Optional[ResourceHandler],
                  collector: DiagnosticCollector) -> ResourceHandler:
    catalog = previous.catalog if previous is not None else None
    if args.decode:
        base_dir = args.base_dir or document.parent
        return ImageResourceHandler(FileSystemResolver(base_dir), catalog=catalog, sink=collector)
    return ResourceHandler(SimpleResourceFactory(), catalog=catalog, sink=collector)


def print_catalog(handler: ResourceHandler, out: TextIO) -> None:
    for name in sorted(handler.catalog.names()):
        sheet = handler.get(name)
        line = f"{name}  source={sheet.source}  sprites={len(sheet)}"
        if isinstance(sheet, ImageSheet):
            if sheet.image is not None:
                line += f"  size={sheet.image.width}x{sheet.image.height}"
            else:
                line += f"  [not decoded: {sheet.load_error}]"
        print(line, file=out)
        for sprite_name in sorted(sheet.names()):
            sprite = sheet.get(sprite_name)
            print(f"  {sprite_name}  {sprite.bounds}", file=out)


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    collector = DiagnosticCollector(forward_to=LoggingSink(logger))
    handler: Optional[ResourceHandler] = None
    for document in args.documents:
        handler = _make_handler(args, document, handler, collector)
        try:
            handler.load_path(document)
        except ResourceLoadError as exc:
            logger.error("Could not load %s: %s", document, exc)
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_LOAD_FAILED

    print_catalog(handler, out)
    if collector.diagnostics:
        print("", file=out)
        for diagnostic in collector:
            print(str(diagnostic), file=out)

    if args.strict and collector.errors:
        return EXIT_DIAGNOSTICS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
