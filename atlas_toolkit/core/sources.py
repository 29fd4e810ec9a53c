from __future__ import annotations

"""Resolve a sheet's ``source`` attribute into a byte stream.

The parser itself never opens sources; sheets that need pixel data use a
resolver from their ``handle_attributes`` callback.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Union, runtime_checkable

from .exceptions import SourceNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["SourceResolver", "FileSystemResolver", "PackageResourceResolver"]


@runtime_checkable
class SourceResolver(Protocol):
    """Protocol for objects that open sheet sources."""

    def open(self, source: str) -> BinaryIO:
        """Return a readable binary stream for *source*.

        Raises:
            SourceNotFoundError: If *source* cannot be opened
        """
        ...


def _is_unsafe(source: str) -> bool:
    return os.path.isabs(source) or ".." in Path(source).parts


class FileSystemResolver:
    """Open sources as files relative to *base_dir*.

    Absolute paths and paths escaping *base_dir* through ``..`` are refused
    unless *allow_outside* is set.
    """

    def __init__(self, base_dir: Union[str, Path, None] = None,
                 allow_outside: bool = False) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.allow_outside = allow_outside

    def resolve(self, source: str) -> Path:
        if not self.allow_outside and _is_unsafe(source):
            raise SourceNotFoundError("Source points outside the base directory", source)
        return self.base_dir / source

    def open(self, source: str) -> BinaryIO:
        path = self.resolve(source)
        try:
            return open(path, "rb")
        except OSError as e:
            raise SourceNotFoundError(f"Cannot open {path}: {e}", source, e) from e


class PackageResourceResolver:
    """Open sources shipped as package data of *package*.

    Mirrors looking resources up on the import path, e.g. a game package
    bundling ``sprites/tiles.png`` next to its modules.
    """

    def __init__(self, package: str, prefix: Optional[str] = None) -> None:
        self.package = package
        self.prefix = prefix

    def open(self, source: str) -> BinaryIO:
        if _is_unsafe(source):
            raise SourceNotFoundError("Source points outside the package", source)
        try:
            resource = pkg_resources.files(self.package)
            if self.prefix:
                resource = resource.joinpath(self.prefix)
            for part in Path(source).parts:
                resource = resource.joinpath(part)
            return resource.open("rb")
        except (ModuleNotFoundError, TypeError, OSError) as e:
            raise SourceNotFoundError(
                f"Cannot open resource of package {self.package}: {e}", source, e
            ) from e
