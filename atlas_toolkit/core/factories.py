from __future__ import annotations

"""Factory interface definitions.

The parser never instantiates sheets or sprites itself. It asks a
:class:`ResourceFactory` for them, which lets callers plug in their own
resource types (pixel-backed, GPU textures, plain records for validation).
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from .models import Bounds, SpriteResource, SpriteSheetResource

__all__ = ["ResourceFactory", "ResourceFactoryBase", "SimpleResourceFactory"]


@runtime_checkable
class ResourceFactory(Protocol):
    """Protocol for sheet/sprite factories.

    Both methods are called while a document is being parsed and must not
    fail for in-contract input.
    """

    def create_sheet(self) -> SpriteSheetResource:
        """Return a fresh, empty, mutable sheet.

        The sheet has no name or source yet. Any resource acquisition, such
        as opening the image named by ``source``, belongs in the sheet's
        ``handle_attributes`` callback and not here.
        """
        ...

    def create_sprite(self, sheet: SpriteSheetResource, x: int, y: int,
                      w: int, h: int) -> SpriteResource:
        """Return a sprite covering ``(x, y, w, h)`` of *sheet*.

        The bounds have already been validated by the parser
        (x >= 0, y >= 0, w > 0, h > 0).
        """
        ...


class ResourceFactoryBase(ABC):
    """Abstract base class for ResourceFactory implementations.

    Provides a concrete base class that callers can inherit from instead of
    implementing the Protocol directly.
    """

    @abstractmethod
    def create_sheet(self) -> SpriteSheetResource:
        """Return a fresh, empty, mutable sheet."""
        pass

    @abstractmethod
    def create_sprite(self, sheet: SpriteSheetResource, x: int, y: int,
                      w: int, h: int) -> SpriteResource:
        """Return a sprite covering the given region of *sheet*."""
        pass


class SimpleResourceFactory(ResourceFactoryBase):
    """Build the plain model classes, without touching any image data."""

    def create_sheet(self) -> SpriteSheetResource:
        return SpriteSheetResource()

    def create_sprite(self, sheet: SpriteSheetResource, x: int, y: int,
                      w: int, h: int) -> SpriteResource:
        return SpriteResource(sheet, Bounds(x, y, w, h))
