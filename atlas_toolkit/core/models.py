from __future__ import annotations

"""Sheet and sprite data structures.

This module is intentionally free of I/O so that the contained objects can
be reused in any context (unit-tests, CLI, validation of documents without
decoding any images). Pixel-backed subclasses live in
:mod:`atlas_toolkit.core.images`.
"""

from dataclasses import dataclass
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

__all__ = ["Bounds", "SpriteResource", "SpriteSheetResource"]


@dataclass(frozen=True)
class Bounds:
    """Rectangle of a sprite inside its sheet, in pixels."""

    x: int
    y: int
    width: int
    height: int

    def is_valid(self) -> bool:
        return self.x >= 0 and self.y >= 0 and self.width > 0 and self.height > 0

    def as_box(self) -> Tuple[int, int, int, int]:
        """Return ``(left, top, right, bottom)`` as Pillow expects it."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.width},{self.height}"


class SpriteResource:
    """A named rectangular region of exactly one sheet.

    Subclasses override :meth:`additional_attributes` to declare extension
    attributes and :meth:`handle_attributes` to act on them.
    """

    def __init__(self, sheet: "SpriteSheetResource", bounds: Bounds) -> None:
        self.sheet = sheet
        self.bounds = bounds
        self.name: Optional[str] = None
        self.attributes: Dict[str, str] = {}

    def additional_attributes(self) -> Dict[str, str]:
        return {}

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        self.attributes = dict(attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, bounds={self.bounds})"


SpriteT = TypeVar("SpriteT", bound=SpriteResource)


class SpriteSheetResource(Generic[SpriteT]):
    """A named image atlas owning its sprites.

    ``name`` and ``source`` are assigned by the parser through :meth:`bind`
    right after the factory created the sheet; a sheet that was never bound
    has both set to ``None``.
    """

    def __init__(self) -> None:
        self.name: Optional[str] = None
        self.source: Optional[str] = None
        self.attributes: Dict[str, str] = {}
        self._sprites: Dict[str, SpriteT] = {}

    def bind(self, name: str, source: str) -> None:
        self.name = name
        self.source = source

    def additional_attributes(self) -> Dict[str, str]:
        return {}

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        self.attributes = dict(attributes)

    # ------------------------------------------------------------------
    # Sprite ownership
    # ------------------------------------------------------------------
    def put(self, name: str, sprite: SpriteT) -> None:
        """Store *sprite* under *name*, replacing any previous sprite."""
        self._sprites[name] = sprite

    def get(self, name: str) -> Optional[SpriteT]:
        return self._sprites.get(name)

    def names(self) -> List[str]:
        return list(self._sprites)

    @property
    def sprites(self) -> Dict[str, SpriteT]:
        return dict(self._sprites)

    def __len__(self) -> int:
        return len(self._sprites)

    def __contains__(self, name: object) -> bool:
        return name in self._sprites

    def __iter__(self) -> Iterator[SpriteT]:
        return iter(self._sprites.values())

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self.name!r}, source={self.source!r}, "
                f"sprites={len(self._sprites)})")
