from __future__ import annotations

"""Pillow-backed sheets and sprites.

:class:`ImageSheet` decodes its ``source`` image when the parser hands it
its attributes; :class:`ImageSprite` crops its region out of the decoded
sheet on demand. Failing to decode a sheet is the sheet's own business: it
is logged and remembered in :attr:`ImageSheet.load_error`, the load itself
carries on.

Extension attributes
--------------------
sheet ``mode``
    Pillow mode the image is converted to (default ``RGBA``).
sheet ``colorkey``
    ``RRGGBB`` (optionally ``#``-prefixed) colour made fully transparent.
    Empty by default.
sprite ``flip``
    ``none`` (default), ``horizontal``, ``vertical`` or ``both``.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from PIL import Image, ImageChops

from atlas_toolkit.config import LoaderSettings

from .catalog import ResourceCatalog
from .diagnostics import DiagnosticsSink
from .exceptions import ImageNotLoadedError, SourceNotFoundError
from .factories import ResourceFactoryBase
from .handler import ResourceHandler
from .models import Bounds, SpriteResource, SpriteSheetResource
from .sources import FileSystemResolver, SourceResolver

logger = logging.getLogger(__name__)

__all__ = [
    "ImageSheet",
    "ImageSprite",
    "ImageResourceFactory",
    "ImageResourceHandler",
    "parse_colorkey",
]

_FLIPS = {
    "none": None,
    "horizontal": Image.Transpose.FLIP_LEFT_RIGHT,
    "vertical": Image.Transpose.FLIP_TOP_BOTTOM,
    "both": Image.Transpose.ROTATE_180,
}

_COLORKEY_RE = re.compile(r"[0-9A-Fa-f]{6}")


def parse_colorkey(text: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``"RRGGBB"`` or ``"#RRGGBB"``; empty text means no colour key.

    Raises:
        ValueError: If *text* is not a 6 digit hex colour
    """
    text = text.strip().lstrip("#")
    if not text:
        return None
    if not _COLORKEY_RE.fullmatch(text):
        raise ValueError(f"colorkey must be RRGGBB, got {text!r}")
    value = int(text, 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def _apply_colorkey(image: Image.Image, key: Tuple[int, int, int]) -> Image.Image:
    """Return an RGBA copy of *image* with pixels of colour *key* transparent."""
    rgba = image.convert("RGBA")
    red, green, blue, alpha = rgba.split()
    matches = [
        band.point(lambda v, k=k: 255 if v == k else 0)
        for band, k in zip((red, green, blue), key)
    ]
    match = ImageChops.multiply(ImageChops.multiply(matches[0], matches[1]), matches[2])
    alpha = ImageChops.subtract(alpha, match)
    return Image.merge("RGBA", (red, green, blue, alpha))


class ImageSheet(SpriteSheetResource["ImageSprite"]):
    """Sheet whose pixels are decoded with Pillow from its ``source``."""

    def __init__(self, resolver: SourceResolver) -> None:
        super().__init__()
        self.resolver = resolver
        self.image: Optional[Image.Image] = None
        self.load_error: Optional[str] = None

    def additional_attributes(self) -> Dict[str, str]:
        return {"mode": "RGBA", "colorkey": ""}

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        super().handle_attributes(attributes)
        self.image = None
        self.load_error = None
        if self.source is None:
            self._fail("sheet has no source")
            return
        self._decode(self.source, attributes.get("mode", "RGBA"),
                     attributes.get("colorkey", ""))

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        return self.image.size if self.image is not None else None

    def _decode(self, source: str, mode: str, colorkey: str) -> None:
        try:
            with self.resolver.open(source) as fh:
                image = Image.open(fh)
                image.load()
        except SourceNotFoundError as e:
            self._fail(f"source not found: {e}")
            return
        except (OSError, Image.DecompressionBombError) as e:
            self._fail(f"cannot decode {source}: {e}")
            return

        try:
            key = parse_colorkey(colorkey)
        except ValueError as e:
            logger.warning("Sheet '%s': %s, ignoring colorkey", self.name, e)
            key = None
        if key is not None:
            image = _apply_colorkey(image, key)

        if mode and image.mode != mode:
            try:
                image = image.convert(mode)
            except ValueError as e:
                self._fail(f"cannot convert to mode {mode!r}: {e}")
                return

        self.image = image
        logger.debug("Decoded sheet '%s' (%dx%d, %s)", self.name,
                     image.width, image.height, image.mode)

    def _fail(self, reason: str) -> None:
        self.load_error = reason
        logger.error("Sheet '%s': %s", self.name, reason)


class ImageSprite(SpriteResource):
    """Region of an :class:`ImageSheet`, cropped lazily."""

    sheet: ImageSheet

    def __init__(self, sheet: ImageSheet, bounds: Bounds) -> None:
        super().__init__(sheet, bounds)
        self.flip = "none"

    def additional_attributes(self) -> Dict[str, str]:
        return {"flip": "none"}

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        super().handle_attributes(attributes)
        flip = attributes.get("flip", "none").lower()
        if flip not in _FLIPS:
            logger.warning("Sprite '%s': unknown flip %r, using 'none'", self.name, flip)
            flip = "none"
        self.flip = flip

    def fits_sheet(self) -> bool:
        """True when the sheet is decoded and fully contains the bounds."""
        size = self.sheet.size
        if size is None:
            return False
        _, _, right, bottom = self.bounds.as_box()
        return right <= size[0] and bottom <= size[1]

    def image(self) -> Image.Image:
        """Return the sprite's pixels as a new image.

        Raises:
            ImageNotLoadedError: If the sheet has no decoded image
        """
        if self.sheet.image is None:
            raise ImageNotLoadedError(
                f"Sheet '{self.sheet.name}' has no image ({self.sheet.load_error})",
                self.sheet.source,
            )
        region = self.sheet.image.crop(self.bounds.as_box())
        transpose = _FLIPS[self.flip]
        if transpose is not None:
            region = region.transpose(transpose)
        return region


class ImageResourceFactory(ResourceFactoryBase):
    """Create :class:`ImageSheet` / :class:`ImageSprite` instances."""

    def __init__(self, resolver: SourceResolver) -> None:
        self.resolver = resolver

    def create_sheet(self) -> ImageSheet:
        return ImageSheet(self.resolver)

    def create_sprite(self, sheet: ImageSheet, x: int, y: int,
                      w: int, h: int) -> ImageSprite:
        return ImageSprite(sheet, Bounds(x, y, w, h))


class ImageResourceHandler(ResourceHandler):
    """:class:`ResourceHandler` preconfigured with Pillow-backed resources.

    Sources are resolved relative to the current directory unless a
    *resolver* is given.
    """

    def __init__(self, resolver: Optional[SourceResolver] = None,
                 catalog: Optional[ResourceCatalog] = None,
                 sink: Optional[DiagnosticsSink] = None,
                 settings: Optional[LoaderSettings] = None) -> None:
        super().__init__(ImageResourceFactory(resolver or FileSystemResolver()),
                         catalog=catalog, sink=sink, settings=settings)

    def get(self, name: str) -> Optional[ImageSheet]:
        return super().get(name)  # type: ignore[return-value]
