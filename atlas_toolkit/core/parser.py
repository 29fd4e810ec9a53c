from __future__ import annotations

"""Event-driven parse state machine for sprite sheet documents.

Documents have the form::

    <images>
      <sheet name="tiles" source="tiles.png">
        <sprite name="grass" bounds="0,0,16,16"/>
      </sheet>
    </images>

:class:`ResourceParser` consumes a flat sequence of start/end tag events and
turns it into sheets and sprites. It knows nothing about XML bytes: feed it
events directly (as the tests do) or plug it into lxml through
:class:`ParserTarget`.

A malformed element is reported to the diagnostics sink and skipped, parsing
carries on with its siblings. Sprites only attach to a sheet that was
actually created, so the sprites of a discarded sheet are discarded too.
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Tuple

from .attributes import resolve_additional_attributes
from .catalog import ResourceCatalog
from .diagnostics import Diagnostic, DiagnosticsSink, Severity
from .factories import ResourceFactory
from .models import SpriteSheetResource

logger = logging.getLogger(__name__)

__all__ = ["ResourceParser", "ParserTarget", "BoundsSyntaxError", "parse_bounds"]

TAG_IMAGES = "images"
TAG_SHEET = "sheet"
TAG_SPRITE = "sprite"

_SHEET_REQUIRED = ("name", "source")
_SPRITE_REQUIRED = ("name", "bounds")

# Base-10 integer with optional sign, no surrounding whitespace
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


def _local_name(tag: str) -> str:
    """Strip an lxml ``{namespace}`` prefix from *tag*."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _parse_int(token: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise ValueError(f"not an integer: {token!r}")
    value = int(token)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {token!r}")
    return value


class BoundsSyntaxError(ValueError):
    """A ``bounds`` attribute that is not four comma separated integers.

    ``field_count_ok`` tells a wrong number of fields (False) apart from a
    field that is not an integer (True).
    """

    def __init__(self, message: str, field_count_ok: bool) -> None:
        super().__init__(message)
        self.field_count_ok = field_count_ok


def parse_bounds(text: str) -> Tuple[int, int, int, int]:
    """Parse a ``"X,Y,W,H"`` string.

    Trailing empty fields are dropped before counting (``"0,0,16,16,"`` has
    four fields). Range checks are left to the caller.

    Raises:
        BoundsSyntaxError: If there are not exactly four fields or a field is
            not a 32-bit base-10 integer.
    """
    tokens = text.split(",")
    while tokens and tokens[-1] == "":
        tokens.pop()
    if len(tokens) != 4:
        raise BoundsSyntaxError(f"expected 4 fields, got {len(tokens)}", False)
    try:
        x, y, w, h = (_parse_int(token) for token in tokens)
    except ValueError as exc:
        raise BoundsSyntaxError(str(exc), True) from exc
    return x, y, w, h


class ResourceParser:
    """Two-level state machine: ``images`` > ``sheet`` > ``sprite``.

    States are *outside images* (``active`` is False), *inside images with no
    current sheet* and *inside images with a current sheet*. Tag names are
    compared case-insensitively, attribute names exactly.

    Args:
        factory: Creates sheets and sprites.
        catalog: Receives every successfully created sheet.
        sink: Receives diagnostics for discarded or ignored elements.
        report_unknown_attributes: Also report attributes on ``sheet`` and
            ``sprite`` that are neither required nor declared by the
            resource. Off by default: such attributes are silently ignored.
    """

    def __init__(self, factory: ResourceFactory, catalog: ResourceCatalog,
                 sink: DiagnosticsSink, report_unknown_attributes: bool = False) -> None:
        self.factory = factory
        self.catalog = catalog
        self.sink = sink
        self.report_unknown_attributes = report_unknown_attributes
        self._active = False
        self._current_sheet: Optional[SpriteSheetResource] = None
        self._emitted: List[Diagnostic] = []

    @property
    def active(self) -> bool:
        """True while between the ``images`` open and close tags."""
        return self._active

    @property
    def current_sheet(self) -> Optional[SpriteSheetResource]:
        return self._current_sheet

    @property
    def emitted(self) -> List[Diagnostic]:
        """Diagnostics reported since the last :meth:`reset`."""
        return list(self._emitted)

    def reset(self) -> None:
        """Go back to the initial state. The catalog is left untouched."""
        self._active = False
        self._current_sheet = None
        self._emitted = []

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def start_tag(self, tag: str, attributes: Mapping[str, str]) -> None:
        kind = _local_name(tag).lower()
        if kind == TAG_IMAGES:
            self._active = True
            return
        if not self._active:
            return

        if kind == TAG_SHEET:
            self._start_sheet(attributes)
        elif kind == TAG_SPRITE:
            self._start_sprite(attributes)
        else:
            self._report(Severity.INFO, f"Unknown tag in xml file: {tag}", kind)

    def end_tag(self, tag: str) -> None:
        kind = _local_name(tag).lower()
        if kind == TAG_SHEET:
            self._current_sheet = None
        elif kind == TAG_IMAGES:
            self._active = False

    # ------------------------------------------------------------------
    # Element handlers
    # ------------------------------------------------------------------
    def _start_sheet(self, attributes: Mapping[str, str]) -> None:
        name = attributes.get("name")
        source = attributes.get("source")
        if name is None:
            self._report(Severity.ERROR,
                         "name was not given to the sheet. Discarded.", TAG_SHEET)
            return
        if source is None:
            self._report(Severity.ERROR,
                         f"source was not given to sheet '{name}'. Discarded.",
                         TAG_SHEET, name)
            return

        sheet = self.factory.create_sheet()
        sheet.bind(name, source)
        resolved = resolve_additional_attributes(sheet, attributes)
        self._check_unknown_attributes(TAG_SHEET, name, attributes,
                                       _SHEET_REQUIRED, resolved)
        sheet.handle_attributes(resolved)
        self.catalog.put(name, sheet)
        self._current_sheet = sheet
        logger.debug("Loaded sheet '%s' from '%s'", name, source)

    def _start_sprite(self, attributes: Mapping[str, str]) -> None:
        sheet = self._current_sheet
        if sheet is None:
            self._report(Severity.WARNING,
                         "Sprite is not inside a sheet tag. Discarded.",
                         TAG_SPRITE, attributes.get("name"))
            return

        name = attributes.get("name")
        label = name if name is not None else "?"
        bounds_text = attributes.get("bounds")
        if bounds_text is None:
            self._report(Severity.ERROR,
                         f"bounds was not given to sprite '{label}'. Discarded.",
                         TAG_SPRITE, name)
            return
        try:
            x, y, w, h = parse_bounds(bounds_text)
        except BoundsSyntaxError as exc:
            if exc.field_count_ok:
                reason = "values aren't integers"
            else:
                reason = "should be in form X,Y,W,H"
            self._report(Severity.ERROR,
                         f"\"bounds\" of sprite '{label}' invalid ({bounds_text!r}): "
                         f"{reason}. Discarded.",
                         TAG_SPRITE, name)
            return
        if name is None:
            self._report(Severity.ERROR,
                         "name is missing for sprite. Discarded.", TAG_SPRITE)
            return
        if x < 0 or y < 0 or w <= 0 or h <= 0:
            self._report(Severity.ERROR,
                         f"The sprite's [name: {name}] bounds [{x},{y},{w},{h}] "
                         "are invalid or unset. Discarded.",
                         TAG_SPRITE, name)
            return

        sprite = self.factory.create_sprite(sheet, x, y, w, h)
        sprite.name = name
        resolved = resolve_additional_attributes(sprite, attributes)
        self._check_unknown_attributes(TAG_SPRITE, name, attributes,
                                       _SPRITE_REQUIRED, resolved)
        sprite.handle_attributes(resolved)
        sheet.put(name, sprite)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_unknown_attributes(self, tag: str, name: str,
                                  attributes: Mapping[str, str],
                                  required: Tuple[str, ...],
                                  declared: Dict[str, str]) -> None:
        if not self.report_unknown_attributes:
            return
        for key in attributes:
            if key not in required and key not in declared:
                self._report(Severity.INFO,
                             f"Unknown attribute '{key}' on {tag} '{name}'. Ignored.",
                             tag, name)

    def _report(self, severity: Severity, message: str, tag: str,
                name: Optional[str] = None) -> None:
        diagnostic = Diagnostic(severity, message, tag, name)
        self._emitted.append(diagnostic)
        self.sink.report(diagnostic)


class ParserTarget:
    """Adapter exposing a :class:`ResourceParser` as an lxml parser target.

    lxml calls ``start``/``end`` for every element while the document is fed
    to ``XMLParser(target=...)``; the value returned by :meth:`close` becomes
    the result of ``parser.close()``.
    """

    def __init__(self, parser: ResourceParser) -> None:
        self.parser = parser

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self.parser.start_tag(tag, attrib)

    def end(self, tag: str) -> None:
        self.parser.end_tag(tag)

    def close(self) -> List[Diagnostic]:
        return self.parser.emitted
