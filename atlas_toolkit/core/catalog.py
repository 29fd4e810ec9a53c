from __future__ import annotations

"""Name-keyed registry of loaded sheets."""

import logging
from typing import Dict, Iterator, List, Optional

from .models import SpriteSheetResource

logger = logging.getLogger(__name__)

__all__ = ["ResourceCatalog"]


class ResourceCatalog:
    """Mapping from sheet name to sheet.

    Keys are unique: a later :meth:`put` under an existing name replaces the
    earlier sheet. The catalog is never cleared implicitly, so several loads
    accumulate into the same instance.

    There is no internal locking. Callers running loads from several threads
    against one catalog must serialize them.
    """

    def __init__(self) -> None:
        self._sheets: Dict[str, SpriteSheetResource] = {}

    def put(self, name: str, sheet: SpriteSheetResource) -> None:
        """Register *sheet* under *name*. Overwrites if the name exists."""
        if name in self._sheets:
            logger.debug("Replacing sheet '%s' in catalog", name)
        self._sheets[name] = sheet

    def get(self, name: str) -> Optional[SpriteSheetResource]:
        """Return the sheet registered under *name*, or None if not found."""
        return self._sheets.get(name)

    def has(self, name: str) -> bool:
        return name in self._sheets

    def remove(self, name: str) -> bool:
        """Remove a sheet.

        Returns:
            True if a sheet was registered under *name*, False otherwise
        """
        return self._sheets.pop(name, None) is not None

    def names(self) -> List[str]:
        return list(self._sheets)

    def clear(self) -> None:
        self._sheets.clear()

    def __len__(self) -> int:
        return len(self._sheets)

    def __contains__(self, name: object) -> bool:
        return name in self._sheets

    def __iter__(self) -> Iterator[SpriteSheetResource]:
        return iter(self._sheets.values())
