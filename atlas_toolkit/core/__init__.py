"""GUI-agnostic core: resource model, parse state machine and loader."""

from .catalog import ResourceCatalog  # noqa: F401
from .handler import ResourceHandler  # noqa: F401
from .parser import ResourceParser, ParserTarget  # noqa: F401

__all__: list[str] = [
    "ResourceCatalog",
    "ResourceHandler",
    "ResourceParser",
    "ParserTarget",
]
