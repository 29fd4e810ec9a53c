"""Top-level package for atlas_toolkit.

Loads XML documents describing sprite sheets and the named sprites inside
them into a catalog of resource objects. Front-ends (the ``run.py`` CLI, game
code) should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.catalog import ResourceCatalog
from .core.diagnostics import Diagnostic, DiagnosticCollector, Severity
from .core.exceptions import AtlasError, ResourceLoadError
from .core.factories import ResourceFactory, ResourceFactoryBase, SimpleResourceFactory
from .core.handler import ResourceHandler
from .core.images import ImageResourceHandler
from .core.models import Bounds, SpriteResource, SpriteSheetResource

__version__ = "1.0.0"

__all__: list[str] = [
    "AtlasError",
    "Bounds",
    "Diagnostic",
    "DiagnosticCollector",
    "ImageResourceHandler",
    "ResourceCatalog",
    "ResourceFactory",
    "ResourceFactoryBase",
    "ResourceHandler",
    "ResourceLoadError",
    "Severity",
    "SimpleResourceFactory",
    "SpriteResource",
    "SpriteSheetResource",
]
