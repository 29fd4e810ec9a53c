"""Test configuration and fixtures for atlas_toolkit tests.

Shared fixtures: a diagnostics collector, handlers wired to it, a recording
factory whose resources declare extension attributes, and a helper writing
small PNG sheets with Pillow.
"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
from PIL import Image

from atlas_toolkit.config import ConfigManager, LoaderSettings
from atlas_toolkit.core.catalog import ResourceCatalog
from atlas_toolkit.core.diagnostics import DiagnosticCollector
from atlas_toolkit.core.factories import ResourceFactoryBase, SimpleResourceFactory
from atlas_toolkit.core.handler import ResourceHandler
from atlas_toolkit.core.models import Bounds, SpriteResource, SpriteSheetResource
from atlas_toolkit.core.parser import ResourceParser

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


class TaggedSheet(SpriteSheetResource):
    """Sheet declaring a ``palette`` extension attribute."""

    def __init__(self) -> None:
        super().__init__()
        self.handled: List[Dict[str, str]] = []

    def additional_attributes(self) -> Dict[str, str]:
        return {"palette": "default"}

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        super().handle_attributes(attributes)
        self.handled.append(dict(attributes))


class TaggedSprite(SpriteResource):
    """Sprite declaring ``anchor`` and ``layer`` extension attributes."""

    def additional_attributes(self) -> Dict[str, str]:
        return {"anchor": "0,0", "layer": "0"}


class RecordingFactory(ResourceFactoryBase):
    """Factory remembering every call made by the parser."""

    def __init__(self) -> None:
        self.sheets: List[TaggedSheet] = []
        self.sprite_calls: List[Tuple[SpriteSheetResource, int, int, int, int]] = []

    def create_sheet(self) -> TaggedSheet:
        sheet = TaggedSheet()
        self.sheets.append(sheet)
        return sheet

    def create_sprite(self, sheet, x, y, w, h) -> TaggedSprite:
        self.sprite_calls.append((sheet, x, y, w, h))
        return TaggedSprite(sheet, Bounds(x, y, w, h))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config overrides out of the tests and reload config per test."""
    monkeypatch.setenv("ATLAS_CONFIG_DIR", str(tmp_path / "user_config"))
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def collector():
    return DiagnosticCollector()


@pytest.fixture
def settings():
    return LoaderSettings()


@pytest.fixture
def factory():
    return RecordingFactory()


@pytest.fixture
def catalog():
    return ResourceCatalog()


@pytest.fixture
def parser(factory, catalog, collector):
    """A bare state machine, fed with synthetic events."""
    return ResourceParser(factory, catalog, collector)


@pytest.fixture
def handler(factory, collector, settings):
    """A handler using the recording factory."""
    return ResourceHandler(factory, sink=collector, settings=settings)


@pytest.fixture
def simple_handler(collector, settings):
    return ResourceHandler(SimpleResourceFactory(), sink=collector, settings=settings)


@pytest.fixture
def write_sheet_png(tmp_path):
    """Write a 32x16 PNG: left half red, right half blue. Returns its path."""
    def _write(name: str = "tiles.png", directory: Path = None) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        image = Image.new("RGBA", (32, 16), RED)
        image.paste(Image.new("RGBA", (16, 16), BLUE), (16, 0))
        path = target_dir / name
        image.save(path, format="PNG")
        return path
    return _write
