"""Pillow-backed sheets loaded through real documents."""

import io

import pytest
from PIL import Image

from atlas_toolkit.core.exceptions import ImageNotLoadedError
from atlas_toolkit.core.images import ImageResourceHandler, ImageSheet, parse_colorkey
from atlas_toolkit.core.sources import FileSystemResolver

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def image_handler(tmp_path, collector, settings, write_sheet_png):
    write_sheet_png("tiles.png")
    return ImageResourceHandler(FileSystemResolver(tmp_path), sink=collector, settings=settings)


def load(handler, sheet_attrs='', sprites=''):
    document = (f'<images><sheet name="tiles" source="tiles.png" {sheet_attrs}>'
                f'{sprites}</sheet></images>')
    handler.load(io.BytesIO(document.encode("utf-8")))
    return handler.get("tiles")


class TestImageSheet:

    def test_decodes_source(self, image_handler):
        sheet = load(image_handler)
        assert isinstance(sheet, ImageSheet)
        assert sheet.size == (32, 16)
        assert sheet.image.mode == "RGBA"
        assert sheet.load_error is None

    def test_mode_attribute(self, image_handler):
        sheet = load(image_handler, 'mode="L"')
        assert sheet.image.mode == "L"
        assert sheet.attributes["mode"] == "L"

    def test_colorkey_makes_pixels_transparent(self, image_handler):
        sheet = load(image_handler, 'colorkey="#0000ff"')
        assert sheet.image.getpixel((20, 4)) == (0, 0, 255, 0)
        assert sheet.image.getpixel((4, 4)) == RED

    def test_bad_colorkey_is_ignored(self, image_handler):
        sheet = load(image_handler, 'colorkey="blue"')
        assert sheet.image is not None
        assert sheet.image.getpixel((20, 4)) == BLUE

    def test_missing_source_keeps_sheet(self, tmp_path, collector, settings):
        handler = ImageResourceHandler(FileSystemResolver(tmp_path / "empty"),
                                       sink=collector, settings=settings)
        sheet = load(handler, sprites='<sprite name="a" bounds="0,0,16,16"/>')
        assert sheet is not None
        assert sheet.image is None
        assert "not found" in sheet.load_error
        assert "a" in sheet
        # Decoding problems are not parse diagnostics
        assert collector.diagnostics == []

    def test_undecodable_source(self, tmp_path, collector, settings):
        (tmp_path / "tiles.png").write_bytes(b"definitely not a png")
        handler = ImageResourceHandler(FileSystemResolver(tmp_path), sink=collector, settings=settings)
        sheet = load(handler)
        assert sheet.image is None
        assert "cannot decode" in sheet.load_error


class TestImageSprite:

    def test_crops_region(self, image_handler):
        sheet = load(image_handler, sprites=(
            '<sprite name="left" bounds="0,0,16,16"/>'
            '<sprite name="right" bounds="16,0,16,16"/>'
        ))
        left = sheet.get("left").image()
        right = sheet.get("right").image()
        assert left.size == (16, 16)
        assert left.getpixel((0, 0)) == RED
        assert right.getpixel((15, 15)) == BLUE

    @pytest.mark.parametrize("flip, expected", [
        ("none", RED),
        ("horizontal", BLUE),
        ("vertical", RED),
        ("both", BLUE),
        ("sideways", RED),
    ])
    def test_flip(self, image_handler, flip, expected):
        sheet = load(image_handler, sprites=f'<sprite name="all" bounds="0,0,32,16" flip="{flip}"/>')
        assert sheet.get("all").image().getpixel((0, 0)) == expected

    def test_fits_sheet(self, image_handler):
        sheet = load(image_handler, sprites=(
            '<sprite name="inside" bounds="16,0,16,16"/>'
            '<sprite name="outside" bounds="20,0,16,16"/>'
        ))
        assert sheet.get("inside").fits_sheet() is True
        assert sheet.get("outside").fits_sheet() is False

    def test_image_without_decoded_sheet(self, tmp_path, collector, settings):
        handler = ImageResourceHandler(FileSystemResolver(tmp_path / "empty"),
                                       sink=collector, settings=settings)
        sheet = load(handler, sprites='<sprite name="a" bounds="0,0,16,16"/>')
        sprite = sheet.get("a")
        assert sprite.fits_sheet() is False
        with pytest.raises(ImageNotLoadedError):
            sprite.image()


class TestParseColorkey:

    def test_values(self):
        assert parse_colorkey("ff00ff") == (255, 0, 255)
        assert parse_colorkey("#102030") == (16, 32, 48)
        assert parse_colorkey("") is None

    @pytest.mark.parametrize("text", ["fff", "gg0000", "#1234567", "0x12ab", "+12345", "12_345"])
    def test_invalid(self, text):
        with pytest.raises(ValueError, match="colorkey must be RRGGBB"):
            parse_colorkey(text)


def test_default_resolver_uses_working_directory(tmp_path, monkeypatch, collector, settings, write_sheet_png):
    write_sheet_png("tiles.png")
    monkeypatch.chdir(tmp_path)
    handler = ImageResourceHandler(sink=collector, settings=settings)
    sheet = load(handler)
    assert isinstance(sheet.image, Image.Image)
