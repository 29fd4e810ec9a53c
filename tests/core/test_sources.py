import pytest

from atlas_toolkit.core.exceptions import SourceNotFoundError
from atlas_toolkit.core.sources import (
    FileSystemResolver,
    PackageResourceResolver,
    SourceResolver,
)


class TestFileSystemResolver:

    def test_opens_relative_to_base_dir(self, tmp_path):
        (tmp_path / "sheets").mkdir()
        (tmp_path / "sheets" / "a.png").write_bytes(b"data")
        resolver = FileSystemResolver(tmp_path)
        with resolver.open("sheets/a.png") as fh:
            assert fh.read() == b"data"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError) as excinfo:
            FileSystemResolver(tmp_path).open("nope.png")
        assert excinfo.value.source == "nope.png"
        assert isinstance(excinfo.value.cause, OSError)

    @pytest.mark.parametrize("source", ["../escape.png", "a/../../escape.png"])
    def test_refuses_parent_traversal(self, tmp_path, source):
        with pytest.raises(SourceNotFoundError):
            FileSystemResolver(tmp_path / "base").open(source)

    def test_refuses_absolute_path(self, tmp_path):
        target = tmp_path / "abs.png"
        target.write_bytes(b"x")
        with pytest.raises(SourceNotFoundError):
            FileSystemResolver(tmp_path / "base").open(str(target))

    def test_allow_outside(self, tmp_path):
        target = tmp_path / "abs.png"
        target.write_bytes(b"x")
        resolver = FileSystemResolver(tmp_path / "base", allow_outside=True)
        with resolver.open(str(target)) as fh:
            assert fh.read() == b"x"

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(FileSystemResolver(tmp_path), SourceResolver)


class TestPackageResourceResolver:

    def test_opens_package_data(self):
        resolver = PackageResourceResolver("atlas_toolkit.config")
        with resolver.open("loader.yml") as fh:
            assert b"chunk_size" in fh.read()

    def test_missing_resource(self):
        with pytest.raises(SourceNotFoundError):
            PackageResourceResolver("atlas_toolkit.config").open("missing.png")

    def test_missing_package(self):
        with pytest.raises(SourceNotFoundError):
            PackageResourceResolver("no_such_package_here").open("a.png")

    def test_prefix(self):
        resolver = PackageResourceResolver("atlas_toolkit", prefix="config")
        with resolver.open("logging.yml") as fh:
            assert b"version" in fh.read()
