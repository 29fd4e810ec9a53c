import logging

from atlas_toolkit.config import ConfigManager, LoaderSettings


class TestConfigManager:
    """Packaged defaults merged with user overrides."""

    def test_packaged_defaults(self):
        loader = ConfigManager().get_loader_config()
        assert loader["chunk_size"] == 65536
        assert loader["report_unknown_attributes"] is False
        assert ConfigManager().get_logging_config()["version"] == 1

    def test_is_shared(self):
        assert ConfigManager() is ConfigManager()

    def test_user_override(self, tmp_path):
        user_dir = tmp_path / "user_config"
        user_dir.mkdir()
        (user_dir / "loader.yml").write_text("chunk_size: 128\n", encoding="utf-8")
        ConfigManager.reset()
        loader = ConfigManager().get_loader_config()
        assert loader["chunk_size"] == 128
        # Keys not overridden keep their packaged value
        assert loader["huge_tree"] is False

    def test_broken_user_override_is_ignored(self, tmp_path, caplog):
        user_dir = tmp_path / "user_config"
        user_dir.mkdir()
        (user_dir / "loader.yml").write_text("chunk_size: [unclosed\n", encoding="utf-8")
        ConfigManager.reset()
        with caplog.at_level(logging.ERROR, logger="atlas_toolkit"):
            loader = ConfigManager().get_loader_config()
        assert loader["chunk_size"] == 65536
        assert "Could not parse user config" in caplog.text


class TestLoaderSettings:

    def test_from_packaged_config(self):
        assert LoaderSettings.from_config() == LoaderSettings()

    def test_from_explicit_config(self):
        settings = LoaderSettings.from_config(
            {"chunk_size": 10, "report_unknown_attributes": True, "huge_tree": True})
        assert settings == LoaderSettings(10, True, True)

    def test_non_positive_chunk_size(self, caplog):
        with caplog.at_level(logging.WARNING, logger="atlas_toolkit"):
            settings = LoaderSettings.from_config({"chunk_size": 0})
        assert settings.chunk_size == LoaderSettings().chunk_size
        assert "chunk_size" in caplog.text

    def test_user_override_reaches_settings(self, tmp_path):
        user_dir = tmp_path / "user_config"
        user_dir.mkdir()
        (user_dir / "loader.yml").write_text("report_unknown_attributes: true\n", encoding="utf-8")
        ConfigManager.reset()
        assert LoaderSettings.from_config().report_unknown_attributes is True
