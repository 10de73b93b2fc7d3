"""Tests for ConfigManager and the config schema."""

import logging
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError
from rich.logging import RichHandler

from podnav.config.defaults import DEFAULT_GLOBAL_CONFIG, get_default_config_content
from podnav.config.logging import setup_logging
from podnav.config.manager import ConfigManager
from podnav.config.schema import BrowseConfig, CatalogConfig, GlobalConfig
from podnav.navigation.index import NumberingPolicy
from podnav.utils.errors import ConfigError, InvalidConfigError


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_init_with_custom_dir(self, tmp_path: Path) -> None:
        """Test ConfigManager initialization with custom directory."""
        manager = ConfigManager(config_dir=tmp_path)
        assert manager.config_dir == tmp_path
        assert manager.config_file == tmp_path / "config.yaml"

    def test_load_config_creates_default_if_missing(self, tmp_path: Path) -> None:
        """Test that load_config creates default config if file doesn't exist."""
        manager = ConfigManager(config_dir=tmp_path)
        config = manager.load_config()

        assert config == DEFAULT_GLOBAL_CONFIG
        assert config is not DEFAULT_GLOBAL_CONFIG
        assert manager.config_file.exists()

    def test_default_file_matches_defaults(self, tmp_path: Path) -> None:
        """Test the commented starter file parses to the default config."""
        data = yaml.safe_load(get_default_config_content())
        assert GlobalConfig(**data) == DEFAULT_GLOBAL_CONFIG

    def test_load_config_from_existing_file(self, tmp_path: Path) -> None:
        """Test loading config from existing file."""
        (tmp_path / "config.yaml").write_text(
            yaml.safe_dump(
                {
                    "log_level": "DEBUG",
                    "default_show_id": "4rOoJ6Egrf8K2IrywzwOMk",
                    "browse": {"default_page_size": 50, "numbering": "newest_first"},
                }
            )
        )

        config = ConfigManager(config_dir=tmp_path).load_config()

        assert config.log_level == "DEBUG"
        assert config.browse.default_page_size == 50
        assert config.browse.numbering is NumberingPolicy.NEWEST_FIRST
        assert config.catalog.market == "US"

    def test_load_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("")
        assert ConfigManager(config_dir=tmp_path).load_config() == DEFAULT_GLOBAL_CONFIG

    @pytest.mark.parametrize(
        "content",
        [
            "log_level: [unclosed",
            "log_level: LOUD\n",
            "browse:\n  default_page_size: 0\n",
            "- just\n- a list\n",
        ],
    )
    def test_load_invalid_config(self, tmp_path: Path, content: str) -> None:
        (tmp_path / "config.yaml").write_text(content)

        with pytest.raises(InvalidConfigError):
            ConfigManager(config_dir=tmp_path).load_config()

    def test_save_config(self, tmp_path: Path) -> None:
        """Test saving configuration."""
        manager = ConfigManager(config_dir=tmp_path)
        config = GlobalConfig(log_level="DEBUG", browse=BrowseConfig(default_page_size="unlimited"))

        manager.save_config(config)

        with open(manager.config_file) as f:
            data = yaml.safe_load(f)
        assert data["log_level"] == "DEBUG"
        assert data["browse"]["default_page_size"] == "unlimited"
        assert data["browse"]["numbering"] == "oldest_first"
        assert manager.load_config() == config


class TestSetValue:
    """Tests for ConfigManager.set_value."""

    def test_set_nested_int(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)

        config = manager.set_value("browse.default_page_size", "50")

        assert config.browse.default_page_size == 50
        assert manager.load_config().browse.default_page_size == 50

    def test_set_enum(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)

        config = manager.set_value("browse.numbering", "newest_first")

        assert config.browse.numbering is NumberingPolicy.NEWEST_FIRST

    def test_set_unlimited(self, tmp_path: Path) -> None:
        config = ConfigManager(config_dir=tmp_path).set_value("browse.default_page_size", "unlimited")
        assert config.browse.default_page_size == "unlimited"

    def test_set_top_level_null(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)
        manager.set_value("default_show_id", "4rOoJ6Egrf8K2IrywzwOMk")

        config = manager.set_value("default_show_id", "null")

        assert config.default_show_id is None

    @pytest.mark.parametrize("key", ["nope", "browse.nope", "browse.default_page_size.deeper"])
    def test_unknown_key(self, tmp_path: Path, key: str) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration key"):
            ConfigManager(config_dir=tmp_path).set_value(key, "1")

    def test_invalid_value_not_saved(self, tmp_path: Path) -> None:
        manager = ConfigManager(config_dir=tmp_path)

        with pytest.raises(InvalidConfigError):
            manager.set_value("browse.scan_page_size", "500")

        assert manager.load_config().browse.scan_page_size == 50


class TestSchema:
    """Tests for config validation rules."""

    @pytest.mark.parametrize("value", [0, -1, "lots"])
    def test_invalid_default_page_size(self, value) -> None:
        with pytest.raises(PydanticValidationError):
            BrowseConfig(default_page_size=value)

    def test_empty_page_size_choices(self) -> None:
        with pytest.raises(PydanticValidationError):
            BrowseConfig(page_size_choices=[])

    def test_catalog_limits(self) -> None:
        with pytest.raises(PydanticValidationError):
            CatalogConfig(timeout_seconds=0)
        with pytest.raises(PydanticValidationError):
            CatalogConfig(max_retries=0)


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def remove_installed_handlers(self):
        root = logging.getLogger()
        level = root.level
        yield
        for handler in list(root.handlers):
            if isinstance(handler, (RichHandler, logging.FileHandler)):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    def test_console_level(self) -> None:
        setup_logging()
        (handler,) = logging.getLogger().handlers
        assert handler.level == logging.WARNING

        setup_logging(verbose=True)
        (handler,) = logging.getLogger().handlers
        assert handler.level == logging.DEBUG

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "podnav.log"
        setup_logging(log_file=log_file)

        logging.getLogger("podnav.test").debug("written to file only")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file only" in log_file.read_text()
