"""Configuration manager for loading and saving podnav config."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from podnav.config.defaults import DEFAULT_GLOBAL_CONFIG, get_default_config_content
from podnav.config.schema import GlobalConfig
from podnav.utils.errors import ConfigError, InvalidConfigError
from podnav.utils.paths import get_config_dir, get_config_file

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages the podnav configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to XDG config dir.
        """
        if config_dir is None:
            self.config_dir = get_config_dir()
            self.config_file = get_config_file()
        else:
            self.config_dir = config_dir
            self.config_file = config_dir / "config.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            self._create_default_config()
            return DEFAULT_GLOBAL_CONFIG.model_copy(deep=True)

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return GlobalConfig(**data)
        except (yaml.YAMLError, PydanticValidationError, TypeError) as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def set_value(self, key: str, raw_value: str) -> GlobalConfig:
        """Set a single configuration value and save.

        The raw value is parsed as YAML, so "50" becomes an int, "null"
        becomes None and "[10, 20]" becomes a list.

        Args:
            key: Dotted key, e.g. "browse.default_page_size"
            raw_value: Value as typed by the user

        Returns:
            The updated configuration

        Raises:
            ConfigError: If the key does not exist
            InvalidConfigError: If the new value fails validation
        """
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value

        data = self.load_config().model_dump(mode="json")
        section: dict[str, Any] = data
        parts = key.split(".")
        for part in parts[:-1]:
            child = section.get(part)
            if not isinstance(child, dict):
                raise ConfigError(f"Unknown configuration key: {key}")
            section = child

        if parts[-1] not in section:
            raise ConfigError(f"Unknown configuration key: {key}")
        section[parts[-1]] = value

        try:
            config = GlobalConfig(**data)
        except PydanticValidationError as e:
            raise InvalidConfigError(f"Invalid value for {key}: {raw_value!r}\n{e}") from e

        self.save_config(config)
        logger.info("Set %s = %r", key, value)
        return config

    def _create_default_config(self) -> None:
        """Create default config.yaml file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(get_default_config_content())
