"""XDG-compliant filesystem locations for podnav."""

from pathlib import Path

import platformdirs

APP_NAME = "podnav"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/podnav)."""
    config_dir = Path(platformdirs.user_config_dir(APP_NAME))
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Get the data directory used for favorites and history."""
    data_dir = Path(platformdirs.user_data_dir(APP_NAME))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_config_file() -> Path:
    """Get the path to config.yaml."""
    return get_config_dir() / "config.yaml"


def get_favorites_file() -> Path:
    """Get the path to the favorites store."""
    return get_data_dir() / "favorites.json"


def get_history_file() -> Path:
    """Get the path to the show history store."""
    return get_data_dir() / "history.json"
