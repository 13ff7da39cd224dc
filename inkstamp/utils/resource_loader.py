"""
Per-user directories for settings and logs.
"""
import os
import sys
from pathlib import Path

APP_NAME = "InkStamp"


def _user_base_dir() -> Path:
    if os.name == 'nt':  # Windows
        return Path(os.environ.get('APPDATA', os.path.expanduser('~')))
    if sys.platform == 'darwin':  # macOS
        return Path.home() / "Library" / "Application Support"
    return Path.home() / ".local" / "share"


def get_app_data_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the application data directory, used for log files.

    Args:
        app_name: Name of the application

    Returns:
        Path to the app data directory
    """
    app_dir = _user_base_dir() / app_name
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the configuration directory holding ``settings.json``.

    The directory is only located, not created; the editor never writes
    settings.

    Args:
        app_name: Name of the application

    Returns:
        Path to the config directory
    """
    if os.name == 'nt':
        config_dir = _user_base_dir() / app_name / "config"
    elif sys.platform == 'darwin':
        config_dir = Path.home() / "Library" / "Preferences" / app_name
    else:
        config_dir = Path.home() / ".config" / app_name

    return config_dir

