"""
Utility modules for the application.
"""
from .resource_loader import get_app_data_dir, get_config_dir
from .logging_service import setup_logging, get_logger
from .config_service import EditorSettings, load_settings

__all__ = [
    'get_app_data_dir',
    'get_config_dir',
    'setup_logging',
    'get_logger',
    'EditorSettings',
    'load_settings',
]
