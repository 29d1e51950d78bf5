"""Packaged YAML configuration (editor behaviour, toolbar, logging) and the
`ConfigManager` that merges it with user overrides.
"""

from .manager import ConfigManager, get_user_config_dir, get_user_data_dir

__all__ = [
    "ConfigManager",
    "get_user_config_dir",
    "get_user_data_dir",
]
