"""Settings file handling for tickmeter."""

from tickmeter.config.settings import (
    LoggingSettings,
    ProgressSettings,
    Settings,
    clear_settings_cache,
    get_config_dir,
    get_settings_file,
    load_settings,
)

__all__ = [
    "LoggingSettings",
    "ProgressSettings",
    "Settings",
    "clear_settings_cache",
    "get_config_dir",
    "get_settings_file",
    "load_settings",
]
