"""INI settings for tickmeter.

Settings live in ``settings.conf`` under ``$TICKMETER_CONFIG_DIR`` or
``~/.config/tickmeter``. The file is optional; every key has a default.

Example::

    [progress]
    min_interval = 0.25
    bar_length = 40
    color = cyan
    glyphs = "[=> ]"
    show_speed = yes
    enabled = yes

    [logging]
    log_level = DEBUG
    console_log_level = WARNING
    log_file = ~/.cache/tickmeter/tickmeter.log
"""

import configparser
import functools
import logging
import os
from pathlib import Path
from typing import TypedDict

from tickmeter.constants import (
    CONFIG_DIR_ENV,
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    KEY_BAR_LENGTH,
    KEY_COLOR,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_ENABLED,
    KEY_GLYPHS,
    KEY_LOG_FILE,
    KEY_LOG_LEVEL,
    KEY_MIN_INTERVAL,
    KEY_SHOW_SPEED,
    SECTION_LOGGING,
    SECTION_PROGRESS,
)
from tickmeter.exceptions import SettingsError

# The logger package reads these settings while it initialises, so this
# module must not go through tickmeter.logger.get_logger.
logger = logging.getLogger(__name__)

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProgressSettings(TypedDict):
    """``[progress]`` section; None means "not set in the file"."""

    min_interval: float | None
    bar_length: int | None
    color: str | None
    glyphs: str | None
    show_speed: bool | None
    enabled: bool | None


class LoggingSettings(TypedDict):
    """``[logging]`` section with defaults applied."""

    log_level: str
    console_log_level: str
    log_file: Path | None


class Settings(TypedDict):
    """Parsed settings file."""

    progress: ProgressSettings
    logging: LoggingSettings


def get_config_dir() -> Path:
    """Return the directory holding ``settings.conf``."""
    env_dir = os.getenv(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR


def get_settings_file() -> Path:
    """Return the path of ``settings.conf``."""
    return get_config_dir() / CONFIG_FILE_NAME


def _unquote(value: str) -> str:
    """Strip one pair of surrounding quotes.

    ConfigParser trims whitespace, so a glyph spec ending in a space has
    to be written quoted.
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _parse_progress(
    parser: configparser.ConfigParser,
) -> ProgressSettings:
    section = SECTION_PROGRESS
    settings: ProgressSettings = {
        "min_interval": None,
        "bar_length": None,
        "color": None,
        "glyphs": None,
        "show_speed": None,
        "enabled": None,
    }
    if not parser.has_section(section):
        return settings

    key = ""
    try:
        key = KEY_MIN_INTERVAL
        if parser.has_option(section, key):
            settings["min_interval"] = parser.getfloat(section, key)
        key = KEY_BAR_LENGTH
        if parser.has_option(section, key):
            settings["bar_length"] = parser.getint(section, key)
        key = KEY_SHOW_SPEED
        if parser.has_option(section, key):
            settings["show_speed"] = parser.getboolean(section, key)
        key = KEY_ENABLED
        if parser.has_option(section, key):
            settings["enabled"] = parser.getboolean(section, key)
    except ValueError as e:
        raise SettingsError(str(e), target=f"{section}.{key}") from e

    if parser.has_option(section, KEY_COLOR):
        color = parser.get(section, KEY_COLOR).strip().lower()
        # "none" stays text; None here would mean "use the default colour"
        settings["color"] = color
    if parser.has_option(section, KEY_GLYPHS):
        settings["glyphs"] = _unquote(parser.get(section, KEY_GLYPHS))

    return settings


def _parse_level(
    parser: configparser.ConfigParser, key: str, default: str
) -> str:
    level = parser.get(SECTION_LOGGING, key, fallback=default).strip().upper()
    if level not in LOG_LEVEL_NAMES:
        msg = f"unknown log level {level!r}"
        raise SettingsError(msg, target=f"{SECTION_LOGGING}.{key}")
    return level


def _parse_logging(parser: configparser.ConfigParser) -> LoggingSettings:
    settings: LoggingSettings = {
        "log_level": DEFAULT_LOG_LEVEL,
        "console_log_level": DEFAULT_CONSOLE_LOG_LEVEL,
        "log_file": None,
    }
    if not parser.has_section(SECTION_LOGGING):
        return settings

    settings["log_level"] = _parse_level(
        parser, KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL
    )
    settings["console_log_level"] = _parse_level(
        parser, KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
    )
    log_file = parser.get(SECTION_LOGGING, KEY_LOG_FILE, fallback="").strip()
    if log_file:
        settings["log_file"] = Path(_unquote(log_file)).expanduser()
    return settings


@functools.lru_cache(maxsize=8)
def _load_settings_file(settings_file: Path) -> Settings:
    parser = configparser.ConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )
    try:
        read_files = parser.read(settings_file, encoding="utf-8")
    except configparser.Error as e:
        raise SettingsError(str(e), target=str(settings_file)) from e

    if read_files:
        logger.debug("Loaded settings from %s", settings_file)

    return {
        "progress": _parse_progress(parser),
        "logging": _parse_logging(parser),
    }


def load_settings(settings_file: Path | None = None) -> Settings:
    """Load and cache the settings file.

    Args:
        settings_file: Explicit path; defaults to ``get_settings_file()``

    Returns:
        Parsed settings, defaults where the file is silent or missing

    Raises:
        SettingsError: If the file is malformed or holds invalid values

    """
    return _load_settings_file(settings_file or get_settings_file())


def clear_settings_cache() -> None:
    """Forget cached settings so the next load re-reads the file."""
    _load_settings_file.cache_clear()
