"""Centralized constants module for tickmeter.

Single source of truth for defaults shared by the progress core, the
settings loader and the logging package. Values use ``typing.Final`` so
nothing rebinds them at runtime.

Usage:
    from tickmeter.constants import DEFAULT_MIN_INTERVAL
"""

from typing import Final

# =============================================================================
# Progress defaults
# =============================================================================

# Seconds between two non-forced redraws of the same progress state
DEFAULT_MIN_INTERVAL: Final[float] = 0.1

DEFAULT_DESCRIPTION: Final[str] = "Progress: "
DEFAULT_COLOR: Final[str] = "green"
DEFAULT_CANCEL_COLOR: Final[str] = "red"
DEFAULT_CANCEL_MESSAGE: Final[str] = "Aborted before all tasks were completed"

# Terminal width used when the real size cannot be determined
FALLBACK_TERMINAL_WIDTH: Final[int] = 80

# Columns reserved around the bar: percent, caps, ETA label and value
BAR_RESERVED_COLUMNS: Final[int] = 28
SPEED_RESERVED_COLUMNS: Final[int] = 14

# Upper bound for a bar derived from the terminal width
MAX_AUTO_BAR_LENGTH: Final[int] = 50

# Left cap, fill, partial, empty, right cap
ASCII_GLYPHS: Final[str] = "[=> ]"

DEFAULT_LEFT_GLYPH: Final[str] = "|"
DEFAULT_FILL_GLYPH: Final[str] = "█"
DEFAULT_EMPTY_GLYPH: Final[str] = " "
DEFAULT_RIGHT_GLYPH: Final[str] = "|"
DEFAULT_INTERMEDIATE_GLYPHS: Final[tuple[str, ...]] = (
    "▏",
    "▎",
    "▍",
    "▌",
    "▋",
    "▊",
    "▉",
)

ETA_UNKNOWN: Final[str] = "N/A"

# Comparator spellings accepted by ThresholdProgress
COMPARATOR_AT_MOST: Final[str] = "<="
COMPARATOR_AT_LEAST: Final[str] = ">="

# =============================================================================
# Terminal control
# =============================================================================

ANSI_RESET: Final[str] = "\033[0m"
ANSI_CLEAR_SCREEN: Final[str] = "\033[H\033[2J"
ANSI_CLEAR_TO_END: Final[str] = "\033[J"

# Colour names accepted by ProgressOptions.color / cancel_color
PROGRESS_COLORS: Final[dict[str, str]] = {
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
}

# =============================================================================
# Configuration file
# =============================================================================

CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = ".config"
DEFAULT_CONFIG_SUBDIR: Final[str] = "tickmeter"
CONFIG_DIR_ENV: Final[str] = "TICKMETER_CONFIG_DIR"

SECTION_PROGRESS: Final[str] = "progress"
SECTION_LOGGING: Final[str] = "logging"

KEY_MIN_INTERVAL: Final[str] = "min_interval"
KEY_BAR_LENGTH: Final[str] = "bar_length"
KEY_COLOR: Final[str] = "color"
KEY_GLYPHS: Final[str] = "glyphs"
KEY_SHOW_SPEED: Final[str] = "show_speed"
KEY_ENABLED: Final[str] = "enabled"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_LOG_FILE: Final[str] = "log_file"

# =============================================================================
# Logging Constants
# =============================================================================

ROOT_LOGGER_NAME: Final[str] = "tickmeter"
LOG_DIR_ENV: Final[str] = "TICKMETER_LOG_DIR"
LOG_FILE_NAME: Final[str] = "tickmeter.log"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"

LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": ANSI_RESET,
}
