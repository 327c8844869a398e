"""Public logging API for tickmeter.

- setup_logging(): opt in to tickmeter's own handlers and return a logger
- get_logger(): the call every module uses, ``get_logger(__name__)``
- flush_all_handlers(): drain the queue and flush handlers
- clear_logger_state(): reset everything, for tests
"""

import atexit
import contextlib
import logging
import os
import time
from pathlib import Path

from tickmeter.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV,
    LOG_FILE_NAME,
    ROOT_LOGGER_NAME,
)
from tickmeter.logger.handlers import setup_root_logger
from tickmeter.logger.state import get_state

FLUSH_TIMEOUT_SECONDS = 5.0

# Until setup_logging() runs, records propagate to whatever the host
# application configured.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def load_log_settings() -> tuple[str, str, Path | None]:
    """Resolve console level, file level and log file path.

    ``TICKMETER_LOG_DIR`` wins over the ``[logging] log_file`` setting.
    File logging stays off when neither is present.

    Returns:
        Tuple of (console_level, file_level, log_file)

    """
    # Late import: the settings module logs through this package.
    from tickmeter.config.settings import load_settings  # noqa: PLC0415
    from tickmeter.exceptions import SettingsError  # noqa: PLC0415

    console_level = DEFAULT_CONSOLE_LOG_LEVEL
    file_level = DEFAULT_LOG_LEVEL
    log_file: Path | None = None

    try:
        logging_settings = load_settings()["logging"]
    except SettingsError:
        # A broken settings file must not stop logging from starting
        logging_settings = None

    if logging_settings is not None:
        console_level = logging_settings["console_log_level"]
        file_level = logging_settings["log_level"]
        log_file = logging_settings["log_file"]

    env_log_dir = os.getenv(LOG_DIR_ENV)
    if env_log_dir:
        log_file = Path(env_log_dir).expanduser() / LOG_FILE_NAME

    return console_level, file_level, log_file


def flush_all_handlers() -> None:
    """Wait for queued records, then flush every handler.

    QueueListener never calls ``task_done``, so ``Queue.join`` would hang;
    the queue is polled for at most ``FLUSH_TIMEOUT_SECONDS`` instead.
    """
    listener = get_state().queue_listener
    log_queue = get_state().log_queue
    if listener is None or log_queue is None:
        return

    deadline = time.monotonic() + FLUSH_TIMEOUT_SECONDS
    while not log_queue.empty() and time.monotonic() < deadline:
        time.sleep(0.01)
    # the listener may still be handling the last dequeued record
    time.sleep(0.05)

    for target in listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            target.flush()


def _stop_listener() -> None:
    """Drain and stop the queue listener if one is running."""
    state = get_state()
    if state.queue_listener is None:
        return
    flush_all_handlers()
    state.queue_listener.stop()
    state.queue_listener = None


atexit.register(_stop_listener)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach tickmeter's handlers once and return ``name``'s logger.

    Library code never calls this. Applications and scripts that want
    tickmeter's coloured console output and log file call it once; it
    starts the QueueListener thread and stops propagation to the root
    logger. Explicit arguments override the values from
    ``load_log_settings``. Safe to call from several threads at once.

    Args:
        name: Logger name, normally ``__name__``
        console_level: Console level name
        file_level: File level name
        log_file: Log file path

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging cannot be set up

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            configured = load_log_settings()
            setup_root_logger(
                state,
                console_level or configured[0],
                file_level or configured[1],
                log_file or configured[2],
            )

    return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger below the ``tickmeter`` root.

    No handlers are configured and no thread is started here, so importing
    tickmeter leaves logging to the host application until
    ``setup_logging`` is called.

    Example:
        >>> from tickmeter.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Rendered %d lines", 3)

    """
    return logging.getLogger(name)


def clear_logger_state() -> None:
    """Tear down the logging system and return to the import-time state.

    Intended for tests only.
    """
    state = get_state()
    with state.lock:
        _stop_listener()
        state.log_queue = None
        state.root_initialized = False

        names = [
            name
            for name in logging.Logger.manager.loggerDict
            if name == ROOT_LOGGER_NAME
            or name.startswith(f"{ROOT_LOGGER_NAME}.")
        ]
        for name in names:
            owner = logging.getLogger(name)
            for attached in list(owner.handlers):
                owner.removeHandler(attached)
                attached.close()

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.NOTSET)
        root.propagate = True
        root.addHandler(logging.NullHandler())
