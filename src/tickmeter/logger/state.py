"""Process-wide logger state for tickmeter.

One queue and one listener thread serve every ``tickmeter.*`` logger, no
matter how many progress objects or worker threads log through them.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import queue
    from logging.handlers import QueueListener


class _LoggerState:
    """Mutable singleton guarded by ``lock``.

    Attributes:
        lock: Serialises root logger setup and teardown
        root_initialized: True once the queue handler is attached
        queue_listener: Thread writing queued records to the handlers
        log_queue: Queue between the QueueHandler and the listener

    """

    def __init__(self) -> None:
        """Start with logging not yet configured."""
        self.lock = threading.Lock()
        self.root_initialized = False
        self.log_queue: queue.Queue | None = None
        self.queue_listener: QueueListener | None = None


_state = _LoggerState()


def get_state() -> _LoggerState:
    """Return the shared logger state."""
    return _state
