"""
Training monitor: cooperative cancellation and progress messages.

Trainers and indexers poll ``is_cancelled`` between units of work and
report progress through ``message`` / ``warning``. Every report is also
emitted on the structlog logger.
"""

import threading
from collections.abc import Callable

from maxentkit.errors import TrainingCancelledError
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

MessageHandler = Callable[[str], None]


class Monitor:
    """
    Cancellation token plus message sink shared by one training run.

    ``cancel()`` may be called from any thread; the running trainer stops
    at its next checkpoint.
    """

    def __init__(
        self,
        on_message: MessageHandler | None = None,
        on_warning: MessageHandler | None = None,
    ) -> None:
        self._cancelled = threading.Event()
        self._on_message = on_message
        self._on_warning = on_warning
        self.messages: list[str] = []
        self.warnings: list[str] = []

    def cancel(self) -> None:
        """Request cancellation."""
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._cancelled.is_set()

    def check_cancelled(self) -> None:
        """
        Raise if cancellation was requested.

        Raises:
            TrainingCancelledError: If ``cancel()`` was called.
        """
        if self.is_cancelled:
            raise TrainingCancelledError("Training was cancelled")

    def message(self, text: str) -> None:
        """Report a progress message."""
        self.messages.append(text)
        log.info(text)
        if self._on_message is not None:
            self._on_message(text)

    def warning(self, text: str) -> None:
        """Report a warning."""
        self.warnings.append(text)
        log.warning(text)
        if self._on_warning is not None:
            self._on_warning(text)
