"""
Advisory phase timer racing a manual confirmation.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PhaseTimer:
    """
    Countdown that completes the current stage or vote when it runs out.

    Expiry and a manual confirmation may race; whichever arrives first runs
    its callback and the other becomes a no-op. A length of 0 disables the
    countdown, leaving only manual confirmation.
    """

    def __init__(self, seconds: int, on_expire: Callable[[], None],
                 on_confirm: Optional[Callable[[], None]] = None):
        self.seconds = seconds
        self.on_expire = on_expire
        self.on_confirm = on_confirm
        self._lock = threading.Lock()
        self._completed = False
        self._timer: Optional[threading.Timer] = None

    @property
    def enabled(self) -> bool:
        return self.seconds > 0

    @property
    def completed(self) -> bool:
        return self._completed

    def start(self) -> None:
        """Start the countdown (no-op when disabled or already completed)."""
        if not self.enabled or self._completed:
            return
        self._timer = threading.Timer(self.seconds, self.expire)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _complete_once(self) -> bool:
        with self._lock:
            if self._completed:
                return False
            self._completed = True
        self.cancel()
        return True

    def expire(self) -> bool:
        """Run the expiry callback unless the stage was already completed."""
        if not self._complete_once():
            return False
        logger.debug("Phase timer expired after %ds", self.seconds)
        self.on_expire()
        return True

    def confirm(self) -> bool:
        """Mark the stage as manually completed, beating any pending expiry."""
        if not self._complete_once():
            return False
        if self.on_confirm is not None:
            self.on_confirm()
        return True
