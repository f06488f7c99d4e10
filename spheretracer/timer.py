"""Wall-clock timer for reporting render phases."""

from __future__ import annotations
import logging
import time

logger = logging.getLogger(__name__)


class Timer:
    """Measures time since creation and since the last lap."""

    def __init__(self):
        self._start = time.perf_counter()
        self._last = self._start

    def reset(self) -> None:
        """Start a new lap."""
        self._last = time.perf_counter()

    def elapsed_from_start(self) -> float:
        return time.perf_counter() - self._start

    def elapsed_from_last(self) -> float:
        return time.perf_counter() - self._last

    def report(self, message: str = "") -> str:
        """Log elapsed and lap times with an optional message, then start a new lap.

        Returns:
            The logged text
        """
        text = f"[Timer]: [Elapsed]: {self.elapsed_from_start():.4f}, [Delta]: {self.elapsed_from_last():.4f}"
        if message:
            text = f"{text}\n{message}"
        logger.info(text)
        self.reset()
        return text
