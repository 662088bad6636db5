"""
Background reload polling.

A ReloadScheduler owns one daemon thread that ticks at a fixed rate. Each
tick stats the store's bound file and calls ``store.reload()`` when the
file's modification time has advanced past the one recorded at the last
successful load. A failing tick is logged and the thread keeps ticking.
"""

import threading
import time
from enum import Enum
from typing import Any, Optional, Union

from TypedConfig.exceptions import InvalidArgumentError
from TypedConfig.utils.logging import get_logger

logger = get_logger(__name__)


class TimeUnit(Enum):
    """Polling interval units, valued in seconds."""

    MILLISECONDS = 0.001
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    def to_seconds(self, amount: Union[int, float]) -> float:
        return amount * self.value

    @classmethod
    def parse(cls, unit: Union["TimeUnit", str, None]) -> "TimeUnit":
        """
        Accept a TimeUnit or its case-insensitive name.

        Raises:
            InvalidArgumentError: If ``unit`` is missing or unknown
        """
        if isinstance(unit, cls):
            return unit
        if isinstance(unit, str) and unit.strip().upper() in cls.__members__:
            return cls[unit.strip().upper()]
        valid_units = ", ".join(member.name.lower() for member in cls)
        raise InvalidArgumentError(
            f"No time unit specified or unknown unit {unit!r}. Valid units are: {valid_units}",
            context={"unit": repr(unit)},
        )


class ReloadScheduler:
    """
    Periodic reload ticker for a ConfigurationStore.

    Args:
        store: Object exposing ``source`` (a SourceBinding or None) and ``reload()``
        interval: Positive polling interval
        unit: TimeUnit or unit name for ``interval``
        join_timeout: Seconds to wait for the thread when stopping

    Raises:
        InvalidArgumentError: If ``interval`` is not a positive integer or
            ``unit`` is missing; nothing is scheduled in that case
    """

    def __init__(self, store: Any, interval: int, unit: Union[TimeUnit, str],
                 join_timeout: float = 5.0):
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise InvalidArgumentError(
                f"Polling rate must be a positive integer, got {interval!r}",
                context={"interval": repr(interval)},
            )
        self.unit = TimeUnit.parse(unit)
        self.interval = interval
        self.period = self.unit.to_seconds(interval)
        self.join_timeout = join_timeout
        self._store = store
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._thread_lock = threading.Lock()

    def start(self) -> None:
        """Start ticking; does nothing if already running."""
        with self._thread_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name="TypedConfigReload",
                daemon=True,
            )
            self._thread.start()
        logger.debug(f"Reload polling started every {self.interval} {self.unit.name.lower()}")

    def stop(self) -> None:
        """Cancel future ticks; safe to call repeatedly or before start()."""
        with self._thread_lock:
            thread, self._thread = self._thread, None
            self._stop_event.set()
        if thread is None:
            return
        if thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=self.join_timeout)
        logger.info("Reload polling stopped")

    def is_running(self) -> bool:
        with self._thread_lock:
            return self._thread is not None and self._thread.is_alive()

    def tick(self) -> bool:
        """
        Reload the store if its bound file changed.

        Returns:
            True if a reload was performed, False for a no-op tick

        Raises:
            ReloadFailedError: If the reload itself fails
        """
        source = self._store.source
        if source is None or source.path is None:
            logger.debug("Not polling: no file is bound")
            return False

        try:
            modified = source.path.stat().st_mtime_ns
        except FileNotFoundError:
            logger.debug(f"Not reloading: {source.path} does not exist")
            return False

        if source.last_modified is not None and modified <= source.last_modified:
            logger.debug("Not reloading file as no change has been detected since last load")
            return False

        logger.info(f"Reload required: {source.path} changed")
        self._store.reload()
        return True

    def _run(self) -> None:
        next_run = time.monotonic() + self.period
        while not self._stop_event.wait(max(0.0, next_run - time.monotonic())):
            try:
                self.tick()
            except Exception:
                logger.exception("Scheduled configuration reload failed; will retry on next tick")
            next_run += self.period
            # Skip missed ticks instead of running them back to back
            now = time.monotonic()
            if next_run < now:
                next_run = now
