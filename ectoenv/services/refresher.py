"""Periodic background re-binding of a record.

The refresher re-runs the full bind on a timer. It does not detect changes;
every tick overwrites the record's bound fields.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from ectoenv.services.binder import bind_env
from ectoenv.services.errors import BindError
from ectoenv.utils import constant

# Fallback wait, in seconds, when AUTO_REFRESH_INTERVAL is not positive
MIN_REFRESH_INTERVAL = 1


class LockLike(Protocol):
    """Anything usable as a context-manager lock."""

    def __enter__(self) -> Any:  # noqa: ANN401
        ...

    def __exit__(self, *args: Any) -> Any:  # noqa: ANN401
        ...


class AutoRefresher:
    """Handle for a background task re-binding one record.

    Ticks run one after another on a single daemon thread. A failed tick is
    logged and the loop carries on with the next one.
    """

    def __init__(
        self,
        target: Any,  # noqa: ANN401
        *,
        interval: float | None = None,
        lock: LockLike | None = None,
    ) -> None:
        """Initialize the refresher without starting it.

        Args:
            target: Record to re-bind. Must outlive the refresher.
            interval: Seconds between ticks. When None, the package-wide
                AUTO_REFRESH_INTERVAL is read again before every tick.
            lock: Optional lock held while each tick writes the record.

        Raises:
            ValueError: If the interval is not positive.
        """
        if interval is not None and interval <= 0:
            raise ValueError(f"refresh interval must be positive, got {interval}")
        self._target = target
        self._interval = interval
        self._lock = lock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.ticks = 0
        self.last_error: Exception | None = None

    @property
    def interval(self) -> float:
        """Seconds until the next tick.

        Returns:
            The fixed interval, or the current package-wide value.
        """
        if self._interval is not None:
            return self._interval
        interval = constant.AUTO_REFRESH_INTERVAL
        if interval <= 0:
            logging.warning(
                "AUTO_REFRESH_INTERVAL must be positive, got %s; using %s",
                interval,
                MIN_REFRESH_INTERVAL,
            )
            return MIN_REFRESH_INTERVAL
        return interval

    @property
    def is_running(self) -> bool:
        """Check if the background thread is alive.

        Returns:
            True while the refresh loop runs.
        """
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Launch the background refresh loop."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"ectoenv-refresh-{type(self._target).__name__}",
            daemon=True,
        )
        self._thread.start()
        logging.info(
            "Started environment auto-refresh for %s", type(self._target).__name__
        )

    def stop(self, timeout: float | None = None) -> None:
        """Stop the loop, interrupting the current wait.

        Args:
            timeout: Seconds to wait for the thread to exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
        logging.info(
            "Stopped environment auto-refresh for %s", type(self._target).__name__
        )

    def refresh_once(self) -> None:
        """Run a single tick: re-bind the record and record the outcome."""
        try:
            if self._lock is not None:
                with self._lock:
                    bind_env(self._target)
            else:
                bind_env(self._target)
        except BindError as e:
            self.last_error = e
            logging.error("Failed to refresh environment variables: %s", e)
        except Exception as e:  # noqa: BLE001
            self.last_error = e
            logging.error(
                "Unexpected error refreshing environment variables: %s", e, exc_info=True
            )
        else:
            self.last_error = None
        self.ticks += 1

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.refresh_once()


def bind_env_with_auto_refresh(
    target: Any,  # noqa: ANN401
    *,
    interval: float | None = None,
    lock: LockLike | None = None,
) -> AutoRefresher:
    """Bind a record now and keep re-binding it in the background.

    The initial bind runs synchronously and raises exactly like bind_env;
    on failure no background task is started.

    Args:
        target: A mutable dataclass instance.
        interval: Fixed seconds between ticks. Defaults to the package-wide
            AUTO_REFRESH_INTERVAL, re-read every tick.
        lock: Optional lock held while each tick writes the record.

    Returns:
        A running AutoRefresher. Call stop() to end the loop.

    Raises:
        BindError: If the initial bind fails.
        ValueError: If the interval is not positive.
    """
    refresher = AutoRefresher(target, interval=interval, lock=lock)
    bind_env(target)
    refresher.start()
    return refresher
