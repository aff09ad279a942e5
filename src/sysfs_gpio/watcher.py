"""Change notification for sysfs value files.

Once a pin's ``edge`` attribute is set to something other than ``none``, the
kernel raises a priority event (``POLLPRI``/``POLLERR``) on its ``value`` file
for each qualifying transition. The file must be re-read after every event to
re-arm the notification.

The edge-wait logic consumes notifications through the narrow
:class:`ValueWatcher` protocol, so it does not depend on how they are
produced. :class:`EpollValueWatcher` is the implementation used on real
hardware.
"""

from __future__ import annotations

import logging
import select
import threading
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from sysfs_gpio.errors import EdgeTimeoutError, WaitCancelledError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1


class ValueWatcher(Protocol):
    """Protocol for sources of value-file change notifications.

    ``watch()`` returns an iterator that yields once as soon as the watch is
    armed, then once per notification, in the order they are received. The
    first yield lets the caller re-read the level, since a transition between
    its baseline read and arming raises no notification. Several electrical
    transitions may coalesce into a single notification.
    """

    def watch(
        self,
        path: Path,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Iterator[None]:
        """Yield once when armed, then for every change notification on ``path``.

        Args:
            path: The value file to watch.
            cancel: Event that aborts the watch when set.
            timeout: Seconds after which the watch gives up, or None to
                watch indefinitely.

        Raises:
            WaitCancelledError: If ``cancel`` was set.
            EdgeTimeoutError: If ``timeout`` elapsed.
        """
        ...


class EpollValueWatcher:
    """Watches a sysfs value file with ``select.epoll``.

    The calling thread sleeps in ``epoll.poll()``; it only wakes every
    ``poll_interval`` seconds to honour the cancel event and the deadline.

    Args:
        poll_interval: Maximum seconds between cancel/deadline checks.
    """

    def __init__(self, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self._poll_interval = poll_interval

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    def watch(
        self,
        path: Path,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Iterator[None]:
        deadline = None if timeout is None else time.monotonic() + timeout

        with open(path, "rb", buffering=0) as f:
            poller = select.epoll()
            try:
                # Consume the current state so the first event is a real change
                f.read()
                poller.register(f.fileno(), select.EPOLLPRI | select.EPOLLERR)
                logger.debug("Watching %s", path)
                yield

                while True:
                    if cancel is not None and cancel.is_set():
                        raise WaitCancelledError(f"Wait on {path} cancelled")

                    wait = self._poll_interval
                    if deadline is not None:
                        remaining = deadline - time.monotonic()
                        if remaining <= 0:
                            raise EdgeTimeoutError(
                                f"No edge on {path} within {timeout} seconds"
                            )
                        wait = min(wait, remaining)

                    if not poller.poll(wait):
                        continue

                    # Re-arm the notification
                    f.seek(0)
                    f.read()
                    yield
            finally:
                poller.close()
