"""Reservation bookkeeping for exported pins.

A :class:`PinRegistry` records which pins this driver instance has exported
and not yet unexported. It is the only concurrency control in the driver:
a pin may be held by at most one live reservation at a time.
"""

from __future__ import annotations

import logging

from sysfs_gpio.errors import ConflictError, ReleaseError
from sysfs_gpio.sysfs import SysfsGpio, check_pin

logger = logging.getLogger(__name__)


class PinRegistry:
    """Tracks the pins reserved by one driver instance.

    Args:
        sysfs: Sysfs tree the export/unexport writes go to.
    """

    def __init__(self, sysfs: SysfsGpio) -> None:
        self._sysfs = sysfs
        self._exported: set[int] = set()

    def reserve(self, pin: int) -> None:
        """Export a pin and mark it reserved.

        The pin is only recorded once the export write succeeded.

        Raises:
            ConflictError: If the pin is already reserved.
            OSError: If the kernel export fails.
        """
        check_pin(pin)
        if pin in self._exported:
            raise ConflictError(pin)
        self._sysfs.export(pin)
        self._exported.add(pin)
        logger.info("Reserved GPIO pin %d", pin)

    def release(self, pin: int) -> None:
        """Unexport a pin and forget it.

        The pin is forgotten even when the unexport write fails, so a pin
        whose directory is already gone does not stay tracked forever.
        Releasing a pin that is not reserved is a no-op.

        Raises:
            OSError: If the kernel unexport fails.
        """
        check_pin(pin)
        if pin not in self._exported:
            return
        try:
            self._sysfs.unexport(pin)
        finally:
            self._exported.discard(pin)
            logger.info("Released GPIO pin %d", pin)

    def release_all(self) -> None:
        """Release every reserved pin.

        Iterates over a snapshot of the reserved set and keeps going after
        individual failures.

        Raises:
            ReleaseError: If any unexport failed, after all were attempted.
        """
        failures: dict[int, OSError] = {}
        for pin in sorted(self._exported):
            try:
                self.release(pin)
            except OSError as exc:
                logger.warning("Failed to unexport GPIO pin %d: %s", pin, exc)
                failures[pin] = exc
        if failures:
            raise ReleaseError(failures)

    def is_reserved(self, pin: int) -> bool:
        return pin in self._exported

    def reserved_pins(self) -> frozenset[int]:
        """Return a snapshot of the reserved pin numbers."""
        return frozenset(self._exported)

    def __len__(self) -> int:
        return len(self._exported)
