"""Pin configuration, digital I/O and edge waits.

Every operation here goes straight to the pin's sysfs attribute files; no
direction, trigger or level is cached, so the kernel tree remains the single
source of truth for pin configuration.
"""

from __future__ import annotations

import logging
import threading

from sysfs_gpio.errors import (
    NotReservedError,
    UnsupportedOperationError,
    WaitCancelledError,
)
from sysfs_gpio.registry import PinRegistry
from sysfs_gpio.sysfs import DIRECTION_ATTR, EDGE_ATTR, VALUE_ATTR, SysfsGpio
from sysfs_gpio.types import (
    HIGH,
    LOW,
    Direction,
    Pull,
    Trigger,
    parse_direction,
    parse_level,
    parse_pull,
    parse_trigger,
)
from sysfs_gpio.watcher import ValueWatcher

logger = logging.getLogger(__name__)


def edge_satisfied(trigger: Trigger, last_value: int, value: int) -> bool:
    """Decide whether a newly read level completes an edge wait.

    Args:
        trigger: The edge being waited for.
        last_value: The previously observed level.
        value: The level read after a change notification.

    Returns:
        True if the level changed in the direction the trigger asks for.
    """
    if value == last_value:
        return False
    if trigger is Trigger.RISING and value == LOW:
        return False
    if trigger is Trigger.FALLING and value == HIGH:
        return False
    return True


class PinController:
    """Configures and drives reserved pins.

    Args:
        registry: Registry consulted (and, for :meth:`set_direction`,
            updated) before touching a pin.
        sysfs: Sysfs tree holding the pin attribute files.
        watcher: Source of value-file change notifications for edge waits.
    """

    def __init__(
        self,
        registry: PinRegistry,
        sysfs: SysfsGpio,
        watcher: ValueWatcher,
    ) -> None:
        self._registry = registry
        self._sysfs = sysfs
        self._watcher = watcher

    @property
    def watcher(self) -> ValueWatcher:
        return self._watcher

    def set_direction(self, pin: int, direction: Direction | str) -> None:
        """Reserve a pin and configure it as input or output.

        Setting the direction is how a pin is opened, so the pin is exported
        first. A pin that is already reserved must be released before its
        direction can be set again.

        Raises:
            InvalidArgumentError: If the direction is not ``in`` or ``out``.
            ConflictError: If the pin is already reserved.
            NotReservedError: If the pin is still unreserved afterwards.
            OSError: If the export or the direction write fails.
        """
        direction = parse_direction(direction)
        self._ensure_reserved(pin)
        self._sysfs.write_attr(pin, DIRECTION_ATTR, direction.value)
        logger.debug("GPIO pin %d direction set to %s", pin, direction.value)

    def get_direction(self, pin: int) -> Direction:
        """Read the pin's direction back from the kernel."""
        self._require_reserved(pin)
        return Direction(self._sysfs.read_attr(pin, DIRECTION_ATTR))

    def read(self, pin: int) -> int:
        """Read the pin level.

        Returns:
            LOW or HIGH.

        Raises:
            NotReservedError: If the pin is not reserved.
        """
        self._require_reserved(pin)
        return int(self._sysfs.read_attr(pin, VALUE_ATTR))

    def write(self, pin: int, value: int) -> None:
        """Drive the pin to a level.

        Raises:
            InvalidArgumentError: If ``value`` is not 0 or 1.
            NotReservedError: If the pin is not reserved.
        """
        level = parse_level(value)
        self._require_reserved(pin)
        self._sysfs.write_attr(pin, VALUE_ATTR, level)

    def set_pull(self, pin: int, mode: Pull | str) -> None:
        """Configure the pull resistor. Only ``off`` is supported.

        Raises:
            UnsupportedOperationError: For any mode other than ``off``.
        """
        if parse_pull(mode) is not Pull.OFF:
            raise UnsupportedOperationError(
                "Pull up/down not available with this driver. keep it on 'off'"
            )

    def set_trigger(self, pin: int, trigger: Trigger | str) -> None:
        """Select which edges raise change notifications on the value file.

        Raises:
            InvalidArgumentError: If the trigger is unknown.
            NotReservedError: If the pin is not reserved.
        """
        trigger = parse_trigger(trigger)
        self._require_reserved(pin)
        self._sysfs.write_attr(pin, EDGE_ATTR, trigger.value)
        logger.debug("GPIO pin %d edge set to %s", pin, trigger.value)

    def get_trigger(self, pin: int) -> Trigger:
        """Read the pin's edge trigger back from the kernel."""
        self._require_reserved(pin)
        return Trigger(self._sysfs.read_attr(pin, EDGE_ATTR))

    def wait_for_edge(
        self,
        pin: int,
        trigger: Trigger | str,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> bool:
        """Block until the pin makes the requested transition.

        The trigger is written to the pin and the current level is taken as
        the baseline. The level is re-read once the watch is armed and after
        every change notification. Readings that leave the level unchanged,
        or move it the wrong way for a ``rising``/``falling`` trigger, are
        ignored.

        Without ``cancel`` or ``timeout`` this blocks until the edge occurs.

        Args:
            pin: Reserved pin number.
            trigger: Edge to wait for.
            cancel: Event that aborts the wait when set.
            timeout: Seconds to wait before giving up.

        Returns:
            True once the edge has been observed.

        Raises:
            NotReservedError: If the pin is not reserved.
            WaitCancelledError: If ``cancel`` was set first.
            EdgeTimeoutError: If ``timeout`` elapsed first.
        """
        trigger = parse_trigger(trigger)
        self.set_trigger(pin, trigger)
        last_value = self.read(pin)
        logger.debug(
            "Waiting for %s edge on GPIO pin %d (level %d)", trigger.value, pin, last_value
        )

        events = self._watcher.watch(self._sysfs.value_path(pin), cancel, timeout)
        try:
            for _ in events:
                value = self.read(pin)
                if edge_satisfied(trigger, last_value, value):
                    logger.debug("GPIO pin %d edge %d -> %d", pin, last_value, value)
                    return True
                last_value = value
        finally:
            close = getattr(events, "close", None)
            if close is not None:
                close()

        raise WaitCancelledError(f"Watch on GPIO pin {pin} ended without an edge")

    def _ensure_reserved(self, pin: int) -> None:
        self._registry.reserve(pin)
        self._require_reserved(pin)

    def _require_reserved(self, pin: int) -> None:
        if not self._registry.is_reserved(pin):
            raise NotReservedError(pin)
