"""Sysfs GPIO driver.

:class:`SysfsGpioDriver` owns one :class:`PinRegistry` and one
:class:`PinController` and exposes their operations as a single object.
Create it once, pass it to whatever needs pins, and close it on shutdown
(or use it as a context manager) so every exported pin is unexported again.

Example:
    >>> with SysfsGpioDriver() as gpio:
    ...     gpio.set_direction(17, "in")
    ...     gpio.wait_for_edge(17, "rising", timeout=5.0)
    ...     level = gpio.read(17)
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import TracebackType

from sysfs_gpio.controller import PinController
from sysfs_gpio.registry import PinRegistry
from sysfs_gpio.sysfs import DEFAULT_SYSFS_ROOT, SysfsGpio
from sysfs_gpio.types import HIGH, LOW, Direction, Pull, Trigger, parse_level
from sysfs_gpio.watcher import EpollValueWatcher, ValueWatcher

logger = logging.getLogger(__name__)


class SysfsGpioDriver:
    """GPIO driver backed by the kernel's sysfs interface.

    Args:
        root: Sysfs GPIO directory, ``/sys/class/gpio`` by default.
        watcher: Change-notification source for edge waits. Defaults to an
            :class:`EpollValueWatcher`.
    """

    def __init__(
        self,
        root: str | Path = DEFAULT_SYSFS_ROOT,
        watcher: ValueWatcher | None = None,
    ) -> None:
        self._sysfs = SysfsGpio(root)
        self._registry = PinRegistry(self._sysfs)
        self._controller = PinController(
            self._registry,
            self._sysfs,
            watcher if watcher is not None else EpollValueWatcher(),
        )

    @property
    def sysfs(self) -> SysfsGpio:
        return self._sysfs

    @property
    def registry(self) -> PinRegistry:
        return self._registry

    @property
    def controller(self) -> PinController:
        return self._controller

    # -- Reservation -------------------------------------------------------

    def reserve(self, pin: int) -> None:
        """Export and reserve a pin. See :meth:`PinRegistry.reserve`."""
        self._registry.reserve(pin)

    def release(self, pin: int) -> None:
        """Unexport a pin. See :meth:`PinRegistry.release`."""
        self._registry.release(pin)

    def release_all(self) -> None:
        """Unexport every reserved pin. See :meth:`PinRegistry.release_all`."""
        self._registry.release_all()

    def is_reserved(self, pin: int) -> bool:
        return self._registry.is_reserved(pin)

    def reserved_pins(self) -> frozenset[int]:
        return self._registry.reserved_pins()

    # -- Pin operations ----------------------------------------------------

    def set_direction(self, pin: int, direction: Direction | str) -> None:
        self._controller.set_direction(pin, direction)

    def get_direction(self, pin: int) -> Direction:
        return self._controller.get_direction(pin)

    def read(self, pin: int) -> int:
        return self._controller.read(pin)

    def write(self, pin: int, value: int) -> None:
        self._controller.write(pin, value)

    def set_pull(self, pin: int, mode: Pull | str) -> None:
        self._controller.set_pull(pin, mode)

    def set_trigger(self, pin: int, trigger: Trigger | str) -> None:
        self._controller.set_trigger(pin, trigger)

    def get_trigger(self, pin: int) -> Trigger:
        return self._controller.get_trigger(pin)

    def wait_for_edge(
        self,
        pin: int,
        trigger: Trigger | str,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> bool:
        """Block until the pin makes the requested transition.

        See :meth:`PinController.wait_for_edge`.
        """
        return self._controller.wait_for_edge(pin, trigger, cancel=cancel, timeout=timeout)

    # -- Handles -----------------------------------------------------------

    def open_pin(
        self,
        pin: int,
        direction: Direction | str,
        trigger: Trigger | str | None = None,
        initial: int | None = None,
    ) -> GpioPin:
        """Reserve a pin and return a handle to it.

        The pin is opened through :meth:`set_direction`, so two handles can
        not share one pin. If configuring the pin fails after it was
        reserved, it is released again.

        Args:
            pin: Pin number.
            direction: ``in`` or ``out``.
            trigger: Optional edge trigger to configure.
            initial: Optional initial level for an output pin.

        Returns:
            Handle bound to this driver.

        Raises:
            ConflictError: If the pin is already reserved.
            InvalidArgumentError: If an argument is out of domain.
        """
        if initial is not None:
            parse_level(initial)
        was_reserved = self._registry.is_reserved(pin)
        try:
            self._controller.set_direction(pin, direction)
            if trigger is not None:
                self._controller.set_trigger(pin, trigger)
            if initial is not None:
                self._controller.write(pin, initial)
        except Exception:
            if not was_reserved:
                self._registry.release(pin)
            raise
        return GpioPin(self, pin)

    # -- Lifecycle ---------------------------------------------------------

    def close(self) -> bool:
        """Release all pins.

        Returns:
            True if no pin remains reserved.

        Raises:
            ReleaseError: If some unexports failed. The pins are forgotten
                regardless.
        """
        logger.debug("Closing GPIO driver (%d pins reserved)", len(self._registry))
        self._registry.release_all()
        return len(self._registry) == 0

    def __enter__(self) -> SysfsGpioDriver:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class GpioPin:
    """Handle to a single pin reserved through :meth:`SysfsGpioDriver.open_pin`.

    Attributes:
        number: The pin number.
    """

    def __init__(self, driver: SysfsGpioDriver, number: int) -> None:
        self._driver = driver
        self.number = number

    def __repr__(self) -> str:
        return f"GpioPin({self.number}, reserved={self.reserved})"

    @property
    def reserved(self) -> bool:
        return self._driver.is_reserved(self.number)

    @property
    def direction(self) -> Direction:
        return self._driver.get_direction(self.number)

    @property
    def trigger(self) -> Trigger:
        return self._driver.get_trigger(self.number)

    def read(self) -> int:
        return self._driver.read(self.number)

    def write(self, value: int) -> None:
        self._driver.write(self.number, value)

    def on(self) -> None:
        self.write(HIGH)

    def off(self) -> None:
        self.write(LOW)

    def is_high(self) -> bool:
        return self.read() == HIGH

    def is_low(self) -> bool:
        return self.read() == LOW

    def set_trigger(self, trigger: Trigger | str) -> None:
        self._driver.set_trigger(self.number, trigger)

    def set_pull(self, mode: Pull | str) -> None:
        self._driver.set_pull(self.number, mode)

    def wait_for_edge(
        self,
        trigger: Trigger | str,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> bool:
        return self._driver.wait_for_edge(
            self.number, trigger, cancel=cancel, timeout=timeout
        )

    def release(self) -> None:
        self._driver.release(self.number)

    def __enter__(self) -> GpioPin:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()
