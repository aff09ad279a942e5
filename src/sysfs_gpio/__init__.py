"""GPIO control through the Linux sysfs interface.

This package reserves GPIO pins by exporting them under ``/sys/class/gpio``,
configures their direction and edge trigger, reads and writes their level,
and blocks until a requested transition occurs. The main components are:

Modules:
    driver: SysfsGpioDriver, the object applications hold, and GpioPin handles.
    registry: Reservation bookkeeping (export/unexport).
    controller: Direction, level and trigger operations plus edge waits.
    watcher: epoll-based change notification on value files.
    config: YAML pin layout loading.

Example:
    Wait for a button press on GPIO 17::

        from sysfs_gpio import SysfsGpioDriver

        with SysfsGpioDriver() as gpio:
            gpio.set_direction(17, "in")
            gpio.wait_for_edge(17, "falling")

Note:
    The sysfs GPIO interface has no pull-up/pull-down control; only
    ``set_pull(pin, "off")`` is accepted.
"""

from sysfs_gpio.config import (
    GpioConfig,
    PinConfig,
    create_driver,
    load_config,
    open_configured_pins,
    resolve_sysfs_root,
)
from sysfs_gpio.controller import PinController, edge_satisfied
from sysfs_gpio.driver import GpioPin, SysfsGpioDriver
from sysfs_gpio.errors import (
    ConflictError,
    EdgeTimeoutError,
    GpioError,
    InvalidArgumentError,
    NotReservedError,
    ReleaseError,
    UnsupportedOperationError,
    WaitCancelledError,
)
from sysfs_gpio.registry import PinRegistry
from sysfs_gpio.sysfs import DEFAULT_SYSFS_ROOT, SysfsGpio
from sysfs_gpio.types import HIGH, LOW, Direction, Pull, Trigger
from sysfs_gpio.watcher import EpollValueWatcher, ValueWatcher

__all__ = [
    # Driver
    "SysfsGpioDriver",
    "GpioPin",
    "PinRegistry",
    "PinController",
    "edge_satisfied",
    "SysfsGpio",
    "DEFAULT_SYSFS_ROOT",
    # Watchers
    "ValueWatcher",
    "EpollValueWatcher",
    # Types
    "Direction",
    "Trigger",
    "Pull",
    "LOW",
    "HIGH",
    # Config
    "GpioConfig",
    "PinConfig",
    "load_config",
    "create_driver",
    "open_configured_pins",
    "resolve_sysfs_root",
    # Errors
    "GpioError",
    "InvalidArgumentError",
    "NotReservedError",
    "ConflictError",
    "UnsupportedOperationError",
    "ReleaseError",
    "WaitCancelledError",
    "EdgeTimeoutError",
]
