"""YAML configuration for the sysfs GPIO driver.

A configuration file names the pins an application uses and how each one is
opened. The ``gpio`` section tunes the driver itself.

Example YAML configuration:
    gpio:
      sysfs_root: "/sys/class/gpio"
      poll_interval: 0.1

    pins:
      door_sensor:
        number: 17
        direction: in
        trigger: both
      relay:
        number: 27
        direction: out
        initial: 0

The ``SYSFS_GPIO_ROOT`` environment variable, when set, overrides
``gpio.sysfs_root``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sysfs_gpio.driver import GpioPin, SysfsGpioDriver
from sysfs_gpio.errors import InvalidArgumentError
from sysfs_gpio.sysfs import DEFAULT_SYSFS_ROOT
from sysfs_gpio.types import (
    Direction,
    Trigger,
    parse_direction,
    parse_level,
    parse_trigger,
)
from sysfs_gpio.watcher import DEFAULT_POLL_INTERVAL, EpollValueWatcher

logger = logging.getLogger(__name__)

ROOT_ENV_VAR = "SYSFS_GPIO_ROOT"


@dataclass(frozen=True)
class PinConfig:
    """How one named pin is opened.

    Attributes:
        name: Logical name of the pin (e.g., "door_sensor").
        number: Kernel GPIO number.
        direction: Input or output.
        trigger: Edge trigger to configure, or None to leave it alone.
        initial: Initial level for an output pin, or None.
    """

    name: str
    number: int
    direction: Direction
    trigger: Trigger | None = None
    initial: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if isinstance(self.number, bool) or not isinstance(self.number, int) or self.number < 0:
            raise ValueError(f"Pin '{self.name}' number must be a non-negative integer")
        if self.initial is not None and self.direction is not Direction.OUT:
            raise ValueError(f"Pin '{self.name}' initial is only valid for direction 'out'")


@dataclass(frozen=True)
class GpioConfig:
    """Driver configuration.

    Attributes:
        sysfs_root: Sysfs GPIO directory.
        poll_interval: Seconds between cancel/deadline checks in edge waits.
        pins: Named pin configurations.
    """

    sysfs_root: Path = DEFAULT_SYSFS_ROOT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    pins: tuple[PinConfig, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.poll_interval <= 0:
            raise ValueError(f"gpio.poll_interval must be positive, got {self.poll_interval}")
        seen_numbers: set[int] = set()
        seen_names: set[str] = set()
        for pin in self.pins:
            if pin.number in seen_numbers:
                raise ValueError(f"duplicate pin number: {pin.number}")
            if pin.name in seen_names:
                raise ValueError(f"duplicate pin name: {pin.name}")
            seen_numbers.add(pin.number)
            seen_names.add(pin.name)

    def get_pin(self, name: str) -> PinConfig | None:
        """Find a pin configuration by name.

        Args:
            name: Logical pin name.

        Returns:
            PinConfig if found, None otherwise.
        """
        for pin in self.pins:
            if pin.name == name:
                return pin
        return None


def resolve_sysfs_root(configured: str | Path | None = None) -> Path:
    """Return the sysfs GPIO directory to use.

    ``SYSFS_GPIO_ROOT`` wins when set, then ``configured``, then the
    kernel default.
    """
    return Path(os.environ.get(ROOT_ENV_VAR) or configured or DEFAULT_SYSFS_ROOT)


def _parse_pin(name: str, data: Any) -> PinConfig:
    if not isinstance(data, dict):
        raise ValueError(f"Pin '{name}' must be a mapping")

    number = data.get("number")
    if number is None:
        raise ValueError(f"Pin '{name}' missing required field: number")
    if "direction" not in data:
        raise ValueError(f"Pin '{name}' missing required field: direction")

    try:
        direction = parse_direction(data["direction"])
        trigger = parse_trigger(data["trigger"]) if data.get("trigger") is not None else None
        initial = parse_level(data["initial"]) if data.get("initial") is not None else None
    except InvalidArgumentError as exc:
        raise ValueError(f"Pin '{name}': {exc}") from exc

    return PinConfig(
        name=name,
        number=number,
        direction=direction,
        trigger=trigger,
        initial=initial,
    )


def load_config(path: str | Path) -> GpioConfig:
    """Load driver configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config is invalid or missing required fields.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping")

    gpio_section = data.get("gpio") or {}
    if not isinstance(gpio_section, dict):
        raise ValueError("gpio must be a mapping")

    sysfs_root = resolve_sysfs_root(gpio_section.get("sysfs_root"))
    poll_interval = float(gpio_section.get("poll_interval", DEFAULT_POLL_INTERVAL))

    pins_data = data.get("pins") or {}
    if not isinstance(pins_data, dict):
        raise ValueError("pins must be a mapping")
    pins = tuple(_parse_pin(name, pin_data) for name, pin_data in pins_data.items())

    logger.debug("Loaded GPIO config from %s (%d pins)", path, len(pins))
    return GpioConfig(sysfs_root=sysfs_root, poll_interval=poll_interval, pins=pins)


def create_driver(config: GpioConfig) -> SysfsGpioDriver:
    """Create a driver for the configured sysfs tree."""
    return SysfsGpioDriver(
        root=config.sysfs_root,
        watcher=EpollValueWatcher(poll_interval=config.poll_interval),
    )


def open_configured_pins(driver: SysfsGpioDriver, config: GpioConfig) -> dict[str, GpioPin]:
    """Open every configured pin.

    If one pin fails to open, the pins opened before it are released and the
    error is re-raised.

    Returns:
        Mapping of pin name to handle.
    """
    opened: dict[str, GpioPin] = {}
    try:
        for pin in config.pins:
            opened[pin.name] = driver.open_pin(
                pin.number, pin.direction, trigger=pin.trigger, initial=pin.initial
            )
    except Exception:
        for handle in opened.values():
            handle.release()
        raise
    logger.info("Opened %d configured GPIO pins", len(opened))
    return opened
