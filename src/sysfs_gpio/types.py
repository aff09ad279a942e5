"""Pin configuration values understood by the sysfs GPIO interface."""

from __future__ import annotations

from enum import Enum

from sysfs_gpio.errors import InvalidArgumentError

# GPIO level constants
LOW = 0
HIGH = 1


class Direction(str, Enum):
    """Pin direction, as written to ``gpio<N>/direction``."""

    IN = "in"
    OUT = "out"


class Trigger(str, Enum):
    """Edge trigger, as written to ``gpio<N>/edge``."""

    NONE = "none"
    RISING = "rising"
    FALLING = "falling"
    BOTH = "both"


class Pull(str, Enum):
    """Pull resistor mode. Only OFF is available through sysfs."""

    OFF = "off"
    UP = "up"
    DOWN = "down"


def parse_direction(direction: Direction | str) -> Direction:
    """Coerce a direction name into a :class:`Direction`.

    Raises:
        InvalidArgumentError: If the value is not ``in`` or ``out``.
    """
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidArgumentError("direction should be 'in' or 'out'") from None


def parse_trigger(trigger: Trigger | str) -> Trigger:
    """Coerce a trigger name into a :class:`Trigger`.

    Raises:
        InvalidArgumentError: If the value is not a known trigger.
    """
    try:
        return Trigger(trigger)
    except ValueError:
        raise InvalidArgumentError(
            "trigger should be 'falling', 'rising', 'both' or 'none'"
        ) from None


def parse_pull(mode: Pull | str) -> Pull:
    """Coerce a pull mode name into a :class:`Pull`.

    Raises:
        InvalidArgumentError: If the value is not a known pull mode.
    """
    try:
        return Pull(mode)
    except ValueError:
        raise InvalidArgumentError("pull should be 'off', 'up' or 'down'") from None


def parse_level(value: object) -> int:
    """Validate a digital level.

    Args:
        value: Level to validate; ``0``/``1`` (``False``/``True`` compare equal).

    Returns:
        LOW or HIGH.

    Raises:
        InvalidArgumentError: If the value is not 0 or 1.
    """
    if isinstance(value, int) and value in (LOW, HIGH):
        return int(value)
    raise InvalidArgumentError("value should be HIGH (1) or LOW (0)")
