"""Raw access to the kernel's sysfs GPIO tree.

The kernel exposes each exported pin as a directory under ``/sys/class/gpio``
with ``direction``, ``value`` and ``edge`` attribute files. Writing a pin
number to ``export`` creates that directory; writing it to ``unexport``
removes it again.

:class:`SysfsGpio` only knows the path layout and how to read and write the
attribute files. It keeps no state, so it can be pointed at any directory
that mimics the layout (e.g. a temporary tree in tests).
"""

from __future__ import annotations

import logging
from pathlib import Path

from sysfs_gpio.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_SYSFS_ROOT = Path("/sys/class/gpio")

DIRECTION_ATTR = "direction"
VALUE_ATTR = "value"
EDGE_ATTR = "edge"


def check_pin(pin: object) -> int:
    """Validate a pin number.

    Raises:
        InvalidArgumentError: If the pin is not a non-negative integer.
    """
    if isinstance(pin, bool) or not isinstance(pin, int) or pin < 0:
        raise InvalidArgumentError(f"pin must be a non-negative integer, got {pin!r}")
    return pin


class SysfsGpio:
    """Path layout and attribute I/O for a sysfs GPIO tree.

    Args:
        root: Directory holding ``export``, ``unexport`` and ``gpio<N>``
            entries. Defaults to ``/sys/class/gpio``.
    """

    def __init__(self, root: str | Path = DEFAULT_SYSFS_ROOT) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Return the sysfs GPIO directory."""
        return self._root

    @property
    def export_path(self) -> Path:
        return self._root / "export"

    @property
    def unexport_path(self) -> Path:
        return self._root / "unexport"

    def pin_dir(self, pin: int) -> Path:
        """Return the per-pin directory ``gpio<N>``."""
        return self._root / f"gpio{pin}"

    def attr_path(self, pin: int, name: str) -> Path:
        return self.pin_dir(pin) / name

    def value_path(self, pin: int) -> Path:
        return self.attr_path(pin, VALUE_ATTR)

    def export(self, pin: int) -> None:
        """Ask the kernel to export a pin.

        Raises:
            OSError: If the write fails (busy, unknown pin, no permission).
        """
        self._write(self.export_path, str(pin))

    def unexport(self, pin: int) -> None:
        """Ask the kernel to unexport a pin.

        Raises:
            OSError: If the write fails.
        """
        self._write(self.unexport_path, str(pin))

    def write_attr(self, pin: int, name: str, value: str | int) -> None:
        """Write a value to one of the pin's attribute files."""
        self._write(self.attr_path(pin, name), str(value))

    def read_attr(self, pin: int, name: str) -> str:
        """Read one of the pin's attribute files, stripped of whitespace."""
        with open(self.attr_path(pin, name), encoding="ascii") as f:
            return f.read().strip()

    def _write(self, path: Path, data: str) -> None:
        logger.debug("sysfs write %s <- %s", path, data)
        with open(path, "w", encoding="ascii") as f:
            f.write(data)
