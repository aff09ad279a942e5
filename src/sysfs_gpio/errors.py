"""Exception types for sysfs-gpio.

All sysfs-gpio exceptions inherit from GpioError, allowing consumers to catch
every driver-specific error with a single except clause. Filesystem failures
(permission denied, missing pin directory, device busy) are not wrapped; they
propagate as the original :class:`OSError`.

Exception hierarchy:
    GpioError (base)
    +-- InvalidArgumentError: Out-of-domain argument (also a ValueError)
    |   +-- NotReservedError: Operation on a pin this driver has not reserved
    +-- ConflictError: Pin already reserved by a live handle
    +-- UnsupportedOperationError: Capability missing on this backend
    +-- ReleaseError: One or more pins failed to unexport
    +-- WaitCancelledError: Edge wait aborted through its cancel event
    +-- EdgeTimeoutError: Edge wait deadline elapsed (also a TimeoutError)
"""

from __future__ import annotations


class GpioError(Exception):
    """Base exception for all sysfs-gpio errors."""


class InvalidArgumentError(GpioError, ValueError):
    """Raised when a caller supplies a value outside an operation's domain.

    Examples are an unknown direction or trigger name, or a level other
    than 0 or 1.
    """


class NotReservedError(InvalidArgumentError):
    """Raised when a pin operation targets a pin that is not reserved.

    Attributes:
        pin: The pin number that was addressed.
    """

    def __init__(self, pin: int) -> None:
        self.pin = pin
        super().__init__(f"Pin {pin} not exported")


class ConflictError(GpioError):
    """Raised when reserving a pin that is already held.

    Attributes:
        pin: The pin number that is already reserved.
    """

    def __init__(self, pin: int) -> None:
        self.pin = pin
        super().__init__(f"pin {pin} is already reserved by another Pin instance")


class UnsupportedOperationError(GpioError, NotImplementedError):
    """Raised for capabilities the sysfs backend cannot provide."""


class ReleaseError(GpioError):
    """Raised by a bulk release when some pins failed to unexport.

    The pins are no longer tracked as reserved regardless of the failure.

    Attributes:
        failures: Mapping of pin number to the error its unexport raised.
    """

    def __init__(self, failures: dict[int, OSError]) -> None:
        self.failures = failures
        details = "; ".join(f"{pin}: {exc}" for pin, exc in sorted(failures.items()))
        super().__init__(f"Failed to unexport {len(failures)} pin(s): {details}")


class WaitCancelledError(GpioError):
    """Raised when an edge wait is aborted through its cancel event."""


class EdgeTimeoutError(GpioError, TimeoutError):
    """Raised when an edge wait does not observe a transition in time."""
