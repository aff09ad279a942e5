"""Unit tests for the driver lifecycle and pin handles."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from fakes import FakeWatcher

from sysfs_gpio.driver import GpioPin, SysfsGpioDriver
from sysfs_gpio.errors import (
    ConflictError,
    InvalidArgumentError,
    ReleaseError,
    UnsupportedOperationError,
)
from sysfs_gpio.sysfs import SysfsGpio
from sysfs_gpio.types import Direction, Trigger
from sysfs_gpio.watcher import EpollValueWatcher


class TestDriver:
    def test_no_pins_reserved_initially(self, driver: SysfsGpioDriver) -> None:
        assert driver.reserved_pins() == frozenset()
        assert not driver.is_reserved(4)

    def test_default_watcher(self, sysfs_root: Path) -> None:
        driver = SysfsGpioDriver(sysfs_root)
        assert driver.sysfs.root == sysfs_root
        assert isinstance(driver.controller.watcher, EpollValueWatcher)

    def test_reserve_conflict(self, driver: SysfsGpioDriver) -> None:
        driver.set_direction(4, "in")
        with pytest.raises(ConflictError):
            driver.reserve(4)

    def test_release(self, driver: SysfsGpioDriver, sysfs_root: Path) -> None:
        driver.set_direction(4, "in")
        driver.release(4)
        assert not driver.is_reserved(4)
        assert (sysfs_root / "unexport").read_text() == "4"
        driver.release(4)

    def test_close_releases_all(self, driver: SysfsGpioDriver) -> None:
        for pin in (4, 5, 6):
            driver.set_direction(pin, "in")
        assert driver.close() is True
        assert driver.reserved_pins() == frozenset()

    def test_release_all_partial_failure(self, driver: SysfsGpioDriver) -> None:
        for pin in (4, 5, 6):
            driver.set_direction(pin, "in")

        real_unexport = SysfsGpio.unexport

        def flaky_unexport(self: SysfsGpio, pin: int) -> None:
            if pin == 5:
                raise PermissionError("denied")
            real_unexport(self, pin)

        with patch.object(SysfsGpio, "unexport", flaky_unexport):
            with pytest.raises(ReleaseError):
                driver.release_all()

        for pin in (4, 5, 6):
            assert not driver.is_reserved(pin)

    def test_context_manager(self, sysfs_root: Path) -> None:
        with SysfsGpioDriver(sysfs_root, watcher=FakeWatcher()) as gpio:
            gpio.set_direction(4, "out")
            gpio.write(4, 1)
        assert not gpio.is_reserved(4)

    def test_context_manager_releases_on_error(self, sysfs_root: Path) -> None:
        with pytest.raises(RuntimeError):
            with SysfsGpioDriver(sysfs_root, watcher=FakeWatcher()) as gpio:
                gpio.set_direction(4, "in")
                raise RuntimeError("boom")
        assert gpio.reserved_pins() == frozenset()
        assert (sysfs_root / "unexport").read_text() == "4"


class TestOpenPin:
    def test_returns_handle(self, driver: SysfsGpioDriver, sysfs_root: Path) -> None:
        pin = driver.open_pin(4, "in", trigger="both")
        assert isinstance(pin, GpioPin)
        assert pin.number == 4
        assert pin.reserved
        assert pin.direction is Direction.IN
        assert pin.trigger is Trigger.BOTH

    def test_initial_level(self, driver: SysfsGpioDriver, sysfs_root: Path) -> None:
        driver.open_pin(5, Direction.OUT, initial=1)
        assert (sysfs_root / "gpio5" / "value").read_text() == "1"

    def test_second_handle_conflicts(self, driver: SysfsGpioDriver) -> None:
        driver.open_pin(4, "in")
        with pytest.raises(ConflictError):
            driver.open_pin(4, "out")

    def test_invalid_direction_releases(self, driver: SysfsGpioDriver) -> None:
        with pytest.raises(InvalidArgumentError):
            driver.open_pin(4, "sideways")
        assert not driver.is_reserved(4)

    def test_direction_write_failure_releases(
        self, driver: SysfsGpioDriver, sysfs_root: Path
    ) -> None:
        with pytest.raises(FileNotFoundError):
            driver.open_pin(99, "in")
        assert not driver.is_reserved(99)
        assert (sysfs_root / "unexport").read_text() == "99"

    def test_conflict_keeps_existing_reservation(self, driver: SysfsGpioDriver) -> None:
        driver.set_direction(4, "in")
        with pytest.raises(ConflictError):
            driver.open_pin(4, "in")
        assert driver.is_reserved(4)

    def test_invalid_initial_reserves_nothing(self, driver: SysfsGpioDriver) -> None:
        with pytest.raises(InvalidArgumentError):
            driver.open_pin(4, "out", initial=7)
        assert not driver.is_reserved(4)


class TestGpioPin:
    def test_read_write(self, driver: SysfsGpioDriver) -> None:
        pin = driver.open_pin(4, "out")
        pin.on()
        assert pin.read() == 1
        assert pin.is_high()
        pin.off()
        assert pin.is_low()
        pin.write(1)
        assert pin.read() == 1

    def test_wait_for_edge(self, driver: SysfsGpioDriver, fake_watcher: FakeWatcher) -> None:
        pin = driver.open_pin(4, "in")
        fake_watcher.emit(1)
        assert pin.wait_for_edge("rising") is True

    def test_set_trigger(self, driver: SysfsGpioDriver) -> None:
        pin = driver.open_pin(4, "in")
        pin.set_trigger("falling")
        assert pin.trigger is Trigger.FALLING

    def test_set_pull(self, driver: SysfsGpioDriver) -> None:
        pin = driver.open_pin(4, "in")
        pin.set_pull("off")
        with pytest.raises(UnsupportedOperationError):
            pin.set_pull("up")

    def test_context_manager(self, driver: SysfsGpioDriver) -> None:
        with driver.open_pin(4, "in") as pin:
            assert pin.reserved
        assert not driver.is_reserved(4)

    def test_repr(self, driver: SysfsGpioDriver) -> None:
        pin = driver.open_pin(4, "in")
        assert repr(pin) == "GpioPin(4, reserved=True)"
