"""Shared fixtures for sysfs-gpio unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FakeWatcher, make_sysfs_tree

from sysfs_gpio.driver import SysfsGpioDriver


@pytest.fixture
def sysfs_root(tmp_path: Path) -> Path:
    """Fake sysfs GPIO tree with pins 4, 5 and 6."""
    return make_sysfs_tree(tmp_path / "gpio")


@pytest.fixture
def fake_watcher() -> FakeWatcher:
    return FakeWatcher()


@pytest.fixture
def driver(sysfs_root: Path, fake_watcher: FakeWatcher) -> SysfsGpioDriver:
    return SysfsGpioDriver(sysfs_root, watcher=fake_watcher)
