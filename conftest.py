"""Root conftest.py for sysfs-gpio.

Registers the markers used by the test suite, marks tests that rely on
mocking or fake notifiers, and skips hardware tests on hosts without a
sysfs GPIO tree.
"""

from __future__ import annotations

import ast
import inspect
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.nodes import Item


SYSFS_GPIO_ROOT = Path("/sys/class/gpio")


def pytest_configure(config: Config) -> None:
    """Register custom markers.

    Args:
        config: pytest configuration object.
    """
    config.addinivalue_line(
        "markers",
        "uses_mock: Test uses mocking (auto-detected or manually marked)",
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration test requiring a real sysfs GPIO tree",
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow-running test",
    )


class MockDetector(ast.NodeVisitor):
    """AST visitor to detect mock usage in test functions."""

    # Names that indicate mocking
    MOCK_PATTERNS = frozenset({
        "MagicMock",
        "Mock",
        "patch",
        "create_autospec",
        "mocker",
        "FakeWatcher",
    })

    def __init__(self) -> None:
        self.uses_mock = False

    def visit_Call(self, node: ast.Call) -> None:
        """Check function calls for mock usage.

        Args:
            node: Call AST node.
        """
        if isinstance(node.func, ast.Name) and node.func.id in self.MOCK_PATTERNS:
            self.uses_mock = True
        elif isinstance(node.func, ast.Attribute) and node.func.attr in self.MOCK_PATTERNS:
            self.uses_mock = True
        self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        """Check function parameters for mock fixtures.

        Args:
            node: FunctionDef AST node.
        """
        for arg in node.args.args:
            if "mock" in arg.arg.lower() or "fake" in arg.arg.lower():
                self.uses_mock = True
        self.generic_visit(node)


def _check_test_uses_mock(item: Item) -> bool:
    """Check if a test function uses mocking.

    Args:
        item: pytest test item.

    Returns:
        True if test uses mocking.
    """
    name_lower = item.name.lower()
    if "mock" in name_lower or "fake" in name_lower:
        return True

    obj = getattr(item, "obj", None)
    if obj is None:
        return False
    try:
        tree = ast.parse(textwrap.dedent(inspect.getsource(obj)))
    except (OSError, TypeError, SyntaxError):
        return False
    detector = MockDetector()
    detector.visit(tree)
    return detector.uses_mock


def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Mark mocking tests and skip hardware tests without sysfs GPIO.

    Args:
        config: pytest configuration object.
        items: List of collected test items.
    """
    skip_hw = pytest.mark.skip(reason=f"{SYSFS_GPIO_ROOT} not available")
    has_sysfs = (SYSFS_GPIO_ROOT / "export").exists()

    for item in items:
        if not item.get_closest_marker("uses_mock") and _check_test_uses_mock(item):
            item.add_marker(pytest.mark.uses_mock)
        if item.get_closest_marker("integration") and not has_sysfs:
            item.add_marker(skip_hw)


def pytest_report_header(config: Config) -> list[str]:
    """Add sysfs availability to the pytest header.

    Args:
        config: pytest configuration object.

    Returns:
        List of header lines.
    """
    lines = ["sysfs-gpio test suite"]
    if (SYSFS_GPIO_ROOT / "export").exists():
        lines.append(f"Hardware: {SYSFS_GPIO_ROOT} present")
    return lines
