"""Command-line interface for sysfs-gpio.

Every command opens its own driver and releases the pins it used before
exiting.

Usage:
    # Read an input pin
    sysfs-gpio read 17

    # Drive an output pin high
    sysfs-gpio write 27 1

    # Block until a rising edge, giving up after 10 seconds
    sysfs-gpio wait 17 --trigger rising --timeout 10

    # Show the pins named in a config file
    sysfs-gpio --config board.yaml pins
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sysfs_gpio.config import GpioConfig, create_driver, load_config, resolve_sysfs_root
from sysfs_gpio.errors import EdgeTimeoutError, GpioError
from sysfs_gpio.types import Direction, Trigger


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(args: argparse.Namespace) -> GpioConfig:
    if args.config:
        config = load_config(args.config)
    else:
        config = GpioConfig(sysfs_root=resolve_sysfs_root())
    if args.root:
        config = GpioConfig(
            sysfs_root=Path(args.root),
            poll_interval=config.poll_interval,
            pins=config.pins,
        )
    return config


def cmd_read(args: argparse.Namespace) -> int:
    """Read a pin level."""
    with create_driver(_load(args)) as gpio:
        gpio.set_direction(args.pin, Direction.IN)
        print(gpio.read(args.pin))
    return 0


def cmd_write(args: argparse.Namespace) -> int:
    """Drive a pin to a level."""
    with create_driver(_load(args)) as gpio:
        gpio.set_direction(args.pin, Direction.OUT)
        gpio.write(args.pin, args.value)
    return 0


def cmd_wait(args: argparse.Namespace) -> int:
    """Block until an edge occurs on a pin."""
    with create_driver(_load(args)) as gpio:
        gpio.set_direction(args.pin, Direction.IN)
        try:
            gpio.wait_for_edge(args.pin, args.trigger, timeout=args.timeout)
        except EdgeTimeoutError as exc:
            print(f"Timeout: {exc}", file=sys.stderr)
            return 2
        print(gpio.read(args.pin))
    return 0


def cmd_pins(args: argparse.Namespace) -> int:
    """Show the configured pin layout."""
    config = _load(args)
    print(f"Sysfs root: {config.sysfs_root}")
    if not config.pins:
        print("No pins configured")
        return 0
    for pin in config.pins:
        trigger = pin.trigger.value if pin.trigger else "-"
        initial = "-" if pin.initial is None else pin.initial
        print(
            f"  {pin.name}: gpio{pin.number} direction={pin.direction.value} "
            f"trigger={trigger} initial={initial}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysfs-gpio",
        description="Control GPIO pins through the Linux sysfs interface",
    )
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--root", help="Sysfs GPIO directory (default: /sys/class/gpio)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser("read", help="Read a pin level")
    read_parser.add_argument("pin", type=int, help="GPIO number")
    read_parser.set_defaults(func=cmd_read)

    write_parser = subparsers.add_parser("write", help="Drive a pin to a level")
    write_parser.add_argument("pin", type=int, help="GPIO number")
    write_parser.add_argument("value", type=int, choices=[0, 1], help="Level to drive")
    write_parser.set_defaults(func=cmd_write)

    wait_parser = subparsers.add_parser("wait", help="Block until an edge occurs")
    wait_parser.add_argument("pin", type=int, help="GPIO number")
    wait_parser.add_argument(
        "--trigger",
        default=Trigger.BOTH.value,
        choices=[t.value for t in Trigger if t is not Trigger.NONE],
        help="Edge to wait for (default: both)",
    )
    wait_parser.add_argument("--timeout", type=float, help="Seconds to wait before giving up")
    wait_parser.set_defaults(func=cmd_wait)

    pins_parser = subparsers.add_parser("pins", help="Show the configured pin layout")
    pins_parser.set_defaults(func=cmd_pins)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    try:
        result: int = args.func(args)
    except (GpioError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
