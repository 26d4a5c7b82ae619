#!/usr/bin/env python3
"""Evaluate a host config file and print the resolved parameter values."""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lv2hostconfig.core.config import setup_logging
from lv2hostconfig.core.store import ConfigurationStore
from lv2hostconfig.errors import HostConfigError
from lv2hostconfig.expression.constants import REFERENCE_VARIABLE
from lv2hostconfig.expression.values import parse_float_literal


def parse_assignment(text: str) -> tuple[str, float | str]:
    """Parse NAME=VALUE; numeric-looking values become floats."""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{text}'")
    number = parse_float_literal(value.strip())
    return name.strip(), number if number is not None else value


def print_plugins(store: ConfigurationStore) -> None:
    """Print resolved values next to their source text."""
    for plugin in store.plugins:
        print(plugin.plugin_uri)
        if not plugin.formatted:
            print("  (no parameters)")
        width = max((len(name) for name in plugin.formatted), default=0)
        for name, text in plugin.formatted.items():
            value = plugin.resolved[name]
            if plugin.is_literal(name):
                print(f"  {name:<{width}} = {value:g}")
            else:
                print(f"  {name:<{width}} = {value:g}  [{text}]")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a host config file")
    parser.add_argument("input", help="Input YAML config file")
    parser.add_argument(
        "--set",
        "-s",
        dest="assignments",
        type=parse_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set an environment variable before evaluating (repeatable)",
    )
    parser.add_argument("--reference", "-r", type=float, help="Override the document's referenceLevel")
    parser.add_argument("--output", "-o", type=str, help="Write the re-serialized document to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "WARNING")

    store = ConfigurationStore()
    try:
        store.load_file(args.input)
        for name, value in args.assignments:
            store.set_variable(name, value)
        if args.reference is not None:
            store.set_variable(REFERENCE_VARIABLE, args.reference)
        store.evaluate()
    except HostConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_plugins(store)

    if args.output:
        try:
            path = store.save_file(args.output)
        except HostConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"\nWrote {path}")


if __name__ == "__main__":
    main()
