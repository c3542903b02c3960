# File: src/mstair/pp/demo.py
"""
Demonstration of the pretty-printer on standard types, references and inline content.

Usage:
    python -m mstair.pp [--print-types {default,always,never}] [--line-prefix PREFIX]
"""

from __future__ import annotations

import argparse
import ctypes
import datetime
import decimal
import fractions
import math
import re
import sys
import threading
from dataclasses import dataclass, field
from multiprocessing.sharedctypes import Synchronized
from typing import IO, Any

from mstair.pp.xprint.model import PrintTypes
from mstair.pp.xprint.printer import Printer


__all__ = ["main", "parse_args"]


@dataclass(eq=False)
class Foo:
    foo: Foo | None = None
    foos: list[Foo] = field(default_factory=list)
    bar: Bar | None = None


@dataclass(eq=False)
class Bar:
    foo: Foo | None = None


@dataclass
class Point:
    X: int
    Y: int
    Z: int


@dataclass
class Complex:
    points: list[Point]


def standard_types() -> dict[str, Any]:
    return {
        "integer": 42,
        "float": math.e,
        "string": "Hello world!\n",
        "timestamp": datetime.datetime.now(datetime.UTC),
        "duration": datetime.timedelta(hours=3, minutes=15, seconds=42),
        "regexp": re.compile(r"(?i)^hell(o+)$"),
        "bignums": [
            -8789765579753643555083504787829125689141207431643136,
            decimal.Decimal("3.14159265358979323846264338327950288"),
            fractions.Fraction(248311, 179),
        ],
        "shared-value": Synchronized(ctypes.c_int(42), threading.RLock()),
    }


def references() -> Foo:
    foo1 = Foo()
    foo2 = Foo(foo=foo1)
    bar = Bar(foo=foo2)
    foo1.foo = foo1
    foo1.foos = [foo1, foo2]
    foo1.bar = bar
    return foo1


def inline_content() -> Complex:
    return Complex(
        points=[
            Point(1, -20, +300),
            Point(26602, 31921, 19128),
            Point(23902, 3278, 2333527093),
        ]
    )


def print_title(title: str, out: IO[str], first: bool = False) -> None:
    if not first:
        print(file=out)
    print(title, file=out)
    print("-" * len(title), file=out)


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and return command-line arguments."""
    parser = argparse.ArgumentParser(prog="python -m mstair.pp", description="Pretty-printer demonstration.")
    parser.add_argument(
        "--print-types",
        choices=[p.value for p in PrintTypes],
        default=PrintTypes.DEFAULT.value,
        help="Type annotation policy (default: %(default)s)",
    )
    parser.add_argument(
        "--line-prefix",
        default="",
        help="Text prepended to every output line",
    )
    parser.add_argument(
        "--max-inline-column",
        type=int,
        default=80,
        help="Column budget for inline values (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv: list[str], out: IO[str] | None = None) -> int:
    """
    Command-line interface entry point.
    """
    args = parse_args(argv)
    out = out if out is not None else sys.stdout
    printer = Printer(
        sink=out,
        print_types=args.print_types,
        line_prefix=args.line_prefix,
        max_inline_column=args.max_inline_column,
    )

    print_title("STANDARD TYPES", out, first=True)
    printer.print(standard_types())

    print_title("REFERENCES", out)
    printer.print(references())

    print_title("INLINE CONTENT", out)
    printer.print(inline_content(), "points: {}", 3)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

# End of file: src/mstair/pp/demo.py
