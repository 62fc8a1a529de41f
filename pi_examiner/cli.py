#!/usr/bin/env python3
"""
compute-pi: approximate π with one algorithm and check it against reference digits.

    compute-pi BRENT_SALAMIN 10 2000 --print_steps
    compute-pi 6 5 100 -pce
    compute-pi gauss-legendre 20 1K --all_digits
"""

from __future__ import annotations

import os
import sys
import time
from collections import Counter
from dataclasses import dataclass
from typing import Tuple

from .accuracy import compare_digits
from .algorithms import RunFlags
from .context import PrecisionContext
from .reference import load_reference, parse_count
from .registry import Algorithm, resolve, run_algorithm

HELP_ARGS = ("help", "--help", "-h")

# long flag -> short letter
FLAGS = {
    "--print_steps": "p",
    "--compare_values": "c",
    "--all_digits": "a",
    "--estimate_memory_usage": "e",
}
REFERENCE_ARGS = ("--reference", "-r")


def usage(prog: str = "compute-pi") -> str:
    lines = [
        f"usage: {prog} {{1|2|3|4|5|6|7}} <iterations> <precision> [options]",
        "",
        "1st argument details:",
        "Pass a number to select from the following algorithms:",
    ]
    lines += [f"{algorithm.code} - {algorithm.title}" for algorithm in Algorithm]
    lines += [
        "(Or, pass the name of the algorithm, i.e. NEWTON.)",
        "",
        "2nd argument details:",
        "<number> - The number of iterations to run (e.g. 100, 1K, 1e6).",
        "",
        "3rd argument details:",
        "<number> - The precision (significant digits) to use in calculations.",
        "",
        "Optional argument(s) details:",
        "--all_digits (-a) - Output the approximation to the fully calculated precision.",
        "                    (Default behavior is to print only the accurate digits.)",
        "--print_steps (-p) - Print the approximation at each iteration of the algorithm.",
        "--compare_values (-c) - Compare the current and previous approximations,",
        "                        and terminate calculations early if they are equivalent.",
        "--estimate_memory_usage (-e) - Print an estimation of memory consumption afterwards.",
        "--reference (-r) <file> - Digits of pi to check against.",
        "                          (Default is pi1000000.txt if present, else computed.)",
        "",
    ]
    return "\n".join(lines) + "\n"


@dataclass
class Arguments:
    algorithm: Algorithm
    iterations: int
    precision: int
    flags: RunFlags
    reference: str | None = None


def parse_count_arg(position: str, spec: str) -> int:
    try:
        return parse_count(spec)
    except ValueError as e:
        raise ValueError(
            f"{position} argument {spec!r} is invalid; must be a positive integer. ({e})"
        ) from None


def parse_flags(args: list[str]) -> Tuple[RunFlags, str | None]:
    """
    Parse the optional arguments following the three required ones.

    Short flags may be combined ("-pcae"). Each flag may be given once.
    """
    seen: Counter[str] = Counter()
    reference: str | None = None

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in FLAGS:
            seen[FLAGS[arg]] += 1
        elif arg in REFERENCE_ARGS:
            if i + 1 >= len(args):
                raise ValueError(f"Flag {arg!r} requires a value")
            seen["r"] += 1
            reference = args[i + 1]
            i += 1
        elif (
            arg.startswith("-")
            and 2 <= len(arg) <= 5
            and all(ch in "pcae" for ch in arg[1:])
        ):
            seen.update(arg[1:])
        else:
            raise ValueError(f"unknown argument {arg!r}")
        i += 1

    if any(count > 1 for count in seen.values()):
        raise ValueError("duplicate arguments found. Please only pass each argument once.")

    flags = RunFlags(
        print_steps="p" in seen,
        compare_values="c" in seen,
        all_digits="a" in seen,
        estimate_memory_usage="e" in seen,
    )
    return flags, reference


def parse_args(args: list[str]) -> Arguments:
    """Parse arguments (program name excluded). Raises ValueError."""
    if len(args) < 3:
        raise ValueError("missing required arguments.")

    iterations = parse_count_arg("2nd", args[1])
    precision = parse_count_arg("3rd", args[2])
    PrecisionContext(precision)
    algorithm = resolve(args[0])
    flags, reference = parse_flags(args[3:])
    return Arguments(algorithm, iterations, precision, flags, reference)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv
    prog = os.path.basename(argv[0]) if argv else "compute-pi"
    args = argv[1:]

    if args and args[0] in HELP_ARGS:
        sys.stdout.write(usage(prog))
        return 0

    try:
        options = parse_args(args)
    except ValueError as e:
        sys.stderr.write(f"Error: {e}\n\n")
        sys.stderr.write(usage(prog))
        return 1

    start = time.perf_counter()
    result = run_algorithm(
        options.algorithm,
        options.iterations,
        options.precision,
        options.flags,
        out=sys.stdout,
    )
    elapsed = time.perf_counter() - start
    print(f"Elapsed time: {elapsed:.3f} seconds")

    reference = load_reference(options.precision, options.reference)
    print(compare_digits(result.approximation, reference, options.flags.all_digits))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
