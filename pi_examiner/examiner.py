#!/usr/bin/env python3
"""
pi-examiner: compare algorithms iteration by iteration.

Runs each requested algorithm with steps, early termination and memory
estimation enabled, then scores every iteration's approximation against the
reference digits and prints the accurate digit counts.

    pi-examiner 1,2,3,4,5,6,7 10 100 --print_table
    pi-examiner gregory-leibniz,brent-salamin 10 2000
"""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence, TextIO, Tuple

from .accuracy import count_accurate_digits
from .algorithms import RunFlags, RunResult
from .context import PrecisionContext
from .reference import load_reference, parse_count
from .registry import Algorithm, resolve

HELP_ARGS = ("help", "--help", "-h")
REFERENCE_ARGS = ("--reference", "-r")
PRINT_TABLE_ARGS = ("--print_table", "-p")

EXAMINE_FLAGS = RunFlags(print_steps=True, compare_values=True, estimate_memory_usage=True)
EXAMINE_OPTIONS = "--print_steps --compare_values --estimate_memory_usage"


def usage(prog: str = "pi-examiner") -> str:
    lines = [
        f"usage: {prog} <algorithms> <iterations> <precision> [options]",
        "Runs every algorithm, then reports the accurate digits of each iteration.",
        "",
        "1st argument details:",
        "Pass a comma-delimited list of numbers (or algorithm names) from the following:",
    ]
    lines += [f"{algorithm.code} - {algorithm.title}" for algorithm in Algorithm]
    lines += [
        "",
        "2nd argument details:",
        "<number> - The number of iterations to run.",
        "",
        "3rd argument details:",
        "<number> - The precision to use in calculations.",
        "",
        "Optional arguments:",
        "--print_table (-p) - Print the analysis formatted in a table.",
        "                     (Default behavior prints rows in a key:value format.)",
        "--reference (-r) <file> - Digits of pi to check against.",
        "",
    ]
    return "\n".join(lines) + "\n"


@dataclass
class AlgorithmRun:
    algorithm: Algorithm
    result: RunResult
    seconds: float
    approximations: list[str] = field(default_factory=list)
    accuracy: list[int] = field(default_factory=list)

    def progress_line(self) -> str:
        result = self.result
        return (
            f"{self.algorithm.name:<15} {result.iterations} {result.precision} "
            f"{EXAMINE_OPTIONS} {self.seconds:10.3f} seconds {result.memory_usage:>13}"
        )


@dataclass
class Examination:
    iterations: int
    precision: int
    runs: list[AlgorithmRun]

    def table_lines(self) -> list[str]:
        iterations_str = str(self.iterations)
        precision_str = str(self.precision)

        header = "ITERATIONS"
        it_width = max(len(header), len(iterations_str))
        widths = [max(len(run.algorithm.name), len(precision_str)) for run in self.runs]

        cells = [f"{header:>{it_width}}"]
        cells += [f"{run.algorithm.name:>{w}}" for run, w in zip(self.runs, widths)]
        lines = [" ".join(cells)]

        for row in range(self.iterations):
            cells = [f"{row + 1:>{it_width}}"]
            cells += [f"{run.accuracy[row]:>{w}}" for run, w in zip(self.runs, widths)]
            lines.append(" ".join(cells))
        return lines

    def key_value_lines(self) -> list[str]:
        it_width = len(str(self.iterations))
        acc_width = len(str(self.precision))
        lines = []
        for row in range(self.iterations):
            parts = [f"ITERATIONS:{row + 1:<{it_width}}"]
            parts += [
                f"{run.algorithm.name}:{run.accuracy[row]:<{acc_width}}" for run in self.runs
            ]
            lines.append(" ".join(parts).rstrip())
        return lines


def carry_forward(steps: Sequence[Tuple[int, Decimal]], rows: int) -> list[str]:
    """
    One approximation string per iteration 1..rows. Iterations skipped by
    early termination repeat the last computed approximation.
    """
    by_index = {index: str(value) for index, value in steps}
    approximations = []
    last = ""
    for row in range(1, rows + 1):
        last = by_index.get(row, last)
        approximations.append(last)
    return approximations


def examine(
    algorithms: Iterable,
    iterations: int,
    precision: int,
    reference: str,
    out: TextIO | None = None,
) -> Examination:
    """
    Run `algorithms` (codes, names or Algorithm members) and score each
    iteration against `reference`.
    """
    resolved = [resolve(identifier) for identifier in algorithms]
    runs = []
    for algorithm in resolved:
        start = time.perf_counter()
        result = algorithm.engine(iterations, precision, EXAMINE_FLAGS)
        seconds = time.perf_counter() - start

        approximations = carry_forward(result.steps, iterations)
        accuracy = [count_accurate_digits(a, reference) for a in approximations]
        run = AlgorithmRun(algorithm, result, seconds, approximations, accuracy)
        if out is not None:
            out.write(run.progress_line() + "\n")
        runs.append(run)
    return Examination(iterations, precision, runs)


@dataclass
class Arguments:
    algorithms: list[Algorithm]
    iterations: int
    precision: int
    print_table: bool = False
    reference: str | None = None


def parse_args(args: list[str]) -> Arguments:
    """Parse arguments (program name excluded). Raises ValueError."""
    if len(args) < 3:
        raise ValueError("missing required arguments.")

    algorithms = [resolve(name) for name in args[0].split(",") if name.strip()]
    if not algorithms:
        raise ValueError("no algorithms given.")

    try:
        iterations = parse_count(args[1])
    except ValueError as e:
        raise ValueError(f"2nd argument {args[1]!r} is invalid; {e}") from None
    try:
        precision = parse_count(args[2])
    except ValueError as e:
        raise ValueError(f"3rd argument {args[2]!r} is invalid; {e}") from None
    PrecisionContext(precision)

    print_table = 0
    reference: str | None = None
    rest = args[3:]
    i = 0
    while i < len(rest):
        arg = rest[i]
        if arg in PRINT_TABLE_ARGS:
            print_table += 1
        elif arg in REFERENCE_ARGS:
            if i + 1 >= len(rest):
                raise ValueError(f"Flag {arg!r} requires a value")
            if reference is not None:
                raise ValueError("duplicate arguments found. Please only pass each argument once.")
            reference = rest[i + 1]
            i += 1
        else:
            raise ValueError(f"unknown argument {arg!r}")
        i += 1
    if print_table > 1:
        raise ValueError("duplicate arguments found. Please only pass each argument once.")

    return Arguments(algorithms, iterations, precision, bool(print_table), reference)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv
    prog = os.path.basename(argv[0]) if argv else "pi-examiner"
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

    reference = load_reference(options.precision, options.reference)

    print("Testing algorithms:")
    print()
    examination = examine(
        options.algorithms,
        options.iterations,
        options.precision,
        reference,
        out=sys.stdout,
    )
    print()

    if options.print_table:
        lines = examination.table_lines()
    else:
        lines = examination.key_value_lines()
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
