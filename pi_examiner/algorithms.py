"""
Seven iterative approximations of π on arbitrary-precision decimals.

Every engine has the same signature:

    engine(iterations, precision, flags=RunFlags(), out=None) -> RunResult

- Exact integer state (fraction accumulators, factorials, the Chudnovsky
  L/X/M/K terms) lives in gmpy2.mpz, so only divisions and square roots are
  rounded.
- Decimal state is rounded to `precision` significant digits, ROUND_HALF_UP.
- Lines (descriptions, steps, memory usage) are collected in the result and,
  when `out` is given, written to it as they are produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Sequence, TextIO, Tuple

from gmpy2 import fac, mpz

from .context import PrecisionContext, check_positive
from .memory import estimate_memory_usage, format_memory_usage, format_scientific


@dataclass(frozen=True)
class RunFlags:
    print_steps: bool = False
    compare_values: bool = False
    all_digits: bool = False
    estimate_memory_usage: bool = False


DEFAULT_FLAGS = RunFlags()


@dataclass
class RunResult:
    """Outcome of one engine call."""

    algorithm: str
    iterations: int
    precision: int
    approximation: Decimal | None = None
    steps: list[Tuple[int, Decimal]] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    iterations_run: int = 0
    converged: bool = False
    memory_bytes: int | None = None

    @property
    def memory_usage(self) -> str | None:
        if self.memory_bytes is None:
            return None
        return format_memory_usage(self.memory_bytes)

    @property
    def step_lines(self) -> list[str]:
        width = len(str(self.iterations))
        return [f"{index:>{width}}: {value}" for index, value in self.steps]


class _Run:
    """Bookkeeping shared by the engines: steps, convergence, output."""

    def __init__(
        self,
        algorithm: str,
        iterations: int,
        precision: int,
        flags: RunFlags,
        out: TextIO | None,
    ) -> None:
        check_positive("iterations", iterations)
        self.precision = PrecisionContext(precision)
        self.flags = flags
        self.out = out
        self.previous: Decimal | None = None
        self.result = RunResult(algorithm, iterations, precision)
        self._width = len(str(iterations))

    def local(self):
        return self.precision.local()

    def emit(self, line: str) -> None:
        self.result.lines.append(line)
        if self.out is not None:
            self.out.write(line + "\n")

    def step(self, index: int, approximate: Callable[[], Decimal]) -> bool:
        """
        Finish iteration `index`. Returns True when the approximation equals
        the previous one and compare_values is set.
        """
        flags = self.flags
        result = self.result
        result.iterations_run = index
        if not (flags.compare_values or flags.print_steps):
            return False

        self.previous = result.approximation
        result.approximation = approximate()
        if flags.print_steps:
            result.steps.append((index, result.approximation))
            self.emit(f"{index:>{self._width}}: {result.approximation}")
        if flags.compare_values and result.approximation == self.previous:
            result.converged = True
            return True
        return False

    def finish(
        self,
        approximate: Callable[[], Decimal],
        live_values: Sequence = (),
        details: Sequence[str] = (),
    ) -> RunResult:
        result = self.result
        if not self.flags.print_steps:
            result.approximation = approximate()
        if self.flags.estimate_memory_usage:
            if details:
                self.emit("")
                for line in details:
                    self.emit(line)
            result.memory_bytes = estimate_memory_usage(
                result.approximation,
                self.previous,
                result.iterations,
                result.iterations_run,
                *live_values,
            )
            self.emit(f"Memory usage: {format_memory_usage(result.memory_bytes)}")
        return result


def _truncate(numerator: mpz, denominator: mpz, places: int) -> str:
    """numerator / denominator truncated to `places` decimal places (positive values)."""
    s = str(numerator * 10**places // denominator)
    if places == 0:
        return s
    s = s.rjust(places + 1, "0")
    return f"{s[:-places]}.{s[-places:]}"


# =========================
# Series
# =========================


def gregory_leibniz_series(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    pi/4 = 1 - 1/3 + 1/5 - 1/7 + 1/9 ...

    See https://en.wikipedia.org/wiki/Leibniz_formula_for_%CF%80

    Terms are merged into a single numerator/denominator pair by cross
    multiplication, so the only rounded operation is the final division.

    When steps are not printed, a line is recorded each time the term index
    reaches 5 * 10^k, showing the estimate truncated to k - 1 places. The
    5 * 10^k rule was found by experiment and is not a proven bound.
    """
    run = _Run("GREGORY_LEIBNIZ", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using the Gregory-Leibniz series:")
    run.emit("pi/4 = 1/1 - 1/3 + 1/5 - 1/7 + 1/9 - 1/11 + 1/13 ...")

    numerator = mpz(1)
    denominator = mpz(1)
    negate = True
    milestone = 1

    def approximate() -> Decimal:
        return run.precision.divide(4 * numerator, denominator)

    with run.local():
        for i in range(1, iterations + 1):
            n = i + 1
            next_denominator = 2 * n - 1
            next_numerator = -denominator if negate else denominator
            numerator = numerator * next_denominator + next_numerator
            denominator = denominator * next_denominator
            negate = not negate

            if not flags.print_steps and n >= 5 * 10**milestone:
                estimate = _truncate(4 * numerator, denominator, milestone - 1)
                run.emit(f"iterations: {n},  result: {estimate}")
                milestone += 1

            if run.step(i, approximate):
                break

        return run.finish(
            approximate,
            live_values=(numerator, denominator),
            details=(
                f"numerator:   {format_scientific(numerator)}",
                f"denominator: {format_scientific(denominator)}",
            ),
        )


def nilakantha_series(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    pi = 3 + 4/(2*3*4) - 4/(4*5*6) + 4/(6*7*8) - 4/(8*9*10) ...

    See https://en.wikipedia.org/wiki/Pi#Infinite_series
    """
    run = _Run("NILAKANTHA", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using the Nilakantha series:")
    run.emit("pi = 3 + 4/(2*3*4) - 4/(4*5*6) + 4/(6*7*8) - 4/(8*9*10) ...")

    numerator = mpz(3)
    denominator = mpz(1)
    negate = False

    def approximate() -> Decimal:
        return run.precision.divide(numerator, denominator)

    with run.local():
        for i in range(1, iterations + 1):
            two_i = mpz(2 * i)
            next_denominator = two_i * (two_i + 1) * (two_i + 2)
            next_numerator = -4 * denominator if negate else 4 * denominator
            numerator = numerator * next_denominator + next_numerator
            denominator = denominator * next_denominator
            negate = not negate

            if run.step(i, approximate):
                break

        return run.finish(
            approximate,
            live_values=(numerator, denominator),
            details=(
                f"numerator:   {format_scientific(numerator)}",
                f"denominator: {format_scientific(denominator)}",
            ),
        )


def newton_method(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    Newton's series:

      pi = 3*sqrt(3)/4 + 24 * sum(term(n) for n >= 1)
      term(n) = -(2n-2)! / (2^(4n-2) * ((n-1)!)^2 * (2n-3) * (2n+1))

    Factorials are exact; each term costs one rounded division.
    """
    run = _Run("NEWTON", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using Isaac Newton's method:")
    run.emit("pi = 3*sqrt(3)/4 + 24 * (1/12 - 1/(5*2^5) - 1/(28*2^7) - 1/(72*2^9) ...)")

    numerator = None
    denominator = None

    with run.local():
        first_term = run.precision.divide(3 * run.precision.sqrt(3), 4)
        total = Decimal(0)

        def approximate() -> Decimal:
            return first_term + 24 * total

        for i in range(1, iterations + 1):
            numerator = -fac(2 * i - 2)
            denominator = (
                (mpz(1) << (4 * i - 2)) * fac(i - 1) ** 2 * (2 * i - 3) * (2 * i + 1)
            )
            total += run.precision.divide(numerator, denominator)

            if run.step(i, approximate):
                break

        return run.finish(
            approximate,
            live_values=(first_term, total, numerator, denominator),
        )


# =========================
# Products
# =========================


def viete_formula(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    2/pi = sqrt(2)/2 * sqrt(2 + sqrt(2))/2 * ...

    See https://en.wikipedia.org/wiki/Vi%C3%A8te%27s_formula

    Each factor a/2 is folded in as 2/a: the 2s pile up in an exact numerator
    and the nested roots in the denominator, so no inverse is taken.
    """
    run = _Run("VIETE", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using Viete's formula:")
    run.emit("See https://en.wikipedia.org/wiki/Viète%27s_formula for more details.")

    numerator = mpz(1)

    with run.local():
        a = run.precision.sqrt(2)
        denominator = Decimal(1)

        def approximate() -> Decimal:
            return run.precision.divide(2 * numerator, denominator)

        for i in range(1, iterations + 1):
            numerator = numerator * 2
            denominator *= a

            if run.step(i, approximate):
                break
            a = run.precision.sqrt(2 + a)

        return run.finish(approximate, live_values=(a, numerator, denominator))


def wallis_product(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    pi/2 = (2*2)/(1*3) * (4*4)/(3*5) * (6*6)/(5*7) ...

    See https://en.wikipedia.org/wiki/Wallis_product
    """
    run = _Run("WALLIS", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using the Wallis product:")
    run.emit("See https://en.wikipedia.org/wiki/Wallis_product for more details.")

    numerator = mpz(1)
    denominator = mpz(1)
    next_numerator = None
    next_denominator = None

    def approximate() -> Decimal:
        return run.precision.divide(2 * numerator, denominator)

    with run.local():
        for i in range(1, iterations + 1):
            n = mpz(i)
            next_numerator = 4 * n * n
            next_denominator = (2 * n - 1) * (2 * n + 1)
            numerator = numerator * next_numerator
            denominator = denominator * next_denominator

            if run.step(i, approximate):
                break

        return run.finish(
            approximate,
            live_values=(numerator, denominator, next_numerator, next_denominator),
        )


# =========================
# Fast converging methods
# =========================

# Chudnovsky recurrence constants.
_L_0 = 13591409
_L_STEP = 545140134
_X_FACTOR = -262537412640768000  # -(640320^3)
_K_0 = 6
_K_STEP = 12


def chudnovsky_algorithm(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    Chudnovsky series, term by term (about 14 digits per iteration).

    See https://en.wikipedia.org/wiki/Chudnovsky_algorithm

      L(q+1) = L(q) + 545140134            L(0) = 13591409
      X(q+1) = X(q) * -262537412640768000  X(0) = 1
      M(q+1) = M(q) * (K(q)^3 - 16 K(q)) / (q+1)^3
      K(q+1) = K(q) + 12                   K(0) = 6
      pi = 426880 * sqrt(10005) / sum(M(q) * L(q) / X(q))

    M stays an exact integer; the division by (q+1)^3 always divides evenly.
    """
    run = _Run("CHUDNOVSKY", iterations, precision, flags, out)
    run.emit("Calculating an approximation of pi using the Chudnovsky algorithm:")
    run.emit("See https://en.wikipedia.org/wiki/Chudnovsky_algorithm for more details.")

    l = mpz(_L_0)
    x = mpz(1)
    m = mpz(1)
    k = mpz(_K_0)

    with run.local():
        c = 426880 * run.precision.sqrt(10005)
        total = Decimal(0)

        def approximate() -> Decimal:
            return run.precision.divide(c, total)

        for i in range(1, iterations + 1):
            total += run.precision.divide(m * l, x)

            if run.step(i, approximate):
                break

            l += _L_STEP
            x *= _X_FACTOR
            m = m * (k**3 - 16 * k) // i**3
            k += _K_STEP

        return run.finish(approximate, live_values=(c, l, x, m, k, total))


def brent_salamin_formula(
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """
    Brent-Salamin formula (Gauss-Legendre algorithm); the number of correct
    digits roughly doubles every iteration.

    See https://en.wikipedia.org/wiki/Gauss%E2%80%93Legendre_algorithm

      a(0) = 1, b(0) = 1/sqrt(2), t(0) = 1/4, p(0) = 1
      a(n+1) = (a + b) / 2
      b(n+1) = sqrt(a * b)
      t(n+1) = t - p * (a - a(n+1))^2
      p(n+1) = 2p
      pi ~ (a + b)^2 / 4t

    Iteration n reports the estimate from the state before its update.
    """
    run = _Run("BRENT_SALAMIN", iterations, precision, flags, out)
    run.emit(
        "Calculating an approximation of pi using the Brent-Salamin formula"
        " (or Gauss-Legendre algorithm):"
    )
    run.emit("See https://en.wikipedia.org/wiki/Gauss–Legendre_algorithm for more details.")

    numerator = None
    denominator = None

    def approximate() -> Decimal:
        return run.precision.divide(numerator, denominator)

    with run.local():
        a = Decimal(1)
        b = run.precision.divide(1, run.precision.sqrt(2))
        t = run.precision.divide(1, 4)
        p = Decimal(1)

        for i in range(1, iterations + 1):
            numerator = (a + b) ** 2
            denominator = 4 * t

            if run.step(i, approximate):
                break

            a_next = run.precision.divide(a + b, 2)
            b = run.precision.sqrt(a * b)
            t -= p * (a - a_next) ** 2
            a = a_next
            p *= 2

        return run.finish(
            approximate,
            live_values=(a, b, t, p, numerator, denominator),
        )
