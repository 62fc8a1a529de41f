"""
Arbitrary-precision decimal context shared by every algorithm.

All engines round under the same policy (ROUND_HALF_UP) so that results at
equal precision are comparable.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    localcontext,
)

from .errors import InvalidArgument

# Upper bound accepted for the number of significant digits.
MAX_PRECISION = 2**31 - 1


def check_positive(name: str, value: int) -> int:
    """Return `value` if it is a positive int, else raise InvalidArgument."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidArgument(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class PrecisionContext:
    """
    Number of significant digits used for every rounded operation.

    Usage:
        precision = PrecisionContext(50)
        with precision.local():
            third = Decimal(1) / Decimal(3)
    """

    precision: int
    rounding: str = ROUND_HALF_UP

    def __post_init__(self) -> None:
        check_positive("precision", self.precision)
        if self.precision > MAX_PRECISION:
            raise InvalidArgument(
                f"precision must be between 1 and {MAX_PRECISION} (inclusive), "
                f"got {self.precision}"
            )
        if self.rounding != ROUND_HALF_UP:
            raise InvalidArgument("only ROUND_HALF_UP rounding is supported")

    def context(self) -> Context:
        # Default traps stay on: a zero division raises instead of giving Infinity.
        return Context(
            prec=self.precision,
            rounding=self.rounding,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )

    def local(self):
        """Context manager that activates this precision for the current thread."""
        return localcontext(self.context())

    def divide(self, numerator, denominator) -> Decimal:
        """Rounded quotient of two ints, mpz or Decimals."""
        return self.context().divide(_to_decimal(numerator), _to_decimal(denominator))

    def sqrt(self, value) -> Decimal:
        return self.context().sqrt(_to_decimal(value))


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Decimal() does not accept gmpy2.mpz directly; int() is exact.
    return Decimal(int(value))
