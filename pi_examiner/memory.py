"""
Rough memory estimates for the numbers an algorithm keeps alive.

Each value is measured as the byte length of the minimal two's-complement
encoding of its unscaled integer (the digits of a Decimal with the decimal
point removed). The estimate is only meant for comparing algorithms with
each other, not for measuring interpreter overhead.
"""

from __future__ import annotations

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Context, Decimal

from gmpy2 import mpz


def unscaled_value(value) -> mpz:
    """Return the unscaled integer of a Decimal (or the value itself for ints)."""
    if isinstance(value, Decimal):
        sign, digits, _exponent = value.as_tuple()
        if not digits:
            return mpz(0)
        # mpz parses arbitrarily long digit strings (no int->str limit).
        magnitude = mpz("".join(map(str, digits)))
        return -magnitude if sign else magnitude
    return mpz(value)


def byte_length(value) -> int:
    """Bytes needed for `value` in two's complement, sign bit included."""
    n = unscaled_value(value)
    if n < 0:
        n = -n - 1
    return n.bit_length() // 8 + 1


def estimate_memory_usage(*values) -> int:
    """Sum the byte lengths of `values`, skipping the ones that are None."""
    return sum(byte_length(value) for value in values if value is not None)


def format_memory_usage(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.3f} KB"


def format_scientific(value, scale: int = 2) -> str:
    """
    Format a (possibly huge) number as "1.23 * 10 ^ 45".

    The mantissa is rounded half-up to `scale` fraction digits.
    """
    context = Context(prec=scale + 1, rounding=ROUND_HALF_UP, Emax=MAX_EMAX, Emin=MIN_EMIN)
    if not isinstance(value, Decimal):
        value = Decimal(int(value))
    rounded = context.plus(value)
    if not rounded:
        return f"{0:.{scale}f} * 10 ^ 0"
    exponent = rounded.adjusted()
    mantissa = rounded.scaleb(-exponent, context)
    return f"{mantissa:.{scale}f} * 10 ^ {exponent}"
