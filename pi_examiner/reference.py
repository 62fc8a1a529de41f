"""
Reference digits of π to check approximations against.

- read_reference_digits() reads a flat digit file such as pi1000000.txt
  ("3.14159..." with no other formatting).
- compute_pi_digits() produces the same text with Chudnovsky + binary
  splitting on gmpy2 integers, for when no file is at hand.
"""

from __future__ import annotations

import os
import sys
from typing import Tuple

import gmpy2
from gmpy2 import mpz

DEFAULT_REFERENCE_FILE = "pi1000000.txt"


# =========================
# Count specification parser
# =========================


def parse_count(spec: str) -> int:
    """
    Parse a positive count like:
      "123", "1K", "10M", "2g", "132876K", "1e6", "3E7"

    Suffixes (case-insensitive):
      K = 1_000 (10^3)
      M = 1_000_000 (10^6)
      G = 1_000_000_000 (10^9)
      T = 1_000_000_000_000 (10^12)

    Scientific notation:
      "<int>e<int>", e.g. "1e6".

    Raises ValueError on invalid input.
    """
    s = spec.strip()
    if not s:
        raise ValueError("Empty count")

    # 1) Scientific notation: "<int>e<int>" or "<int>E<int>"
    mantissa_str, sep, exp_str = s.replace("E", "e").partition("e")
    if sep:
        if not mantissa_str or not exp_str:
            raise ValueError(f"Invalid scientific notation: {spec!r}")
        try:
            mantissa = int(mantissa_str)
            exp = int(exp_str)
        except ValueError:
            raise ValueError(f"Invalid scientific notation: {spec!r}") from None
        if exp < 0:
            raise ValueError(f"Negative exponent not supported in {spec!r}")
        value = mantissa * (10 ** exp)
        if value <= 0:
            raise ValueError(f"Must be a positive integer: {spec!r}")
        return value

    # 2) Suffix-based notation: K, M, G, T
    multiplier = _SUFFIXES.get(s[-1].upper(), 1)
    if multiplier != 1:
        s = s[:-1].strip()
        if not s:
            raise ValueError(f"Missing number before suffix in {spec!r}")

    try:
        base = int(s)
    except ValueError:
        raise ValueError(f"Must be a positive integer: {spec!r}") from None
    if base <= 0:
        raise ValueError(f"Must be a positive integer: {spec!r}")

    return base * multiplier


_SUFFIXES = {
    "K": 1_000,
    "M": 1_000_000,
    "G": 1_000_000_000,
    "T": 1_000_000_000_000,
}


# =========================
# Chudnovsky binary split
# =========================

# C^3 / 24 with C = 640320
_C3_OVER_24 = mpz("10939058860032000")


def binary_split(a: int, b: int) -> Tuple[mpz, mpz, mpz]:
    """
    Binary splitting for the Chudnovsky series.

    Compute P(a, b), Q(a, b), T(a, b) such that:
      π = (Q(0, N) * 426880 * sqrt(10005)) / T(0, N)
    """
    if b - a == 1:
        if a == 0:
            return mpz(1), mpz(1), mpz(13591409)

        k = mpz(a)

        # P_k = (6k - 5)(2k - 1)(6k - 1)
        P = (6 * k - 5) * (2 * k - 1) * (6 * k - 1)

        # Q_k = k^3 * C^3 / 24
        Q = k * k * k * _C3_OVER_24

        # T_k = (-1)^k * (13591409 + 545140134 k) * P_k
        T = (545140134 * k + 13591409) * P
        if a % 2 == 1:
            T = -T

        return P, Q, T

    m = (a + b) // 2
    P1, Q1, T1 = binary_split(a, m)
    P2, Q2, T2 = binary_split(m, b)

    # T(a, b) = Q(m, b) * T(a, m) + P(a, m) * T(m, b)
    return P1 * P2, Q1 * Q2, Q2 * T1 + P1 * T2


def compute_pi_digits(digits: int) -> str:
    """
    Compute π to `digits` decimal places as a string "3.<digits>".

    Integer-only: sqrt(10005) comes from gmpy2.isqrt with a guard margin and
    the result is floor-truncated, so every returned digit is correct.
    """
    if digits <= 0:
        raise ValueError("digits must be positive")

    # Number of Chudnovsky terms (~14 digits per term)
    terms = digits // 14 + 1
    _P, Q, T = binary_split(0, terms)

    margin = 10
    p = digits + margin

    # S = floor(sqrt(10005) * 10^p)
    S = gmpy2.isqrt(10005 * mpz(10) ** (2 * p))

    # floor(pi * 10^digits) = (Q * 426880 * S) // (T * 10^(p - digits))
    pi_scaled = (Q * 426880 * S) // (T * mpz(10) ** (p - digits))

    # gmpy2.digits avoids Python's int->str length limit
    s = gmpy2.digits(pi_scaled, 10)
    if len(s) < digits + 1:
        s = s.rjust(digits + 1, "0")
    return f"{s[0]}.{s[1 : 1 + digits]}"


# =========================
# Reference loading
# =========================


def read_reference_digits(path: str, count: int) -> str:
    """Read at most `count` characters from the start of a digit file."""
    with open(path, "r", encoding="ascii") as f:
        return f.read(count)


def load_reference(precision: int, path: str | None = None) -> str:
    """
    Return `precision + 1` reference characters ("3." counts as two).

    Reads `path` (or pi1000000.txt in the working directory) when it exists,
    and computes the digits otherwise. A file shorter than requested is used
    as is; comparisons then stop where it ends.
    """
    count = precision + 1
    if path is None and os.path.exists(DEFAULT_REFERENCE_FILE):
        path = DEFAULT_REFERENCE_FILE
    if path is not None:
        if os.path.exists(path):
            return read_reference_digits(path, count)
        sys.stderr.write(
            f"Warning: reference file {path!r} not found; computing digits instead.\n"
        )
    return compute_pi_digits(max(precision, 1))[:count]
