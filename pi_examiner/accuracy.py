"""
Compare an approximation of π against reference digits.

The decimal point counts as a matched position while walking the strings and
is subtracted from the result, so "3.14" against "3.1415" is 3 digits.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


MARKER = "^ (last accurate digit)"


def count_accurate_digits(approximation: str, reference: str) -> int:
    """
    Count the leading characters shared by `approximation` and `reference`,
    minus one for the decimal point. Never negative.

    Stops at the first mismatch or at the end of the shorter string, so a short
    reference yields the number of digits it could verify.
    """
    matched = 0
    for approx_char, check_char in zip(approximation, reference):
        if approx_char != check_char:
            break
        matched += 1
    return max(matched - 1, 0)


@dataclass
class AccuracyReport:
    accurate_digits: int
    approximation: str
    all_digits: bool = False

    def lines(self) -> list[str]:
        out = [
            "",
            f"Approximation accurate to {self.accurate_digits} digits:",
            self.approximation,
        ]
        if self.all_digits:
            # The '.' makes up for the leading "3", so N spaces land on digit N.
            out.append(" " * self.accurate_digits + MARKER)
        out.append("")
        return out

    def __str__(self) -> str:
        return "\n".join(self.lines())


def compare_digits(
    approximation: Decimal | str,
    reference: str,
    all_digits: bool = False,
) -> AccuracyReport:
    """
    Build the accuracy report for `approximation`.

    Without `all_digits` the approximation is cut down to its accurate prefix
    (decimal point included).
    """
    text = str(approximation)
    accurate = count_accurate_digits(text, reference)
    if not all_digits:
        text = text[: accurate + 1]
    return AccuracyReport(accurate, text, all_digits)
