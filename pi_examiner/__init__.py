"""
Approximate π with seven iterative algorithms on arbitrary-precision decimals
and measure accuracy, running time and memory per iteration.
"""

from .accuracy import AccuracyReport, compare_digits, count_accurate_digits
from .algorithms import (
    RunFlags,
    RunResult,
    brent_salamin_formula,
    chudnovsky_algorithm,
    gregory_leibniz_series,
    newton_method,
    nilakantha_series,
    viete_formula,
    wallis_product,
)
from .context import MAX_PRECISION, PrecisionContext
from .errors import InvalidArgument
from .memory import estimate_memory_usage, format_memory_usage
from .reference import compute_pi_digits, load_reference
from .registry import Algorithm, resolve, run_algorithm

__all__ = [
    "AccuracyReport",
    "Algorithm",
    "InvalidArgument",
    "MAX_PRECISION",
    "PrecisionContext",
    "RunFlags",
    "RunResult",
    "brent_salamin_formula",
    "chudnovsky_algorithm",
    "compare_digits",
    "compute_pi_digits",
    "count_accurate_digits",
    "estimate_memory_usage",
    "format_memory_usage",
    "gregory_leibniz_series",
    "load_reference",
    "newton_method",
    "nilakantha_series",
    "resolve",
    "run_algorithm",
    "viete_formula",
    "wallis_product",
]
