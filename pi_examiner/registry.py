"""
Map algorithm identifiers to engines.

An identifier is a numeric code "1".."7" or a canonical name. Names are
case-insensitive and hyphens count as underscores, so "brent-salamin",
"BRENT_SALAMIN", "7" and "gauss-legendre" all select the same engine.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, TextIO

from .algorithms import (
    DEFAULT_FLAGS,
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
from .errors import InvalidArgument

Engine = Callable[..., RunResult]


class Algorithm(Enum):
    GREGORY_LEIBNIZ = "1"
    NILAKANTHA = "2"
    NEWTON = "3"
    VIETE = "4"
    WALLIS = "5"
    CHUDNOVSKY = "6"
    BRENT_SALAMIN = "7"

    @property
    def code(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def engine(self) -> Engine:
        return _ENGINES[self]


_TITLES: dict[Algorithm, str] = {
    Algorithm.GREGORY_LEIBNIZ: "Gregory-Leibniz series",
    Algorithm.NILAKANTHA: "Nilakantha series",
    Algorithm.NEWTON: "Newton method",
    Algorithm.VIETE: "Viete formula",
    Algorithm.WALLIS: "Wallis product",
    Algorithm.CHUDNOVSKY: "Chudnovsky algorithm",
    Algorithm.BRENT_SALAMIN: "Brent-Salamin formula (Gauss-Legendre algorithm)",
}

_ENGINES: dict[Algorithm, Engine] = {
    Algorithm.GREGORY_LEIBNIZ: gregory_leibniz_series,
    Algorithm.NILAKANTHA: nilakantha_series,
    Algorithm.NEWTON: newton_method,
    Algorithm.VIETE: viete_formula,
    Algorithm.WALLIS: wallis_product,
    Algorithm.CHUDNOVSKY: chudnovsky_algorithm,
    Algorithm.BRENT_SALAMIN: brent_salamin_formula,
}

ALIASES: dict[str, Algorithm] = {
    "GAUSS_LEGENDRE": Algorithm.BRENT_SALAMIN,
}


def normalize(identifier: str) -> str:
    return identifier.strip().upper().replace("-", "_")


def resolve(identifier) -> Algorithm:
    """
    Return the Algorithm for a code or name.

    Raises InvalidArgument for anything unrecognized.
    """
    if isinstance(identifier, Algorithm):
        return identifier
    key = normalize(str(identifier))
    for algorithm in Algorithm:
        if key in (algorithm.code, algorithm.name):
            return algorithm
    if key in ALIASES:
        return ALIASES[key]
    raise InvalidArgument(f"unknown algorithm {identifier!r}")


def run_algorithm(
    identifier,
    iterations: int,
    precision: int,
    flags: RunFlags = DEFAULT_FLAGS,
    out: TextIO | None = None,
) -> RunResult:
    """Resolve `identifier` and run its engine."""
    return resolve(identifier).engine(iterations, precision, flags, out)
