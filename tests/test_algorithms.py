import io
from decimal import Decimal

import pytest

from pi_examiner.accuracy import count_accurate_digits
from pi_examiner.algorithms import (
    RunFlags,
    brent_salamin_formula,
    chudnovsky_algorithm,
    gregory_leibniz_series,
    newton_method,
    nilakantha_series,
    viete_formula,
    wallis_product,
)
from pi_examiner.context import PrecisionContext
from pi_examiner.errors import InvalidArgument

ENGINES = [
    gregory_leibniz_series,
    nilakantha_series,
    newton_method,
    viete_formula,
    wallis_product,
    chudnovsky_algorithm,
    brent_salamin_formula,
]

STEPS = RunFlags(print_steps=True)
COMPARE = RunFlags(compare_values=True)

# Accurate digits per iteration at precision 2000.
GREGORY_LEIBNIZ_DIGITS_2000 = [0, 1, 0, 1, 0, 1, 1, 1, 1, 1]
BRENT_SALAMIN_DIGITS_2000 = [0, 3, 8, 19, 41, 84, 171, 345, 694, 1392]


def step_accuracy(result, reference):
    return [count_accurate_digits(str(value), reference) for _, value in result.steps]


@pytest.mark.parametrize("engine", ENGINES)
def test_single_iteration(engine):
    result = engine(1, 50)
    assert isinstance(result.approximation, Decimal)
    assert result.iterations_run == 1
    assert not result.converged
    assert result.memory_bytes is None


@pytest.mark.parametrize("engine", ENGINES)
@pytest.mark.parametrize("iterations, precision", [(0, 10), (-3, 10), (5, 0)])
def test_invalid_configuration(engine, iterations, precision):
    with pytest.raises(InvalidArgument):
        engine(iterations, precision)


@pytest.mark.parametrize(
    "engine, iterations, expected",
    [
        (gregory_leibniz_series, 1, "2.6667"),
        (gregory_leibniz_series, 2, "3.4667"),
        (nilakantha_series, 1, "3.1667"),
        (nilakantha_series, 2, "3.1333"),
        (wallis_product, 1, "2.6667"),
        (wallis_product, 2, "2.8444"),
    ],
)
def test_exact_fraction_values(engine, iterations, expected):
    assert str(engine(iterations, 5).approximation) == expected


def test_step_lines():
    result = gregory_leibniz_series(10, 5, STEPS)
    assert len(result.steps) == 10
    step_lines = [line for line in result.lines if ": " in line]
    assert step_lines[0] == " 1: 2.6667"
    assert step_lines[-1] == "10: 3.2323"
    assert result.step_lines == step_lines


def test_gregory_leibniz_reference_run(pi_reference):
    result = gregory_leibniz_series(10, 2000, STEPS)
    assert step_accuracy(result, pi_reference) == GREGORY_LEIBNIZ_DIGITS_2000


def test_brent_salamin_reference_run(pi_reference):
    result = brent_salamin_formula(10, 2000, STEPS)
    assert step_accuracy(result, pi_reference) == BRENT_SALAMIN_DIGITS_2000


def test_final_value_matches_last_step():
    for engine in ENGINES:
        stepped = engine(4, 30, STEPS)
        plain = engine(4, 30)
        assert stepped.approximation == stepped.steps[-1][1]
        assert plain.approximation == stepped.approximation


def test_wallis_converges_early():
    result = wallis_product(100000, 5, COMPARE)
    assert result.converged
    assert result.iterations_run < 100000


@pytest.mark.parametrize(
    "engine, precision, iterations",
    [
        (gregory_leibniz_series, 3, 10000),
        (nilakantha_series, 6, 10000),
        (newton_method, 20, 1000),
        (viete_formula, 20, 1000),
        (wallis_product, 5, 100000),
        (chudnovsky_algorithm, 50, 100),
        (brent_salamin_formula, 50, 100),
    ],
)
def test_compare_values_stops_on_convergence(engine, precision, iterations):
    result = engine(iterations, precision, COMPARE)
    assert result.converged
    assert result.iterations_run < iterations


def test_no_convergence_is_not_an_error():
    result = brent_salamin_formula(2, 50, COMPARE)
    assert not result.converged
    assert result.iterations_run == 2


def test_converged_run_repeats_last_value():
    result = brent_salamin_formula(100, 50, RunFlags(print_steps=True, compare_values=True))
    assert result.converged
    assert result.steps[-1][1] == result.steps[-2][1]
    assert len(result.steps) == result.iterations_run


@pytest.mark.parametrize("engine", ENGINES)
def test_deterministic(engine):
    first = engine(20, 50).approximation
    second = engine(20, 50).approximation
    assert str(first) == str(second)


def test_divisions_round_to_the_working_precision():
    ctx = PrecisionContext(20)
    assert wallis_product(1, 20).approximation == ctx.divide(8, 3)
    assert viete_formula(1, 20).approximation == ctx.divide(4, ctx.sqrt(2))


# Precisions stay within what each run can reach at its iteration count.
@pytest.mark.parametrize(
    "engine, iterations, precisions",
    [
        (gregory_leibniz_series, 10000, (2, 3, 4, 5, 6)),
        (nilakantha_series, 1000, (3, 5, 7, 9)),
        (newton_method, 100, (10, 20, 40)),
        (viete_formula, 100, (10, 20, 40)),
        (wallis_product, 1000, (2, 3, 4)),
        (chudnovsky_algorithm, 5, (10, 20, 40)),
        (brent_salamin_formula, 6, (20, 50, 100, 200)),
    ],
)
def test_accuracy_never_drops_with_precision(pi_reference, engine, iterations, precisions):
    accuracy = [
        count_accurate_digits(str(engine(iterations, p).approximation), pi_reference)
        for p in precisions
    ]
    assert accuracy == sorted(accuracy)
    assert accuracy[0] < accuracy[-1]


def test_brent_salamin_six_iterations_reach_84_digits(pi_reference):
    result = brent_salamin_formula(6, 200)
    assert count_accurate_digits(str(result.approximation), pi_reference) == 84


# Alternating series are sampled at counts where every estimate lies on the same side of pi.
@pytest.mark.parametrize(
    "engine, precision, counts",
    [
        (gregory_leibniz_series, 30, (10, 100, 1000, 10000)),
        (nilakantha_series, 30, (1, 10, 100, 1000)),
        (newton_method, 100, (5, 10, 20, 40)),
        (viete_formula, 100, (5, 10, 20, 40)),
        (wallis_product, 30, (1, 10, 100, 1000)),
        (chudnovsky_algorithm, 200, (1, 2, 4, 8)),
        (brent_salamin_formula, 200, (1, 2, 4, 8)),
    ],
)
def test_accuracy_never_drops_with_iterations(pi_reference, engine, precision, counts):
    accuracy = [
        count_accurate_digits(str(engine(n, precision).approximation), pi_reference)
        for n in counts
    ]
    assert accuracy == sorted(accuracy)
    assert accuracy[0] < accuracy[-1]


def test_chudnovsky_steps_never_lose_digits(pi_reference):
    result = chudnovsky_algorithm(10, 200, STEPS)
    accuracy = step_accuracy(result, pi_reference)
    assert accuracy == sorted(accuracy)
    assert accuracy[0] == 14


def test_memory_estimate():
    result = gregory_leibniz_series(10, 20, RunFlags(estimate_memory_usage=True))
    assert result.memory_bytes > 0
    assert result.lines[-1] == f"Memory usage: {result.memory_usage}"
    assert result.lines[-1].endswith(" KB")
    assert result.lines[-3].startswith("numerator:   ")
    assert result.lines[-2].startswith("denominator: ")


@pytest.mark.parametrize("engine", ENGINES)
def test_memory_estimate_grows_with_precision(engine):
    flags = RunFlags(estimate_memory_usage=True)
    small = engine(5, 20, flags).memory_bytes
    large = engine(5, 500, flags).memory_bytes
    assert large >= small


def test_gregory_leibniz_milestones():
    result = gregory_leibniz_series(60, 10)
    assert "iterations: 50,  result: 3" in result.lines
    stepped = gregory_leibniz_series(60, 10, STEPS)
    assert not any(line.startswith("iterations:") for line in stepped.lines)


def test_lines_are_streamed():
    out = io.StringIO()
    result = chudnovsky_algorithm(3, 30, RunFlags(print_steps=True, estimate_memory_usage=True), out)
    assert out.getvalue().splitlines() == result.lines
    assert result.lines[0].startswith("Calculating an approximation of pi")
