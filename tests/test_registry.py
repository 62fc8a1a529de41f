import pytest

from pi_examiner.errors import InvalidArgument
from pi_examiner.registry import Algorithm, resolve, run_algorithm


@pytest.mark.parametrize(
    "identifier",
    ["7", "BRENT_SALAMIN", "brent-salamin", "Brent_Salamin", "GAUSS_LEGENDRE", "gauss-legendre"],
)
def test_brent_salamin_aliases(identifier):
    assert resolve(identifier) is Algorithm.BRENT_SALAMIN


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_codes_and_names(algorithm):
    assert resolve(algorithm.code) is algorithm
    assert resolve(algorithm.name.lower().replace("_", "-")) is algorithm
    assert resolve(algorithm) is algorithm


def test_surrounding_whitespace_is_ignored():
    assert resolve(" newton ") is Algorithm.NEWTON


@pytest.mark.parametrize("identifier", ["8", "0", "PI", "", "GREGORY LEIBNIZ"])
def test_unknown_identifier(identifier):
    with pytest.raises(InvalidArgument) as excinfo:
        resolve(identifier)
    assert repr(identifier) in str(excinfo.value)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_run_algorithm(algorithm):
    result = run_algorithm(algorithm.code, 2, 10)
    assert result.algorithm == algorithm.name
    assert result.iterations == 2
    assert result.precision == 10


def test_run_algorithm_rejects_unknown_before_running():
    with pytest.raises(InvalidArgument):
        run_algorithm("EULER", 1, 10)
