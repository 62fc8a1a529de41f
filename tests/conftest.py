"""
Pytest configuration and fixtures
"""
import pytest

from pi_examiner.reference import compute_pi_digits


@pytest.fixture(scope="session")
def pi_reference() -> str:
    """2000 decimal places of pi, "3.1415..."."""
    return compute_pi_digits(2000)


@pytest.fixture
def reference_file(tmp_path, pi_reference):
    path = tmp_path / "pi_digits.txt"
    path.write_text(pi_reference, encoding="ascii")
    return path
