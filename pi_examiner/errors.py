"""Exceptions raised by pi_examiner."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """
    A run was configured with an unusable value: an unknown algorithm,
    a non-positive iteration count, or an out-of-range precision.

    Raised before any computation starts.
    """
