"""Errores del núcleo de cálculo."""

from __future__ import annotations


class PreconditionError(ValueError):
    """Raised when an input violates a documented precondition.

    Examples: non-positive half-life, negative nutrition values, a trend
    whose first value is zero.
    """
