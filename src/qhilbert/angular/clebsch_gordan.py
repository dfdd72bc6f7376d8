"""Clebsch-Gordan coefficients and Wigner 3j / 6j symbols.

All three are evaluated with Racah's closed forms. Spins and magnetic numbers
are converted to doubled integers up front, so every factorial argument is an
exact integer; the sums are accumulated as Fractions and only the final
square root is taken in floating point.

Conventions are Condon-Shortley: <j1 j1; j2 (J - j1) | J J> > 0.
"""

from __future__ import annotations

from fractions import Fraction
from functools import lru_cache
from math import factorial, sqrt

from qhilbert.core.indexing import is_half_integer, twice


def _doubled(*values: float) -> tuple[int, ...] | None:
    """Doubled integers for the arguments, or None if any is not a half-integer."""
    if not all(is_half_integer(v) for v in values):
        return None
    return tuple(twice(v) for v in values)


def _triad(a: int, b: int, c: int) -> bool:
    """Triangle rule plus integral sum, on doubled spins."""
    if min(a, b, c) < 0 or (a + b + c) % 2:
        return False
    return abs(a - b) <= c <= a + b


def _delta_squared(a: int, b: int, c: int) -> Fraction:
    """Triangle coefficient Delta(abc)^2 on doubled spins (triad assumed valid)."""
    return Fraction(
        factorial((a + b - c) // 2) * factorial((a - b + c) // 2) * factorial((-a + b + c) // 2),
        factorial((a + b + c) // 2 + 1),
    )


def _signed_sqrt(square: Fraction, sign: int) -> float:
    return sign * sqrt(float(square))


@lru_cache(maxsize=None)
def _cg_doubled(j1: int, m1: int, j2: int, m2: int, j3: int, m3: int) -> float:
    if m3 != m1 + m2:
        return 0.0
    if abs(m1) > j1 or abs(m2) > j2 or abs(m3) > j3:
        return 0.0
    if (j1 + m1) % 2 or (j2 + m2) % 2 or (j3 + m3) % 2:
        return 0.0
    if not _triad(j1, j2, j3):
        return 0.0

    # integer (undoubled) combinations used by the Racah sum
    a = (j1 + j2 - j3) // 2      # j1 + j2 - J
    b = (j1 - m1) // 2           # j1 - m1
    c = (j2 + m2) // 2           # j2 + m2
    d = (j3 - j2 + m1) // 2      # J - j2 + m1
    e = (j3 - j1 - m2) // 2      # J - j1 - m2

    total = Fraction(0)
    for k in range(max(0, -d, -e), min(a, b, c) + 1):
        denom = (
            factorial(k) * factorial(a - k) * factorial(b - k)
            * factorial(c - k) * factorial(d + k) * factorial(e + k)
        )
        total += Fraction((-1) ** k, denom)
    if total == 0:
        return 0.0

    prefactor = (j3 + 1) * _delta_squared(j1, j2, j3)
    prefactor *= (
        factorial((j3 + m3) // 2) * factorial((j3 - m3) // 2)
        * factorial((j1 - m1) // 2) * factorial((j1 + m1) // 2)
        * factorial((j2 - m2) // 2) * factorial((j2 + m2) // 2)
    )
    return _signed_sqrt(prefactor * total * total, 1 if total > 0 else -1)


def clebsch_gordan(
    j1: float, m1: float, j2: float, m2: float, j3: float, m3: float
) -> float:
    """Clebsch-Gordan coefficient <j1 m1; j2 m2 | j3 m3>.

    Returns 0 whenever a selection rule fails: m3 != m1 + m2, |m_i| > j_i,
    j_i +- m_i not integral, the triangle rule is violated, or j1 + j2 + j3
    is not an integer. Arguments that are not integers or half-integers
    also give 0.

    Example:
        >>> round(clebsch_gordan(0.5, 0.5, 0.5, -0.5, 1, 0), 12)
        0.707106781187
    """
    doubled = _doubled(j1, m1, j2, m2, j3, m3)
    if doubled is None:
        return 0.0
    return _cg_doubled(*doubled)


def wigner_3j(
    j1: float, j2: float, j3: float, m1: float, m2: float, m3: float
) -> float:
    """Wigner 3j symbol (j1 j2 j3; m1 m2 m3).

    Related to Clebsch-Gordan coefficients by::

        (j1 j2 j3; m1 m2 m3) = (-1)^(j1 - j2 - m3) / sqrt(2 j3 + 1)
                               * <j1 m1; j2 m2 | j3, -m3>

    Zero unless m1 + m2 + m3 = 0 and (j1, j2, j3) is an admissible triad.
    """
    doubled = _doubled(j1, j2, j3, m1, m2, m3)
    if doubled is None:
        return 0.0
    a, b, c, ma, mb, mc = doubled
    cg = _cg_doubled(a, ma, b, mb, c, -mc)
    if cg == 0.0:
        return 0.0
    phase = -1 if ((a - b - mc) // 2) % 2 else 1
    return phase * cg / sqrt(c + 1)


@lru_cache(maxsize=None)
def _six_j_doubled(j1: int, j2: int, j3: int, j4: int, j5: int, j6: int) -> float:
    triads = ((j1, j2, j3), (j1, j5, j6), (j4, j2, j6), (j4, j5, j3))
    if not all(_triad(*t) for t in triads):
        return 0.0

    a1, a2, a3, a4 = ((x + y + z) // 2 for x, y, z in triads)
    b1 = (j1 + j2 + j4 + j5) // 2
    b2 = (j2 + j3 + j5 + j6) // 2
    b3 = (j3 + j1 + j6 + j4) // 2

    total = Fraction(0)
    for t in range(max(a1, a2, a3, a4), min(b1, b2, b3) + 1):
        denom = (
            factorial(t - a1) * factorial(t - a2) * factorial(t - a3) * factorial(t - a4)
            * factorial(b1 - t) * factorial(b2 - t) * factorial(b3 - t)
        )
        total += Fraction((-1) ** t * factorial(t + 1), denom)
    if total == 0:
        return 0.0

    deltas = Fraction(1)
    for t in triads:
        deltas *= _delta_squared(*t)
    return _signed_sqrt(deltas * total * total, 1 if total > 0 else -1)


def wigner_6j(
    j1: float, j2: float, j3: float, j4: float, j5: float, j6: float
) -> float:
    """Wigner 6j symbol {j1 j2 j3; j4 j5 j6}.

    Zero unless the four triads (j1 j2 j3), (j1 j5 j6), (j4 j2 j6) and
    (j4 j5 j3) each satisfy the triangle rule with an integral sum.

    Example:
        >>> round(wigner_6j(0.5, 0.5, 1, 0.5, 0.5, 0), 12)
        0.5
    """
    doubled = _doubled(j1, j2, j3, j4, j5, j6)
    if doubled is None:
        return 0.0
    return _six_j_doubled(*doubled)
