"""Selection rules and dimension counting for intertwiner spaces.

An intertwiner at a node of valence n is an SU(2)-invariant vector in
V_j1 (x) ... (x) V_jn. Its dimension is the number of ways the edge spins
couple to total spin 0:

- valence 2: one invariant iff j1 == j2
- valence 3: one invariant iff (j1, j2, j3) is an admissible triad
- valence 4: one invariant per intermediate spin J reachable from both
  (j1, j2) and (j3, j4)

A triad is admissible when it satisfies the triangle inequality and
j1 + j2 + j3 is an integer; only then is the Clebsch-Gordan coefficient
<j1 m1; j2 m2 | j3 m3> non-zero for some m's.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence

from qhilbert.core.errors import InvalidInputError, UnsupportedValenceError
from qhilbert.core.indexing import SPIN_TOL, is_half_integer, is_integer, twice
from qhilbert.core.symmetry import SU2Symmetry

logger = logging.getLogger(__name__)

SUPPORTED_VALENCES = (2, 3, 4)

_SU2 = SU2Symmetry()


def triangle_inequality(j1: float, j2: float, j3: float) -> bool:
    """True iff j1 + j2 >= j3, j2 + j3 >= j1 and j3 + j1 >= j2."""
    return (
        j1 + j2 >= j3 - SPIN_TOL
        and j2 + j3 >= j1 - SPIN_TOL
        and j3 + j1 >= j2 - SPIN_TOL
    )


def is_admissible(j1: float, j2: float, j3: float) -> bool:
    """Triangle inequality plus integral j1 + j2 + j3."""
    if not all(is_half_integer(j) for j in (j1, j2, j3)):
        return False
    return _SU2.is_admissible(twice(j1), twice(j2), twice(j3))


def allowed_intermediate_spins(j1: float, j2: float) -> list[float]:
    """Candidate spins J for coupling j1 and j2.

    Runs from |j1 - j2| to j1 + j2 in steps of 1 when j1 + j2 is an integer
    and 0.5 otherwise.

    Example:
        >>> allowed_intermediate_spins(0.5, 0.5)
        [0.0, 1.0]
    """
    j_min = abs(j1 - j2)
    j_max = j1 + j2
    step = 1.0 if is_integer(j_max) else 0.5
    n_steps = int(round((j_max - j_min) / step))
    return [j_min + k * step for k in range(n_steps + 1)]


def common_intermediate_spins(edge_spins: Sequence[float]) -> list[float]:
    """Intermediate spins J through which (j1 j2)(j3 j4) couple to zero.

    J must appear in both allowed_intermediate_spins lists and form an
    admissible triad with each pair, i.e. lie in the SU(2) fusion of both
    pairs.
    """
    if not all(is_half_integer(j) for j in edge_spins):
        return []
    j1, j2, j3, j4 = edge_spins
    right = set(_SU2.allowed_fusions(twice(j3), twice(j4)))
    return [c / 2 for c in _SU2.allowed_fusions(twice(j1), twice(j2)) if c in right]


def validate_edge_spins(edge_spins: Sequence[float]) -> None:
    """Check that edge spins are a list of at least two valid spins.

    Raises:
        InvalidInputError: If there are fewer than two spins, or any spin is
            negative or not an integer/half-integer.
    """
    if isinstance(edge_spins, (str, bytes)) or not isinstance(edge_spins, Sequence):
        raise InvalidInputError(f"Edge spins must be a sequence, got {type(edge_spins).__name__}")
    if len(edge_spins) < 2:
        raise InvalidInputError("Intertwiner needs at least 2 edges")
    for i, j in enumerate(edge_spins):
        if isinstance(j, bool) or not isinstance(j, numbers.Real):
            raise InvalidInputError(f"Edge spin {i} is not a number: {j!r}")
        if j < 0 or not is_half_integer(j):
            raise InvalidInputError(
                f"Edge spin {i} must be a non-negative integer or half-integer, got {j}"
            )


def calculate_dimension(edge_spins: Sequence[float]) -> int:
    """Dimension of the intertwiner space for the given edge spins.

    Args:
        edge_spins: Spin on each edge, in node order.

    Returns:
        Number of linearly independent SU(2) invariants.

    Raises:
        UnsupportedValenceError: For valence outside {2, 3, 4}.
    """
    valence = len(edge_spins)
    if valence == 2:
        j1, j2 = edge_spins
        return 1 if abs(j1 - j2) < SPIN_TOL else 0
    if valence == 3:
        return 1 if is_admissible(*edge_spins) else 0
    if valence == 4:
        return len(common_intermediate_spins(edge_spins))
    logger.debug("calculate_dimension: unsupported valence %d", valence)
    raise UnsupportedValenceError(valence, SUPPORTED_VALENCES)
