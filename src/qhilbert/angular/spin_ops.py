"""Angular-momentum states and operators for a single spin j.

Matrices act on the (2j+1)-dimensional space with basis order
``m = j, j-1, ..., -j`` (index ``j - m``), the same order used for the legs
of intertwiner tensors.
"""

from __future__ import annotations

import numpy as np

from qhilbert.core.errors import InvalidInputError
from qhilbert.core.indexing import is_half_integer, is_integer, m_index, m_values, spin_dim, twice
from qhilbert.core.operator import DenseOperator, DiagonalOperator, OperatorType
from qhilbert.core.state import StateVector
from qhilbert.core.symmetry import SU2Symmetry


def validate_spin(j: float) -> None:
    if j < 0:
        raise InvalidInputError(f"Angular momentum j must be non-negative, got {j}")
    if not is_half_integer(j):
        raise InvalidInputError(f"Angular momentum j must be integer or half-integer, got {j}")


def is_valid_m(j: float, m: float) -> bool:
    return abs(m) <= j + 1e-10 and is_integer(j - m)


def jm_state(j: float, m: float) -> StateVector:
    """The basis state |j, m> in the spin-j space."""
    validate_spin(j)
    if not is_valid_m(j, m):
        raise InvalidInputError(f"Invalid m={m} for j={j}")
    dim = spin_dim(j)
    amplitudes = np.zeros(dim, dtype=np.complex128)
    amplitudes[m_index(j, m)] = 1.0
    return StateVector(dim, amplitudes, f"|{j:g},{m:g}⟩", {"j": j, "m": m})


def _ladder(j: float, raising: bool) -> np.ndarray:
    """Matrix of J+ (raising) or J- on the spin-j basis."""
    dim = spin_dim(j)
    mat = np.zeros((dim, dim), dtype=np.complex128)
    for col, m in enumerate(m_values(j)):
        target = m + 1 if raising else m - 1
        if abs(target) > j:
            continue
        mat[m_index(j, target), col] = np.sqrt(j * (j + 1) - m * target)
    return mat


def jz(j: float) -> DiagonalOperator:
    """J_z = diag(j, j-1, ..., -j)."""
    validate_spin(j)
    return DiagonalOperator(np.array(m_values(j), dtype=np.complex128))


def jplus(j: float) -> DenseOperator:
    """Raising operator: J+ |j, m> = sqrt(j(j+1) - m(m+1)) |j, m+1>."""
    validate_spin(j)
    return DenseOperator(_ladder(j, raising=True))


def jminus(j: float) -> DenseOperator:
    """Lowering operator: J- |j, m> = sqrt(j(j+1) - m(m-1)) |j, m-1>."""
    validate_spin(j)
    return DenseOperator(_ladder(j, raising=False))


def jx(j: float) -> DenseOperator:
    """J_x = (J+ + J-) / 2."""
    validate_spin(j)
    return DenseOperator(
        (_ladder(j, True) + _ladder(j, False)) / 2, OperatorType.HERMITIAN
    )


def jy(j: float) -> DenseOperator:
    """J_y = (J+ - J-) / 2i."""
    validate_spin(j)
    return DenseOperator(
        (_ladder(j, True) - _ladder(j, False)) / 2j, OperatorType.HERMITIAN
    )


def j_squared(j: float) -> DiagonalOperator:
    """J^2 = j(j+1) times the identity on the spin-j space."""
    validate_spin(j)
    return DiagonalOperator(np.full(spin_dim(j), j * (j + 1), dtype=np.complex128))


def coupled_state(j1: float, j2: float, j: float, m: float) -> StateVector:
    """Coupled state |j1 j2; j m> expanded in the product basis.

    Amplitude of |j1 m1> (x) |j2 m2> is <j1 m1; j2 m2 | j m>, at the flat index
    of ``(m1, m2)``.

    Raises:
        InvalidInputError: If j is not reachable from j1 x j2 or m is invalid.
    """
    validate_spin(j1)
    validate_spin(j2)
    validate_spin(j)
    su2 = SU2Symmetry()
    a, b, c = twice(j1), twice(j2), twice(j)
    if not su2.is_admissible(a, b, c):
        raise InvalidInputError(f"j={j} cannot be obtained by coupling {j1} and {j2}")
    if not is_valid_m(j, m):
        raise InvalidInputError(f"Invalid m={m} for j={j}")

    # rows m1, columns m2; C-order ravel puts (m1, m2) at its flat index
    amplitudes = su2.recoupling_coefficients(a, b, c)[:, :, m_index(j, m)].ravel()
    return StateVector(
        spin_dim(j1) * spin_dim(j2),
        amplitudes,
        f"|{j1:g},{j2:g};{j:g},{m:g}⟩",
        {"dimensions": (spin_dim(j1), spin_dim(j2)), "edge_spins": (j1, j2), "j1": j1, "j2": j2, "j": j, "m": m},
    )
