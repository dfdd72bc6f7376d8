"""Linear-algebra helpers shared by operators and basis construction.

- orthonormalize_states: joint modified Gram-Schmidt over StateVectors
- eigen_decompose:       eigenvalues and eigenvectors as StateVectors
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np

from qhilbert.core import EPS_NORM
from qhilbert.core.errors import DimensionMismatchError
from qhilbert.core.state import StateVector

logger = logging.getLogger(__name__)


class Orthonormalization(NamedTuple):
    """Result of orthonormalize_states.

    Attributes:
        vectors: Orthonormal StateVectors, in input order.
        kept:    Position in the input of each surviving vector.
    """

    vectors: list[StateVector]
    kept: list[int]


class EigenDecomposition(NamedTuple):
    """Eigenvalues and the matching eigenvectors.

    Attributes:
        eigenvalues:  1-D array. Real and ascending for Hermitian input.
        eigenvectors: One normalized StateVector per eigenvalue.
    """

    eigenvalues: jax.Array
    eigenvectors: list[StateVector]


def orthonormalize_states(
    states: Sequence[StateVector],
    tol: float = EPS_NORM,
    reorthogonalize: bool = True,
) -> Orthonormalization:
    """Orthonormalize a set of state vectors jointly.

    Modified Gram-Schmidt: each vector is projected against every vector
    already accepted, one at a time, then (optionally) projected a second
    time to recover orthogonality lost to rounding. A vector whose residual
    norm falls below ``tol`` is linearly dependent on the earlier ones and is
    dropped.

    Basis label and properties of each surviving input are preserved.

    Args:
        states:          Vectors of equal dimension.
        tol:             Residual norm below which a vector is dropped.
        reorthogonalize: Run the second projection pass.

    Returns:
        Orthonormalization(vectors, kept).

    Raises:
        DimensionMismatchError: If the vectors do not share a dimension.
    """
    if not states:
        return Orthonormalization([], [])

    dim = states[0].dimension
    accepted: list[np.ndarray] = []
    vectors: list[StateVector] = []
    kept: list[int] = []
    passes = 2 if reorthogonalize else 1

    for pos, state in enumerate(states):
        if state.dimension != dim:
            raise DimensionMismatchError(dim, state.dimension)
        v = state.to_array()
        for _ in range(passes):
            for q in accepted:
                v = v - np.vdot(q, v) * q
        n = float(np.linalg.norm(v))
        if n < tol:
            logger.debug("orthonormalize_states: dropping vector %d (residual %.3e)", pos, n)
            continue
        v = v / n
        accepted.append(v)
        vectors.append(StateVector(dim, v, state.basis, state.properties))
        kept.append(pos)

    return Orthonormalization(vectors, kept)


def eigen_decompose(matrix: jax.Array, hermitian: bool = False) -> EigenDecomposition:
    """Eigen-decomposition of a square matrix.

    Args:
        matrix:    Square complex matrix.
        hermitian: Use eigh (real ascending eigenvalues, orthonormal
                   eigenvectors). Otherwise the general eig path is used.
    """
    m = jnp.asarray(matrix, dtype=jnp.complex128)
    dim = m.shape[0]
    if hermitian:
        values, vecs = jnp.linalg.eigh(m)
    else:
        values, vecs = jnp.linalg.eig(m)
    states = [StateVector(dim, vecs[:, k]) for k in range(dim)]
    return EigenDecomposition(values, states)
