"""Density matrices for mixed states.

A DensityMatrix is a Hermitian, unit-trace, positive semidefinite operator.
The matrix is held by a DenseOperator tagged hermitian; operator algebra
(apply, compose, scale, add) delegates to it and returns plain operators,
since the result is in general no longer a density matrix.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from qhilbert.core import EPS_NORM
from qhilbert.core.errors import DimensionMismatchError, InvalidInputError
from qhilbert.core.operator import DenseOperator, Operator, OperatorType
from qhilbert.core.state import StateVector
from qhilbert.linalg import EigenDecomposition

# Validation tolerance for trace and eigenvalue checks.
DENSITY_TOL = 1e-10


class DensityMatrix:
    """Mixed quantum state rho.

    Args:
        matrix: Square complex matrix.

    Raises:
        InvalidInputError: If the matrix is not square, not Hermitian, does
            not have trace 1, or has a negative eigenvalue.

    Example:
        >>> rho = DensityMatrix.mixed_state(
        ...     StateVector.computational_basis_states(2), [0.5, 0.5])
        >>> round(rho.purity(), 12)
        0.5
    """

    def __init__(self, matrix: Any) -> None:
        self._operator = DenseOperator(matrix, OperatorType.HERMITIAN, validate=True)
        self.dimension = self._operator.dimension

        tr = self.trace()
        if abs(tr.real - 1.0) > DENSITY_TOL or abs(tr.imag) > DENSITY_TOL:
            raise InvalidInputError(f"Density matrix must have trace 1, got {tr}")

        eigenvalues = jnp.linalg.eigvalsh(self._operator.to_matrix())
        if float(jnp.min(eigenvalues)) < -DENSITY_TOL:
            raise InvalidInputError("Density matrix must be positive semidefinite")

    # --- constructors ---

    @classmethod
    def from_pure_state(cls, state: StateVector) -> DensityMatrix:
        """rho = |psi><psi| for the normalized ``state``."""
        psi = state.normalize().amplitudes
        return cls(jnp.outer(psi, jnp.conj(psi)))

    @classmethod
    def mixed_state(
        cls,
        states: Sequence[StateVector],
        probabilities: Sequence[float],
    ) -> DensityMatrix:
        """rho = sum_k p_k |psi_k><psi_k|.

        Each state is normalized before use.

        Raises:
            InvalidInputError: Length mismatch, negative probabilities, or
                probabilities not summing to 1.
            DimensionMismatchError: States of different dimension.
        """
        if not states:
            raise InvalidInputError("mixed_state needs at least one state")
        if len(states) != len(probabilities):
            raise InvalidInputError(
                f"Got {len(states)} states but {len(probabilities)} probabilities"
            )
        probs = np.asarray(probabilities, dtype=np.float64)
        if np.any(probs < 0):
            raise InvalidInputError("Probabilities must be non-negative")
        if abs(probs.sum() - 1.0) > DENSITY_TOL:
            raise InvalidInputError(f"Probabilities must sum to 1, got {probs.sum()}")

        dim = states[0].dimension
        rho = jnp.zeros((dim, dim), dtype=jnp.complex128)
        for state, p in zip(states, probs):
            if state.dimension != dim:
                raise DimensionMismatchError(dim, state.dimension)
            psi = state.normalize().amplitudes
            rho = rho + p * jnp.outer(psi, jnp.conj(psi))
        return cls(rho)

    # --- properties ---

    def to_matrix(self) -> jax.Array:
        return self._operator.to_matrix()

    def to_operator(self) -> DenseOperator:
        return self._operator

    def trace(self) -> complex:
        return complex(jnp.trace(self._operator.to_matrix()))

    def purity(self) -> float:
        """Tr(rho^2); 1 for pure states, 1/d for the maximally mixed state."""
        m = self._operator.to_matrix()
        return float(jnp.real(jnp.trace(m @ m)))

    def von_neumann_entropy(self) -> float:
        """S = -Tr(rho ln rho), natural logarithm."""
        eigenvalues = np.asarray(jnp.linalg.eigvalsh(self._operator.to_matrix()))
        positive = eigenvalues[eigenvalues > EPS_NORM]
        return float(-np.sum(positive * np.log(positive)))

    def eigen_decompose(self) -> EigenDecomposition:
        return self._operator.eigen_decompose()

    # --- algebra ---

    def apply(self, state: StateVector) -> StateVector:
        return self._operator.apply(state)

    def compose(self, other: Operator) -> Operator:
        return self._operator.compose(other)

    def scale(self, scalar: complex) -> Operator:
        return self._operator.scale(scalar)

    def add(self, other: Operator) -> Operator:
        return self._operator.add(other)

    def adjoint(self) -> DensityMatrix:
        return self

    def partial_trace(self, dims: Sequence[int], trace_out: Sequence[int]) -> DensityMatrix:
        """Reduced density matrix of the subsystems not in ``trace_out``."""
        reduced = self._operator.partial_trace(dims, trace_out)
        return DensityMatrix(reduced.to_matrix())

    def __repr__(self) -> str:
        return f"DensityMatrix(dimension={self.dimension}, purity={self.purity():.4g})"
