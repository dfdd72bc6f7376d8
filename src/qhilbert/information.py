"""Distance and entropy measures between quantum states.

Functions accept a StateVector (treated as the pure state |psi><psi|) or a
DensityMatrix wherever a state is expected. Entropies use the natural
logarithm, matching DensityMatrix.von_neumann_entropy.
"""

from __future__ import annotations

from collections.abc import Sequence

import jax
import jax.numpy as jnp

from qhilbert.core.density import DensityMatrix
from qhilbert.core.errors import DimensionMismatchError, InvalidInputError
from qhilbert.core.operator import Operator
from qhilbert.core.state import StateVector

State = StateVector | DensityMatrix


def _as_matrix(state: State | Operator) -> jax.Array:
    if isinstance(state, StateVector):
        return DensityMatrix.from_pure_state(state).to_matrix()
    return state.to_matrix()


def _psd_sqrt(m: jax.Array) -> jax.Array:
    """Square root of a Hermitian PSD matrix; rounding negatives are clipped."""
    values, vecs = jnp.linalg.eigh(m)
    root = jnp.sqrt(jnp.clip(values, 0.0, None))
    return (vecs * root[None, :]) @ jnp.conj(vecs.T)


def fidelity(a: State, b: State) -> float:
    """Uhlmann fidelity F = (Tr sqrt(sqrt(rho) sigma sqrt(rho)))^2.

    For two pure states this reduces to |<psi|phi>|^2 on the normalized
    vectors, which is computed directly.

    Raises:
        DimensionMismatchError: If the states live in different spaces.
        ZeroNormError:          If a StateVector argument is numerically zero.

    Example:
        >>> fidelity(ket0, plus)
        0.5
    """
    if a.dimension != b.dimension:
        raise DimensionMismatchError(a.dimension, b.dimension)
    if isinstance(a, StateVector) and isinstance(b, StateVector):
        return abs(a.normalize().inner_product(b.normalize())) ** 2
    root = _psd_sqrt(_as_matrix(a))
    inner = _psd_sqrt(root @ _as_matrix(b) @ root)
    return float(jnp.real(jnp.trace(inner)) ** 2)


def trace_distance(a: State | Operator, b: State | Operator) -> float:
    """D = Tr|A - B| / 2, with |X| = sqrt(X^dag X).

    Computed from the singular values of A - B, so it is defined for any pair
    of operators; for states it lies in [0, 1].

    Raises:
        DimensionMismatchError: If the arguments live in different spaces.
    """
    if a.dimension != b.dimension:
        raise DimensionMismatchError(a.dimension, b.dimension)
    singular = jnp.linalg.svd(_as_matrix(a) - _as_matrix(b), compute_uv=False)
    return float(jnp.sum(singular)) / 2


def entanglement_entropy(
    state: State,
    dims: Sequence[int],
    trace_out: Sequence[int] | None = None,
) -> float:
    """Von Neumann entropy of the reduced state after tracing out ``trace_out``.

    Args:
        state:     Pure or mixed state on the product space ``dims``.
        dims:      Subsystem dimensions; their product must match the state.
        trace_out: Subsystems to trace out. Defaults to every subsystem but
                   the first, i.e. the A|B cut for a bipartite state.

    Returns:
        S(rho_A) in nats. For a pure bipartite state it is the same on both
        sides of the cut; ln 2 for a Bell pair.

    Raises:
        InvalidInputError: On inconsistent dims or subsystem indices.
    """
    if len(dims) < 2:
        raise InvalidInputError("entanglement_entropy needs at least two subsystems")
    if trace_out is None:
        trace_out = range(1, len(dims))
    rho = DensityMatrix.from_pure_state(state) if isinstance(state, StateVector) else state
    return rho.partial_trace(dims, list(trace_out)).von_neumann_entropy()
