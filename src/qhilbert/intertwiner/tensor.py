"""Sparse, dimension-annotated tensor view of intertwiner basis states.

An IntertwinerTensor is a basis vector reinterpreted as a rank-n tensor with
one leg per edge. Each leg is described by a TensorIndex whose U(1) charges
are 2m in basis order m = j, j-1, ..., -j, so the SU(2) invariance of the
intertwiner shows up as charge conservation on every non-zero entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np

from qhilbert.core import SPARSITY_THRESHOLD
from qhilbert.core.errors import (
    DimensionMismatchError,
    InvalidInputError,
    UnsupportedValenceError,
)
from qhilbert.core.index import FlowDirection, TensorIndex
from qhilbert.core.indexing import unravel_index
from qhilbert.core.state import StateVector
from qhilbert.core.symmetry import U1Symmetry
from qhilbert.intertwiner.basis import IntertwinerBasisState, construct_basis_vector
from qhilbert.intertwiner.core import validate_edge_spins

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntertwinerTensor:
    """A basis state viewed as a tensor with one leg per edge.

    Attributes:
        dimensions:   Leg dimensions 2j + 1, in edge order.
        state_vector: Flattened tensor entries (rightmost leg fastest).
        basis_state:  The basis state this tensor was built from.
    """

    dimensions: tuple[int, ...]
    state_vector: StateVector
    basis_state: IntertwinerBasisState

    def __post_init__(self) -> None:
        if int(np.prod(self.dimensions)) != self.state_vector.dimension:
            raise DimensionMismatchError(
                int(np.prod(self.dimensions)), self.state_vector.dimension, "tensor dimension"
            )

    @property
    def ndim(self) -> int:
        return len(self.dimensions)

    @property
    def edge_spins(self) -> tuple[float, ...]:
        return tuple((d - 1) / 2 for d in self.dimensions)

    @property
    def indices(self) -> tuple[TensorIndex, ...]:
        """One incoming spin leg per edge, labelled ``e0``, ``e1``, ..."""
        return tuple(
            TensorIndex.for_spin(j, label=f"e{i}", flow=FlowDirection.IN)
            for i, j in enumerate(self.edge_spins)
        )

    def todense(self) -> jax.Array:
        """Entries reshaped to ``dimensions``."""
        return self.state_vector.amplitudes.reshape(self.dimensions)

    def nonzero_entries(self) -> Iterator[tuple[tuple[float, ...], complex]]:
        """Yield ``((m1, ..., mn), amplitude)`` for every non-zero entry."""
        spins = self.edge_spins
        amps = self.state_vector.to_array()
        for flat in np.flatnonzero(amps):
            coords = unravel_index(int(flat), self.dimensions)
            yield tuple(j - c for j, c in zip(spins, coords)), complex(amps[flat])

    def conserves_charge(self) -> bool:
        """True if every non-zero entry has total magnetic number zero."""
        u1 = U1Symmetry()
        nonzero = np.flatnonzero(self.state_vector.to_array())
        if nonzero.size == 0:
            return True
        coords = np.array([unravel_index(int(flat), self.dimensions) for flat in nonzero])
        # all legs flow IN, so the fused charge of an entry is its total 2M
        per_leg = [leg.charges[coords[:, k]] for k, leg in enumerate(self.indices)]
        return bool(np.all(u1.fuse_many(per_leg) == u1.identity()))

    def nnz(self) -> int:
        return int(np.count_nonzero(self.state_vector.to_array()))

    def __repr__(self) -> str:
        return (
            f"IntertwinerTensor(dimensions={self.dimensions}, "
            f"J={self.basis_state.intermediate_j:g}, nnz={self.nnz()})"
        )


def _check_dimensions(dimensions: Sequence[object], total: int) -> tuple[int, ...]:
    dims = []
    for i, d in enumerate(dimensions):
        if isinstance(d, bool) or not isinstance(d, (int, np.integer)) or d < 1:
            raise InvalidInputError(f"Tensor dimension {i} must be a positive integer, got {d!r}")
        dims.append(int(d))
    if not dims:
        raise InvalidInputError("Tensor dimensions must be non-empty")
    if int(np.prod(dims)) != total:
        raise DimensionMismatchError(total, int(np.prod(dims)), "tensor dimension")
    return tuple(dims)


def basis_to_tensor(
    basis: IntertwinerBasisState,
    threshold: float = SPARSITY_THRESHOLD,
) -> IntertwinerTensor:
    """Wrap a basis state as a sparse IntertwinerTensor.

    Amplitudes with magnitude below ``threshold`` are set to exactly zero.
    The vector is not renormalized afterwards.

    Per-edge dimensions come from the state's ``dimensions`` property. A
    state without it is treated as a single leg of the full dimension and a
    warning is logged.

    Raises:
        InvalidInputError:      Non-positive or non-integer dimensions.
        DimensionMismatchError: Dimensions whose product differs from the
                                state dimension.
    """
    state = basis.state_vector
    dimensions = state.properties.get("dimensions")
    if dimensions is None:
        logger.warning(
            "basis state %r has no 'dimensions' property; treating it as a single leg of dimension %d",
            state.basis, state.dimension,
        )
        dimensions = (state.dimension,)
    dims = _check_dimensions(dimensions, state.dimension)

    amps = state.amplitudes
    sparse = jnp.where(jnp.abs(amps) < threshold, jnp.zeros_like(amps), amps)
    properties = dict(state.properties)
    properties.update(dimensions=dims, sparse=True, threshold=threshold)
    vector = StateVector(state.dimension, sparse, state.basis, properties)
    return IntertwinerTensor(dims, vector, basis)


def create_intertwiner_tensor(
    edge_spins: Sequence[float],
    intermediate_j: float,
) -> IntertwinerTensor | None:
    """Tensor for the 4-valent invariant with intermediate spin ``intermediate_j``.

    Returns:
        The tensor, or None if ``intermediate_j`` is not an allowed coupling
        of both edge pairs.

    Raises:
        UnsupportedValenceError: If ``edge_spins`` does not have exactly 4 entries.
        InvalidInputError:       Invalid spins.

    Example:
        >>> t = create_intertwiner_tensor([0.5, 0.5, 0.5, 0.5], 0)
        >>> t.todense().shape
        (2, 2, 2, 2)
    """
    if len(edge_spins) != 4:
        raise UnsupportedValenceError(len(edge_spins), (4,))
    validate_edge_spins(edge_spins)
    basis = construct_basis_vector(*edge_spins, intermediate_j)
    if basis is None:
        return None
    return basis_to_tensor(basis)
