"""Intertwiner spaces: SU(2)-invariant tensors at spin-network nodes."""

from qhilbert.intertwiner.basis import (
    BasisConfig,
    IntertwinerBasisState,
    IntertwinerSpace,
    construct_basis,
    construct_basis_vector,
    four_spin_half_basis,
)
from qhilbert.intertwiner.core import (
    allowed_intermediate_spins,
    calculate_dimension,
    common_intermediate_spins,
    is_admissible,
    triangle_inequality,
    validate_edge_spins,
)
from qhilbert.intertwiner.tensor import (
    IntertwinerTensor,
    basis_to_tensor,
    create_intertwiner_tensor,
)

__all__ = [
    "triangle_inequality",
    "is_admissible",
    "allowed_intermediate_spins",
    "common_intermediate_spins",
    "calculate_dimension",
    "validate_edge_spins",
    "BasisConfig",
    "IntertwinerBasisState",
    "IntertwinerSpace",
    "construct_basis",
    "construct_basis_vector",
    "four_spin_half_basis",
    "IntertwinerTensor",
    "basis_to_tensor",
    "create_intertwiner_tensor",
]
