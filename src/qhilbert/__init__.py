"""qhilbert: finite-dimensional quantum mechanics on JAX.

State vectors, linear operators with identity/diagonal fast paths, density
matrices, commutators and information measures, Clebsch-Gordan coupling and
SU(2) intertwiner bases.

.. note::
    Importing ``qhilbert`` enables JAX 64-bit mode (``jax_enable_x64``).
    All amplitudes and matrices are ``complex128``.

Quick start::

    from qhilbert import StateVector, construct_basis, create_optimized

    psi = StateVector.superposition([1, 1j])
    op = create_optimized([[1, 0], [0, -1]])    # -> DiagonalOperator
    print(op.apply(psi))

    space = construct_basis([0.5, 0.5, 0.5, 0.5])
    print(space.dimension, space.intermediate_spins)   # 2 [0.0, 1.0]
"""

import jax

jax.config.update("jax_enable_x64", True)

from qhilbert.algebra import (  # noqa: E402
    anti_commutator,
    commutator,
    commutator_expectation,
    expectation_value,
    is_normal,
    operators_commute,
    robertson_bound,
    uncertainty_product,
)
from qhilbert.angular import (  # noqa: E402
    clebsch_gordan,
    coupled_state,
    j_squared,
    jm_state,
    jminus,
    jplus,
    jx,
    jy,
    jz,
    wigner_3j,
    wigner_6j,
)
from qhilbert.core import (  # noqa: E402
    EPS,
    EPS_NORM,
    SPARSITY_THRESHOLD,
    BaseNonAbelianSymmetry,
    BaseSymmetry,
    DenseOperator,
    DensityMatrix,
    DiagonalOperator,
    DimensionMismatchError,
    FlowDirection,
    IdentityOperator,
    InvalidInputError,
    Label,
    Operator,
    OperatorKind,
    OperatorType,
    ProjectionOperator,
    QHilbertError,
    StateBuilder,
    StateVector,
    SU2Symmetry,
    TensorIndex,
    U1Symmetry,
    UnsupportedValenceError,
    ZeroNormError,
    create_optimized,
    ravel_multi_index,
    total_dimension,
    unravel_index,
)
from qhilbert.intertwiner import (  # noqa: E402
    BasisConfig,
    IntertwinerBasisState,
    IntertwinerSpace,
    IntertwinerTensor,
    allowed_intermediate_spins,
    basis_to_tensor,
    calculate_dimension,
    common_intermediate_spins,
    construct_basis,
    construct_basis_vector,
    create_intertwiner_tensor,
    four_spin_half_basis,
    is_admissible,
    triangle_inequality,
    validate_edge_spins,
)
from qhilbert.information import (  # noqa: E402
    entanglement_entropy,
    fidelity,
    trace_distance,
)
from qhilbert.linalg import (  # noqa: E402
    EigenDecomposition,
    Orthonormalization,
    eigen_decompose,
    orthonormalize_states,
)

__version__ = "0.1.0"

__all__ = [
    # Constants
    "EPS",
    "EPS_NORM",
    "SPARSITY_THRESHOLD",
    # Errors
    "QHilbertError",
    "InvalidInputError",
    "DimensionMismatchError",
    "ZeroNormError",
    "UnsupportedValenceError",
    # Indexing
    "ravel_multi_index",
    "unravel_index",
    "total_dimension",
    # Symmetry
    "BaseSymmetry",
    "BaseNonAbelianSymmetry",
    "U1Symmetry",
    "SU2Symmetry",
    # Index
    "FlowDirection",
    "Label",
    "TensorIndex",
    # States
    "StateVector",
    "StateBuilder",
    # Operators
    "Operator",
    "OperatorKind",
    "OperatorType",
    "DenseOperator",
    "IdentityOperator",
    "DiagonalOperator",
    "ProjectionOperator",
    "create_optimized",
    "DensityMatrix",
    # Linear algebra
    "Orthonormalization",
    "EigenDecomposition",
    "orthonormalize_states",
    "eigen_decompose",
    # Operator algebra
    "commutator",
    "anti_commutator",
    "operators_commute",
    "is_normal",
    "expectation_value",
    "commutator_expectation",
    "uncertainty_product",
    "robertson_bound",
    # Information measures
    "fidelity",
    "trace_distance",
    "entanglement_entropy",
    # Angular momentum
    "clebsch_gordan",
    "wigner_3j",
    "wigner_6j",
    "jm_state",
    "coupled_state",
    "jz",
    "jplus",
    "jminus",
    "jx",
    "jy",
    "j_squared",
    # Intertwiners
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
