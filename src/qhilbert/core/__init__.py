"""Core state, operator and symmetry classes."""

# Shared tolerance constants. Defined before the submodule imports below,
# which read them at import time.
# EPS: general-purpose zero-guard for display and division (1e-15).
# EPS_NORM: norms below this are treated as zero; also the default
#           tolerance of equals()/is_zero() comparisons (1e-10).
# EPS_STRUCTURE: elementwise tolerance for identity/diagonal detection (1e-12).
# SPARSITY_THRESHOLD: amplitudes below this are dropped from sparse tensors.
EPS = 1e-15
EPS_NORM = 1e-10
EPS_STRUCTURE = 1e-12
SPARSITY_THRESHOLD = 1e-10

from qhilbert.core.errors import (  # noqa: E402
    DimensionMismatchError,
    InvalidInputError,
    QHilbertError,
    UnsupportedValenceError,
    ZeroNormError,
)
from qhilbert.core.index import FlowDirection, Label, TensorIndex  # noqa: E402
from qhilbert.core.indexing import (  # noqa: E402
    ravel_multi_index,
    total_dimension,
    unravel_index,
)
from qhilbert.core.state import StateBuilder, StateVector  # noqa: E402
from qhilbert.core.symmetry import (  # noqa: E402
    BaseNonAbelianSymmetry,
    BaseSymmetry,
    SU2Symmetry,
    U1Symmetry,
)
from qhilbert.core.operator import (  # noqa: E402
    DenseOperator,
    DiagonalOperator,
    IdentityOperator,
    Operator,
    OperatorKind,
    OperatorType,
    ProjectionOperator,
    create_optimized,
)
from qhilbert.core.density import DensityMatrix  # noqa: E402

__all__ = [
    "EPS",
    "EPS_NORM",
    "EPS_STRUCTURE",
    "SPARSITY_THRESHOLD",
    "QHilbertError",
    "InvalidInputError",
    "DimensionMismatchError",
    "ZeroNormError",
    "UnsupportedValenceError",
    "ravel_multi_index",
    "unravel_index",
    "total_dimension",
    "BaseSymmetry",
    "BaseNonAbelianSymmetry",
    "U1Symmetry",
    "SU2Symmetry",
    "FlowDirection",
    "Label",
    "TensorIndex",
    "StateVector",
    "StateBuilder",
    "Operator",
    "OperatorKind",
    "OperatorType",
    "DenseOperator",
    "IdentityOperator",
    "DiagonalOperator",
    "ProjectionOperator",
    "create_optimized",
    "DensityMatrix",
]
