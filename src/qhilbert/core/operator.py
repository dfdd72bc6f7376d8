"""Linear operators on finite-dimensional Hilbert spaces.

The operator family is a closed set of variants sharing the Operator
interface:

- DenseOperator:      explicit complex matrix, optionally tagged hermitian,
                      unitary or projection.
- IdentityOperator:   dimension only, no stored matrix.
- DiagonalOperator:   stores the diagonal only.
- ProjectionOperator: rank-one |psi><psi| built from a state, stored densely.

create_optimized() inspects a matrix once and returns the cheapest variant
that represents it. Every fast path (identity / diagonal apply, compose,
adjoint, tensor product, partial trace) agrees with the dense path to within
floating-point tolerance.

Composition convention: ``a.compose(b)`` is the matrix product ``A @ B``.
Acting on a state it applies ``b`` first, then ``a``::

    a.compose(b).apply(v) == a.apply(b.apply(v))

Flattening of tensor-product spaces follows qhilbert.core.indexing: the left
factor varies slowest (numpy / jnp.kron order).
"""

from __future__ import annotations

import string
from collections.abc import Sequence
from enum import Enum
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np
import opt_einsum

from qhilbert.core import EPS_NORM, EPS_STRUCTURE
from qhilbert.core.errors import DimensionMismatchError, InvalidInputError
from qhilbert.core.indexing import total_dimension
from qhilbert.core.state import StateVector
from qhilbert.linalg import EigenDecomposition, eigen_decompose


class OperatorType(str, Enum):
    """Intended algebraic class of an operator (not enforced unless validated)."""

    GENERAL = "general"
    HERMITIAN = "hermitian"
    UNITARY = "unitary"
    PROJECTION = "projection"
    IDENTITY = "identity"
    DIAGONAL = "diagonal"


class OperatorKind(Enum):
    """Storage variant of an operator."""

    DENSE = "dense"
    IDENTITY = "identity"
    DIAGONAL = "diagonal"
    PROJECTION = "projection"


_DENSE_TYPES = (
    OperatorType.GENERAL,
    OperatorType.HERMITIAN,
    OperatorType.UNITARY,
    OperatorType.PROJECTION,
)


# ---------- helpers ----------

def _as_square_matrix(matrix: Any) -> jax.Array:
    data = jnp.asarray(matrix, dtype=jnp.complex128)
    if data.ndim != 2 or data.shape[0] == 0 or data.shape[0] != data.shape[1]:
        raise InvalidInputError(f"Operator matrix must be square and non-empty, got shape {data.shape}")
    return data


def _check_partial_trace(
    dims: Sequence[int],
    dimension: int,
    trace_out: Sequence[int],
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Validate a partial-trace request; return (dims, sorted unique trace_out)."""
    dims = tuple(int(d) for d in dims)
    if total_dimension(dims) != dimension:
        raise InvalidInputError(
            f"Subsystem dims {dims} multiply to {int(np.prod(dims))}, "
            f"not the operator dimension {dimension}"
        )
    if len(set(trace_out)) != len(trace_out):
        raise InvalidInputError(f"Duplicate subsystem in trace_out {list(trace_out)}")
    for k in trace_out:
        if not 0 <= k < len(dims):
            raise InvalidInputError(f"Subsystem index {k} out of range for {len(dims)} subsystems")
    return dims, tuple(sorted(trace_out))


def _partial_trace_dense(
    matrix: jax.Array,
    dims: tuple[int, ...],
    trace_out: tuple[int, ...],
) -> jax.Array:
    """Trace out subsystems of a dense matrix with a single opt_einsum contraction.

    The matrix is reshaped to (d0, ..., dn, d0, ..., dn); a traced subsystem
    shares its row and column subscript.
    """
    n = len(dims)
    letters = string.ascii_letters
    if 2 * n > len(letters):
        raise InvalidInputError(f"Too many subsystems ({n}) for partial trace")
    rows = letters[:n]
    cols = "".join(rows[i] if i in trace_out else letters[n + i] for i in range(n))
    keep = [i for i in range(n) if i not in trace_out]
    out = "".join(rows[i] for i in keep) + "".join(cols[i] for i in keep)
    reduced = opt_einsum.contract(f"{rows}{cols}->{out}", matrix.reshape(dims + dims), backend="jax")
    remaining = int(np.prod([dims[i] for i in keep])) if keep else 1
    return reduced.reshape(remaining, remaining)


# ---------- Operator base ----------

class Operator:
    """Structural base class for the operator variants.

    Methods with a generic implementation here go through the dense matrix;
    variants override them where they have a cheaper path.
    """

    kind: OperatorKind
    dimension: int
    op_type: OperatorType

    def apply(self, state: StateVector) -> StateVector:
        raise NotImplementedError

    def compose(self, other: Operator) -> Operator:
        raise NotImplementedError

    def adjoint(self) -> Operator:
        raise NotImplementedError

    def to_matrix(self) -> jax.Array:
        raise NotImplementedError

    def scale(self, scalar: complex) -> Operator:
        raise NotImplementedError

    def is_zero(self, tolerance: float = EPS_NORM) -> bool:
        raise NotImplementedError

    def norm(self) -> float:
        """Frobenius norm."""
        return float(jnp.linalg.norm(self.to_matrix()))

    def add(self, other: Operator) -> Operator:
        self._check_operand(other)
        return DenseOperator(self.to_matrix() + other.to_matrix(), validate=False)

    def tensor_product(self, other: Operator) -> Operator:
        op_type = OperatorType.GENERAL
        if self.is_unitary_type() and other.is_unitary_type():
            op_type = OperatorType.UNITARY
        return DenseOperator(jnp.kron(self.to_matrix(), other.to_matrix()), op_type, validate=False)

    def partial_trace(self, dims: Sequence[int], trace_out: Sequence[int]) -> Operator:
        """Trace out the subsystems listed in ``trace_out``.

        Args:
            dims:      Dimension of each subsystem; product must equal self.dimension.
            trace_out: Positions (into dims) of the subsystems to trace out.

        Returns:
            Operator on the remaining subsystems, in their original order.

        Raises:
            InvalidInputError: On inconsistent dims or bad subsystem indices.

        Example:
            >>> rho_ab.partial_trace([2, 2], [1])   # reduced state of qubit A
        """
        dims, trace_out = _check_partial_trace(dims, self.dimension, trace_out)
        return DenseOperator(_partial_trace_dense(self.to_matrix(), dims, trace_out), validate=False)

    def eigen_decompose(self) -> EigenDecomposition:
        """Eigenvalues and eigenvectors (as StateVectors)."""
        return eigen_decompose(self.to_matrix(), hermitian=self.is_hermitian())

    def is_hermitian(self, tolerance: float = EPS_NORM) -> bool:
        m = self.to_matrix()
        return bool(jnp.all(jnp.abs(m - jnp.conj(m.T)) <= tolerance))

    def is_unitary(self, tolerance: float = EPS_NORM) -> bool:
        m = self.to_matrix()
        return bool(jnp.all(jnp.abs(m @ jnp.conj(m.T) - jnp.eye(self.dimension)) <= tolerance))

    def is_unitary_type(self) -> bool:
        return self.op_type in (OperatorType.UNITARY, OperatorType.IDENTITY)

    def trace(self) -> complex:
        return complex(jnp.trace(self.to_matrix()))

    def _check_operand(self, other: Operator | StateVector) -> None:
        if self.dimension != other.dimension:
            raise DimensionMismatchError(self.dimension, other.dimension)

    def __matmul__(self, other: Operator | StateVector) -> Operator | StateVector:
        if isinstance(other, StateVector):
            return self.apply(other)
        return self.compose(other)

    def __add__(self, other: Operator) -> Operator:
        return self.add(other)

    def __mul__(self, scalar: complex) -> Operator:
        return self.scale(scalar)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimension={self.dimension}, type={self.op_type.value})"


# ---------- DenseOperator ----------

@jax.tree_util.register_pytree_node_class
class DenseOperator(Operator):
    """Operator stored as an explicit complex matrix.

    Args:
        matrix:   Square matrix (anything jnp.asarray accepts).
        op_type:  Intended class; one of general, hermitian, unitary, projection.
        validate: Check that the matrix really has the tagged property.

    Raises:
        InvalidInputError: Non-square matrix, unsupported op_type, or failed
            validation.
    """

    kind = OperatorKind.DENSE

    def __init__(
        self,
        matrix: Any,
        op_type: OperatorType | str = OperatorType.GENERAL,
        validate: bool = True,
    ) -> None:
        op_type = OperatorType(op_type)
        if op_type not in _DENSE_TYPES:
            raise InvalidInputError(f"Invalid operator type for a dense operator: {op_type.value}")
        self._matrix = _as_square_matrix(matrix)
        self.dimension = int(self._matrix.shape[0])
        self.op_type = op_type
        if validate:
            self._validate_type()

    def _validate_type(self) -> None:
        if self.op_type is OperatorType.HERMITIAN and not self.is_hermitian():
            raise InvalidInputError("Matrix is not Hermitian")
        if self.op_type is OperatorType.UNITARY and not self.is_unitary():
            raise InvalidInputError("Matrix is not unitary")
        if self.op_type is OperatorType.PROJECTION:
            m = self._matrix
            if not bool(jnp.all(jnp.abs(m @ m - m) <= EPS_NORM)):
                raise InvalidInputError("Matrix is not a projection")

    # --- Pytree interface ---

    def tree_flatten(self) -> tuple[tuple[jax.Array], OperatorType]:
        return (self._matrix,), self.op_type

    @classmethod
    def tree_unflatten(cls, aux: OperatorType, children: tuple[jax.Array]) -> DenseOperator:
        obj = object.__new__(cls)
        obj._matrix = children[0]
        obj.dimension = int(children[0].shape[0])
        obj.op_type = aux
        return obj

    # --- Operator interface ---

    def to_matrix(self) -> jax.Array:
        return self._matrix

    def apply(self, state: StateVector) -> StateVector:
        self._check_operand(state)
        return StateVector(self.dimension, self._matrix @ state.amplitudes, state.basis)

    def compose(self, other: Operator) -> Operator:
        self._check_operand(other)
        if isinstance(other, IdentityOperator):
            return self
        if isinstance(other, DiagonalOperator):
            product = self._matrix * other.diagonal[None, :]
        else:
            product = self._matrix @ other.to_matrix()
        op_type = OperatorType.GENERAL
        if self.is_unitary_type() and other.is_unitary_type():
            op_type = OperatorType.UNITARY
        return DenseOperator(product, op_type, validate=False)

    def adjoint(self) -> DenseOperator:
        return DenseOperator(jnp.conj(self._matrix.T), self.op_type, validate=False)

    def scale(self, scalar: complex) -> DenseOperator:
        return DenseOperator(self._matrix * scalar, validate=False)

    def is_zero(self, tolerance: float = EPS_NORM) -> bool:
        return bool(jnp.all(jnp.abs(self._matrix) <= tolerance))


# ---------- IdentityOperator ----------

class IdentityOperator(Operator):
    """Identity on a space of the given dimension; nothing is stored."""

    kind = OperatorKind.IDENTITY
    op_type = OperatorType.IDENTITY

    def __init__(self, dimension: int) -> None:
        if isinstance(dimension, bool) or int(dimension) != dimension or dimension < 1:
            raise InvalidInputError(f"Dimension must be a positive integer, got {dimension!r}")
        self.dimension = int(dimension)

    def to_matrix(self) -> jax.Array:
        return jnp.eye(self.dimension, dtype=jnp.complex128)

    def apply(self, state: StateVector) -> StateVector:
        self._check_operand(state)
        return StateVector(state.dimension, state.amplitudes, state.basis)

    def compose(self, other: Operator) -> Operator:
        self._check_operand(other)
        return other

    def adjoint(self) -> IdentityOperator:
        return self

    def scale(self, scalar: complex) -> DiagonalOperator:
        return DiagonalOperator(jnp.full((self.dimension,), scalar, dtype=jnp.complex128))

    def add(self, other: Operator) -> Operator:
        self._check_operand(other)
        if isinstance(other, (IdentityOperator, DiagonalOperator)):
            return DiagonalOperator(_diagonal_of(other) + 1.0)
        return super().add(other)

    def tensor_product(self, other: Operator) -> Operator:
        if isinstance(other, IdentityOperator):
            return IdentityOperator(self.dimension * other.dimension)
        if isinstance(other, DiagonalOperator):
            return DiagonalOperator(jnp.kron(jnp.ones(self.dimension), other.diagonal))
        return super().tensor_product(other)

    def partial_trace(self, dims: Sequence[int], trace_out: Sequence[int]) -> Operator:
        dims, trace_out = _check_partial_trace(dims, self.dimension, trace_out)
        traced = int(np.prod([dims[k] for k in trace_out])) if trace_out else 1
        return DiagonalOperator(
            jnp.full((self.dimension // traced,), float(traced), dtype=jnp.complex128)
        )

    def eigen_decompose(self) -> EigenDecomposition:
        return EigenDecomposition(
            jnp.ones(self.dimension),
            StateVector.computational_basis_states(self.dimension),
        )

    def norm(self) -> float:
        return float(np.sqrt(self.dimension))

    def is_zero(self, tolerance: float = EPS_NORM) -> bool:
        return False

    def is_hermitian(self, tolerance: float = EPS_NORM) -> bool:
        return True

    def is_unitary(self, tolerance: float = EPS_NORM) -> bool:
        return True

    def trace(self) -> complex:
        return complex(self.dimension)


# ---------- DiagonalOperator ----------

@jax.tree_util.register_pytree_node_class
class DiagonalOperator(Operator):
    """Operator with only diagonal entries; stores the diagonal."""

    kind = OperatorKind.DIAGONAL
    op_type = OperatorType.DIAGONAL

    def __init__(self, diagonal: Any) -> None:
        data = jnp.asarray(diagonal, dtype=jnp.complex128)
        if data.ndim != 1 or data.shape[0] == 0:
            raise InvalidInputError(f"Diagonal must be a non-empty 1-D sequence, got shape {data.shape}")
        self._diagonal = data
        self.dimension = int(data.shape[0])

    # --- Pytree interface ---

    def tree_flatten(self) -> tuple[tuple[jax.Array], None]:
        return (self._diagonal,), None

    @classmethod
    def tree_unflatten(cls, aux: None, children: tuple[jax.Array]) -> DiagonalOperator:
        obj = object.__new__(cls)
        obj._diagonal = children[0]
        obj.dimension = int(children[0].shape[0])
        return obj

    @property
    def diagonal(self) -> jax.Array:
        return self._diagonal

    # --- Operator interface ---

    def to_matrix(self) -> jax.Array:
        return jnp.diag(self._diagonal)

    def apply(self, state: StateVector) -> StateVector:
        self._check_operand(state)
        return StateVector(self.dimension, self._diagonal * state.amplitudes, state.basis)

    def compose(self, other: Operator) -> Operator:
        self._check_operand(other)
        if isinstance(other, IdentityOperator):
            return self
        if isinstance(other, DiagonalOperator):
            return DiagonalOperator(self._diagonal * other.diagonal)
        return DenseOperator(self._diagonal[:, None] * other.to_matrix(), validate=False)

    def adjoint(self) -> DiagonalOperator:
        return DiagonalOperator(jnp.conj(self._diagonal))

    def scale(self, scalar: complex) -> DiagonalOperator:
        return DiagonalOperator(self._diagonal * scalar)

    def add(self, other: Operator) -> Operator:
        self._check_operand(other)
        if isinstance(other, (IdentityOperator, DiagonalOperator)):
            return DiagonalOperator(self._diagonal + _diagonal_of(other))
        return super().add(other)

    def tensor_product(self, other: Operator) -> Operator:
        if isinstance(other, (IdentityOperator, DiagonalOperator)):
            return DiagonalOperator(jnp.kron(self._diagonal, _diagonal_of(other)))
        return super().tensor_product(other)

    def partial_trace(self, dims: Sequence[int], trace_out: Sequence[int]) -> Operator:
        dims, trace_out = _check_partial_trace(dims, self.dimension, trace_out)
        reduced = jnp.sum(self._diagonal.reshape(dims), axis=trace_out)
        return DiagonalOperator(jnp.ravel(reduced))

    def eigen_decompose(self) -> EigenDecomposition:
        return EigenDecomposition(
            self._diagonal,
            StateVector.computational_basis_states(self.dimension),
        )

    def norm(self) -> float:
        return float(jnp.linalg.norm(self._diagonal))

    def is_zero(self, tolerance: float = EPS_NORM) -> bool:
        return bool(jnp.all(jnp.abs(self._diagonal) <= tolerance))

    def is_hermitian(self, tolerance: float = EPS_NORM) -> bool:
        return bool(jnp.all(jnp.abs(jnp.imag(self._diagonal)) <= tolerance))

    def is_unitary(self, tolerance: float = EPS_NORM) -> bool:
        return bool(jnp.all(jnp.abs(jnp.abs(self._diagonal) - 1.0) <= tolerance))

    def trace(self) -> complex:
        return complex(jnp.sum(self._diagonal))


def _diagonal_of(op: IdentityOperator | DiagonalOperator) -> jax.Array:
    if isinstance(op, IdentityOperator):
        return jnp.ones(op.dimension, dtype=jnp.complex128)
    return op.diagonal


# ---------- ProjectionOperator ----------

class ProjectionOperator(DenseOperator):
    """Rank-one projector |psi><psi| onto the normalized ``state``."""

    kind = OperatorKind.PROJECTION

    def __init__(self, state: StateVector) -> None:
        psi = state.normalize()
        super().__init__(
            jnp.outer(psi.amplitudes, jnp.conj(psi.amplitudes)),
            OperatorType.PROJECTION,
            validate=False,
        )
        self.state = psi

    def adjoint(self) -> ProjectionOperator:
        return self


# ---------- factories ----------

def identity(dimension: int) -> IdentityOperator:
    return IdentityOperator(dimension)


def zero(dimension: int) -> DenseOperator:
    return DenseOperator(jnp.zeros((dimension, dimension), dtype=jnp.complex128), validate=False)


def projector(state: StateVector) -> ProjectionOperator:
    return ProjectionOperator(state)


def create_optimized(
    matrix: Any,
    op_type: OperatorType | str = OperatorType.GENERAL,
    tol: float = EPS_STRUCTURE,
) -> Operator:
    """Return the cheapest operator variant that represents ``matrix``.

    The structural tests run once, here:

    1. every entry within ``tol`` of the identity -> IdentityOperator
    2. every off-diagonal entry within ``tol`` of zero -> DiagonalOperator
    3. otherwise DenseOperator(matrix, op_type)

    Args:
        matrix:  Square complex matrix.
        op_type: Type tag used if the dense variant is returned.
        tol:     Elementwise tolerance of the structural tests (real and
                 imaginary parts are compared separately).
    """
    data = _as_square_matrix(matrix)
    dim = data.shape[0]
    eye = jnp.eye(dim, dtype=jnp.complex128)

    def within(a: jax.Array) -> bool:
        return bool(jnp.all(jnp.abs(jnp.real(a)) <= tol) and jnp.all(jnp.abs(jnp.imag(a)) <= tol))

    if within(data - eye):
        return IdentityOperator(dim)
    if within(data * (1.0 - eye)):
        return DiagonalOperator(jnp.diagonal(data))
    return DenseOperator(data, op_type)
