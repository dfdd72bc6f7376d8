"""State vectors over finite-dimensional Hilbert spaces.

StateVector wraps a 1-D complex128 JAX array together with an optional basis
label and a read-only properties mapping. It is immutable: every operation
returns a new vector. Code that needs to fill amplitudes one by one (basis
construction, sparsification) uses StateBuilder, which accumulates into a
mutable numpy buffer and hands out a StateVector on freeze().

StateVector is registered as a JAX pytree node, so it can be passed through
jax.jit / jax.tree_util like the tensors it is built from.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from qhilbert.core import EPS, EPS_NORM
from qhilbert.core.errors import (
    DimensionMismatchError,
    InvalidInputError,
    ZeroNormError,
)
from qhilbert.core.indexing import total_dimension


def _check_dimension(dimension: Any) -> int:
    if isinstance(dimension, bool) or int(dimension) != dimension or dimension < 1:
        raise InvalidInputError(f"Dimension must be a positive integer, got {dimension!r}")
    return int(dimension)


def _freeze_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(v) for v in value)
    if isinstance(value, np.ndarray):
        return tuple(value.tolist())
    return value


def _freeze_properties(properties: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not properties:
        return MappingProxyType({})
    return MappingProxyType({str(k): _freeze_value(v) for k, v in properties.items()})


def _leg_metadata(state: StateVector) -> tuple[tuple[int, ...], tuple[float, ...] | None]:
    """(per-leg dimensions, per-leg spins or None) as recorded in properties."""
    props = state.properties
    dims = tuple(props.get("dimensions", (state.dimension,)))
    if "edge_spins" in props:
        spins = tuple(props["edge_spins"])
    elif "j" in props:
        spins = (props["j"],)
    else:
        spins = None
    if spins is not None and len(spins) != len(dims):
        spins = None
    return dims, spins


def _format_amp(amp: complex) -> str:
    if abs(amp.imag) < EPS:
        return f"{amp.real:.4g}"
    return f"({amp.real:.4g}{amp.imag:+.4g}j)"


@jax.tree_util.register_pytree_node_class
class StateVector:
    """Ordered complex amplitudes over a Hilbert space of fixed dimension.

    Normalization is not enforced at construction; call normalize().

    Pytree structure:
        Leaves:     (amplitudes,)
        Aux data:   (dimension, basis, properties items)

    Args:
        dimension:  Hilbert space dimension (positive integer).
        amplitudes: Sequence of complex amplitudes of length ``dimension``.
                    Defaults to the zero vector.
        basis:      Optional basis label, e.g. ``"|0>"``.
        properties: Optional metadata; stored read-only.

    Example:
        >>> psi = StateVector(2, [1, 1j]).normalize()
        >>> round(psi.norm(), 12)
        1.0
    """

    def __init__(
        self,
        dimension: int,
        amplitudes: Sequence[complex] | np.ndarray | jax.Array | None = None,
        basis: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        dimension = _check_dimension(dimension)
        if amplitudes is None:
            data = jnp.zeros((dimension,), dtype=jnp.complex128)
        else:
            data = jnp.asarray(amplitudes, dtype=jnp.complex128)
            if data.ndim != 1:
                raise InvalidInputError(f"amplitudes must be 1-D, got shape {data.shape}")
            if data.shape[0] != dimension:
                raise InvalidInputError(
                    f"Expected {dimension} amplitudes, got {data.shape[0]}"
                )
        self._dimension = dimension
        self._amplitudes = data
        self._basis = basis
        self._properties = _freeze_properties(properties)

    # --- Pytree interface ---

    def tree_flatten(self) -> tuple[tuple[jax.Array], tuple[Any, ...]]:
        aux = (self._dimension, self._basis, tuple(sorted(self._properties.items())))
        return (self._amplitudes,), aux

    @classmethod
    def tree_unflatten(cls, aux: tuple[Any, ...], children: tuple[jax.Array]) -> StateVector:
        dimension, basis, items = aux
        obj = object.__new__(cls)
        obj._dimension = dimension
        obj._amplitudes = children[0]
        obj._basis = basis
        obj._properties = MappingProxyType(dict(items))
        return obj

    # --- accessors ---

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def amplitudes(self) -> jax.Array:
        return self._amplitudes

    @property
    def basis(self) -> str | None:
        return self._basis

    @property
    def properties(self) -> Mapping[str, Any]:
        return self._properties

    def __len__(self) -> int:
        return self._dimension

    def get(self, index: int) -> complex:
        """Amplitude at ``index``."""
        if not 0 <= index < self._dimension:
            raise InvalidInputError(f"Index {index} out of range for dimension {self._dimension}")
        return complex(self._amplitudes[index])

    def to_array(self) -> np.ndarray:
        """Host-side copy of the amplitudes."""
        return np.array(self._amplitudes)

    def with_metadata(
        self,
        basis: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> StateVector:
        """Same amplitudes, new basis label and/or properties."""
        return StateVector(
            self._dimension,
            self._amplitudes,
            basis if basis is not None else self._basis,
            properties if properties is not None else self._properties,
        )

    # --- algebra ---

    def _check_same_dim(self, other: StateVector) -> None:
        if self._dimension != other.dimension:
            raise DimensionMismatchError(self._dimension, other.dimension)

    def inner_product(self, other: StateVector) -> complex:
        """<self|other> = sum_i conj(self_i) * other_i."""
        self._check_same_dim(other)
        return complex(jnp.vdot(self._amplitudes, other.amplitudes))

    def norm(self) -> float:
        return float(jnp.sqrt(jnp.real(jnp.vdot(self._amplitudes, self._amplitudes))))

    def normalize(self) -> StateVector:
        """Return the vector scaled to unit norm.

        Raises:
            ZeroNormError: If the norm is below EPS_NORM.
        """
        n = self.norm()
        if n < EPS_NORM:
            raise ZeroNormError("Cannot normalize zero state vector")
        return StateVector(self._dimension, self._amplitudes / n, self._basis, self._properties)

    def tensor_product(self, other: StateVector) -> StateVector:
        """|self> (x) |other>; amplitude (i, j) sits at flat index i * other.dim + j.

        Per-factor properties do not carry over. The product records the
        concatenated ``dimensions`` of both factors, and ``edge_spins`` when
        both factors know their spins.
        """
        data = jnp.kron(self._amplitudes, other.amplitudes)
        basis = None
        if self._basis and other.basis:
            basis = f"{self._basis}⊗{other.basis}"
        dims_a, spins_a = _leg_metadata(self)
        dims_b, spins_b = _leg_metadata(other)
        properties: dict[str, Any] = {"dimensions": dims_a + dims_b}
        if spins_a is not None and spins_b is not None:
            properties["edge_spins"] = spins_a + spins_b
        return StateVector(self._dimension * other.dimension, data, basis, properties)

    def scale(self, factor: complex) -> StateVector:
        return StateVector(self._dimension, self._amplitudes * factor, self._basis, self._properties)

    def add(self, other: StateVector) -> StateVector:
        self._check_same_dim(other)
        basis = None
        if self._basis and other.basis:
            basis = f"({self._basis}) + ({other.basis})"
        return StateVector(
            self._dimension, self._amplitudes + other.amplitudes, basis, self._properties
        )

    def equals(self, other: StateVector, tolerance: float = EPS_NORM) -> bool:
        """Element-wise comparison within tolerance; False on dimension mismatch."""
        if self._dimension != other.dimension:
            return False
        return bool(jnp.all(jnp.abs(self._amplitudes - other.amplitudes) < tolerance))

    def is_zero(self, tolerance: float = EPS_NORM) -> bool:
        return bool(jnp.all(jnp.abs(self._amplitudes) < tolerance))

    def __add__(self, other: StateVector) -> StateVector:
        return self.add(other)

    def __mul__(self, factor: complex) -> StateVector:
        return self.scale(factor)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    # --- factories ---

    @classmethod
    def computational_basis(cls, dimension: int, index: int) -> StateVector:
        """The basis state |index>."""
        dimension = _check_dimension(dimension)
        if not 0 <= index < dimension:
            raise InvalidInputError(f"Index {index} out of range for dimension {dimension}")
        data = np.zeros(dimension, dtype=np.complex128)
        data[index] = 1.0
        return cls(dimension, data, f"|{index}⟩")

    @classmethod
    def computational_basis_states(cls, dimension: int) -> list[StateVector]:
        dimension = _check_dimension(dimension)
        return [cls.computational_basis(dimension, i) for i in range(dimension)]

    @classmethod
    def superposition(cls, coefficients: Sequence[complex]) -> StateVector:
        """Normalized superposition sum_i c_i |i>."""
        if len(coefficients) == 0:
            raise InvalidInputError("coefficients must be non-empty")
        return cls(len(coefficients), coefficients, "superposition").normalize()

    @classmethod
    def equal_superposition(cls, dimension: int) -> StateVector:
        dimension = _check_dimension(dimension)
        data = np.full(dimension, 1.0 / np.sqrt(dimension), dtype=np.complex128)
        return cls(dimension, data, "|+⟩")

    @classmethod
    def product(cls, states: Sequence[StateVector]) -> StateVector:
        """Tensor product of several states, left to right."""
        if not states:
            raise InvalidInputError("product() needs at least one state")
        result = states[0]
        for s in states[1:]:
            result = result.tensor_product(s)
        return result

    # --- display ---

    def __str__(self) -> str:
        amps = self.to_array()
        terms = [f"{_format_amp(a)}|{i}⟩" for i, a in enumerate(amps) if abs(a) >= EPS_NORM]
        return " + ".join(terms) if terms else "0"

    def __repr__(self) -> str:
        return f"StateVector(dimension={self._dimension}, basis={self._basis!r})"


class StateBuilder:
    """Mutable amplitude buffer that freezes into an immutable StateVector.

    Args:
        dimension:  Hilbert space dimension, or a sequence of factor
                    dimensions whose product is used.
        basis:      Basis label handed to the frozen vector.
        properties: Properties handed to the frozen vector.

    Example:
        >>> b = StateBuilder(4)
        >>> b.add(1, 0.5); b.add(1, 0.5)
        >>> b.freeze().get(1)
        (1+0j)
    """

    def __init__(
        self,
        dimension: int | Sequence[int],
        basis: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        if isinstance(dimension, Sequence):
            dimension = total_dimension(dimension)
        self.dimension = _check_dimension(dimension)
        self.basis = basis
        self.properties = dict(properties or {})
        self._buffer = np.zeros(self.dimension, dtype=np.complex128)
        self._frozen = False

    def _check_index(self, index: int) -> None:
        if self._frozen:
            raise RuntimeError("StateBuilder has already been frozen")
        if not 0 <= index < self.dimension:
            raise InvalidInputError(f"Index {index} out of range for dimension {self.dimension}")

    def set(self, index: int, value: complex) -> None:
        self._check_index(index)
        self._buffer[index] = value

    def add(self, index: int, value: complex) -> None:
        """Accumulate ``value`` into the amplitude at ``index``."""
        self._check_index(index)
        self._buffer[index] += value

    def norm(self) -> float:
        return float(np.linalg.norm(self._buffer))

    def freeze(self) -> StateVector:
        """Return the finished StateVector; the builder rejects writes afterwards."""
        self._frozen = True
        return StateVector(self.dimension, self._buffer.copy(), self.basis, self.properties)
