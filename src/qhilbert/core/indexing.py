"""Flattening convention for tensor-product Hilbert spaces.

There is exactly one convention in qhilbert: row-major, the leftmost factor
varies slowest and the rightmost fastest. For factors of dimensions
``(d0, d1, ..., dn)`` the multi-index ``(i0, i1, ..., in)`` maps to::

    i0 * (d1 * ... * dn) + i1 * (d2 * ... * dn) + ... + in

The intertwiner coefficient builders and tensor views use the helpers below.
StateVector.tensor_product and Operator.tensor_product use ``jnp.kron`` and
partial_trace uses a C-order ``reshape``; both lay out entries in this same
order, which tests/test_indexing.py checks against ravel_multi_index.

Spin legs use the basis order ``m = j, j-1, ..., -j``, so the local index of
magnetic number m on a spin-j leg is ``j - m``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from qhilbert.core.errors import InvalidInputError

# Tolerance used when deciding whether a float is an integer/half-integer.
SPIN_TOL = 1e-10


def _check_dims(dims: Sequence[int]) -> tuple[int, ...]:
    if len(dims) == 0:
        raise InvalidInputError("dims must be non-empty")
    out = []
    for i, d in enumerate(dims):
        if int(d) != d or d < 1:
            raise InvalidInputError(f"Invalid dimension at position {i}: {d!r}")
        out.append(int(d))
    return tuple(out)


def ravel_multi_index(coords: Sequence[int], dims: Sequence[int]) -> int:
    """Map a multi-index to its flat position (rightmost factor fastest).

    Args:
        coords: One local index per factor.
        dims:   Dimension of each factor.

    Returns:
        Flat index in ``range(prod(dims))``.

    Raises:
        InvalidInputError: On length mismatch or an out-of-range coordinate.
    """
    dims = _check_dims(dims)
    if len(coords) != len(dims):
        raise InvalidInputError(
            f"coords has {len(coords)} entries but dims has {len(dims)}"
        )
    for i, (c, d) in enumerate(zip(coords, dims)):
        if not 0 <= c < d:
            raise InvalidInputError(f"coordinate {c} out of range for factor {i} (dim {d})")
    return int(np.ravel_multi_index(tuple(int(c) for c in coords), dims))


def unravel_index(flat: int, dims: Sequence[int]) -> tuple[int, ...]:
    """Inverse of :func:`ravel_multi_index`."""
    dims = _check_dims(dims)
    total = int(np.prod(dims))
    if not 0 <= flat < total:
        raise InvalidInputError(f"flat index {flat} out of range for total dimension {total}")
    return tuple(int(c) for c in np.unravel_index(int(flat), dims))


def total_dimension(dims: Sequence[int]) -> int:
    """Product of factor dimensions."""
    return int(np.prod(_check_dims(dims)))


# ---------- spin helpers ----------

def is_half_integer(x: float, tol: float = SPIN_TOL) -> bool:
    """True if 2x is an integer (x is an integer or a half-integer)."""
    return abs(2 * x - round(2 * x)) < tol


def is_integer(x: float, tol: float = SPIN_TOL) -> bool:
    return abs(x - round(x)) < tol


def twice(j: float) -> int:
    """Return 2j as an int (irrep label used by SU2Symmetry)."""
    return int(round(2 * j))


def spin_dim(j: float) -> int:
    """Dimension 2j + 1 of the spin-j irrep."""
    return twice(j) + 1


def m_values(j: float) -> list[float]:
    """Magnetic numbers of a spin-j leg in basis order ``j, j-1, ..., -j``."""
    return [j - k for k in range(spin_dim(j))]


def m_index(j: float, m: float) -> int:
    """Local basis index of magnetic number m on a spin-j leg."""
    idx = int(round(j - m))
    if not 0 <= idx < spin_dim(j) or not is_integer(j - m):
        raise InvalidInputError(f"m={m} is not a valid magnetic number for j={j}")
    return idx


def spin_flat_index(ms: Sequence[float], js: Sequence[float]) -> int:
    """Flat tensor-product index of the product state ``|j0 m0> ... |jn mn>``."""
    if len(ms) != len(js):
        raise InvalidInputError(
            f"got {len(ms)} magnetic numbers for {len(js)} spins"
        )
    coords = [m_index(j, m) for j, m in zip(js, ms)]
    return ravel_multi_index(coords, [spin_dim(j) for j in js])
