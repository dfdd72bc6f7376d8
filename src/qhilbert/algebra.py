"""Operator algebra: commutators, expectation values and uncertainty.

- commutator / anti_commutator: [A, B] = AB - BA and {A, B} = AB + BA
- operators_commute:            [A, B] vanishes within tolerance
- expectation_value:            <psi|A|psi> on the normalized state
- uncertainty_product:          Delta A * Delta B, bounded below by
                                robertson_bound = |<[A, B]>| / 2
"""

from __future__ import annotations

import jax.numpy as jnp
import numpy as np

from qhilbert.core import EPS_NORM
from qhilbert.core.errors import DimensionMismatchError
from qhilbert.core.operator import DenseOperator, Operator, OperatorType
from qhilbert.core.state import StateVector


def _check_pair(a: Operator, b: Operator | StateVector) -> None:
    if a.dimension != b.dimension:
        raise DimensionMismatchError(a.dimension, b.dimension)


def commutator(a: Operator, b: Operator) -> DenseOperator:
    """[A, B] = AB - BA.

    Raises:
        DimensionMismatchError: If A and B act on different spaces.

    Example:
        >>> commutator(jx(1), jy(1)).to_matrix()    # == 1j * jz(1)
    """
    _check_pair(a, b)
    ma, mb = a.to_matrix(), b.to_matrix()
    return DenseOperator(ma @ mb - mb @ ma, validate=False)


def anti_commutator(a: Operator, b: Operator) -> DenseOperator:
    """{A, B} = AB + BA; Hermitian whenever A and B are."""
    _check_pair(a, b)
    ma, mb = a.to_matrix(), b.to_matrix()
    op_type = OperatorType.GENERAL
    if a.is_hermitian() and b.is_hermitian():
        op_type = OperatorType.HERMITIAN
    return DenseOperator(ma @ mb + mb @ ma, op_type, validate=False)


def operators_commute(a: Operator, b: Operator, tolerance: float = EPS_NORM) -> bool:
    """True if every entry of [A, B] is within ``tolerance`` of zero."""
    return commutator(a, b).is_zero(tolerance)


def is_normal(a: Operator, tolerance: float = EPS_NORM) -> bool:
    """True if A commutes with its adjoint."""
    return operators_commute(a, a.adjoint(), tolerance)


def expectation_value(op: Operator, state: StateVector) -> complex:
    """<psi|A|psi> / <psi|psi>.

    Raises:
        DimensionMismatchError: If the operator and state dimensions differ.
        ZeroNormError:          If the state is numerically zero.
    """
    _check_pair(op, state)
    psi = state.normalize()
    return psi.inner_product(op.apply(psi))


def commutator_expectation(a: Operator, b: Operator, state: StateVector) -> complex:
    """<psi|[A, B]|psi> on the normalized state."""
    return expectation_value(commutator(a, b), state)


def _spread(op: Operator, psi: StateVector) -> float:
    # Var A = <A^dag A> - |<A>|^2, i.e. ||A psi||^2 - |<psi|A psi>|^2
    a_psi = op.apply(psi)
    mean = psi.inner_product(a_psi)
    variance = a_psi.norm() ** 2 - abs(mean) ** 2
    return float(np.sqrt(max(0.0, variance)))


def uncertainty_product(a: Operator, b: Operator, state: StateVector) -> float:
    """Delta A * Delta B for the normalized ``state``.

    For Hermitian A and B this satisfies the Robertson relation
    ``uncertainty_product(a, b, psi) >= robertson_bound(a, b, psi)``.

    Raises:
        DimensionMismatchError: If the operators and state do not share a dimension.
        ZeroNormError:          If the state is numerically zero.
    """
    _check_pair(a, b)
    _check_pair(a, state)
    psi = state.normalize()
    return _spread(a, psi) * _spread(b, psi)


def robertson_bound(a: Operator, b: Operator, state: StateVector) -> float:
    """|<[A, B]>| / 2, the lower bound on Delta A * Delta B."""
    return float(jnp.abs(commutator_expectation(a, b, state))) / 2
