"""Shared fixtures for the qhilbert test suite."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from qhilbert.core.state import StateVector
from qhilbert.core.symmetry import SU2Symmetry, U1Symmetry

# ------------------------------------------------------------------ #
# Symmetry fixtures                                                    #
# ------------------------------------------------------------------ #

@pytest.fixture
def u1():
    return U1Symmetry()


@pytest.fixture
def su2():
    return SU2Symmetry()


# ------------------------------------------------------------------ #
# Random key fixture                                                   #
# ------------------------------------------------------------------ #

@pytest.fixture
def rng():
    return jax.random.PRNGKey(42)


@pytest.fixture
def rng2():
    return jax.random.PRNGKey(99)


def _random_complex(key, shape):
    kr, ki = jax.random.split(key)
    return jax.random.normal(kr, shape) + 1j * jax.random.normal(ki, shape)


@pytest.fixture
def random_complex():
    """Factory: standard complex Gaussian array for (key, shape)."""
    return _random_complex


@pytest.fixture
def random_state():
    """Factory: unnormalized random StateVector for (key, dim)."""
    def make(key, dim):
        return StateVector(dim, _random_complex(key, (dim,)))
    return make


@pytest.fixture
def random_hermitian():
    """Factory: random Hermitian matrix for (key, dim)."""
    def make(key, dim):
        a = _random_complex(key, (dim, dim))
        return (a + jnp.conj(a.T)) / 2
    return make


# ------------------------------------------------------------------ #
# State fixtures                                                       #
# ------------------------------------------------------------------ #

@pytest.fixture
def ket0():
    return StateVector.computational_basis(2, 0)


@pytest.fixture
def ket1():
    return StateVector.computational_basis(2, 1)


@pytest.fixture
def plus():
    """(|0> + |1>) / sqrt(2)."""
    return StateVector.superposition([1, 1])


@pytest.fixture
def bell():
    """(|00> + |11>) / sqrt(2)."""
    return StateVector(4, np.array([1, 0, 0, 1]) / np.sqrt(2))


# ------------------------------------------------------------------ #
# Operator matrices                                                    #
# ------------------------------------------------------------------ #

@pytest.fixture
def pauli_x():
    return np.array([[0, 1], [1, 0]], dtype=np.complex128)


@pytest.fixture
def pauli_y():
    return np.array([[0, -1j], [1j, 0]], dtype=np.complex128)


@pytest.fixture
def pauli_z():
    return np.array([[1, 0], [0, -1]], dtype=np.complex128)


@pytest.fixture
def hadamard():
    return np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)
