"""Tests for angular-momentum states and operators."""

import numpy as np
import pytest

from qhilbert.algebra import commutator
from qhilbert.angular.spin_ops import (
    coupled_state,
    j_squared,
    jm_state,
    jminus,
    jplus,
    jx,
    jy,
    jz,
)
from qhilbert.core.errors import InvalidInputError
from qhilbert.core.operator import DiagonalOperator, IdentityOperator

SPINS = [0.5, 1, 1.5, 2]


class TestJmState:
    def test_basis_order(self):
        np.testing.assert_array_equal(jm_state(1, 1).to_array(), [1, 0, 0])
        np.testing.assert_array_equal(jm_state(1, -1).to_array(), [0, 0, 1])

    def test_properties(self):
        s = jm_state(1.5, 0.5)
        assert s.properties["j"] == 1.5
        assert s.properties["m"] == 0.5

    @pytest.mark.parametrize("j, m", [(1, 2), (1, 0.5), (-1, 0), (0.3, 0.3)])
    def test_invalid(self, j, m):
        with pytest.raises(InvalidInputError):
            jm_state(j, m)


class TestOperators:
    @pytest.mark.parametrize("j", SPINS)
    def test_jz_eigenstates(self, j):
        op = jz(j)
        assert isinstance(op, DiagonalOperator)
        m = j - 1
        if m >= -j:
            assert op.apply(jm_state(j, m)).equals(jm_state(j, m).scale(m))

    @pytest.mark.parametrize("j", SPINS)
    def test_ladder_action(self, j):
        m = -j
        expected = np.sqrt(j * (j + 1) - m * (m + 1))
        out = jplus(j).apply(jm_state(j, m))
        assert out.equals(jm_state(j, m + 1).scale(expected))
        assert jplus(j).apply(jm_state(j, j)).is_zero()
        assert jminus(j).apply(jm_state(j, -j)).is_zero()

    @pytest.mark.parametrize("j", SPINS)
    def test_jminus_is_adjoint_of_jplus(self, j):
        np.testing.assert_allclose(jminus(j).to_matrix(), jplus(j).adjoint().to_matrix())

    @pytest.mark.parametrize("j", SPINS)
    def test_j_squared_from_components(self, j):
        total = jx(j).compose(jx(j)).add(jy(j).compose(jy(j))).add(jz(j).compose(jz(j)))
        np.testing.assert_allclose(total.to_matrix(), j_squared(j).to_matrix(), atol=1e-12)

    @pytest.mark.parametrize("j", SPINS)
    def test_commutation_relation(self, j):
        # [Jx, Jy] = i Jz
        lhs = commutator(jx(j), jy(j))
        np.testing.assert_allclose(lhs.to_matrix(), 1j * jz(j).to_matrix(), atol=1e-12)

    def test_spin_half_is_half_pauli(self, pauli_x, pauli_y, pauli_z):
        np.testing.assert_allclose(jx(0.5).to_matrix(), pauli_x / 2)
        np.testing.assert_allclose(jy(0.5).to_matrix(), pauli_y / 2)
        np.testing.assert_allclose(jz(0.5).to_matrix(), pauli_z / 2)

    def test_hermitian(self):
        for j in SPINS:
            assert jx(j).is_hermitian()
            assert jy(j).is_hermitian()

    def test_invalid_spin(self):
        with pytest.raises(InvalidInputError):
            jz(0.25)


class TestCoupledState:
    def test_triplet_zero(self):
        s = coupled_state(0.5, 0.5, 1, 0)
        np.testing.assert_allclose(s.to_array(), [0, 1 / np.sqrt(2), 1 / np.sqrt(2), 0])

    def test_singlet(self):
        s = coupled_state(0.5, 0.5, 0, 0)
        np.testing.assert_allclose(s.to_array(), [0, 1 / np.sqrt(2), -1 / np.sqrt(2), 0])

    @pytest.mark.parametrize("j1, j2", [(0.5, 0.5), (1, 0.5), (1, 1), (1.5, 1)])
    def test_total_spin_eigenstates(self, j1, j2):
        # J_total^2 |j m> = j(j+1) |j m>
        jx_t = jx(j1).tensor_product(_eye(j2)).add(_eye(j1).tensor_product(jx(j2)))
        jy_t = jy(j1).tensor_product(_eye(j2)).add(_eye(j1).tensor_product(jy(j2)))
        jz_t = jz(j1).tensor_product(_eye(j2)).add(_eye(j1).tensor_product(jz(j2)))
        j2_total = jx_t.compose(jx_t).add(jy_t.compose(jy_t)).add(jz_t.compose(jz_t))
        j = abs(j1 - j2)
        while j <= j1 + j2:
            for m in (j, -j):
                s = coupled_state(j1, j2, j, m)
                assert s.norm() == pytest.approx(1.0)
                assert j2_total.apply(s).equals(s.scale(j * (j + 1)), tolerance=1e-10)
            j += 1

    def test_unreachable_j(self):
        with pytest.raises(InvalidInputError):
            coupled_state(0.5, 0.5, 2, 0)
        with pytest.raises(InvalidInputError):
            coupled_state(0.5, 0.5, 0.5, 0.5)


def _eye(j):
    return IdentityOperator(int(round(2 * j)) + 1)


class TestCoupledStateMetadata:
    def test_leg_properties(self):
        s = coupled_state(1, 0.5, 1.5, 0.5)
        assert s.properties["dimensions"] == (3, 2)
        assert s.properties["edge_spins"] == (1, 0.5)

    def test_matches_su2_recoupling_column(self, su2):
        cg = su2.recoupling_coefficients(2, 1, 1)
        s = coupled_state(1, 0.5, 0.5, -0.5)
        np.testing.assert_allclose(s.to_array(), cg[:, :, 1].ravel())

    def test_product_with_single_spin_keeps_spins(self):
        s = coupled_state(0.5, 0.5, 1, 1).tensor_product(jm_state(1, 0))
        assert s.properties["dimensions"] == (2, 2, 3)
        assert s.properties["edge_spins"] == (0.5, 0.5, 1)
