"""Tests for the symmetry module."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.extra import numpy as hnp

from qhilbert.angular.clebsch_gordan import clebsch_gordan
from qhilbert.core.errors import InvalidInputError
from qhilbert.core.symmetry import (
    BaseNonAbelianSymmetry,
    BaseSymmetry,
    SU2Symmetry,
    U1Symmetry,
)


class TestU1Symmetry:
    def test_fuse_addition(self):
        sym = U1Symmetry()
        a = np.array([0, 1, -1], dtype=np.int32)
        b = np.array([1, -1, 2], dtype=np.int32)
        np.testing.assert_array_equal(sym.fuse(a, b), a + b)

    def test_identity_is_zero(self):
        assert U1Symmetry().identity() == 0

    def test_allowed_fusions_single(self):
        assert U1Symmetry().allowed_fusions(1, -3) == [-2]

    def test_fuse_many(self):
        sym = U1Symmetry()
        a = np.array([1, 2], dtype=np.int32)
        b = np.array([3, 4], dtype=np.int32)
        c = np.array([-4, -6], dtype=np.int32)
        np.testing.assert_array_equal(sym.fuse_many([a, b, c]), a + b + c)

    def test_fuse_many_empty_raises(self):
        with pytest.raises(InvalidInputError):
            U1Symmetry().fuse_many([])

    def test_equality_and_hash(self):
        assert U1Symmetry() == U1Symmetry()
        assert U1Symmetry() != SU2Symmetry()
        assert hash(U1Symmetry()) == hash(U1Symmetry())

    def test_repr(self):
        assert repr(U1Symmetry()) == "U1Symmetry()"

    @given(hnp.arrays(np.int32, st.integers(1, 10), elements=st.integers(-1000, 1000)))
    @settings(max_examples=100)
    def test_fuse_with_negation_is_identity(self, a):
        sym = U1Symmetry()
        np.testing.assert_array_equal(sym.fuse_many([a, -a]), np.zeros_like(a))


class TestSU2Symmetry:
    def test_is_base_non_abelian(self):
        sym = SU2Symmetry()
        assert isinstance(sym, BaseNonAbelianSymmetry)
        assert isinstance(sym, BaseSymmetry)

    def test_irrep_dim(self):
        sym = SU2Symmetry()
        assert sym.irrep_dim(0) == 1
        assert sym.irrep_dim(1) == 2
        assert sym.irrep_dim(4) == 5

    def test_allowed_fusions_spin_half(self):
        assert SU2Symmetry().allowed_fusions(1, 1) == [0, 2]

    def test_allowed_fusions_spin_one_half(self):
        # 1 x 1/2 = 1/2 + 3/2
        assert SU2Symmetry().allowed_fusions(2, 1) == [1, 3]

    @pytest.mark.parametrize(
        "a, b, c, expected",
        [
            (1, 1, 0, True),
            (1, 1, 2, True),
            (1, 1, 1, False),   # odd total: 1/2 + 1/2 + 1/2
            (2, 2, 4, True),
            (2, 2, 6, False),   # triangle violated
            (0, 0, 0, True),
        ],
    )
    def test_is_admissible(self, a, b, c, expected):
        assert SU2Symmetry().is_admissible(a, b, c) is expected

    def test_recoupling_shape(self):
        cg = SU2Symmetry().recoupling_coefficients(1, 2, 3)
        assert cg.shape == (2, 3, 4)

    def test_recoupling_matches_cg(self):
        cg = SU2Symmetry().recoupling_coefficients(1, 1, 2)
        # index 0 is m = +1/2, index 1 is m = -1/2; target index 1 is M = 0
        np.testing.assert_allclose(cg[0, 1, 1], clebsch_gordan(0.5, 0.5, 0.5, -0.5, 1, 0))
        np.testing.assert_allclose(cg[0, 1, 1], 1 / np.sqrt(2))

    def test_recoupling_isometry(self):
        # sum over (m1, m2) of C C = delta over the coupled basis
        cg = SU2Symmetry().recoupling_coefficients(2, 1, 3)
        gram = np.einsum("ikl,ikn->ln", cg, cg)
        np.testing.assert_allclose(gram, np.eye(4), atol=1e-12)

    def test_recoupling_forbidden_is_zero(self):
        cg = SU2Symmetry().recoupling_coefficients(1, 1, 1)
        assert not np.any(cg)

    def test_equality_and_hash(self):
        assert SU2Symmetry() == SU2Symmetry()
        assert hash(SU2Symmetry()) == hash(SU2Symmetry())

    @given(st.integers(0, 6), st.integers(0, 6))
    @settings(max_examples=50)
    def test_fusion_dimension_count(self, a, b):
        # (2ja+1)(2jb+1) = sum over c of (2jc+1)
        sym = SU2Symmetry()
        total = sum(sym.irrep_dim(c) for c in sym.allowed_fusions(a, b))
        assert total == sym.irrep_dim(a) * sym.irrep_dim(b)
