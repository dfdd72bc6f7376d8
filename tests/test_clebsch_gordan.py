"""Tests for Clebsch-Gordan coefficients and Wigner symbols."""

import math

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from qhilbert.angular.clebsch_gordan import clebsch_gordan, wigner_3j, wigner_6j
from qhilbert.core.indexing import m_values

half_integers = st.integers(0, 6).map(lambda n: n / 2)


class TestClebschGordan:
    def test_triplet_m0(self):
        assert clebsch_gordan(0.5, 0.5, 0.5, -0.5, 1, 0) == pytest.approx(1 / math.sqrt(2))

    def test_selection_rule_m(self):
        assert clebsch_gordan(0.5, 0.5, 0.5, 0.5, 0, 0) == 0

    def test_singlet_signs(self):
        assert clebsch_gordan(0.5, 0.5, 0.5, -0.5, 0, 0) == pytest.approx(1 / math.sqrt(2))
        assert clebsch_gordan(0.5, -0.5, 0.5, 0.5, 0, 0) == pytest.approx(-1 / math.sqrt(2))

    def test_stretched_state_is_one(self):
        assert clebsch_gordan(1, 1, 1.5, 1.5, 2.5, 2.5) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "args, expected",
        [
            ((1, 1, 1, -1, 2, 0), 1 / math.sqrt(6)),
            ((1, 0, 1, 0, 2, 0), math.sqrt(2 / 3)),
            ((1, 0, 1, 0, 0, 0), -1 / math.sqrt(3)),
            ((1, 1, 1, -1, 1, 0), 1 / math.sqrt(2)),
            ((1, 0, 1, 0, 1, 0), 0.0),
            ((1, 1, 0.5, -0.5, 0.5, 0.5), math.sqrt(2 / 3)),
            ((1, 0, 0.5, 0.5, 0.5, 0.5), -1 / math.sqrt(3)),
        ],
    )
    def test_tabulated_values(self, args, expected):
        assert clebsch_gordan(*args) == pytest.approx(expected, abs=1e-12)

    @pytest.mark.parametrize(
        "args",
        [
            (0.5, 0.5, 0.5, 0.5, 2, 1),     # triangle violated
            (1, 2, 1, 0, 2, 2),             # |m1| > j1
            (0.5, 0.5, 0.5, -0.5, 0.5, 0),  # j1 + j2 + j3 not integral
            (1, 0.5, 1, 0, 1, 0.5),         # j1 - m1 not integral
            (0.3, 0.3, 0.5, 0.5, 1, 0.8),   # not half-integers
        ],
    )
    def test_forbidden_is_zero(self, args):
        assert clebsch_gordan(*args) == 0

    @given(half_integers, half_integers)
    @settings(max_examples=40, deadline=None)
    def test_orthogonality(self, j1, j2):
        # sum_{m1,m2} <j1 m1 j2 m2|J M><j1 m1 j2 m2|J' M'> = delta_JJ' delta_MM'
        Js = [abs(j1 - j2) + k for k in range(int(round(2 * min(j1, j2))) + 1)]
        coupled = [(J, M) for J in Js for M in m_values(J)]
        rows = np.array(
            [
                [clebsch_gordan(j1, m1, j2, m2, J, M) for (J, M) in coupled]
                for m1 in m_values(j1)
                for m2 in m_values(j2)
            ]
        )
        assert rows.shape[0] == rows.shape[1]
        np.testing.assert_allclose(rows.T @ rows, np.eye(len(coupled)), atol=1e-10)
        np.testing.assert_allclose(rows @ rows.T, np.eye(rows.shape[0]), atol=1e-10)

    @given(half_integers, half_integers, half_integers)
    @settings(max_examples=60, deadline=None)
    def test_exchange_symmetry(self, j1, j2, J):
        # <j1 m1 j2 m2|J M> = (-1)^(j1+j2-J) <j2 m2 j1 m1|J M>
        if not float(j1 + j2 - J).is_integer():
            return
        sign = (-1) ** int(round(j1 + j2 - J))
        for m1 in m_values(j1):
            for m2 in m_values(j2):
                a = clebsch_gordan(j1, m1, j2, m2, J, m1 + m2)
                b = clebsch_gordan(j2, m2, j1, m1, J, m1 + m2)
                assert a == pytest.approx(sign * b, abs=1e-12)

    def test_large_spin_stable(self):
        total = sum(clebsch_gordan(2, m1, 2, -m1, 0, 0) ** 2 for m1 in m_values(2))
        assert total == pytest.approx(1.0, abs=1e-12)


class TestWigner3j:
    def test_relation_to_cg(self):
        # phase (-1)^(j1 - j2 - m3) = (-1)^1
        expected = -1 / math.sqrt(3) * clebsch_gordan(0.5, 0.5, 0.5, 0.5, 1, 1)
        assert wigner_3j(0.5, 0.5, 1, 0.5, 0.5, -1) == pytest.approx(expected)
        assert expected == pytest.approx(-1 / math.sqrt(3))

    def test_known_value(self):
        # (1 1 0; 0 0 0) = -1/sqrt(3)
        assert wigner_3j(1, 1, 0, 0, 0, 0) == pytest.approx(-1 / math.sqrt(3))

    def test_m_sum_nonzero_is_zero(self):
        assert wigner_3j(1, 1, 1, 1, 0, 0) == 0

    def test_odd_row_with_zero_ms_vanishes(self):
        # (j1 j2 j3; 0 0 0) = 0 when j1 + j2 + j3 is odd
        assert wigner_3j(1, 1, 1, 0, 0, 0) == pytest.approx(0.0, abs=1e-15)

    @given(half_integers, half_integers, half_integers)
    @settings(max_examples=60, deadline=None)
    def test_normalization(self, j1, j2, j3):
        # sum_{m1,m2} (3j)^2 = 1 for an admissible triad
        if not (abs(j1 - j2) <= j3 <= j1 + j2 and float(j1 + j2 + j3).is_integer()):
            return
        total = sum(
            wigner_3j(j1, j2, j3, m1, m2, -m1 - m2) ** 2
            for m1 in m_values(j1)
            for m2 in m_values(j2)
        )
        assert total == pytest.approx(1.0, abs=1e-10)

    @given(half_integers, half_integers, half_integers)
    @settings(max_examples=60, deadline=None)
    def test_cyclic_symmetry(self, j1, j2, j3):
        for m1 in m_values(j1):
            for m2 in m_values(j2):
                m3 = -m1 - m2
                a = wigner_3j(j1, j2, j3, m1, m2, m3)
                b = wigner_3j(j2, j3, j1, m2, m3, m1)
                assert a == pytest.approx(b, abs=1e-12)


class TestWigner6j:
    def test_spin_half_value(self):
        assert wigner_6j(0.5, 0.5, 1, 0.5, 0.5, 0) == pytest.approx(0.5)

    @pytest.mark.parametrize("a, b", [(0.5, 0.5), (1, 1), (1, 0.5), (2, 1.5)])
    def test_zero_column_formula(self, a, b):
        # {a b c; b a 0} = (-1)^(a+b+c) / sqrt((2a+1)(2b+1))
        for c in np.arange(abs(a - b), a + b + 0.5, 1.0):
            expected = (-1) ** int(round(a + b + c)) / math.sqrt((2 * a + 1) * (2 * b + 1))
            assert wigner_6j(a, b, c, b, a, 0) == pytest.approx(expected, abs=1e-12)

    def test_forbidden_triad_is_zero(self):
        assert wigner_6j(0.5, 0.5, 2, 0.5, 0.5, 0) == 0

    @given(half_integers, half_integers, half_integers)
    @settings(max_examples=40, deadline=None)
    def test_orthogonality(self, j1, j2, j4):
        # sum_j3 (2 j3 + 1)(2 j6 + 1) {j1 j2 j3; j4 j5 j6}{j1 j2 j3; j4 j5 j6'} = delta_{j6 j6'}
        j5 = j4
        j3s = [abs(j1 - j2) + k for k in range(int(round(2 * min(j1, j2))) + 1)]
        j6s = [abs(j1 - j5) + k for k in range(int(round(2 * min(j1, j5))) + 1)]
        j6s = [j6 for j6 in j6s if abs(j4 - j2) <= j6 <= j4 + j2 and float(j4 + j2 + j6).is_integer()]
        for j6 in j6s:
            for j6p in j6s:
                total = sum(
                    (2 * j3 + 1) * (2 * j6 + 1)
                    * wigner_6j(j1, j2, j3, j4, j5, j6)
                    * wigner_6j(j1, j2, j3, j4, j5, j6p)
                    for j3 in j3s
                )
                assert total == pytest.approx(1.0 if j6 == j6p else 0.0, abs=1e-10)
