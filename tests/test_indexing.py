"""Tests for the flattening convention and spin index helpers."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from qhilbert.core.errors import InvalidInputError
from qhilbert.core.indexing import (
    is_half_integer,
    m_index,
    m_values,
    ravel_multi_index,
    spin_dim,
    spin_flat_index,
    total_dimension,
    unravel_index,
)


class TestRavel:
    def test_rightmost_fastest(self):
        assert ravel_multi_index((0, 1), (2, 3)) == 1
        assert ravel_multi_index((1, 0), (2, 3)) == 3
        assert ravel_multi_index((1, 2), (2, 3)) == 5

    def test_matches_kron_order(self):
        a = np.array([1.0, 2.0])
        b = np.array([10.0, 20.0, 30.0])
        k = np.kron(a, b)
        for i in range(2):
            for j in range(3):
                assert k[ravel_multi_index((i, j), (2, 3))] == a[i] * b[j]

    def test_state_tensor_product_follows_ravel(self):
        from qhilbert.core.state import StateVector

        a = StateVector(2, [1, 2])
        b = StateVector(3, [10, 20, 30])
        c = StateVector(2, [5, 7])
        abc = StateVector.product([a, b, c])
        for coords in np.ndindex(2, 3, 2):
            expected = a.get(coords[0]) * b.get(coords[1]) * c.get(coords[2])
            assert abc.get(ravel_multi_index(coords, (2, 3, 2))) == expected

    def test_partial_trace_follows_ravel(self):
        from qhilbert.core.operator import DenseOperator

        dims = (2, 3)
        m = np.arange(36, dtype=np.complex128).reshape(6, 6)
        reduced = np.asarray(DenseOperator(m).partial_trace(dims, [1]).to_matrix())
        for i in range(2):
            for k in range(2):
                expected = sum(
                    m[ravel_multi_index((i, j), dims), ravel_multi_index((k, j), dims)]
                    for j in range(3)
                )
                assert reduced[i, k] == expected

    def test_unravel_inverse(self):
        dims = (2, 3, 4)
        for flat in range(total_dimension(dims)):
            assert ravel_multi_index(unravel_index(flat, dims), dims) == flat

    def test_out_of_range_raises(self):
        with pytest.raises(InvalidInputError):
            ravel_multi_index((2, 0), (2, 3))
        with pytest.raises(InvalidInputError):
            unravel_index(6, (2, 3))

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidInputError):
            ravel_multi_index((0,), (2, 3))

    def test_invalid_dims_raise(self):
        with pytest.raises(InvalidInputError):
            total_dimension([2, 0])
        with pytest.raises(InvalidInputError):
            total_dimension([])

    @given(st.lists(st.integers(1, 5), min_size=1, max_size=4), st.data())
    @settings(max_examples=50)
    def test_roundtrip_property(self, dims, data):
        coords = tuple(data.draw(st.integers(0, d - 1)) for d in dims)
        assert unravel_index(ravel_multi_index(coords, dims), dims) == coords


class TestSpinHelpers:
    def test_m_values_descending(self):
        assert m_values(1) == [1, 0, -1]
        assert m_values(0.5) == [0.5, -0.5]
        assert m_values(0) == [0]

    def test_spin_dim(self):
        assert spin_dim(0) == 1
        assert spin_dim(0.5) == 2
        assert spin_dim(2) == 5

    def test_m_index(self):
        assert m_index(1.5, 1.5) == 0
        assert m_index(1.5, -1.5) == 3

    def test_m_index_invalid(self):
        with pytest.raises(InvalidInputError):
            m_index(1, 2)
        with pytest.raises(InvalidInputError):
            m_index(1, 0.5)

    def test_is_half_integer(self):
        assert is_half_integer(1.5)
        assert is_half_integer(2)
        assert not is_half_integer(0.3)

    def test_spin_flat_index(self):
        # |up, down> for two spin-1/2 legs
        assert spin_flat_index((0.5, -0.5), (0.5, 0.5)) == 1
        # |m=-1> on spin-1, |m=1/2> on spin-1/2
        assert spin_flat_index((-1, 0.5), (1, 0.5)) == 4
