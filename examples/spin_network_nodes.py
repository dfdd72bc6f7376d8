#!/usr/bin/env python3
"""Intertwiner spaces at spin-network nodes.

Enumerates the SU(2)-invariant subspace of V_j1 (x) ... (x) V_jn for a few
2-, 3- and 4-valent nodes, checks that each constructed basis is
orthonormal and annihilated by the total angular momentum, and prints the
sparse tensor form of the four spin-1/2 node.

Usage::

    uv run python examples/spin_network_nodes.py
"""

from __future__ import annotations

import jax

jax.config.update("jax_enable_x64", True)

import numpy as np

from qhilbert import (
    IdentityOperator,
    basis_to_tensor,
    calculate_dimension,
    construct_basis,
    jx,
    jy,
    jz,
)


def total_spin_residual(spins: list[float], space) -> float:
    """Largest |J_a psi| over the basis vectors and the three generators."""
    dims = [int(round(2 * j)) + 1 for j in spins]
    worst = 0.0
    for component in (jx, jy, jz):
        total = None
        for k, j in enumerate(spins):
            term = None
            for i, d in enumerate(dims):
                factor = component(j) if i == k else IdentityOperator(d)
                term = factor if term is None else term.tensor_product(factor)
            total = term if total is None else total.add(term)
        for b in space:
            worst = max(worst, total.apply(b.state_vector).norm())
    return worst


def main():
    nodes = [
        [0.5, 0.5],
        [1, 1, 1],
        [0.5, 0.5, 1],
        [0.5, 0.5, 0.5, 0.5],
        [1, 1, 1, 1],
        [0.5, 1, 1.5, 1],
        [2, 2, 2, 2],
    ]

    print(f"{'edge spins':<24s} {'dim':>4s} {'J values':<24s} {'|G - 1|':>10s} {'|J psi|':>10s}")
    print("-" * 78)
    for spins in nodes:
        space = construct_basis(spins)
        assert space.dimension == calculate_dimension(spins)
        gram_err = float(np.max(np.abs(space.gram_matrix() - np.eye(space.dimension))))
        residual = total_spin_residual(spins, space)
        js = ", ".join(f"{j:g}" for j in space.intermediate_spins)
        print(
            f"{str(spins):<24s} {space.dimension:>4d} {js:<24s} "
            f"{gram_err:>10.2e} {residual:>10.2e}"
        )

    print()
    print("Four spin-1/2 node as sparse tensors:")
    for b in construct_basis([0.5, 0.5, 0.5, 0.5]):
        t = basis_to_tensor(b)
        print(f"  {t!r}")
        for ms, amp in t.nonzero_entries():
            print(f"    m = {ms}: {amp.real:+.6f}")


if __name__ == "__main__":
    main()
