#!/usr/bin/env python3
"""Entanglement of a Bell pair.

Prepares (|00> + |11>)/sqrt(2) by applying H (x) I and then CNOT to |00>,
traces out the second qubit, and reports the purity, von Neumann entropy
and fidelity with I/2 of the reduced state. Also shows the identity/diagonal
fast paths picked by create_optimized().

Usage::

    uv run python examples/bell_pair.py
"""

from __future__ import annotations

import jax

jax.config.update("jax_enable_x64", True)

import numpy as np

from qhilbert import (
    DenseOperator,
    DensityMatrix,
    IdentityOperator,
    OperatorType,
    StateVector,
    create_optimized,
    entanglement_entropy,
    fidelity,
)


def main():
    h = DenseOperator(np.array([[1, 1], [1, -1]]) / np.sqrt(2), OperatorType.UNITARY)
    cnot = DenseOperator(
        np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]]),
        OperatorType.UNITARY,
    )

    ket00 = StateVector.computational_basis(4, 0)
    circuit = cnot.compose(h.tensor_product(IdentityOperator(2)))
    bell = circuit.apply(ket00)
    print(f"Bell state: {bell}")

    rho = DensityMatrix.from_pure_state(bell)
    reduced = rho.partial_trace([2, 2], [1])
    print(f"Reduced state:\n{np.round(reduced.to_matrix(), 6)}")
    print(f"Purity:  {reduced.purity():.6f}  (1/2 for maximal entanglement)")
    print(f"Entropy: {reduced.von_neumann_entropy():.6f}  (ln 2 = {np.log(2):.6f})")
    print(f"entanglement_entropy(bell, [2, 2]) = {entanglement_entropy(bell, [2, 2]):.6f}")
    print(f"Fidelity with I/2: {fidelity(reduced, DensityMatrix(np.eye(2) / 2)):.6f}")

    print()
    for name, matrix in [
        ("identity", np.eye(4)),
        ("Z (x) Z", np.diag([1, -1, -1, 1])),
        ("CNOT", cnot.to_matrix()),
    ]:
        op = create_optimized(matrix)
        print(f"create_optimized({name:<8s}) -> {type(op).__name__}")


if __name__ == "__main__":
    main()
