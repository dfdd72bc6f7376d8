"""Leg metadata for tensors living on spin-network edges.

Each leg of an intertwiner tensor is described by a TensorIndex, which carries:
- The symmetry group governing charges on this leg
- The charge of each basis state along this leg (2m for a spin leg)
- The flow direction (incoming/outgoing)
- A label identifying the edge
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from qhilbert.core.indexing import is_half_integer, m_values
from qhilbert.core.errors import InvalidInputError
from qhilbert.core.symmetry import BaseSymmetry, U1Symmetry

# Label type: strings (descriptive) or integers (positional)
Label = str | int


class FlowDirection(IntEnum):
    """Flow direction of a tensor leg.

    IN (+1):  ket leg, charge flows into the node.
    OUT (-1): bra leg, charge flows out of the node.

    Conservation law for an invariant tensor:
    sum_i(flow_i * charge_i) == symmetry.identity() on every non-zero entry.
    """

    IN = 1
    OUT = -1


@dataclass(frozen=True, slots=True)
class TensorIndex:
    """Metadata for one leg of a tensor.

    Attributes:
        symmetry:  The symmetry group governing charges on this leg.
        charges:   1-D numpy int32 array of length D.
                   charges[i] is the charge of basis state i.
        flow:      Whether this leg is incoming (IN) or outgoing (OUT).
        label:     Identifier for this leg.

    Example:
        >>> idx = TensorIndex.for_spin(1.0, label="e0")
        >>> idx.charges
        array([ 2,  0, -2], dtype=int32)
        >>> idx.spin
        1.0
    """

    symmetry: BaseSymmetry
    charges: np.ndarray  # shape (D,), dtype int32
    flow: FlowDirection
    label: Label = ""

    def __post_init__(self) -> None:
        if self.charges.ndim != 1:
            raise ValueError(
                f"charges must be 1-D, got shape {self.charges.shape}"
            )
        if self.charges.dtype != np.int32:
            object.__setattr__(self, "charges", self.charges.astype(np.int32))

    @classmethod
    def for_spin(
        cls,
        j: float,
        label: Label = "",
        flow: FlowDirection = FlowDirection.IN,
    ) -> TensorIndex:
        """Build the U(1) leg of a spin-j edge: basis m = j..-j with charges 2m."""
        if j < 0 or not is_half_integer(j):
            raise InvalidInputError(f"spin must be a non-negative integer or half-integer, got {j}")
        charges = np.array([round(2 * m) for m in m_values(j)], dtype=np.int32)
        return cls(U1Symmetry(), charges, flow, label)

    @property
    def dim(self) -> int:
        """Number of basis states on this leg."""
        return len(self.charges)

    @property
    def spin(self) -> float:
        """Spin j of the leg, assuming it spans a single irrep (dim = 2j + 1)."""
        return (self.dim - 1) / 2

    def __hash__(self) -> int:
        return hash((self.symmetry, self.charges.tobytes(), int(self.flow), self.label))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TensorIndex):
            return NotImplemented
        return (
            self.symmetry == other.symmetry
            and np.array_equal(self.charges, other.charges)
            and self.flow == other.flow
            and self.label == other.label
        )

    def __repr__(self) -> str:
        return (
            f"TensorIndex(sym={self.symmetry!r}, dim={self.dim}, "
            f"flow={self.flow.name}, label={self.label!r})"
        )
