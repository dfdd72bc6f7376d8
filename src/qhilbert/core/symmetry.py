"""Symmetry group definitions for spin legs.

Two groups matter for angular-momentum coupling:

- U(1), generated by J_z. A basis state |j, m> carries the integer charge 2m
  (doubled so that half-integer spins stay integral). Charges add under the
  tensor product and an SU(2)-invariant tensor only has entries whose charges
  sum to zero.
- SU(2) itself. Irreps are labelled by the integer 2j. Fusion is
  multiplicity-free and governed by the triangle rule plus integrality of
  j1 + j2 + j3.

Charge arithmetic operates on numpy integer arrays. No JAX dependency.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from qhilbert.core.errors import InvalidInputError


class BaseSymmetry(ABC):
    """Abstract base for symmetry groups governing leg charges / irrep labels.

    Concrete subclasses must implement identity and allowed_fusions, and
    should implement __eq__ and __hash__ so they can be used as dict keys and
    compared for compatibility checks.
    """

    @abstractmethod
    def identity(self) -> int:
        """Return the identity element (neutral charge, typically 0)."""

    @abstractmethod
    def allowed_fusions(self, a: int, b: int) -> list[int]:
        """Return the sorted labels appearing in the product a x b."""


class AbelianSymmetry(BaseSymmetry):
    """Symmetry whose fusion of two labels has exactly one outcome."""

    @abstractmethod
    def fuse(self, charges_a: np.ndarray, charges_b: np.ndarray) -> np.ndarray:
        """Fuse two charge arrays element-wise under group multiplication."""

    def allowed_fusions(self, a: int, b: int) -> list[int]:
        fused = self.fuse(np.array([a], dtype=np.int32), np.array([b], dtype=np.int32))
        return [int(fused[0])]

    def fuse_many(self, charge_list: list[np.ndarray]) -> np.ndarray:
        """Fuse a list of charge arrays left-to-right via repeated fuse().

        Args:
            charge_list: Non-empty list of integer charge arrays, all shape (D,).

        Returns:
            Fully fused charge array of shape (D,).
        """
        if not charge_list:
            raise InvalidInputError("charge_list must be non-empty")
        result = charge_list[0]
        for c in charge_list[1:]:
            result = self.fuse(result, c)
        return result


class U1Symmetry(AbelianSymmetry):
    """U(1) symmetry: integer charges, fusion by addition.

    In qhilbert the charge of |j, m> is 2m, so spin-1/2 legs carry [1, -1]
    and spin-1 legs carry [2, 0, -2].

    Example:
        >>> sym = U1Symmetry()
        >>> sym.fuse(np.array([1, -1]), np.array([-1, -1]))
        array([ 0, -2])
    """

    def fuse(self, charges_a: np.ndarray, charges_b: np.ndarray) -> np.ndarray:
        return charges_a + charges_b

    def identity(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, U1Symmetry)

    def __hash__(self) -> int:
        return hash("U1Symmetry")

    def __repr__(self) -> str:
        return "U1Symmetry()"


class BaseNonAbelianSymmetry(BaseSymmetry):
    """Base class for non-Abelian symmetries.

    Contracting or building invariant tensors under a non-Abelian group needs
    recoupling coefficients (Clebsch-Gordan coefficients for SU(2)) on top of
    the fusion rules.
    """

    @abstractmethod
    def recoupling_coefficients(self, a: int, b: int, c: int) -> np.ndarray:
        """Return the coefficient array for the (a, b) -> c channel."""

    @abstractmethod
    def irrep_dim(self, a: int) -> int:
        """Dimension of the irrep labelled a."""


class SU2Symmetry(BaseNonAbelianSymmetry):
    """SU(2) with irreps labelled by twice the spin (0, 1, 2, ... for j = 0, 1/2, 1, ...).

    Example:
        >>> su2 = SU2Symmetry()
        >>> su2.allowed_fusions(1, 1)   # 1/2 x 1/2 = 0 + 1
        [0, 2]
    """

    def identity(self) -> int:
        return 0

    def irrep_dim(self, a: int) -> int:
        return int(a) + 1

    def is_admissible(self, a: int, b: int, c: int) -> bool:
        """True if irrep c appears in a x b (triangle rule and integral total spin)."""
        a, b, c = int(a), int(b), int(c)
        if min(a, b, c) < 0:
            return False
        if (a + b + c) % 2:
            return False
        return abs(a - b) <= c <= a + b

    def allowed_fusions(self, a: int, b: int) -> list[int]:
        return list(range(abs(int(a) - int(b)), int(a) + int(b) + 1, 2))

    def recoupling_coefficients(self, a: int, b: int, c: int) -> np.ndarray:
        """Clebsch-Gordan tensor C[i, k, l] = <j_a m_i; j_b m_k | j_c m_l>.

        Axes follow the leg basis order m = j, j-1, ..., -j.

        Returns:
            Float array of shape (a + 1, b + 1, c + 1); all zeros if c is not
            in allowed_fusions(a, b).
        """
        from qhilbert.angular.clebsch_gordan import clebsch_gordan
        from qhilbert.core.indexing import m_values

        ja, jb, jc = a / 2, b / 2, c / 2
        out = np.zeros((self.irrep_dim(a), self.irrep_dim(b), self.irrep_dim(c)))
        if not self.is_admissible(a, b, c):
            return out
        for i, ma in enumerate(m_values(ja)):
            for k, mb in enumerate(m_values(jb)):
                mc = ma + mb
                if abs(mc) > jc:
                    continue
                out[i, k, int(round(jc - mc))] = clebsch_gordan(ja, ma, jb, mb, jc, mc)
        return out

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SU2Symmetry)

    def __hash__(self) -> int:
        return hash("SU2Symmetry")

    def __repr__(self) -> str:
        return "SU2Symmetry()"
