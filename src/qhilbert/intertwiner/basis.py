"""Orthonormal bases of intertwiner spaces.

construct_basis() dispatches on valence:

- 2-valent: the singlet-type invariant sum_m (-1)^(j-m) / sqrt(2j+1) |m, -m>
- 3-valent: the Wigner 3j symbol (j1 j2 j3; m1 m2 m3) as a vector
- 4-valent: one vector per intermediate spin J, recoupling (j1 j2)J (j3 j4)J -> 0

Every basis vector lives in the product space V_j1 (x) ... (x) V_jn, flattened
with the rightmost edge fastest and local index j - m per edge. The per-edge
dimensions are stored in the vector's ``dimensions`` property, which
basis_to_tensor() reads back.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

import jax.numpy as jnp
import numpy as np

from qhilbert.angular.clebsch_gordan import clebsch_gordan, wigner_3j
from qhilbert.core import EPS_NORM
from qhilbert.core.errors import InvalidInputError
from qhilbert.core.indexing import m_values, spin_dim, spin_flat_index
from qhilbert.core.state import StateBuilder, StateVector
from qhilbert.intertwiner.core import (
    calculate_dimension,
    common_intermediate_spins,
    is_admissible,
    validate_edge_spins,
)
from qhilbert.linalg import orthonormalize_states

logger = logging.getLogger(__name__)


@dataclass
class BasisConfig:
    """Configuration for intertwiner basis construction.

    Attributes:
        zero_tol:        Clebsch-Gordan factors and raw vector norms below
                         this are treated as zero.
        orthonormal_tol: Residual norm below which Gram-Schmidt drops a
                         vector as linearly dependent.
        verbose:         Log construction progress at INFO instead of DEBUG.
    """

    zero_tol: float = 1e-10
    orthonormal_tol: float = EPS_NORM
    verbose: bool = False


@dataclass(frozen=True)
class IntertwinerBasisState:
    """One basis vector of an intertwiner space.

    Attributes:
        intermediate_j:    Spin of the internal coupling (J for 4-valent nodes,
                           the edge spin for 2-valent, 0 for 3-valent).
        state_vector:      Unit vector over the product of the edge spaces.
        recoupling_scheme: Human-readable coupling order, e.g. ``(0.5,0.5)⊗(0.5,0.5)→0``.
        normalization:     Norm of the raw coefficient vector before it was
                           normalized.
    """

    intermediate_j: float
    state_vector: StateVector
    recoupling_scheme: str
    normalization: float


@dataclass(frozen=True)
class IntertwinerSpace:
    """Orthonormal basis of the invariant subspace for a set of edge spins."""

    dimension: int
    basis_states: tuple[IntertwinerBasisState, ...]
    edge_spins: tuple[float, ...]
    total_j: float = 0.0

    def __post_init__(self) -> None:
        if len(self.basis_states) != self.dimension:
            raise InvalidInputError(
                f"IntertwinerSpace has {len(self.basis_states)} basis states "
                f"but dimension {self.dimension}"
            )

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self) -> Iterator[IntertwinerBasisState]:
        return iter(self.basis_states)

    @property
    def intermediate_spins(self) -> list[float]:
        return [b.intermediate_j for b in self.basis_states]

    def gram_matrix(self) -> np.ndarray:
        """Matrix of inner products <b_i|b_k>; the identity for an orthonormal basis."""
        if not self.basis_states:
            return np.zeros((0, 0), dtype=np.complex128)
        vecs = jnp.stack([b.state_vector.amplitudes for b in self.basis_states])
        return np.asarray(jnp.conj(vecs) @ vecs.T)


def _log(config: BasisConfig, msg: str, *args: object) -> None:
    logger.log(logging.INFO if config.verbose else logging.DEBUG, msg, *args)


def _fmt(j: float) -> str:
    return f"{j:g}"


def _edge_properties(spins: Sequence[float], intermediate_j: float) -> dict[str, object]:
    return {
        "dimensions": tuple(spin_dim(j) for j in spins),
        "edge_spins": tuple(spins),
        "intermediate_j": intermediate_j,
        "tensor_product": True,
    }


# ---------- 4-valent ----------

def construct_basis_vector(
    j1: float,
    j2: float,
    j3: float,
    j4: float,
    intermediate_j: float,
    config: BasisConfig | None = None,
) -> IntertwinerBasisState | None:
    """Normalized invariant for the coupling (j1 j2)J (j3 j4)J -> 0.

    The coefficient of |m1 m2 m3 m4> is::

        <j1 m1; j2 m2 | J m12> <j3 m3; j4 m4 | J m34> <J m12; J m34 | 0 0>

    with m12 = m1 + m2 and m34 = m3 + m4 = -m12.

    Returns:
        The basis state, or None if J is not a common admissible coupling of
        both pairs or the raw vector vanishes.
    """
    config = config or BasisConfig()
    spins = (float(j1), float(j2), float(j3), float(j4))
    J = float(intermediate_j)
    if not any(abs(J - c) < 1e-10 for c in common_intermediate_spins(spins)):
        return None

    scheme = f"({_fmt(j1)},{_fmt(j2)})⊗({_fmt(j3)},{_fmt(j4)})→0"
    builder = StateBuilder(
        [spin_dim(j) for j in spins],
        basis=f"|J={_fmt(J)}⟩",
        properties=_edge_properties(spins, J),
    )
    tol = config.zero_tol

    for m1, m2 in itertools.product(m_values(j1), m_values(j2)):
        m12 = m1 + m2
        if abs(m12) > J + 1e-10:
            continue
        cg1 = clebsch_gordan(j1, m1, j2, m2, J, m12)
        if abs(cg1) < tol:
            continue
        cg_final = clebsch_gordan(J, m12, J, -m12, 0, 0)
        if abs(cg_final) < tol:
            continue
        for m3 in m_values(j3):
            m4 = -m12 - m3
            if abs(m4) > j4 + 1e-10:
                continue
            cg2 = clebsch_gordan(j3, m3, j4, m4, J, -m12)
            if abs(cg2) < tol:
                continue
            builder.add(spin_flat_index((m1, m2, m3, m4), spins), cg1 * cg2 * cg_final)

    norm = builder.norm()
    if norm < tol:
        _log(config, "J=%s gives a vanishing vector for %s; skipped", _fmt(J), spins)
        return None
    vector = builder.freeze().normalize()
    return IntertwinerBasisState(J, vector, scheme, norm)


def _four_valent(spins: tuple[float, ...], config: BasisConfig) -> list[IntertwinerBasisState]:
    candidates = common_intermediate_spins(spins)
    _log(config, "4-valent %s: candidate intermediate spins %s", spins, candidates)

    raw = [construct_basis_vector(*spins, J, config=config) for J in candidates]
    raw = [r for r in raw if r is not None]
    ortho = orthonormalize_states([r.state_vector for r in raw], tol=config.orthonormal_tol)
    return [replace(raw[k], state_vector=vec) for k, vec in zip(ortho.kept, ortho.vectors)]


# ---------- 2- and 3-valent ----------

def _two_valent(spins: tuple[float, ...], config: BasisConfig) -> list[IntertwinerBasisState]:
    j1, j2 = spins
    if abs(j1 - j2) > 1e-10:
        return []
    j = j1
    builder = StateBuilder(
        [spin_dim(j1), spin_dim(j2)],
        basis=f"|{_fmt(j)}⊗{_fmt(j)}→0⟩",
        properties=_edge_properties(spins, j),
    )
    amp = 1.0 / np.sqrt(spin_dim(j))
    for m in m_values(j):
        sign = -1.0 if int(round(j - m)) % 2 else 1.0
        builder.set(spin_flat_index((m, -m), spins), sign * amp)
    vector = builder.freeze()
    _log(config, "2-valent %s: singlet invariant", spins)
    return [IntertwinerBasisState(j, vector, f"({_fmt(j1)},{_fmt(j2)})→0", 1.0)]


def _three_valent(spins: tuple[float, ...], config: BasisConfig) -> list[IntertwinerBasisState]:
    j1, j2, j3 = spins
    if not is_admissible(j1, j2, j3):
        return []
    builder = StateBuilder(
        [spin_dim(j) for j in spins],
        basis=f"|{_fmt(j1)},{_fmt(j2)},{_fmt(j3)}→0⟩",
        properties=_edge_properties(spins, 0.0),
    )
    for m1, m2 in itertools.product(m_values(j1), m_values(j2)):
        m3 = -m1 - m2
        if abs(m3) > j3 + 1e-10:
            continue
        w = wigner_3j(j1, j2, j3, m1, m2, m3)
        if abs(w) < config.zero_tol:
            continue
        builder.set(spin_flat_index((m1, m2, m3), spins), w)
    norm = builder.norm()
    if norm < config.zero_tol:
        return []
    vector = builder.freeze().normalize()
    _log(config, "3-valent %s: 3j invariant", spins)
    return [IntertwinerBasisState(0.0, vector, f"({_fmt(j1)},{_fmt(j2)},{_fmt(j3)})→0", norm)]


_BUILDERS = {2: _two_valent, 3: _three_valent, 4: _four_valent}


def construct_basis(
    edge_spins: Sequence[float],
    config: BasisConfig | None = None,
) -> IntertwinerSpace:
    """Build the orthonormal intertwiner basis for the given edge spins.

    Args:
        edge_spins: Spin on each edge (2, 3 or 4 of them).
        config:     Tolerances and verbosity; defaults to BasisConfig().

    Returns:
        IntertwinerSpace whose dimension equals calculate_dimension(edge_spins).
        Spins that admit no invariant give a zero-dimensional space.

    Raises:
        InvalidInputError:       Invalid spins or fewer than two edges.
        UnsupportedValenceError: More than four edges.

    Example:
        >>> space = construct_basis([0.5, 0.5, 0.5, 0.5])
        >>> space.dimension, space.intermediate_spins
        (2, [0.0, 1.0])
    """
    config = config or BasisConfig()
    validate_edge_spins(edge_spins)
    spins = tuple(float(j) for j in edge_spins)
    expected = calculate_dimension(spins)

    states = _BUILDERS[len(spins)](spins, config)

    if len(states) != expected:
        logger.warning(
            "construct_basis(%s): built %d basis states, expected %d",
            spins, len(states), expected,
        )
    _log(config, "construct_basis(%s): dimension %d", spins, len(states))
    return IntertwinerSpace(len(states), tuple(states), spins)


def four_spin_half_basis() -> IntertwinerSpace:
    """The two-dimensional intertwiner space of four spin-1/2 edges, in closed form.

    J = 0: singlet (x) singlet.
    J = 1: (|T+>|T-> - |T0>|T0> + |T->|T+>) / sqrt(3), with T the triplet states.
    """
    s = 1.0 / np.sqrt(2.0)
    singlet = np.array([0.0, s, -s, 0.0])
    t_plus = np.array([1.0, 0.0, 0.0, 0.0])
    t_zero = np.array([0.0, s, s, 0.0])
    t_minus = np.array([0.0, 0.0, 0.0, 1.0])

    j0 = np.kron(singlet, singlet)
    j1 = (np.kron(t_plus, t_minus) - np.kron(t_zero, t_zero) + np.kron(t_minus, t_plus)) / np.sqrt(3.0)

    spins = (0.5, 0.5, 0.5, 0.5)
    scheme = "(0.5,0.5)⊗(0.5,0.5)→0"
    states = tuple(
        IntertwinerBasisState(
            J,
            StateVector(16, vec, f"|J={_fmt(J)}⟩", _edge_properties(spins, J)),
            scheme,
            1.0,
        )
        for J, vec in ((0.0, j0), (1.0, j1))
    )
    return IntertwinerSpace(2, states, spins)
