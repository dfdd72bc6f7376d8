"""Angular-momentum coupling: Clebsch-Gordan coefficients, Wigner symbols, spin operators."""

from qhilbert.angular.clebsch_gordan import clebsch_gordan, wigner_3j, wigner_6j
from qhilbert.angular.spin_ops import (
    coupled_state,
    j_squared,
    jm_state,
    jminus,
    jplus,
    jx,
    jy,
    jz,
    validate_spin,
)

__all__ = [
    "clebsch_gordan",
    "wigner_3j",
    "wigner_6j",
    "jm_state",
    "coupled_state",
    "jz",
    "jplus",
    "jminus",
    "jx",
    "jy",
    "j_squared",
    "validate_spin",
]
