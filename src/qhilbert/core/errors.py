"""Exception hierarchy for qhilbert.

Every error raised by the library derives from QHilbertError and from the
builtin exception a caller would naturally expect (ValueError for bad input,
ZeroDivisionError for normalizing a null vector, NotImplementedError for
unsupported node valences), so ``except ValueError`` keeps working.
"""

from __future__ import annotations


class QHilbertError(Exception):
    """Base class for all qhilbert errors."""


class InvalidInputError(QHilbertError, ValueError):
    """Malformed dimension, length, spin value or index."""


class DimensionMismatchError(QHilbertError, ValueError):
    """Two objects that must share a Hilbert space dimension do not."""

    def __init__(self, expected: int, got: int, what: str = "dimension") -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"{what} mismatch: expected {expected}, got {got}")


class ZeroNormError(QHilbertError, ZeroDivisionError):
    """Normalization of a vector whose norm is numerically zero."""


class UnsupportedValenceError(QHilbertError, NotImplementedError):
    """Intertwiner operation requested for a node valence we do not handle."""

    def __init__(self, valence: int, supported: tuple[int, ...]) -> None:
        self.valence = valence
        self.supported = supported
        super().__init__(
            f"{valence}-valent nodes are not supported "
            f"(supported valences: {', '.join(map(str, supported))})"
        )
