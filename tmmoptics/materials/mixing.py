"""Effective-medium approximations for binary mixtures.

Each rule takes the volume fraction ``f`` of the first medium and two complex
index arrays aligned on the same wavelength grid, and returns the effective
complex index. Typical use is porous material, e.g. porous silicon as a
mixture of air and silicon:

>>> n_air = resolve("air", wl, unit="nm")
>>> n_si = resolve("silicon", wl, unit="nm")
>>> n_porous = looyenga(0.86, n_air, n_si)
"""

from __future__ import annotations

import numpy as np

from tmmoptics.errors import InvalidParameter, StructuralMismatch


def _prepare(fraction, n1, n2):
    f = float(fraction)
    if not 0.0 <= f <= 1.0:
        raise InvalidParameter(f"Volume fraction must be in [0, 1], got {f:g}")
    n1 = np.atleast_1d(np.asarray(n1, dtype=np.complex128))
    n2 = np.atleast_1d(np.asarray(n2, dtype=np.complex128))
    if n1.shape != n2.shape:
        raise StructuralMismatch(
            f"Index arrays have different shapes: {n1.shape} and {n2.shape}"
        )
    return f, n1, n2


def looyenga(fraction: float, n1, n2):
    """Looyenga rule, ε^(1/3) = f ε₁^(1/3) + (1 − f) ε₂^(1/3)."""
    f, n1, n2 = _prepare(fraction, n1, n2)
    return (f * n1 ** (2.0 / 3.0) + (1.0 - f) * n2 ** (2.0 / 3.0)) ** 1.5


def maxwell_garnett(fraction: float, n_inclusion, n_host):
    """Maxwell Garnett rule for spherical inclusions of volume fraction ``f``
    in a host medium."""
    f, n_inc, n_host = _prepare(fraction, n_inclusion, n_host)
    eps_i, eps_h = n_inc**2, n_host**2
    num = eps_i + 2 * eps_h + 2 * f * (eps_i - eps_h)
    den = eps_i + 2 * eps_h - f * (eps_i - eps_h)
    return np.sqrt(eps_h * num / den)


def bruggeman(fraction: float, n1, n2):
    """Symmetric Bruggeman rule for spheres.

    Solves f (ε₁ − ε)/(ε₁ + 2ε) + (1 − f)(ε₂ − ε)/(ε₂ + 2ε) = 0 and keeps the
    root with non-negative imaginary part (positive real part when both are
    lossless).
    """
    f, n1, n2 = _prepare(fraction, n1, n2)
    eps1, eps2 = n1**2, n2**2
    b = (3 * f - 1) * eps1 + (2 - 3 * f) * eps2
    disc = np.sqrt(b**2 + 8 * eps1 * eps2)
    roots = np.stack([(b + disc) / 4, (b - disc) / 4])
    # prefer the passive root, then the one with a positive real part
    score = (roots.imag >= -1e-12).astype(int) * 2 + (roots.real > 0).astype(int)
    eps = np.where(score[0] >= score[1], roots[0], roots[1])
    return np.sqrt(eps)
