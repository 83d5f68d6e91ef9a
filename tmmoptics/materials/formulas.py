"""Closed-form dispersion formulas.

Every function takes a 1-D wavelength array already expressed in the unit of
its formula and returns a ``complex128`` array of the same length.
"""

from __future__ import annotations

import numpy as np

AIR_INDEX = 1.00029

# Three-term Sellmeier coefficients (B1, B2, B3), (C1, C2, C3), λ in µm
# Source: refractiveindex.info
GLASS_SELLMEIER = (
    (1.03961212, 0.231792344, 1.01046945),
    (0.00600069867, 0.0200179144, 103.560653),
)
FUSED_SILICA_UV_SELLMEIER = (
    (0.6961663, 0.4079426, 0.8974794),
    (0.0684043**2, 0.1162414**2, 9.896161**2),
)


def constant(wavelength, n: float, k: float = 0.0):
    """Constant complex index n + i k."""
    wavelength = np.atleast_1d(wavelength)
    return np.full(wavelength.shape, complex(n, k), dtype=np.complex128)


def air(wavelength):
    return constant(wavelength, AIR_INDEX)


def dummy(wavelength, a: float, b: float):
    """Non-dispersive index a + i b, for idealized layers."""
    return constant(wavelength, a, b)


def sellmeier(wavelength_um, B, C):
    """Sellmeier equation n² = 1 + Σ Bᵢλ²/(λ² − Cᵢ).

    The square root is taken on the complex plane (principal branch) so the
    result stays defined on both sides of a pole.
    """
    wl2 = np.atleast_1d(wavelength_um).astype(float) ** 2
    n2 = np.ones_like(wl2, dtype=np.complex128)
    with np.errstate(divide="ignore", invalid="ignore"):
        for b, c in zip(B, C, strict=True):
            n2 += b * wl2 / (wl2 - c)
    return np.sqrt(n2)


def glass(wavelength_um):
    """BK7 glass, λ ∈ [0.25, 2.5] µm."""
    return sellmeier(wavelength_um, *GLASS_SELLMEIER)


def fusedsilicauv(wavelength_um):
    """UV-grade fused silica, λ ∈ [0.21, 6.7] µm."""
    return sellmeier(wavelength_um, *FUSED_SILICA_UV_SELLMEIER)


def etoh(wavelength_nm):
    """Liquid ethanol, λ ∈ [476.5, 830] nm.

    n = A + B/λ² + C/λ⁴ with λ in µm.
    """
    wl = np.atleast_1d(wavelength_nm).astype(float) * 1e-3
    n = 1.35265 + 0.00306 / wl**2 + 0.00002 / wl**4
    return n.astype(np.complex128)


FORMULAS = {
    "air": air,
    "dummy": dummy,
    "glass": glass,
    "fusedsilicauv": fusedsilicauv,
    "etoh": etoh,
}
