"""Thin film optics core functions.

Transfer matrix method (TMM) in the characteristic (Abelès) matrix form,
vectorized over wavelength × angle-of-incidence grids.

Conventions: N = n + i k with k ≥ 0 for absorbing media, fields vary as
exp(i(kz − ωt)), admittances are in units of the free-space admittance.
r and t are ratios of tangential electric fields.

Matrices and fields are carried as a bounded part times exp(log-scale), so
thick absorbing layers (Im δ beyond the float range of cos δ) stay finite.

Ref :
- Chap 2. Thin-Film Optical Filters, Fifth Edition, Macleod, Hugh Angus CRC Press
- F. Abelès, Researches sur la propagation des ondes électromagnétiques
    sinusoïdales dans les milieus stratifies.
    Applications aux couches minces, Ann. Phys. Paris,
    12ième Series 5 (1950): 596–640.
"""

from __future__ import annotations

from typing import Any, Literal, NamedTuple, TypeAlias

import numpy as np

Array: TypeAlias = Any  # np.ndarray
PolSP = Literal["s", "p"]


class FilmTerms(NamedTuple):
    """Per-film quantities kept for field reconstruction."""

    q: Array  # N·cos(θ)
    eta: Array
    delta: Array
    thickness: float


class Coefficients(NamedTuple):
    r: Array
    t: Array
    R: Array
    T: Array
    eta0: Array
    etas: Array
    films: list[FilmTerms]
    t_scaled: Array  # t = t_scaled · exp(-log_scale)
    log_scale: Array


def normal_index(n0, theta0, n):
    """Normal component q = N·cos(θ) of the index inside a layer.

    Snell's law N₀ sin θ₀ = N sin θ gives q = sqrt(N² − (N₀ sin θ₀)²). The
    branch with Im(q) ≥ 0 is kept, i.e. the forward wave decays in absorbing
    media and beyond total internal reflection.
    """
    q = np.sqrt(n**2 - (n0 * np.sin(theta0)) ** 2)
    return np.where(q.imag < 0, -q, q)


def admittance(n, q, pol: PolSP):
    """Tilted admittance: η = N cos θ for s and η = N / cos θ for p."""
    if pol == "s":
        return q
    elif pol == "p":
        return n**2 / q
    else:
        raise ValueError("Invalid polarization state")


def characteristic_matrix(delta, eta):
    """Elements (m11, m12, m21, m22) of a layer's characteristic matrix,
    and the log-scale ``g`` factored out of them.

    [E_top, H_top] = M · [E_bottom, H_bottom] with
    M = exp(g) · [[m11, m12], [m21, m22]] and
    M = [[cos δ, −i sin δ / η], [−i η sin δ, cos δ]].

    cos δ and sin δ are built from exp(±iδ − |Im δ|), whose moduli are at
    most 1, so the returned elements never overflow.
    """
    g = np.abs(np.imag(delta))
    ep = np.exp(1j * delta - g)
    em = np.exp(-1j * delta - g)
    c = 0.5 * (ep + em)
    s = -0.5j * (ep - em)
    return c, -1j * s / eta, -1j * eta * s, c, g


def _renormalize(*elements):
    """Divide elements by their largest modulus; return them and its log."""
    norm = np.abs(elements[0])
    for e in elements[1:]:
        norm = np.maximum(norm, np.abs(e))
    norm = np.where(norm > 0, norm, 1.0)
    return tuple(e / norm for e in elements) + (np.log(norm),)


def tmm_coherent(wavelength, theta0, indices, thicknesses, pol: PolSP) -> Coefficients:
    """Reflection and transmission of a stack for one polarization.

    Args:
        wavelength: Wavelengths, broadcastable with ``theta0`` (typically
            shape (Nλ, 1)).
        theta0: Angles of incidence in radians (typically shape (1, Nθ)).
        indices: Complex index of every layer, incident medium first and
            substrate last, each broadcastable like ``wavelength``.
        thicknesses: Physical thickness of every finite layer, same length
            unit as ``wavelength``.
        pol: ``"s"`` or ``"p"``.

    Returns:
        Coefficients with r, t, R, T on the (Nλ, Nθ) grid, the bounding
        admittances and the per-film terms.
    """
    n0, ns = indices[0], indices[-1]
    shape = np.broadcast_shapes(np.shape(wavelength), np.shape(theta0))
    q0 = normal_index(n0, theta0, n0)
    qs = normal_index(n0, theta0, ns)
    eta0 = np.broadcast_to(admittance(n0, q0, pol), shape)
    etas = np.broadcast_to(admittance(ns, qs, pol), shape)

    # Id initial matrix
    A = np.ones(shape, dtype=np.complex128)
    B = np.zeros(shape, dtype=np.complex128)
    C = np.zeros(shape, dtype=np.complex128)
    D = np.ones(shape, dtype=np.complex128)
    log_scale = np.zeros(shape)

    films = []
    k0 = 2 * np.pi / wavelength
    for n_l, d_l in zip(indices[1:-1], thicknesses, strict=True):
        q_l = normal_index(n0, theta0, n_l)
        eta_l = admittance(n_l, q_l, pol)
        delta = k0 * q_l * d_l
        mA, mB, mC, mD, g = characteristic_matrix(delta, eta_l)
        A, B, C, D = A * mA + B * mC, A * mB + B * mD, C * mA + D * mC, C * mB + D * mD
        A, B, C, D, log_norm = _renormalize(A, B, C, D)
        log_scale = log_scale + g + log_norm
        films.append(FilmTerms(q_l, eta_l, delta, d_l))

    # [B_, C_] = M · [1, ηs], up to the common factor exp(log_scale)
    B_ = A + B * etas
    C_ = C + D * etas
    denom = eta0 * B_ + C_

    r = (eta0 * B_ - C_) / denom
    t_scaled = 2 * eta0 / denom
    t = t_scaled * np.exp(-log_scale)

    R = np.abs(r) ** 2
    T = etas.real / eta0.real * np.abs(t) ** 2
    return Coefficients(r, t, R, T, eta0, etas, films, t_scaled, log_scale)


def field_profile(wavelength, coeffs: Coefficients, samples: int):
    """Tangential electric field inside the films.

    The fields at the substrate interface are (t, ηs·t). Going back up
    through each film, its top fields are M·[E, H] and the forward and
    backward amplitudes follow from E± = (E ± H/η)/2. The forward wave is
    referred to the top of the film and the backward wave to its bottom, so
    both exponentials decay inside absorbing films. Interface fields are kept
    as a bounded part and a log-scale, folded into the exponentials.

    Args:
        wavelength: Wavelength array broadcastable to the (Nλ, Nθ) grid.
        coeffs: Output of ``tmm_coherent``.
        samples: Number of points per film, from its top interface with the
            bottom interface excluded.

    Returns:
        (z, E) where ``z`` is the depth grid of length
        ``samples · n_films + 1`` measured from the incident interface and
        ``E`` the complex tangential field on (Nλ, Nθ, len(z)). The last point
        is the substrate interface.
    """
    k0 = 2 * np.pi / wavelength
    E_b = coeffs.t_scaled
    H_b = coeffs.etas * coeffs.t_scaled
    log_b = -coeffs.log_scale

    per_film = []
    for film in reversed(coeffs.films):
        m11, m12, m21, m22, g = characteristic_matrix(film.delta, film.eta)
        E_t, H_t, log_norm = _renormalize(m11 * E_b + m12 * H_b, m21 * E_b + m22 * H_b)
        log_t = log_b + g + log_norm

        forward = 0.5 * (E_t + H_t / film.eta)  # at the top
        backward = 0.5 * (E_b - H_b / film.eta)  # at the bottom

        z = np.linspace(0.0, film.thickness, samples, endpoint=False)
        ikq = 1j * k0[..., None] * film.q[..., None]
        phase_f = np.exp(log_t[..., None] + ikq * z)
        phase_b = np.exp(log_b[..., None] + ikq * (film.thickness - z))
        per_film.append((z, forward[..., None] * phase_f + backward[..., None] * phase_b))

        E_b, H_b, log_b = E_t, H_t, log_t
    per_film.reverse()

    offset = 0.0
    zs, fields = [], []
    for (z, E), film in zip(per_film, coeffs.films, strict=True):
        zs.append(offset + z)
        fields.append(E)
        offset += film.thickness
    zs.append(np.array([offset]))
    fields.append(coeffs.t[..., None])
    return np.concatenate(zs), np.concatenate(fields, axis=-1)
