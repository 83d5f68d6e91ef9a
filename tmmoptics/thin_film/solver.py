"""Multilayer transfer-matrix solver.

``solve`` validates a beam and a stack, converts optical thicknesses to
physical ones, runs the TMM kernel of ``tmmoptics.thin_film.core`` for both
polarizations and packs everything in a ``SolveResult``.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from tmmoptics.errors import InvalidParameter, StructuralMismatch

from .beam import PlaneWave
from .core import field_profile, tmm_coherent
from .layer import Layer
from .results import SolveResult
from .stack import ThinFilmStack, as_stack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverOptions:
    """Options of ``solve``.

    Parameters
    ----------
    reference_wavelength : float | None
        λ0 for optical-thickness layers, same unit as the beam.
    compute_field : bool
        Reconstruct the field intensity inside the stack, default False.
    samples_per_layer : int
        Depth samples per film when the field is computed, default 10.
    """

    reference_wavelength: float | None = None
    compute_field: bool = False
    samples_per_layer: int = 10

    def __post_init__(self):
        samples = self.samples_per_layer
        if isinstance(samples, bool) or not isinstance(samples, numbers.Integral):
            raise InvalidParameter(
                f"samples_per_layer must be an integer, got {samples!r}"
            )
        if samples < 1:
            raise InvalidParameter(f"samples_per_layer must be >= 1, got {samples}")
        object.__setattr__(self, "samples_per_layer", int(samples))


def _check_structure(beam: PlaneWave, stack: ThinFilmStack) -> None:
    nwl = beam.wavelength.size
    for i, layer in enumerate(stack):
        if len(layer) != nwl:
            raise StructuralMismatch(
                f"Layer {i} ({layer.name or 'unnamed'}) has {len(layer)} index "
                f"values but the beam has {nwl} wavelengths"
            )


def physical_thicknesses(
    beam: PlaneWave, stack: ThinFilmStack, reference_wavelength=None
) -> np.ndarray:
    """Geometrical thickness of every film of ``stack``."""
    return np.array(
        [
            layer.physical_thickness(beam.wavelength, reference_wavelength)
            for layer in stack.films
        ],
        dtype=float,
    )


def solve(
    beam: PlaneWave,
    stack: ThinFilmStack | Sequence[Layer],
    options: SolverOptions | None = None,
) -> SolveResult:
    """Optical response of a multilayer.

    Args:
        beam: Incident plane wave.
        stack: ``ThinFilmStack`` or sequence of layers, incident medium first
            and substrate last.
        options: Solver options, defaults to ``SolverOptions()``.

    Returns:
        SolveResult with amplitude and power spectra, and the field profile
        when ``options.compute_field`` is set.

    Raises:
        StructuralMismatch: Fewer than two layers, or an index array whose
            length differs from the beam wavelength grid.
        InvalidParameter: Optical-thickness layer without a usable
            reference wavelength.

    Examples:
        >>> wl = np.linspace(400, 1000, 601)
        >>> beam = PlaneWave(wl, [0.0])
        >>> stack = ThinFilmStack([
        ...     Layer(resolve("air", wl, unit="nm")),
        ...     Layer.optical(np.full(wl.size, 1.5)),
        ...     Layer(resolve("glass", wl / 1e3, unit="um")),
        ... ])
        >>> res = solve(beam, stack, SolverOptions(reference_wavelength=730.0))
        >>> res.R.shape
        (601, 1)
    """
    if options is None:
        options = SolverOptions()
    stack = as_stack(stack)
    _check_structure(beam, stack)
    thickness = physical_thicknesses(beam, stack, options.reference_wavelength)

    nwl, nth = beam.shape
    logger.debug(
        "Solving %d films on %d wavelengths x %d angles", len(thickness), nwl, nth
    )

    wl = beam.wavelength[:, None]
    theta0 = beam.angle_rad[None, :]
    indices = [layer.index[:, None] for layer in stack]

    s = tmm_coherent(wl, theta0, indices, thickness, "s")
    p = tmm_coherent(wl, theta0, indices, thickness, "p")

    extra = {}
    if options.compute_field:
        samples = options.samples_per_layer
        depth, E_s = field_profile(wl, s, samples)
        _, E_p = field_profile(wl, p, samples)
        extra = {
            "depth": depth,
            "field_s": np.abs(E_s) ** 2,
            "field_p": np.abs(E_p) ** 2,
            "index_profile": _index_profile(stack, samples),
        }
        logger.debug("Field sampled on %d depth points", depth.size)

    return SolveResult(
        beam=beam,
        r_s=s.r,
        r_p=p.r,
        t_s=s.t,
        t_p=p.t,
        R_s=s.R,
        R_p=p.R,
        T_s=s.T,
        T_p=p.T,
        thickness=thickness,
        **extra,
    )


def _index_profile(stack: ThinFilmStack, samples: int) -> np.ndarray:
    columns = [
        np.repeat(layer.index[:, None], samples, axis=1) for layer in stack.films
    ]
    columns.append(stack.substrate.index[:, None])
    return np.concatenate(columns, axis=1)
