"""Thin-film multilayer calculations (Transfer Matrix Method).

Public API:
- ``PlaneWave``: incident beam (wavelengths, angles, polarization)
- ``Layer``: one layer (complex index array + thickness)
- ``ThinFilmStack``: ordered layers, incident medium first
- ``solve``, ``SolverOptions``: TMM solver producing a ``SolveResult``
- ``SpectralAnalyzer``: matplotlib views of a result

Units: wavelengths and thicknesses share the beam's length unit, AOI in
degrees.
"""

from __future__ import annotations

from .analysis import SpectralAnalyzer
from .beam import PlaneWave
from .layer import Layer
from .results import SolveResult
from .solver import SolverOptions, solve
from .stack import ThinFilmStack, repeat_cell

__all__ = [
    "Layer",
    "PlaneWave",
    "SolveResult",
    "SolverOptions",
    "SpectralAnalyzer",
    "ThinFilmStack",
    "repeat_cell",
    "solve",
]
