"""tmmoptics: optical response of planar multilayers.

1. ``tmmoptics.materials``: complex refractive indices from dispersion
   formulas and tabulated data.
2. ``tmmoptics.thin_film``: transfer matrix solver for reflectance,
   transmittance and the field profile inside the stack.
"""

from __future__ import annotations

from . import errors, materials, thin_film
from .errors import (
    DataStoreUnavailable,
    InvalidParameter,
    MaterialNotFound,
    StructuralMismatch,
    TMMError,
    UnitMismatch,
)
from .materials import resolve
from .thin_film import Layer, PlaneWave, SolverOptions, ThinFilmStack, solve

__version__ = "0.1.0"

__all__ = [
    "DataStoreUnavailable",
    "InvalidParameter",
    "Layer",
    "MaterialNotFound",
    "PlaneWave",
    "SolverOptions",
    "StructuralMismatch",
    "TMMError",
    "ThinFilmStack",
    "UnitMismatch",
    "errors",
    "materials",
    "resolve",
    "solve",
    "thin_film",
]
