"""Refractive index database and dispersion resolver.

Public API:
- ``resolve``: complex index N(λ) of a material on a wavelength grid
- ``available_materials``, ``get_material``, ``info``: material catalog
- ``RefractiveIndexStore``, ``open_store``, ``default_store``: tabulated data
- ``looyenga``, ``bruggeman``, ``maxwell_garnett``: effective-medium mixing

Units: every call states the wavelength unit (``"nm"``, ``"um"`` or ``"m"``)
and it must match the unit listed in the catalog for that material.
"""

from __future__ import annotations

from .base import (
    AnalyticMaterial,
    Material,
    ParametricTabulatedMaterial,
    TabulatedMaterial,
    convert_wavelength,
)
from .catalog import CATALOG, available_materials, describe, get_material, info
from .mixing import bruggeman, looyenga, maxwell_garnett
from .resolver import resolve
from .store import RefractiveIndexStore, default_store, open_store

__all__ = [
    "AnalyticMaterial",
    "CATALOG",
    "Material",
    "ParametricTabulatedMaterial",
    "RefractiveIndexStore",
    "TabulatedMaterial",
    "available_materials",
    "bruggeman",
    "convert_wavelength",
    "default_store",
    "describe",
    "get_material",
    "info",
    "looyenga",
    "maxwell_garnett",
    "open_store",
    "resolve",
]
