"""Material definitions.

A material is one of three tagged variants, all resolved through
``tmmoptics.materials.resolve``:

- ``AnalyticMaterial``: closed-form dispersion formula.
- ``TabulatedMaterial``: (λ, n, k) table read from the data store.
- ``ParametricTabulatedMaterial``: tabulated curves blended with an extra
  scalar parameter (e.g. temperature).

Units: every material declares the wavelength unit its formula or table is
expressed in. ``"any"`` marks materials whose index does not depend on λ.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

import numpy as np

from tmmoptics.errors import InvalidParameter

Unit = Literal["nm", "um", "m"]
MaterialUnit = Literal["nm", "um", "m", "any"]
Domain: TypeAlias = tuple[float, float] | None

# metres per unit
_UNIT_SCALE = {"nm": 1e-9, "um": 1e-6, "m": 1.0}


def check_unit(unit: str) -> str:
    """Return ``unit`` if it is a known wavelength unit."""
    if unit not in _UNIT_SCALE:
        raise InvalidParameter(
            f"Unknown wavelength unit {unit!r}, expected one of "
            + ", ".join(repr(u) for u in _UNIT_SCALE)
        )
    return unit


def convert_wavelength(values, from_unit: Unit, to_unit: Unit):
    """Convert wavelength values between ``"nm"``, ``"um"`` and ``"m"``.

    Args:
        values: Scalar or array of wavelengths.
        from_unit: Unit of ``values``.
        to_unit: Target unit.

    Returns:
        Float array in ``to_unit``.

    Examples:
        >>> convert_wavelength([500.0], "nm", "um")
        array([0.5])
    """
    factor = _UNIT_SCALE[check_unit(from_unit)] / _UNIT_SCALE[check_unit(to_unit)]
    return np.asarray(values, dtype=float) * factor


@dataclass(frozen=True)
class Material:
    """Common fields of all material variants.

    Parameters
    ----------
    name : str
        Catalog name.
    unit : str
        Wavelength unit expected by ``resolve`` for this material.
    domain : tuple[float, float] | None
        Documented validity interval in ``unit``; ``None`` for any λ.
    parameters : tuple[str, ...]
        Names of the extra scalar parameters ``resolve`` expects.
    source : str
        Where the data or formula comes from.
    """

    name: str
    unit: MaterialUnit = "nm"
    domain: Domain = None
    parameters: tuple[str, ...] = ()
    source: str = ""

    def accepts_unit(self, unit: str) -> bool:
        return self.unit == "any" or self.unit == unit


@dataclass(frozen=True)
class AnalyticMaterial(Material):
    """Closed-form material; ``formula`` names a function of
    ``tmmoptics.materials.formulas``.
    """

    formula: str = ""


@dataclass(frozen=True)
class TabulatedMaterial(Material):
    """Material interpolated from a table in the data store.

    ``scale`` multiplies the stored wavelengths to bring them to ``unit``
    (the tables are stored in metres, micrometres or nanometres).
    """

    key: str = ""
    scale: float = 1.0


@dataclass(frozen=True)
class ParametricTabulatedMaterial(Material):
    """Tabulated material depending on an extra scalar parameter.

    ``parameter_domain`` is the open interval the parameter must lie in.
    """

    key: str = ""
    model: str = ""
    parameter_domain: tuple[float, float] = field(default=(-np.inf, np.inf))
