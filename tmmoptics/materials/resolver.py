"""Dispersion resolver.

``resolve`` is the single entry point turning a material and a wavelength
grid into a complex refractive index array N(λ) = n(λ) + i k(λ).

Units are never inferred: the caller states the unit of the grid and it must
match the unit of the material's formula or table (see
``tmmoptics.materials.catalog``). Use ``convert_wavelength`` to rescale a grid
explicitly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from scipy.interpolate import interp1d

from tmmoptics.errors import InvalidParameter, UnitMismatch

from . import formulas
from .base import (
    AnalyticMaterial,
    Material,
    ParametricTabulatedMaterial,
    TabulatedMaterial,
    check_unit,
)
from .catalog import get_material
from .store import default_store

if TYPE_CHECKING:
    from .store import RefractiveIndexStore

logger = logging.getLogger(__name__)

T_LOW = 20.0
T_HIGH = 450.0
T_SWITCH = 215.0

TABLE_COLUMNS = ("lambda", "n", "k")
TEMPERATURE_COLUMNS = ("lambda", "n20", "k20", "n450", "k450")


def resolve(
    material: str | Material,
    wavelength,
    *params: float,
    unit: str,
    store: RefractiveIndexStore | None = None,
):
    """Complex refractive index of ``material`` on ``wavelength``.

    Args:
        material: Catalog name or ``Material`` instance.
        wavelength: Scalar or 1-D array of wavelengths, in any order.
        *params: Extra scalar parameters (``dummy``: n, k;
            ``silicontemperature``: temperature in °C).
        unit: Unit of ``wavelength``: ``"nm"``, ``"um"`` or ``"m"``.
        store: Data store for tabulated materials. Defaults to the
            process-wide store.

    Returns:
        ``complex128`` array with the same length as ``wavelength``.

    Raises:
        MaterialNotFound: Unknown material name.
        UnitMismatch: ``unit`` is not the unit of the material.
        InvalidParameter: Wrong number of parameters, or a parameter out of
            its domain.
        DataStoreUnavailable: The table cannot be read.

    Examples:
        >>> resolve("glass", [0.5, 0.6], unit="um")
        array([1.5214+0.j, 1.5163+0.j])
        >>> resolve("dummy", [400.0, 500.0], 1.5, 0.0, unit="nm")
        array([1.5+0.j, 1.5+0.j])
    """
    if isinstance(material, str):
        material = get_material(material)
    check_unit(unit)
    if not material.accepts_unit(unit):
        raise UnitMismatch(
            f"Material {material.name!r} expects wavelengths in "
            f"{material.unit!r}, got {unit!r}"
        )
    if len(params) != len(material.parameters):
        raise InvalidParameter(
            f"Material {material.name!r} takes {len(material.parameters)} "
            f"parameter(s) {material.parameters}, got {len(params)}"
        )

    wl = np.atleast_1d(np.asarray(wavelength, dtype=float))
    if wl.ndim != 1:
        raise InvalidParameter("wavelength must be a scalar or a 1-D array")
    logger.debug("Resolving %s on %d wavelength(s)", material.name, wl.size)

    if isinstance(material, AnalyticMaterial):
        return _resolve_analytic(material, wl, params)
    if store is None:
        store = default_store()
    if isinstance(material, TabulatedMaterial):
        return _resolve_tabulated(material, wl, store)
    if isinstance(material, ParametricTabulatedMaterial):
        return _resolve_parametric(material, wl, params, store)
    raise TypeError(f"Unsupported material type {type(material).__name__}")


def _resolve_analytic(material: AnalyticMaterial, wl, params):
    try:
        func = formulas.FORMULAS[material.formula]
    except KeyError:
        raise InvalidParameter(
            f"Unknown dispersion formula {material.formula!r}"
        ) from None
    return func(wl, *params)


def _sorted_knots(wavelength, *columns):
    order = np.argsort(wavelength, kind="stable")
    return (wavelength[order],) + tuple(c[order] for c in columns)


def _linear(x, y, **kwargs):
    return interp1d(x, y, kind="linear", assume_sorted=True, copy=False, **kwargs)


def _resolve_tabulated(material: TabulatedMaterial, wl, store):
    table = store.read(material.key, TABLE_COLUMNS)
    knots, n, k = _sorted_knots(table["lambda"] * material.scale, table["n"], table["k"])
    spl_n = _linear(knots, n, bounds_error=False, fill_value="extrapolate")
    spl_k = _linear(knots, k, bounds_error=False, fill_value="extrapolate")
    return spl_n(wl) + 1j * spl_k(wl)


def _resolve_parametric(material: ParametricTabulatedMaterial, wl, params, store):
    value = float(params[0])
    name = material.parameters[0]
    lo, hi = material.parameter_domain
    if not lo < value < hi:
        raise InvalidParameter(
            f"{name.capitalize()} range is invalid: {lo:g} < {name} < {hi:g}, "
            f"got {value:g}"
        )
    if material.model == "linear_temperature":
        table = store.read(material.key, TEMPERATURE_COLUMNS)
        return silicon_temperature(wl, value, table)
    raise InvalidParameter(f"Unknown parametric model {material.model!r}")


def silicon_temperature(wavelength_nm, temperature: float, table):
    """Temperature-dependent index from curves measured at 20 and 450 °C.

    dn/dT and dk/dT are taken pointwise from the two curves. Below 215 °C
    the 20 °C curve is the anchor, above it the 450 °C curve, both with
    ``anchor·(1 + d/dT·(T − 20))``. The two branches do not meet at 215 °C.

    Args:
        wavelength_nm: 1-D array of wavelengths in nm.
        temperature: Temperature in °C, strictly between 20 and 450.
        table: Arrays ``lambda``, ``n20``, ``k20``, ``n450``, ``k450``.

    Raises:
        InvalidParameter: Temperature out of range, or a wavelength outside
            the table.
    """
    t = float(temperature)
    if not T_LOW < t < T_HIGH:
        raise InvalidParameter(
            f"Temperature range is invalid: {T_LOW:g} < T < {T_HIGH:g} in C, got {t:g}"
        )
    knots, n20, k20, n450, k450 = _sorted_knots(
        np.asarray(table["lambda"], dtype=float),
        table["n20"],
        table["k20"],
        table["n450"],
        table["k450"],
    )
    # widen the end knots by one ulp so the exact bounds interpolate
    knots = knots.copy()
    knots[0] = np.nextafter(knots[0], -np.inf)
    knots[-1] = np.nextafter(knots[-1], np.inf)

    wl = np.atleast_1d(np.asarray(wavelength_nm, dtype=float))
    try:
        curves = {
            name: _linear(knots, values)(wl)
            for name, values in (("n20", n20), ("k20", k20), ("n450", n450), ("k450", k450))
        }
    except ValueError as exc:
        raise InvalidParameter(
            f"Wavelength outside the silicon temperature table "
            f"[{knots[0]:g}, {knots[-1]:g}] nm"
        ) from exc

    dndt = (curves["n450"] - curves["n20"]) / (T_HIGH - T_LOW)
    dkdt = (curves["k450"] - curves["k20"]) / (T_HIGH - T_LOW)
    if t < T_SWITCH:
        n_anchor, k_anchor = curves["n20"], curves["k20"]
    else:
        n_anchor, k_anchor = curves["n450"], curves["k450"]
    n = n_anchor * (1.0 + dndt * (t - T_LOW))
    k = k_anchor * (1.0 + dkdt * (t - T_LOW))
    return n + 1j * k
