"""Catalog of the supported materials.

Metadata only: name, variant, wavelength unit and validity domain of each
material. Resolution happens in ``tmmoptics.materials.resolver``.
"""

from __future__ import annotations

from tmmoptics.errors import MaterialNotFound

from .base import (
    AnalyticMaterial,
    Material,
    ParametricTabulatedMaterial,
    TabulatedMaterial,
)

_FREESNELL = "http://www-swiss.ai.mit.edu/~jaffer/FreeSnell/nk.html"
_RII = "http://refractiveindex.info"

_MATERIALS: tuple[Material, ...] = (
    TabulatedMaterial(
        "aluminum", unit="nm", domain=(4.15, 31000.0), source=_FREESNELL,
        key="aluminum", scale=1e9,
    ),
    AnalyticMaterial("air", unit="any", source="constant", formula="air"),
    TabulatedMaterial(
        "bk7", unit="nm", domain=(191.0, 1239.0), source=_FREESNELL,
        key="bk7", scale=1e9,
    ),
    TabulatedMaterial(
        "chrome", unit="nm", domain=(207.0, 1240.0), source=_FREESNELL,
        key="chrome",
    ),
    AnalyticMaterial(
        "dummy", unit="any", parameters=("n", "k"), source="constant",
        formula="dummy",
    ),
    AnalyticMaterial(
        "glass", unit="um", domain=(0.25, 2.5), source=_RII + " (Sellmeier)",
        formula="glass",
    ),
    TabulatedMaterial(
        "gold", unit="nm", domain=(34.15, 10240.0), source=_FREESNELL,
        key="gold",
    ),
    TabulatedMaterial(
        "silicon", unit="nm", domain=(163.15, 25000.0), source=_FREESNELL,
        key="silicon", scale=1e9,
    ),
    ParametricTabulatedMaterial(
        "silicontemperature", unit="nm", domain=(264.0, 826.5),
        parameters=("temperature",), source=_RII,
        key="silicontemperature", model="linear_temperature",
        parameter_domain=(20.0, 450.0),
    ),
    TabulatedMaterial(
        "silver", unit="nm", domain=(0.124, 9919.0), source=_FREESNELL,
        key="silver",
    ),
    TabulatedMaterial(
        "sno2f", unit="nm", domain=(308.25, 2490.9),
        source="Mater. Res. Soc. Symp. Proc., 426, (1996) 449",
        key="sno2f", scale=1e9,
    ),
    TabulatedMaterial(
        "h2o", unit="nm", domain=(10.0, 1e10), source=_RII,
        key="h2o", scale=1e3,
    ),
    AnalyticMaterial(
        "etoh", unit="nm", domain=(476.5, 830.0), source=_RII, formula="etoh",
    ),
    AnalyticMaterial(
        "fusedsilicauv", unit="um", domain=(0.21, 6.7),
        source=_RII + " (Sellmeier)", formula="fusedsilicauv",
    ),
    TabulatedMaterial(
        "fusedsilicauv2", unit="nm", domain=(170.0, 3240.0),
        source="Janis fused silica UV grade datasheet",
        key="fusedsilicauv",
    ),
)

CATALOG: dict[str, Material] = {m.name: m for m in _MATERIALS}

_NOTES = {
    "sno2f": "fluorine doped",
    "silicontemperature": "T in (20, 450) °C",
}


def available_materials() -> list[str]:
    """Names of all catalog materials, in catalog order."""
    return list(CATALOG)


def get_material(name: str) -> Material:
    """Look up a material by name.

    Raises:
        MaterialNotFound: If ``name`` is not in the catalog.
    """
    try:
        return CATALOG[name]
    except KeyError:
        raise MaterialNotFound(
            f"Unknown material {name!r}. Available: {', '.join(CATALOG)}"
        ) from None


def describe(material: Material) -> str:
    """One-line description: call signature, domain and unit."""
    args = ", ".join(("λ",) + material.parameters)
    if material.domain is None:
        domain = "λ ∈ any"
    else:
        lo, hi = material.domain
        domain = f"λ ∈ [{lo:g}, {hi:g}]"
    unit = "any unit" if material.unit == "any" else material.unit
    text = f"{material.name}({args}), {domain} ({unit})"
    if material.name in _NOTES:
        text += f", {_NOTES[material.name]}"
    return text


def info() -> str:
    """Help text listing every material with its domain and unit."""
    lines = ["Available functions for materials index of refraction:", ""]
    lines += ["    " + describe(m) for m in CATALOG.values()]
    return "\n".join(lines)
