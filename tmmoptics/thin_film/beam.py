from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from tmmoptics.errors import InvalidParameter
from tmmoptics.materials.base import check_unit

Pol = Literal["s", "p", "u"]


@dataclass(frozen=True, eq=False)
class PlaneWave:
    """Incident plane wave.

    Parameters
    ----------
    wavelength : array-like of float
        Wavelength grid, any order, positive values.
    angle_deg : array-like of float
        Angles of incidence in degrees, in [0, 90).
    polarization : {"s", "p", "u"}
        ``"u"`` is unpolarized light, powers are averaged over s and p.
    unit : {"nm", "um", "m"}
        Unit of ``wavelength``; layer thicknesses use the same unit.

    Examples
    --------
    >>> beam = PlaneWave(np.linspace(400, 1000, 500), [0.0])
    >>> beam.shape
    (500, 1)
    """

    wavelength: np.ndarray
    angle_deg: np.ndarray = 0.0
    polarization: Pol = "u"
    unit: str = "nm"

    def __post_init__(self):
        wl = np.array(np.atleast_1d(self.wavelength), dtype=float)
        th = np.array(np.atleast_1d(self.angle_deg), dtype=float)
        if wl.ndim != 1 or th.ndim != 1:
            raise InvalidParameter("wavelength and angle_deg must be 1-D")
        if not np.all(np.isfinite(wl)) or np.any(wl <= 0):
            raise InvalidParameter("wavelengths must be finite and positive")
        if np.any(th < 0) or np.any(th >= 90) or not np.all(np.isfinite(th)):
            raise InvalidParameter("angles of incidence must be in [0, 90) degrees")
        if self.polarization not in ("s", "p", "u"):
            raise InvalidParameter("polarization must be 's', 'p' or 'u'")
        check_unit(self.unit)
        wl.setflags(write=False)
        th.setflags(write=False)
        object.__setattr__(self, "wavelength", wl)
        object.__setattr__(self, "angle_deg", th)

    @property
    def angle_rad(self) -> np.ndarray:
        return np.deg2rad(self.angle_deg)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.wavelength.size, self.angle_deg.size)

    def __repr__(self):
        return (
            f"PlaneWave({self.wavelength.size} wavelengths {self.unit}, "
            f"{self.angle_deg.size} angles, {self.polarization}-pol)"
        )
