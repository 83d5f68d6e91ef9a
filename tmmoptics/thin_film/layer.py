from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from tmmoptics.errors import InvalidParameter

logger = logging.getLogger(__name__)

ThicknessKind = Literal["GT", "OT"]


@dataclass(frozen=True, eq=False)
class Layer:
    """Represents a thin-film layer.

    Parameters
    ----------
    index : array-like of complex
        Complex refractive index n + i k, aligned with the beam wavelengths.
    thickness : float
        For ``kind="GT"`` the geometrical thickness, in the same length unit
        as the beam wavelengths. For ``kind="OT"`` the optical thickness as a
        fraction of the reference wavelength (0.25 is a quarter wave).
        Ignored for the incident medium and the substrate.
    kind : {"GT", "OT"}
        Geometrical or optical thickness, default ``"GT"``.
    name : str | None
        Optional label for display.

    Examples
    --------
    >>> wl = np.linspace(400, 1000, 601)
    >>> sio2 = Layer(np.full(wl.size, 1.46), thickness=100.0, name="SiO2")
    >>> qw = Layer(np.full(wl.size, 2.3), thickness=0.25, kind="OT")
    """

    index: np.ndarray
    thickness: float = 0.0
    kind: ThicknessKind = "GT"
    name: str | None = None

    def __post_init__(self):
        index = np.array(np.atleast_1d(self.index), dtype=np.complex128)
        if index.ndim != 1:
            raise InvalidParameter("Layer index must be a 1-D array")
        index.setflags(write=False)
        object.__setattr__(self, "index", index)
        if self.kind not in ("GT", "OT"):
            raise InvalidParameter(f"Layer kind must be 'GT' or 'OT', got {self.kind!r}")
        thickness = float(self.thickness)
        if thickness < 0 or not np.isfinite(thickness):
            raise InvalidParameter(
                f"Layer thickness must be finite and >= 0, got {thickness:g}"
            )
        object.__setattr__(self, "thickness", thickness)

    @classmethod
    def optical(cls, index, fraction: float = 0.25, name: str | None = None) -> Layer:
        """Layer whose optical path is ``fraction`` of the reference wavelength."""
        return cls(index, fraction, "OT", name)

    def __len__(self):
        return self.index.size

    def physical_thickness(self, wavelength, reference_wavelength=None) -> float:
        """Geometrical thickness of the layer.

        For ``OT`` layers the real index at ``reference_wavelength`` is
        linearly interpolated on ``wavelength`` and
        ``d = fraction · λ0 / Re N(λ0)``.

        Raises:
            InvalidParameter: ``OT`` layer without a usable reference
                wavelength.
        """
        if self.kind == "GT":
            return self.thickness
        if reference_wavelength is None:
            raise InvalidParameter(
                "reference_wavelength must be set for optical-thickness layers"
            )
        wl = np.asarray(wavelength, dtype=float)
        lam0 = float(reference_wavelength)
        if wl.size == 0 or not wl.min() <= lam0 <= wl.max():
            raise InvalidParameter(
                f"reference wavelength {lam0:g} is outside the beam wavelengths"
            )
        order = np.argsort(wl)
        n0 = np.interp(lam0, wl[order], self.index.real[order])
        if n0 <= 0:
            logger.warning(
                "Layer %s has Re(N) = %g at the reference wavelength",
                self.name or "",
                n0,
            )
        return self.thickness * lam0 / n0
