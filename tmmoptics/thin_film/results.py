from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from .beam import PlaneWave


@dataclass(frozen=True, eq=False)
class SolveResult:
    """Output of ``solve``.

    Spectra have shape (Nλ, Nθ), fields (Nλ, Nθ, Ndepth). ``R`` and ``T``
    follow the beam polarization (s, p, or the s/p average for ``"u"``).
    Field arrays are ``None`` unless the field was requested.

    Attributes:
        beam: The incident plane wave.
        r_s, r_p, t_s, t_p: Complex tangential-field amplitude coefficients.
        R_s, R_p, T_s, T_p: Power reflectance and transmittance.
        R, T: Power coefficients for the beam polarization.
        thickness: Physical thickness of each film, same unit as λ.
        depth: Depth grid measured from the incident interface.
        field_s, field_p, field: |E|² relative to the incident field.
        index_profile: Complex index along ``depth``, shape (Nλ, Ndepth).
    """

    beam: PlaneWave
    r_s: np.ndarray
    r_p: np.ndarray
    t_s: np.ndarray
    t_p: np.ndarray
    R_s: np.ndarray
    R_p: np.ndarray
    T_s: np.ndarray
    T_p: np.ndarray
    thickness: np.ndarray
    depth: np.ndarray | None = None
    field_s: np.ndarray | None = None
    field_p: np.ndarray | None = None
    index_profile: np.ndarray | None = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, np.ndarray):
                value.setflags(write=False)

    @property
    def wavelength(self) -> np.ndarray:
        return self.beam.wavelength

    @property
    def angle_deg(self) -> np.ndarray:
        return self.beam.angle_deg

    @property
    def R(self) -> np.ndarray:
        return self._select(self.R_s, self.R_p)

    @property
    def T(self) -> np.ndarray:
        return self._select(self.T_s, self.T_p)

    @property
    def field(self) -> np.ndarray | None:
        if self.field_s is None:
            return None
        return self._select(self.field_s, self.field_p)

    @property
    def has_field(self) -> bool:
        return self.field_s is not None

    def _select(self, s, p):
        pol = self.beam.polarization
        if pol == "s":
            return s
        if pol == "p":
            return p
        return 0.5 * (s + p)

    def absorbance(self) -> np.ndarray:
        """A = 1 − R − T for the beam polarization."""
        return 1.0 - self.R - self.T

    def to_dict(self) -> dict[str, Any]:
        """Plain numpy arrays for plotting or saving."""
        data = {
            "wavelength": self.wavelength,
            "angle_deg": self.angle_deg,
            "R": self.R,
            "T": self.T,
            "R_s": self.R_s,
            "R_p": self.R_p,
            "T_s": self.T_s,
            "T_p": self.T_p,
            "r_s": self.r_s,
            "r_p": self.r_p,
            "t_s": self.t_s,
            "t_p": self.t_p,
            "thickness": self.thickness,
        }
        if self.has_field:
            data.update(
                depth=self.depth,
                field=self.field,
                field_s=self.field_s,
                field_p=self.field_p,
                index_profile=self.index_profile,
            )
        return data

    def __repr__(self):
        nwl, nth = self.beam.shape
        extra = f", {self.depth.size} depth points" if self.has_field else ""
        return (
            f"SolveResult({nwl} wavelengths x {nth} angles, "
            f"{self.thickness.size} films{extra})"
        )
