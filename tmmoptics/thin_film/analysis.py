"""Thin film analysis class.

Plots the spectra, field maps and index profiles of a ``SolveResult``.
Only the plain arrays of the result are used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypeAlias

import matplotlib.pyplot as plt
import numpy as np

from tmmoptics.materials.base import convert_wavelength

if TYPE_CHECKING:
    from .results import SolveResult

# Physical constants
SPEED_OF_LIGHT = 299792458.0  # m/s
PLANCK_CONSTANT = 6.62607015e-34  # J⋅s
ELEMENTARY_CHARGE = 1.602176634e-19  # C
PLANCK_EV = PLANCK_CONSTANT / ELEMENTARY_CHARGE  # eV⋅s ≈ 4.135667696e-15

# Type definitions
PlotType = Literal["R", "T", "A"]
Array: TypeAlias = Any  # np.ndarray
AxisUnit = Literal["um", "nm", "frequency", "energy", "wavenumber"]


class SpectralAnalyzer:
    """Class for plotting the optical response of a solved stack.

    Attributes:
        result (SolveResult): The solver output to be plotted.
    """

    def __init__(self, result: SolveResult) -> None:
        self.result = result

    # ----- helpers -----
    def _quantity(self, name: str) -> Array:
        if name == "R":
            return self.result.R
        if name == "T":
            return self.result.T
        if name == "A":
            return self.result.absorbance()
        raise ValueError("to_plot must be 'R', 'T', 'A' or a list of these")

    def _wavelength_axis(self, unit: AxisUnit) -> Array:
        """Beam wavelengths converted to the plotting unit."""
        wl_um = convert_wavelength(self.result.wavelength, self.result.beam.unit, "um")
        if unit == "um":
            return wl_um
        elif unit == "nm":
            return wl_um * 1000.0
        elif unit == "frequency":  # um to Hz
            return SPEED_OF_LIGHT / (wl_um * 1e-6)
        elif unit == "energy":  # um to eV
            return (PLANCK_EV * SPEED_OF_LIGHT) / (wl_um * 1e-6)
        elif unit == "wavenumber":  # um to cm⁻¹
            return 1e4 / wl_um
        else:
            raise ValueError(f"Unknown wavelength unit: {unit}")

    @staticmethod
    def _get_wavelength_axis_label(unit: AxisUnit) -> str:
        labels = {
            "um": r"$\lambda$ ($\mu$m)",
            "nm": r"$\lambda$ (nm)",
            "frequency": r"$\nu$ (Hz)",
            "energy": r"$E$ (eV)",
            "wavenumber": r"$k$ (cm$^{-1}$)",
        }
        return labels[unit]

    def _require_field(self):
        if not self.result.has_field:
            raise ValueError("Result has no field profile, solve with compute_field=True")

    # ----- spectra -----
    def wavelength_view(
        self,
        angle_index: int = 0,
        wavelength_unit: AxisUnit = "nm",
        to_plot: PlotType | list[PlotType] = "R",
        ax: plt.Axes = None,
    ) -> tuple[plt.Figure, plt.Axes]:
        """Plot R/T/A vs wavelength at one angle of incidence.

        Args:
            angle_index: Index in the beam angle grid.
            wavelength_unit: Unit of the x axis.
            to_plot: Quantity(ies) to plot.
            ax: Optional matplotlib Axes.

        Returns:
            Tuple of (figure, axes)
        """
        if isinstance(to_plot, str):
            to_plot = [to_plot]
        x_values = self._wavelength_axis(wavelength_unit)
        pol = self.result.beam.polarization
        aoi = self.result.angle_deg[angle_index]

        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        for quantity in to_plot:
            ax.plot(
                x_values,
                self._quantity(quantity)[:, angle_index],
                label=f"{quantity}, {pol}-pol, AOI={aoi:g}°",
            )

        ax.set_xlabel(self._get_wavelength_axis_label(wavelength_unit))
        ax.set_ylabel("Power fraction")
        ax.set_xlim(float(x_values.min()), float(x_values.max()))
        ax.set_ylim(0, 1)
        ax.grid(True, alpha=0.3)
        ax.legend()
        return fig, ax

    def angular_view(
        self,
        wavelength_index: int = 0,
        to_plot: PlotType | list[PlotType] = "R",
        ax: plt.Axes = None,
    ) -> tuple[plt.Figure, plt.Axes]:
        """Plot R/T/A vs angle of incidence at one wavelength."""
        if isinstance(to_plot, str):
            to_plot = [to_plot]
        x_values = self.result.angle_deg
        pol = self.result.beam.polarization
        wl = self.result.wavelength[wavelength_index]

        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        for quantity in to_plot:
            ax.plot(
                x_values,
                self._quantity(quantity)[wavelength_index, :],
                label=f"{quantity}, {pol}-pol, "
                + f"λ={wl:g}{self.result.beam.unit}",
            )

        ax.set_xlabel(r"AOI (°)")
        ax.set_ylabel("Power fraction")
        ax.set_xlim(float(x_values.min()), float(x_values.max()))
        ax.set_ylim(0, 1)
        ax.grid(True, alpha=0.3)
        ax.legend()
        return fig, ax

    def map_view(
        self,
        wavelength_unit: AxisUnit = "nm",
        to_plot: PlotType | list[PlotType] = "R",
        fig: plt.Figure = None,
        axs: plt.Axes | list[plt.Axes] = None,
    ) -> tuple[plt.Figure, plt.Axes | list[plt.Axes]]:
        """Plot 2D maps of R/T/A vs wavelength and angle of incidence."""
        if isinstance(to_plot, str):
            to_plot = [to_plot]

        wl_plot = self._wavelength_axis(wavelength_unit)
        WL, AOI = np.meshgrid(wl_plot, self.result.angle_deg, indexing="ij")

        if fig is None or axs is None:
            fig, axs = plt.subplots(len(to_plot), 1, figsize=(8, 4 * len(to_plot)))
            if len(to_plot) == 1:
                axs = [axs]
        else:
            if len(to_plot) == 1 and not isinstance(axs, list):
                axs = [axs]

        pol = self.result.beam.polarization
        for ax_i, quantity in zip(axs, to_plot, strict=False):
            im = ax_i.pcolormesh(
                WL, AOI, self._quantity(quantity), shading="auto", vmin=0, vmax=1
            )
            ax_i.set_xlabel(self._get_wavelength_axis_label(wavelength_unit))
            ax_i.set_ylabel(r"AOI (°)")
            ax_i.set_title(f"{quantity}, {pol}-pol")
            fig.colorbar(im, ax=ax_i, label="Power fraction")

        fig.tight_layout()
        return fig, axs[0] if len(to_plot) == 1 else axs

    # ----- field and index profile -----
    def field_view(
        self,
        angle_index: int = 0,
        wavelength_unit: AxisUnit = "nm",
        ax: plt.Axes = None,
    ) -> tuple[plt.Figure, plt.Axes]:
        """Map of |E|² vs wavelength and depth at one angle of incidence."""
        self._require_field()
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        wl_plot = self._wavelength_axis(wavelength_unit)
        WL, Z = np.meshgrid(wl_plot, self.result.depth, indexing="ij")
        im = ax.pcolormesh(
            WL, Z, self.result.field[:, angle_index, :], shading="auto"
        )
        ax.set_xlabel(self._get_wavelength_axis_label(wavelength_unit))
        ax.set_ylabel(f"Depth ({self.result.beam.unit})")
        ax.invert_yaxis()
        ax.set_title(
            f"$|E|^2$, {self.result.beam.polarization}-pol, "
            + f"AOI={self.result.angle_deg[angle_index]:g}°"
        )
        fig.colorbar(im, ax=ax, label=r"$|E|^2 / |E_0|^2$")
        return fig, ax

    def index_profile_view(
        self, wavelength_index: int = 0, ax: plt.Axes = None
    ) -> tuple[plt.Figure, plt.Axes]:
        """Step plot of n and k along the depth of the stack."""
        self._require_field()
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        z = self.result.depth
        profile = self.result.index_profile[wavelength_index]
        ax.step(z, profile.real, where="post", label="n")
        ax.step(z, profile.imag, where="post", label="k", linestyle="--")
        ax.set_xlabel(f"Depth ({self.result.beam.unit})")
        ax.set_ylabel("Index of refraction")
        ax.set_title(
            f"λ={self.result.wavelength[wavelength_index]:g}{self.result.beam.unit}"
        )
        ax.grid(True, alpha=0.3)
        ax.legend()
        return fig, ax
