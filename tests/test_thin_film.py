import matplotlib.pyplot as plt
import numpy as np
import pytest

from tmmoptics import resolve
from tmmoptics.errors import InvalidParameter, StructuralMismatch
from tmmoptics.thin_film import (
    Layer,
    PlaneWave,
    SolverOptions,
    SpectralAnalyzer,
    ThinFilmStack,
    repeat_cell,
    solve,
)
from tmmoptics.thin_film.analysis import PLANCK_EV, SPEED_OF_LIGHT
from tmmoptics.thin_film.core import admittance, normal_index

from .utils import assert_allclose

WL = np.linspace(400.0, 1000.0, 601)
LAMBDA0 = 730.0
I0 = 330  # WL[I0] == LAMBDA0


def const(n, size=WL.size):
    return np.full(size, n, dtype=complex)


@pytest.fixture
def air():
    return Layer(resolve("air", WL, unit="nm"), name="air")


@pytest.fixture
def glass():
    return Layer(resolve("glass", WL / 1e3, unit="um"), name="glass")


@pytest.fixture
def simple_stack(air, glass):
    """Bare air-glass interface."""
    return ThinFilmStack([air, glass])


@pytest.fixture
def single_layer_stack(air, glass):
    """Quarter-wave MgF2-like layer on glass."""
    return ThinFilmStack([air, Layer.optical(const(1.38), name="MgF2"), glass])


@pytest.fixture
def multilayer_stack(air, glass):
    high = Layer(const(2.3), 80.0, name="TiO2")
    low = Layer(const(1.46), 125.0, name="SiO2")
    return ThinFilmStack.build(air, repeat_cell([high, low], 3), glass)


@pytest.fixture
def absorbing_stack(air, glass):
    metal = Layer(const(0.2 + 3.5j), 20.0, name="metal")
    return ThinFilmStack([air, Layer(const(1.46), 50.0), metal, glass])


def fresnel(n0, n1, theta_deg):
    th0 = np.deg2rad(theta_deg)
    c0 = np.cos(th0)
    c1 = np.sqrt(1 - (n0 * np.sin(th0) / n1) ** 2)
    Rs = ((n0 * c0 - n1 * c1) / (n0 * c0 + n1 * c1)) ** 2
    Rp = ((n1 * c0 - n0 * c1) / (n1 * c0 + n0 * c1)) ** 2
    return Rs, Rp


class TestLayer:
    """Test Layer class functionality."""

    def test_layer_creation(self):
        layer = Layer([1.5, 1.5 + 0.1j], 100.0, name="film")
        assert layer.index.dtype == np.complex128
        assert len(layer) == 2
        assert layer.kind == "GT"
        assert layer.physical_thickness(WL) == 100.0

    def test_index_read_only(self):
        layer = Layer(const(1.5), 10.0)
        with pytest.raises(ValueError):
            layer.index[0] = 2.0

    def test_layer_is_immutable(self):
        layer = Layer(const(1.5), 10.0)
        with pytest.raises(AttributeError):
            layer.thickness = 20.0

    @pytest.mark.parametrize("thickness", [-1.0, np.inf, np.nan])
    def test_invalid_thickness(self, thickness):
        with pytest.raises(InvalidParameter):
            Layer(const(1.5), thickness)

    def test_invalid_kind(self):
        with pytest.raises(InvalidParameter):
            Layer(const(1.5), 10.0, kind="QWOT")

    def test_optical_thickness(self):
        layer = Layer.optical(const(1.38))
        assert layer.kind == "OT"
        assert_allclose(layer.physical_thickness(WL, LAMBDA0), 0.25 * LAMBDA0 / 1.38)

    def test_optical_thickness_interpolates_index(self):
        wl = np.array([700.0, 800.0])
        layer = Layer.optical([1.4, 1.6], fraction=0.5)
        assert_allclose(layer.physical_thickness(wl, 750.0), 0.5 * 750.0 / 1.5)

    def test_optical_thickness_without_reference(self):
        with pytest.raises(InvalidParameter, match="reference_wavelength"):
            Layer.optical(const(1.38)).physical_thickness(WL)

    def test_reference_outside_grid(self):
        with pytest.raises(InvalidParameter, match="outside"):
            Layer.optical(const(1.38)).physical_thickness(WL, 1200.0)


class TestPlaneWave:
    def test_defaults(self):
        beam = PlaneWave(WL)
        assert beam.shape == (WL.size, 1)
        assert beam.polarization == "u"
        assert beam.unit == "nm"
        assert_allclose(beam.angle_rad, [0.0])

    def test_repr(self):
        beam = PlaneWave(WL, [0.0, 45.0], "s")
        assert repr(beam) == "PlaneWave(601 wavelengths nm, 2 angles, s-pol)"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"wavelength": [-500.0]},
            {"wavelength": [np.nan]},
            {"wavelength": [[500.0]]},
            {"wavelength": [500.0], "angle_deg": [90.0]},
            {"wavelength": [500.0], "angle_deg": [-1.0]},
            {"wavelength": [500.0], "polarization": "x"},
            {"wavelength": [500.0], "unit": "furlong"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidParameter):
            PlaneWave(**kwargs)


class TestThinFilmStack:
    """Test ThinFilmStack structure and manipulation."""

    def test_stack_creation(self, simple_stack, air, glass):
        assert len(simple_stack) == 2
        assert simple_stack.incident is air
        assert simple_stack.substrate is glass
        assert simple_stack.films == ()

    def test_too_few_layers(self, air):
        with pytest.raises(StructuralMismatch):
            ThinFilmStack([air])

    def test_not_a_layer(self, air):
        with pytest.raises(TypeError):
            ThinFilmStack([air, const(1.5)])

    def test_insert(self, simple_stack):
        film = Layer(const(1.46), 100.0, name="SiO2")
        stack = simple_stack.insert(1, film)
        assert len(stack) == 3
        assert stack.films == (film,)
        assert len(simple_stack) == 2

    @pytest.mark.parametrize("position", [0, 2, -1])
    def test_insert_outside_ambients(self, simple_stack, position):
        with pytest.raises(StructuralMismatch):
            simple_stack.insert(position, Layer(const(1.46), 100.0))

    def test_repeat_cell(self, multilayer_stack):
        names = [layer.name for layer in multilayer_stack.films]
        assert names == ["TiO2", "SiO2"] * 3

    def test_repeat_cell_negative(self):
        with pytest.raises(InvalidParameter, match="times must be >= 0"):
            repeat_cell([Layer(const(1.5))], -1)

    def test_stack_repr(self, single_layer_stack):
        assert repr(single_layer_stack) == "ThinFilmStack(1 films: air -> MgF2 -> glass)"

    def test_index_length_mismatch(self, air, glass):
        stack = ThinFilmStack([air, Layer(const(1.5, 10), 100.0), glass])
        with pytest.raises(StructuralMismatch, match="Layer 1"):
            solve(PlaneWave(WL), stack)


class TestCore:
    def test_normal_index_branch(self):
        q = normal_index(1.0, np.deg2rad(40.0), np.array([0.2 + 3.5j, 1.5 + 0.01j]))
        assert np.all(q.imag >= 0)

    def test_total_internal_reflection_branch(self):
        q = normal_index(1.5, np.deg2rad(60.0), np.array([1.0 + 0j]))
        assert_allclose(q.real, 0.0, atol=1e-15)
        assert q.imag[0] > 0

    def test_invalid_polarization(self):
        with pytest.raises(ValueError, match="Invalid polarization"):
            admittance(1.5, 1.5, "u")


class TestSolver:
    """Test reflectance and transmittance calculations."""

    @pytest.mark.parametrize("theta", [0.0, 30.0, 60.0])
    def test_bare_interface_fresnel(self, theta):
        n0, n1 = 1.0, 1.52
        stack = [Layer(const(n0)), Layer(const(n1))]
        res = solve(PlaneWave(WL, [theta]), stack)
        Rs, Rp = fresnel(n0, n1, theta)
        assert_allclose(res.R_s, Rs, rtol=1e-10)
        assert_allclose(res.R_p, Rp, rtol=1e-10)
        assert_allclose(res.T_s, 1 - Rs, rtol=1e-10)
        assert_allclose(res.T_p, 1 - Rp, rtol=1e-10)

    def test_zero_thickness_film_is_transparent(self, simple_stack):
        beam = PlaneWave(WL, [0.0, 45.0])
        with_film = simple_stack.insert(1, Layer(const(2.3 + 0.5j), 0.0))
        bare = solve(beam, simple_stack)
        coated = solve(beam, with_film)
        assert_allclose(coated.R_s, bare.R_s, rtol=1e-12)
        assert_allclose(coated.T_p, bare.T_p, rtol=1e-12)

    @pytest.mark.parametrize("pol", ["s", "p", "u"])
    def test_energy_conservation(self, multilayer_stack, pol):
        beam = PlaneWave(WL, [0.0, 20.0, 45.0, 70.0], pol)
        res = solve(beam, multilayer_stack)
        assert_allclose(res.R + res.T, 1.0, atol=1e-9)
        assert np.all(res.R >= 0) and np.all(res.R <= 1)

    def test_normal_incidence_polarization_independent(self, absorbing_stack):
        res = solve(PlaneWave(WL, [0.0]), absorbing_stack)
        assert_allclose(res.R_s, res.R_p, rtol=1e-10)
        assert_allclose(res.T_s, res.T_p, rtol=1e-10)

    def test_absorbing_stack(self, absorbing_stack):
        res = solve(PlaneWave(WL, [0.0, 45.0]), absorbing_stack)
        A = res.absorbance()
        assert np.all(A > 0)
        assert np.all(A < 1)

    def test_total_internal_reflection(self):
        stack = [Layer(const(1.5)), Layer(const(1.0))]
        res = solve(PlaneWave(WL, [60.0]), stack)
        assert_allclose(res.R_s, 1.0, rtol=1e-12)
        assert_allclose(res.R_p, 1.0, rtol=1e-12)
        assert_allclose(res.T_s, 0.0, atol=1e-15)
        assert_allclose(res.T_p, 0.0, atol=1e-15)

    def test_unpolarized_average(self, multilayer_stack):
        res = solve(PlaneWave(WL, [50.0], "u"), multilayer_stack)
        assert_allclose(res.R, 0.5 * (res.R_s + res.R_p))
        assert_allclose(res.T, 0.5 * (res.T_s + res.T_p))

    def test_polarization_selection(self, multilayer_stack):
        res_s = solve(PlaneWave(WL, [50.0], "s"), multilayer_stack)
        res_p = solve(PlaneWave(WL, [50.0], "p"), multilayer_stack)
        assert res_s.R is res_s.R_s
        assert res_p.T is res_p.T_p

    def test_result_shape_and_repr(self, multilayer_stack):
        res = solve(PlaneWave(WL, [0.0, 10.0, 20.0]), multilayer_stack)
        assert res.R.shape == (WL.size, 3)
        assert res.r_s.dtype == np.complex128
        assert_allclose(res.thickness, [80.0, 125.0] * 3)
        assert repr(res) == "SolveResult(601 wavelengths x 3 angles, 6 films)"

    def test_result_read_only(self, simple_stack):
        res = solve(PlaneWave(WL), simple_stack)
        with pytest.raises(ValueError):
            res.R_s[0, 0] = 0.0

    def test_to_dict(self, simple_stack):
        res = solve(PlaneWave(WL), simple_stack)
        data = res.to_dict()
        assert {"wavelength", "R", "T", "r_s", "t_p", "thickness"} <= set(data)
        assert "field" not in data
        res = solve(PlaneWave(WL), simple_stack, SolverOptions(compute_field=True))
        assert {"depth", "field", "index_profile"} <= set(res.to_dict())

    def test_optical_layer_needs_reference(self, single_layer_stack):
        with pytest.raises(InvalidParameter):
            solve(PlaneWave(WL), single_layer_stack)

    def test_thick_absorbing_film_stays_finite(self):
        wl = np.array([400.0, 600.0])
        metal = const(0.2 + 3.5j, 2)
        beam = PlaneWave(wl, [0.0, 45.0])
        stack = [Layer(const(1.0, 2)), Layer(metal, 20000.0), Layer(const(1.5, 2))]
        res = solve(beam, stack, SolverOptions(compute_field=True))
        bare = solve(beam, [Layer(const(1.0, 2)), Layer(metal)])
        assert np.all(np.isfinite(res.R_s)) and np.all(np.isfinite(res.R_p))
        assert np.all(np.isfinite(res.T))
        assert_allclose(res.R_s, bare.R_s, rtol=1e-10)
        assert_allclose(res.R_p, bare.R_p, rtol=1e-10)
        assert_allclose(res.T, 0.0, atol=1e-30)
        assert np.all(np.isfinite(res.field))

    def test_samples_per_layer_validation(self):
        with pytest.raises(InvalidParameter):
            SolverOptions(samples_per_layer=0)

    def test_samples_per_layer_must_be_integer(self):
        with pytest.raises(InvalidParameter, match="integer"):
            SolverOptions(samples_per_layer=2.5)
        options = SolverOptions(samples_per_layer=np.int64(4))
        assert options.samples_per_layer == 4
        assert type(options.samples_per_layer) is int

    def test_unsorted_wavelengths(self, multilayer_stack):
        order = np.random.default_rng(0).permutation(WL.size)
        stack = ThinFilmStack(
            [Layer(layer.index[order], layer.thickness) for layer in multilayer_stack]
        )
        shuffled = solve(PlaneWave(WL[order]), stack)
        sorted_ = solve(PlaneWave(WL), multilayer_stack)
        assert_allclose(shuffled.R, sorted_.R[order])


class TestQuarterWave:
    """Single quarter-wave antireflection layer."""

    def test_reflectance_at_reference(self, air, glass):
        n1 = 1.5
        stack = ThinFilmStack([air, Layer.optical(const(n1)), glass])
        res = solve(PlaneWave(WL, [0.0]), stack, SolverOptions(reference_wavelength=LAMBDA0))
        n0 = air.index[I0].real
        ns = glass.index[I0].real
        expected = ((n0 * ns - n1**2) / (n0 * ns + n1**2)) ** 2
        assert_allclose(res.R[I0, 0], expected, rtol=1e-9)
        assert_allclose(res.thickness, [0.25 * LAMBDA0 / n1])

    def test_minimum_at_reference(self, air):
        substrate = Layer(resolve("dummy", WL, 1.52, 0.0, unit="nm"))
        stack = ThinFilmStack([air, Layer.optical(const(1.5)), substrate])
        res = solve(PlaneWave(WL, [0.0]), stack, SolverOptions(reference_wavelength=LAMBDA0))
        assert np.argmin(res.R[:, 0]) == I0

    def test_ideal_antireflection(self, air, glass):
        n1 = np.sqrt(air.index.real * glass.index.real)
        stack = ThinFilmStack([air, Layer.optical(n1), glass])
        res = solve(PlaneWave(WL, [0.0]), stack, SolverOptions(reference_wavelength=LAMBDA0))
        assert_allclose(res.R[I0, 0], 0.0, atol=1e-12)
        assert res.R[0, 0] > 1e-4


class TestFieldProfile:
    """Test the field reconstruction inside the stack."""

    def _solve(self, stack, samples=10, angles=(0.0, 40.0), pol="u"):
        options = SolverOptions(
            reference_wavelength=LAMBDA0, compute_field=True, samples_per_layer=samples
        )
        return solve(PlaneWave(WL, list(angles), pol), stack, options)

    def test_depth_grid(self, multilayer_stack):
        res = self._solve(multilayer_stack, samples=7)
        assert res.depth.shape == (7 * 6 + 1,)
        assert res.depth[0] == 0.0
        assert_allclose(res.depth[-1], res.thickness.sum())
        assert np.all(np.diff(res.depth) > 0)
        assert res.field.shape == (WL.size, 2, res.depth.size)

    def test_no_field_by_default(self, multilayer_stack):
        res = solve(PlaneWave(WL), multilayer_stack)
        assert not res.has_field
        assert res.field is None and res.depth is None

    def test_incident_interface(self, absorbing_stack):
        res = self._solve(absorbing_stack)
        assert_allclose(res.field_s[..., 0], np.abs(1 + res.r_s) ** 2, rtol=1e-9)
        assert_allclose(res.field_p[..., 0], np.abs(1 + res.r_p) ** 2, rtol=1e-9)

    def test_substrate_interface(self, absorbing_stack):
        res = self._solve(absorbing_stack)
        assert_allclose(res.field_s[..., -1], np.abs(res.t_s) ** 2)
        assert_allclose(res.field_p[..., -1], np.abs(res.t_p) ** 2)

    def test_field_is_continuous(self, absorbing_stack):
        res = self._solve(absorbing_stack, samples=2000, angles=(30.0,), pol="s")
        jumps = np.abs(np.diff(res.field_s, axis=-1)).max()
        assert jumps < 0.02 * res.field_s.max()

    def test_no_films(self, simple_stack):
        res = self._solve(simple_stack)
        assert_allclose(res.depth, [0.0])
        assert_allclose(res.field_s[..., 0], np.abs(res.t_s) ** 2)
        assert_allclose(res.field_s[..., 0], np.abs(1 + res.r_s) ** 2, rtol=1e-12)

    def test_index_profile(self, single_layer_stack, glass):
        res = self._solve(single_layer_stack, samples=4)
        assert res.index_profile.shape == (WL.size, 5)
        assert_allclose(res.index_profile[:, :4], 1.38)
        assert_allclose(res.index_profile[:, 4], glass.index)


class TestSpectralAnalyzer:
    """Test the plotting views."""

    @pytest.fixture
    def result(self, multilayer_stack):
        options = SolverOptions(compute_field=True, samples_per_layer=5)
        beam = PlaneWave(WL[::20], [0.0, 30.0, 60.0])
        stack = ThinFilmStack(
            [
                Layer(layer.index[::20], layer.thickness, name=layer.name)
                for layer in multilayer_stack
            ]
        )
        return solve(beam, stack, options)

    def test_wavelength_view(self, result):
        fig, ax = SpectralAnalyzer(result).wavelength_view(to_plot=["R", "T", "A"])
        assert len(ax.get_lines()) == 3
        plt.close(fig)

    def test_wavelength_view_with_ax(self, result):
        fig, ax = plt.subplots()
        fig2, ax2 = SpectralAnalyzer(result).wavelength_view(angle_index=1, ax=ax)
        assert fig2 is fig and ax2 is ax
        plt.close(fig)

    @pytest.mark.parametrize("unit", ["um", "nm", "frequency", "energy", "wavenumber"])
    def test_wavelength_units(self, result, unit):
        fig, ax = SpectralAnalyzer(result).wavelength_view(wavelength_unit=unit)
        x = ax.get_lines()[0].get_xdata()
        wl_m = result.wavelength * 1e-9
        expected = {
            "um": wl_m * 1e6,
            "nm": wl_m * 1e9,
            "frequency": SPEED_OF_LIGHT / wl_m,
            "energy": PLANCK_EV * SPEED_OF_LIGHT / wl_m,
            "wavenumber": 1e-2 / wl_m,
        }[unit]
        assert_allclose(x, expected)
        plt.close(fig)

    def test_invalid_wavelength_unit(self, result):
        with pytest.raises(ValueError, match="Unknown wavelength unit"):
            SpectralAnalyzer(result).wavelength_view(wavelength_unit="furlong")

    def test_invalid_quantity(self, result):
        with pytest.raises(ValueError, match="to_plot"):
            SpectralAnalyzer(result).wavelength_view(to_plot="X")
        plt.close("all")

    def test_angular_view(self, result):
        fig, ax = SpectralAnalyzer(result).angular_view(wavelength_index=2, to_plot="T")
        assert_allclose(ax.get_lines()[0].get_xdata(), [0.0, 30.0, 60.0])
        plt.close(fig)

    def test_map_view(self, result):
        fig, axs = SpectralAnalyzer(result).map_view(to_plot=["R", "T"])
        assert len(axs) == 2
        plt.close(fig)
        fig, ax = SpectralAnalyzer(result).map_view(to_plot="A")
        assert ax.get_title() == "A, u-pol"
        plt.close(fig)

    def test_field_view(self, result):
        fig, ax = SpectralAnalyzer(result).field_view(angle_index=2, wavelength_unit="um")
        assert ax.yaxis_inverted()
        plt.close(fig)

    def test_index_profile_view(self, result):
        fig, ax = SpectralAnalyzer(result).index_profile_view(wavelength_index=1)
        assert len(ax.get_lines()) == 2
        plt.close(fig)

    def test_field_views_require_field(self, simple_stack):
        res = solve(PlaneWave(WL), simple_stack)
        with pytest.raises(ValueError, match="compute_field"):
            SpectralAnalyzer(res).field_view()
        with pytest.raises(ValueError, match="compute_field"):
            SpectralAnalyzer(res).index_profile_view()
