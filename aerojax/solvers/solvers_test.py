"""
Unit tests for the turbulent flux solvers.
"""

import pytest
import jax.numpy as jnp
import numpy as np

from aerojax.flux_types import (
    BulkParameters, MeasurementHeights, RadiativeForcing, SurfaceState
)
from aerojax.preprocessing import potential_temperature_at_height, sea_surface_humidity
from aerojax.solvers import CoareSolver, EcmwfSolver, NcarSolver, TurbulentFluxSolver
from aerojax.solvers.ncar import cd_n10_ncar
from aerojax.thermodynamics import q_sat

SHAPE = (2, 3)
HEIGHTS = MeasurementHeights(zt=2.0, zu=10.0)


def make_case(sst=293.0, t_air=292.0, q_air=0.010, wind=5.0, slp=101300.0):
    sst = jnp.full(SHAPE, sst)
    t_air = jnp.full(SHAPE, t_air)
    q_air = jnp.full(SHAPE, q_air)
    slp = jnp.full(SHAPE, slp)
    surface = SurfaceState(temperature=sst, humidity=sea_surface_humidity(sst, slp))
    theta_zt = potential_temperature_at_height(t_air, q_air, HEIGHTS.zt)
    return surface, theta_zt, q_air, jnp.full(SHAPE, wind), slp


def make_forcing(sw=500.0, lw=350.0):
    return RadiativeForcing(sw_down=jnp.full(SHAPE, sw), lw_down=jnp.full(SHAPE, lw))


ALL_SOLVERS = [
    CoareSolver(version='3.0'),
    CoareSolver(version='3.5'),
    NcarSolver(),
    EcmwfSolver(),
]


class TestSolverInterface:
    """Test the contract shared by all solvers."""

    def test_cannot_instantiate_base(self):
        """Test that the abstract solver cannot be built."""
        with pytest.raises(TypeError):
            TurbulentFluxSolver()

    def test_invalid_iterations(self):
        """Test rejection of zero iterations."""
        with pytest.raises(ValueError, match="iterations"):
            NcarSolver(n_iterations=0)

    def test_invalid_coare_version(self):
        """Test rejection of an unknown COARE version."""
        with pytest.raises(ValueError, match="3.1"):
            CoareSolver(version='3.1')

    def test_names(self):
        """Test solver names."""
        assert [solver.name for solver in ALL_SOLVERS] == ['coare', 'coare35', 'ncar', 'ecmwf']

    def test_ncar_rejects_cool_skin(self):
        """Test cool skin requested from NCAR."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        with pytest.raises(ValueError, match="cool-skin"):
            NcarSolver().solve(HEIGHTS, surface, theta_zt, q_zt, wind,
                               use_skin=True, slp=slp, forcing=make_forcing())

    def test_cool_skin_needs_forcing(self):
        """Test cool skin requested without forcing."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        with pytest.raises(ValueError, match="radiative forcing"):
            CoareSolver().solve(HEIGHTS, surface, theta_zt, q_zt, wind, use_skin=True, slp=slp)


@pytest.mark.parametrize("solver", ALL_SOLVERS, ids=lambda solver: solver.name)
class TestSolverOutput:
    """Test the outputs of every solver on a typical case."""

    def test_finite_outputs(self, solver):
        """Test shape and finiteness of all outputs."""
        surface, theta_zt, q_zt, wind, _ = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind)
        for field in (*out.coefficients, out.t_zu, out.q_zu, out.bulk_wind):
            assert field.shape == SHAPE
            assert jnp.all(jnp.isfinite(field))

    def test_coefficients_magnitude(self, solver):
        """Test typical magnitude of the transfer coefficients."""
        surface, theta_zt, q_zt, wind, _ = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind)
        for coeff in out.coefficients:
            assert jnp.all(coeff > 5e-4)
            assert jnp.all(coeff < 3e-3)

    def test_bulk_wind_floor(self, solver):
        """Test minimum bulk wind speed without wind."""
        surface, theta_zt, q_zt, wind, _ = make_case(wind=0.0)
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind)
        assert jnp.all(out.bulk_wind >= 0.5 - 1e-6)
        assert jnp.all(jnp.isfinite(out.coefficients.momentum))

    def test_surface_unchanged_without_skin(self, solver):
        """Test bulk surface state returned without cool skin."""
        surface, theta_zt, q_zt, wind, _ = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind)
        np.testing.assert_allclose(out.surface.temperature, surface.temperature)
        np.testing.assert_allclose(out.surface.humidity, surface.humidity)

    def test_air_shifted_towards_wind_height(self, solver):
        """Test temperature and humidity adjusted to zu."""
        # Surface warmer than air: potential temperature decreases away from the surface
        surface, theta_zt, q_zt, wind, _ = make_case(sst=296.0, t_air=292.0)
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind)
        assert jnp.all(out.t_zu < theta_zt)
        assert jnp.all(out.q_zu < q_zt)

    def test_unstable_enhances_transfer(self, solver):
        """Test larger heat transfer in unstable air."""
        stable = make_case(sst=288.0, t_air=292.0)
        unstable = make_case(sst=296.0, t_air=292.0)
        out_stable = solver.solve(HEIGHTS, *stable[:4])
        out_unstable = solver.solve(HEIGHTS, *unstable[:4])
        assert jnp.all(out_unstable.coefficients.heat > out_stable.coefficients.heat)

    def test_custom_parameters(self, solver):
        """Test a custom minimum bulk wind speed."""
        surface, theta_zt, q_zt, wind, _ = make_case(wind=0.2)
        params = BulkParameters.default(min_bulk_wind=1.0)
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind, params=params)
        assert jnp.all(out.bulk_wind >= 1.0 - 1e-6)


@pytest.mark.parametrize("solver", [CoareSolver(), CoareSolver(version='3.5'), EcmwfSolver()],
                         ids=lambda solver: solver.name)
class TestCoolSkin:
    """Test the cool-skin schemes of COARE and ECMWF."""

    def test_skin_cooler_at_night(self, solver):
        """Test skin cooler than bulk SST at night."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind, use_skin=True,
                           slp=slp, forcing=make_forcing(sw=0.0, lw=350.0))
        cooling = surface.temperature - out.surface.temperature
        assert jnp.all(cooling > 0)
        assert jnp.all(cooling < 1.5)
        assert jnp.all(out.surface.humidity < surface.humidity)

    def test_skin_humidity_saturated(self, solver):
        """Test skin humidity at 98% of saturation."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind, use_skin=True,
                           slp=slp, forcing=make_forcing(sw=300.0, lw=360.0))
        np.testing.assert_allclose(out.surface.humidity,
                                   0.98 * q_sat(out.surface.temperature, slp), rtol=1e-5)

    def test_skin_finite_with_strong_sun(self, solver):
        """Test skin temperature under strong sunshine."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        out = solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind, use_skin=True,
                           slp=slp, forcing=make_forcing(sw=1000.0, lw=400.0))
        assert jnp.all(jnp.isfinite(out.surface.temperature))
        assert jnp.all(jnp.abs(out.surface.temperature - surface.temperature) < 2.0)

    def test_input_surface_not_modified(self, solver):
        """Test input surface state left unchanged."""
        surface, theta_zt, q_zt, wind, slp = make_case()
        sst_before = np.array(surface.temperature)
        solver.solve(HEIGHTS, surface, theta_zt, q_zt, wind, use_skin=True,
                     slp=slp, forcing=make_forcing(sw=0.0))
        np.testing.assert_array_equal(surface.temperature, sst_before)


class TestNcarNeutralDrag:
    """Test the neutral drag coefficient of Large & Yeager."""

    def test_typical_value(self):
        """Test neutral drag coefficient at 10 m/s."""
        # 2.7/10 + 0.142 + 10/13.09, less a 3e-7 high-wind term
        np.testing.assert_allclose(cd_n10_ncar(jnp.array(10.0)), 1.176e-3, rtol=1e-3)

    def test_capped_above_33(self):
        """Test neutral drag coefficient above 33 m/s."""
        np.testing.assert_allclose(cd_n10_ncar(jnp.array(40.0)), 2.34e-3, rtol=1e-6)

    def test_finite_at_calm(self):
        """Test neutral drag coefficient without wind."""
        assert jnp.isfinite(cd_n10_ncar(jnp.array(0.0)))
