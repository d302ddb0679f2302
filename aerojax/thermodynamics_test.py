"""
Unit tests for the thermodynamic functions of moist air.
"""

import jax.numpy as jnp
import numpy as np

from aerojax.constants import cp_dry, t0
from aerojax.thermodynamics import (
    cp_air, e_sat, gamma_moist, lvap, one_on_l, q_sat, rho_air,
    virtual_temperature, visc_air
)


class TestSaturation:
    """Test saturation vapour pressure and humidity."""

    def test_e_sat_at_freezing(self):
        """Test saturation vapour pressure at the triple point."""
        # About 611 Pa at the triple point
        np.testing.assert_allclose(e_sat(jnp.array(273.16)), 611.0, rtol=0.01)

    def test_e_sat_increases_with_temperature(self):
        """Test saturation vapour pressure growing with temperature."""
        temperature = jnp.linspace(270.0, 310.0, 9)
        es = e_sat(temperature)
        assert jnp.all(jnp.diff(es) > 0)

    def test_q_sat_typical_value(self):
        """Test saturation humidity at 20 degC."""
        qs = q_sat(jnp.array(293.15), jnp.array(101325.0))
        # ~14.5 g/kg at 20 degC
        np.testing.assert_allclose(qs, 0.0145, rtol=0.03)

    def test_q_sat_decreases_with_pressure(self):
        """Test saturation humidity decreasing with pressure."""
        temperature = jnp.array([290.0, 290.0])
        pressure = jnp.array([95000.0, 105000.0])
        qs = q_sat(temperature, pressure)
        assert qs[0] > qs[1]


class TestMoistAirProperties:
    """Test heat capacity, latent heat, density and viscosity."""

    def test_cp_air_dry(self):
        """Test specific heat of dry air."""
        np.testing.assert_allclose(cp_air(jnp.array(0.0)), cp_dry)

    def test_lvap_at_t0(self):
        """Test latent heat of vaporization at 0 degC."""
        np.testing.assert_allclose(lvap(jnp.array(t0)), 2.501e6)

    def test_lvap_decreases_with_temperature(self):
        """Test latent heat decreasing with temperature."""
        assert lvap(jnp.array(300.0)) < lvap(jnp.array(280.0))

    def test_virtual_temperature_exceeds_temperature(self):
        """Test virtual temperature of moist and dry air."""
        temperature = jnp.array(290.0)
        assert virtual_temperature(temperature, jnp.array(0.01)) > temperature
        np.testing.assert_allclose(virtual_temperature(temperature, jnp.array(0.0)), 290.0)

    def test_rho_air_typical_value(self):
        """Test density of standard dry air."""
        rho = rho_air(jnp.array(288.0), jnp.array(0.0), jnp.array(101325.0))
        np.testing.assert_allclose(rho, 1.225, rtol=0.01)

    def test_visc_air_typical_value(self):
        """Test kinematic viscosity of air at 20 degC."""
        np.testing.assert_allclose(visc_air(jnp.array(293.15)), 1.5e-5, rtol=0.05)

    def test_gamma_moist_positive(self):
        """Test moist lapse rate between zero and dry adiabatic."""
        gamma = gamma_moist(jnp.array([260.0, 290.0, 305.0]), jnp.array([0.001, 0.01, 0.02]))
        assert jnp.all(gamma > 0)
        # Below the dry adiabatic lapse rate
        assert jnp.all(gamma < 0.0098)


class TestObukhovLength:
    """Test the inverse Obukhov length."""

    def test_sign_follows_stability(self):
        """Test sign of 1/L for stable and unstable air."""
        u_star = jnp.array([0.3, 0.3])
        # Air warmer than the surface gives t_star > 0 and stable conditions
        t_star = jnp.array([0.1, -0.1])
        q_star = jnp.zeros(2)
        inv_l = one_on_l(jnp.array([290.0, 290.0]), jnp.array([0.01, 0.01]), u_star, t_star, q_star)
        assert inv_l[0] > 0
        assert inv_l[1] < 0

    def test_zero_friction_velocity_is_finite(self):
        """Test finite 1/L without friction velocity."""
        inv_l = one_on_l(jnp.array(290.0), jnp.array(0.01), jnp.array(0.0),
                         jnp.array(0.1), jnp.array(0.0))
        assert jnp.isfinite(inv_l)
