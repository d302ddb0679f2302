"""
Unit tests for the xarray conversion of the flux fields.
"""

import pytest
import jax.numpy as jnp
import numpy as np

from aerojax.flux_types import FluxFields
from aerojax.io import fluxes_to_xarray


def make_fluxes(shape=(2, 3), skin=None):
    return FluxFields(
        latent_heat=jnp.full(shape, 80.0),
        sensible_heat=jnp.full(shape, 10.0),
        tau_x=jnp.full(shape, 0.04),
        tau_y=jnp.zeros(shape),
        skin_temperature=skin,
    )


class TestFluxesToXarray:
    """Test the dataset built from the flux fields."""

    def test_variables_and_units(self):
        """Test dataset variables, dims and units."""
        ds = fluxes_to_xarray(make_fluxes(), dims=('y', 'x'))
        assert set(ds.data_vars) == {'latent_heat', 'sensible_heat', 'tau_x', 'tau_y'}
        assert ds['latent_heat'].attrs['units'] == 'W/m^2'
        assert ds['tau_x'].attrs['units'] == 'N/m^2'
        assert ds['latent_heat'].dims == ('y', 'x')
        np.testing.assert_allclose(ds['latent_heat'].values, 80.0)

    def test_skin_included(self):
        """Test skin temperature variable and default dims."""
        ds = fluxes_to_xarray(make_fluxes(skin=jnp.full((2, 3), 292.8)))
        assert ds['skin_temperature'].attrs['units'] == 'K'
        assert ds['skin_temperature'].dims == ('dim_0', 'dim_1')

    def test_sign_convention(self):
        """Test sign convention recorded in the attributes."""
        up = fluxes_to_xarray(make_fluxes())
        down = fluxes_to_xarray(make_fluxes(), upward_positive=False)
        assert up.attrs['heat_flux_convention'] == 'upward_positive'
        assert 'downward' in down['latent_heat'].attrs['description']

    def test_wrong_dims(self):
        """Test rejection of mismatched dimension names."""
        with pytest.raises(ValueError, match="dims"):
            fluxes_to_xarray(make_fluxes(), dims=('x',))
