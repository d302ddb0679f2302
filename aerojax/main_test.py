"""
Tests of the configurable driver, without the hydra command line.
"""

from pathlib import Path

import pytest
import numpy as np
import xarray as xr
from omegaconf import OmegaConf

from aerojax.main import run

CONFIG = Path(__file__).parent / "config" / "config.yaml"


@pytest.fixture
def cfg():
    return OmegaConf.load(CONFIG)


class TestRun:
    """Test flux computations described by a configuration."""

    def test_synthetic_case(self, cfg):
        """Test run on the synthetic case."""
        ds = run(cfg)
        assert ds['latent_heat'].shape == (cfg.synthetic.ny, cfg.synthetic.nx)
        assert ds.attrs['algorithm'] == 'coare'
        assert np.all(np.isfinite(ds['latent_heat'].values))
        # Radiation given and coare selected: cool-skin scheme active
        assert 'skin_temperature' in ds

    @pytest.mark.parametrize("algorithm", ['coare35', 'ncar', 'ecmwf'])
    def test_algorithm_override(self, cfg, algorithm):
        """Test run with another algorithm."""
        cfg.flux.algorithm = algorithm
        ds = run(cfg)
        assert ds.attrs['algorithm'] == algorithm
        assert np.all(ds['tau_y'].values < 0)

    def test_netcdf_input(self, cfg, tmp_path):
        """Test run on a netCDF input file."""
        shape = (2, 2)
        inputs = xr.Dataset({
            'sst': (('lat', 'lon'), np.full(shape, 290.0)),
            't_air': (('lat', 'lon'), np.full(shape, 289.0)),
            'q_air': (('lat', 'lon'), np.full(shape, 0.009)),
            'u10': (('lat', 'lon'), np.full(shape, 8.0)),
            'v10': (('lat', 'lon'), np.zeros(shape)),
            'slp': (('lat', 'lon'), np.full(shape, 101000.0)),
        }, coords={'lat': [10.0, 11.0], 'lon': [200.0, 201.0]})
        path = tmp_path / "inputs.nc"
        inputs.to_netcdf(path)

        cfg.input = str(path)
        cfg.flux.algorithm = 'ncar'
        ds = run(cfg)
        assert ds['latent_heat'].dims == ('lat', 'lon')
        np.testing.assert_allclose(ds['lat'].values, [10.0, 11.0])
        # No radiation in the file: skin equals the bulk SST
        np.testing.assert_allclose(ds['skin_temperature'].values, 290.0)

    def test_missing_variable(self, cfg, tmp_path):
        """Test rejection of an incomplete input file."""
        path = tmp_path / "inputs.nc"
        xr.Dataset({'sst': (('y', 'x'), np.full((2, 2), 290.0))}).to_netcdf(path)
        cfg.input = str(path)
        with pytest.raises(ValueError, match="t_air"):
            run(cfg)
