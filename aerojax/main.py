import logging
from pathlib import Path

import hydra
import jax.numpy as jnp
import numpy as np
import xarray as xr
from hydra.core.hydra_config import HydraConfig
from omegaconf import DictConfig

from aerojax.compute import aerobulk_compute
from aerojax.flux_types import BulkParameters
from aerojax.io import fluxes_to_xarray

logger = logging.getLogger(__name__)

INPUT_FIELDS = ('sst', 't_air', 'q_air', 'u10', 'v10', 'slp')
RADIATION_FIELDS = ('rad_sw', 'rad_lw')


def synthetic_inputs(cfg: DictConfig) -> xr.Dataset:
    """Uniform input fields on a small ny x nx grid."""
    shape = (cfg.ny, cfg.nx)
    return xr.Dataset({
        name: (('y', 'x'), np.full(shape, float(cfg[name])))
        for name in INPUT_FIELDS + RADIATION_FIELDS
    })


def load_inputs(cfg: DictConfig) -> xr.Dataset:
    if cfg.input is None:
        return synthetic_inputs(cfg.synthetic)
    ds = xr.open_dataset(hydra.utils.to_absolute_path(cfg.input))
    missing = [name for name in INPUT_FIELDS if name not in ds]
    if missing:
        raise ValueError(f"Invalid input file {cfg.input}: missing variables {missing}")
    return ds


def run(cfg: DictConfig) -> xr.Dataset:
    """Computes the fluxes described by a configuration and returns them as a dataset."""
    ds = load_inputs(cfg)
    params = BulkParameters.default(**cfg.params)
    radiation = {
        name: jnp.asarray(ds[name].values) for name in RADIATION_FIELDS if name in ds
    }
    fluxes = aerobulk_compute(
        cfg.flux.algorithm, cfg.flux.zt, cfg.flux.zu,
        jnp.asarray(ds['sst'].values),
        jnp.asarray(ds['t_air'].values),
        jnp.asarray(ds['q_air'].values),
        jnp.asarray(ds['u10'].values),
        jnp.asarray(ds['v10'].values),
        jnp.asarray(ds['slp'].values),
        rad_sw=radiation.get('rad_sw'),
        rad_lw=radiation.get('rad_lw'),
        return_skin=cfg.flux.return_skin,
        params=params,
        n_iterations=cfg.flux.n_iterations,
        upward_positive=cfg.flux.upward_positive,
    )
    out = fluxes_to_xarray(
        fluxes, dims=ds['sst'].dims, coords=ds['sst'].coords,
        upward_positive=cfg.flux.upward_positive
    )
    out.attrs["algorithm"] = cfg.flux.algorithm
    out.attrs["zt"] = cfg.flux.zt
    out.attrs["zu"] = cfg.flux.zu
    return out


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig):
    """
    Computes air-sea fluxes with configurable algorithm and inputs

    Example:
        python -m aerojax.main
        python -m aerojax.main flux.algorithm=ecmwf
        python -m aerojax.main input=forcing.nc flux.zt=10
        python -m aerojax.main -m flux.algorithm=coare,coare35,ncar,ecmwf

    Available Parameters:
        flux.algorithm: Bulk algorithm, coare, coare35, ncar or ecmwf (default: coare)
        flux.zt: Height of air temperature and humidity in m (default: 2)
        flux.zu: Height of wind in m (default: 10)
        flux.n_iterations: Iterations of the bulk algorithm (default: 10)
        input: netCDF input file (default: uniform synthetic case)
    """
    ds = run(cfg)

    hydra_cfg = HydraConfig.get()
    base_dir = Path('outputs') / hydra_cfg.run.dir.split('outputs/')[-1]
    if str(hydra_cfg.mode) == "RunMode.MULTIRUN":
        output_dir = base_dir / 'multirun' / str(hydra_cfg.job.num)
    else:
        output_dir = base_dir

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / cfg.output.filename
    ds.to_netcdf(str(output_path))
    logger.info("Wrote %s fluxes to %s", cfg.flux.algorithm, output_path)


if __name__ == "__main__":
    main()
