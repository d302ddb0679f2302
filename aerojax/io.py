"""
Conversion of flux fields to labelled xarray datasets.
"""

from pathlib import Path

import jax
import numpy as np
import pandas as pd
import xarray as xr

from aerojax.flux_types import FluxFields

UNITS_TABLE = Path(__file__).parent / "units_table.csv"


def fluxes_to_xarray(fluxes: FluxFields, dims=None, coords=None, upward_positive=True) -> xr.Dataset:
    """Converts flux fields to an xarray.Dataset.

    Fields that were not computed (skin temperature when not requested) are
    left out. Units and descriptions come from units_table.csv.

    Args:
        fluxes: Output of aerobulk_compute.
        dims: Names of the grid dimensions, ('y', 'x') style. Defaults to
            dim_0, dim_1, ...
        coords: Optional coordinates passed on to the dataset.
        upward_positive: Sign convention the heat fluxes were computed with.

    Returns:
        A dataset with one variable per flux field.
    """
    fields = {name: value for name, value in fluxes._asdict().items() if value is not None}
    fields = jax.device_get(fields)
    shape = np.shape(fields['latent_heat'])
    if dims is None:
        dims = tuple(f"dim_{i}" for i in range(len(shape)))
    if len(dims) != len(shape):
        raise ValueError(f"Invalid dims: {dims}. Must name {len(shape)} dimensions.")

    ds = xr.Dataset(
        {name: (dims, np.asarray(value)) for name, value in fields.items()},
        coords=coords,
    )

    units_df = pd.read_csv(UNITS_TABLE)
    for var, unit, desc in zip(units_df["Variable"], units_df["Units"], units_df["Description"]):
        if var in ds:
            ds[var].attrs["units"] = unit
            ds[var].attrs["description"] = desc
    if not upward_positive:
        for var in ('latent_heat', 'sensible_heat'):
            ds[var].attrs["description"] = ds[var].attrs["description"].replace("upward", "downward")
    ds.attrs["heat_flux_convention"] = "upward_positive" if upward_positive else "downward_positive"
    return ds
