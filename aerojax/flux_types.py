"""
Data structures and types for bulk air-sea flux computations.

All grids of one call share the same shape. Records are immutable: stages
communicate by returning new values, never by updating arrays in place.
"""

from typing import NamedTuple, Optional
import jax.numpy as jnp
import tree_math


@tree_math.struct
class BulkParameters:
    """Tunable constants of the bulk formulae."""

    # Bulk wind speed
    min_bulk_wind: float     # Floor of the bulk wind speed [m/s]

    # Convective gustiness
    gust_beta_coare: float   # Gustiness scaling for COARE [-]
    zi_coare: float          # Boundary layer depth for COARE gustiness [m]
    gust_beta_ecmwf: float   # Gustiness scaling for ECMWF [-]
    zi_ecmwf: float          # Boundary layer depth for ECMWF gustiness [m]
    gust_min: float          # Gustiness under stable conditions [m/s]

    # Cool skin
    albedo_coare: float      # Sea surface shortwave albedo for COARE [-]
    albedo_ecmwf: float      # Sea surface shortwave albedo for ECMWF [-]
    delta_init: float        # First guess of the cool-skin thickness [m]
    delta_max: float         # Maximum cool-skin thickness [m]

    @classmethod
    def default(cls, min_bulk_wind=0.5,
                gust_beta_coare=1.2, zi_coare=600.0,
                gust_beta_ecmwf=1.0, zi_ecmwf=1000.0, gust_min=0.2,
                albedo_coare=0.055, albedo_ecmwf=0.066,
                delta_init=1e-3, delta_max=0.01) -> 'BulkParameters':
        """Return default bulk parameters"""
        return cls(
            min_bulk_wind=jnp.array(min_bulk_wind),
            gust_beta_coare=jnp.array(gust_beta_coare),
            zi_coare=jnp.array(zi_coare),
            gust_beta_ecmwf=jnp.array(gust_beta_ecmwf),
            zi_ecmwf=jnp.array(zi_ecmwf),
            gust_min=jnp.array(gust_min),
            albedo_coare=jnp.array(albedo_coare),
            albedo_ecmwf=jnp.array(albedo_ecmwf),
            delta_init=jnp.array(delta_init),
            delta_max=jnp.array(delta_max)
        )


class MeasurementHeights(NamedTuple):
    """Heights of the near-surface atmospheric measurements."""

    zt: float    # Height of air temperature and humidity [m]
    zu: float    # Height of wind [m]


class SurfaceState(NamedTuple):
    """Sea surface state, bulk before the solver and possibly skin after."""

    temperature: jnp.ndarray   # Surface temperature [K] (nx, ny)
    humidity: jnp.ndarray      # Surface specific humidity [kg/kg] (nx, ny)


class AtmosphericState(NamedTuple):
    """Near-surface atmospheric state at the measurement heights."""

    temperature: jnp.ndarray   # Air temperature at zt [K] (nx, ny)
    humidity: jnp.ndarray      # Specific humidity at zt [kg/kg] (nx, ny)
    u_wind: jnp.ndarray        # Zonal wind at zu [m/s] (nx, ny)
    v_wind: jnp.ndarray        # Meridional wind at zu [m/s] (nx, ny)
    pressure: jnp.ndarray      # Mean sea-level pressure [Pa] (nx, ny)


class RadiativeForcing(NamedTuple):
    """Downwelling radiation at the sea surface."""

    sw_down: jnp.ndarray       # Downwelling shortwave [W/m²] (nx, ny)
    lw_down: jnp.ndarray       # Downwelling longwave [W/m²] (nx, ny)


class TransferCoefficients(NamedTuple):
    """Bulk transfer coefficients at the wind measurement height."""

    momentum: jnp.ndarray      # Drag coefficient Cd [-] (nx, ny)
    heat: jnp.ndarray          # Sensible heat coefficient Ch [-] (nx, ny)
    moisture: jnp.ndarray      # Moisture coefficient Ce [-] (nx, ny)


class SolverOutput(NamedTuple):
    """Result of a turbulent flux solver."""

    coefficients: TransferCoefficients
    t_zu: jnp.ndarray          # Potential temperature at zu [K] (nx, ny)
    q_zu: jnp.ndarray          # Specific humidity at zu [kg/kg] (nx, ny)
    bulk_wind: jnp.ndarray     # Bulk scalar wind speed [m/s] (nx, ny)
    surface: SurfaceState      # Surface state after the optional skin correction


class FluxFields(NamedTuple):
    """Turbulent air-sea fluxes."""

    latent_heat: jnp.ndarray               # Latent heat flux [W/m²] (nx, ny)
    sensible_heat: jnp.ndarray             # Sensible heat flux [W/m²] (nx, ny)
    tau_x: jnp.ndarray                     # Zonal wind stress [N/m²] (nx, ny)
    tau_y: jnp.ndarray                     # Meridional wind stress [N/m²] (nx, ny)
    skin_temperature: Optional[jnp.ndarray] = None  # Skin temperature [K] (nx, ny)
