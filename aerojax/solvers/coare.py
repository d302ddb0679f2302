"""
COARE bulk algorithm, versions 3.0 (Fairall et al., 2003) and 3.5
(Edson et al., 2013), with the optional cool-skin scheme.
"""

from functools import partial

import jax
import jax.numpy as jnp

from aerojax.constants import grav, vkarmn, rctv0, rdct_qsat_salt
from aerojax.flux_types import SolverOutput, SurfaceState, TransferCoefficients
from aerojax.thermodynamics import cp_air, lvap, one_on_l, q_sat, rho_air, visc_air
from aerojax.solvers.base import TurbulentFluxSolver
from aerojax.solvers.cool_skin import cool_skin_coare
from aerojax.solvers.stability import psi_h_coare, psi_m_coare30, psi_m_coare35

ZETA_MAX = 50.0
COARE_VERSIONS = ('3.0', '3.5')


def charnock_parameter(wind_speed, version):
    """Charnock parameter as a function of wind speed [m/s]."""
    if version == '3.0':
        return 0.011 + (0.018 - 0.011) * jnp.clip((wind_speed - 10.0) / 8.0, 0.0, 1.0)
    return jnp.clip(0.0017 * wind_speed - 0.0050, 0.0, 0.0017 * 19.0 - 0.0050)


def roughness_lengths(u_star, wind_speed, nu, version):
    """
    Momentum and scalar roughness lengths.

    Returns:
        Tuple of (z0, z0t) [m]; COARE uses the same length for heat and moisture
    """
    z0 = charnock_parameter(wind_speed, version) * u_star * u_star / grav + 0.11 * nu / u_star
    rr = z0 * u_star / nu
    if version == '3.0':
        z0t = jnp.minimum(1.15e-4, 5.5e-5 * rr**(-0.6))
    else:
        z0t = jnp.minimum(1.6e-4, 5.8e-5 * rr**(-0.72))
    return z0, z0t


@partial(jax.jit, static_argnames=['version', 'n_iterations', 'use_skin'])
def turb_coare(zt, zu, sst, ssq, theta_zt, q_zt, wind_speed, params,
               slp=None, sw_down=None, lw_down=None,
               version='3.0', n_iterations=10, use_skin=False):
    """
    Iterate the COARE surface layer equations.

    Args:
        zt, zu: Heights of temperature/humidity and wind [m]
        sst: Bulk sea surface temperature [K]
        ssq: Bulk sea surface specific humidity [kg/kg]
        theta_zt: Potential temperature of air at zt [K]
        q_zt: Specific humidity of air at zt [kg/kg]
        wind_speed: Scalar wind speed at zu [m/s]
        params: BulkParameters
        slp, sw_down, lw_down: Only used by the cool-skin scheme
        version: '3.0' or '3.5'
        n_iterations: Number of iterations
        use_skin: Apply the cool-skin scheme

    Returns:
        Tuple of (cd, ch, ce, t_zu, q_zu, u_blk, ts, qs)
    """
    psi_m = psi_m_coare30 if version == '3.0' else psi_m_coare35
    nu = visc_air(theta_zt)

    # Neutral first guess with a 0.5 m/s gustiness
    u_blk = jnp.maximum(jnp.sqrt(wind_speed**2 + 0.25), params.min_bulk_wind)
    u_star = vkarmn * u_blk / jnp.log(zu / 1e-4)
    t_star = vkarmn * (theta_zt - sst) / jnp.log(zt / 1e-4)
    q_star = vkarmn * (q_zt - ssq) / jnp.log(zt / 1e-4)
    inv_l = jnp.zeros_like(sst)
    delta = jnp.full_like(sst, params.delta_init)

    if use_skin:
        rho = rho_air(theta_zt, q_zt, slp)
        cp = cp_air(q_zt)
        lv = lvap(sst)

    def body(_, carry):
        u_star, t_star, q_star, inv_l, u_blk, ts, qs, delta = carry

        zeta_u = jnp.clip(zu * inv_l, -ZETA_MAX, ZETA_MAX)
        zeta_t = jnp.clip(zt * inv_l, -ZETA_MAX, ZETA_MAX)
        z0, z0t = roughness_lengths(u_star, wind_speed, nu, version)

        u_star = jnp.maximum(u_blk * vkarmn / (jnp.log(zu / z0) - psi_m(zeta_u)), 1e-4)
        fac = vkarmn / (jnp.log(zt / z0t) - psi_h_coare(zeta_t))
        t_star = (theta_zt - ts) * fac
        q_star = (q_zt - qs) * fac
        inv_l = one_on_l(theta_zt, q_zt, u_star, t_star, q_star)

        # Convective gustiness
        buoyancy_flux = -grav / theta_zt * u_star * (t_star + rctv0 * theta_zt * q_star)
        gust = jnp.where(
            buoyancy_flux > 0.0,
            params.gust_beta_coare * (jnp.maximum(buoyancy_flux, 0.0) * params.zi_coare)**(1.0 / 3.0),
            params.gust_min
        )
        u_blk = jnp.maximum(jnp.sqrt(wind_speed**2 + gust**2), params.min_bulk_wind)

        if use_skin:
            dt_skin, delta = cool_skin_coare(
                sst, ts, rho, cp, lv, u_star, t_star, q_star, sw_down, lw_down,
                delta, params.albedo_coare, params.delta_max
            )
            ts = sst - dt_skin
            qs = rdct_qsat_salt * q_sat(ts, slp)

        return u_star, t_star, q_star, inv_l, u_blk, ts, qs, delta

    carry = (u_star, t_star, q_star, inv_l, u_blk, sst, ssq, delta)
    u_star, t_star, q_star, inv_l, u_blk, ts, qs, _ = jax.lax.fori_loop(
        0, n_iterations, body, carry
    )

    zeta_u = jnp.clip(zu * inv_l, -ZETA_MAX, ZETA_MAX)
    zeta_t = jnp.clip(zt * inv_l, -ZETA_MAX, ZETA_MAX)
    z0, z0t = roughness_lengths(u_star, wind_speed, nu, version)

    cd = (vkarmn / (jnp.log(zu / z0) - psi_m(zeta_u)))**2
    ch = vkarmn * jnp.sqrt(cd) / (jnp.log(zu / z0t) - psi_h_coare(zeta_u))
    ce = ch

    # Shift temperature and humidity from zt to zu
    shift = jnp.log(zu / zt) - psi_h_coare(zeta_u) + psi_h_coare(zeta_t)
    t_zu = theta_zt + t_star / vkarmn * shift
    q_zu = q_zt + q_star / vkarmn * shift

    return cd, ch, ce, t_zu, q_zu, u_blk, ts, qs


class CoareSolver(TurbulentFluxSolver):
    """COARE 3.0 or 3.5 bulk algorithm."""

    supports_cool_skin = True

    def __init__(self, version: str = '3.0', n_iterations: int = 10):
        if version not in COARE_VERSIONS:
            raise ValueError(f"Invalid COARE version: {version}. Must be one of: {list(COARE_VERSIONS)}")
        super().__init__(n_iterations)
        self.version = version
        self.name = 'coare' if version == '3.0' else 'coare35'

    def _solve(self, heights, surface, theta_zt, q_zt, wind_speed,
               use_skin, slp, forcing, params):
        sw_down = forcing.sw_down if use_skin else None
        lw_down = forcing.lw_down if use_skin else None
        cd, ch, ce, t_zu, q_zu, u_blk, ts, qs = turb_coare(
            heights.zt, heights.zu, surface.temperature, surface.humidity,
            theta_zt, q_zt, wind_speed, params,
            slp=slp if use_skin else None, sw_down=sw_down, lw_down=lw_down,
            version=self.version, n_iterations=self.n_iterations, use_skin=use_skin
        )
        return SolverOutput(
            coefficients=TransferCoefficients(momentum=cd, heat=ch, moisture=ce),
            t_zu=t_zu,
            q_zu=q_zu,
            bulk_wind=u_blk,
            surface=SurfaceState(temperature=ts, humidity=qs),
        )
