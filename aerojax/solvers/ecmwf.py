"""
ECMWF bulk algorithm following the IFS documentation (cy40r1), with the
optional IFS cool-skin scheme.
"""

from functools import partial

import jax
import jax.numpy as jnp

from aerojax.constants import grav, vkarmn, rctv0, rdct_qsat_salt
from aerojax.flux_types import SolverOutput, SurfaceState, TransferCoefficients
from aerojax.thermodynamics import cp_air, lvap, one_on_l, q_sat, rho_air, visc_air
from aerojax.solvers.base import TurbulentFluxSolver
from aerojax.solvers.cool_skin import cool_skin_ecmwf
from aerojax.solvers.stability import psi_h_ecmwf, psi_m_ecmwf

ZETA_MAX = 50.0
CHARNOCK = 0.018


def roughness_lengths(u_star, nu):
    """Momentum, heat and moisture roughness lengths [m] (IFS eq. 3.26)."""
    z0 = CHARNOCK * u_star * u_star / grav + 0.11 * nu / u_star
    z0t = 0.40 * nu / u_star
    z0q = 0.62 * nu / u_star
    return z0, z0t, z0q


@partial(jax.jit, static_argnames=['n_iterations', 'use_skin'])
def turb_ecmwf(zt, zu, sst, ssq, theta_zt, q_zt, wind_speed, params,
               slp=None, sw_down=None, lw_down=None,
               n_iterations=10, use_skin=False):
    """
    Iterate the ECMWF surface layer equations.

    Arguments as for turb_coare.

    Returns:
        Tuple of (cd, ch, ce, t_zu, q_zu, u_blk, ts, qs)
    """
    nu = visc_air(theta_zt)

    u_blk = jnp.maximum(jnp.sqrt(wind_speed**2 + params.gust_min**2), params.min_bulk_wind)
    u_star = vkarmn * u_blk / jnp.log(zu / 1e-4)
    inv_l = jnp.zeros_like(sst)
    delta = jnp.full_like(sst, params.delta_init)

    if use_skin:
        rho = rho_air(theta_zt, q_zt, slp)
        cp = cp_air(q_zt)
        lv = lvap(sst)

    def body(_, carry):
        u_star, inv_l, u_blk, ts, qs, delta = carry

        z0, z0t, z0q = roughness_lengths(u_star, nu)
        zeta_u = jnp.clip(zu * inv_l, -ZETA_MAX, ZETA_MAX)
        zeta_t = jnp.clip(zt * inv_l, -ZETA_MAX, ZETA_MAX)

        u_star = u_blk * vkarmn / (jnp.log(zu / z0) - psi_m_ecmwf(zeta_u)
                                   + psi_m_ecmwf(z0 * inv_l))
        u_star = jnp.maximum(u_star, 1e-4)
        t_star = (theta_zt - ts) * vkarmn / (jnp.log(zt / z0t) - psi_h_ecmwf(zeta_t)
                                             + psi_h_ecmwf(z0t * inv_l))
        q_star = (q_zt - qs) * vkarmn / (jnp.log(zt / z0q) - psi_h_ecmwf(zeta_t)
                                         + psi_h_ecmwf(z0q * inv_l))
        inv_l = one_on_l(theta_zt, q_zt, u_star, t_star, q_star)

        # Convective gustiness
        buoyancy_flux = -grav / theta_zt * u_star * (t_star + rctv0 * theta_zt * q_star)
        gust = params.gust_beta_ecmwf * (jnp.maximum(buoyancy_flux, 0.0) * params.zi_ecmwf)**(1.0 / 3.0)
        gust = jnp.maximum(gust, params.gust_min)
        u_blk = jnp.maximum(jnp.sqrt(wind_speed**2 + gust**2), params.min_bulk_wind)

        if use_skin:
            dt_skin, delta = cool_skin_ecmwf(
                sst, ts, rho, cp, lv, u_star, t_star, q_star, sw_down, lw_down,
                delta, params.albedo_ecmwf
            )
            ts = sst - dt_skin
            qs = rdct_qsat_salt * q_sat(ts, slp)

        return u_star, inv_l, u_blk, ts, qs, delta

    carry = (u_star, inv_l, u_blk, sst, ssq, delta)
    u_star, inv_l, u_blk, ts, qs, _ = jax.lax.fori_loop(0, n_iterations, body, carry)

    z0, z0t, z0q = roughness_lengths(u_star, nu)
    zeta_u = jnp.clip(zu * inv_l, -ZETA_MAX, ZETA_MAX)
    zeta_t = jnp.clip(zt * inv_l, -ZETA_MAX, ZETA_MAX)

    log_m = jnp.log(zu / z0) - psi_m_ecmwf(zeta_u) + psi_m_ecmwf(z0 * inv_l)
    cd = (vkarmn / log_m)**2
    ch = vkarmn * jnp.sqrt(cd) / (jnp.log(zu / z0t) - psi_h_ecmwf(zeta_u)
                                  + psi_h_ecmwf(z0t * inv_l))
    ce = vkarmn * jnp.sqrt(cd) / (jnp.log(zu / z0q) - psi_h_ecmwf(zeta_u)
                                  + psi_h_ecmwf(z0q * inv_l))

    # Shift temperature and humidity from zt to zu with the final scales
    t_star = (theta_zt - ts) * vkarmn / (jnp.log(zt / z0t) - psi_h_ecmwf(zeta_t)
                                         + psi_h_ecmwf(z0t * inv_l))
    q_star = (q_zt - qs) * vkarmn / (jnp.log(zt / z0q) - psi_h_ecmwf(zeta_t)
                                     + psi_h_ecmwf(z0q * inv_l))
    shift = jnp.log(zu / zt) - psi_h_ecmwf(zeta_u) + psi_h_ecmwf(zeta_t)
    t_zu = theta_zt + t_star / vkarmn * shift
    q_zu = q_zt + q_star / vkarmn * shift

    return cd, ch, ce, t_zu, q_zu, u_blk, ts, qs


class EcmwfSolver(TurbulentFluxSolver):
    """ECMWF (IFS) bulk algorithm."""

    name = 'ecmwf'
    supports_cool_skin = True

    def _solve(self, heights, surface, theta_zt, q_zt, wind_speed,
               use_skin, slp, forcing, params):
        cd, ch, ce, t_zu, q_zu, u_blk, ts, qs = turb_ecmwf(
            heights.zt, heights.zu, surface.temperature, surface.humidity,
            theta_zt, q_zt, wind_speed, params,
            slp=slp if use_skin else None,
            sw_down=forcing.sw_down if use_skin else None,
            lw_down=forcing.lw_down if use_skin else None,
            n_iterations=self.n_iterations, use_skin=use_skin
        )
        return SolverOutput(
            coefficients=TransferCoefficients(momentum=cd, heat=ch, moisture=ce),
            t_zu=t_zu,
            q_zu=q_zu,
            bulk_wind=u_blk,
            surface=SurfaceState(temperature=ts, humidity=qs),
        )
