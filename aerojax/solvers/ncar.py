"""
NCAR bulk algorithm of Large & Yeager (2004, 2009).

Neutral 10 m transfer coefficients are polynomial fits in the neutral 10 m
wind speed and are shifted to the measurement heights and stability with
the Businger-Dyer stability functions. There is no cool-skin scheme.
"""

from functools import partial

import jax
import jax.numpy as jnp

from aerojax.constants import vkarmn
from aerojax.flux_types import SolverOutput, TransferCoefficients
from aerojax.thermodynamics import one_on_l
from aerojax.solvers.base import TurbulentFluxSolver
from aerojax.solvers.stability import psi_h_ncar, psi_m_ncar

ZETA_MAX = 10.0


@jax.jit
def cd_n10_ncar(u10n: jnp.ndarray) -> jnp.ndarray:
    """Neutral drag coefficient at 10 m, capped above 33 m/s (Large & Yeager, 2009)."""
    u10n = jnp.maximum(u10n, 0.5)
    cdn = 1e-3 * (2.7 / u10n + 0.142 + u10n / 13.09 - 3.14807e-10 * u10n**6)
    return jnp.where(u10n > 33.0, 2.34e-3, cdn)


@jax.jit
def ch_n10_ncar(sqrt_cd_n10: jnp.ndarray, stable: jnp.ndarray) -> jnp.ndarray:
    """Neutral sensible heat coefficient at 10 m."""
    return 1e-3 * sqrt_cd_n10 * jnp.where(stable, 18.0, 32.7)


@jax.jit
def ce_n10_ncar(sqrt_cd_n10: jnp.ndarray) -> jnp.ndarray:
    """Neutral moisture coefficient at 10 m."""
    return 1e-3 * 34.6 * sqrt_cd_n10


@partial(jax.jit, static_argnames=['n_iterations'])
def turb_ncar(zt, zu, sst, ssq, theta_zt, q_zt, wind_speed, params, n_iterations=10):
    """
    Iterate the NCAR surface layer equations.

    Args:
        zt, zu: Heights of temperature/humidity and wind [m]
        sst: Sea surface temperature [K]
        ssq: Sea surface specific humidity [kg/kg]
        theta_zt: Potential temperature of air at zt [K]
        q_zt: Specific humidity of air at zt [kg/kg]
        wind_speed: Scalar wind speed at zu [m/s]
        params: BulkParameters
        n_iterations: Number of iterations

    Returns:
        Tuple of (cd, ch, ce, t_zu, q_zu, u_blk)
    """
    u_blk = jnp.maximum(wind_speed, params.min_bulk_wind)

    # Neutral first guess, air at zu taken equal to air at zt
    cd_n10 = cd_n10_ncar(u_blk)
    sqrt_cd_n10 = jnp.sqrt(cd_n10)
    cd = cd_n10
    ch = ch_n10_ncar(sqrt_cd_n10, theta_zt - sst > 0.0)
    ce = ce_n10_ncar(sqrt_cd_n10)

    def body(_, carry):
        cd, ch, ce, t_zu, q_zu, sqrt_cd_n10 = carry

        sqrt_cd = jnp.sqrt(cd)
        u_star = sqrt_cd * u_blk
        t_star = ch / sqrt_cd * (t_zu - sst)
        q_star = ce / sqrt_cd * (q_zu - ssq)

        inv_l = one_on_l(t_zu, q_zu, u_star, t_star, q_star)
        zeta_u = jnp.clip(zu * inv_l, -ZETA_MAX, ZETA_MAX)
        zeta_t = jnp.clip(zt * inv_l, -ZETA_MAX, ZETA_MAX)
        psi_m_u = psi_m_ncar(zeta_u)
        psi_h_u = psi_h_ncar(zeta_u)

        # Shift temperature and humidity from zt to zu
        shift = jnp.log(zt / zu) + psi_h_u - psi_h_ncar(zeta_t)
        t_zu = theta_zt - t_star / vkarmn * shift
        q_zu = q_zt - q_star / vkarmn * shift

        # Update the neutral 10 m coefficients
        u10n = u_blk / (1.0 + sqrt_cd_n10 / vkarmn * (jnp.log(zu / 10.0) - psi_m_u))
        cd_n10 = cd_n10_ncar(u10n)
        sqrt_cd_n10 = jnp.sqrt(cd_n10)
        ch_n10 = ch_n10_ncar(sqrt_cd_n10, zeta_u >= 0.0)
        ce_n10 = ce_n10_ncar(sqrt_cd_n10)

        # Shift the coefficients to zu and stability
        cd = cd_n10 / (1.0 + sqrt_cd_n10 / vkarmn * (jnp.log(zu / 10.0) - psi_m_u))**2
        ratio = jnp.sqrt(cd) / sqrt_cd_n10
        xlogt = jnp.log(zu / 10.0) - psi_h_u
        ch = ch_n10 * ratio / (1.0 + ch_n10 / (vkarmn * sqrt_cd_n10) * xlogt)
        ce = ce_n10 * ratio / (1.0 + ce_n10 / (vkarmn * sqrt_cd_n10) * xlogt)

        return cd, ch, ce, t_zu, q_zu, sqrt_cd_n10

    cd, ch, ce, t_zu, q_zu, _ = jax.lax.fori_loop(
        0, n_iterations, body, (cd, ch, ce, theta_zt, q_zt, sqrt_cd_n10)
    )
    return cd, ch, ce, t_zu, q_zu, u_blk


class NcarSolver(TurbulentFluxSolver):
    """NCAR (Large & Yeager) bulk algorithm."""

    name = 'ncar'
    supports_cool_skin = False

    def _solve(self, heights, surface, theta_zt, q_zt, wind_speed,
               use_skin, slp, forcing, params):
        cd, ch, ce, t_zu, q_zu, u_blk = turb_ncar(
            heights.zt, heights.zu, surface.temperature, surface.humidity,
            theta_zt, q_zt, wind_speed, params, n_iterations=self.n_iterations
        )
        return SolverOutput(
            coefficients=TransferCoefficients(momentum=cd, heat=ch, moisture=ce),
            t_zu=t_zu,
            q_zu=q_zu,
            bulk_wind=u_blk,
            surface=surface,
        )
