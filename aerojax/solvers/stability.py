"""
Stability correction functions of Monin-Obukhov similarity theory.

Each function takes the stability parameter zeta = z/L and returns the
integrated stability correction psi(zeta). Negative zeta is unstable,
positive zeta is stable. Both branches are evaluated on clipped arguments
so that the branch not selected never produces NaN.
"""

import jax
import jax.numpy as jnp

SQRT3 = jnp.sqrt(3.0)


def _split(zeta):
    return jnp.minimum(zeta, 0.0), jnp.maximum(zeta, 0.0)


def _convective_blend(zeta_neg, psi_kansas, coeff):
    # Free-convection limit blended with the Kansas form (Fairall et al., 1996)
    x = (1.0 - coeff * zeta_neg)**(1.0 / 3.0)
    psi_conv = (1.5 * jnp.log((1.0 + x + x * x) / 3.0)
                - SQRT3 * jnp.arctan((1.0 + 2.0 * x) / SQRT3)
                + 4.0 * jnp.arctan(1.0) / SQRT3)
    f = zeta_neg * zeta_neg / (1.0 + zeta_neg * zeta_neg)
    return (1.0 - f) * psi_kansas + f * psi_conv


def _psi_m_coare_unstable(zeta_neg):
    x = (1.0 - 15.0 * zeta_neg)**0.25
    psi_kansas = (2.0 * jnp.log((1.0 + x) / 2.0) + jnp.log((1.0 + x * x) / 2.0)
                  - 2.0 * jnp.arctan(x) + 2.0 * jnp.arctan(1.0))
    return _convective_blend(zeta_neg, psi_kansas, 10.15)


@jax.jit
def psi_m_coare30(zeta: jnp.ndarray) -> jnp.ndarray:
    """Momentum stability function of COARE 3.0."""
    zeta_neg, zeta_pos = _split(zeta)
    dzol = jnp.minimum(0.35 * zeta_pos, 50.0)
    psi_stable = -((1.0 + zeta_pos) + 0.6667 * (zeta_pos - 14.28) * jnp.exp(-dzol) + 8.525)
    return jnp.where(zeta < 0.0, _psi_m_coare_unstable(zeta_neg), psi_stable)


@jax.jit
def psi_m_coare35(zeta: jnp.ndarray) -> jnp.ndarray:
    """Momentum stability function of COARE 3.5 (Grachev et al., 2000 in stable air)."""
    zeta_neg, zeta_pos = _split(zeta)
    dzol = jnp.minimum(0.35 * zeta_pos, 50.0)
    a, b, c, d = 0.7, 0.75, 5.0, 0.35
    psi_stable = -(a * zeta_pos + b * (zeta_pos - c / d) * jnp.exp(-dzol) + b * c / d)
    return jnp.where(zeta < 0.0, _psi_m_coare_unstable(zeta_neg), psi_stable)


@jax.jit
def psi_h_coare(zeta: jnp.ndarray) -> jnp.ndarray:
    """Heat and moisture stability function of COARE 3.0 and 3.5."""
    zeta_neg, zeta_pos = _split(zeta)
    dzol = jnp.minimum(0.35 * zeta_pos, 50.0)
    psi_stable = -((1.0 + 2.0 / 3.0 * zeta_pos)**1.5
                   + 2.0 / 3.0 * (zeta_pos - 14.28) * jnp.exp(-dzol) + 8.525)
    x = jnp.sqrt(1.0 - 15.0 * zeta_neg)
    psi_kansas = 2.0 * jnp.log((1.0 + x) / 2.0)
    psi_unstable = _convective_blend(zeta_neg, psi_kansas, 34.15)
    return jnp.where(zeta < 0.0, psi_unstable, psi_stable)


@jax.jit
def psi_m_ncar(zeta: jnp.ndarray) -> jnp.ndarray:
    """Momentum stability function of Large & Yeager (2004)."""
    zeta_neg, zeta_pos = _split(zeta)
    x = jnp.sqrt(jnp.sqrt(1.0 - 16.0 * zeta_neg))
    psi_unstable = (2.0 * jnp.log((1.0 + x) / 2.0) + jnp.log((1.0 + x * x) / 2.0)
                    - 2.0 * jnp.arctan(x) + 0.5 * jnp.pi)
    return jnp.where(zeta < 0.0, psi_unstable, -5.0 * zeta_pos)


@jax.jit
def psi_h_ncar(zeta: jnp.ndarray) -> jnp.ndarray:
    """Heat and moisture stability function of Large & Yeager (2004)."""
    zeta_neg, zeta_pos = _split(zeta)
    x = jnp.sqrt(jnp.sqrt(1.0 - 16.0 * zeta_neg))
    psi_unstable = 2.0 * jnp.log((1.0 + x * x) / 2.0)
    return jnp.where(zeta < 0.0, psi_unstable, -5.0 * zeta_pos)


@jax.jit
def psi_m_ecmwf(zeta: jnp.ndarray) -> jnp.ndarray:
    """Momentum stability function of the IFS (cy40r1, eq. 3.20 and 3.22)."""
    zeta_neg, zeta_pos = _split(zeta)
    x = jnp.sqrt(jnp.sqrt(1.0 - 16.0 * zeta_neg))
    psi_unstable = (0.5 * jnp.pi - 2.0 * jnp.arctan(x)
                    + jnp.log((1.0 + x)**2 * (1.0 + x * x) / 8.0))
    a, b, c, d = 1.0, 2.0 / 3.0, 5.0, 0.35
    psi_stable = (-b * (zeta_pos - c / d) * jnp.exp(-d * zeta_pos)
                  - a * zeta_pos - b * c / d)
    return jnp.where(zeta < 0.0, psi_unstable, psi_stable)


@jax.jit
def psi_h_ecmwf(zeta: jnp.ndarray) -> jnp.ndarray:
    """Heat and moisture stability function of the IFS (cy40r1)."""
    zeta_neg, zeta_pos = _split(zeta)
    x = jnp.sqrt(1.0 - 16.0 * zeta_neg)
    psi_unstable = 2.0 * jnp.log((1.0 + x) / 2.0)
    a, b, c, d = 1.0, 2.0 / 3.0, 5.0, 0.35
    psi_stable = (-b * (zeta_pos - c / d) * jnp.exp(-d * zeta_pos)
                  - (1.0 + 2.0 / 3.0 * a * zeta_pos)**1.5 - b * c / d + 1.0)
    return jnp.where(zeta < 0.0, psi_unstable, psi_stable)
