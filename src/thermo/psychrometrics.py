"""Moist-air relations used by the humidity model.

Specific humidity q is the mass of water vapour per unit mass of moist air
[kg/kg]. With eps = M_water / M_dryAir:

    q  = eps * p_v / (p - (1 - eps) * p_v)
    p_v = q * p / (eps + (1 - eps) * q)

All functions work element-wise on numpy arrays.
"""

import numpy as np

R_UNIVERSAL = 8.314462618  # J/mol/K

W_DRY_AIR = 28.9647  # g/mol
W_WATER = 18.01528  # g/mol

# Lower bound on the pressure used in the moist-air relations [Pa]
P_MIN = 1.0e-3


def gas_constant(mol_weight):
    """Specific gas constant [J/kg/K] from a molar weight in g/mol."""
    return 1.0e3 * R_UNIVERSAL / mol_weight


def bounded_pressure(p):
    """Pressure floored at P_MIN, so non-positive input cannot reach a division."""
    return np.maximum(p, P_MIN)


def specific_humidity_from_partial_pressure(pv, p, eps):
    denominator = np.maximum(p - (1.0 - eps) * pv, np.finfo(float).tiny)
    return eps * pv / denominator


def partial_pressure_from_specific_humidity(q, p, eps):
    return q * p / (eps + (1.0 - eps) * q)


def mixture_gas_constant(q, R_dry, R_vapor):
    """Gas constant of moist air [J/kg/K]."""
    return (1.0 - q) * R_dry + q * R_vapor


def sutherland_viscosity(T, As, Ts):
    """mu = As sqrt(T) / (1 + Ts / T)  [kg/m/s]."""
    return As * np.sqrt(T) / (1.0 + Ts / T)


def wilke_viscosity(X, mu, W):
    """Wilke (1950) mixing rule, vectorised over cells.

    mu_mix = sum_i X_i mu_i / sum_j X_j phi_ij
    phi_ij = [1 + sqrt(mu_i/mu_j) (W_j/W_i)^0.25]^2 / [sqrt(8) sqrt(1 + W_i/W_j)]

    Parameters
    ----------
    X : sequence of np.ndarray
        Mole fractions of each species.
    mu : sequence of np.ndarray
        Pure-species viscosities [kg/m/s].
    W : sequence of float
        Molar weights (any consistent unit).
    """
    n = len(X)
    mu_mix = np.zeros_like(np.asarray(mu[0], dtype=np.float64))
    for i in range(n):
        denom = np.zeros_like(mu_mix)
        for j in range(n):
            if i == j:
                phi = 1.0
            else:
                phi = (1.0 + np.sqrt(mu[i] / mu[j]) * (W[j] / W[i]) ** 0.25) ** 2 / (
                    np.sqrt(8.0) * np.sqrt(1.0 + W[i] / W[j])
                )
            denom = denom + X[j] * phi
        mu_mix = mu_mix + np.where(X[i] > 0.0, X[i] * mu[i] / np.maximum(denom, np.finfo(float).tiny), 0.0)
    return mu_mix
