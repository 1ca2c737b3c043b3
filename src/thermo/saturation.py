"""Saturation vapour pressure of water.

Each method maps temperature [K] to saturation pressure [Pa] and is selected
by the ``method`` entry of a phase's property dictionary. Methods register
themselves in SATURATION_METHODS with the ``saturation_method`` decorator.

Available methods:
- simpleSaturation: Tetens (1930)
- magnus: August-Roche-Magnus, Alduchov & Eskridge (1996) coefficients
- buck: Buck (1996), over liquid water
- hylandWexler: Hyland & Wexler (1983) as tabulated by ASHRAE, over ice below 0 degC
"""

from typing import Callable, Dict

import numpy as np

from .exceptions import InvalidMethod

T_ZERO_CELSIUS = 273.15

SaturationFunction = Callable[[np.ndarray], np.ndarray]

SATURATION_METHODS: Dict[str, SaturationFunction] = {}


def saturation_method(name: str):
    def deco(fn):
        SATURATION_METHODS[name] = fn
        return fn

    return deco


def get_saturation_method(name) -> SaturationFunction:
    """Look up a saturation method, raising InvalidMethod for unknown tags."""
    if not name:
        raise InvalidMethod(f"Saturation method is not set. Valid methods: {sorted(SATURATION_METHODS)}")
    if name not in SATURATION_METHODS:
        raise InvalidMethod(f"Unknown saturation method '{name}'. Valid methods: {sorted(SATURATION_METHODS)}")
    return SATURATION_METHODS[name]


@saturation_method("simpleSaturation")
def tetens(T):
    """p_sat = 610.78 exp(17.27 t / (t + 237.3)), t in degC."""
    t = np.asarray(T, dtype=np.float64) - T_ZERO_CELSIUS
    return 610.78 * np.exp(17.27 * t / (t + 237.3))


@saturation_method("magnus")
def magnus(T):
    """p_sat = 610.94 exp(17.625 t / (t + 243.04)), t in degC."""
    t = np.asarray(T, dtype=np.float64) - T_ZERO_CELSIUS
    return 610.94 * np.exp(17.625 * t / (t + 243.04))


@saturation_method("buck")
def buck(T):
    """p_sat = 611.21 exp((18.678 - t/234.5) t / (257.14 + t)), t in degC."""
    t = np.asarray(T, dtype=np.float64) - T_ZERO_CELSIUS
    return 611.21 * np.exp((18.678 - t / 234.5) * (t / (257.14 + t)))


@saturation_method("hylandWexler")
def hyland_wexler(T):
    T = np.asarray(T, dtype=np.float64)
    # over water, 0..200 degC
    C8, C9, C10 = -5.8002206e03, 1.3914993e00, -4.8640239e-02
    C11, C12, C13 = 4.1764768e-05, -1.4452093e-08, 6.5459673e00
    ln_water = C8 / T + C9 + C10 * T + C11 * T**2 + C12 * T**3 + C13 * np.log(T)
    # over ice, -100..0 degC
    C1, C2, C3 = -5.6745359e03, 6.3925247e00, -9.6778430e-03
    C4, C5, C6, C7 = 6.2215701e-07, 2.0747825e-09, -9.4840240e-13, 4.1635019e00
    ln_ice = C1 / T + C2 + C3 * T + C4 * T**2 + C5 * T**3 + C6 * T**4 + C7 * np.log(T)
    return np.exp(np.where(T < T_ZERO_CELSIUS, ln_ice, ln_water))
