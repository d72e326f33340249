"""
Numba JIT-Compiled Operations for the heat exchanger hot path.

The exchanger kernel runs once or twice per unit per timestep and up to a
few hundred times per UA solve, so it is compiled with ``@njit``.

Usage Guidelines:
    - All inputs must be Python floats.
    - Constants are passed as arguments (no global scope access).
"""

import numpy as np
from numba import njit
from typing import Tuple


@njit(cache=True)
def crossflow_unmixed_effectiveness(ntu: float, cr: float, exponent: float) -> float:
    """
    Effectiveness of a cross-flow exchanger with both streams unmixed.

    **η = NTU^n,  ε = 1 - exp((exp(-Cr·NTU/η) - 1) / (Cr/η))**

    Args:
        ntu (float): Number of Transfer Units (UA/Cmin).
        cr (float): Capacity ratio Cmin/Cmax, in (0, 1].
        exponent (float): Correlation exponent n (0.22).

    Returns:
        float: Heat exchanger effectiveness (0-1).
    """
    if ntu <= 0.0:
        return 0.0
    eta = ntu ** exponent
    a = cr * ntu / eta
    return 1.0 - np.exp((np.exp(-a) - 1.0) / (cr / eta))


@njit(cache=True)
def fluid_cooler_outlet_temperature(
    c_water: float,
    c_air: float,
    ua: float,
    t_water_in: float,
    t_air_in: float,
    exponent: float,
) -> Tuple[float, float]:
    """
    Outlet water temperature and heat rejected for given capacity rates.

    Args:
        c_water (float): Water heat capacity rate (W/K), > 0.
        c_air (float): Air heat capacity rate (W/K), > 0.
        ua (float): Overall heat transfer coefficient times area (W/K).
        t_water_in (float): Entering water temperature (C).
        t_air_in (float): Entering air dry-bulb temperature (C).
        exponent (float): Effectiveness correlation exponent.

    Returns:
        Tuple[float, float]: (outlet water temperature C, heat rejected W).
        Heat rejected is never negative; the cooler never heats the water.
    """
    if ua == 0.0:
        return t_water_in, 0.0

    c_min = min(c_air, c_water)
    c_max = max(c_air, c_water)
    cr = c_min / c_max
    ntu = ua / c_min

    effectiveness = crossflow_unmixed_effectiveness(ntu, cr, exponent)
    q = effectiveness * c_min * (t_water_in - t_air_in)

    if q >= 0.0:
        return t_water_in - q / c_water, q
    return t_water_in, 0.0
