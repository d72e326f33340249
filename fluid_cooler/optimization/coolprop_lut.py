"""
CoolProp Lookup Table with In-Memory Caching.

This module provides a caching wrapper around CoolProp.PropsSI() and the
humid air HAPropsSI() so repeated evaluations at the same state (capacity
control and UA root solves hit the same inlet conditions many times) do
not go back to the equation of state.

Cache Strategy:
    - Input values are rounded to SIGNIFICANT_FIGURES to increase hit rate.
    - Cache is stored as a class-level dictionary for persistence across calls.

Failures are raised as ThermodynamicDataError; a property that cannot be
evaluated is a fatal configuration problem, never a silent zero.
"""

import math
from typing import Dict, Tuple

import CoolProp.CoolProp as CP
from CoolProp.HumidAirProp import HAPropsSI

from fluid_cooler.core.exceptions import ThermodynamicDataError


class CoolPropLUT:
    """
    Caching wrapper for CoolProp property calculations.

    Cache Key Structure:
        (output, input1_name, input1_value, input2_name, input2_value, fluid)
        ("HA", output, name1, value1, name2, value2, name3, value3)

    Example:
        >>> cp = CoolPropLUT.PropsSI('C', 'T', 303.15, 'P', 101325, 'Water')
        >>> rho = CoolPropLUT.HAPropsSI('Vha', 'T', 298.15, 'P', 101325, 'W', 0.01)
    """
    SIGNIFICANT_FIGURES: int = 6
    _cache: Dict[Tuple, float] = {}

    @staticmethod
    def _round_sig(x: float, sig: int = 6) -> float:
        """
        Round a number to specified significant figures.

        Args:
            x (float): Value to round.
            sig (int): Number of significant figures.

        Returns:
            float: Rounded value.
        """
        if x == 0:
            return 0.0
        return round(x, sig - int(math.floor(math.log10(abs(x)))) - 1)

    @staticmethod
    def PropsSI(output: str, name1: str, value1: float, name2: str, value2: float, fluid: str) -> float:
        """
        Cached version of CoolProp.PropsSI.

        Args:
            output (str): Property to calculate ('D', 'C', etc.).
            name1 (str): First input property name ('T', 'P', etc.).
            value1 (float): First input value (SI units).
            name2 (str): Second input property name.
            value2 (float): Second input value (SI units).
            fluid (str): CoolProp fluid string ('Water', 'INCOMP::MEG-30%', ...).

        Returns:
            float: Property value (SI units).

        Raises:
            ThermodynamicDataError: If CoolProp cannot evaluate the state.
        """
        sig = CoolPropLUT.SIGNIFICANT_FIGURES
        key = (
            output,
            name1, CoolPropLUT._round_sig(value1, sig),
            name2, CoolPropLUT._round_sig(value2, sig),
            fluid,
        )
        if key in CoolPropLUT._cache:
            return CoolPropLUT._cache[key]

        try:
            val = CP.PropsSI(output, name1, value1, name2, value2, fluid)
        except ValueError as e:
            raise ThermodynamicDataError(
                f"PropsSI({output}, {name1}={value1}, {name2}={value2}, {fluid}) failed: {e}"
            ) from e
        if not math.isfinite(val):
            raise ThermodynamicDataError(
                f"PropsSI({output}, {name1}={value1}, {name2}={value2}, {fluid}) returned {val}"
            )
        CoolPropLUT._cache[key] = val
        return val

    @staticmethod
    def HAPropsSI(
        output: str,
        name1: str, value1: float,
        name2: str, value2: float,
        name3: str, value3: float,
    ) -> float:
        """
        Cached version of CoolProp.HumidAirProp.HAPropsSI.

        Raises:
            ThermodynamicDataError: If CoolProp cannot evaluate the state.
        """
        sig = CoolPropLUT.SIGNIFICANT_FIGURES
        key = (
            "HA", output,
            name1, CoolPropLUT._round_sig(value1, sig),
            name2, CoolPropLUT._round_sig(value2, sig),
            name3, CoolPropLUT._round_sig(value3, sig),
        )
        if key in CoolPropLUT._cache:
            return CoolPropLUT._cache[key]

        try:
            val = HAPropsSI(output, name1, value1, name2, value2, name3, value3)
        except ValueError as e:
            raise ThermodynamicDataError(
                f"HAPropsSI({output}, {name1}={value1}, {name2}={value2}, "
                f"{name3}={value3}) failed: {e}"
            ) from e
        if not math.isfinite(val):
            raise ThermodynamicDataError(
                f"HAPropsSI({output}, {name1}={value1}, {name2}={value2}, "
                f"{name3}={value3}) returned {val}"
            )
        CoolPropLUT._cache[key] = val
        return val

    @staticmethod
    def clear_cache() -> None:
        """Clear all cached property values."""
        CoolPropLUT._cache.clear()
