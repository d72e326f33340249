"""
Loop fluid properties (water and glycol mixtures) via CoolProp.

Loop fluids are named the way plant loops declare them: ``WATER``,
``ETHYLENEGLYCOL:40`` or ``PROPYLENEGLYCOL:30`` (mass percent after the
colon). Any other name is passed to CoolProp unchanged.
"""

import logging

from fluid_cooler.core.constants import StandardConditions
from fluid_cooler.core.exceptions import ThermodynamicDataError
from fluid_cooler.optimization.coolprop_lut import CoolPropLUT

logger = logging.getLogger(__name__)

_GLYCOL_CODES = {
    "ETHYLENEGLYCOL": "MEG",
    "PROPYLENEGLYCOL": "MPG",
}


class FluidProperties:
    """
    Density and specific heat of the loop fluid at a fixed pressure.

    Example:
        props = FluidProperties()
        rho = props.density("WATER", 5.05)           # kg/m3
        cp = props.specific_heat("WATER", 35.0)      # J/(kg K)
    """

    def __init__(self, pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA) -> None:
        self.pressure_pa = pressure_pa

    @staticmethod
    def coolprop_name(fluid: str) -> str:
        name = fluid.strip()
        key, _, percent = name.upper().partition(":")
        if key == "WATER":
            return "Water"
        if key in _GLYCOL_CODES:
            if not percent:
                raise ThermodynamicDataError(f"Glycol fluid '{fluid}' needs a concentration")
            return f"INCOMP::{_GLYCOL_CODES[key]}-{percent}%"
        return name

    def _lookup(self, output: str, fluid: str, temp_c: float) -> float:
        value = CoolPropLUT.PropsSI(
            output,
            "T", temp_c + StandardConditions.KELVIN_OFFSET,
            "P", self.pressure_pa,
            self.coolprop_name(fluid),
        )
        if value <= 0.0:
            raise ThermodynamicDataError(
                f"Non-physical {output}={value} for {fluid} at {temp_c:.2f} C"
            )
        return value

    def density(self, fluid: str, temp_c: float) -> float:
        return self._lookup("D", fluid, temp_c)

    def specific_heat(self, fluid: str, temp_c: float) -> float:
        return self._lookup("C", fluid, temp_c)
