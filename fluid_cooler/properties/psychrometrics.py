"""
Moist air properties via CoolProp's humid air model.

Temperatures are in C at this interface and converted to K for CoolProp.
Humidity ratio is kg water per kg dry air.
"""

from fluid_cooler.core.constants import StandardConditions
from fluid_cooler.optimization.coolprop_lut import CoolPropLUT

_K = StandardConditions.KELVIN_OFFSET


class Psychrometrics:
    """
    Psychrometric property provider.

    Example:
        psy = Psychrometrics()
        w = psy.humidity_ratio_from_wet_bulb(35.0, 25.6, 101325.0)
        rho = psy.air_density(101325.0, 35.0, w)
    """

    def __init__(self, reference_pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA) -> None:
        self.reference_pressure_pa = reference_pressure_pa

    def air_density(self, pressure_pa: float, dry_bulb_c: float, humidity_ratio: float) -> float:
        """Moist air density (kg/m3)."""
        specific_volume = CoolPropLUT.HAPropsSI(
            "Vha", "T", dry_bulb_c + _K, "P", pressure_pa, "W", humidity_ratio
        )
        return 1.0 / specific_volume

    def air_specific_heat(self, humidity_ratio: float, dry_bulb_c: float) -> float:
        """Moist air specific heat (J/(kg K)) at the reference pressure."""
        return CoolPropLUT.HAPropsSI(
            "cp_ha", "T", dry_bulb_c + _K, "P", self.reference_pressure_pa, "W", humidity_ratio
        )

    def humidity_ratio_from_wet_bulb(self, dry_bulb_c: float, wet_bulb_c: float, pressure_pa: float) -> float:
        return CoolPropLUT.HAPropsSI(
            "W", "T", dry_bulb_c + _K, "B", wet_bulb_c + _K, "P", pressure_pa
        )
