"""
Physical constants and sizing parameters for fluid cooler simulation.
"""

from typing import Final


class StandardConditions:
    """Reference state used for property evaluation."""
    STD_BARO_PRESS_PA: Final[float] = 101325.0
    # Reference temperature for design mass flow density (C)
    INIT_CONV_TEMP_C: Final[float] = 5.05
    KELVIN_OFFSET: Final[float] = 273.15
    SECONDS_PER_HOUR: Final[float] = 3600.0


class FluidCoolerConstants:
    """
    Empirical ratios and numerical settings for dry fluid coolers.
    Source: plant equipment sizing conventions for closed-circuit coolers.
    """
    # Fan electric power per watt of design load (W/W)
    FAN_POWER_PER_LOAD_W_W: Final[float] = 0.0105
    # Nominal approach-to-range ratio used to size design air flow
    AIR_FLOW_APPROACH_FACTOR: Final[float] = 4.0
    # Allowed overflow on the design water mass flow before warning
    MASS_FLOW_MULTIPLIER: Final[float] = 2.5

    # Flow thresholds
    MASS_FLOW_TOLERANCE_KG_S: Final[float] = 1e-9
    SMALL_WATER_VOL_FLOW_M3_S: Final[float] = 1e-9

    # UA root solve: bracket in multiples of design load (10000 K and 1 K limits)
    UA_LOWER_BOUND_FACTOR: Final[float] = 1e-4
    UA_UPPER_BOUND_FACTOR: Final[float] = 1.0
    UA_SOLVER_ACCURACY: Final[float] = 1e-4
    UA_SOLVER_MAX_ITER: Final[int] = 500

    # Exponent of the cross-flow (both unmixed) effectiveness correlation
    CROSSFLOW_NTU_EXPONENT: Final[float] = 0.22

    # Default low speed sizing factors (fraction of high speed value)
    LOW_SPEED_UA_SIZING_FACTOR: Final[float] = 0.6
    LOW_SPEED_AIR_FLOW_SIZING_FACTOR: Final[float] = 0.5
    LOW_SPEED_FAN_POWER_SIZING_FACTOR: Final[float] = 0.16
    LOW_SPEED_CAPACITY_SIZING_FACTOR: Final[float] = 0.5
