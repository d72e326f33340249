"""
Fan capacity control for single- and two-speed fluid coolers.

Part load is modelled as a linear blend of two steady states within the
timestep (fan off and fan on, or low and high speed). The fan runtime
fraction is chosen so the blended leaving water temperature equals the
setpoint exactly; cyclic losses are neglected.

Both controllers take an ``evaluate(ua, air_flow) -> outlet temp`` callable
so the heat exchanger is only evaluated for the stages actually needed.
"""

from dataclasses import dataclass
from typing import Callable

from fluid_cooler.core.constants import FluidCoolerConstants
from fluid_cooler.core.enums import FlowLock, OperatingMode

OutletEvaluator = Callable[[float, float], float]


@dataclass(frozen=True)
class FanStage:
    """Design performance at one fan speed."""
    ua: float
    air_flow: float
    fan_power: float


@dataclass(frozen=True)
class ControlResult:
    mode: OperatingMode
    outlet_temp: float
    fan_power: float
    fan_fraction: float = 0.0


def heat_rejected(water_mass_flow: float, cp: float, inlet_temp: float, outlet_temp: float) -> float:
    return water_mass_flow * cp * (inlet_temp - outlet_temp)


def single_speed_control(
    inlet_temp: float,
    setpoint: float,
    water_mass_flow: float,
    stage: FanStage,
    evaluate: OutletEvaluator,
    mass_flow_tolerance: float = FluidCoolerConstants.MASS_FLOW_TOLERANCE_KG_S,
) -> ControlResult:
    """
    Cycle a single-speed fan to hold the leaving water setpoint.

    Args:
        inlet_temp: Entering water temperature, also the fan-off outlet (C)
        setpoint: Leaving water setpoint (C)
        water_mass_flow: Current water mass flow (kg/s)
        stage: Design UA, air flow and fan power
        evaluate: Outlet temperature at (ua, air_flow)

    Returns:
        IDLE with outlet = inlet when there is no flow or no cooling need,
        PARTIAL_FAN with outlet = setpoint when the fan can overshoot it,
        FULL_FAN with the full-fan outlet otherwise.
    """
    outlet_off = inlet_temp
    if water_mass_flow <= mass_flow_tolerance or outlet_off < setpoint:
        return ControlResult(OperatingMode.IDLE, outlet_off, 0.0)

    outlet_full = evaluate(stage.ua, stage.air_flow)

    if outlet_full <= setpoint:
        fraction = 0.0
        if outlet_full != outlet_off:
            fraction = (setpoint - outlet_off) / (outlet_full - outlet_off)
        return ControlResult(
            OperatingMode.PARTIAL_FAN, setpoint, max(fraction * stage.fan_power, 0.0), fraction
        )

    return ControlResult(OperatingMode.FULL_FAN, outlet_full, stage.fan_power, 1.0)


def two_speed_control(
    inlet_temp: float,
    setpoint: float,
    water_mass_flow: float,
    low: FanStage,
    high: FanStage,
    evaluate: OutletEvaluator,
    flow_lock: FlowLock = FlowLock.LOCKED,
    mass_flow_tolerance: float = FluidCoolerConstants.MASS_FLOW_TOLERANCE_KG_S,
) -> ControlResult:
    """
    Stage a two-speed fan to hold the leaving water setpoint.

    Low speed is tried first; high speed is only evaluated when low speed
    cannot reach the setpoint. While the loop flow is unlocked the unit
    stays idle.

    Returns:
        ControlResult. fan_fraction is the share of the timestep at low
        speed for the low stage, and at high speed (remainder at low) for
        the high stage.
    """
    outlet_off = inlet_temp
    if water_mass_flow <= mass_flow_tolerance or flow_lock == FlowLock.UNLOCKED:
        return ControlResult(OperatingMode.IDLE, outlet_off, 0.0)
    if outlet_off < setpoint:
        return ControlResult(OperatingMode.IDLE, outlet_off, 0.0)

    outlet_low = evaluate(low.ua, low.air_flow)

    if outlet_low <= setpoint:
        fraction = 0.0
        if outlet_low != outlet_off:
            fraction = (setpoint - outlet_off) / (outlet_low - outlet_off)
        mode = OperatingMode.LOW_FAN if fraction >= 1.0 else OperatingMode.LOW_FAN_PARTIAL
        return ControlResult(mode, setpoint, fraction * low.fan_power, fraction)

    outlet_high = evaluate(high.ua, high.air_flow)

    if outlet_high <= setpoint and high.ua > 0.0:
        fraction = (setpoint - outlet_low) / (outlet_high - outlet_low)
        fan_power = max(fraction * high.fan_power + (1.0 - fraction) * low.fan_power, 0.0)
        return ControlResult(OperatingMode.HIGH_FAN_PARTIAL, setpoint, fan_power, fraction)

    return ControlResult(OperatingMode.HIGH_FAN, outlet_high, high.fan_power, 1.0)
