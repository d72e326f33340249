"""
Dry fluid cooler heat exchanger model.

Physical Model:
    The coil is a cross-flow exchanger with both streams unmixed. For given
    water mass flow, air volume flow and UA:

    - C_air = V_air · ρ_air(P, T_db, W) · cp_air(W, T_db)
    - C_water = ṁ_water · cp_water(T_in)
    - NTU = UA / C_min, Cr = C_min / C_max
    - η = NTU^0.22, ε = 1 - exp((exp(-Cr·NTU/η) - 1) / (Cr/η))
    - Q = ε · C_min · (T_water_in - T_air_in), clamped at zero
    - T_water_out = T_water_in - Q / C_water

    UA = 0 short-circuits to "no heat transfer" before any property lookup.

UA Residual:
    For sizing, the exchanger is wrapped as a scalar function of UA whose
    root reproduces a target design load at design entering conditions.

References:
    - Incropera & DeWitt, Fundamentals of Heat and Mass Transfer, Table 11.3
    - ASHRAE HVAC1 Toolkit, 1999
"""

from dataclasses import dataclass

from fluid_cooler.core.constants import FluidCoolerConstants
from fluid_cooler.optimization.numba_ops import fluid_cooler_outlet_temperature
from fluid_cooler.properties.fluid_properties import FluidProperties
from fluid_cooler.properties.psychrometrics import Psychrometrics


@dataclass(frozen=True)
class ExchangerResult:
    outlet_water_temp: float
    heat_rejected: float


@dataclass(frozen=True)
class DesignConditions:
    """Entering water and air state used while sizing UA."""
    water_temp_c: float
    air_dry_bulb_c: float
    air_wet_bulb_c: float
    air_pressure_pa: float
    air_humidity_ratio: float


class FluidCoolerHeatExchanger:
    """
    Effectiveness-NTU evaluation bound to a loop fluid and property providers.

    Example:
        hx = FluidCoolerHeatExchanger("WATER", FluidProperties(), Psychrometrics())
        result = hx.evaluate(
            water_mass_flow=1.5, air_vol_flow=8.0, ua=2500.0,
            inlet_water_temp=35.0, inlet_air_temp=25.0,
            air_pressure=101325.0, air_humidity_ratio=0.01,
        )
    """

    def __init__(
        self,
        fluid: str,
        fluid_properties: FluidProperties,
        psychrometrics: Psychrometrics,
        ntu_exponent: float = FluidCoolerConstants.CROSSFLOW_NTU_EXPONENT,
    ) -> None:
        self.fluid = fluid
        self.fluid_properties = fluid_properties
        self.psychrometrics = psychrometrics
        self.ntu_exponent = ntu_exponent

    def evaluate(
        self,
        water_mass_flow: float,
        air_vol_flow: float,
        ua: float,
        inlet_water_temp: float,
        inlet_air_temp: float,
        air_pressure: float,
        air_humidity_ratio: float,
    ) -> ExchangerResult:
        """
        Outlet water temperature and heat rejected.

        Args:
            water_mass_flow: Water mass flow (kg/s), > 0 when ua > 0
            air_vol_flow: Air volume flow (m3/s), > 0 when ua > 0
            ua: UA (W/K)
            inlet_water_temp: Entering water temperature (C)
            inlet_air_temp: Entering air dry-bulb (C)
            air_pressure: Barometric pressure (Pa)
            air_humidity_ratio: Entering air humidity ratio (kg/kg)

        Raises:
            ValueError: If ua > 0 with a non-positive capacity rate
        """
        if ua == 0.0:
            return ExchangerResult(inlet_water_temp, 0.0)

        psy = self.psychrometrics
        air_density = psy.air_density(air_pressure, inlet_air_temp, air_humidity_ratio)
        c_air = air_vol_flow * air_density * psy.air_specific_heat(air_humidity_ratio, inlet_air_temp)
        c_water = water_mass_flow * self.fluid_properties.specific_heat(self.fluid, inlet_water_temp)

        if c_air <= 0.0 or c_water <= 0.0:
            raise ValueError(
                f"Heat exchanger needs positive capacity rates (C_air={c_air}, C_water={c_water})"
            )

        outlet, q = fluid_cooler_outlet_temperature(
            float(c_water), float(c_air), float(ua),
            float(inlet_water_temp), float(inlet_air_temp),
            self.ntu_exponent,
        )
        return ExchangerResult(outlet, q)

    def evaluate_at(
        self, ua: float, water_mass_flow: float, air_vol_flow: float, conditions: DesignConditions
    ) -> ExchangerResult:
        return self.evaluate(
            water_mass_flow, air_vol_flow, ua,
            conditions.water_temp_c, conditions.air_dry_bulb_c,
            conditions.air_pressure_pa, conditions.air_humidity_ratio,
        )

    def ua_residual(
        self,
        ua: float,
        target_load: float,
        water_mass_flow: float,
        air_vol_flow: float,
        cp: float,
        conditions: DesignConditions,
    ) -> float:
        """
        Normalised load error for a trial UA.

        Returns:
            (target_load - cp·ṁ·(T_in - T_out(ua))) / target_load

        Raises:
            ValueError: If target_load is zero
        """
        if target_load == 0.0:
            raise ValueError("UA residual requires a non-zero target load")
        outlet = self.evaluate_at(ua, water_mass_flow, air_vol_flow, conditions).outlet_water_temp
        actual_load = cp * water_mass_flow * (conditions.water_temp_c - outlet)
        return (target_load - actual_load) / target_load
