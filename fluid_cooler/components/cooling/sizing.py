"""
Design value resolution for fluid coolers.

Autosized fields are resolved from the condenser loop's sizing data:

1. Design water flow from the loop design flow (zero below the small-flow
   threshold), registered with the loop.
2. Design load = ρ(5.05 C) · cp(exit temp) · flow · ΔT when UA is autosized
   under the UFactorTimesArea method; it becomes the nominal capacity.
3. Fan power = 0.0105 · load; air flow = load / (T_water - T_air) · 4.
4. UA is back-solved so the exchanger rejects the design load at design
   entering conditions (bracket 1e-4·load .. load).
5. Low speed values follow from high speed values and sizing factors; under
   the NominalCapacity method low speed UA is back-solved from the low
   speed nominal capacity.
6. Two-speed units are checked for high > low air flow and UA.

Every write is gated on ``first_sizes_okay_to_finalize`` so sizing can run
repeatedly; reports are gated on the first/final report flags.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from fluid_cooler.components.cooling.heat_exchanger import DesignConditions
from fluid_cooler.core.constants import FluidCoolerConstants, StandardConditions
from fluid_cooler.core.enums import FluidCoolerType, PerformanceInputMethod, SolverStatus
from fluid_cooler.core.exceptions import SizingError, SizingInfeasibleError
from fluid_cooler.optimization.root_finding import solve_root
from fluid_cooler.plant.loop import PlantSizingData

if TYPE_CHECKING:
    from fluid_cooler.components.cooling.fluid_cooler import FluidCooler

logger = logging.getLogger(__name__)

_HIGH_SPEED_LABELS = {
    FluidCoolerType.SINGLE_SPEED: {
        "fan_power": "Fan Power at Design Air Flow Rate [W]",
        "air_flow": "Design Air Flow Rate [m3/s]",
        "ua": "U-factor Times Area Value at Design Air Flow Rate [W/K]",
        "ua_nominal": "Fluid cooler UA value at design air flow rate based on nominal capacity input [W/K]",
    },
    FluidCoolerType.TWO_SPEED: {
        "fan_power": "Fan Power at High Fan Speed [W]",
        "air_flow": "Air Flow Rate at High Fan Speed [m3/s]",
        "ua": "U-factor Times Area Value at High Fan Speed [W/K]",
        "ua_nominal": "Fluid cooler UA value at high fan speed based on nominal capacity input [W/K]",
    },
}


class FluidCoolerSizer:
    """
    Resolves the autosized fields of one FluidCooler.

    Example:
        sizer = FluidCoolerSizer(cooler)
        sizer.size()
        cooler.high_speed_ua.value
    """

    def __init__(self, cooler: 'FluidCooler') -> None:
        self.cooler = cooler
        self._design_load = 0.0

    @property
    def _finalize(self) -> bool:
        return self.cooler.environment.sizing.first_sizes_okay_to_finalize

    def _report(self, label: str, value: float) -> None:
        flags = self.cooler.environment.sizing
        if not flags.first_sizes_okay_to_finalize:
            return
        report = self.cooler.sizing_report
        if flags.final_sizes_okay_to_report:
            report.report(self.cooler.equipment_type, self.cooler.name, label, value)
        if flags.first_sizes_okay_to_report:
            report.report(self.cooler.equipment_type, self.cooler.name, f"Initial {label}", value)

    def _fatal(self, lines: List[str], exc_type=SizingError) -> None:
        for line in lines:
            logger.error(line)
        raise exc_type("\n".join(lines))

    def _check_exit_temperature(self, sizing: PlantSizingData) -> None:
        c = self.cooler
        if sizing.design_exit_temp <= c.design_entering_air_temp_c and self._finalize:
            self._fatal([
                f"Error when autosizing the UA value for fluid cooler = {c.name}.",
                f"Design Loop Exit Temperature ({sizing.design_exit_temp:.2f} C) must be greater "
                f"than design entering air dry-bulb temperature ({c.design_entering_air_temp_c:.2f} C) "
                f"when autosizing the fluid cooler UA.",
                "It is recommended that the Design Loop Exit Temperature = design inlet air "
                "dry-bulb temp plus the fluid cooler design approach temperature (e.g., 4 C).",
            ])

    def _load_from_loop_sizing(self, flow: float, sizing: PlantSizingData) -> float:
        c = self.cooler
        rho = c.fluid_properties.density(c.loop.fluid, StandardConditions.INIT_CONV_TEMP_C)
        cp = c.fluid_properties.specific_heat(c.loop.fluid, sizing.design_exit_temp)
        return rho * cp * flow * sizing.design_delta_t

    def _sizing_load(self, flow: float, sizing: Optional[PlantSizingData], what: str) -> float:
        """Load basis for autosized fan power and air flow."""
        c = self.cooler
        if c.performance_method == PerformanceInputMethod.NOMINAL_CAPACITY:
            return c.nominal_capacity
        if self._design_load > 0.0:
            return self._design_load
        if sizing is not None:
            if sizing.design_vol_flow_rate >= FluidCoolerConstants.SMALL_WATER_VOL_FLOW_M3_S:
                self._check_exit_temperature(sizing)
                self._design_load = self._load_from_loop_sizing(flow, sizing)
                return self._design_load
            return 0.0
        if self._finalize:
            self._fatal([
                f"Autosizing of fluid cooler {what} requires a loop plant sizing object.",
                f" Occurs in fluid cooler object = {c.name}",
            ])
        return 0.0

    def solve_ua(
        self,
        design_load: float,
        water_mass_flow: float,
        air_vol_flow: float,
        cp: float,
        conditions: DesignConditions,
        speed: str = "high",
    ) -> float:
        """
        Back-solve UA for a design load.

        Raises:
            SizingError: Non-positive design load
            SizingInfeasibleError: The bracket holds no root
        """
        c = self.cooler
        if design_load <= 0.0:
            self._fatal([f"Fluid cooler '{c.name}': design load must be positive to size UA ({design_load})"])

        c.design_conditions = conditions
        ua_low = FluidCoolerConstants.UA_LOWER_BOUND_FACTOR * design_load
        ua_high = FluidCoolerConstants.UA_UPPER_BOUND_FACTOR * design_load

        result = solve_root(
            FluidCoolerConstants.UA_SOLVER_ACCURACY,
            FluidCoolerConstants.UA_SOLVER_MAX_ITER,
            c.heat_exchanger.ua_residual,
            ua_low,
            ua_high,
            args=(design_load, water_mass_flow, air_vol_flow, cp, conditions),
        )

        if result.status == SolverStatus.ITERATION_LIMIT_EXCEEDED:
            logger.warning("Iteration limit exceeded in calculating fluid cooler UA.")
            logger.warning(f"  ... Autosizing of fluid cooler UA failed for fluid cooler = {c.name}")
            logger.warning(
                f"  ... The final UA value at {speed} fan speed = {result.root:.2f} W/K, "
                f"and the simulation continues..."
            )
        elif result.status == SolverStatus.NO_BRACKET:
            self._raise_infeasible(design_load, water_mass_flow, air_vol_flow, conditions, ua_low, ua_high)

        return result.root

    def _raise_infeasible(
        self,
        design_load: float,
        water_mass_flow: float,
        air_vol_flow: float,
        conditions: DesignConditions,
        ua_low: float,
        ua_high: float,
    ) -> None:
        c = self.cooler
        hx = c.heat_exchanger
        t_low = hx.evaluate_at(ua_low, water_mass_flow, air_vol_flow, conditions).outlet_water_temp
        t_high = hx.evaluate_at(ua_high, water_mass_flow, air_vol_flow, conditions).outlet_water_temp
        sizing = c.loop.sizing

        inputs: Dict[str, float] = {
            "design_load_w": design_load,
            "design_water_flow_m3_s": c.design_water_flow_rate.value_or(0.0),
            "design_air_flow_m3_s": air_vol_flow,
            "air_inlet_dry_bulb_c": conditions.air_dry_bulb_c,
            "water_inlet_temp_c": conditions.water_temp_c,
        }
        lines = [
            "SizeFluidCooler: The combination of design input values did not allow the "
            "calculation of a reasonable UA value.",
            "The design exit water temperature must lie between the outlet water temperatures "
            "at the low and high UA bracket ends.",
            "Inputs to the fluid cooler object:",
            f"Design Fluid Cooler Load [W]                       = {design_load:.2f}",
            f"Design Fluid Cooler Water Volume Flow Rate [m3/s]  = {inputs['design_water_flow_m3_s']:.6f}",
            f"Design Fluid Cooler Air Volume Flow Rate [m3/s]    = {air_vol_flow:.2f}",
            f"Design Fluid Cooler Air Inlet Dry-bulb Temp [C]    = {conditions.air_dry_bulb_c:.2f}",
        ]
        if sizing is not None:
            inputs["design_exit_temp_c"] = sizing.design_exit_temp
            inputs["design_delta_t_k"] = sizing.design_delta_t
            lines += [
                "Inputs to the plant sizing object:",
                f"Design Exit Water Temp [C]                         = {sizing.design_exit_temp:.2f}",
                f"Loop Design Temperature Difference [C]             = {sizing.design_delta_t:.2f}",
            ]
        lines += [
            f"Design Fluid Cooler Water Inlet Temp [C]           = {conditions.water_temp_c:.2f}",
            f"Calculated water outlet temp at low UA [C] (UA = {ua_low:.2f} W/K) = {t_low:.2f}",
            f"Calculated water outlet temp at high UA [C] (UA = {ua_high:.2f} W/K) = {t_high:.2f}",
            f"Autosizing of Fluid Cooler UA failed for fluid cooler = {c.name}",
        ]
        for line in lines:
            logger.error(line)
        raise SizingInfeasibleError("\n".join(lines), ua_low, ua_high, t_low, t_high, inputs)

    def _design_conditions(self, water_temp_c: float) -> DesignConditions:
        c = self.cooler
        pressure = StandardConditions.STD_BARO_PRESS_PA
        humidity_ratio = c.psychrometrics.humidity_ratio_from_wet_bulb(
            c.design_entering_air_temp_c, c.design_entering_air_wet_bulb_c, pressure
        )
        return DesignConditions(
            water_temp_c=water_temp_c,
            air_dry_bulb_c=c.design_entering_air_temp_c,
            air_wet_bulb_c=c.design_entering_air_wet_bulb_c,
            air_pressure_pa=pressure,
            air_humidity_ratio=humidity_ratio,
        )

    def size(self) -> None:
        """
        Resolve every autosized field of the unit.

        Raises:
            SizingError: Missing loop sizing data, exit temperature at or
                below the design air temperature, or low >= high speed
                values after sizing
            SizingInfeasibleError: UA cannot reproduce the design load
        """
        c = self.cooler
        finalize = self._finalize
        sizing = c.loop.sizing
        labels = _HIGH_SPEED_LABELS[c.cooler_type]
        small_flow = FluidCoolerConstants.SMALL_WATER_VOL_FLOW_M3_S
        self._design_load = 0.0

        # Design water flow
        flow = c.design_water_flow_rate.value_or(0.0)
        if c.design_water_flow_rate.was_autosized:
            if sizing is not None:
                flow = sizing.design_vol_flow_rate if sizing.design_vol_flow_rate >= small_flow else 0.0
                if finalize:
                    c.design_water_flow_rate = c.design_water_flow_rate.resolve(flow)
                    self._report("Design Water Flow Rate [m3/s]", flow)
                self._check_exit_temperature(sizing)
            elif finalize:
                self._fatal([
                    f"Autosizing error for fluid cooler object = {c.name}",
                    "Autosizing of fluid cooler condenser flow rate requires a loop plant sizing object.",
                ])

        c.loop.register_design_flow(c.water_inlet_node_name, flow)

        u_factor = c.performance_method == PerformanceInputMethod.U_FACTOR_TIMES_AREA

        # Design load from loop sizing
        if u_factor and c.high_speed_ua.was_autosized:
            if sizing is not None:
                self._design_load = self._load_from_loop_sizing(flow, sizing)
                if finalize:
                    c.nominal_capacity = self._design_load
            elif finalize:
                c.nominal_capacity = 0.0

        # High speed fan power
        if c.high_speed_fan_power.was_autosized:
            load = self._sizing_load(flow, sizing, "fan power")
            fan_power = FluidCoolerConstants.FAN_POWER_PER_LOAD_W_W * load
            if finalize:
                c.high_speed_fan_power = c.high_speed_fan_power.resolve(fan_power)
                self._report(labels["fan_power"], fan_power)

        # High speed air flow
        air_flow = c.high_speed_air_flow_rate.value_or(0.0)
        if c.high_speed_air_flow_rate.was_autosized:
            load = self._sizing_load(flow, sizing, "air flow rate")
            air_flow = (
                load
                / (c.design_entering_water_temp_c - c.design_entering_air_temp_c)
                * FluidCoolerConstants.AIR_FLOW_APPROACH_FACTOR
            )
            if finalize:
                c.high_speed_air_flow_rate = c.high_speed_air_flow_rate.resolve(air_flow)
                self._report(labels["air_flow"], air_flow)

        # High speed UA from loop sizing
        if u_factor and c.high_speed_ua.was_autosized and finalize:
            if sizing is None:
                self._fatal([
                    f"Autosizing error for fluid cooler object = {c.name}",
                    "Autosizing of fluid cooler UA requires a loop plant sizing object.",
                ])
            ua = 0.0
            if sizing.design_vol_flow_rate >= small_flow:
                self._check_exit_temperature(sizing)
                rho = c.fluid_properties.density(c.loop.fluid, StandardConditions.INIT_CONV_TEMP_C)
                cp = c.fluid_properties.specific_heat(c.loop.fluid, sizing.design_exit_temp)
                design_load = rho * cp * flow * sizing.design_delta_t
                conditions = self._design_conditions(sizing.design_exit_temp + sizing.design_delta_t)
                ua = self.solve_ua(design_load, rho * flow, air_flow, cp, conditions)
                c.nominal_capacity = design_load
            c.high_speed_ua = c.high_speed_ua.resolve(ua)
            self._report(labels["ua"], ua)

        # High speed UA from nominal capacity
        if not u_factor and finalize:
            ua = 0.0
            if flow >= small_flow:
                rho = c.fluid_properties.density(c.loop.fluid, StandardConditions.INIT_CONV_TEMP_C)
                cp = c.fluid_properties.specific_heat(c.loop.fluid, c.design_entering_water_temp_c)
                conditions = self._design_conditions(c.design_entering_water_temp_c)
                ua = self.solve_ua(c.nominal_capacity, rho * flow, air_flow, cp, conditions)
            c.high_speed_ua = c.high_speed_ua.resolve(ua)
            self._report(labels["ua_nominal"], ua)

        if c.cooler_type == FluidCoolerType.TWO_SPEED:
            self._size_low_speed(flow, u_factor)

        if c.environment.sizing.final_sizes_okay_to_report:
            c.sizing_report.predefined(c.equipment_type, c.name, "Type", 0.0)
            c.sizing_report.predefined(c.equipment_type, c.name, "Nominal Capacity [W]", c.nominal_capacity)

        if c.cooler_type == FluidCoolerType.TWO_SPEED and finalize:
            self._check_two_speed(flow)

    def _size_low_speed(self, flow: float, u_factor: bool) -> None:
        c = self.cooler
        if not self._finalize:
            return

        if c.low_speed_air_flow_rate.was_autosized:
            value = c.low_speed_air_flow_sizing_factor * c.high_speed_air_flow_rate.value
            c.low_speed_air_flow_rate = c.low_speed_air_flow_rate.resolve(value)
            self._report("Air Flow Rate at Low Fan Speed [m3/s]", value)

        if c.low_speed_fan_power.was_autosized:
            value = c.low_speed_fan_power_sizing_factor * c.high_speed_fan_power.value
            c.low_speed_fan_power = c.low_speed_fan_power.resolve(value)
            self._report("Fan Power at Low Fan Speed [W]", value)

        if u_factor:
            if c.low_speed_ua.was_autosized:
                value = c.low_speed_ua_sizing_factor * c.high_speed_ua.value
                c.low_speed_ua = c.low_speed_ua.resolve(value)
                self._report("U-factor Times Area Value at Low Fan Speed [W/K]", value)
            return

        if c.low_speed_nominal_capacity.was_autosized:
            value = c.low_speed_nominal_capacity_sizing_factor * c.nominal_capacity
            c.low_speed_nominal_capacity = c.low_speed_nominal_capacity.resolve(value)
            self._report("Low Fan Speed Nominal Capacity [W]", value)

        low_capacity = c.low_speed_nominal_capacity.value
        ua = 0.0
        if flow >= FluidCoolerConstants.SMALL_WATER_VOL_FLOW_M3_S and low_capacity > 0.0:
            rho = c.fluid_properties.density(c.loop.fluid, StandardConditions.INIT_CONV_TEMP_C)
            cp = c.fluid_properties.specific_heat(c.loop.fluid, c.design_entering_water_temp_c)
            conditions = self._design_conditions(c.design_entering_water_temp_c)
            ua = self.solve_ua(
                low_capacity, rho * flow, c.low_speed_air_flow_rate.value, cp, conditions, speed="low"
            )
        c.low_speed_ua = c.low_speed_ua.resolve(ua)
        self._report("U-factor Times Area Value at Low Fan Speed [W/K]", ua)

    def _check_two_speed(self, flow: float) -> None:
        c = self.cooler
        if flow <= 0.0:
            return
        errors = []
        if c.high_speed_air_flow_rate.value <= c.low_speed_air_flow_rate.value:
            errors.append(
                f'FluidCooler:TwoSpeed "{c.name}". Low speed air flow rate must be less '
                f"than high speed air flow rate."
            )
        if c.high_speed_fan_power.value <= c.low_speed_fan_power.value:
            errors.append(
                f'FluidCooler:TwoSpeed "{c.name}". Low speed fan power must be less '
                f"than high speed fan power."
            )
        if c.high_speed_ua.value <= c.low_speed_ua.value:
            errors.append(
                f'FluidCooler:TwoSpeed "{c.name}". Fluid cooler UA at low fan speed must be '
                f"less than the fluid cooler UA at high fan speed."
            )
        if errors:
            self._fatal(errors + ["SizeFluidCooler: Program terminated due to previous condition(s)."])
