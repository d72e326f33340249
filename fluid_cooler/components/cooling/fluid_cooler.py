"""
Dry fluid cooler plant component (single- and two-speed fans).

A closed circuit condenser loop cooler: loop water flows through a finned
coil and is cooled sensibly by outdoor air drawn across it by a fan. The
coil is modelled with the cross-flow ε-NTU relation in
``heat_exchanger.py``; fan staging to hold the loop setpoint lives in
``capacity_control.py``; design value resolution lives in ``sizing.py``.

Lifecycle
---------
*   Construction validates the design inputs and raises ConfigurationError
    before any timestep runs.
*   ``simulate(run_flag, init_loop_equip=True)``: per-timestep init followed
    by sizing; returns the load range for the loop manager.
*   ``simulate(run_flag, init_loop_equip=False)``: init, capacity control,
    outlet node update and reporting for one timestep.

Per-timestep init locates the unit on its loop once, sets node flow limits
at the start of every environment (after the design flow is known), reads
the entering water and air states and requests flow from the loop.
"""

import logging
from typing import Any, Dict, Optional

from fluid_cooler.components.cooling.capacity_control import (
    ControlResult,
    FanStage,
    heat_rejected,
    single_speed_control,
    two_speed_control,
)
from fluid_cooler.components.cooling.heat_exchanger import DesignConditions, FluidCoolerHeatExchanger
from fluid_cooler.components.cooling.sizing import FluidCoolerSizer
from fluid_cooler.config.models import FluidCoolerSpec
from fluid_cooler.core.component import Component, LoadCapacities
from fluid_cooler.core.constants import FluidCoolerConstants, StandardConditions
from fluid_cooler.core.diagnostics import DiagnosticThrottle
from fluid_cooler.core.enums import (
    FlowLock,
    FluidCoolerType,
    LifecyclePhase,
    OperatingMode,
    PerformanceInputMethod,
)
from fluid_cooler.core.sizing_value import SizableValue
from fluid_cooler.plant.environment import Environment
from fluid_cooler.plant.loop import ComponentLocation, PlantLoop, PlantTopology
from fluid_cooler.properties.fluid_properties import FluidProperties
from fluid_cooler.properties.psychrometrics import Psychrometrics
from fluid_cooler.reporting.sizing_report import SizingReport

logger = logging.getLogger(__name__)


class FluidCooler(Component):
    """
    Single- or two-speed dry fluid cooler on a condenser loop.

    Attributes:
        design_water_flow_rate (SizableValue): Design water volume flow [m3/s]
        high_speed_air_flow_rate (SizableValue): Design (high speed) air flow [m3/s]
        high_speed_fan_power (SizableValue): Design (high speed) fan power [W]
        high_speed_ua (SizableValue): UA at design (high speed) air flow [W/K]
        low_speed_* (SizableValue): Two-speed low fan values
        nominal_capacity (float): Heat rejected at design conditions [W]
        inlet_water_temp (float): Entering water temperature [C]
        outlet_water_temp (float): Leaving water temperature [C]
        water_mass_flow (float): Granted water mass flow [kg/s]
        heat_rejected_w (float): Heat rejected this timestep [W]
        fan_power_w (float): Fan electric power [W]
        fan_energy_j (float): Fan electric energy this timestep [J]

    Example:
        cooler = FluidCooler(spec, loop, topology, environment)
        registry.register(spec.name, cooler)
        cooler.initialize(dt=1.0, registry=registry)
        cooler.simulate(run_flag=True, init_loop_equip=True)   # sizing
        cooler.simulate(run_flag=True, init_loop_equip=False)  # one timestep
    """

    def __init__(
        self,
        spec: FluidCoolerSpec,
        loop: PlantLoop,
        topology: PlantTopology,
        environment: Environment,
        sizing_report: Optional[SizingReport] = None,
        diagnostics: Optional[DiagnosticThrottle] = None,
        fluid_properties: Optional[FluidProperties] = None,
        psychrometrics: Optional[Psychrometrics] = None,
    ) -> None:
        """
        Args:
            spec: Design inputs; validated here
            loop: Condenser loop the unit sits on
            topology: All plant loops, used to locate the unit
            environment: Outdoor conditions and run flags
            sizing_report: Sink for resolved design values
            diagnostics: Throttle for recurring runtime warnings

        Raises:
            ConfigurationError: If the design inputs are inconsistent
        """
        super().__init__(config=spec, component_id=spec.name)
        spec.validate_design()

        self.name = spec.name
        self.cooler_type = spec.type
        self.performance_method = spec.performance_input_method
        self.loop = loop
        self.topology = topology
        self.environment = environment
        self.sizing_report = sizing_report or SizingReport()
        self.diagnostics = diagnostics or DiagnosticThrottle()
        self.fluid_properties = fluid_properties or FluidProperties()
        self.psychrometrics = psychrometrics or environment.psychrometrics
        self.heat_exchanger = FluidCoolerHeatExchanger(loop.fluid, self.fluid_properties, self.psychrometrics)

        self.water_inlet_node_name = spec.water_inlet_node
        self.water_outlet_node_name = spec.water_outlet_node
        self.outdoor_air_node_name = spec.outdoor_air_inlet_node
        self.inlet_node = loop.node(spec.water_inlet_node)
        self.outlet_node = loop.node(spec.water_outlet_node)
        self.location: Optional[ComponentLocation] = None

        # Design values
        self.design_water_flow_rate: SizableValue = spec.design_water_flow_rate
        self.high_speed_air_flow_rate: SizableValue = spec.high_speed_air_flow_rate
        self.low_speed_air_flow_rate: SizableValue = spec.low_speed_air_flow_rate
        self.high_speed_fan_power: SizableValue = spec.high_speed_fan_power
        self.low_speed_fan_power: SizableValue = spec.low_speed_fan_power
        self.high_speed_ua: SizableValue = spec.high_speed_ua
        self.low_speed_ua: SizableValue = spec.low_speed_ua
        self.low_speed_nominal_capacity: SizableValue = spec.low_speed_nominal_capacity
        self.nominal_capacity: float = spec.nominal_capacity

        # UA is always derived from capacity under the nominal capacity method
        if self.performance_method == PerformanceInputMethod.NOMINAL_CAPACITY:
            self.high_speed_ua = SizableValue.autosize()
            if self.cooler_type == FluidCoolerType.TWO_SPEED:
                self.low_speed_ua = SizableValue.autosize()

        self.design_entering_water_temp_c = spec.design_entering_water_temp_c
        self.design_entering_air_temp_c = spec.design_entering_air_temp_c
        self.design_entering_air_wet_bulb_c = spec.design_entering_air_wet_bulb_c
        self.low_speed_ua_sizing_factor = spec.low_speed_ua_sizing_factor
        self.low_speed_air_flow_sizing_factor = spec.low_speed_air_flow_sizing_factor
        self.low_speed_fan_power_sizing_factor = spec.low_speed_fan_power_sizing_factor
        self.low_speed_nominal_capacity_sizing_factor = spec.low_speed_nominal_capacity_sizing_factor
        self.mass_flow_multiplier = spec.mass_flow_multiplier
        self.design_water_mass_flow_rate = 0.0
        self.design_conditions: Optional[DesignConditions] = None

        self._sizer = FluidCoolerSizer(self)

        # Timestep state
        self.inlet_water_temp = self.inlet_node.temperature_c
        self.outlet_water_temp = self.inlet_water_temp
        self.water_mass_flow = 0.0
        self.air_dry_bulb_c = environment.dry_bulb_c
        self.air_wet_bulb_c = environment.wet_bulb_c
        self.air_humidity_ratio = environment.humidity_ratio
        self.air_pressure_pa = environment.pressure_pa
        self.heat_rejected_w = 0.0
        self.fan_power_w = 0.0
        self.fan_energy_j = 0.0
        self.mode = OperatingMode.IDLE
        self.fan_fraction = 0.0

    @property
    def equipment_type(self) -> str:
        return self.cooler_type.label

    def initialize(self, dt: float, registry: Any) -> None:
        super().initialize(dt, registry)
        self.heat_rejected_w = 0.0
        self.fan_power_w = 0.0
        self.fan_energy_j = 0.0

    def ensure_registered(self) -> None:
        """Locate the unit on its loop, once."""
        if self.phase >= LifecyclePhase.REGISTERED:
            return
        self.location = self.topology.locate(self.name)
        self.phase = LifecyclePhase.REGISTERED
        logger.debug(f"{self.equipment_type} '{self.name}' located at {self.location}")

    def init_timestep(self) -> None:
        """
        Per-call initialisation.

        Node flow limits are set at the first begin-environment call after
        the design water flow is known, and re-armed once the environment
        has started.
        """
        self.ensure_registered()
        env = self.environment

        if (
            env.begin_environment
            and env.sizing.first_sizes_okay_to_finalize
            and self.phase == LifecyclePhase.REGISTERED
            and self.design_water_flow_rate.is_resolved
        ):
            rho = self.fluid_properties.density(self.loop.fluid, StandardConditions.INIT_CONV_TEMP_C)
            self.design_water_mass_flow_rate = self.design_water_flow_rate.value * rho
            self.loop.init_component_nodes(self.inlet_node, self.outlet_node, self.design_water_mass_flow_rate)
            self.phase = LifecyclePhase.ENVIRONMENT_INITIALIZED
        if not env.begin_environment and self.phase == LifecyclePhase.ENVIRONMENT_INITIALIZED:
            self.phase = LifecyclePhase.REGISTERED

        self.inlet_water_temp = self.inlet_node.temperature_c

        if self.outdoor_air_node_name:
            node = env.outdoor_air_node(self.outdoor_air_node_name)
            self.air_dry_bulb_c = node.dry_bulb_c
            self.air_wet_bulb_c = node.wet_bulb_c
            self.air_humidity_ratio = node.humidity_ratio
            self.air_pressure_pa = node.pressure_pa
        else:
            self.air_dry_bulb_c = env.dry_bulb_c
            self.air_wet_bulb_c = env.wet_bulb_c
            self.air_humidity_ratio = env.humidity_ratio
            self.air_pressure_pa = env.pressure_pa

        self.water_mass_flow = self.loop.regulate_flow_request(
            self.inlet_node, self.outlet_node, self.design_water_mass_flow_rate * self.mass_flow_multiplier
        )

    def size(self) -> None:
        self._sizer.size()

    def _outlet_temperature(self, ua: float, air_flow: float) -> float:
        return self.heat_exchanger.evaluate(
            self.water_mass_flow,
            air_flow,
            ua,
            self.inlet_water_temp,
            self.air_dry_bulb_c,
            self.air_pressure_pa,
            self.air_humidity_ratio,
        ).outlet_water_temp

    def calculate(self) -> ControlResult:
        """Run fan capacity control for the current timestep."""
        setpoint = self.loop.setpoint

        if self.cooler_type == FluidCoolerType.SINGLE_SPEED:
            stage = FanStage(
                self.high_speed_ua.value, self.high_speed_air_flow_rate.value, self.high_speed_fan_power.value
            )
            result = single_speed_control(
                self.inlet_water_temp, setpoint, self.water_mass_flow, stage, self._outlet_temperature
            )
        else:
            low = FanStage(
                self.low_speed_ua.value, self.low_speed_air_flow_rate.value, self.low_speed_fan_power.value
            )
            high = FanStage(
                self.high_speed_ua.value, self.high_speed_air_flow_rate.value, self.high_speed_fan_power.value
            )
            result = two_speed_control(
                self.inlet_water_temp, setpoint, self.water_mass_flow, low, high,
                self._outlet_temperature, flow_lock=self.loop.flow_lock,
            )

        self.mode = result.mode
        self.fan_fraction = result.fan_fraction
        self.outlet_water_temp = result.outlet_temp
        self.fan_power_w = result.fan_power

        cp = self.fluid_properties.specific_heat(self.loop.fluid, self.inlet_water_temp)
        self.heat_rejected_w = heat_rejected(self.water_mass_flow, cp, self.inlet_water_temp, self.outlet_water_temp)
        return result

    def update(self, run_flag: bool = True) -> None:
        """Write the leaving water state and check runtime limits."""
        self.outlet_node.temperature_c = self.outlet_water_temp

        if self.loop.flow_lock == FlowLock.UNLOCKED or self.environment.warmup:
            return

        max_flow = self.design_water_mass_flow_rate * self.mass_flow_multiplier
        flow = self.inlet_node.mass_flow_rate
        if flow > max_flow:
            self.diagnostics.warn(
                self.name,
                "mass_flow_high",
                f"{self.equipment_type} water mass flow rate exceeds design water mass flow rate.",
                value=flow,
                details=[
                    f"Design water mass flow rate = {max_flow:.4f} kg/s",
                    f"Current water mass flow rate = {flow:.4f} kg/s",
                ],
                units="[kg/s]",
            )

        if self.outlet_water_temp < self.loop.min_temp_c and self.water_mass_flow > 0.0:
            self.diagnostics.warn(
                self.name,
                "outlet_temp_low",
                f"{self.equipment_type} water outlet temperature is below the specified "
                f"minimum condenser loop temperature of {self.loop.min_temp_c:.2f} C",
                value=self.outlet_water_temp,
                details=[f"Outlet water temperature = {self.outlet_water_temp:.2f} C"],
                units="[C]",
            )

        if run_flag and 0.0 < self.water_mass_flow <= FluidCoolerConstants.MASS_FLOW_TOLERANCE_KG_S:
            self.diagnostics.warn(
                self.name,
                "flow_near_zero",
                f"{self.equipment_type} water mass flow rate near zero.",
                value=self.water_mass_flow,
                details=[f"Actual mass flow = {self.water_mass_flow:.2e} kg/s"],
                units="[kg/s]",
            )

    def report(self, run_flag: bool) -> None:
        """Reporting variables for the timestep."""
        self.inlet_water_temp = self.inlet_node.temperature_c
        if not run_flag:
            self.outlet_water_temp = self.inlet_water_temp
            self.heat_rejected_w = 0.0
            self.fan_power_w = 0.0
            self.fan_energy_j = 0.0
            return
        self.fan_energy_j = self.fan_power_w * self.dt * StandardConditions.SECONDS_PER_HOUR

    def simulate(self, run_flag: bool, init_loop_equip: bool) -> Optional[LoadCapacities]:
        if init_loop_equip:
            self.init_timestep()
            self.size()
            return LoadCapacities(0.0, self.nominal_capacity, self.nominal_capacity)

        self.init_timestep()
        self.calculate()
        self.update(run_flag)
        self.report(run_flag)
        return None

    def get_state(self) -> Dict[str, Any]:
        state = super().get_state()
        state.update({
            "equipment_type": self.equipment_type,
            "inlet_water_temp_c": self.inlet_water_temp,
            "outlet_water_temp_c": self.outlet_water_temp,
            "water_mass_flow_kg_s": self.water_mass_flow,
            "heat_rejected_w": self.heat_rejected_w,
            "fan_power_w": self.fan_power_w,
            "fan_energy_j": self.fan_energy_j,
            "mode": self.mode.name,
            "fan_fraction": self.fan_fraction,
            "air_dry_bulb_c": self.air_dry_bulb_c,
            "nominal_capacity_w": self.nominal_capacity,
            "design_water_flow_rate_m3_s": self.design_water_flow_rate.value_or(0.0),
            "high_speed_ua_w_k": self.high_speed_ua.value_or(0.0),
            "high_speed_air_flow_m3_s": self.high_speed_air_flow_rate.value_or(0.0),
        })
        if self.cooler_type == FluidCoolerType.TWO_SPEED:
            state["low_speed_ua_w_k"] = self.low_speed_ua.value_or(0.0)
            state["low_speed_air_flow_m3_s"] = self.low_speed_air_flow_rate.value_or(0.0)
        return state
