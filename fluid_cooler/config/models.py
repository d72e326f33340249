from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Any

from fluid_cooler.core.constants import FluidCoolerConstants, StandardConditions
from fluid_cooler.core.enums import FluidCoolerType, LoopDemandScheme, PerformanceInputMethod
from fluid_cooler.core.exceptions import ConfigurationError
from fluid_cooler.core.sizing_value import SizableValue
from fluid_cooler.plant.loop import PlantSizingData

SIZABLE_FIELDS = (
    "design_water_flow_rate",
    "high_speed_air_flow_rate",
    "low_speed_air_flow_rate",
    "high_speed_fan_power",
    "low_speed_fan_power",
    "high_speed_ua",
    "low_speed_ua",
    "low_speed_nominal_capacity",
)

# --- EQUIPMENT MODELS ---

class FluidCoolerSpec(BaseModel):
    """
    Design inputs for one dry fluid cooler.

    Sizable fields take a number or "autosize"; a blank (null) field reads
    as 0.0.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    type: FluidCoolerType = FluidCoolerType.SINGLE_SPEED
    loop: str
    water_inlet_node: str
    water_outlet_node: str
    outdoor_air_inlet_node: Optional[str] = None
    performance_input_method: PerformanceInputMethod = PerformanceInputMethod.U_FACTOR_TIMES_AREA

    design_water_flow_rate: SizableValue = Field(default_factory=SizableValue.autosize)
    high_speed_air_flow_rate: SizableValue = Field(default_factory=SizableValue.autosize)
    low_speed_air_flow_rate: SizableValue = Field(default_factory=SizableValue.autosize)
    high_speed_fan_power: SizableValue = Field(default_factory=SizableValue.autosize)
    low_speed_fan_power: SizableValue = Field(default_factory=SizableValue.autosize)
    high_speed_ua: SizableValue = Field(default_factory=lambda: SizableValue.user(0.0))
    low_speed_ua: SizableValue = Field(default_factory=lambda: SizableValue.user(0.0))
    low_speed_nominal_capacity: SizableValue = Field(default_factory=SizableValue.autosize)
    nominal_capacity: float = 0.0

    design_entering_water_temp_c: float
    design_entering_air_temp_c: float
    design_entering_air_wet_bulb_c: float

    low_speed_ua_sizing_factor: float = FluidCoolerConstants.LOW_SPEED_UA_SIZING_FACTOR
    low_speed_air_flow_sizing_factor: float = FluidCoolerConstants.LOW_SPEED_AIR_FLOW_SIZING_FACTOR
    low_speed_fan_power_sizing_factor: float = FluidCoolerConstants.LOW_SPEED_FAN_POWER_SIZING_FACTOR
    low_speed_nominal_capacity_sizing_factor: float = FluidCoolerConstants.LOW_SPEED_CAPACITY_SIZING_FACTOR
    mass_flow_multiplier: float = FluidCoolerConstants.MASS_FLOW_MULTIPLIER

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> Any:
        return FluidCoolerType.from_label(v) if isinstance(v, str) else v

    @field_validator("performance_input_method", mode="before")
    @classmethod
    def _parse_method(cls, v: Any) -> Any:
        return PerformanceInputMethod.from_label(v) if isinstance(v, str) else v

    @field_validator(*SIZABLE_FIELDS, mode="before")
    @classmethod
    def _parse_sizable(cls, v: Any) -> SizableValue:
        return SizableValue.parse(v)

    @property
    def equipment_type(self) -> str:
        return self.type.label

    def validate_design(self) -> None:
        """
        Check the design inputs as a whole.

        Raises:
            ConfigurationError: Listing every problem found
        """
        errors: List[str] = []
        prefix = f'{self.equipment_type}="{self.name}"'
        two_speed = self.type == FluidCoolerType.TWO_SPEED

        for label, value in (
            ("Design Entering Water Temperature", self.design_entering_water_temp_c),
            ("Design Entering Air Temperature", self.design_entering_air_temp_c),
            ("Design Entering Air Wet-bulb Temperature", self.design_entering_air_wet_bulb_c),
        ):
            if value <= 0.0:
                errors.append(f"{prefix}: {label} must be greater than 0 C.")
        if self.design_entering_water_temp_c <= self.design_entering_air_temp_c:
            errors.append(
                f"{prefix}: Design Entering Water Temperature must be greater than "
                f"Design Entering Air Temperature."
            )
        if self.design_entering_air_temp_c <= self.design_entering_air_wet_bulb_c:
            errors.append(
                f"{prefix}: Design Entering Air Temperature must be greater than "
                f"Design Entering Air Wet-bulb Temperature."
            )

        positive = [
            ("Design Water Flow Rate", self.design_water_flow_rate),
            ("Design Air Flow Rate" if not two_speed else "High Fan Speed Air Flow Rate",
             self.high_speed_air_flow_rate),
            ("Design Air Flow Rate Fan Power" if not two_speed else "High Fan Speed Fan Power",
             self.high_speed_fan_power),
        ]
        if two_speed:
            positive += [
                ("Low Fan Speed Air Flow Rate", self.low_speed_air_flow_rate),
                ("Low Fan Speed Fan Power", self.low_speed_fan_power),
            ]
        for label, value in positive:
            if not value.was_autosized and value.raw <= 0.0:
                errors.append(f"{prefix}: {label} must be greater than zero.")

        if two_speed:
            self._check_ordered(
                errors, prefix, "Air Flow Rate", self.high_speed_air_flow_rate, self.low_speed_air_flow_rate
            )
            self._check_ordered(
                errors, prefix, "Fan Power", self.high_speed_fan_power, self.low_speed_fan_power
            )

        if self.performance_input_method == PerformanceInputMethod.U_FACTOR_TIMES_AREA:
            ua_fields = [("U-Factor Times Area Value at Design Air Flow Rate"
                          if not two_speed else "U-factor Times Area Value at High Fan Speed",
                          self.high_speed_ua)]
            if two_speed:
                ua_fields.append(("U-factor Times Area Value at Low Fan Speed", self.low_speed_ua))
            for label, value in ua_fields:
                if not value.was_autosized and value.raw <= 0.0:
                    errors.append(
                        f"{prefix}: {label} must be greater than zero when the UFactorTimesAreaAndDesignWaterFlowRate "
                        f"performance input method is used."
                    )
            if two_speed:
                self._check_ordered(errors, prefix, "UA", self.high_speed_ua, self.low_speed_ua)
        else:
            if self.nominal_capacity <= 0.0:
                errors.append(
                    f"{prefix}: Nominal Capacity must be greater than zero when the NominalCapacity "
                    f"performance input method is used."
                )
            ua_fields = [("U-Factor Times Area Value", self.high_speed_ua)]
            if two_speed:
                ua_fields.append(("U-Factor Times Area Value at Low Fan Speed", self.low_speed_ua))
            for label, value in ua_fields:
                if value.was_autosized:
                    errors.append(
                        f"{prefix}: Nominal capacity input method requires {label} to be blank, "
                        f"but it is entered as autosize."
                    )
                elif value.raw != 0.0:
                    errors.append(
                        f"{prefix}: Nominal capacity input method requires {label} to be blank, "
                        f"but it is specified as {value.raw}."
                    )
            if two_speed:
                low = self.low_speed_nominal_capacity
                if not low.was_autosized:
                    if low.raw <= 0.0:
                        errors.append(f"{prefix}: Low Speed Nominal Capacity must be greater than zero.")
                    elif low.raw >= self.nominal_capacity:
                        errors.append(
                            f"{prefix}: Low Speed Nominal Capacity must be less than the "
                            f"High Speed Nominal Capacity."
                        )

        if self.mass_flow_multiplier <= 0.0:
            errors.append(f"{prefix}: Mass flow multiplier must be greater than zero.")

        if errors:
            raise ConfigurationError("\n".join(errors))

    @staticmethod
    def _check_ordered(errors: List[str], prefix: str, label: str, high: SizableValue, low: SizableValue) -> None:
        if high.was_autosized or low.was_autosized:
            return
        if high.raw <= low.raw:
            errors.append(f"{prefix}: Low speed {label} must be less than the high speed {label}.")

# --- PLANT MODELS ---

class PlantSizingSpec(BaseModel):
    design_vol_flow_rate: float
    design_exit_temp_c: float
    design_delta_t_k: float

    def to_sizing_data(self) -> PlantSizingData:
        return PlantSizingData(self.design_vol_flow_rate, self.design_exit_temp_c, self.design_delta_t_k)

class PlantLoopSpec(BaseModel):
    name: str
    fluid: str = "WATER"
    demand_scheme: LoopDemandScheme = LoopDemandScheme.SINGLE_SETPOINT
    setpoint_c: float = 30.0
    setpoint_hi_c: Optional[float] = None
    min_temp_c: float = 5.0
    max_mass_flow_rate: Optional[float] = None
    sizing: Optional[PlantSizingSpec] = None
    branches: List[List[str]] = []
    # Return water temperature entering the supply side units
    inlet_temp_c: float = 35.0
    boundary_file: Optional[str] = None

    @field_validator("demand_scheme", mode="before")
    @classmethod
    def _parse_scheme(cls, v: Any) -> Any:
        return LoopDemandScheme.from_label(v) if isinstance(v, str) else v

# --- SIMULATION MODELS ---

class SimulationSpec(BaseModel):
    timestep_hours: float = 1.0
    steps: int = 24
    weather_file: Optional[str] = None
    results_file: Optional[str] = None
    dry_bulb_c: float = 35.0
    wet_bulb_c: float = 25.6
    pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA

    @field_validator("timestep_hours")
    @classmethod
    def _positive_timestep(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError("timestep_hours must be positive")
        return v

# --- MASTER CONTEXT ---

class PlantConfig(BaseModel):
    simulation: SimulationSpec = SimulationSpec()
    loops: List[PlantLoopSpec]
    fluid_coolers: List[FluidCoolerSpec]
    # Directory relative file paths are resolved against
    base_dir: Optional[str] = None
