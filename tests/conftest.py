"""
Pytest configuration and fixtures for fluid_cooler testing.

Constant-property providers replace CoolProp in component tests so expected
values can be written in closed form:

    water: ρ = 1000 kg/m3, cp = 4180 J/(kg K)
    air:   ρ = 1.2 kg/m3,  cp = 1000 J/(kg K), W = 0.01
"""

import pytest

from fluid_cooler.components.cooling.fluid_cooler import FluidCooler
from fluid_cooler.config.models import FluidCoolerSpec
from fluid_cooler.core.diagnostics import DiagnosticThrottle
from fluid_cooler.plant.environment import Environment
from fluid_cooler.plant.loop import PlantLoop, PlantSizingData, PlantTopology
from fluid_cooler.properties.fluid_properties import FluidProperties
from fluid_cooler.properties.psychrometrics import Psychrometrics
from fluid_cooler.reporting.sizing_report import SizingReport

WATER_DENSITY = 1000.0
WATER_CP = 4180.0
AIR_DENSITY = 1.2
AIR_CP = 1000.0
HUMIDITY_RATIO = 0.01

LOOP_NAME = "Condenser Loop"
COOLER_NAME = "Cooler 1"


def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "coolprop: marks tests that call CoolProp directly"
    )


class ConstantFluidProperties(FluidProperties):
    def density(self, fluid: str, temp_c: float) -> float:
        return WATER_DENSITY

    def specific_heat(self, fluid: str, temp_c: float) -> float:
        return WATER_CP


class ConstantPsychrometrics(Psychrometrics):
    def air_density(self, pressure_pa: float, dry_bulb_c: float, humidity_ratio: float) -> float:
        return AIR_DENSITY

    def air_specific_heat(self, humidity_ratio: float, dry_bulb_c: float) -> float:
        return AIR_CP

    def humidity_ratio_from_wet_bulb(self, dry_bulb_c: float, wet_bulb_c: float, pressure_pa: float) -> float:
        return HUMIDITY_RATIO


@pytest.fixture
def fluid_props():
    return ConstantFluidProperties()


@pytest.fixture
def psychro():
    return ConstantPsychrometrics()


@pytest.fixture
def environment(psychro):
    env = Environment(psychrometrics=psychro)
    env.set_conditions(dry_bulb_c=25.0, wet_bulb_c=18.0)
    return env


@pytest.fixture
def loop():
    return PlantLoop(
        LOOP_NAME,
        setpoint_c=30.0,
        min_temp_c=10.0,
        sizing=PlantSizingData(design_vol_flow_rate=0.002, design_exit_temp=30.0, design_delta_t=5.6),
        branches=[[COOLER_NAME]],
    )


@pytest.fixture
def topology(loop):
    return PlantTopology([loop])


@pytest.fixture
def make_spec():
    """Factory for FluidCoolerSpec with autosized single-speed defaults."""
    def _make(**overrides) -> FluidCoolerSpec:
        data = dict(
            name=COOLER_NAME,
            type="FluidCooler:SingleSpeed",
            loop=LOOP_NAME,
            water_inlet_node="Cooler 1 Inlet",
            water_outlet_node="Cooler 1 Outlet",
            performance_input_method="UFactorTimesAreaAndDesignWaterFlowRate",
            design_water_flow_rate="autosize",
            high_speed_air_flow_rate="autosize",
            high_speed_fan_power="autosize",
            high_speed_ua="autosize",
            design_entering_water_temp_c=35.0,
            design_entering_air_temp_c=25.0,
            design_entering_air_wet_bulb_c=18.0,
        )
        data.update(overrides)
        return FluidCoolerSpec(**data)
    return _make


@pytest.fixture
def make_cooler(make_spec, loop, topology, environment, fluid_props, psychro):
    """Factory for a FluidCooler wired to the shared loop and environment."""
    def _make(spec=None, **overrides) -> FluidCooler:
        spec = spec or make_spec(**overrides)
        cooler = FluidCooler(
            spec,
            loop,
            topology,
            environment,
            sizing_report=SizingReport(),
            diagnostics=DiagnosticThrottle(),
            fluid_properties=fluid_props,
            psychrometrics=psychro,
        )
        cooler.initialize(dt=1.0, registry=None)
        return cooler
    return _make
