"""
FluidCooler lifecycle and timestep behaviour.

The autosized single-speed unit from the shared fixtures rejects 46816 W
with 35.6 C entering water and 25 C air, an effectiveness of
46816 / (8360 · 10.6). At 35 C entering water the full-fan outlet is
therefore 35 - 10 · ε ≈ 29.72 C.
"""

import pytest

from conftest import WATER_CP
from fluid_cooler.core.component import LoadCapacities
from fluid_cooler.core.enums import FlowLock, LifecyclePhase, LoopDemandScheme, OperatingMode
from fluid_cooler.core.exceptions import ConfigurationError, UnresolvedSizeError

DESIGN_LOAD = 1000.0 * WATER_CP * 0.002 * 5.6
EFFECTIVENESS = DESIGN_LOAD / (2.0 * WATER_CP * 10.6)
FULL_FAN_OUTLET = 35.0 - 10.0 * EFFECTIVENESS


@pytest.fixture
def sized_cooler(make_cooler):
    """Autosized single-speed unit after both sizing calls, inlet at 35 C."""
    cooler = make_cooler()
    cooler.inlet_node.temperature_c = 35.0
    cooler.simulate(run_flag=True, init_loop_equip=True)
    cooler.simulate(run_flag=True, init_loop_equip=True)
    return cooler


class TestLifecycle:

    def test_init_loop_equip_returns_load_range(self, make_cooler):
        cooler = make_cooler()
        capacities = cooler.simulate(run_flag=True, init_loop_equip=True)
        assert capacities == LoadCapacities(0.0, pytest.approx(DESIGN_LOAD), pytest.approx(DESIGN_LOAD))

    def test_environment_init_waits_for_design_flow(self, make_cooler):
        cooler = make_cooler()
        cooler.simulate(run_flag=True, init_loop_equip=True)
        # Flow was still unresolved when the first call initialised
        assert cooler.phase == LifecyclePhase.REGISTERED
        assert cooler.design_water_mass_flow_rate == 0.0

        cooler.simulate(run_flag=True, init_loop_equip=True)
        assert cooler.phase == LifecyclePhase.ENVIRONMENT_INITIALIZED
        assert cooler.design_water_mass_flow_rate == pytest.approx(2.0)
        assert cooler.inlet_node.mass_flow_rate_max_avail == pytest.approx(2.0)

    def test_environment_init_rearms(self, sized_cooler, environment):
        environment.begin_environment = False
        sized_cooler.init_timestep()
        assert sized_cooler.phase == LifecyclePhase.REGISTERED

        environment.begin_environment = True
        sized_cooler.init_timestep()
        assert sized_cooler.phase == LifecyclePhase.ENVIRONMENT_INITIALIZED

    def test_unit_not_on_any_loop(self, make_cooler, loop):
        loop.branches = []
        cooler = make_cooler()
        with pytest.raises(ConfigurationError, match="not connected to any plant loop"):
            cooler.init_timestep()

    def test_invalid_design_rejected_before_any_step(self, make_cooler):
        with pytest.raises(ConfigurationError, match="Design Entering Air Temperature must be greater"):
            make_cooler(design_entering_air_wet_bulb_c=26.0)

    def test_control_before_sizing_fails_loudly(self, make_cooler):
        cooler = make_cooler()
        cooler.init_timestep()
        with pytest.raises(UnresolvedSizeError):
            cooler.calculate()


class TestTimestep:

    def test_flow_request_clamped_to_design(self, sized_cooler):
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        # Requested 2.5 x design, node limit is the design mass flow
        assert sized_cooler.water_mass_flow == pytest.approx(2.0)

    def test_partial_fan_holds_setpoint(self, sized_cooler):
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)

        assert sized_cooler.mode == OperatingMode.PARTIAL_FAN
        assert sized_cooler.outlet_water_temp == pytest.approx(30.0)
        assert sized_cooler.outlet_node.temperature_c == pytest.approx(30.0)
        assert sized_cooler.heat_rejected_w == pytest.approx(2.0 * WATER_CP * 5.0)

        fraction = (30.0 - 35.0) / (FULL_FAN_OUTLET - 35.0)
        assert sized_cooler.fan_fraction == pytest.approx(fraction, rel=1e-3)
        assert sized_cooler.fan_power_w == pytest.approx(fraction * sized_cooler.high_speed_fan_power.value, rel=1e-3)
        assert sized_cooler.fan_energy_j == pytest.approx(sized_cooler.fan_power_w * 3600.0)

    def test_full_fan_when_setpoint_unreachable(self, sized_cooler, loop):
        loop.setpoint_c = 26.0
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)

        assert sized_cooler.mode == OperatingMode.FULL_FAN
        assert sized_cooler.outlet_water_temp == pytest.approx(FULL_FAN_OUTLET, rel=1e-3)
        assert sized_cooler.fan_power_w == sized_cooler.high_speed_fan_power.value

    def test_idle_below_setpoint(self, sized_cooler):
        sized_cooler.inlet_node.temperature_c = 28.0
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)

        assert sized_cooler.mode == OperatingMode.IDLE
        assert sized_cooler.outlet_water_temp == 28.0
        assert sized_cooler.heat_rejected_w == 0.0
        assert sized_cooler.fan_power_w == 0.0

    def test_dual_setpoint_uses_high_setpoint(self, sized_cooler, loop):
        loop.demand_scheme = LoopDemandScheme.DUAL_SETPOINT_DEADBAND
        loop.setpoint_hi_c = 32.0
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        assert sized_cooler.outlet_water_temp == pytest.approx(32.0)

    def test_run_flag_off_reports_nothing(self, sized_cooler):
        sized_cooler.simulate(run_flag=False, init_loop_equip=False)

        assert sized_cooler.outlet_water_temp == 35.0
        assert sized_cooler.heat_rejected_w == 0.0
        assert sized_cooler.fan_power_w == 0.0
        assert sized_cooler.fan_energy_j == 0.0

    def test_outdoor_air_node(self, make_cooler, environment):
        node = environment.outdoor_air_node("Cooler 1 OA")
        node.fixed = True
        node.dry_bulb_c = 40.0
        cooler = make_cooler(outdoor_air_inlet_node="Cooler 1 OA")
        cooler.init_timestep()
        assert cooler.air_dry_bulb_c == 40.0

        environment.set_conditions(dry_bulb_c=20.0, wet_bulb_c=15.0)
        cooler.init_timestep()
        assert cooler.air_dry_bulb_c == 40.0

    def test_get_state(self, sized_cooler):
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        state = sized_cooler.get_state()

        assert state["component_id"] == "Cooler 1"
        assert state["equipment_type"] == "FluidCooler:SingleSpeed"
        assert state["mode"] == "PARTIAL_FAN"
        assert state["outlet_water_temp_c"] == pytest.approx(30.0)
        assert state["nominal_capacity_w"] == pytest.approx(DESIGN_LOAD)


class TestRuntimeWarnings:

    def test_outlet_below_loop_minimum(self, sized_cooler, loop):
        loop.min_temp_c = 31.0
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        assert sized_cooler.diagnostics.count("Cooler 1", "outlet_temp_low") == 2

    def test_no_warnings_while_unlocked(self, sized_cooler, loop):
        loop.min_temp_c = 31.0
        loop.flow_lock = FlowLock.UNLOCKED
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        assert sized_cooler.diagnostics.count("Cooler 1", "outlet_temp_low") == 0

    def test_no_warnings_during_warmup(self, sized_cooler, loop, environment):
        loop.min_temp_c = 31.0
        environment.warmup = True
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        assert sized_cooler.diagnostics.count("Cooler 1", "outlet_temp_low") == 0

    def test_flow_above_design(self, sized_cooler):
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        sized_cooler.inlet_node.mass_flow_rate = 10.0
        sized_cooler.update()
        assert sized_cooler.diagnostics.count("Cooler 1", "mass_flow_high") == 1

    def test_flow_near_zero(self, sized_cooler):
        sized_cooler.simulate(run_flag=True, init_loop_equip=False)
        sized_cooler.water_mass_flow = 5e-10
        sized_cooler.update()
        assert sized_cooler.diagnostics.count("Cooler 1", "flow_near_zero") == 1


class TestTwoSpeedUnit:

    @pytest.fixture
    def two_speed(self, make_cooler):
        cooler = make_cooler(type="FluidCooler:TwoSpeed", low_speed_ua="autosize")
        cooler.inlet_node.temperature_c = 35.0
        cooler.simulate(run_flag=True, init_loop_equip=True)
        cooler.simulate(run_flag=True, init_loop_equip=True)
        return cooler

    def test_locked_flow_runs_fans(self, two_speed):
        two_speed.simulate(run_flag=True, init_loop_equip=False)

        assert two_speed.mode in (
            OperatingMode.LOW_FAN, OperatingMode.LOW_FAN_PARTIAL,
            OperatingMode.HIGH_FAN, OperatingMode.HIGH_FAN_PARTIAL,
        )
        assert two_speed.outlet_water_temp < 35.0
        assert 0.0 < two_speed.fan_power_w <= two_speed.high_speed_fan_power.value
        state = two_speed.get_state()
        assert state["low_speed_ua_w_k"] == pytest.approx(0.6 * two_speed.high_speed_ua.value)

    def test_unlocked_flow_is_idle(self, two_speed, loop):
        loop.flow_lock = FlowLock.UNLOCKED
        two_speed.simulate(run_flag=True, init_loop_equip=False)

        assert two_speed.mode == OperatingMode.IDLE
        assert two_speed.outlet_water_temp == 35.0
        assert two_speed.heat_rejected_w == 0.0
