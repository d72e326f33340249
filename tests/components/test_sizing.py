"""
Design value resolution tests.

With constant properties and loop sizing data (0.002 m3/s, 30 C exit,
5.6 K range) the design load is 1000 · 4180 · 0.002 · 5.6 = 46816 W.
"""

import logging

import pytest

from conftest import WATER_CP
from fluid_cooler.core.constants import FluidCoolerConstants
from fluid_cooler.core.enums import SizingStatus
from fluid_cooler.core.exceptions import ConfigurationError, SizingError, SizingInfeasibleError
from fluid_cooler.plant.loop import PlantSizingData

DESIGN_LOAD = 1000.0 * WATER_CP * 0.002 * 5.6
DESIGN_MASS_FLOW = 2.0


def rejected_at_design(cooler, ua, air_flow):
    return cooler.heat_exchanger.evaluate_at(
        ua, DESIGN_MASS_FLOW, air_flow, cooler.design_conditions
    ).heat_rejected


class TestSingleSpeedUFactor:

    def test_autosized_values(self, make_cooler, loop):
        cooler = make_cooler()
        cooler.size()

        assert cooler.design_water_flow_rate.value == pytest.approx(0.002)
        assert cooler.nominal_capacity == pytest.approx(DESIGN_LOAD)
        assert cooler.high_speed_fan_power.value == pytest.approx(0.0105 * DESIGN_LOAD)
        assert cooler.high_speed_air_flow_rate.value == pytest.approx(DESIGN_LOAD / 10.0 * 4.0)
        assert cooler.high_speed_ua.status == SizingStatus.AUTOSIZED
        assert loop.design_flows["Cooler 1 Inlet"] == pytest.approx(0.002)

    def test_sized_ua_rejects_design_load(self, make_cooler):
        cooler = make_cooler()
        cooler.size()

        assert cooler.design_conditions.water_temp_c == pytest.approx(35.6)
        assert cooler.design_conditions.air_dry_bulb_c == 25.0
        q = rejected_at_design(cooler, cooler.high_speed_ua.value, cooler.high_speed_air_flow_rate.value)
        assert q == pytest.approx(DESIGN_LOAD, rel=1e-3)

    def test_sizing_is_idempotent(self, make_cooler, environment):
        cooler = make_cooler()
        cooler.size()
        first = (cooler.high_speed_ua.value, cooler.high_speed_air_flow_rate.value, cooler.nominal_capacity)

        environment.sizing.first_sizes_okay_to_report = False
        environment.sizing.final_sizes_okay_to_report = True
        cooler.size()

        assert (cooler.high_speed_ua.value, cooler.high_speed_air_flow_rate.value,
                cooler.nominal_capacity) == first

    def test_report_labels_follow_flags(self, make_cooler, environment):
        cooler = make_cooler()
        cooler.size()
        initial = cooler.sizing_report.values_for("Cooler 1")
        assert initial["Initial Design Water Flow Rate [m3/s]"] == pytest.approx(0.002)
        assert "Initial U-factor Times Area Value at Design Air Flow Rate [W/K]" in initial
        assert "Design Water Flow Rate [m3/s]" not in initial
        assert cooler.sizing_report.summary == []

        environment.sizing.first_sizes_okay_to_report = False
        environment.sizing.final_sizes_okay_to_report = True
        cooler.size()
        final = cooler.sizing_report.values_for("Cooler 1")
        assert final["Fan Power at Design Air Flow Rate [W]"] == pytest.approx(0.0105 * DESIGN_LOAD)
        assert [e.label for e in cooler.sizing_report.summary] == ["Type", "Nominal Capacity [W]"]

    def test_nothing_written_until_finalize(self, make_cooler, environment, loop):
        environment.sizing.first_sizes_okay_to_finalize = False
        cooler = make_cooler()
        cooler.size()

        assert not cooler.design_water_flow_rate.is_resolved
        assert not cooler.high_speed_ua.is_resolved
        assert loop.design_flows["Cooler 1 Inlet"] == pytest.approx(0.002)
        assert cooler.sizing_report.entries == []

    def test_user_values_are_kept(self, make_cooler):
        cooler = make_cooler(design_water_flow_rate=0.002, high_speed_air_flow_rate=12.0,
                             high_speed_fan_power=400.0)
        cooler.size()

        assert cooler.high_speed_air_flow_rate.status == SizingStatus.USER_SPECIFIED
        assert cooler.high_speed_air_flow_rate.value == 12.0
        assert cooler.high_speed_fan_power.value == 400.0
        q = rejected_at_design(cooler, cooler.high_speed_ua.value, 12.0)
        assert q == pytest.approx(DESIGN_LOAD, rel=1e-3)

    def test_zero_loop_flow_gives_zero_ua(self, make_cooler, loop):
        loop.sizing = PlantSizingData(0.0, 30.0, 5.6)
        cooler = make_cooler()
        cooler.size()

        assert cooler.design_water_flow_rate.value == 0.0
        assert cooler.high_speed_ua.value == 0.0
        assert cooler.high_speed_fan_power.value == 0.0

    def test_missing_loop_sizing_data(self, make_cooler, loop):
        loop.sizing = None
        cooler = make_cooler()
        with pytest.raises(SizingError, match="requires a loop plant sizing object"):
            cooler.size()

    def test_exit_temperature_not_above_air_temperature(self, make_cooler, loop):
        loop.sizing = PlantSizingData(0.002, 25.0, 5.6)
        cooler = make_cooler()
        with pytest.raises(SizingError, match="Design Loop Exit Temperature"):
            cooler.size()

    def test_iteration_limit_keeps_estimate(self, make_cooler, monkeypatch, caplog):
        monkeypatch.setattr(FluidCoolerConstants, "UA_SOLVER_MAX_ITER", 1)
        cooler = make_cooler()
        with caplog.at_level(logging.WARNING):
            cooler.size()

        assert "Iteration limit exceeded in calculating fluid cooler UA." in caplog.text
        ua = cooler.high_speed_ua.value
        assert 1e-4 * DESIGN_LOAD <= ua <= DESIGN_LOAD


class TestNominalCapacity:

    def test_ua_from_nominal_capacity(self, make_cooler):
        cooler = make_cooler(
            performance_input_method="NominalCapacity",
            nominal_capacity=40000.0,
            design_water_flow_rate=0.002,
            high_speed_ua=None,
        )
        cooler.size()

        assert cooler.high_speed_air_flow_rate.value == pytest.approx(40000.0 / 10.0 * 4.0)
        assert cooler.high_speed_fan_power.value == pytest.approx(0.0105 * 40000.0)
        assert cooler.design_conditions.water_temp_c == 35.0
        q = rejected_at_design(cooler, cooler.high_speed_ua.value, cooler.high_speed_air_flow_rate.value)
        assert q == pytest.approx(40000.0, rel=1e-3)
        label = "Initial Fluid cooler UA value at design air flow rate based on nominal capacity input [W/K]"
        assert label in cooler.sizing_report.values_for("Cooler 1")

    def test_unreachable_capacity_is_infeasible(self, make_cooler):
        # Water can give up at most 8360 W/K * 10 K = 83.6 kW
        cooler = make_cooler(
            performance_input_method="NominalCapacity",
            nominal_capacity=100000.0,
            design_water_flow_rate=0.002,
            high_speed_ua=None,
        )
        with pytest.raises(SizingInfeasibleError) as exc_info:
            cooler.size()

        err = exc_info.value
        assert err.ua_low == pytest.approx(10.0)
        assert err.ua_high == pytest.approx(100000.0)
        assert err.outlet_temp_at_ua_high < err.outlet_temp_at_ua_low < 35.0
        assert err.design_inputs["design_load_w"] == 100000.0
        assert "did not allow the calculation of a reasonable UA value" in str(err)

    def test_ua_must_be_blank(self, make_spec):
        spec = make_spec(performance_input_method="NominalCapacity", nominal_capacity=40000.0,
                         high_speed_ua="autosize")
        with pytest.raises(ConfigurationError, match="entered as autosize"):
            spec.validate_design()

        spec = make_spec(performance_input_method="NominalCapacity", nominal_capacity=40000.0,
                         high_speed_ua=500.0)
        with pytest.raises(ConfigurationError, match="specified as 500.0"):
            spec.validate_design()


class TestTwoSpeed:

    def test_low_speed_from_sizing_factors(self, make_cooler):
        cooler = make_cooler(type="FluidCooler:TwoSpeed", low_speed_ua="autosize")
        cooler.size()

        high_air = cooler.high_speed_air_flow_rate.value
        assert cooler.low_speed_air_flow_rate.value == pytest.approx(0.5 * high_air)
        assert cooler.low_speed_fan_power.value == pytest.approx(0.16 * cooler.high_speed_fan_power.value)
        assert cooler.low_speed_ua.value == pytest.approx(0.6 * cooler.high_speed_ua.value)

        values = cooler.sizing_report.values_for("Cooler 1")
        assert "Initial Air Flow Rate at High Fan Speed [m3/s]" in values
        assert "Initial U-factor Times Area Value at Low Fan Speed [W/K]" in values

    def test_low_speed_ua_from_low_speed_capacity(self, make_cooler):
        cooler = make_cooler(
            type="FluidCooler:TwoSpeed",
            performance_input_method="NominalCapacity",
            nominal_capacity=40000.0,
            design_water_flow_rate=0.002,
            high_speed_ua=None,
        )
        cooler.size()

        assert cooler.low_speed_nominal_capacity.value == pytest.approx(20000.0)
        low_air = cooler.low_speed_air_flow_rate.value
        q = rejected_at_design(cooler, cooler.low_speed_ua.value, low_air)
        assert q == pytest.approx(20000.0, rel=1e-3)
        assert cooler.low_speed_ua.value < cooler.high_speed_ua.value

    def test_low_air_flow_above_sized_high_air_flow(self, make_cooler):
        cooler = make_cooler(type="FluidCooler:TwoSpeed", low_speed_ua="autosize",
                             low_speed_air_flow_rate=1.0e6)
        with pytest.raises(SizingError, match="Low speed air flow rate must be less"):
            cooler.size()

    def test_low_fan_power_above_sized_high_fan_power(self, make_cooler):
        cooler = make_cooler(type="FluidCooler:TwoSpeed", low_speed_ua="autosize",
                             low_speed_fan_power=1.0e6)
        assert cooler.high_speed_fan_power.was_autosized
        with pytest.raises(SizingError, match="Low speed fan power must be less"):
            cooler.size()

    def test_low_not_below_high_rejected_at_construction(self, make_cooler):
        with pytest.raises(ConfigurationError, match="Low speed Air Flow Rate must be less"):
            make_cooler(type="FluidCooler:TwoSpeed", low_speed_ua="autosize",
                        high_speed_air_flow_rate=10.0, low_speed_air_flow_rate=12.0)
