"""
Property provider checks against CoolProp.
"""

import pytest

from fluid_cooler.core.exceptions import ThermodynamicDataError
from fluid_cooler.optimization.coolprop_lut import CoolPropLUT
from fluid_cooler.properties.fluid_properties import FluidProperties
from fluid_cooler.properties.psychrometrics import Psychrometrics

pytestmark = pytest.mark.coolprop


class TestFluidProperties:

    def test_coolprop_names(self):
        assert FluidProperties.coolprop_name("WATER") == "Water"
        assert FluidProperties.coolprop_name("EthyleneGlycol:40") == "INCOMP::MEG-40%"
        assert FluidProperties.coolprop_name("PROPYLENEGLYCOL:30") == "INCOMP::MPG-30%"

    def test_glycol_needs_concentration(self):
        with pytest.raises(ThermodynamicDataError):
            FluidProperties.coolprop_name("PROPYLENEGLYCOL")

    def test_water_properties(self):
        props = FluidProperties()
        assert props.density("WATER", 20.0) == pytest.approx(998.2, rel=1e-3)
        assert props.specific_heat("WATER", 20.0) == pytest.approx(4184.0, rel=2e-3)

    def test_unknown_fluid_raises(self):
        with pytest.raises(ThermodynamicDataError):
            FluidProperties().density("NOT_A_FLUID", 20.0)


class TestPsychrometrics:

    def test_humidity_ratio_from_wet_bulb(self):
        psy = Psychrometrics()
        w = psy.humidity_ratio_from_wet_bulb(25.0, 18.0, 101325.0)
        w_saturated = psy.humidity_ratio_from_wet_bulb(25.0, 25.0, 101325.0)
        assert 0.005 < w < w_saturated < 0.03

    def test_moist_air_density_and_cp(self):
        psy = Psychrometrics()
        assert psy.air_density(101325.0, 25.0, 0.01) == pytest.approx(1.17, rel=0.02)
        assert 1000.0 < psy.air_specific_heat(0.01, 25.0) < 1050.0


def test_lookup_cache_reused():
    CoolPropLUT.clear_cache()
    first = CoolPropLUT.PropsSI("D", "T", 300.0, "P", 101325.0, "Water")
    assert len(CoolPropLUT._cache) == 1
    assert CoolPropLUT.PropsSI("D", "T", 300.0000001, "P", 101325.0, "Water") == first
    assert len(CoolPropLUT._cache) == 1
