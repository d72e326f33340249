"""Heat rejection equipment."""

from fluid_cooler.components.cooling.fluid_cooler import FluidCooler

__all__ = ["FluidCooler"]
